import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...models.entities import TeacherRole, MessageType, EventType


class FormModel(BaseModel):
    """
    Base for editor forms. Unknown keys (id, materials, timestamp...) are ignored,
    so fields outside the form can never be overwritten through it.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Children ---
class ChildCreateRequest(FormModel):
    name: str = Field(..., min_length=1, description="Child's full name.")
    age: int = Field(0, ge=0)
    class_name: str = Field("", alias="class")
    guardian_name: str = ""
    guardian_contact: str = ""
    notes: str = ""

class ChildUpdateRequest(FormModel):
    name: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=0)
    class_name: Optional[str] = Field(None, alias="class")
    guardian_name: Optional[str] = None
    guardian_contact: Optional[str] = None
    notes: Optional[str] = None
    present: Optional[bool] = None


# --- Teachers ---
class TeacherCreateRequest(FormModel):
    name: str = Field(..., min_length=1)
    role: TeacherRole = TeacherRole.ASSISTANT
    assigned_class: str = ""
    contact: str = ""

class TeacherUpdateRequest(FormModel):
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[TeacherRole] = None
    assigned_class: Optional[str] = None
    contact: Optional[str] = None
    present: Optional[bool] = None


# --- Lessons ---
class LessonCreateRequest(FormModel):
    title: str = Field(..., min_length=1)
    date: Optional[datetime.date] = None
    age_group: str = ""
    description: str = ""
    cover_image: Optional[str] = Field(None, description="Cover image as URL or data URI.")

class LessonUpdateRequest(FormModel):
    title: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime.date] = None
    age_group: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None


# --- Photos ---
class PhotoCreateRequest(FormModel):
    url: str = Field(..., min_length=1, description="Image URL or data URI.")
    caption: str = ""
    date: Optional[str] = None

class PhotoUpdateRequest(FormModel):
    caption: Optional[str] = None
    date: Optional[str] = None


# --- Messages ---
class MessageCreateRequest(FormModel):
    type: MessageType = MessageType.PARENT_NOTICE
    content: str = Field(..., min_length=1)
    author: str = ""

class MessageUpdateRequest(FormModel):
    type: Optional[MessageType] = None
    content: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = None


# --- Events ---
class EventCreateRequest(FormModel):
    title: str = Field(..., min_length=1)
    date: datetime.date
    type: EventType = EventType.KIDS_SERVICE
    description: str = ""

class EventUpdateRequest(FormModel):
    title: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime.date] = None
    type: Optional[EventType] = None
    description: Optional[str] = None


# --- Shared ---
class DeletionTicket(BaseModel):
    """Confirmation that must accompany the DELETE request for the same record."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    confirmation_token: str

class ResetRequest(BaseModel):
    value: bool = False
