# kidsministry/backend/models/entities.py

import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TeacherRole(str, Enum):
    LEADER = "Líder"
    ASSISTANT = "Auxiliar"
    VOLUNTEER = "Voluntário"

class MaterialType(str, Enum):
    PDF = "PDF"
    VIDEO = "Vídeo"
    IMAGE = "Imagem"
    LINK = "Link"

class MessageType(str, Enum):
    PARENT_NOTICE = "Recado aos Pais"
    TEACHERS = "Professores"
    PRAYER_REQUEST = "Pedido de Oração"

class EventType(str, Enum):
    KIDS_SERVICE = "Culto Infantil"
    REHEARSAL = "Ensaio"
    PARTY = "Festa"
    TEACHING = "Ensino"


class EntityModel(BaseModel):
    """
    Base for every stored record.

    JSON uses camelCase names, the same shape the dashboard has always
    persisted. Every field besides ``id`` has a default so snapshots written
    before a field existed still load.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique identifier inside the owning collection")


class DatedEntityModel(EntityModel):
    """Records shown on the calendar; an empty date from an old form means 'no date'."""
    date: Optional[datetime.date] = None

    @field_validator("date", mode="before")
    @classmethod
    def blank_date_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Child(EntityModel):
    name: str = ""
    age: int = 0
    class_name: str = Field("", alias="class", description="Class the child attends, e.g. 'Sementinhas'")
    guardian_name: str = ""
    guardian_contact: str = ""
    notes: str = ""
    present: bool = Field(False, description="Attendance flag for the current roll call")

class Teacher(EntityModel):
    name: str = ""
    role: TeacherRole = TeacherRole.VOLUNTEER
    assigned_class: str = ""
    contact: str = ""
    present: bool = False

class Material(BaseModel):
    type: MaterialType
    url: str

class Lesson(DatedEntityModel):
    title: str = ""
    age_group: str = ""
    description: str = ""
    materials: List[Material] = Field(default_factory=list)
    cover_image: Optional[str] = Field(None, description="Cover image as URL or data URI")

class Photo(EntityModel):
    url: str = Field("", description="Image URL, usually a data URI for uploads")
    caption: str = ""
    date: str = ""

class Message(EntityModel):
    type: MessageType = MessageType.PARENT_NOTICE
    content: str = ""
    author: str = ""
    timestamp: str = Field("", description="Set once when the message is posted")

class AppEvent(DatedEntityModel):
    title: str = ""
    type: EventType = EventType.KIDS_SERVICE
    description: str = ""
