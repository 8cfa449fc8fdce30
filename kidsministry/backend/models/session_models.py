from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional


class ThemeHistoryItem(BaseModel):
    """
    One entry of the theme generator's search history.
    Entries are unique by ``theme``.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    theme: str = Field(..., description="The searched lesson theme.")
    age_group: str = Field("", description="Age group selected for that search.")


class LessonDraft(BaseModel):
    """
    Unsaved contents of the lesson editor for a lesson that does not exist yet.
    Dates stay as the raw form strings; they are only validated when the lesson is created.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    date: str = ""
    age_group: str = ""
    description: str = ""
    cover_image: Optional[str] = None
