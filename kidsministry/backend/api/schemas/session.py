from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional

from ...services.theme_service import GenerationOutput


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Login gate ---
class LoginRequest(BaseModel):
    email: str
    password: str

class SessionResponse(BaseModel):
    authenticated: bool


# --- Profile ---
class ProfilePicture(BaseModel):
    picture: Optional[str] = Field(None, description="Profile picture as a data URI, or null to remove it.")


# --- Theme generator ---
class LessonIdeasRequest(CamelModel):
    age_group: str = Field(..., min_length=1, description="e.g. '4-6 anos' or 'Livre' for mixed ages.")

class RandomThemeRequest(CamelModel):
    age_group: str = "Crianças"

class ThemeVariationsRequest(CamelModel):
    theme: str = Field(..., min_length=1)
    age_group: str = "Crianças"

class LessonPlanRequest(CamelModel):
    theme: str = Field(..., min_length=1)
    age_group: Optional[str] = None

class ColoringImageRequest(CamelModel):
    theme: str = Field(..., min_length=1)

class ThemeResponse(BaseModel):
    theme: str

class ThemeOutputsResponse(CamelModel):
    lesson_plan: GenerationOutput
    coloring_image: GenerationOutput
