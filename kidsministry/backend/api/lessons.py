from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from .auth import require_session
from .dependencies import get_lesson_editor_service, get_theme_service
from .schemas.entities import LessonCreateRequest
from .schemas.session import LessonIdeasRequest
from .utilities.limiter import limiter
from ..models.entities import Lesson
from ..models.session_models import LessonDraft
from ..services.entity_collection import ServiceError
from ..services.lesson_editor_service import LessonEditorService
from ..services.theme_service import ThemeService

# Registered ahead of the generic lessons router so '/draft' and '/ideas'
# are not captured by '/{entity_id}'.
router = APIRouter(prefix="/lessons", tags=["Lessons"], dependencies=[Depends(require_session)])


@router.post("", response_model=Lesson, status_code=status.HTTP_201_CREATED, summary="Create a lesson and discard the saved draft")
async def create_lesson(create_request: LessonCreateRequest, service: LessonEditorService = Depends(get_lesson_editor_service)):
    try:
        return await service.create_lesson(create_request.model_dump())
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# --- Draft of a new lesson ---

@router.get("/draft", response_model=Optional[LessonDraft])
async def get_draft(service: LessonEditorService = Depends(get_lesson_editor_service)):
    return await service.load_draft()

@router.put("/draft", response_model=LessonDraft)
async def save_draft(draft: LessonDraft, service: LessonEditorService = Depends(get_lesson_editor_service)):
    if not await service.save_draft(draft):
        raise HTTPException(status_code=status.HTTP_507_INSUFFICIENT_STORAGE, detail="The draft could not be saved. The cover image may be too large.")
    return draft

@router.delete("/draft", status_code=status.HTTP_204_NO_CONTENT)
async def discard_draft(service: LessonEditorService = Depends(get_lesson_editor_service)):
    await service.discard_draft()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- AI suggestions for the editor ---

@router.post("/ideas", response_model=List[str], summary="Suggest lesson themes for an age group")
@limiter.limit("10/minute")
async def suggest_lesson_ideas(request: Request, ideas_request: LessonIdeasRequest, service: ThemeService = Depends(get_theme_service)):
    try:
        return await service.lesson_ideas(ideas_request.age_group)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
