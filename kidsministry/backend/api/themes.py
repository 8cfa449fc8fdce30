from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from .auth import require_session
from .dependencies import get_theme_service
from .schemas.session import (
    ColoringImageRequest, LessonPlanRequest, RandomThemeRequest,
    ThemeOutputsResponse, ThemeResponse, ThemeVariationsRequest,
)
from .utilities.limiter import limiter
from ..models.session_models import ThemeHistoryItem
from ..services.entity_collection import ServiceError
from ..services.theme_service import GenerationOutput, OutputKind, ThemeService

router = APIRouter(prefix="/themes", tags=["Theme Generator"], dependencies=[Depends(require_session)])


@router.post("/lesson-plan", response_model=GenerationOutput, summary="Generate a lesson plan for a theme")
@limiter.limit("10/minute")
async def generate_lesson_plan(request: Request, plan_request: LessonPlanRequest, service: ThemeService = Depends(get_theme_service)):
    try:
        return await service.lesson_plan(plan_request.theme, plan_request.age_group)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.post("/coloring-image", response_model=GenerationOutput, summary="Generate a coloring sheet for a theme")
@limiter.limit("5/minute")
async def generate_coloring_image(request: Request, image_request: ColoringImageRequest, service: ThemeService = Depends(get_theme_service)):
    try:
        return await service.coloring_image(image_request.theme)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.post("/random", response_model=ThemeResponse, summary="Suggest one random theme")
@limiter.limit("10/minute")
async def random_theme(request: Request, random_request: RandomThemeRequest, service: ThemeService = Depends(get_theme_service)):
    return ThemeResponse(theme=await service.random_theme(random_request.age_group))

@router.post("/variations", response_model=List[str], summary="Creative title variations of a theme")
@limiter.limit("10/minute")
async def theme_variations(request: Request, variations_request: ThemeVariationsRequest, service: ThemeService = Depends(get_theme_service)):
    try:
        return await service.theme_variations(variations_request.age_group, variations_request.theme)
    except ServiceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/output", response_model=ThemeOutputsResponse, summary="Latest displayed lesson plan and coloring image")
async def get_outputs(service: ThemeService = Depends(get_theme_service)):
    return ThemeOutputsResponse(
        lesson_plan=service.output(OutputKind.LESSON_PLAN),
        coloring_image=service.output(OutputKind.COLORING_IMAGE)
    )


# --- Search history ---

@router.get("/history", response_model=List[ThemeHistoryItem])
async def get_history(service: ThemeService = Depends(get_theme_service)):
    return await service.get_history()

@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(service: ThemeService = Depends(get_theme_service)):
    await service.clear_history()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
