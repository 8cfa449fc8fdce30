#kidsministry/backend/api/dependencies.py
from fastapi import Request, Depends

from ..config.config import settings
from ..services.app_state import AppState
from ..services.auth_service import AuthService
from ..services.lesson_editor_service import LessonEditorService
from ..services.report_service import ReportService
from ..services.theme_service import ThemeService, ResultBoard
from ..tools.gemini_client import GeminiClient


def get_app_state(request: Request) -> AppState:
    """
    Returns the application state aggregate created at startup.
    """
    return request.app.state.app_state

def get_result_board(request: Request) -> ResultBoard:
    return request.app.state.result_board

def get_gemini_client(request: Request) -> GeminiClient:
    return request.app.state.gemini_client


def get_auth_service(state: AppState = Depends(get_app_state)) -> AuthService:
    return AuthService(auth_slot=state.auth_slot)

def get_report_service(state: AppState = Depends(get_app_state)) -> ReportService:
    return ReportService(state)

def get_lesson_editor_service(state: AppState = Depends(get_app_state)) -> LessonEditorService:
    return LessonEditorService(lessons=state.lessons, draft_slot=state.lesson_draft_slot)


def get_theme_service(
    state: AppState = Depends(get_app_state),
    client: GeminiClient = Depends(get_gemini_client),
    board: ResultBoard = Depends(get_result_board)
) -> ThemeService:
    """
    Builds a ThemeService for each request.

    The AI client and the result board are shared application objects; only the
    service wrapper is created per request.
    """
    return ThemeService(
        client=client,
        history_slot=state.theme_history_slot,
        board=board,
        history_limit=settings.THEME_HISTORY_LIMIT
    )
