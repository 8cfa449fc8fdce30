from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from .auth import require_session
from .dependencies import get_report_service
from ..services.derived_views import NothingToExportError
from ..services.report_service import CsvExport, ReportService

router = APIRouter(prefix="/reports", tags=["Reports"], dependencies=[Depends(require_session)])


def _download(build_export) -> Response:
    try:
        export: CsvExport = build_export()
    except NothingToExportError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(
        content=export.content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'}
    )


@router.get("/children-by-class", response_model=List[Dict[str, Any]])
async def children_by_class(service: ReportService = Depends(get_report_service)):
    return service.children_by_class_rows()

@router.get("/children-by-class/export", summary="Download the children-per-class CSV")
async def export_children_by_class(service: ReportService = Depends(get_report_service)):
    return _download(service.export_children_by_class)


@router.get("/lesson-attendance", response_model=List[Dict[str, Any]])
async def lesson_attendance(service: ReportService = Depends(get_report_service)):
    return service.lesson_attendance_rows()

@router.get("/lesson-attendance/export", summary="Download the attendance-per-lesson CSV")
async def export_lesson_attendance(service: ReportService = Depends(get_report_service)):
    return _download(service.export_lesson_attendance)


@router.get("/teachers", response_model=List[Dict[str, Any]])
async def teachers(service: ReportService = Depends(get_report_service)):
    return service.teacher_rows()

@router.get("/teachers/export", summary="Download the teacher list CSV")
async def export_teachers(service: ReportService = Depends(get_report_service)):
    return _download(service.export_teachers)
