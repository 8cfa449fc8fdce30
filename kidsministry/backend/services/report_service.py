import datetime
import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..config.config import settings
from ..models.entities import AppEvent, Lesson, Message
from .app_state import AppState
from .derived_views import CategoryCount, category_distribution, next_upcoming, recent, to_csv_file

logger = logging.getLogger(__name__)


class DashboardSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    children_count: int
    teachers_count: int
    lessons_count: int
    present_children_count: int
    next_event: Optional[AppEvent] = None
    next_lesson: Optional[Lesson] = None
    class_distribution: List[CategoryCount]
    recent_messages: List[Message]


class CsvExport(BaseModel):
    filename: str
    content: bytes


class ReportService:
    """
    Dashboard widgets and the CSV reports, all recomputed from the current
    collection snapshots on every call.
    """

    CHILDREN_BY_CLASS_FILE = "criancas_por_turma.csv"
    LESSON_ATTENDANCE_FILE = "presenca_por_aula.csv"
    TEACHERS_FILE = "lista_de_professores.csv"

    def __init__(self, state: AppState):
        self.state = state

    def dashboard(self, today: Optional[datetime.date] = None) -> DashboardSummary:
        today = today or datetime.date.today()
        children = self.state.children.snapshot()
        return DashboardSummary(
            children_count=len(children),
            teachers_count=len(self.state.teachers),
            lessons_count=len(self.state.lessons),
            present_children_count=sum(1 for c in children if c.present),
            next_event=next_upcoming(self.state.events.snapshot(), today),
            next_lesson=next_upcoming(self.state.lessons.snapshot(), today),
            class_distribution=category_distribution(children, "class_name"),
            recent_messages=recent(self.state.messages.snapshot(), settings.RECENT_MESSAGES_LIMIT),
        )

    # ===== Report rows =====

    def children_by_class_rows(self) -> List[Dict[str, object]]:
        distribution = category_distribution(self.state.children.snapshot(), "class_name")
        return [{"Turma": item.label, "Quantidade de Crianças": item.count} for item in distribution]

    def lesson_attendance_rows(self) -> List[Dict[str, object]]:
        """
        One row per lesson, date ascending. Attendance is the present count of
        the current roll call over the total number of children.
        """
        children = self.state.children.snapshot()
        present = sum(1 for c in children if c.present)
        rows = []
        for lesson in self.state.lessons.list():
            rows.append({
                "Aula": lesson.title,
                "Data": lesson.date.strftime("%d/%m/%Y") if lesson.date else "",
                "Presentes": f"{present} / {len(children)}",
            })
        return rows

    def teacher_rows(self) -> List[Dict[str, object]]:
        return [
            {"Nome": t.name, "Função": t.role.value, "Turma": t.assigned_class, "Contato": t.contact}
            for t in self.state.teachers.snapshot()
        ]

    # ===== CSV exports =====

    def export_children_by_class(self) -> CsvExport:
        return self._export(self.children_by_class_rows(), self.CHILDREN_BY_CLASS_FILE)

    def export_lesson_attendance(self) -> CsvExport:
        return self._export(self.lesson_attendance_rows(), self.LESSON_ATTENDANCE_FILE)

    def export_teachers(self) -> CsvExport:
        return self._export(self.teacher_rows(), self.TEACHERS_FILE)

    def _export(self, rows: List[Dict[str, object]], filename: str) -> CsvExport:
        content = to_csv_file(rows)
        logger.info(f"Exported {len(rows)} row(s) to '{filename}'.")
        return CsvExport(filename=filename, content=content)
