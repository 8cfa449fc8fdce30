import logging
from typing import Any, Dict, Optional

from ..db.persistent_slot import PersistentSlot
from ..models.entities import Lesson
from ..models.session_models import LessonDraft
from .entity_collection import EntityCollection

logger = logging.getLogger(__name__)


class LessonEditorService:
    """
    Lesson editor: creates/updates lessons and owns the draft of a lesson that
    has not been created yet. A successful create discards the draft.
    """

    def __init__(self, lessons: EntityCollection[Lesson], draft_slot: PersistentSlot[Optional[LessonDraft]]):
        self.lessons = lessons
        self.draft_slot = draft_slot

    async def load_draft(self) -> Optional[LessonDraft]:
        return await self.draft_slot.load()

    async def save_draft(self, draft: LessonDraft) -> bool:
        """Returns False when the draft could not be stored (e.g. the cover image is too large)."""
        saved = await self.draft_slot.save(draft)
        if saved:
            logger.info("Lesson draft saved.")
        return saved

    async def discard_draft(self) -> None:
        await self.draft_slot.clear()
        logger.info("Lesson draft discarded.")

    async def create_lesson(self, fields: Dict[str, Any]) -> Lesson:
        lesson = await self.lessons.create(fields)
        await self.draft_slot.clear()
        return lesson

    async def update_lesson(self, lesson_id: str, fields: Dict[str, Any]) -> Lesson:
        return await self.lessons.update(lesson_id, fields)
