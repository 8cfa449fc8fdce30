import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..db.redis_client import RedisClient
from ..db.persistent_slot import PersistentSlot
from ..models.entities import Child, Teacher, Lesson, Photo, Message, AppEvent
from ..models.session_models import LessonDraft, ThemeHistoryItem
from ..models import seed_data
from .entity_collection import EntityCollection, EntityKind

logger = logging.getLogger(__name__)


# --- Defaults applied to new records (the create form never sets these) ---

def _new_lesson(fields: Dict[str, Any]) -> Dict[str, Any]:
    # Materials are never part of the editor form.
    return {**fields, "materials": []}

def _new_message(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {**fields, "timestamp": datetime.now().strftime("%d/%m/%Y %H:%M:%S")}

def _new_photo(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **fields,
        "caption": fields.get("caption") or "Nova foto!",
        "date": fields.get("date") or datetime.now().strftime("%d/%m/%Y"),
    }

# Attendance always starts unmarked.
def _new_attendee(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {**fields, "present": False}


# --- Entity kinds ---
# Messages and photos show newest first, so they prepend; lessons and events
# are read in calendar order.
CHILDREN = EntityKind(
    name="children", model=Child, seed=seed_data.initial_children,
    name_field="name", category_field="class_name",
    toggle_fields=("present",), prepare_new=_new_attendee,
)
TEACHERS = EntityKind(
    name="teachers", model=Teacher, seed=seed_data.initial_teachers,
    name_field="name", category_field="role",
    toggle_fields=("present",), prepare_new=_new_attendee,
)
LESSONS = EntityKind(
    name="lessons", model=Lesson, seed=seed_data.initial_lessons,
    name_field="title", category_field="age_group", sort_by_date=True,
    preserved_fields=("materials",), prepare_new=_new_lesson,
)
PHOTOS = EntityKind(
    name="photos", model=Photo, seed=seed_data.initial_photos,
    name_field="caption", prepend=True, prepare_new=_new_photo,
)
MESSAGES = EntityKind(
    name="messages", model=Message, seed=seed_data.initial_messages,
    name_field="content", category_field="type", prepend=True,
    preserved_fields=("timestamp",), prepare_new=_new_message,
)
EVENTS = EntityKind(
    name="events", model=AppEvent, seed=seed_data.initial_events,
    name_field="title", category_field="type", sort_by_date=True,
)


class AppState:
    """
    Every piece of persisted dashboard state, owned by the application and
    handed to the routers through a dependency.
    """

    def __init__(self, redis_client: RedisClient):
        self.redis_client = redis_client

        # --- Record collections, one slot each (ebi_children, ebi_teachers, ...) ---
        self.children: EntityCollection[Child] = self._collection(CHILDREN)
        self.teachers: EntityCollection[Teacher] = self._collection(TEACHERS)
        self.lessons: EntityCollection[Lesson] = self._collection(LESSONS)
        self.photos: EntityCollection[Photo] = self._collection(PHOTOS)
        self.messages: EntityCollection[Message] = self._collection(MESSAGES)
        self.events: EntityCollection[AppEvent] = self._collection(EVENTS)

        # --- Single-value slots ---
        self.auth_slot: PersistentSlot[bool] = PersistentSlot(redis_client, "auth", bool, lambda: False)
        self.profile_picture_slot: PersistentSlot[Optional[str]] = PersistentSlot(redis_client, "profile_picture", Optional[str], lambda: None)
        self.lesson_draft_slot: PersistentSlot[Optional[LessonDraft]] = PersistentSlot(redis_client, "lesson_draft", Optional[LessonDraft], lambda: None)
        self.theme_history_slot: PersistentSlot[List[ThemeHistoryItem]] = PersistentSlot(redis_client, "theme_history", List[ThemeHistoryItem], list)

    def _collection(self, kind: EntityKind) -> EntityCollection:
        slot = PersistentSlot(self.redis_client, kind.name, List[kind.model], kind.seed)
        return EntityCollection(kind, slot)

    def collections(self) -> Dict[str, EntityCollection]:
        return {c.kind.name: c for c in (self.children, self.teachers, self.lessons, self.photos, self.messages, self.events)}

    def collection(self, name: str) -> EntityCollection:
        return self.collections()[name]

    async def load(self) -> None:
        """Loads every collection from its slot (or its seed)."""
        for collection in self.collections().values():
            await collection.load()
        logger.info("Application state loaded.")
