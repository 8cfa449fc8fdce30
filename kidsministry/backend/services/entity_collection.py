import asyncio
import datetime
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar
from uuid import uuid4

from pydantic import ValidationError

from ..db.persistent_slot import PersistentSlot
from ..models.entities import EntityModel

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=EntityModel)


# --- Service layer exceptions ---
class ServiceError(Exception):
    """General exception class for the service layer."""
    pass

class NotFoundError(ServiceError):
    """Raised when a record id does not exist in its collection."""
    pass

class ConfirmationRequiredError(ServiceError):
    """Raised when a destructive action is attempted without a valid confirmation."""
    pass


def field_text(record: EntityModel, field_name: str) -> str:
    """Returns a record field as display text; enums give their value, None gives ''."""
    value = getattr(record, field_name, None)
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    return str(value)


@dataclass(frozen=True)
class EntityKind(Generic[EntityT]):
    """
    Everything that makes one entity kind different from the others.

    name_field / category_field drive the list filters, ``preserved_fields`` are
    never overwritten by an update (they are not part of the editor form) and
    ``toggle_fields`` are the boolean fields that support toggle/reset_all.
    """
    name: str
    model: Type[EntityT]
    seed: Callable[[], List[EntityT]]
    name_field: str
    category_field: Optional[str] = None
    prepend: bool = False
    sort_by_date: bool = False
    toggle_fields: Tuple[str, ...] = ()
    preserved_fields: Tuple[str, ...] = ()
    prepare_new: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = field(default=None, compare=False)


class EntityCollection(Generic[EntityT]):
    """
    Ordered, persisted collection of one entity kind.

    The whole collection lives in memory and in a single slot. Every mutating
    operation builds the new list, swaps it in and ends with ``commit()``, which
    overwrites the slot. Mutations are serialized by a lock so each one is
    fully committed before the next starts.
    """

    def __init__(self, kind: EntityKind[EntityT], slot: PersistentSlot[List[EntityT]]):
        self.kind = kind
        self._slot = slot
        self._records: List[EntityT] = kind.seed()
        self._lock = asyncio.Lock()
        # One outstanding deletion token per record; a new request replaces the old one.
        self._pending_deletions: Dict[str, str] = {}

    async def load(self) -> None:
        """Replaces the in-memory records with the persisted snapshot (or the seed)."""
        self._records = await self._slot.load()
        logger.info(f"Loaded {len(self._records)} {self.kind.name} record(s).")

    # ===== Persistence boundary =====

    async def commit(self) -> bool:
        """Writes the current records to the slot. A failure is logged and reported as False."""
        saved = await self._slot.save(self._records)
        if not saved:
            logger.warning(f"Commit of {self.kind.name} failed; in-memory state is ahead of the stored snapshot.")
        return saved

    # ===== Reads =====

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> List[EntityT]:
        """All records in stored order."""
        return list(self._records)

    def list(self, name_query: Optional[str] = None, category: Optional[str] = None) -> List[EntityT]:
        records = self._records
        if name_query:
            needle = name_query.lower()
            records = [r for r in records if needle in field_text(r, self.kind.name_field).lower()]
        if category and self.kind.category_field:
            records = [r for r in records if field_text(r, self.kind.category_field) == category]
        if self.kind.sort_by_date:
            # Undated records go last.
            records = sorted(records, key=lambda r: (r.date is None, r.date or datetime.date.min))
        return list(records)

    def categories(self) -> List[str]:
        """Distinct non-empty category values in first-seen order."""
        if not self.kind.category_field:
            return []
        seen: List[str] = []
        for record in self._records:
            value = field_text(record, self.kind.category_field)
            if value and value not in seen:
                seen.append(value)
        return seen

    def get(self, entity_id: str) -> EntityT:
        for record in self._records:
            if record.id == entity_id:
                return record
        raise NotFoundError(f"{self.kind.name} record '{entity_id}' not found.")

    def _build(self, data: Dict[str, Any]) -> EntityT:
        try:
            return self.kind.model.model_validate(data)
        except ValidationError as e:
            raise ServiceError(f"Invalid {self.kind.name} record: {e.error_count()} invalid field(s).") from e

    def _new_id(self) -> str:
        existing = {r.id for r in self._records}
        new_id = str(uuid4())
        while new_id in existing:
            new_id = str(uuid4())
        return new_id

    # ===== Mutations =====
    # Each one builds the new list under the lock, swaps it in and commits once.

    async def create(self, fields: Dict[str, Any]) -> EntityT:
        async with self._lock:
            data = {k: v for k, v in fields.items() if k != "id"}
            if self.kind.prepare_new:
                data = self.kind.prepare_new(data)
            new_record = self._build({**data, "id": self._new_id()})

            if self.kind.prepend:
                self._records = [new_record, *self._records]
            else:
                self._records = [*self._records, new_record]
            await self.commit()
            logger.info(f"Created {self.kind.name} record '{new_record.id}'.")
            return new_record

    async def update(self, entity_id: str, fields: Dict[str, Any]) -> EntityT:
        async with self._lock:
            current = self.get(entity_id)
            # Fields outside the editor form survive the merge.
            protected = {"id", *self.kind.preserved_fields}
            changes = {k: v for k, v in fields.items() if k not in protected}
            updated = self._build({**current.model_dump(), **changes})

            self._records = [updated if r.id == entity_id else r for r in self._records]
            await self.commit()
            logger.info(f"Updated {self.kind.name} record '{entity_id}' ({', '.join(sorted(changes)) or 'no fields'}).")
            return updated

    def request_deletion(self, entity_id: str) -> str:
        """
        Issues a single-use confirmation token for deleting ``entity_id``.
        ``delete`` only proceeds with a token obtained here.
        """
        token = uuid4().hex
        self._pending_deletions[entity_id] = token
        return token

    async def delete(self, entity_id: str, confirmation_token: str) -> bool:
        """
        Deletes a record after confirmation. Returns False when the record was
        already gone, which is not an error.
        """
        async with self._lock:
            if self._pending_deletions.get(entity_id) != confirmation_token:
                raise ConfirmationRequiredError(f"Deleting {self.kind.name} record '{entity_id}' must be confirmed first.")
            del self._pending_deletions[entity_id]

            # The token is spent even when the record is already gone.
            if not any(r.id == entity_id for r in self._records):
                logger.info(f"{self.kind.name} record '{entity_id}' already absent; nothing to delete.")
                return False

            self._records = [r for r in self._records if r.id != entity_id]
            await self.commit()
            logger.info(f"Deleted {self.kind.name} record '{entity_id}'.")
            return True

    def _check_toggle_field(self, field_name: str) -> None:
        if field_name not in self.kind.toggle_fields:
            raise ServiceError(f"Field '{field_name}' cannot be toggled on {self.kind.name}.")

    async def toggle(self, entity_id: str, field_name: str) -> EntityT:
        self._check_toggle_field(field_name)
        async with self._lock:
            current = self.get(entity_id)
            updated = current.model_copy(update={field_name: not getattr(current, field_name)})
            self._records = [updated if r.id == entity_id else r for r in self._records]
            await self.commit()
            return updated

    async def reset_all(self, field_name: str, value: bool) -> List[EntityT]:
        self._check_toggle_field(field_name)
        async with self._lock:
            self._records = [r.model_copy(update={field_name: value}) for r in self._records]
            await self.commit()
            logger.info(f"Set '{field_name}' to {value} on all {len(self._records)} {self.kind.name} record(s).")
            return list(self._records)
