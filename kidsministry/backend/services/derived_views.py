"""
Read-only views computed from collection snapshots.

Nothing here is cached or stored: callers pass the current records and get a
fresh value back every time.
"""

import csv
import datetime
import io
from typing import Any, List, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel

from ..models.entities import EntityModel
from ..models.session_models import ThemeHistoryItem
from .entity_collection import ServiceError, field_text

RecordT = TypeVar("RecordT", bound=EntityModel)

UNASSIGNED_LABEL = "Unassigned"
CSV_BOM = "\ufeff"


class NothingToExportError(ServiceError):
    """Raised when a CSV export is requested for an empty data set."""
    pass


class CategoryCount(BaseModel):
    label: str
    count: int


def next_upcoming(records: Sequence[RecordT], today: datetime.date) -> Optional[RecordT]:
    """Earliest record dated today or later, or None."""
    upcoming = [r for r in records if r.date is not None and r.date >= today]
    if not upcoming:
        return None
    return min(upcoming, key=lambda r: r.date)


def category_distribution(records: Sequence[EntityModel], field_name: str) -> List[CategoryCount]:
    """Counts records per category, keeping first-seen order. Blank categories count as 'Unassigned'."""
    counts: dict = {}
    for record in records:
        label = field_text(record, field_name) or UNASSIGNED_LABEL
        counts[label] = counts.get(label, 0) + 1
    return [CategoryCount(label=label, count=count) for label, count in counts.items()]


def recent(records: Sequence[RecordT], limit: int) -> List[RecordT]:
    """First ``limit`` records in stored order (collections that prepend keep the newest first)."""
    return list(records[:limit])


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """
    Serializes flat rows as CSV.

    The header comes from the keys of the first row and every row is projected
    onto it, so all lines have the same number of fields. Every field is
    double-quoted and lines end with '\\n'.
    """
    if not rows:
        raise NothingToExportError("There is no data to export.")

    headers = list(rows[0].keys())
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_cell(row.get(header)) for header in headers])
    return output.getvalue().rstrip("\n")


def to_csv_file(rows: Sequence[Mapping[str, Any]]) -> bytes:
    """CSV export file content: UTF-8 with a byte-order mark."""
    return (CSV_BOM + to_csv(rows)).encode("utf-8")


class ThemeHistory:
    """Most recent distinct theme searches, newest first."""

    def __init__(self, items: Optional[List[ThemeHistoryItem]] = None, limit: int = 5):
        self.limit = limit
        self.items: List[ThemeHistoryItem] = list(items or [])[:limit]

    def push(self, item: ThemeHistoryItem) -> List[ThemeHistoryItem]:
        others = [h for h in self.items if h.theme != item.theme]
        self.items = [item, *others][:self.limit]
        return self.items
