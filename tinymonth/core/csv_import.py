"""Offline batch import of day assignments from delimited text.

Input is one ``date,calendars`` pair per line, calendars separated by
``;``::

    date,calendars
    2024-06-01,lanzarote
    2024-06-02,lanzarote;zurich

The header is optional. Rows with a bad date or no calendar ids are
skipped. Unknown calendar ids are created with a default color.
"""

from datetime import date
from typing import List, Optional, Tuple
import csv
import logging
import re

from pydantic import BaseModel, Field

from .document import DATE_PATTERN, Calendar, Document, unique_ids
from .store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#3b82f6"


class CsvFormatError(ValueError):
    """The header names no ``date``/``calendars`` columns."""


class AssignmentRow(BaseModel):
    date: str
    calendars: List[str]


class ImportSummary(BaseModel):
    rows: int = 0
    dates: int = 0
    created_calendars: List[str] = Field(default_factory=list)
    active_id: Optional[str] = None


def display_name(calendar_id: str) -> str:
    """``"costa-brava"`` -> ``"Costa Brava"``."""
    return re.sub(r"\b\w", lambda m: m.group().upper(), calendar_id.replace("-", " "))


def _is_date(value: str) -> bool:
    if not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_assignment_rows(text: str) -> List[AssignmentRow]:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    records = list(csv.reader(lines))
    first = [cell.strip().lower() for cell in records[0]]
    if first and _is_date(first[0]):
        date_idx, cals_idx = 0, 1
    else:
        if "date" not in first or "calendars" not in first:
            raise CsvFormatError("header must contain 'date,calendars'")
        date_idx, cals_idx = first.index("date"), first.index("calendars")
        records = records[1:]

    rows = []
    for parts in records:
        day = parts[date_idx].strip() if date_idx < len(parts) else ""
        raw_ids = parts[cals_idx] if cals_idx < len(parts) else ""
        ids = unique_ids([s.strip() for s in raw_ids.split(";") if s.strip()])
        if not _is_date(day) or not ids:
            logger.warning("Skipping malformed row: %s", ",".join(parts))
            continue
        rows.append(AssignmentRow(date=day, calendars=ids))
    return rows


def ensure_calendars(calendars: List[Calendar], ids: List[str],
                     color: str = DEFAULT_COLOR) -> Tuple[List[Calendar], List[str]]:
    """Append a calendar for every id not present yet."""
    existing = {c.id for c in calendars}
    result = list(calendars)
    created = []
    for calendar_id in ids:
        if calendar_id in existing:
            continue
        result.append(Calendar(id=calendar_id, name=display_name(calendar_id), color=color))
        existing.add(calendar_id)
        created.append(calendar_id)
    return result, created


def merge_rows(document: Document, rows: List[AssignmentRow],
               color: str = DEFAULT_COLOR) -> Tuple[Document, List[str]]:
    """Union the rows into the document's assignments."""
    all_ids = unique_ids([i for row in rows for i in row.calendars])
    calendars, created = ensure_calendars(document.calendars, all_ids, color)

    assignments = {day: list(ids) for day, ids in document.assignments.items()}
    for row in rows:
        assignments[row.date] = unique_ids(assignments.get(row.date, []) + row.calendars)

    active_id = document.active_id
    if active_id is None and calendars:
        active_id = calendars[0].id

    merged = document.model_copy(update={
        "calendars": calendars,
        "assignments": assignments,
        "active_id": active_id,
    })
    return merged, created


async def import_csv(store: DocumentStore, text: str,
                     color: str = DEFAULT_COLOR) -> ImportSummary:
    """Parse ``text`` and merge it into the stored document."""
    rows = parse_assignment_rows(text)
    if not rows:
        logger.info("No rows to import")
        return ImportSummary()

    document = await store.read()
    merged, created = merge_rows(document, rows, color)
    await store.write(merged)

    summary = ImportSummary(
        rows=len(rows),
        dates=len(merged.assignments),
        created_calendars=created,
        active_id=merged.active_id,
    )
    logger.info("Imported %d rows, %d dates assigned", summary.rows, summary.dates)
    return summary
