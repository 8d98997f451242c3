"""In-memory application state with asynchronous whole-document persistence.

Mutators update the in-memory document synchronously and then schedule a
write of the *entire* document to the store without awaiting it. Writes
are never retried or cancelled; a failed write is logged and the
in-memory state stays authoritative for the session. Two overlapping
writes resolve last-write-wins.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union
import asyncio
import logging

from .document import (
    SCHEMA_VERSION,
    Calendar,
    Document,
    ExportDocument,
    Holiday,
    ImportPayload,
    slugify,
    unique_ids,
)
from .holidays import DEFAULT_END_YEAR, DEFAULT_START_YEAR, generate_holidays, holiday_dates
from .store import DocumentStore, StoreError

logger = logging.getLogger(__name__)


class Lifecycle(str, Enum):
    LOADING = "loading"
    READY = "ready"


class StateManager:
    """Single owner of the application :class:`Document`."""

    def __init__(self, store: DocumentStore,
                 holiday_start_year: int = DEFAULT_START_YEAR,
                 holiday_end_year: int = DEFAULT_END_YEAR):
        self.store = store
        self.holiday_start_year = holiday_start_year
        self.holiday_end_year = holiday_end_year
        self.lifecycle = Lifecycle.LOADING

        self._document = Document()
        self._holiday_dates: Set[str] = set()
        self._pending: Set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config, store: DocumentStore) -> "StateManager":
        return cls(
            store,
            holiday_start_year=config.holiday_start_year,
            holiday_end_year=config.holiday_end_year,
        )

    # -- read access ----------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.lifecycle == Lifecycle.LOADING

    @property
    def calendars(self) -> List[Calendar]:
        return list(self._document.calendars)

    @property
    def assignments(self) -> Dict[str, List[str]]:
        return {day: list(ids) for day, ids in self._document.assignments.items()}

    @property
    def comments(self) -> Dict[str, str]:
        return dict(self._document.comments)

    @property
    def holidays(self) -> List[Holiday]:
        return list(self._document.holidays)

    @property
    def active_id(self) -> Optional[str]:
        return self._document.active_id

    def snapshot(self) -> Document:
        return self._document.model_copy(deep=True)

    def get_calendar(self, calendar_id: str) -> Optional[Calendar]:
        for calendar in self._document.calendars:
            if calendar.id == calendar_id:
                return calendar
        return None

    # -- lifecycle ------------------------------------------------------

    async def load(self) -> bool:
        """Load the document from the store.

        On failure the previous in-memory state is kept. Either way the
        manager leaves the loading state. Returns whether loading worked.
        """
        try:
            document = await self.store.read()
        except StoreError as e:
            logger.warning("Failed to load data, keeping previous state: %s", e)
            return False
        finally:
            self.lifecycle = Lifecycle.READY

        document.holidays = self._generate_holidays()
        self._document = document
        self._refresh_holiday_index()
        logger.info(
            "Loaded %d calendars and %d assigned dates",
            len(document.calendars), len(document.assignments),
        )
        self._persist()
        return True

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # -- calendars ------------------------------------------------------

    def set_active_calendar(self, calendar_id: Optional[str]) -> None:
        # Unknown ids are accepted; they simply match nothing.
        self._document.active_id = calendar_id
        self._persist()

    def add_calendar(self, name: str, color: str) -> Calendar:
        """Create a calendar and make it active.

        The id is the slugified name; if that id is taken, the first free
        ``-2``, ``-3``, ... suffix is appended.
        """
        calendar = Calendar(id=self._free_id(slugify(name)), name=name, color=color)
        self._document.calendars = self._document.calendars + [calendar]
        self._document.active_id = calendar.id
        self._persist()
        return calendar

    def update_calendar(self, calendar_id: str, name: Optional[str] = None,
                        color: Optional[str] = None) -> Optional[Calendar]:
        """Apply a partial update. The id is never re-derived."""
        updates: Dict[str, Any] = {}
        if name is not None:
            updates["name"] = name
        if color is not None:
            updates["color"] = color

        updated = None
        calendars = []
        for calendar in self._document.calendars:
            if calendar.id == calendar_id:
                calendar = calendar.model_copy(update=updates)
                updated = calendar
            calendars.append(calendar)

        if updated is None:
            return None
        self._document.calendars = calendars
        self._persist()
        return updated

    def remove_calendar(self, calendar_id: str) -> bool:
        """Delete a calendar and drop its id from every assignment."""
        calendars = [c for c in self._document.calendars if c.id != calendar_id]
        if len(calendars) == len(self._document.calendars):
            return False

        assignments: Dict[str, List[str]] = {}
        for day, ids in self._document.assignments.items():
            _put_ids(assignments, day, [i for i in ids if i != calendar_id])

        self._document.calendars = calendars
        self._document.assignments = assignments
        if self._document.active_id == calendar_id:
            self._document.active_id = None
        self._persist()
        return True

    # -- assignments ----------------------------------------------------

    def get_assignments(self, date: str) -> List[str]:
        return list(self._document.assignments.get(date, []))

    def get_visible_calendars(self, date: str) -> List[Calendar]:
        """Calendars assigned to ``date``, skipping ids with no calendar."""
        by_id = {c.id: c for c in self._document.calendars}
        return [by_id[i] for i in self.get_assignments(date) if i in by_id]

    def add_assignment(self, date: str, calendar_id: str) -> None:
        ids = self.get_assignments(date)
        if calendar_id in ids:
            return
        ids.append(calendar_id)
        self._document.assignments = {**self._document.assignments, date: ids}
        self._persist()

    def remove_assignment(self, date: str, calendar_id: str) -> None:
        if date not in self._document.assignments:
            return
        assignments = dict(self._document.assignments)
        _put_ids(assignments, date, [i for i in assignments[date] if i != calendar_id])
        self._document.assignments = assignments
        self._persist()

    def toggle_assignment(self, date: str, calendar_id: str) -> bool:
        """Single-cell toggle. Returns True if the id was added."""
        if calendar_id in self._document.assignments.get(date, []):
            self.remove_assignment(date, calendar_id)
            return False
        self.add_assignment(date, calendar_id)
        return True

    def toggle_multiple_assignments(self, dates: List[str], calendar_id: str) -> bool:
        """Toggle ``calendar_id`` over a batch of dates in one direction.

        The first date decides: if it lacks the id, every date gets it;
        otherwise every date loses it. Returns True if the batch added.
        """
        if not dates:
            return False

        should_add = calendar_id not in self._document.assignments.get(dates[0], [])
        assignments = dict(self._document.assignments)
        for day in dates:
            ids = list(assignments.get(day, []))
            if should_add:
                if calendar_id not in ids:
                    ids.append(calendar_id)
                assignments[day] = ids
            elif day in assignments:
                _put_ids(assignments, day, [i for i in ids if i != calendar_id])

        self._document.assignments = assignments
        self._persist()
        return should_add

    def replace_assignments(self, assignments: Mapping[str, Iterable[str]]) -> None:
        normalized: Dict[str, List[str]] = {}
        for day, ids in assignments.items():
            _put_ids(normalized, day, unique_ids(list(ids)))
        self._document.assignments = normalized
        self._persist()

    def clear_assignments(self) -> None:
        self.replace_assignments({})

    def get_annual_day_count(self, calendar_id: str, year: int) -> int:
        prefix = f"{year:04d}-"
        return sum(
            1 for day, ids in self._document.assignments.items()
            if day.startswith(prefix) and calendar_id in ids
        )

    def get_annual_stats(self, year: int) -> Dict[str, int]:
        return annual_stats(self._document, year)

    # -- comments -------------------------------------------------------

    def get_comment(self, date: str) -> str:
        return self._document.comments.get(date, "")

    def set_comment(self, date: str, text: str) -> None:
        """Set the comment for ``date``; blank text removes it."""
        text = text.strip()
        if not text:
            self.remove_comment(date)
            return
        self._document.comments = {**self._document.comments, date: text}
        self._persist()

    def remove_comment(self, date: str) -> None:
        if date not in self._document.comments:
            return
        comments = dict(self._document.comments)
        del comments[date]
        self._document.comments = comments
        self._persist()

    # -- holidays -------------------------------------------------------

    def is_holiday(self, date: str) -> bool:
        return date in self._holiday_dates

    # -- import / export ------------------------------------------------

    def import_data(self, payload: Union[ImportPayload, Mapping[str, Any]]) -> None:
        """Replace calendars, assignments, comments and holidays wholesale.

        The previous active id survives only when the payload has none.
        Raises ``pydantic.ValidationError`` for malformed payloads, before
        anything is changed.
        """
        if not isinstance(payload, ImportPayload):
            payload = ImportPayload.model_validate(payload)

        holidays = payload.holidays if payload.holidays is not None else self._generate_holidays()
        active_id = payload.active_id if payload.active_id is not None else self._document.active_id

        self._document = Document(
            calendars=payload.calendars,
            assignments=payload.assignments,
            comments=payload.comments,
            holidays=holidays,
            active_id=active_id,
            version=SCHEMA_VERSION,
        )
        self._refresh_holiday_index()
        logger.info("Imported %d calendars", len(payload.calendars))
        self._persist()

    def export_data(self) -> ExportDocument:
        return ExportDocument.from_document(self.snapshot())

    # -- internals ------------------------------------------------------

    def _generate_holidays(self) -> List[Holiday]:
        return generate_holidays(self.holiday_start_year, self.holiday_end_year)

    def _refresh_holiday_index(self) -> None:
        self._holiday_dates = holiday_dates(self._document.holidays)

    def _free_id(self, base: str) -> str:
        taken = {c.id for c in self._document.calendars}
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _persist(self) -> None:
        """Schedule a write of the whole document without waiting for it."""
        snapshot = self.snapshot()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Synchronous callers (scripts) have no loop to schedule on
            asyncio.run(self._write(snapshot))
            return

        task = loop.create_task(self._write(snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, snapshot: Document) -> None:
        try:
            await self.store.write(snapshot)
        except Exception:
            logger.exception("Failed to persist document")


def annual_stats(document: Document, year: int) -> Dict[str, int]:
    """Number of days in ``year`` assigned to each calendar."""
    prefix = f"{year:04d}-"
    stats = {c.id: 0 for c in document.calendars}
    for day, ids in document.assignments.items():
        if not day.startswith(prefix):
            continue
        for calendar_id in ids:
            if calendar_id in stats:
                stats[calendar_id] += 1
    return stats


def _put_ids(assignments: Dict[str, List[str]], date: str, ids: List[str]) -> None:
    # An emptied date is dropped rather than kept as an empty list
    if ids:
        assignments[date] = ids
    else:
        assignments.pop(date, None)
