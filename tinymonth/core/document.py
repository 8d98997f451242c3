"""Persisted document schema.

Every component works on fully-populated models: missing or null fields
are normalized here, once, when a payload is validated.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = 1

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class HolidayType(str, Enum):
    FIXED = "fixed"
    MOVABLE = "movable"


class Calendar(BaseModel):
    id: str = Field(..., description="Slug derived from the name at creation time")
    name: str
    color: str = Field(..., description="Hex color, e.g. #3b82f6")


class Holiday(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    name: str
    type: HolidayType


def slugify(name: str) -> str:
    """Lower-case ``name`` and replace whitespace runs with ``-``."""
    return re.sub(r"\s+", "-", name.strip().lower())


def unique_ids(ids: List[str]) -> List[str]:
    """Drop repeated ids, keeping first occurrences in order."""
    seen = set()
    result = []
    for calendar_id in ids:
        if calendar_id not in seen:
            seen.add(calendar_id)
            result.append(calendar_id)
    return result


class _DocumentFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    calendars: List[Calendar] = Field(default_factory=list)
    assignments: Dict[str, List[str]] = Field(default_factory=dict)
    comments: Dict[str, str] = Field(default_factory=dict)
    active_id: Optional[str] = Field(default=None, alias="activeId")

    @field_validator("calendars", mode="before")
    @classmethod
    def null_list_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("assignments", "comments", mode="before")
    @classmethod
    def null_mapping_to_empty(cls, v):
        return {} if v is None else v

    @field_validator("assignments")
    @classmethod
    def dedupe_assignments(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        return {day: unique_ids(ids) for day, ids in v.items()}

    @field_validator("comments")
    @classmethod
    def drop_blank_comments(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {day: text for day, text in v.items() if text.strip()}


class Document(_DocumentFields):
    """The whole application state; always read and written in full."""

    holidays: List[Holiday] = Field(default_factory=list)
    version: int = Field(default=SCHEMA_VERSION)

    @field_validator("holidays", mode="before")
    @classmethod
    def null_holidays_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("version", mode="before")
    @classmethod
    def default_version(cls, v):
        return SCHEMA_VERSION if v is None else v

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ExportDocument(Document):
    exported_at: str = Field(..., alias="exportedAt", description="ISO-8601 timestamp")

    @classmethod
    def from_document(cls, document: Document,
                      exported_at: Optional[datetime] = None) -> "ExportDocument":
        exported_at = exported_at or datetime.now(timezone.utc)
        fields = document.model_dump(exclude={"version"})
        return cls(**fields, version=SCHEMA_VERSION, exported_at=exported_at.isoformat())


class ImportPayload(_DocumentFields):
    """User-supplied import file.

    ``holidays`` stays ``None`` when the file has none (or null), so the
    importer knows to regenerate them. An explicit empty list is kept.
    ``active_id`` is ``None`` when omitted.
    """

    holidays: Optional[List[Holiday]] = None


class DocumentPatch(BaseModel):
    """Body of a persistence ``PUT``: any subset of the top-level keys."""

    model_config = ConfigDict(populate_by_name=True)

    calendars: Optional[List[Calendar]] = None
    assignments: Optional[Dict[str, List[str]]] = None
    comments: Optional[Dict[str, str]] = None
    holidays: Optional[List[Holiday]] = None
    active_id: Optional[str] = Field(default=None, alias="activeId")
    version: Optional[int] = None

    def apply_to(self, document: Document) -> Document:
        """Replace the keys present in this patch; ``version`` defaults to 1."""
        merged = document.model_dump(mode="json")
        merged.update(self.model_dump(mode="json", include=self.model_fields_set))
        merged["version"] = self.version if self.version is not None else SCHEMA_VERSION
        return Document.model_validate(merged)
