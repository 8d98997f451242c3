"""Export and import files."""

from datetime import date
from pathlib import Path
from typing import Optional, Union
import json
import logging

from pydantic import ValidationError

from .document import ImportPayload
from .state import StateManager

logger = logging.getLogger(__name__)


class ImportFileError(Exception):
    """Raised when an import file cannot be parsed or validated."""


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"tinymonth-export-{today.isoformat()}.json"


def write_export(manager: StateManager, directory: Union[str, Path] = ".") -> Path:
    """Write the manager's export snapshot into ``directory``."""
    path = Path(directory) / export_filename()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = manager.export_data().model_dump(mode="json", by_alias=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info("Exported data to %s", path)
    return path


def parse_import(text: str) -> ImportPayload:
    try:
        return ImportPayload.model_validate_json(text)
    except ValidationError as e:
        raise ImportFileError(f"Invalid import data: {e}") from e


def read_import_file(path: Union[str, Path]) -> ImportPayload:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ImportFileError(f"Cannot read {path}: {e}") from e
    return parse_import(text)
