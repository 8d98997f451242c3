import json
import pytest
from datetime import date

from tinymonth.core.document import Document
from tinymonth.core.state import StateManager
from tinymonth.core.transfer import (
    ImportFileError, export_filename, read_import_file, write_export
)
from tinymonth.stores.memory import MemoryStore


def test_export_filename():
    assert export_filename(date(2024, 6, 1)) == "tinymonth-export-2024-06-01.json"
    assert export_filename().startswith("tinymonth-export-")


def test_write_export(tmp_path):
    manager = StateManager(MemoryStore(Document()))
    manager.add_calendar("Work", "#000000")
    manager.add_assignment("2024-06-01", "work")

    path = write_export(manager, tmp_path)

    assert path.name == export_filename()
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["assignments"] == {"2024-06-01": ["work"]}
    assert payload["activeId"] == "work"
    assert payload["version"] == 1
    assert "exportedAt" in payload


def test_read_import_file_round_trip(tmp_path):
    manager = StateManager(MemoryStore(Document()))
    manager.add_calendar("Work", "#000000")
    manager.set_comment("2024-06-01", "kickoff")
    path = write_export(manager, tmp_path)

    payload = read_import_file(path)

    assert payload.active_id == "work"
    assert payload.comments == {"2024-06-01": "kickoff"}


def test_read_import_file_defaults(tmp_path):
    path = tmp_path / "import.json"
    path.write_text(json.dumps({"calendars": [{"id": "a", "name": "A", "color": "#000000"}]}))

    payload = read_import_file(path)

    assert payload.assignments == {}
    assert payload.comments == {}
    assert payload.active_id is None
    assert payload.holidays is None


@pytest.mark.parametrize("content", ["{broken", "[]", '{"calendars": 5}'])
def test_malformed_import_rejected(tmp_path, content):
    path = tmp_path / "import.json"
    path.write_text(content)

    with pytest.raises(ImportFileError):
        read_import_file(path)


def test_missing_import_file(tmp_path):
    with pytest.raises(ImportFileError):
        read_import_file(tmp_path / "missing.json")


def test_undecodable_import_file(tmp_path):
    path = tmp_path / "import.json"
    path.write_bytes(b'{"comments": {"2024-01-01": "\xff\xfe"}}')

    with pytest.raises(ImportFileError):
        read_import_file(path)
