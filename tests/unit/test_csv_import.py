import pytest

from tinymonth.core.csv_import import (
    CsvFormatError, display_name, ensure_calendars, import_csv,
    merge_rows, parse_assignment_rows
)
from tinymonth.core.document import Calendar, Document
from tinymonth.stores.memory import MemoryStore


CSV_TEXT = """date,calendars
2024-06-01,lanzarote
2024-06-02,lanzarote;zurich
"""


def test_display_name():
    assert display_name("costa-brava") == "Costa Brava"
    assert display_name("zurich") == "Zurich"


def test_parse_with_header():
    rows = parse_assignment_rows(CSV_TEXT)

    assert [(r.date, r.calendars) for r in rows] == [
        ("2024-06-01", ["lanzarote"]),
        ("2024-06-02", ["lanzarote", "zurich"]),
    ]


def test_parse_header_column_order():
    rows = parse_assignment_rows("Calendars,Date\nzurich,2024-06-02\n")
    assert rows[0].date == "2024-06-02"
    assert rows[0].calendars == ["zurich"]


def test_parse_without_header():
    rows = parse_assignment_rows("2024-06-02,lanzarote;zurich")
    assert rows[0].calendars == ["lanzarote", "zurich"]


def test_malformed_rows_skipped(caplog):
    text = CSV_TEXT + "not-a-date,zurich\n2024-06-03,\n2024-02-30,zurich\n\n2024-06-04, zurich ; ;\n"

    rows = parse_assignment_rows(text)

    assert [r.date for r in rows] == ["2024-06-01", "2024-06-02", "2024-06-04"]
    assert rows[-1].calendars == ["zurich"]
    assert "Skipping malformed row" in caplog.text


def test_bad_header_rejected():
    with pytest.raises(CsvFormatError):
        parse_assignment_rows("day,tags\n2024-06-01,zurich\n")


def test_empty_input():
    assert parse_assignment_rows("\n\n") == []


def test_ensure_calendars_keeps_existing():
    existing = [Calendar(id="zurich", name="ZRH", color="#000000")]

    calendars, created = ensure_calendars(existing, ["zurich", "costa-brava"], "#3b82f6")

    assert created == ["costa-brava"]
    assert calendars[0].name == "ZRH"
    assert calendars[1] == Calendar(id="costa-brava", name="Costa Brava", color="#3b82f6")


def test_merge_creates_calendars_and_assignments():
    rows = parse_assignment_rows("2024-06-02,lanzarote;zurich")

    merged, created = merge_rows(Document(), rows)

    assert created == ["lanzarote", "zurich"]
    assert [c.id for c in merged.calendars] == ["lanzarote", "zurich"]
    assert all(c.color == "#3b82f6" for c in merged.calendars)
    assert set(merged.assignments["2024-06-02"]) == {"lanzarote", "zurich"}
    assert merged.active_id == "lanzarote"


def test_merge_unions_with_existing_assignments():
    document = Document(
        calendars=[Calendar(id="zurich", name="Zurich", color="#ff0000")],
        assignments={"2024-06-02": ["zurich"], "2024-01-01": ["zurich"]},
        active_id="zurich",
    )

    merged, created = merge_rows(document, parse_assignment_rows(CSV_TEXT))

    assert created == ["lanzarote"]
    assert merged.assignments["2024-06-02"] == ["zurich", "lanzarote"]
    assert merged.assignments["2024-01-01"] == ["zurich"]
    assert merged.active_id == "zurich"


@pytest.mark.asyncio
async def test_import_csv_writes_store():
    store = MemoryStore()

    summary = await import_csv(store, CSV_TEXT, color="#123456")

    assert summary.rows == 2
    assert summary.dates == 2
    assert summary.created_calendars == ["lanzarote", "zurich"]
    stored = await store.read()
    assert stored.calendars[1].color == "#123456"
    assert stored.assignments["2024-06-01"] == ["lanzarote"]


@pytest.mark.asyncio
async def test_import_csv_without_rows_leaves_store_alone():
    store = MemoryStore()

    summary = await import_csv(store, "date,calendars\n")

    assert summary.rows == 0
    assert store.writes == 0
