import pytest
from datetime import date

from tinymonth.core.document import HolidayType
from tinymonth.core.holidays import (
    easter_sunday, generate_holidays, holiday_dates, holidays_for_year
)


@pytest.mark.parametrize("year,expected", [
    (2022, date(2022, 4, 17)),
    (2023, date(2023, 4, 9)),
    (2024, date(2024, 3, 31)),
    (2025, date(2025, 4, 20)),
    (2026, date(2026, 4, 5)),
])
def test_easter_sunday_reference_dates(year, expected):
    assert easter_sunday(year) == expected


def test_fifteen_holidays_per_year():
    for year in range(2022, 2031):
        holidays = holidays_for_year(year)
        assert len(holidays) == 15

        for holiday in holidays:
            parsed = date.fromisoformat(holiday.date)
            assert parsed.year == year


def test_fixed_block_precedes_movable_block():
    holidays = holidays_for_year(2024)

    assert [h.type for h in holidays[:9]] == [HolidayType.FIXED] * 9
    assert [h.type for h in holidays[9:]] == [HolidayType.MOVABLE] * 6
    assert holidays[0].date == "2024-01-01"
    assert holidays[4].date == "2024-08-01"
    assert holidays[8].date == "2024-12-26"


def test_easter_relative_offsets_2024():
    movable = {h.name: h.date for h in holidays_for_year(2024)[9:]}

    assert movable == {
        "Easter Sunday": "2024-03-31",
        "Easter Monday": "2024-04-01",
        "Ascension Day": "2024-05-09",
        "Whit Sunday": "2024-05-19",
        "Whit Monday": "2024-05-20",
        "Corpus Christi": "2024-05-30",
    }


def test_generate_default_range_is_year_major():
    holidays = generate_holidays()

    assert len(holidays) == 9 * 15
    years = [int(h.date[:4]) for h in holidays]
    assert years == sorted(years)
    assert years[0] == 2022
    assert years[-1] == 2030


def test_generate_is_deterministic():
    assert generate_holidays(2024, 2025) == generate_holidays(2024, 2025)


def test_generate_empty_range():
    assert generate_holidays(2025, 2024) == []


def test_holiday_dates_membership():
    dates = holiday_dates(generate_holidays(2024, 2024))

    assert "2024-08-01" in dates
    assert "2024-04-01" in dates
    assert "2024-04-02" not in dates
