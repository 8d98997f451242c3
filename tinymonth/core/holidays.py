"""Swiss public holiday calculation.

Holidays are derived data: the same year range always yields the same
list, so the result is regenerated on every load instead of being
edited by users.
"""

from datetime import date, timedelta
from typing import Iterable, List, Set, Tuple

from .document import Holiday, HolidayType

DEFAULT_START_YEAR = 2022
DEFAULT_END_YEAR = 2030

# (month, day, name)
FIXED_HOLIDAYS: List[Tuple[int, int, str]] = [
    (1, 1, "New Year's Day"),
    (1, 2, "Berchtold's Day"),
    (1, 6, "Epiphany"),
    (5, 1, "Labour Day"),
    (8, 1, "Swiss National Day"),
    (8, 15, "Assumption Day"),
    (11, 1, "All Saints' Day"),
    (12, 25, "Christmas Day"),
    (12, 26, "St. Stephen's Day"),
]

# (days after Easter Sunday, name)
EASTER_OFFSETS: List[Tuple[int, str]] = [
    (0, "Easter Sunday"),
    (1, "Easter Monday"),
    (39, "Ascension Day"),
    (49, "Whit Sunday"),
    (50, "Whit Monday"),
    (60, "Corpus Christi"),
]


def easter_sunday(year: int) -> date:
    """Gregorian Easter Sunday (anonymous Gregorian / Meeus-Butcher algorithm)."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return date(year, month, day)


def holidays_for_year(year: int) -> List[Holiday]:
    """Fixed-date block first, then the Easter-relative block."""
    holidays = [
        Holiday(date=date(year, month, day).isoformat(), name=name, type=HolidayType.FIXED)
        for month, day, name in FIXED_HOLIDAYS
    ]

    easter = easter_sunday(year)
    for offset, name in EASTER_OFFSETS:
        holidays.append(Holiday(
            date=(easter + timedelta(days=offset)).isoformat(),
            name=name,
            type=HolidayType.MOVABLE,
        ))

    return holidays


def generate_holidays(start_year: int = DEFAULT_START_YEAR,
                      end_year: int = DEFAULT_END_YEAR) -> List[Holiday]:
    """Generate holidays for every year in ``[start_year, end_year]``.

    Output is year-major and keeps the per-year order of
    ``holidays_for_year``. An empty range yields an empty list.
    """
    holidays: List[Holiday] = []
    for year in range(start_year, end_year + 1):
        holidays.extend(holidays_for_year(year))
    return holidays


def holiday_dates(holidays: Iterable[Holiday]) -> Set[str]:
    return {holiday.date for holiday in holidays}
