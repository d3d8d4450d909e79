"""Calendar date primitives: parsing, completed-age arithmetic and display.

Dates are plain calendar days (datetime.date) with no time-of-day or
timezone. A Feb 29 birthday is observed on Feb 28 in non-leap years; the
same clamping rule is used when adding whole years, so that
age_at(b, add_years(b, n)) == n always holds.
"""

import calendar
import re
from datetime import MAXYEAR, MINYEAR, date

from .constants import MONTH_NAMES
from .errors import InfeasibleResult, InvalidDateFormat

DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$", re.ASCII)


def parse_calendar_date(value) -> date:
    """Parse a YYYY-MM-DD string into a date.

    Raises:
        InvalidDateFormat: If the value is missing, not a string, not three
            numeric components, or not a real calendar day.
    """
    if not value or not isinstance(value, str):
        raise InvalidDateFormat("Invalid date format: no date string provided.")

    match = DATE_PATTERN.match(value.strip())
    if not match:
        raise InvalidDateFormat(f"Invalid date format: {value!r} (expected YYYY-MM-DD).")

    year, month, day = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateFormat(f"Invalid date format: {value!r} is not a calendar date.") from e


def clamp_to_month(year: int, month: int, day: int) -> date:
    """Build a date, clamping the day to the last valid day of the month.

    This is the leap-day policy: Feb 29 becomes Feb 28 in non-leap years.
    """
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def birthday_in_year(birth: date, year: int) -> date:
    """Day on which a birthday is observed in the given year."""
    return clamp_to_month(year, birth.month, birth.day)


def age_at(birth: date, reference: date) -> int:
    """Completed whole years between birth and reference."""
    age = reference.year - birth.year
    if reference < birthday_in_year(birth, reference.year):
        age -= 1
    return age


def add_years(value: date, years: int) -> date:
    """Shift a date by whole calendar years, applying the leap-day policy."""
    year = value.year + years
    if not MINYEAR <= year <= MAXYEAR:
        raise InfeasibleResult(
            f"{years} years from {format_display_date(value)} is outside the supported calendar."
        )
    return clamp_to_month(year, value.month, value.day)


def format_display_date(value: date) -> str:
    """Render a date as e.g. 'November 27, 2022'."""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def to_iso(value: date) -> str:
    return value.isoformat()
