"""
Weekday and ordinal lookup tables, and parsing of ordinal date strings
such as "August 29th, 2011".
"""

from datetime import date, datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping

from business_calendar.core.exceptions import ParseError

# Layout left once the ordinal token has been replaced: "August 29 2011"
DATE_LAYOUT = "%B %d %Y"


class Weekday(IntEnum):
    """Days of the week, numbered like date.weekday()."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


WEEKDAY_NAMES: Mapping[str, Weekday] = MappingProxyType(
    {
        "sunday": Weekday.SUNDAY,
        "monday": Weekday.MONDAY,
        "tuesday": Weekday.TUESDAY,
        "wednesday": Weekday.WEDNESDAY,
        "thursday": Weekday.THURSDAY,
        "friday": Weekday.FRIDAY,
        "saturday": Weekday.SATURDAY,
    }
)


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


# "1st," -> "01" ... "31st," -> "31"
ORDINALS: Mapping[str, str] = MappingProxyType(
    {f"{day}{_ordinal_suffix(day)},": f"{day:02d}" for day in range(1, 32)}
)


def weekday_name(weekday: int) -> str:
    """Return the lowercase name of a weekday number."""
    return Weekday(weekday).name.lower()


def normalize_ordinal(text: str) -> str:
    """
    Replace the ordinal day token of a date string with its numeral.

    Only the token between the first and second space is considered.
    Tokens that are not in ORDINALS are left untouched.

    Args:
        text: Date string, e.g. "August 29th, 2011".

    Returns:
        The normalized string, e.g. "August 29 2011".
    """
    first = text.find(" ")
    if first < 0:
        return text
    second = text.find(" ", first + 1)
    if second < 0:
        return text

    token = text[first + 1:second]
    numeral = ORDINALS.get(token)
    if numeral is None:
        return text
    return f"{text[:first + 1]}{numeral}{text[second:]}"


def parse_ordinal_date(text: str) -> date:
    """
    Parse a date written as "<Month> <Day><suffix>, <Year>".

    Args:
        text: Date string, e.g. "August 29th, 2011".

    Returns:
        The parsed calendar date.

    Raises:
        ParseError: If the string does not match the layout or the day
            is not written with two digits.
    """
    if not isinstance(text, str):
        raise ParseError(str(text), "expected a string")

    normalized = normalize_ordinal(text.strip())
    fields = normalized.split(" ")
    if len(fields) > 1 and not (len(fields[1]) == 2 and fields[1].isdigit()):
        raise ParseError(text, "day must have two digits")
    try:
        return datetime.strptime(normalized, DATE_LAYOUT).date()
    except ValueError as e:
        raise ParseError(text, str(e)) from e


def format_ordinal_date(value: date) -> str:
    """Format a date in the ordinal form accepted by parse_ordinal_date."""
    return f"{value.strftime('%B')} {value.day}{_ordinal_suffix(value.day)}, {value.year}"
