"""
Day-of-year arithmetic on a fixed non-leap calendar.

Frost dates and degree-day series are climate normals, not observations
for a particular year, so every date is reduced to a zero-indexed day of
year in a 365-day calendar. A day past the end of its month (Feb 29 from a
leap-year date picker) is clamped to the month's last day.
"""
from datetime import date
from typing import Optional, Tuple, Union
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from growbydate.core.constants import DAYS_IN_MONTH, MONTH_NAMES, LAST_DOY
from growbydate.core.types import DayOfYear, MMDD


def _parse_month_day(month_text: str, day_text: str) -> Optional[Tuple[int, int]]:
    if not (month_text.isdecimal() and day_text.isdecimal()):
        return None
    month, day = int(month_text), int(day_text)
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    return month, day


def month_day_to_doy(month: int, day: int) -> Optional[DayOfYear]:
    """Day of year for a 1-based month and day, or None if out of range."""
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    day = min(day, DAYS_IN_MONTH[month - 1])
    doy = sum(DAYS_IN_MONTH[:month - 1]) + day - 1
    if not 0 <= doy <= LAST_DOY:
        return None
    return doy


def mmdd_to_doy(mmdd: Optional[MMDD]) -> Optional[DayOfYear]:
    """'MM-DD' -> day of year"""
    s = str(mmdd or "").strip()
    parsed = _parse_month_day(s[0:2], s[3:5])
    if parsed is None:
        return None
    return month_day_to_doy(*parsed)


def date_value_to_doy(value: Union[str, date, None]) -> Optional[DayOfYear]:
    """
    Day of year for a planting date.

    Accepts a ``datetime.date`` or an ISO ``YYYY-MM-DD`` string (the value of
    an HTML date input). The year is ignored.
    """
    if isinstance(value, date):
        return month_day_to_doy(value.month, value.day)

    s = str(value or "").strip()
    parsed = _parse_month_day(s[5:7], s[8:10])
    if parsed is None:
        return None
    return month_day_to_doy(*parsed)


def doy_to_label(doy: Optional[DayOfYear]) -> str:
    """Day of year -> 'May 15'; empty string when out of range"""
    if doy is None or not 0 <= doy <= LAST_DOY:
        return ""
    remaining = doy
    for month_index, days in enumerate(DAYS_IN_MONTH):
        if remaining < days:
            return f"{MONTH_NAMES[month_index]} {remaining + 1}"
        remaining -= days
    return ""


def format_mmdd_long(mmdd: Optional[MMDD]) -> str:
    """'05-15' -> 'May 15'. Unparseable input is returned trimmed but unchanged."""
    s = str(mmdd or "").strip()
    parsed = _parse_month_day(s[0:2], s[3:5])
    if parsed is None:
        return s
    month, day = parsed
    return f"{MONTH_NAMES[month - 1]} {day}"


def mmdd_to_date_value(mmdd: Optional[MMDD], year: Optional[int] = None) -> str:
    """'MM-DD' -> 'YYYY-MM-DD' for prefilling a date input (current year by default)"""
    s = str(mmdd or "")
    month_text, day_text = s[0:2], s[3:5]
    if not (len(month_text) == 2 and month_text.isdecimal()
            and len(day_text) == 2 and day_text.isdecimal()):
        return ""
    year = year if year is not None else date.today().year
    return f"{year}-{month_text}-{day_text}"


def build_planner_link(path: str, param_name: str, mmdd: MMDD) -> str:
    """Link to another planner page with a frost date prefilled in the query string."""
    parts = urlsplit(path)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != param_name]
    query.append((param_name, mmdd))
    return urlunsplit(("", "", parts.path or "/", urlencode(query), ""))
