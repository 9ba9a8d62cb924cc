"""Return date/time resolution for status keywords."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

DEFAULT_RETURN_HOUR = 7
LUNCH_DURATION_MINUTES = 60
QUARTER_HOUR_MINUTES = 15

DATE_EXAMPLES = "friday, 3/10, 3-10-2026, tomorrow"

WEEKDAY_ALIASES: Dict[str, int] = {
    "monday": 0,
    "mon": 0,
    "tuesday": 1,
    "tue": 1,
    "tues": 1,
    "wednesday": 2,
    "wed": 2,
    "thursday": 3,
    "thu": 3,
    "thurs": 3,
    "friday": 4,
    "fri": 4,
    "saturday": 5,
    "sat": 5,
    "sunday": 6,
    "sun": 6,
}

_MERIDIEM_SUFFIXES: Tuple[Tuple[str, bool], ...] = (
    ("pm", True),
    ("p.m.", True),
    ("am", False),
    ("a.m.", False),
)

_DATE_SEPARATOR_RE = re.compile(r"[/-]")
_DIGITS_RE = re.compile(r"^[0-9]+$")
_TIME_RE = re.compile(r"^([0-9]+)(?::([0-9]+))?$")


class ParseError(ValueError):
    """Raised when a return date or time cannot be understood."""


class DateParseError(ParseError):
    """Raised for unrecognized or calendar-invalid date tokens."""


class TimeParseError(ParseError):
    """Raised for malformed time tokens or impossible hour/minute pairs."""


def next_weekday(today: date, target: int) -> date:
    """Return the next ``target`` weekday (Monday=0), one to seven days out."""

    current = today.weekday()
    if target > current:
        delta = target - current
    else:
        delta = 7 - current + target
    return today + timedelta(days=delta)


def _date_or_none(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except (ValueError, OverflowError):
        return None


def _parse_separated_date(token: str, today: date) -> Optional[date]:
    parts: List[str] = _DATE_SEPARATOR_RE.split(token)
    if not all(_DIGITS_RE.match(part) for part in parts):
        return None
    numbers = [int(part) for part in parts]

    if len(numbers) == 2:
        month, day = numbers
        year = today.year
        candidate = _date_or_none(year, month, day)
        if candidate is None:
            return None
        if candidate < today:
            year += 1
        return _date_or_none(year, month, day)

    if len(numbers) == 3:
        month, day, year = numbers
        if year < 100:
            year += 2000
        return _date_or_none(year, month, day)

    return None


def parse_date(token: str, today: date) -> date:
    """Resolve a weekday name, ``tomorrow``, ``M/D`` or ``M/D/Y`` token."""

    lowered = str(token or "").strip().lower()

    weekday = WEEKDAY_ALIASES.get(lowered)
    if weekday is not None:
        return next_weekday(today, weekday)

    if lowered == "tomorrow":
        return today + timedelta(days=1)

    resolved = _parse_separated_date(lowered, today)
    if resolved is None:
        raise DateParseError(
            "Could not parse date: {0}\nExamples: {1}".format(token, DATE_EXAMPLES)
        )
    return resolved


def parse_time(token: Optional[str]) -> time:
    """Parse ``8``, ``8am``, ``9:30 p.m.`` or ``15:00``.

    A missing token means the default return hour. Hours without a suffix are
    taken literally, so ``8`` is 8am and ``15:00`` is 3pm.
    """

    if token is None:
        return time(DEFAULT_RETURN_HOUR, 0, 0)

    text = token.lower().strip()
    is_pm: Optional[bool] = None
    for suffix, pm in _MERIDIEM_SUFFIXES:
        if text.endswith(suffix):
            text = text[: -len(suffix)].strip()
            is_pm = pm
            break

    match = _TIME_RE.match(text)
    if match is None:
        raise TimeParseError("Could not parse time: {0}".format(token))

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)

    if is_pm is True and hour < 12:
        hour += 12
    elif is_pm is False and hour == 12:
        hour = 0

    try:
        return time(hour, minute, 0)
    except (ValueError, OverflowError):
        raise TimeParseError("Invalid time: {0}".format(token)) from None


def resolve_return(
    date_token: Optional[str],
    time_token: Optional[str],
    today: date,
) -> Optional[datetime]:
    """Combine a date token and optional time token into a local timestamp.

    No date token means the status has no return time.
    """

    if date_token is None:
        return None
    resolved_date = parse_date(date_token, today)
    return datetime.combine(resolved_date, parse_time(time_token))


def resolve_lunch_return(
    time_token: Optional[str],
    today: date,
    now: datetime,
) -> datetime:
    """Return time for lunch: explicit time today, or the next quarter hour plus an hour."""

    if time_token is not None:
        return datetime.combine(today, parse_time(time_token))

    minute = now.minute
    next_quarter = (minute // QUARTER_HOUR_MINUTES + 1) * QUARTER_HOUR_MINUTES
    round_up = next_quarter - minute
    back = now + timedelta(minutes=round_up + LUNCH_DURATION_MINUTES)
    return back.replace(second=0, microsecond=0)
