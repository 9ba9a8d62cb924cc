"""Human-readable rendering of return timestamps."""

from __future__ import annotations

from datetime import date, datetime

# Weekday form is used up to and including this many days out.
WEEKDAY_HORIZON_DAYS = 7

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def format_time(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    suffix = "pm" if dt.hour >= 12 else "am"
    if dt.minute == 0:
        return "{0}{1}".format(hour, suffix)
    return "{0}:{1:02d}{2}".format(hour, dt.minute, suffix)


def format_horizon(resolved: datetime, today: date, include_time: bool = False) -> str:
    """Render ``Back Friday.`` for the coming week, ``Back 3/10.`` beyond it."""

    target = resolved.date()
    days_away = (target - today).days

    if days_away <= WEEKDAY_HORIZON_DAYS:
        label = WEEKDAY_NAMES[target.weekday()]
    else:
        label = "{0}/{1}".format(target.month, target.day)

    if include_time:
        return "Back {0} {1}.".format(label, format_time(resolved))
    return "Back {0}.".format(label)
