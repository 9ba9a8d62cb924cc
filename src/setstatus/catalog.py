"""Status keyword table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

CLEAR_KEYWORD = "clear"
BACK_KEYWORD = "back"
LUNCH_KEYWORD = "lunch"


class UnknownKeywordError(ValueError):
    """Raised when a keyword is neither in the table nor a control keyword."""


@dataclass(frozen=True)
class StatusDefinition:
    keyword: str
    display_text: str
    emoji: str
    chat_dnd: bool = False
    host_busy: bool = False
    # Long absences: return horizon shown in chat text, tracker OOO reminder.
    absence: bool = False
    # Tracker has no write API; kept for display only.
    tracker_ooo: bool = False


STATUSES: Tuple[StatusDefinition, ...] = (
    StatusDefinition(
        keyword="lunch",
        display_text="Lunchin'",
        emoji=":fork_and_knife:",
        chat_dnd=True,
    ),
    StatusDefinition(
        keyword="zoom",
        display_text="In a meeting (Zoom)",
        emoji=":video_camera:",
    ),
    StatusDefinition(
        keyword="tuple",
        display_text="Pairing (Tuple)",
        emoji=":couple:",
    ),
    StatusDefinition(
        keyword="meet",
        display_text="In a meeting",
        emoji=":calendar:",
    ),
    StatusDefinition(
        keyword="eod",
        display_text="Done for the day",
        emoji=":wave:",
        chat_dnd=True,
        tracker_ooo=True,
    ),
    StatusDefinition(
        keyword="vacation",
        display_text="Vacation",
        emoji=":desert_island:",
        chat_dnd=True,
        host_busy=True,
        absence=True,
        tracker_ooo=True,
    ),
    StatusDefinition(
        keyword="sick",
        display_text="Out sick",
        emoji=":face_with_thermometer:",
        chat_dnd=True,
        absence=True,
        tracker_ooo=True,
    ),
    StatusDefinition(
        keyword="away",
        display_text="Out of office",
        emoji=":no_entry:",
        chat_dnd=True,
        host_busy=True,
        absence=True,
        tracker_ooo=True,
    ),
    StatusDefinition(
        keyword=BACK_KEYWORD,
        display_text="Catching up",
        emoji=":inbox_tray:",
    ),
)


def find_status(keyword: str) -> Optional[StatusDefinition]:
    for status in STATUSES:
        if status.keyword == keyword:
            return status
    return None


def available_keywords() -> Tuple[str, ...]:
    return tuple(status.keyword for status in STATUSES) + (CLEAR_KEYWORD,)


def normalize_keyword(keyword: str) -> str:
    return str(keyword or "").strip().lower()


def validate_keyword(keyword: str) -> str:
    """Return the normalized keyword or raise :class:`UnknownKeywordError`."""

    normalized = normalize_keyword(keyword)
    if normalized == CLEAR_KEYWORD or find_status(normalized) is not None:
        return normalized
    raise UnknownKeywordError(
        "Unknown keyword: {0}\nAvailable: {1}".format(
            normalized or keyword,
            ", ".join(available_keywords()),
        )
    )
