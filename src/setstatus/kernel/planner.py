"""Pure per-service action planning for one status change."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from setstatus.catalog import (
    BACK_KEYWORD,
    CLEAR_KEYWORD,
    StatusDefinition,
    find_status,
    validate_keyword,
)
from setstatus.kernel.types import (
    AdviseOutOfOffice,
    ClearStatus,
    DispatchPlan,
    NoChange,
    ServiceAction,
    SetStatus,
    Transition,
)
from setstatus.timefmt import format_horizon, format_time

FULL_DAY_SNOOZE_MINUTES = 1440


def transition_for(keyword: str) -> Transition:
    if keyword == CLEAR_KEYWORD:
        return Transition.CLEAR
    if keyword == BACK_KEYWORD:
        return Transition.RETURN
    return Transition.ANNOUNCE


def snooze_minutes(resolved: Optional[datetime], now: datetime) -> int:
    """Minutes until ``resolved``; a full day when unknown or already past."""

    if resolved is None:
        return FULL_DAY_SNOOZE_MINUTES
    # Elapsed wall-clock minutes, DST shifts included.
    diff = int((resolved.timestamp() - now.timestamp()) // 60)
    if diff > 0:
        return diff
    return FULL_DAY_SNOOZE_MINUTES


def chat_text(
    definition: StatusDefinition,
    resolved: Optional[datetime],
    today: date,
    include_time: bool = False,
) -> str:
    if resolved is not None and definition.absence:
        return "{0}. {1}".format(
            definition.display_text,
            format_horizon(resolved, today, include_time=include_time),
        )
    return definition.display_text


def plan_chat(
    transition: Transition,
    definition: Optional[StatusDefinition],
    resolved: Optional[datetime],
    now: datetime,
    today: date,
) -> ServiceAction:
    if transition is Transition.CLEAR or definition is None:
        return ClearStatus(end_snooze=True, summary="Cleared (DND off)")

    dnd_minutes: Optional[int] = None
    detail = ""
    if definition.chat_dnd:
        dnd_minutes = snooze_minutes(resolved, now)
        if resolved is not None:
            detail = " (DND until {0})".format(format_time(resolved))
        else:
            detail = " (DND on)"

    is_return = transition is Transition.RETURN
    if is_return:
        detail += " (DND off)"

    summary = "{0} {1}{2}".format(
        chat_text(definition, resolved, today, include_time=True),
        definition.emoji,
        detail,
    )
    return SetStatus(
        text=chat_text(definition, resolved, today),
        icon=definition.emoji,
        expires_at=resolved,
        dnd_minutes=dnd_minutes,
        end_snooze_first=is_return,
        summary=summary,
    )


def plan_code_host(
    transition: Transition,
    definition: Optional[StatusDefinition],
    resolved: Optional[datetime],
    scope_id: Optional[str],
) -> ServiceAction:
    if transition is not Transition.ANNOUNCE or definition is None:
        return ClearStatus(summary="Cleared")
    if not definition.host_busy:
        return NoChange()

    summary = "Limited availability"
    if scope_id:
        summary += " (organization only)"
    return SetStatus(
        text=definition.display_text,
        icon=definition.emoji,
        expires_at=resolved,
        limited_availability=True,
        scope_id=scope_id or None,
        summary=summary,
    )


def plan_tracker(
    transition: Transition,
    definition: Optional[StatusDefinition],
) -> ServiceAction:
    if transition is not Transition.ANNOUNCE:
        return AdviseOutOfOffice(want_set=False)
    if definition is not None and definition.absence:
        return AdviseOutOfOffice(want_set=True)
    return NoChange()


def plan_dispatch(
    keyword: str,
    resolved: Optional[datetime],
    now: datetime,
    today: Optional[date] = None,
    scope_id: Optional[str] = None,
) -> DispatchPlan:
    """Decide what every service should do for ``keyword``.

    Raises :class:`~setstatus.catalog.UnknownKeywordError` for keywords that
    are neither in the table nor ``clear``.
    """

    normalized = validate_keyword(keyword)
    resolved_today = today or now.date()
    transition = transition_for(normalized)
    definition = find_status(normalized)

    return DispatchPlan(
        keyword=normalized,
        transition=transition,
        definition=definition,
        resolved=resolved,
        chat=plan_chat(transition, definition, resolved, now, resolved_today),
        code_host=plan_code_host(transition, definition, resolved, scope_id),
        tracker=plan_tracker(transition, definition),
    )
