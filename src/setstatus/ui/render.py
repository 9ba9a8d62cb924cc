"""Presentation helpers for st CLI output."""

from __future__ import annotations

from typing import Iterable, List, Optional, TextIO, Tuple

from rich.console import Console
from rich.text import Text

from setstatus.catalog import CLEAR_KEYWORD, STATUSES
from setstatus.kernel.types import (
    OUTCOME_ADVISORY,
    OUTCOME_FAILURE,
    OUTCOME_SKIPPED,
    OUTCOME_SUCCESS,
    AdviseOutOfOffice,
    ClearStatus,
    DispatchPlan,
    DispatchReport,
    NoChange,
    ServiceAction,
    SetStatus,
)
from setstatus.services.base import SERVICE_LABELS

_MARKERS = {
    OUTCOME_SUCCESS: ("✓", "green"),
    OUTCOME_FAILURE: ("✗", "red"),
    OUTCOME_SKIPPED: ("-", "dim"),
    OUTCOME_ADVISORY: ("!", "yellow"),
}
# Widest label ("GitHub") plus two spaces.
_LABEL_WIDTH = 8


def render_notice(level: str, text: str) -> str:
    prefix_map = {
        "info": "Info",
        "warn": "Warning",
        "error": "Error",
        "success": "Success",
    }
    prefix = prefix_map.get(level, "Info")
    return "{0}: {1}".format(prefix, text)


def _is_tty(stream: TextIO, forced: Optional[bool]) -> bool:
    if forced is not None:
        return forced
    isatty = getattr(stream, "isatty", None)
    if callable(isatty):
        try:
            return bool(isatty())
        except ValueError:
            return False
    return False


def _service_label(service: str) -> str:
    return SERVICE_LABELS.get(service, service)


def format_outcome_line(service: str, status: str, message: str) -> str:
    marker, _style = _MARKERS.get(status, ("?", ""))
    return "  {0}{1} {2}".format(_service_label(service).ljust(_LABEL_WIDTH), marker, message)


def _write_lines(lines: Iterable[Tuple[str, str]], stream: TextIO, tty: bool) -> None:
    if tty:
        console = Console(file=stream, highlight=False, soft_wrap=True)
        for line, style in lines:
            console.print(Text(line, style=style))
        return
    for line, _style in lines:
        stream.write(line + "\n")
    stream.flush()


def render_report(
    report: DispatchReport,
    stdout: TextIO,
    stderr: TextIO,
    is_tty: Optional[bool] = None,
) -> None:
    """Write one line per outcome; failures go to ``stderr``."""

    for outcome in report.outcomes:
        _marker, style = _MARKERS.get(outcome.status, ("?", ""))
        line = format_outcome_line(outcome.service, outcome.status, outcome.message)
        stream = stderr if outcome.status == OUTCOME_FAILURE else stdout
        _write_lines([(line, style)], stream, _is_tty(stream, is_tty))


def describe_action(action: ServiceAction) -> str:
    if isinstance(action, NoChange):
        return action.summary
    if isinstance(action, ClearStatus):
        return "clear: {0}".format(action.summary)
    if isinstance(action, AdviseOutOfOffice):
        if action.want_set:
            return "check Out of Office (expect set)"
        return "check Out of Office (expect cleared)"
    if isinstance(action, SetStatus):
        parts: List[str] = ["set: {0}".format(action.summary or action.text)]
        if action.expires_at is not None:
            parts.append("expires={0}".format(action.expires_at.isoformat(timespec="minutes")))
        if action.dnd_minutes is not None:
            parts.append("dnd_minutes={0}".format(action.dnd_minutes))
        if action.end_snooze_first:
            parts.append("end_dnd_first")
        if action.scope_id:
            parts.append("scope={0}".format(action.scope_id))
        return " ".join(parts)
    return repr(action)


def render_plan_text(plan: DispatchPlan) -> str:
    lines = ["Dry run: {0} ({1})".format(plan.keyword, plan.transition.value)]
    for service, action in plan.actions():
        lines.append("  {0}{1}".format(_service_label(service).ljust(_LABEL_WIDTH), describe_action(action)))
    return "\n".join(lines)


def render_keywords_text() -> str:
    lines = []
    for status in STATUSES:
        flags = []
        if status.chat_dnd:
            flags.append("dnd")
        if status.host_busy:
            flags.append("busy")
        if status.tracker_ooo:
            flags.append("ooo")
        lines.append(
            "{0:<9} {1} {2}{3}".format(
                status.keyword,
                status.emoji,
                status.display_text,
                " [{0}]".format(",".join(flags)) if flags else "",
            )
        )
    lines.append("{0:<9} clear all statuses and end DND".format(CLEAR_KEYWORD))
    return "\n".join(lines)
