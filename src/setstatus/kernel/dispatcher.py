"""Executes planned service actions and collects independent outcomes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from setstatus.kernel.debug_log import DebugLogWriter
from setstatus.kernel.types import (
    OUTCOME_ADVISORY,
    OUTCOME_FAILURE,
    OUTCOME_SKIPPED,
    OUTCOME_SUCCESS,
    SERVICE_CHAT,
    SERVICE_CODE_HOST,
    SERVICE_TRACKER,
    AdviseOutOfOffice,
    ClearStatus,
    DispatchPlan,
    DispatchReport,
    NoChange,
    ServiceAction,
    SetStatus,
)
from setstatus.services.base import ServiceError, ServiceProvider, service_error_summary

OOO_SET_HINT = "Set Out of Office manually: Profile (icon) > Set out of office"
OOO_CLEAR_HINT = "Clear Out of Office manually: Profile (icon) > Set out of office"
OOO_ALREADY_SET = "Out of Office already set"


def to_epoch_seconds(dt: Optional[datetime]) -> int:
    """Local timestamp to epoch seconds; ``0`` means no expiration."""

    if dt is None:
        return 0
    return int(dt.timestamp())


def to_utc_iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class Dispatcher:
    """Runs chat -> code-host -> tracker once each; no retries, no short-circuit."""

    def __init__(
        self,
        services: ServiceProvider,
        debug_log: Optional[DebugLogWriter] = None,
    ) -> None:
        self._services = services
        self._debug_log = debug_log

    def dispatch(self, plan: DispatchPlan) -> DispatchReport:
        report = DispatchReport(keyword=plan.keyword)
        self._run(report, SERVICE_CHAT, plan.chat, self._run_chat)
        self._run(report, SERVICE_CODE_HOST, plan.code_host, self._run_code_host)
        self._run(report, SERVICE_TRACKER, plan.tracker, self._run_tracker)
        return report

    def _run(
        self,
        report: DispatchReport,
        service: str,
        action: ServiceAction,
        runner: Callable[[DispatchReport, ServiceAction], None],
    ) -> None:
        before = len(report.outcomes)
        if isinstance(action, NoChange):
            report.add(service, OUTCOME_SKIPPED, action.summary)
        else:
            try:
                runner(report, action)
            except ServiceError as exc:
                report.add(service, OUTCOME_FAILURE, str(exc))
                self._log(
                    report.keyword,
                    service,
                    "error",
                    service_error_summary(exc),
                    exc.details,
                )
        for outcome in report.outcomes[before:]:
            if outcome.status == OUTCOME_FAILURE:
                continue
            self._log(report.keyword, service, "info", outcome.message, {"status": outcome.status})

    def _run_chat(self, report: DispatchReport, action: ServiceAction) -> None:
        chat = self._services.build_chat()

        if isinstance(action, ClearStatus):
            chat.set_profile("", "", 0)
            if action.end_snooze:
                chat.end_snooze()
            report.add(SERVICE_CHAT, OUTCOME_SUCCESS, action.summary)
            return

        if not isinstance(action, SetStatus):
            raise TypeError("unsupported action: {0!r}".format(action))
        if action.end_snooze_first:
            try:
                chat.end_snooze()
            except ServiceError as exc:
                report.add(SERVICE_CHAT, OUTCOME_FAILURE, "ending DND: {0}".format(exc))
                self._log(report.keyword, SERVICE_CHAT, "error", service_error_summary(exc), exc.details)

        chat.set_profile(action.text, action.icon, to_epoch_seconds(action.expires_at))
        if action.dnd_minutes is not None:
            chat.set_snooze(action.dnd_minutes)
        report.add(SERVICE_CHAT, OUTCOME_SUCCESS, action.summary)

    def _run_code_host(self, report: DispatchReport, action: ServiceAction) -> None:
        code_host = self._services.build_code_host()

        if isinstance(action, ClearStatus):
            code_host.clear_status()
            report.add(SERVICE_CODE_HOST, OUTCOME_SUCCESS, action.summary)
            return

        if not isinstance(action, SetStatus):
            raise TypeError("unsupported action: {0!r}".format(action))
        code_host.set_limited_availability(
            action.text,
            action.icon,
            to_utc_iso(action.expires_at),
            action.scope_id,
        )
        report.add(SERVICE_CODE_HOST, OUTCOME_SUCCESS, action.summary)

    def _run_tracker(self, report: DispatchReport, action: ServiceAction) -> None:
        if not isinstance(action, AdviseOutOfOffice):
            raise TypeError("unsupported action: {0!r}".format(action))
        ooo_set = self._read_out_of_office(report.keyword)

        if action.want_set:
            if ooo_set:
                report.add(SERVICE_TRACKER, OUTCOME_SUCCESS, OOO_ALREADY_SET)
            else:
                report.add(SERVICE_TRACKER, OUTCOME_ADVISORY, OOO_SET_HINT)
            return

        if ooo_set:
            report.add(SERVICE_TRACKER, OUTCOME_ADVISORY, OOO_CLEAR_HINT)
        else:
            report.add(SERVICE_TRACKER, OUTCOME_SKIPPED, NoChange().summary)

    def _read_out_of_office(self, keyword: str) -> bool:
        # An unavailable tracker counts as "not set".
        try:
            tracker = self._services.build_tracker()
            return bool(tracker.is_out_of_office_set())
        except ServiceError as exc:
            self._log(keyword, SERVICE_TRACKER, "warn", service_error_summary(exc), exc.details)
            return False

    def _log(
        self,
        keyword: str,
        service: str,
        level: str,
        message: str,
        data: Optional[dict] = None,
    ) -> None:
        if self._debug_log is None:
            return
        self._debug_log.write_entry(
            level=level,
            component="dispatcher",
            kind="service.outcome",
            keyword=keyword,
            service=service,
            message=message,
            data=data,
        )
