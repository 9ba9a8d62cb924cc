"""Service adapter interfaces and shared exceptions."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

SERVICE_LABELS = {
    "slack": "Slack",
    "github": "GitHub",
    "asana": "Asana",
}


class ServiceError(RuntimeError):
    """Raised when one external service call fails."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self._details: Dict[str, Any] = {}
        for key, value in details.items():
            if value is None:
                continue
            self._details[str(key)] = value

    @property
    def details(self) -> Dict[str, Any]:
        return dict(self._details)


def service_error_summary(exc: ServiceError) -> str:
    detail = exc.details if isinstance(exc, ServiceError) else {}
    ordered_keys = (
        "service",
        "method",
        "status_code",
        "code",
    )
    segments = [str(exc)]
    for key in ordered_keys:
        value = detail.get(key)
        if value in ("", None):
            continue
        segments.append("{0}={1}".format(key, value))
    return " | ".join(segments)


class MissingCredentialError(ServiceError):
    """Raised when a service token or identifier is not configured."""


class ServiceTransportError(ServiceError):
    """Raised when the HTTP exchange itself fails (connect/timeout/status)."""


class ChatService(Protocol):
    def set_profile(self, text: str, icon: str, expires_at_epoch: int) -> None:
        ...

    def set_snooze(self, minutes: int) -> None:
        ...

    def end_snooze(self) -> None:
        ...


class CodeHostService(Protocol):
    def set_limited_availability(
        self,
        message: str,
        icon: str,
        expires_at_iso: Optional[str],
        scope_id: Optional[str] = None,
    ) -> None:
        ...

    def clear_status(self) -> None:
        ...


class TrackerService(Protocol):
    def is_out_of_office_set(self) -> bool:
        ...


class ServiceProvider(Protocol):
    """Builds adapters on demand; each build may raise :class:`ServiceError`."""

    def build_chat(self) -> ChatService:
        ...

    def build_code_host(self) -> CodeHostService:
        ...

    def build_tracker(self) -> TrackerService:
        ...
