from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Set, Tuple

import pytest

from setstatus.services.base import MissingCredentialError, ServiceError


class FakeChat:
    def __init__(
        self,
        profile_error: Optional[ServiceError] = None,
        snooze_error: Optional[ServiceError] = None,
        end_snooze_error: Optional[ServiceError] = None,
    ) -> None:
        self.calls: List[Tuple] = []
        self._profile_error = profile_error
        self._snooze_error = snooze_error
        self._end_snooze_error = end_snooze_error

    def set_profile(self, text, icon, expires_at_epoch):
        self.calls.append(("set_profile", text, icon, expires_at_epoch))
        if self._profile_error is not None:
            raise self._profile_error

    def set_snooze(self, minutes):
        self.calls.append(("set_snooze", minutes))
        if self._snooze_error is not None:
            raise self._snooze_error

    def end_snooze(self):
        self.calls.append(("end_snooze",))
        if self._end_snooze_error is not None:
            raise self._end_snooze_error


class FakeCodeHost:
    def __init__(self, error: Optional[ServiceError] = None) -> None:
        self.calls: List[Tuple] = []
        self._error = error

    def set_limited_availability(self, message, icon, expires_at_iso, scope_id=None):
        self.calls.append(("set_limited_availability", message, icon, expires_at_iso, scope_id))
        if self._error is not None:
            raise self._error

    def clear_status(self):
        self.calls.append(("clear_status",))
        if self._error is not None:
            raise self._error


class FakeTracker:
    def __init__(self, ooo_set: bool = False, error: Optional[ServiceError] = None) -> None:
        self.ooo_set = ooo_set
        self.reads = 0
        self._error = error

    def is_out_of_office_set(self):
        self.reads += 1
        if self._error is not None:
            raise self._error
        return self.ooo_set


class FakeServices:
    """Stands in for ServiceFactory; ``missing`` names services without credentials."""

    def __init__(
        self,
        chat: Optional[FakeChat] = None,
        code_host: Optional[FakeCodeHost] = None,
        tracker: Optional[FakeTracker] = None,
        missing: Optional[Set[str]] = None,
    ) -> None:
        self.chat = chat or FakeChat()
        self.code_host = code_host or FakeCodeHost()
        self.tracker = tracker or FakeTracker()
        self.missing = set(missing or ())
        self.built: List[str] = []
        self.closed = False

    def _build(self, service: str, env_name: str, adapter):
        self.built.append(service)
        if service in self.missing:
            raise MissingCredentialError("{0} not set".format(env_name), service=service)
        return adapter

    def build_chat(self):
        return self._build("slack", "SLACK_PAT", self.chat)

    def build_code_host(self):
        return self._build("github", "GITHUB_PAT", self.code_host)

    def build_tracker(self):
        return self._build("asana", "ASANA_PAT", self.tracker)

    def close(self):
        self.closed = True


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOME", str(home))
    for name in ("SLACK_PAT", "GITHUB_PAT", "ASANA_PAT"):
        monkeypatch.delenv(name, raising=False)

    return {
        "home": home,
        "config_root": home / ".config" / "st",
    }
