"""Typed contracts shared by the planner, dispatcher and renderers."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from setstatus.catalog import StatusDefinition

SERVICE_CHAT = "slack"
SERVICE_CODE_HOST = "github"
SERVICE_TRACKER = "asana"
SERVICE_ORDER = (SERVICE_CHAT, SERVICE_CODE_HOST, SERVICE_TRACKER)

OUTCOME_SUCCESS = "success"
OUTCOME_FAILURE = "failure"
OUTCOME_SKIPPED = "skipped"
OUTCOME_ADVISORY = "advisory"


def now_ms() -> int:
    return int(time.time() * 1000)


class Transition(Enum):
    ANNOUNCE = "announce"
    RETURN = "return"
    CLEAR = "clear"


@dataclass(frozen=True)
class SetStatus:
    text: str
    icon: str
    expires_at: Optional[datetime] = None
    dnd_minutes: Optional[int] = None
    limited_availability: bool = False
    scope_id: Optional[str] = None
    end_snooze_first: bool = False
    summary: str = ""


@dataclass(frozen=True)
class ClearStatus:
    end_snooze: bool = False
    summary: str = "Cleared"


@dataclass(frozen=True)
class NoChange:
    summary: str = "No change"


@dataclass(frozen=True)
class AdviseOutOfOffice:
    """Tracker OOO can only be read; the user is told what to toggle by hand."""

    want_set: bool


ServiceAction = Union[SetStatus, ClearStatus, NoChange, AdviseOutOfOffice]


@dataclass(frozen=True)
class DispatchPlan:
    keyword: str
    transition: Transition
    definition: Optional[StatusDefinition]
    resolved: Optional[datetime]
    chat: ServiceAction
    code_host: ServiceAction
    tracker: ServiceAction

    def actions(self) -> List[tuple]:
        return [
            (SERVICE_CHAT, self.chat),
            (SERVICE_CODE_HOST, self.code_host),
            (SERVICE_TRACKER, self.tracker),
        ]


@dataclass(frozen=True)
class ServiceOutcome:
    service: str
    status: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status != OUTCOME_FAILURE


@dataclass
class DispatchReport:
    keyword: str
    outcomes: List[ServiceOutcome] = field(default_factory=list)

    def add(self, service: str, status: str, message: str = "") -> ServiceOutcome:
        outcome = ServiceOutcome(service=service, status=status, message=message)
        self.outcomes.append(outcome)
        return outcome

    def for_service(self, service: str) -> List[ServiceOutcome]:
        return [item for item in self.outcomes if item.service == service]

    @property
    def failures(self) -> List[ServiceOutcome]:
        return [item for item in self.outcomes if not item.ok]
