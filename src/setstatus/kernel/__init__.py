"""Planning and dispatch of status changes."""

from setstatus.kernel.dispatcher import Dispatcher
from setstatus.kernel.planner import plan_dispatch
from setstatus.kernel.types import DispatchPlan, DispatchReport, ServiceOutcome, Transition

__all__ = [
    "DispatchPlan",
    "DispatchReport",
    "Dispatcher",
    "ServiceOutcome",
    "Transition",
    "plan_dispatch",
]
