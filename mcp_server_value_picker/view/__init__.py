"""View-side protocol core for the value picker."""

from .channel import JsonRpcChannel
from .presentation import StatusKind, ViewPresentation
from .projector import apply_host_context
from .selection import SelectionOutcome, SelectionReport, SelectionSaga, StepResult
from .session import SessionState, ViewSession

__all__ = [
    "JsonRpcChannel",
    "StatusKind",
    "ViewPresentation",
    "apply_host_context",
    "SelectionOutcome",
    "SelectionReport",
    "SelectionSaga",
    "StepResult",
    "SessionState",
    "ViewSession",
]
