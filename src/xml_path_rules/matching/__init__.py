"""Pattern matching against element paths."""

from .engine import (
    MatchEngine,
    PendingEntry,
    StepResult,
    accepts,
    advance,
    can_extend,
    initial_states,
    matches,
)

__all__ = [
    "MatchEngine",
    "PendingEntry",
    "StepResult",
    "accepts",
    "advance",
    "can_extend",
    "initial_states",
    "matches",
]
