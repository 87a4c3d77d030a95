"""Interest tracking, Node lifecycle and the drive loop.

Key Components:
    RuleDispatcher: Registers rules and drives documents through them
    InterestTracker: Open-element stack with per-frame pending rules
    LifecycleManager: Retains closed Nodes in their parent or releases them
    HandlerContext, ElementInfo, StopProcessing: Handler-facing objects
"""

from .context import ElementInfo, HandlerContext, StopProcessing
from .dispatcher import RuleDispatcher
from .interest import InterestTracker, OpenFrame
from .lifecycle import Disposition, LifecycleManager

__all__ = [
    "ElementInfo",
    "HandlerContext",
    "StopProcessing",
    "RuleDispatcher",
    "InterestTracker",
    "OpenFrame",
    "Disposition",
    "LifecycleManager",
]
