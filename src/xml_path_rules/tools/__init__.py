"""Instrumentation tools for observing drives."""

from .memory import MemoryMonitor, MemorySample, NodeAllocationTracker

__all__ = [
    "MemoryMonitor",
    "MemorySample",
    "NodeAllocationTracker",
]
