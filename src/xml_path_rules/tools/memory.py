"""Memory instrumentation for path-rule dispatching.

``NodeAllocationTracker`` counts Node constructions and releases so the
bounded-memory behaviour of a drive can be observed directly.
``MemoryMonitor`` samples the resident set size of the process through psutil.
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import psutil

from xml_path_rules.shared.logging import get_logger

if TYPE_CHECKING:
    from xml_path_rules.tree.node import Node

NodeObserver = Callable[["Node"], None]

BYTES_PER_MB = 1024 * 1024


class NodeAllocationTracker:
    """Counts Node allocations and releases during a drive.

    Observers registered with ``add_observer`` are called with every freshly
    constructed Node, before any content has been added to it.

    Examples:
        >>> tracker = NodeAllocationTracker()
        >>> seen = []
        >>> tracker.add_observer(lambda node: seen.append(node.path))
    """

    def __init__(self) -> None:
        self.created = 0
        self.released = 0
        self.peak_live = 0
        self._observers: List[NodeObserver] = []

    @property
    def live(self) -> int:
        return self.created - self.released

    def add_observer(self, observer: NodeObserver) -> None:
        if not callable(observer):
            raise TypeError("Observer must be callable")
        self._observers.append(observer)

    def node_created(self, node: "Node") -> None:
        self.created += 1
        if self.live > self.peak_live:
            self.peak_live = self.live
        for observer in self._observers:
            observer(node)

    def node_released(self, node: "Node") -> None:
        """Record the release of ``node`` and every node it contains."""
        self.released += node.subtree_size()

    def reset(self) -> None:
        self.created = 0
        self.released = 0
        self.peak_live = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "created": self.created,
            "released": self.released,
            "live": self.live,
            "peak_live": self.peak_live,
        }


@dataclass
class MemorySample:
    """Resident memory of the process at one point of a drive."""

    label: str
    rss_bytes: int

    @property
    def rss_mb(self) -> float:
        return self.rss_bytes / BYTES_PER_MB


@dataclass
class MemoryMonitor:
    """Samples process RSS at drive start, periodically and at the end."""

    sample_interval: int = 10000
    samples: List[MemorySample] = field(default_factory=list)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.sample_interval <= 0:
            raise ValueError("sample_interval must be > 0")
        self._process = psutil.Process(os.getpid())
        self._logger = get_logger(__name__, self.correlation_id, "memory_monitor")

    def sample(self, label: str) -> MemorySample:
        sample = MemorySample(label=label, rss_bytes=self._process.memory_info().rss)
        self.samples.append(sample)
        self._logger.debug(
            "Memory sample",
            extra={"label": label, "rss_mb": round(sample.rss_mb, 2)}
        )
        return sample

    def maybe_sample(self, events_processed: int) -> Optional[MemorySample]:
        """Sample when ``events_processed`` reaches a multiple of the interval."""
        if events_processed % self.sample_interval:
            return None
        return self.sample(f"event {events_processed}")

    @property
    def start_rss(self) -> Optional[int]:
        return self.samples[0].rss_bytes if self.samples else None

    @property
    def peak_rss(self) -> Optional[int]:
        if not self.samples:
            return None
        return max(sample.rss_bytes for sample in self.samples)

    @property
    def end_rss(self) -> Optional[int]:
        return self.samples[-1].rss_bytes if self.samples else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "samples": [
                {"label": sample.label, "rss_bytes": sample.rss_bytes}
                for sample in self.samples
            ],
            "start_rss_bytes": self.start_rss,
            "peak_rss_bytes": self.peak_rss,
            "end_rss_bytes": self.end_rss,
        }
