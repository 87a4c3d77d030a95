"""Result objects and diagnostic types for path-rule dispatching.

A drive either raises or returns a ``DriveResult`` describing how it ended,
what it cost and any non-fatal observations made along the way.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    path: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class DriveStatistics:
    """Counters collected while driving one document."""

    events_processed: int = 0
    elements_opened: int = 0
    elements_closed: int = 0
    max_depth: int = 0
    open_handler_calls: int = 0
    close_handler_calls: int = 0
    nodes_created: int = 0
    nodes_released: int = 0
    peak_live_nodes: int = 0
    processing_time_ms: float = 0.0
    start_rss_bytes: Optional[int] = None
    peak_rss_bytes: Optional[int] = None
    end_rss_bytes: Optional[int] = None

    @property
    def elements_per_second(self) -> float:
        """Calculate elements opened per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.elements_opened * 1000.0) / self.processing_time_ms

    @property
    def materialized_ratio(self) -> float:
        """Fraction of opened elements that allocated a Node."""
        if self.elements_opened == 0:
            return 0.0
        return self.nodes_created / self.elements_opened

    @property
    def live_nodes(self) -> int:
        return self.nodes_created - self.nodes_released

    def to_dict(self) -> Dict[str, Any]:
        return {
            "events_processed": self.events_processed,
            "elements_opened": self.elements_opened,
            "elements_closed": self.elements_closed,
            "max_depth": self.max_depth,
            "open_handler_calls": self.open_handler_calls,
            "close_handler_calls": self.close_handler_calls,
            "nodes_created": self.nodes_created,
            "nodes_released": self.nodes_released,
            "peak_live_nodes": self.peak_live_nodes,
            "processing_time_ms": self.processing_time_ms,
            "elements_per_second": self.elements_per_second,
            "materialized_ratio": self.materialized_ratio,
            "start_rss_bytes": self.start_rss_bytes,
            "peak_rss_bytes": self.peak_rss_bytes,
            "end_rss_bytes": self.end_rss_bytes,
        }


@dataclass
class DriveResult:
    """Outcome of a completed or cancelled drive."""

    completed: bool = False
    cancelled: bool = False
    statistics: DriveStatistics = field(default_factory=DriveStatistics)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            path=path,
            details=details,
            correlation_id=self.correlation_id
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        return any(
            diag.severity == DiagnosticSeverity.ERROR for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary of the drive suitable for logging or JSON output."""
        by_severity: Dict[str, int] = {}
        for diagnostic in self.diagnostics:
            name = diagnostic.severity.name
            by_severity[name] = by_severity.get(name, 0) + 1
        return {
            "completed": self.completed,
            "cancelled": self.cancelled,
            "correlation_id": self.correlation_id,
            "statistics": self.statistics.to_dict(),
            "diagnostics_by_severity": by_severity,
        }
