"""Shared utilities for path-rule dispatching.

This module provides configuration, result types, the exception hierarchy and
logging helpers used across all layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DispatchConfig,
    WhitespaceMode,
)
from .errors import (
    HandlerError,
    InvalidPatternError,
    MalformedInputError,
    ReentrantDriveError,
    XMLRulesError,
)
from .logging import (
    ContextLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    DriveResult,
    DriveStatistics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DispatchConfig",
    "WhitespaceMode",
    "HandlerError",
    "InvalidPatternError",
    "MalformedInputError",
    "ReentrantDriveError",
    "XMLRulesError",
    "ContextLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "DriveResult",
    "DriveStatistics",
]
