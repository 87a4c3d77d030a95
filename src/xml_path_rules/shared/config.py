"""Configuration classes for path-rule dispatching.

This module provides the immutable ``DispatchConfig`` object that controls the
event source, text normalization defaults, instrumentation and logging.
"""

import json
import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional

_WHITESPACE_RUN = re.compile(r"\s+")

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class WhitespaceMode(Enum):
    """Text normalization applied to materialized text segments.

    ``trim`` and ``collapse`` are independent operations; ``normalize`` applies
    both and ``keep`` applies neither.
    """

    NORMALIZE = "normalize"
    TRIM = "trim"
    COLLAPSE = "collapse"
    KEEP = "keep"

    @property
    def trims(self) -> bool:
        return self in (WhitespaceMode.NORMALIZE, WhitespaceMode.TRIM)

    @property
    def collapses(self) -> bool:
        return self in (WhitespaceMode.NORMALIZE, WhitespaceMode.COLLAPSE)

    @classmethod
    def from_flags(cls, trim: bool, collapse: bool) -> "WhitespaceMode":
        if trim and collapse:
            return cls.NORMALIZE
        if trim:
            return cls.TRIM
        if collapse:
            return cls.COLLAPSE
        return cls.KEEP

    @classmethod
    def coerce(cls, value: Any) -> "WhitespaceMode":
        """Accept a mode or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = [mode.value for mode in cls]
        raise ValueError(f"whitespace mode must be one of {valid}, got {value!r}")

    def combine(self, other: "WhitespaceMode") -> "WhitespaceMode":
        """Return the most aggressive normalization requested by either mode."""
        return WhitespaceMode.from_flags(
            self.trims or other.trims,
            self.collapses or other.collapses
        )

    def apply(self, text: str, leading: bool = True, trailing: bool = True) -> str:
        """Normalize ``text``.

        ``leading``/``trailing`` say whether the text starts or ends at an
        edge of its element; trimming only happens at those edges. A segment
        made only of whitespace is dropped entirely by trimming modes.
        """
        if self.trims and not text.strip():
            return ""
        if self.collapses:
            text = _WHITESPACE_RUN.sub(" ", text)
        if self.trims:
            if leading:
                text = text.lstrip()
            if trailing:
                text = text.rstrip()
        return text


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class DispatchConfig:
    """Configuration for a ``RuleDispatcher`` and its event source.

    Immutable; derive variants with ``override()``.
    """

    # Text handling
    default_whitespace: WhitespaceMode = WhitespaceMode.NORMALIZE

    # Event source settings
    strip_namespaces: bool = True
    chunk_size: int = 64 * 1024
    resolve_entities: bool = False
    huge_tree: bool = False

    # Instrumentation
    track_memory: bool = False
    memory_sample_interval: int = 10000

    # Logging
    logging_level: str = "INFO"
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate dispatch configuration."""
        if not isinstance(self.default_whitespace, WhitespaceMode):
            try:
                object.__setattr__(
                    self, "default_whitespace",
                    WhitespaceMode.coerce(self.default_whitespace)
                )
            except ValueError as e:
                raise ConfigValidationError(
                    str(e), field_name="default_whitespace"
                ) from e
        if self.chunk_size <= 0:
            raise ConfigValidationError(
                "chunk_size must be > 0", field_name="chunk_size"
            )
        if self.memory_sample_interval <= 0:
            raise ConfigValidationError(
                "memory_sample_interval must be > 0",
                field_name="memory_sample_interval"
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=VALID_LOGGING_LEVELS
            )

    def override(self, **kwargs: Any) -> "DispatchConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = DispatchConfig()
            >>> config.override(chunk_size=4096).chunk_size
            4096
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {unknown}",
                field_name=unknown[0],
                suggestions=sorted(known)
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.value if isinstance(value, Enum) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DispatchConfig":
        """Create configuration from dictionary; unknown keys are rejected."""
        return cls().override(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "DispatchConfig":
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def streaming(cls) -> "DispatchConfig":
        """Preset for very large documents: big chunks, memory sampling on."""
        return cls(
            chunk_size=1024 * 1024,
            huge_tree=True,
            track_memory=True,
        )

    @classmethod
    def debugging(cls) -> "DispatchConfig":
        """Preset that keeps text verbatim and logs per-element activity."""
        return cls(
            default_whitespace=WhitespaceMode.KEEP,
            chunk_size=1024,
            logging_level="DEBUG",
        )
