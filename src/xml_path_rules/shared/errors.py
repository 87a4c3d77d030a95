"""Exception hierarchy for path-rule dispatching.

All errors raised by the package derive from ``XMLRulesError`` so callers can
catch them in one place while still distinguishing registration problems,
malformed input and failures inside their own handler code.
"""

from typing import Optional


class XMLRulesError(Exception):
    """Base exception for all path-rule errors."""


class InvalidPatternError(XMLRulesError, ValueError):
    """Raised at registration time when a path pattern cannot be compiled."""

    def __init__(self, pattern: object, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class MalformedInputError(XMLRulesError):
    """Raised when the underlying tokenizer rejects the input document."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None
    ) -> None:
        location = ""
        if line is not None:
            location = f" (line {line}, column {column})"
        super().__init__(f"{message}{location}")
        self.line = line
        self.column = column


class HandlerError(XMLRulesError):
    """Wraps an exception raised by caller-supplied handler code.

    Attributes:
        path: Path of the element being processed when the handler failed
        element: Name of that element
        pattern: Source text of the pattern whose handler failed
        phase: ``"open"`` or ``"close"``
        original: The exception raised by the handler
    """

    def __init__(
        self,
        original: BaseException,
        path: str,
        element: str,
        pattern: str,
        phase: str
    ) -> None:
        super().__init__(
            f"{phase} handler for pattern {pattern!r} failed at {path}: "
            f"{type(original).__name__}: {original}"
        )
        self.original = original
        self.path = path
        self.element = element
        self.pattern = pattern
        self.phase = phase


class ReentrantDriveError(XMLRulesError, RuntimeError):
    """Raised when a handler tries to re-enter the dispatcher it runs under."""
