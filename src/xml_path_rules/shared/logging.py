"""Correlation-aware logging for path-rule dispatching.

Every record emitted through ``ContextLogger`` carries the component name and
the correlation ID of the drive that produced it, so interleaved output from
several dispatchers can be told apart.
"""

import logging
from typing import Any, Dict, Optional

PACKAGE_LOGGER_NAME = "xml_path_rules"


class ContextLogger:
    """Logger that attaches correlation ID and component to every record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize context logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for drive tracking
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def _extra(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        combined = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined.update(extra)
        return combined

    def is_debug_enabled(self) -> bool:
        """Check whether debug records would be emitted."""
        return self.logger.isEnabledFor(logging.DEBUG)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.warning(message, extra=self._extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log error message; includes the active traceback by default."""
        self.logger.error(message, extra=self._extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> ContextLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for drive tracking
        component: Component name for structured logging

    Returns:
        ContextLogger instance
    """
    return ContextLogger(name, correlation_id, component)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Set the level of the package logger.

    Handlers are left to the application; only the threshold is applied.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    return package_logger
