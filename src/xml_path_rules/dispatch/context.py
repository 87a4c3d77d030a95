"""Objects handed to handlers alongside the matched element."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

from xml_path_rules.patterns.registry import Rule

if TYPE_CHECKING:
    from .dispatcher import _DriveSession


class StopProcessing(Exception):
    """Raise from a handler to stop processing the rest of the document."""


@dataclass(frozen=True)
class ElementInfo:
    """Lightweight open-time notification; no Node is built for it."""

    name: str
    path: str
    attributes: Dict[str, str]
    position: int
    depth: int

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)


class HandlerContext:
    """Per-invocation context passed as the second handler argument.

    Examples:
        >>> def close_book(node, context):
        ...     if node.get_attribute("id") == "last":
        ...         context.stop()
    """

    def __init__(
        self,
        session: "_DriveSession",
        rule: Rule,
        path: str,
        depth: int
    ) -> None:
        self._session = session
        self.rule = rule
        self.path = path
        self.depth = depth

    @property
    def pattern(self) -> str:
        return self.rule.source

    @property
    def correlation_id(self) -> str:
        return self._session.correlation_id

    @property
    def stopped(self) -> bool:
        return self._session.stopped

    def stop(self) -> None:
        """Stop after this handler returns; no further handlers will run."""
        self._session.request_stop(self.path)
