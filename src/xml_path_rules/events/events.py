"""Tokenizer event types consumed by the dispatcher.

Names and attribute values arrive already entity-decoded. ``depth`` counts
open elements including the one the event belongs to, so the root element is
opened and closed at depth 1 and text directly inside it is reported at
depth 1 too.
"""

from dataclasses import dataclass, field
from typing import Dict, Union


@dataclass(frozen=True)
class ElementOpen:
    """An element start tag."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    depth: int = 1

    def __post_init__(self) -> None:
        """Validate event values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        if self.depth < 1:
            raise ValueError("Element depth must be >= 1")


@dataclass(frozen=True)
class Text:
    """Character data inside the element open at ``depth``."""

    text: str
    depth: int = 1

    def __post_init__(self) -> None:
        if self.depth < 0:
            raise ValueError("Text depth must be >= 0")


@dataclass(frozen=True)
class ElementClose:
    """An element end tag (or the end of an empty-element tag)."""

    name: str
    depth: int = 1

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Element name cannot be empty")
        if self.depth < 1:
            raise ValueError("Element depth must be >= 1")


Event = Union[ElementOpen, Text, ElementClose]
