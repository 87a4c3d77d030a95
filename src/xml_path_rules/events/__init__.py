"""Tokenizer events and the lxml-backed event source.

Key Components:
    ElementOpen, Text, ElementClose: Event types consumed by the dispatcher
    XMLEventSource: Streams events from str, bytes, a path or a file object
"""

from .events import ElementClose, ElementOpen, Event, Text
from .source import InputType, XMLEventSource, local_name

__all__ = [
    "ElementClose",
    "ElementOpen",
    "Event",
    "Text",
    "InputType",
    "XMLEventSource",
    "local_name",
]
