"""Path pattern compilation.

Turns pattern text such as ``/catalog/book``, ``book``, ``catalog//title`` or
``catalog/*`` into an immutable ``Pattern`` made of literal, single-level
wildcard and descendant-wildcard segments.

Accepted forms:
    ``name``          element called ``name`` anywhere in the document
    ``/a/b``          ``b`` directly under the root element ``a``
    ``a/b``           ``b`` directly under an ``a`` at any depth
    ``a//b``          ``b`` anywhere below an ``a``
    ``a/*``           any element directly under an ``a``
    ``a//``           ``a`` itself and everything below it
    ``//``            every element
    ``//a``           same elements as ``a``; ranks like ``a``, not as rooted
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple

from xml_path_rules.shared.errors import InvalidPatternError

# Unicode code points from here on are accepted as name characters
UNICODE_START_OFFSET = 0x80

SEPARATOR = "/"
DESCENDANT_SEPARATOR = "//"
WILDCARD = "*"

_TOKEN_RE = re.compile(r"/+|[^/]+")


class SegmentKind(Enum):
    """Kinds of pattern segments."""

    LITERAL = auto()              # Exact element name
    SINGLE_WILDCARD = auto()      # Exactly one element, any name
    DESCENDANT_WILDCARD = auto()  # Zero or more elements


@dataclass(frozen=True)
class Segment:
    """One step of a compiled pattern."""

    kind: SegmentKind
    name: Optional[str] = None

    def __str__(self) -> str:
        if self.kind is SegmentKind.LITERAL:
            return self.name or ""
        if self.kind is SegmentKind.SINGLE_WILDCARD:
            return WILDCARD
        return ""


ANY_ONE = Segment(SegmentKind.SINGLE_WILDCARD)
ANY_DEPTH = Segment(SegmentKind.DESCENDANT_WILDCARD)


@dataclass(frozen=True)
class Pattern:
    """Compiled path pattern.

    ``segments`` holds the steps as written; ``steps`` is what the matcher
    runs, with the implicit leading descendant wildcard of unanchored
    patterns made explicit.
    """

    source: str
    segments: Tuple[Segment, ...]
    anchored: bool
    sequence: int = 0
    steps: Tuple[Segment, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        steps = self.segments if self.anchored else (ANY_DEPTH,) + self.segments
        object.__setattr__(self, "steps", steps)

    @property
    def literal_count(self) -> int:
        return sum(1 for seg in self.segments if seg.kind is SegmentKind.LITERAL)

    @property
    def wildcard_count(self) -> int:
        return sum(
            1 for seg in self.segments if seg.kind is SegmentKind.SINGLE_WILDCARD
        )

    @property
    def rooted(self) -> bool:
        """Anchored at the root element itself (not through a leading ``//``)."""
        return (
            self.anchored
            and self.segments[0].kind is not SegmentKind.DESCENDANT_WILDCARD
        )

    @property
    def rank_key(self) -> Tuple[int, int, int, int]:
        """Sort key placing the most specific pattern first.

        Literals, then single wildcards, then rooting, then registration
        order.
        """
        return (
            -self.literal_count,
            -self.wildcard_count,
            0 if self.rooted else 1,
            self.sequence,
        )

    def __str__(self) -> str:
        return self.source


def is_name_start_char(char: str) -> bool:
    """Check if character can start an element name."""
    return (char.isalpha() or
            char == "_" or
            char == ":" or
            ord(char) >= UNICODE_START_OFFSET)


def is_name_char(char: str) -> bool:
    """Check if character can be part of an element name."""
    return is_name_start_char(char) or char.isdigit() or char in ".-"


def is_valid_name(name: str) -> bool:
    """Check if string is a valid element name."""
    if not name or not is_name_start_char(name[0]):
        return False
    return all(is_name_char(char) for char in name)


def _segment_for(source: str, token: str) -> Segment:
    if token == WILDCARD:
        return ANY_ONE
    if not is_valid_name(token):
        raise InvalidPatternError(
            source, f"{token!r} is not a valid element name or '*'"
        )
    return Segment(SegmentKind.LITERAL, token)


def compile_pattern(source: str, sequence: int = 0) -> Pattern:
    """Compile pattern text into a ``Pattern``.

    Args:
        source: Pattern text
        sequence: Registration order, used as the final specificity tie-break

    Returns:
        Immutable compiled pattern

    Raises:
        InvalidPatternError: If the text is empty, contains characters outside
            the element-name grammar, or has a malformed separator run

    Examples:
        >>> compile_pattern("/alpha/beta").anchored
        True
        >>> [str(seg) for seg in compile_pattern("alpha//foo").segments]
        ['alpha', '', 'foo']
    """
    if not isinstance(source, str):
        raise InvalidPatternError(source, "pattern must be a string")
    if not source.strip():
        raise InvalidPatternError(source, "pattern is empty")
    if source != source.strip():
        raise InvalidPatternError(source, "pattern has surrounding whitespace")

    tokens = _TOKEN_RE.findall(source)
    anchored = False
    if tokens[0] == SEPARATOR:
        anchored = True
        tokens = tokens[1:]
    elif tokens[0] == DESCENDANT_SEPARATOR:
        anchored = True

    segments = []
    expect_name = True
    for index, token in enumerate(tokens):
        if token.startswith(SEPARATOR):
            if len(token) > len(DESCENDANT_SEPARATOR):
                raise InvalidPatternError(
                    source, "more than two consecutive separators"
                )
            if token == DESCENDANT_SEPARATOR:
                segments.append(ANY_DEPTH)
                expect_name = index < len(tokens) - 1
                continue
            if expect_name:
                raise InvalidPatternError(source, "empty segment")
            expect_name = True
            continue
        segments.append(_segment_for(source, token))
        expect_name = False

    if not segments:
        raise InvalidPatternError(source, "pattern has no segments")
    if expect_name:
        raise InvalidPatternError(source, "pattern ends with a separator")

    return Pattern(
        source=source,
        segments=tuple(segments),
        anchored=anchored,
        sequence=sequence,
    )
