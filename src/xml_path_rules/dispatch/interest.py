"""Interest tracking over the stack of open elements.

Each open element gets an ``OpenFrame``. The frame keeps the rules that are
still travelling towards a deeper match (its pending set, with the automaton
state reached so far), the rules matching the element itself, and whether a
Node has to be built for it.

An element materializes when a rule with a close handler matches it, or when
its parent materializes (the parent needs every child in its contents). A
pass-through element that only lies on the way to a deeper match never gets a
Node of its own.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from xml_path_rules.matching.engine import MatchEngine, PendingEntry
from xml_path_rules.patterns.registry import Rule
from xml_path_rules.shared.config import WhitespaceMode
from xml_path_rules.tree.node import Node


@dataclass(eq=False)
class OpenFrame:
    """State of one currently open element."""

    name: str
    attributes: Dict[str, str]
    position: int
    depth: int
    pending: List[PendingEntry]
    open_matches: List[Rule]
    close_matches: List[Rule]
    materializing: bool
    whitespace: WhitespaceMode = WhitespaceMode.KEEP
    path: Optional[str] = None
    node: Optional[Node] = None
    text_buffer: List[str] = field(default_factory=list)
    child_counts: Dict[str, int] = field(default_factory=dict)

    def next_position(self, name: str) -> int:
        """Claim the next 1-based position for a child called ``name``."""
        position = self.child_counts.get(name, 0) + 1
        self.child_counts[name] = position
        return position


class InterestTracker:
    """Maintains the open-element stack and each frame's interest."""

    def __init__(self, engine: MatchEngine) -> None:
        self.engine = engine
        self._frames: List[OpenFrame] = []
        self._names: List[str] = []
        self._root_pending: List[PendingEntry] = []
        self._root_counts: Dict[str, int] = {}
        self.reset()

    def reset(self) -> None:
        """Forget all frames and re-read the registry."""
        self._frames.clear()
        self._names.clear()
        self._root_counts.clear()
        self._root_pending = self.engine.root_pending()

    @property
    def current(self) -> Optional[OpenFrame]:
        return self._frames[-1] if self._frames else None

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def path_names(self) -> Tuple[str, ...]:
        return tuple(self._names)

    def current_path(self) -> str:
        return "/" + "/".join(self._names)

    def open(self, name: str, attributes: Dict[str, str]) -> OpenFrame:
        """Push a frame for element ``name`` under the current frame."""
        parent = self.current
        if parent is None:
            pending = self._root_pending
            counts = self._root_counts
            position = counts.get(name, 0) + 1
            counts[name] = position
        else:
            pending = parent.pending
            position = parent.next_position(name)

        result = self.engine.step(pending, name)
        close_matches = result.close_matches
        open_matches = result.open_matches

        inherited = parent is not None and parent.materializing
        materializing = inherited or bool(close_matches)

        whitespace: Optional[WhitespaceMode] = parent.whitespace if inherited else None
        for rule in close_matches:
            whitespace = rule.whitespace if whitespace is None else whitespace.combine(
                rule.whitespace
            )

        self._names.append(name)
        path = None
        if materializing or open_matches:
            path = self.current_path()

        frame = OpenFrame(
            name=name,
            attributes=attributes,
            position=position,
            depth=len(self._names),
            pending=result.pending,
            open_matches=open_matches,
            close_matches=close_matches,
            materializing=materializing,
            whitespace=whitespace or WhitespaceMode.KEEP,
            path=path,
        )
        self._frames.append(frame)
        return frame

    def close(self) -> Tuple[OpenFrame, Optional[OpenFrame]]:
        """Pop the innermost frame; returns it with its parent frame."""
        frame = self._frames.pop()
        self._names.pop()
        return frame, self.current

    def release_all(self) -> List[OpenFrame]:
        """Pop every open frame, innermost first."""
        released = list(reversed(self._frames))
        self._frames.clear()
        self._names.clear()
        return released
