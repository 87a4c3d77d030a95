"""Incremental Node construction for materializing frames.

The builder only ever touches frames whose ``materializing`` flag is set.
For every other frame text is dropped on arrival and no Node is allocated,
which keeps memory proportional to the elements somebody asked for rather than
to the document.
"""

from typing import TYPE_CHECKING, Optional

from xml_path_rules.shared.logging import get_logger
from xml_path_rules.tools.memory import NodeAllocationTracker

from .node import Node

if TYPE_CHECKING:
    from xml_path_rules.dispatch.interest import OpenFrame


class TreeBuilder:
    """Assembles Nodes for materializing frames as events arrive."""

    def __init__(
        self,
        allocations: Optional[NodeAllocationTracker] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.allocations = allocations or NodeAllocationTracker()
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

    def start(self, frame: "OpenFrame") -> Optional[Node]:
        """Allocate the Node of a freshly opened frame if it materializes."""
        if not frame.materializing:
            return None
        node = Node(
            name=frame.name,
            path=frame.path or "",
            attributes=frame.attributes,
            position=frame.position,
            whitespace=frame.whitespace,
        )
        frame.node = node
        self.allocations.node_created(node)
        return node

    def add_text(self, frame: "OpenFrame", text: str) -> None:
        if frame.node is None:
            return
        frame.text_buffer.append(text)

    def flush_text(self, frame: "OpenFrame", closing: bool = False) -> None:
        """Normalize buffered text into one content segment.

        Called when a child opens and (with ``closing``) when the frame
        closes, so adjacent character-data callbacks always form a single
        segment. Trimming applies only at the element's edges: before the
        first content item and at the close tag.
        """
        if frame.node is None or not frame.text_buffer:
            return
        text = "".join(frame.text_buffer)
        frame.text_buffer.clear()
        frame.node.append_text(frame.whitespace.apply(
            text,
            leading=not frame.node.contents,
            trailing=closing,
        ))

    def adopt(self, parent: "OpenFrame", node: Node) -> None:
        """Move a closed child Node into its parent's contents."""
        if parent.node is None:
            raise ValueError(f"Cannot adopt {node.path}: parent is not materializing")
        parent.node.append_child(node)
