"""Node lifecycle: retain into the parent or release.

Once the close handlers of an element have returned, its Node is either
handed to the parent's contents (the parent materializes and must contain
it) or released together with everything it contains. The frame never keeps
a reference past that decision.
"""

from enum import Enum, auto
from typing import List, Optional

from xml_path_rules.shared.logging import get_logger
from xml_path_rules.tree.builder import TreeBuilder

from .interest import OpenFrame


class Disposition(Enum):
    """What happened to a frame's Node on close."""

    NO_NODE = auto()    # Frame never materialized
    RETAINED = auto()   # Ownership moved into the parent's contents
    RELEASED = auto()   # Nothing references the Node any more


class LifecycleManager:
    """Decides, per closed frame, whether its Node lives on."""

    def __init__(
        self,
        builder: TreeBuilder,
        correlation_id: Optional[str] = None
    ) -> None:
        self.builder = builder
        self.allocations = builder.allocations
        self.logger = get_logger(__name__, correlation_id, "lifecycle_manager")

    def settle(self, frame: OpenFrame, parent: Optional[OpenFrame]) -> Disposition:
        """Retain or release the Node of a frame whose handlers have run."""
        node = frame.node
        frame.node = None
        frame.text_buffer.clear()
        if node is None:
            return Disposition.NO_NODE
        if parent is not None and parent.materializing:
            self.builder.adopt(parent, node)
            return Disposition.RETAINED
        self.allocations.node_released(node)
        return Disposition.RELEASED

    def release_open_frames(self, frames: List[OpenFrame]) -> int:
        """Drop frames without running handlers; returns released Node count.

        Used for cancellation and aborts. Children still open are not yet in
        their parent's contents, so every frame's Node is released on its own.
        """
        released_before = self.allocations.released
        for frame in frames:
            node = frame.node
            frame.node = None
            frame.text_buffer.clear()
            frame.pending = []
            if node is not None:
                self.allocations.node_released(node)
        released = self.allocations.released - released_before
        if frames:
            self.logger.debug(
                "Released open frames",
                extra={"frames": len(frames), "nodes_released": released}
            )
        return released
