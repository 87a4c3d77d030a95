"""Node tree assembly for matched elements.

Key Components:
    Node: Materialized element with ordered contents and per-name child indices
    TreeBuilder: Builds Nodes incrementally for materializing frames
"""

from .builder import TreeBuilder
from .node import Node

__all__ = [
    "Node",
    "TreeBuilder",
]
