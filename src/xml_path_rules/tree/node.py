"""Assembled element nodes delivered to close handlers.

A ``Node`` owns its contents outright: text segments and child nodes in
document order, with no reference back to the parent. Children are also
indexed by name as they are appended, so ``node["item"]`` (last ``item``
child) and ``node["item[]"]`` (every ``item`` child, in order) are dictionary
lookups.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from xml_path_rules.shared.config import WhitespaceMode

LIST_SUFFIX = "[]"

Content = Union[str, "Node"]


@dataclass(eq=False)
class Node:
    """One materialized element and everything nested inside it."""

    name: str
    path: str
    attributes: Dict[str, str] = field(default_factory=dict)
    position: int = 1
    contents: List[Content] = field(default_factory=list)
    whitespace: WhitespaceMode = WhitespaceMode.KEEP
    _last_by_name: Dict[str, "Node"] = field(
        init=False, default_factory=dict, repr=False
    )
    _all_by_name: Dict[str, List["Node"]] = field(
        init=False, default_factory=dict, repr=False
    )

    def __post_init__(self) -> None:
        """Validate node values and index any initial child contents."""
        if not self.name:
            raise ValueError("Node name cannot be empty")
        if self.position < 1:
            raise ValueError("Node position must be >= 1")
        for item in self.contents:
            if isinstance(item, Node):
                self._index_child(item)

    def _index_child(self, child: "Node") -> None:
        self._last_by_name[child.name] = child
        self._all_by_name.setdefault(child.name, []).append(child)

    def append_text(self, text: str) -> None:
        """Append a text segment; empty segments are ignored."""
        if text:
            self.contents.append(text)

    def append_child(self, child: "Node") -> None:
        """Append a closed child node and index it under its name."""
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")
        self.contents.append(child)
        self._index_child(child)

    @property
    def text(self) -> str:
        """Concatenated top-level text, children excluded, normalized as a whole."""
        return self.whitespace.apply(
            "".join(item for item in self.contents if isinstance(item, str))
        )

    @property
    def full_text(self) -> str:
        """Concatenated text of this node and all descendants in document order."""
        parts = []
        for item in self.contents:
            parts.append(item if isinstance(item, str) else item.full_text)
        return self.whitespace.apply("".join(parts))

    @property
    def children(self) -> List["Node"]:
        return [item for item in self.contents if isinstance(item, Node)]

    @property
    def depth(self) -> int:
        """Depth of the element in its document (root = 1)."""
        return self.path.count("/")

    def child(self, name: str) -> Optional["Node"]:
        """Last direct child called ``name``."""
        return self._last_by_name.get(name)

    def children_named(self, name: str) -> List["Node"]:
        """All direct children called ``name``, in document order."""
        return list(self._all_by_name.get(name, ()))

    def child_names(self) -> List[str]:
        return list(self._all_by_name)

    def __getitem__(self, key: str) -> Union["Node", List["Node"]]:
        if key.endswith(LIST_SUFFIX):
            return self.children_named(key[:-len(LIST_SUFFIX)])
        try:
            return self._last_by_name[key]
        except KeyError:
            raise KeyError(f"{self.path} has no child {key!r}") from None

    def get(self, key: str, default: Any = None) -> Any:
        if key.endswith(LIST_SUFFIX):
            found = self.children_named(key[:-len(LIST_SUFFIX)])
            return found if found else default
        return self._last_by_name.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._last_by_name

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def iter_nodes(self) -> Iterator["Node"]:
        """Iterate over this node and all descendant nodes in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def subtree_size(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "position": self.position,
            "attributes": dict(self.attributes),
        }
        if self.contents:
            result["contents"] = [
                item if isinstance(item, str) else item.to_dict()
                for item in self.contents
            ]
        return result

    def __repr__(self) -> str:
        return (
            f"Node(name={self.name!r}, path={self.path!r}, "
            f"position={self.position}, contents={len(self.contents)})"
        )
