# sitewalker/crawler/tree.py
"""
General tree of arbitrary payloads.

Nodes live in an arena owned by the tree and refer to each other by integer
handle: a node keeps the handle of its parent and the ordered handles of its
children. Child order is insertion order and is the traversal order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, Iterator, List, Optional, TypeVar

from sitewalker.errors import AlreadyRootedError, TreeError

__all__ = ("Node", "Tree")

T = TypeVar("T")


@dataclass(slots=True, eq=False)
class Node(Generic[T]):
    """A position in a :class:`Tree`."""

    element: T
    handle: int
    parent_handle: Optional[int] = None
    child_handles: List[int] = field(default_factory=list)

    def is_leaf(self) -> bool:
        return not self.child_handles

    def __repr__(self) -> str:
        return f"<Node #{self.handle} {self.element!r}>"


class Tree(Generic[T]):
    """Tree with at most one root; nodes are only ever added, never removed."""

    def __init__(self) -> None:
        self._nodes: List[Node[T]] = []

    # ------------------------------------------------------------------ #
    # size & lookup                                                      #
    # ------------------------------------------------------------------ #

    @property
    def size(self) -> int:
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node[T]]:
        return iter(self.preorder())

    @property
    def root(self) -> Optional[Node[T]]:
        """The root node, or None when the tree is empty."""
        return self._nodes[0] if self._nodes else None

    def is_root(self, node: Node[T]) -> bool:
        self._check(node)
        return node.handle == 0

    def is_leaf(self, node: Node[T]) -> bool:
        self._check(node)
        return node.is_leaf()

    def parent(self, node: Node[T]) -> Optional[Node[T]]:
        self._check(node)
        if node.parent_handle is None:
            return None
        return self._nodes[node.parent_handle]

    def children(self, node: Node[T]) -> List[Node[T]]:
        """Snapshot of the children of ``node`` in insertion order."""
        self._check(node)
        return [self._nodes[h] for h in node.child_handles]

    # ------------------------------------------------------------------ #
    # mutation                                                           #
    # ------------------------------------------------------------------ #

    def add_root(self, element: T) -> Node[T]:
        """Create the root storing ``element``; fails if the tree has one."""
        if self._nodes:
            raise AlreadyRootedError("tree is not empty")
        node = Node(element=element, handle=0)
        self._nodes.append(node)
        return node

    def add_child(self, parent: Node[T], element: T) -> Node[T]:
        """Append a new child storing ``element`` under ``parent``."""
        self._check(parent)
        node = Node(element=element, handle=len(self._nodes), parent_handle=parent.handle)
        self._nodes.append(node)
        parent.child_handles.append(node.handle)
        return node

    # ------------------------------------------------------------------ #
    # measurements                                                       #
    # ------------------------------------------------------------------ #

    def depth(self, node: Node[T]) -> int:
        """Number of edges between ``node`` and the root."""
        self._check(node)
        depth = 0
        while node.parent_handle is not None:
            node = self._nodes[node.parent_handle]
            depth += 1
        return depth

    def height(self, node: Optional[Node[T]] = None) -> int:
        """Height of the subtree rooted at ``node`` (the whole tree by default)."""
        if node is None:
            node = self.root
            if node is None:
                return 0
        self._check(node)
        heights: Dict[int, int] = {}
        for n in self._postorder_from(node):
            heights[n.handle] = max((1 + heights[c] for c in n.child_handles), default=0)
        return heights[node.handle]

    # ------------------------------------------------------------------ #
    # traversals                                                         #
    # ------------------------------------------------------------------ #

    def preorder(self) -> List[Node[T]]:
        """All nodes, each before its descendants."""
        root = self.root
        if root is None:
            return []
        snapshot: List[Node[T]] = []
        stack = [root]
        while stack:
            node = stack.pop()
            snapshot.append(node)
            stack.extend(self._nodes[h] for h in reversed(node.child_handles))
        return snapshot

    def postorder(self) -> List[Node[T]]:
        """All nodes, each after its descendants."""
        root = self.root
        return [] if root is None else self._postorder_from(root)

    def _postorder_from(self, start: Node[T]) -> List[Node[T]]:
        snapshot: List[Node[T]] = []
        stack: List[tuple[Node[T], bool]] = [(start, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                snapshot.append(node)
                continue
            stack.append((node, True))
            stack.extend((self._nodes[h], False) for h in reversed(node.child_handles))
        return snapshot

    def _check(self, node: Node[T]) -> None:
        if node.handle >= len(self._nodes) or self._nodes[node.handle] is not node:
            raise TreeError(f"{node!r} does not belong to this tree")
