"""Mutable directed graph with depth-first topological sorting."""

import logging
from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from ._errors import CycleError, UnknownNodeError

logger = logging.getLogger(__name__)

K = TypeVar("K")


class NodeMark(Enum):
    """Traversal state of a node during a topological sort."""

    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass(slots=True)
class NodeRecord(Generic[K]):
    """Adjacency entry for one registered node.

    The traversal mark lives next to the children so that a sort needs a
    single lookup per visit.
    """

    key: K
    mark: NodeMark = NodeMark.UNVISITED
    children: list[K] = field(default_factory=list)


class Graph(Generic[K]):
    """A directed graph of caller-owned keys, sortable from any root.

    Edges are added one at a time with :meth:`add_child`. An edge
    ``parent -> child`` means "child must come before parent" in the sorted
    output. Keys are stored by reference and never copied.

    Every key that is used as a child must also be registered as a node
    (``add_child(key)`` with no child), otherwise sorting through it raises
    :class:`UnknownNodeError`.

    Args:
        identity: Optional function mapping a key to a hashable identity.
            Needed for key types that are not hashable themselves. Defaults
            to using the key as-is.

    Example:
        >>> graph = Graph[str]()
        >>> graph.add_child("app", "lib")
        >>> graph.add_child("lib")
        >>> graph.topological_sort("app")
        ['lib', 'app']

    """

    __slots__ = ("_identity", "_index", "_records")

    def __init__(self, identity: Callable[[K], Hashable] | None = None) -> None:
        self._identity = identity
        # Records live in an arena; the index maps identities to arena slots.
        self._records: list[NodeRecord[K]] = []
        self._index: dict[Hashable, int] = {}

    def _identify(self, key: K) -> Hashable:
        if self._identity is None:
            return key  # type: ignore[return-value]
        return self._identity(key)

    def _get_or_put(self, node: K) -> NodeRecord[K]:
        identity = self._identify(node)
        slot = self._index.get(identity)
        if slot is not None:
            return self._records[slot]

        logger.debug(f"Registering node '{node}'")
        self._index[identity] = len(self._records)
        record = NodeRecord(key=node)
        self._records.append(record)
        return record

    def _lookup(self, node: K, parent: K | None = None) -> int:
        slot = self._index.get(self._identify(node))
        if slot is None:
            raise UnknownNodeError(node, parent)
        return slot

    def add_child(self, node: K, child: K | None = None) -> None:
        """Register ``node`` and optionally append ``child`` to its children.

        Pass ``child=None`` to register a node without children (leaves must
        be registered this way). Children are kept in call order and are not
        deduplicated. No record is created for ``child``.

        Args:
            node: The parent node, created if absent.
            child: The node that ``node`` depends on, or None.

        """
        record = self._get_or_put(node)
        if child is not None:
            record.children.append(child)

    def add_node(self, node: K) -> None:
        """Register ``node`` without adding any edge."""
        self._get_or_put(node)

    def topological_sort(self, root: K, into: list[K] | None = None) -> list[K]:
        """Sort the subgraph reachable from ``root``, dependencies first.

        Depth-first search with three-colour marking. A node is emitted once
        all of its children have been emitted, so every node comes after the
        nodes it depends on. Nodes not reachable from ``root`` are absent.

        Args:
            root: Node to start from.
            into: Optional caller-owned list to append the result to.

        Returns:
            ``into`` (or a new list) holding the reachable nodes in order.

        Raises:
            CycleError: If a cycle is reachable from ``root``. Marks are left
                in a mixed state until the next sort.
            UnknownNodeError: If ``root`` or a reachable child was never
                registered.

        """
        order: list[K] = [] if into is None else into

        for record in self._records:
            record.mark = NodeMark.UNVISITED

        root_slot = self._lookup(root)
        self._visit(root_slot, root, order)

        logger.debug(f"Sorted {len(order)} node(s) from '{root}'")
        return order

    def topological_order(self, into: list[K] | None = None) -> list[K]:
        """Sort every registered node, dependencies first.

        Marks are reset once and each unvisited node is used as a root in
        registration order, so every node is walked exactly once.

        Args:
            into: Optional caller-owned list to append the result to.

        Returns:
            ``into`` (or a new list) holding all registered nodes in order.

        Raises:
            CycleError: If the graph contains a cycle.
            UnknownNodeError: If a child was never registered.

        """
        order: list[K] = [] if into is None else into

        for record in self._records:
            record.mark = NodeMark.UNVISITED

        for slot, record in enumerate(self._records):
            if record.mark is NodeMark.UNVISITED:
                self._visit(slot, record.key, order)

        logger.debug(f"Sorted all {len(self._records)} node(s)")
        return order

    def _visit(self, slot: int, node: K, order: list[K]) -> None:
        # Explicit stack of (slot, key as reached, next child position).
        self._records[slot].mark = NodeMark.IN_PROGRESS
        stack: list[tuple[int, K, int]] = [(slot, node, 0)]

        while stack:
            current_slot, current, position = stack[-1]
            record = self._records[current_slot]

            if position == len(record.children):
                stack.pop()
                record.mark = NodeMark.DONE
                order.append(current)
                continue

            stack[-1] = (current_slot, current, position + 1)
            child = record.children[position]
            child_slot = self._lookup(child, parent=current)
            child_record = self._records[child_slot]

            match child_record.mark:
                case NodeMark.UNVISITED:
                    child_record.mark = NodeMark.IN_PROGRESS
                    stack.append((child_slot, child, 0))
                case NodeMark.IN_PROGRESS:
                    start = next(i for i, entry in enumerate(stack) if entry[0] == child_slot)
                    cycle = [entry[1] for entry in stack[start:]]
                    cycle.append(child)
                    raise CycleError(cycle)
                case NodeMark.DONE:
                    pass

    def clear(self) -> None:
        """Drop every node record and edge. Keys themselves are untouched."""
        self._records.clear()
        self._index.clear()

    @property
    def nodes(self) -> list[K]:
        """Registered nodes in registration order."""
        return [record.key for record in self._records]

    def children(self, node: K) -> tuple[K, ...]:
        """Get the children of ``node`` in insertion order.

        Raises:
            UnknownNodeError: If ``node`` is not registered.

        """
        return tuple(self._records[self._lookup(node)].children)

    def mark(self, node: K) -> NodeMark:
        """Get the traversal mark left on ``node`` by the last sort."""
        return self._records[self._lookup(node)].mark

    def __len__(self) -> int:
        """Return the number of registered nodes."""
        return len(self._records)

    def __contains__(self, node: object) -> bool:
        """Check if a node is registered.

        Objects the identity function cannot handle are reported as absent.
        """
        try:
            identity = self._identify(node)  # type: ignore[arg-type]
        except (AttributeError, TypeError):
            return False
        return identity in self._index

    def __iter__(self) -> Iterator[K]:
        """Iterate over registered nodes in registration order."""
        return iter(self.nodes)
