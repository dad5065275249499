"""Errors raised by graph construction and traversal."""

from collections.abc import Sequence
from typing import Any


class GraphError(Exception):
    """Base class for dagsort graph errors."""


class CycleError(GraphError):
    """Raised when a topological sort walks back into a node still in progress.

    Attributes:
        cycle: The offending path, starting and ending with the same node
            (e.g. ``["a", "b", "a"]``).

    """

    def __init__(self, cycle: Sequence[Any]) -> None:
        self.cycle = list(cycle)
        path = " -> ".join(str(node) for node in self.cycle)
        super().__init__(f"Cycle detected: {path}")


class UnknownNodeError(GraphError, KeyError):
    """Raised when a key is used as a node without having been registered.

    Every key that appears as a sort root or as somebody's child must also be
    registered with ``add_child(key)`` (or ``add_node(key)``).
    """

    def __init__(self, node: Any, parent: Any = None) -> None:
        self.node = node
        self.parent = parent
        if parent is None:
            msg = f"Node '{node}' is not registered in the graph"
        else:
            msg = f"Node '{node}' (child of '{parent}') is not registered in the graph"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])
