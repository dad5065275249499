"""Graph module providing the sortable dependency graph.

This module contains:
- Graph[K]: A mutable directed graph built edge by edge
- NodeMark / NodeRecord: Per-node traversal state and adjacency
- CycleError / UnknownNodeError: Errors raised while sorting
"""

from ._dag import Graph, NodeMark, NodeRecord
from ._errors import CycleError, GraphError, UnknownNodeError

__all__ = ["CycleError", "Graph", "GraphError", "NodeMark", "NodeRecord", "UnknownNodeError"]
