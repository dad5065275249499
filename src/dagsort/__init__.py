"""Dependency graphs with depth-first topological sorting."""

__all__ = [
    "CycleError",
    "Graph",
    "GraphDocument",
    "GraphError",
    "GraphFileError",
    "NodeMark",
    "NodeRecord",
    "UnknownNodeError",
    "build_graph",
    "export_order_to_toml",
    "load_graph",
    "load_graph_document",
]

from ._graph import CycleError, Graph, GraphError, NodeMark, NodeRecord, UnknownNodeError
from ._io import GraphDocument, GraphFileError, build_graph, export_order_to_toml, load_graph, load_graph_document
