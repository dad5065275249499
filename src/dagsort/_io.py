import logging
import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ._graph import Graph

logger = logging.getLogger(__name__)


class GraphFileError(Exception):
    """Error reading or validating a graph TOML file."""


class GraphDocument(BaseModel):
    """Contents of a graph TOML file.

    Each entry of the ``[nodes]`` table registers a node and lists the nodes it
    depends on, in order::

        [nodes]
        main = ["foo", "bar"]
        foo = []
        bar = []

    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    nodes: dict[str, list[str]] = Field(default_factory=dict)


def load_graph_document(path: Path | str) -> GraphDocument:
    """Load and validate a graph TOML file.

    Args:
        path: Path to the graph TOML file

    Returns:
        The validated GraphDocument

    Raises:
        GraphFileError: If the file is not valid TOML or does not match the schema

    """
    path = Path(path)

    try:
        with path.open("rb") as f:
            toml_contents = tomllib.load(f)
    except OSError as e:
        msg = f"Cannot read graph file {path}: {e}"
        raise GraphFileError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise GraphFileError(msg) from e

    try:
        document = GraphDocument.model_validate(toml_contents)
    except ValidationError as e:
        msg = f"Invalid graph file {path}: {e}"
        raise GraphFileError(msg) from e

    logger.debug(f"Loaded {len(document.nodes)} node(s) from {path}")
    return document


def build_graph(document: GraphDocument) -> Graph[str]:
    """Build a Graph from a GraphDocument, preserving file order."""
    graph = Graph[str]()
    for node, children in document.nodes.items():
        graph.add_node(node)
        for child in children:
            graph.add_child(node, child)
    return graph


def load_graph(path: Path | str) -> Graph[str]:
    """Load a graph TOML file straight into a Graph."""
    return build_graph(load_graph_document(path))


def export_order_to_toml(order: list[str], root: str, output_path: Path | str) -> None:
    """Write a sorted node list to a TOML file.

    Args:
        order: Nodes in topological order
        root: The node the sort started from
        output_path: Path to the output TOML file

    """
    output_path = Path(output_path)
    with output_path.open("wb") as f:
        tomli_w.dump({"root": root, "order": order}, f)

    logger.debug(f"Exported order to {output_path}")
