"""Tests for reading graph files and writing sorted orders."""

import tomllib
from pathlib import Path

import pytest

from dagsort import GraphDocument, GraphFileError, build_graph, export_order_to_toml, load_graph, load_graph_document

GRAPH_TOML = """
[nodes]
foo = ["zoo"]
bar = ["baz", "foo"]
baz = ["zoo"]
fu = []
zoo = ["fu"]
main = ["foo", "bar", "baz"]
"""


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    path = tmp_path / "graph.toml"
    path.write_text(GRAPH_TOML)
    return path


def test_load_graph_document(graph_file: Path) -> None:
    document = load_graph_document(graph_file)

    assert list(document.nodes) == ["foo", "bar", "baz", "fu", "zoo", "main"]
    assert document.nodes["bar"] == ["baz", "foo"]


def test_load_graph_sorts(graph_file: Path) -> None:
    graph = load_graph(graph_file)

    assert len(graph) == 6
    assert graph.topological_sort("main") == ["fu", "zoo", "foo", "baz", "bar", "main"]


def test_build_graph_keeps_child_order() -> None:
    document = GraphDocument(nodes={"a": ["c", "b"], "b": [], "c": []})

    graph = build_graph(document)

    assert graph.children("a") == ("c", "b")
    assert graph.nodes == ["a", "b", "c"]


def test_empty_document() -> None:
    graph = build_graph(GraphDocument())
    assert len(graph) == 0


def test_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "graph.toml"
    path.write_text("invalid toml [[[")

    with pytest.raises(GraphFileError, match="Invalid TOML"):
        load_graph_document(path)


def test_invalid_schema(tmp_path: Path) -> None:
    path = tmp_path / "graph.toml"
    path.write_text('[nodes]\na = "b"\n')

    with pytest.raises(GraphFileError, match="Invalid graph file"):
        load_graph_document(path)


def test_unknown_top_level_key(tmp_path: Path) -> None:
    path = tmp_path / "graph.toml"
    path.write_text('edges = []\n[nodes]\na = []\n')

    with pytest.raises(GraphFileError, match="Invalid graph file"):
        load_graph_document(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(GraphFileError, match="Cannot read graph file"):
        load_graph_document(tmp_path / "missing.toml")


def test_export_order_to_toml(tmp_path: Path) -> None:
    output = tmp_path / "order.toml"

    export_order_to_toml(["fu", "zoo", "foo"], "foo", output)

    with output.open("rb") as f:
        data = tomllib.load(f)
    assert data == {"root": "foo", "order": ["fu", "zoo", "foo"]}
