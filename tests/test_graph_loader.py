from __future__ import annotations

import json
from pathlib import Path

import pytest

import route_engine.graph_loader as graph_loader
from route_engine.engine import find_path
from route_engine.errors import GraphAssetUnavailableError, InvalidWeightError, MalformedGraphError
from route_engine.graph import Edge
from route_engine.graph_loader import graph_from_document, load_default_graph, load_graph


def _write(tmp_path: Path, doc: object) -> Path:
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_load_graph_reads_object_and_row_edges(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "nodes": ["A", {"id": "B"}, "C", "D", 5],
            "edges": [
                {"u": "A", "v": "B", "weight": 1},
                ["B", "D", 1],
                {"source": "A", "target": "C", "cost": "4"},
                ["C", "D", 1.0, False],
            ],
        },
    )

    graph = load_graph(path)

    assert graph.nodes == frozenset({"A", "B", "C", "D", "5"})
    assert graph.out_edges("A") == (Edge("B", 1.0), Edge("C", 4.0))
    assert graph.edge_weight("D", "C") == 1.0
    assert find_path(graph, "A", "D").path == ("A", "B", "D")


def test_nodes_default_to_edge_endpoints() -> None:
    graph = graph_from_document({"edges": [[1, 2, 3]]})

    assert graph.nodes == frozenset({"1", "2"})
    assert graph.edge_weight("1", "2") == 3.0


def test_load_graph_missing_file(tmp_path: Path) -> None:
    with pytest.raises(GraphAssetUnavailableError) as exc:
        load_graph(tmp_path / "missing.json")
    assert exc.value.details is not None
    assert exc.value.details["graph_path"].endswith("missing.json")


def test_load_graph_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "graph.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(MalformedGraphError):
        load_graph(path)


@pytest.mark.parametrize(
    "doc",
    [
        [],
        {"nodes": "A", "edges": []},
        {"nodes": [None], "edges": []},
        {"edges": [["A", "B"]]},
        {"edges": [{"u": "A", "weight": 1}]},
    ],
)
def test_malformed_documents_are_rejected(doc: object) -> None:
    with pytest.raises(MalformedGraphError):
        graph_from_document(doc)


def test_malformed_edge_reports_index() -> None:
    with pytest.raises(MalformedGraphError) as exc:
        graph_from_document({"edges": [["A", "B", 1], "oops"]})
    assert exc.value.details == {"source": "<document>", "edge_index": 1}


@pytest.mark.parametrize("weight", [-2, "NaN", "heavy", True])
def test_bad_weights_raise_invalid_weight(weight: object) -> None:
    with pytest.raises(InvalidWeightError):
        graph_from_document({"edges": [["A", "B", weight]]})


def test_load_default_graph_uses_settings(monkeypatch, tmp_path: Path) -> None:
    path = _write(tmp_path, {"edges": [["A", "B", 2]]})

    monkeypatch.setattr(graph_loader.settings, "graph_asset_path", "")
    load_default_graph.cache_clear()
    try:
        assert load_default_graph() is None
        load_default_graph.cache_clear()
        monkeypatch.setattr(graph_loader.settings, "graph_asset_path", str(path))
        graph = load_default_graph()
        assert graph is not None
        assert graph.edge_weight("A", "B") == 2.0
        assert load_default_graph() is graph
    finally:
        load_default_graph.cache_clear()


def test_load_graph_directory_is_unavailable(tmp_path: Path) -> None:
    with pytest.raises(GraphAssetUnavailableError) as exc:
        load_graph(tmp_path)
    assert exc.value.reason_code == "graph_asset_unavailable"


def test_load_graph_rejects_non_utf8_bytes(tmp_path: Path) -> None:
    path = tmp_path / "graph.json"
    path.write_bytes(b'{"edges": [["A", "B", 1]], "note": "\xff\xfe"}')

    with pytest.raises(MalformedGraphError) as exc:
        load_graph(path)
    assert exc.value.reason_code == "malformed_graph"
    assert exc.value.details is not None
    assert exc.value.details["offset"] > 0


@pytest.mark.parametrize(
    ("oneway", "two_way"),
    [(True, False), (False, True), ("false", True), ("No", True), ("true", False), ("1", False), (0, True)],
)
def test_oneway_flag_accepts_bools_and_boolean_strings(oneway: object, two_way: bool) -> None:
    graph = graph_from_document({"edges": [{"u": "A", "v": "B", "weight": 1, "oneway": oneway}]})

    assert graph.edge_weight("A", "B") == 1.0
    assert (graph.edge_weight("B", "A") is not None) is two_way


@pytest.mark.parametrize("oneway", ["maybe", 2, None, [True]])
def test_unrecognised_oneway_flag_is_malformed(oneway: object) -> None:
    with pytest.raises(MalformedGraphError) as exc:
        graph_from_document({"edges": [["A", "B", 1, oneway]]})
    assert exc.value.details == {"source": "<document>", "edge_index": 0}
