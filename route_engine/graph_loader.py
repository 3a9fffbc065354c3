from __future__ import annotations

import json
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

from .errors import GraphAssetUnavailableError, MalformedGraphError
from .graph import Graph
from .logging_utils import log_event
from .settings import settings


def _parse_node(raw: object) -> str | None:
    if isinstance(raw, dict):
        raw = raw.get("id")
    if raw is None or isinstance(raw, (bool, list, dict)):
        return None
    node_id = str(raw).strip()
    return node_id or None


def _parse_weight(raw: object) -> object:
    # Numeric strings are accepted from files; everything else goes to Graph for validation.
    if isinstance(raw, str):
        try:
            return Decimal(raw.strip())
        except ArithmeticError:
            return raw
    return raw


_ONEWAY_STRINGS = {"true": True, "yes": True, "1": True, "false": False, "no": False, "0": False}


def _parse_oneway(raw: object) -> bool | None:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        return _ONEWAY_STRINGS.get(raw.strip().lower())
    return None


def _parse_edge(raw: object) -> tuple[str, str, object, bool] | None:
    if isinstance(raw, dict):
        u = raw.get("u", raw.get("source"))
        v = raw.get("v", raw.get("target"))
        weight = raw.get("weight", raw.get("cost"))
        oneway = raw.get("oneway", True)
    elif isinstance(raw, (list, tuple)) and len(raw) >= 3:
        u, v, weight = raw[0], raw[1], raw[2]
        oneway = raw[3] if len(raw) > 3 else True
    else:
        return None
    source = _parse_node(u)
    target = _parse_node(v)
    flag = _parse_oneway(oneway)
    if source is None or target is None or weight is None or flag is None:
        return None
    return source, target, _parse_weight(weight), flag


def graph_from_document(doc: object, *, source: str = "<document>") -> Graph:
    if not isinstance(doc, dict):
        raise MalformedGraphError(message=f"expected JSON object in {source}", details={"source": source})
    raw_nodes = doc.get("nodes", [])
    raw_edges = doc.get("edges", [])
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise MalformedGraphError(
            message=f"'nodes' and 'edges' must be lists in {source}",
            details={"source": source},
        )

    nodes: set[str] = set()
    for idx, raw in enumerate(raw_nodes):
        node_id = _parse_node(raw)
        if node_id is None:
            raise MalformedGraphError(
                message=f"node #{idx} has no usable id in {source}",
                details={"source": source, "node_index": idx},
            )
        nodes.add(node_id)

    rows: list[tuple[str, str, object]] = []
    for idx, raw in enumerate(raw_edges):
        parsed = _parse_edge(raw)
        if parsed is None:
            raise MalformedGraphError(
                message=f"edge #{idx} is malformed in {source}",
                details={"source": source, "edge_index": idx},
            )
        u, v, weight, oneway = parsed
        rows.append((u, v, weight))
        if not oneway:
            rows.append((v, u, weight))
        if not raw_nodes:
            nodes.update((u, v))

    adjacency: dict[str, list[tuple[str, object]]] = {}
    for u, v, weight in rows:
        adjacency.setdefault(u, []).append((v, weight))
    return Graph(nodes=frozenset(nodes), edges=adjacency)


def load_graph(path: str | Path) -> Graph:
    graph_path = Path(path)
    if not graph_path.is_file():
        raise GraphAssetUnavailableError(
            message=f"graph file not found: {graph_path}",
            details={"graph_path": str(graph_path)},
        )
    try:
        text = graph_path.read_text(encoding="utf-8")
    except OSError as e:
        raise GraphAssetUnavailableError(
            message=f"graph file not readable: {graph_path}",
            details={"graph_path": str(graph_path), "error": str(e)},
        ) from e
    except UnicodeDecodeError as e:
        raise MalformedGraphError(
            message=f"graph file is not UTF-8: {graph_path}",
            details={"graph_path": str(graph_path), "offset": e.start},
        ) from e
    try:
        doc: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedGraphError(
            message=f"invalid JSON file: {graph_path}",
            details={"graph_path": str(graph_path), "line": e.lineno},
        ) from e
    graph = graph_from_document(doc, source=str(graph_path))
    log_event(
        "graph_loaded",
        graph_path=str(graph_path),
        node_count=len(graph.nodes),
        edge_count=graph.edge_count,
    )
    return graph


@lru_cache(maxsize=1)
def load_default_graph() -> Graph | None:
    explicit = (settings.graph_asset_path or "").strip()
    if not explicit:
        return None
    return load_graph(explicit)
