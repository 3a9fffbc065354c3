from __future__ import annotations

import logging
import time

from fastapi import FastAPI, HTTPException

from .engine import ShortestPathEngine
from .errors import GraphDataError
from .graph import Graph
from .graph_loader import load_default_graph
from .logging_utils import log_event
from .metrics_store import metrics_snapshot
from .models import GraphIn, NodeId, PathRequest, PathResponse, PathStats

app = FastAPI(title="Route Engine", version="0.1.0")

ENGINE = ShortestPathEngine()


def _graph_from_payload(payload: GraphIn) -> Graph:
    rows = []
    for edge in payload.edges:
        rows.append((edge.source, edge.target, edge.weight))
        if not edge.oneway:
            rows.append((edge.target, edge.source, edge.weight))
    return Graph.from_edge_list(rows, nodes=payload.nodes or None)


def _resolve_query(req: PathRequest) -> tuple[Graph, NodeId, NodeId]:
    if req.graph is not None:
        return _graph_from_payload(req.graph), req.start, req.end
    graph = load_default_graph()
    if graph is None:
        raise HTTPException(status_code=503, detail="no graph in request and GRAPH_ASSET_PATH is not set")
    # File graphs carry string ids.
    return graph, str(req.start), str(req.end)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics")
async def metrics() -> dict[str, object]:
    return metrics_snapshot()


@app.post("/path", response_model=PathResponse)
def find_path(req: PathRequest) -> PathResponse:
    t0 = time.perf_counter()
    try:
        graph, start, end = _resolve_query(req)
        result, stats = ENGINE.find_path_with_stats(graph, start, end)
    except GraphDataError as e:
        log_event("path_request_rejected", level=logging.WARNING, reason_code=e.reason_code, error=str(e))
        raise HTTPException(
            status_code=422,
            detail={"reason_code": e.reason_code, "message": e.message},
        ) from e

    log_event(
        "path_request",
        inline_graph=req.graph is not None,
        reachable=result.reachable,
        duration_ms=round((time.perf_counter() - t0) * 1000.0, 3),
    )
    return PathResponse(
        path=list(result.path),
        distance=result.distance if result.reachable else None,
        reachable=result.reachable,
        stats=PathStats(**stats),
    )
