from __future__ import annotations

import logging
import time
from collections.abc import Hashable
from dataclasses import dataclass
from math import inf
from typing import Any

from .frontier import PriorityFrontier
from .graph import Graph
from .logging_utils import log_event
from .metrics_store import record_query


@dataclass(frozen=True)
class PathResult:
    path: tuple[Hashable, ...]
    distance: float

    @property
    def reachable(self) -> bool:
        return bool(self.path)

    def as_dict(self) -> dict[str, Any]:
        return {
            "path": list(self.path),
            "distance": self.distance if self.reachable else None,
            "reachable": self.reachable,
        }


UNREACHABLE = PathResult(path=(), distance=inf)


def _empty_stats() -> dict[str, int]:
    return {
        "extracted_nodes": 0,
        "relaxed_edges": 0,
        "stale_entries": 0,
        "frontier_peak": 0,
    }


def dijkstra(
    graph: Graph,
    start: Hashable,
    end: Hashable,
    *,
    stats: dict[str, int] | None = None,
) -> PathResult:
    """Lowest-cost path from ``start`` to ``end`` over non-negative weights.

    Stops as soon as ``end`` is extracted from the frontier. Returns
    ``UNREACHABLE`` (empty path, infinite distance) when no edge sequence
    connects the two nodes. All working state is local to the call.
    """
    counters = stats if stats is not None else _empty_stats()
    for key, value in _empty_stats().items():
        counters.setdefault(key, value)

    distances: dict[Hashable, float] = {node: inf for node in graph.nodes}
    previous: dict[Hashable, Hashable | None] = {node: None for node in graph.nodes}
    distances[start] = 0.0
    previous[start] = None

    frontier = PriorityFrontier()
    frontier.insert(start, 0.0)
    counters["frontier_peak"] = max(counters["frontier_peak"], 1)

    while not frontier.is_empty():
        current, priority = frontier.extract_min()
        if priority > distances[current]:
            # Superseded by a cheaper entry that was already processed.
            counters["stale_entries"] += 1
            continue
        counters["extracted_nodes"] += 1
        if current == end:
            break

        base = distances[current]
        for edge in graph.out_edges(current):
            candidate = base + edge.weight
            if candidate < distances.get(edge.neighbor, inf):
                distances[edge.neighbor] = candidate
                previous[edge.neighbor] = current
                frontier.insert(edge.neighbor, candidate)
                counters["relaxed_edges"] += 1
        if len(frontier) > counters["frontier_peak"]:
            counters["frontier_peak"] = len(frontier)

    if end != start and previous.get(end) is None:
        return UNREACHABLE

    path: list[Hashable] = []
    node: Hashable | None = end
    while node is not None:
        path.append(node)
        if node == start:
            break
        node = previous.get(node)
    path.reverse()
    return PathResult(path=tuple(path), distance=distances[end])


class ShortestPathEngine:
    """Runs single-source shortest-path queries against caller-owned graphs.

    The engine holds no per-query state, so one instance can serve many
    threads as long as nobody mutates the graph while a query is running.
    """

    def find_path(self, graph: Graph, start: Hashable, end: Hashable) -> PathResult:
        result, _stats = self.find_path_with_stats(graph, start, end)
        return result

    def find_path_with_stats(
        self, graph: Graph, start: Hashable, end: Hashable
    ) -> tuple[PathResult, dict[str, int]]:
        stats = _empty_stats()
        t0 = time.perf_counter()
        try:
            result = dijkstra(graph, start, end, stats=stats)
        except Exception as exc:
            duration_ms = (time.perf_counter() - t0) * 1000.0
            record_query("error", duration_ms=duration_ms, extracted_nodes=stats["extracted_nodes"])
            log_event(
                "path_query_failed",
                level=logging.WARNING,
                start=str(start),
                end=str(end),
                reason_code=getattr(exc, "reason_code", type(exc).__name__),
                error=str(exc),
                duration_ms=round(duration_ms, 3),
            )
            raise
        duration_ms = (time.perf_counter() - t0) * 1000.0
        outcome = "found" if result.reachable else "unreachable"
        record_query(outcome, duration_ms=duration_ms, extracted_nodes=stats["extracted_nodes"])
        log_event(
            "path_query",
            start=str(start),
            end=str(end),
            outcome=outcome,
            hops=max(len(result.path) - 1, 0),
            distance=result.distance if result.reachable else None,
            duration_ms=round(duration_ms, 3),
            **stats,
        )
        return result, stats


_DEFAULT_ENGINE = ShortestPathEngine()


def find_path(graph: Graph, start: Hashable, end: Hashable) -> PathResult:
    return _DEFAULT_ENGINE.find_path(graph, start, end)
