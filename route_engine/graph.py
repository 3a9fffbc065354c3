from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from .errors import InvalidWeightError, MalformedGraphError


@dataclass(frozen=True)
class Edge:
    neighbor: Hashable
    weight: float


def _coerce_weight(raw: object, *, source: Hashable, neighbor: Hashable) -> float:
    details = {"source": source, "neighbor": neighbor, "weight": repr(raw)}
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise InvalidWeightError(message=f"edge {source!r}->{neighbor!r} has a non-numeric weight", details=details)
    weight = float(raw)
    if not math.isfinite(weight):
        raise InvalidWeightError(message=f"edge {source!r}->{neighbor!r} has a non-finite weight", details=details)
    if weight < 0.0:
        raise InvalidWeightError(message=f"edge {source!r}->{neighbor!r} has a negative weight", details=details)
    return weight


def _coerce_edge(source: Hashable, raw: Edge | Sequence[Any]) -> Edge:
    if isinstance(raw, Edge):
        neighbor, weight = raw.neighbor, raw.weight
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        neighbor, weight = raw
    else:
        raise MalformedGraphError(
            message=f"out-edge of {source!r} must be (neighbor, weight), got {raw!r}",
            details={"source": source, "edge": repr(raw)},
        )
    return Edge(neighbor=neighbor, weight=_coerce_weight(weight, source=source, neighbor=neighbor))


@dataclass(frozen=True)
class Graph:
    """Weighted directed graph handed to the shortest-path engine.

    ``edges`` maps a node to its out-edges in the order they were given. A node
    without an entry simply has no out-edges. Edge endpoints that are missing
    from ``nodes`` are kept as-is; the engine treats them as ordinary
    unvisited vertices. Weights are checked once here, so every graph that
    exists satisfies the non-negative precondition of the search.
    """

    nodes: frozenset[Hashable]
    edges: Mapping[Hashable, tuple[Edge, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized: dict[Hashable, tuple[Edge, ...]] = {}
        for source, out in self.edges.items():
            normalized[source] = tuple(_coerce_edge(source, raw) for raw in out)
        object.__setattr__(self, "nodes", frozenset(self.nodes))
        object.__setattr__(self, "edges", MappingProxyType(normalized))

    @classmethod
    def from_adjacency(
        cls,
        adjacency: Mapping[Hashable, Iterable[Edge | Sequence[Any]]],
        nodes: Iterable[Hashable] | None = None,
    ) -> Graph:
        edges = {source: tuple(out) for source, out in adjacency.items()}
        if nodes is None:
            seen: set[Hashable] = set(edges)
            for out in edges.values():
                for raw in out:
                    if isinstance(raw, Edge):
                        seen.add(raw.neighbor)
                    elif isinstance(raw, (list, tuple)) and raw:
                        seen.add(raw[0])
            nodes = seen
        return cls(nodes=frozenset(nodes), edges=edges)

    @classmethod
    def from_edge_list(
        cls,
        rows: Iterable[Sequence[Any]],
        nodes: Iterable[Hashable] | None = None,
        *,
        bidirectional: bool = False,
    ) -> Graph:
        adjacency: dict[Hashable, list[tuple[Hashable, Any]]] = {}
        seen: set[Hashable] = set()
        for idx, row in enumerate(rows):
            if not isinstance(row, (list, tuple)) or len(row) != 3:
                raise MalformedGraphError(
                    message=f"edge row #{idx} must be (source, target, weight), got {row!r}",
                    details={"edge_index": idx, "edge": repr(row)},
                )
            source, target, weight = row
            adjacency.setdefault(source, []).append((target, weight))
            seen.update((source, target))
            if bidirectional:
                adjacency.setdefault(target, []).append((source, weight))
        if nodes is not None:
            seen = set(nodes)
        return cls(nodes=frozenset(seen), edges=adjacency)

    def out_edges(self, node: Hashable) -> tuple[Edge, ...]:
        return self.edges.get(node, ())

    @property
    def edge_count(self) -> int:
        return sum(len(out) for out in self.edges.values())

    def edge_weight(self, source: Hashable, target: Hashable) -> float | None:
        weights = [edge.weight for edge in self.out_edges(source) if edge.neighbor == target]
        return min(weights) if weights else None

    def path_cost(self, path: Sequence[Hashable]) -> float:
        if not path:
            return math.inf
        total = 0.0
        for src, dst in zip(path, path[1:]):
            weight = self.edge_weight(src, dst)
            if weight is None:
                return math.inf
            total += weight
        return total
