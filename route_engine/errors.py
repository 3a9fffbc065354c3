from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

FROZEN_REASON_CODES: frozenset[str] = frozenset(
    {
        "invalid_weight",
        "malformed_graph",
        "graph_asset_unavailable",
    }
)


@dataclass
class GraphDataError(ValueError):
    reason_code: str
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class InvalidWeightError(GraphDataError):
    """Edge weight that breaks the non-negative precondition of Dijkstra."""

    reason_code: str = field(default="invalid_weight")
    message: str = field(default="edge weight must be a finite non-negative number")


@dataclass
class MalformedGraphError(GraphDataError):
    reason_code: str = field(default="malformed_graph")
    message: str = field(default="graph document is malformed")


@dataclass
class GraphAssetUnavailableError(GraphDataError):
    reason_code: str = field(default="graph_asset_unavailable")
    message: str = field(default="graph asset not found")


def normalize_reason_code(reason_code: str, *, default: str = "malformed_graph") -> str:
    code = str(reason_code or "").strip()
    if code in FROZEN_REASON_CODES:
        return code
    return default
