from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator

NodeId = str | int


class EdgeIn(BaseModel):
    source: NodeId
    target: NodeId
    weight: float = Field(..., ge=0)
    oneway: bool = True

    @field_validator("weight")
    @classmethod
    def finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("weight must be finite")
        return v


class GraphIn(BaseModel):
    """Graph sent inline with a request. ``nodes`` defaults to every edge endpoint."""

    nodes: list[NodeId] = Field(default_factory=list)
    edges: list[EdgeIn] = Field(default_factory=list)


class PathRequest(BaseModel):
    graph: GraphIn | None = None
    start: NodeId
    end: NodeId


class PathStats(BaseModel):
    extracted_nodes: int = 0
    relaxed_edges: int = 0
    stale_entries: int = 0
    frontier_peak: int = 0


class PathResponse(BaseModel):
    path: list[NodeId]
    distance: float | None = None
    reachable: bool
    stats: PathStats = Field(default_factory=PathStats)
