from .engine import PathResult, ShortestPathEngine, find_path
from .errors import GraphDataError, InvalidWeightError, MalformedGraphError
from .graph import Edge, Graph

__all__ = [
    "Edge",
    "Graph",
    "GraphDataError",
    "InvalidWeightError",
    "MalformedGraphError",
    "PathResult",
    "ShortestPathEngine",
    "find_path",
]
