"""routegraph - in-memory routing graph for spatial road networks."""

from routegraph.graph import (
    CycleDetectedError,
    Edge,
    Graph,
    GraphError,
    GraphValidator,
    PathNotComputedError,
    ShortestPathTree,
    ValidationReport,
    Vertex,
    VertexNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "CycleDetectedError",
    "Edge",
    "Graph",
    "GraphError",
    "GraphValidator",
    "PathNotComputedError",
    "ShortestPathTree",
    "ValidationReport",
    "Vertex",
    "VertexNotFoundError",
]
