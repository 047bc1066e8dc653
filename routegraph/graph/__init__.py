"""Spatial directed graph with traversal and shortest-path queries.

This package provides the Graph container (vertices with coordinates,
weighted edges with names, ids and a blocked flag) together with DFS/BFS,
topological ordering, cycle checks, unweighted and Dijkstra shortest paths,
path reconstruction, haversine distances and road network validation.
"""

from routegraph.graph.edge import Edge
from routegraph.graph.errors import (
    CycleDetectedError,
    GraphError,
    PathNotComputedError,
    VertexNotFoundError,
)
from routegraph.graph.geodesic import EARTH_RADIUS_KM, haversine_km
from routegraph.graph.graph import Graph
from routegraph.graph.shortest_path import ShortestPathTree, reconstruct_path
from routegraph.graph.validator import GraphValidator, ValidationReport
from routegraph.graph.vertex import Vertex

__all__ = [
    "EARTH_RADIUS_KM",
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
    "haversine_km",
    "reconstruct_path",
]
