"""Directed spatial graph container.

The Graph owns its vertices (in insertion order) and each vertex owns its
outgoing edges. Vertices are addressed by caller-chosen hashable ids through
an id -> position index, so lookups are O(1). Traversal and shortest-path
queries are delegated to :mod:`routegraph.graph.traversal` and
:mod:`routegraph.graph.shortest_path`.
"""

from collections.abc import Hashable
from typing import TYPE_CHECKING

import structlog

from routegraph.graph import shortest_path, traversal
from routegraph.graph.errors import PathNotComputedError, VertexNotFoundError
from routegraph.graph.geodesic import EARTH_RADIUS_KM, haversine_km
from routegraph.graph.shortest_path import ShortestPathTree, reconstruct_path
from routegraph.graph.vertex import Vertex

if TYPE_CHECKING:
    from routegraph.config import GeodesicConfig

logger = structlog.get_logger(__name__)


class Graph:
    """In-memory directed graph of a road network.

    Mutations report failure through their boolean result; lookups return
    ``None`` (or ``-1`` for positions) when an id is absent.

    Thread-safety:
        Queries keep their working state in per-call objects and may run
        side by side on a graph that is not being mutated. Mutations are
        NOT thread-safe and must be serialized externally. ``get_path``
        reads the most recent search, which is shared per graph.

    Example:
        >>> graph = Graph()
        >>> graph.add_vertex("A", "Praca", -8.61, 41.14)
        True
        >>> graph.add_vertex("B", "Avenida", -8.60, 41.15)
        True
        >>> graph.add_edge("A", "B", 1.3, name="Rua Nova", edge_id="e1")
        True
        >>> tree = graph.dijkstra_shortest_path("A")
        >>> graph.get_path("A", "B")
        ['A', 'B']
    """

    def __init__(self, earth_radius_km: float = EARTH_RADIUS_KM):
        """Initialize an empty graph.

        Args:
            earth_radius_km: Sphere radius used by :meth:`calculate_dist`
        """
        self._vertices: list[Vertex] = []
        self._index: dict[Hashable, int] = {}
        self._earth_radius_km = earth_radius_km
        self._last_search: ShortestPathTree | None = None

        logger.debug("graph_initialized", earth_radius_km=earth_radius_km)

    @classmethod
    def from_config(cls, config: "GeodesicConfig") -> "Graph":
        """Create an empty graph using geodesic settings from configuration."""
        return cls(earth_radius_km=config.earth_radius_km)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def vertices(self) -> tuple[Vertex, ...]:
        """All vertices in insertion order."""
        return tuple(self._vertices)

    @property
    def num_vertices(self) -> int:
        return len(self._vertices)

    @property
    def num_edges(self) -> int:
        return sum(vertex.out_degree for vertex in self._vertices)

    @property
    def last_search(self) -> ShortestPathTree | None:
        """Tree produced by the most recent shortest-path search, if any."""
        return self._last_search

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id: Hashable) -> bool:
        return vertex_id in self._index

    def find_vertex(self, vertex_id: Hashable) -> Vertex | None:
        """Return the vertex with ``vertex_id``, or None if absent."""
        position = self._index.get(vertex_id)
        if position is None:
            return None
        return self._vertices[position]

    def get_vertex(self, vertex_id: Hashable) -> Vertex | None:
        """Return the vertex with ``vertex_id``, or None if absent."""
        return self.find_vertex(vertex_id)

    def get_index(self, vertex_id: Hashable) -> int:
        """Return the insertion position of ``vertex_id``, or -1 if absent."""
        return self._index.get(vertex_id, -1)

    def require_vertex(self, vertex_id: Hashable) -> Vertex:
        """Return the vertex with ``vertex_id``.

        Raises:
            VertexNotFoundError: If the vertex is not in the graph
        """
        vertex = self.find_vertex(vertex_id)
        if vertex is None:
            logger.error("vertex_not_found", vertex_id=vertex_id)
            raise VertexNotFoundError(vertex_id)
        return vertex

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_vertex(
        self,
        vertex_id: Hashable,
        name: str = "",
        longitude: float = 0.0,
        latitude: float = 0.0,
    ) -> bool:
        """Add a vertex.

        Args:
            vertex_id: Unique vertex identifier
            name: Display name
            longitude: Longitude in decimal degrees
            latitude: Latitude in decimal degrees

        Returns:
            True if inserted, False if a vertex with ``vertex_id`` already exists
        """
        if vertex_id in self._index:
            logger.debug("vertex_already_exists", vertex_id=vertex_id)
            return False

        self._index[vertex_id] = len(self._vertices)
        self._vertices.append(Vertex(vertex_id, name, longitude, latitude))

        logger.debug("vertex_added", vertex_id=vertex_id, name=name)
        return True

    def remove_vertex(self, vertex_id: Hashable) -> bool:
        """Remove a vertex together with every edge pointing at it.

        The most recent search is discarded, so :meth:`get_path` raises
        PathNotComputedError until a new search is run.

        Args:
            vertex_id: Id of the vertex to remove

        Returns:
            True if removed, False if no such vertex exists
        """
        position = self._index.get(vertex_id)
        if position is None:
            logger.debug("remove_vertex_not_found", vertex_id=vertex_id)
            return False

        del self._vertices[position]
        stripped = sum(vertex.remove_all_edges_to(vertex_id) for vertex in self._vertices)
        self._index = {vertex.id: i for i, vertex in enumerate(self._vertices)}
        self._last_search = None

        logger.debug("vertex_removed", vertex_id=vertex_id, incoming_edges_removed=stripped)
        return True

    def add_edge(
        self,
        source_id: Hashable,
        dest_id: Hashable,
        weight: float,
        two_way: bool = False,
        name: str = "",
        edge_id: Hashable = None,
        blocked: bool = False,
    ) -> bool:
        """Add a directed edge from ``source_id`` to ``dest_id``.

        ``two_way`` is recorded on the edge only; add the reverse edge
        yourself for bidirectional connectivity.

        Args:
            source_id: Id of the source vertex
            dest_id: Id of the destination vertex
            weight: Edge weight
            two_way: Bidirectional-road metadata flag
            name: Road name
            edge_id: Edge identifier (need not be unique)
            blocked: Initial blocked flag

        Returns:
            True if added, False if either endpoint is absent
        """
        source = self.find_vertex(source_id)
        if source is None or dest_id not in self._index:
            logger.debug(
                "add_edge_endpoint_missing",
                source_id=source_id,
                dest_id=dest_id,
            )
            return False

        source.add_edge(dest_id, weight, two_way, name, edge_id, blocked)
        logger.debug(
            "edge_added",
            source_id=source_id,
            dest_id=dest_id,
            weight=weight,
            edge_id=edge_id,
        )
        return True

    def remove_edge(self, source_id: Hashable, dest_id: Hashable) -> bool:
        """Remove one edge from ``source_id`` to ``dest_id``.

        Returns:
            True if an edge was removed; False if either endpoint is absent
            or no such edge exists
        """
        source = self.find_vertex(source_id)
        if source is None or dest_id not in self._index:
            logger.debug(
                "remove_edge_endpoint_missing",
                source_id=source_id,
                dest_id=dest_id,
            )
            return False

        removed = source.remove_edge_to(dest_id)
        logger.debug("edge_removed", source_id=source_id, dest_id=dest_id, removed=removed)
        return removed

    def set_edge_blocked(self, edge_id: Hashable, blocked: bool) -> int:
        """Set the blocked flag on every edge whose id equals ``edge_id``.

        Args:
            edge_id: Edge identifier to match
            blocked: New flag value

        Returns:
            Number of edges updated
        """
        updated = 0
        for vertex in self._vertices:
            for edge in vertex.adjacent:
                if edge.id == edge_id:
                    edge.set_blocked(blocked)
                    updated += 1

        if updated:
            logger.info("edges_blocked_updated", edge_id=edge_id, blocked=blocked, count=updated)
        else:
            logger.warning("set_edge_blocked_no_match", edge_id=edge_id)
        return updated

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def dfs(self) -> list[Hashable]:
        """Depth-first order covering every vertex. See :func:`traversal.dfs`."""
        return traversal.dfs(self)

    def bfs(self, source: Hashable) -> list[Hashable]:
        """Breadth-first order from ``source``. See :func:`traversal.bfs`."""
        return traversal.bfs(self, source)

    def topsort(self) -> list[Hashable]:
        """Topological order.

        Raises:
            CycleDetectedError: If the graph has a directed cycle
        """
        return traversal.topsort(self)

    def is_dag(self) -> bool:
        return traversal.is_dag(self)

    def find_cycle(self) -> list[Hashable] | None:
        return traversal.find_cycle(self)

    def max_new_children(self, source: Hashable) -> tuple[int, Hashable]:
        """Vertex discovering the most new vertices in a BFS from ``source``.

        Returns:
            ``(count, vertex_id)``; ``(0, source)`` if nothing is discovered
        """
        return traversal.max_new_children(self, source)

    # ------------------------------------------------------------------
    # Shortest paths
    # ------------------------------------------------------------------

    def unweighted_shortest_path(self, source: Hashable) -> ShortestPathTree:
        """Hop-count shortest paths from ``source``; remembered for :meth:`get_path`.

        Raises:
            VertexNotFoundError: If ``source`` is not in the graph
        """
        self._last_search = shortest_path.unweighted_shortest_path(self, source)
        return self._last_search

    def dijkstra_shortest_path(self, source: Hashable) -> ShortestPathTree:
        """Weighted shortest paths from ``source`` skipping blocked edges.

        The tree is remembered for :meth:`get_path`.

        Raises:
            VertexNotFoundError: If ``source`` is not in the graph
        """
        self._last_search = shortest_path.dijkstra_shortest_path(self, source)
        return self._last_search

    def get_path(self, origin: Hashable, destination: Hashable) -> list[Hashable]:
        """Reconstruct a path from the most recent shortest-path search.

        Run a search with ``source == origin`` first. The result is not
        validated against ``origin``: if the last search used another source,
        or ``destination`` was unreachable, the path ends at whatever root
        that search used (``[destination]`` when unreached).

        Args:
            origin: Id the path is expected to start at
            destination: Id the path ends at

        Returns:
            Vertex ids along the path

        Raises:
            PathNotComputedError: If no search has been run on this graph
            VertexNotFoundError: If ``destination`` is not in the graph
        """
        if self._last_search is None:
            logger.error("get_path_without_search", origin=origin, destination=destination)
            raise PathNotComputedError
        self.require_vertex(destination)

        if self._last_search.source != origin:
            logger.warning(
                "get_path_origin_mismatch",
                origin=origin,
                search_source=self._last_search.source,
            )
        return reconstruct_path(self._last_search.predecessor, origin, destination)

    # ------------------------------------------------------------------
    # Geography and metadata
    # ------------------------------------------------------------------

    def calculate_dist(self, id1: Hashable, id2: Hashable) -> float:
        """Great-circle distance in kilometers between two vertices.

        Raises:
            VertexNotFoundError: If either vertex is not in the graph
        """
        first = self.require_vertex(id1)
        second = self.require_vertex(id2)
        return haversine_km(
            first.latitude,
            first.longitude,
            second.latitude,
            second.longitude,
            radius_km=self._earth_radius_km,
        )

    def get_edges_names(self) -> list[str]:
        """Distinct non-empty edge names, sorted."""
        return sorted({edge.name for vertex in self._vertices for edge in vertex.adjacent if edge.name})

    def get_stats(self) -> dict[str, int]:
        """Get statistics about the current graph.

        Returns:
            Dictionary with:
                - total_vertices: Number of vertices
                - total_edges: Number of directed edges
                - blocked_edges: Edges currently blocked
                - two_way_edges: Edges flagged as two-way
        """
        edges = [edge for vertex in self._vertices for edge in vertex.adjacent]
        stats = {
            "total_vertices": len(self._vertices),
            "total_edges": len(edges),
            "blocked_edges": sum(1 for edge in edges if edge.blocked),
            "two_way_edges": sum(1 for edge in edges if edge.two_way),
        }

        logger.debug("graph_stats_retrieved", **stats)

        return stats

    def copy(self) -> "Graph":
        """Create a deep copy of the graph structure.

        Returns:
            A new Graph with copied vertices and edges

        Note:
            The copy does not carry the most recent search; run a new search
            on the copy before calling :meth:`get_path` on it.
        """
        new_graph = Graph(earth_radius_km=self._earth_radius_km)
        new_graph._vertices = [vertex.copy() for vertex in self._vertices]
        new_graph._index = dict(self._index)

        logger.debug("graph_copied", vertex_count=len(self._vertices))

        return new_graph
