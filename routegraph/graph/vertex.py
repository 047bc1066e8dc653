"""Vertex of a spatial graph: an intersection with coordinates and outgoing edges."""

from collections.abc import Hashable

import structlog

from routegraph.graph.edge import Edge

logger = structlog.get_logger(__name__)


class Vertex:
    """A point of the network with its ordered list of outgoing edges.

    Attributes:
        id: Identifier, unique within the owning graph
        name: Display name (settable)
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
    """

    def __init__(
        self,
        vertex_id: Hashable,
        name: str = "",
        longitude: float = 0.0,
        latitude: float = 0.0,
    ):
        self.id = vertex_id
        self.name = name
        self.longitude = float(longitude)
        self.latitude = float(latitude)
        self._outgoing: list[Edge] = []

    @property
    def adjacent(self) -> tuple[Edge, ...]:
        """Outgoing edges in insertion order."""
        return tuple(self._outgoing)

    @property
    def out_degree(self) -> int:
        return len(self._outgoing)

    def add_edge(
        self,
        destination: Hashable,
        weight: float,
        two_way: bool = False,
        name: str = "",
        edge_id: Hashable = None,
        blocked: bool = False,
    ) -> Edge:
        """Append an outgoing edge to ``destination``.

        No uniqueness or self-loop check is made; parallel edges are kept.

        Args:
            destination: Id of the destination vertex
            weight: Edge weight (distance, travel time, ...)
            two_way: Metadata flag for conceptually bidirectional roads
            name: Street or road name, may be empty
            edge_id: Edge identifier, not required to be unique
            blocked: Initial blocked flag

        Returns:
            The newly created edge
        """
        edge = Edge(destination, weight, two_way, name, edge_id, blocked)
        self._outgoing.append(edge)
        return edge

    def remove_edge_to(self, destination: Hashable) -> bool:
        """Remove the first outgoing edge pointing at ``destination``.

        Only one edge is removed per call, even when parallel edges exist.

        Args:
            destination: Id of the destination vertex

        Returns:
            True if an edge was found and removed, False otherwise
        """
        for position, edge in enumerate(self._outgoing):
            if edge.destination == destination:
                del self._outgoing[position]
                return True
        return False

    def remove_all_edges_to(self, destination: Hashable) -> int:
        """Remove every outgoing edge pointing at ``destination``.

        Returns:
            Number of edges removed
        """
        before = len(self._outgoing)
        self._outgoing = [e for e in self._outgoing if e.destination != destination]
        removed = before - len(self._outgoing)
        if removed:
            logger.debug(
                "edges_to_vertex_stripped",
                vertex_id=self.id,
                destination=destination,
                removed=removed,
            )
        return removed

    def copy(self) -> "Vertex":
        """Return a copy with independent edge objects."""
        clone = Vertex(self.id, self.name, self.longitude, self.latitude)
        clone._outgoing = [edge.copy() for edge in self._outgoing]
        return clone

    def __repr__(self) -> str:
        return (
            f"Vertex(id={self.id!r}, name={self.name!r}, "
            f"lat={self.latitude}, lon={self.longitude}, out_degree={self.out_degree})"
        )
