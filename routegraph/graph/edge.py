"""Directed, weighted edge between two vertices of a road network."""

from collections.abc import Hashable


class Edge:
    """A directed connection from its owning vertex to ``destination``.

    The edge stores the destination vertex *id* rather than the vertex
    object, so removing a vertex from the graph can never leave an edge
    pointing at freed state. ``two_way`` is metadata only: the graph does not
    insert the reverse edge for you.

    Everything except ``blocked`` is fixed at construction.
    """

    __slots__ = ("_blocked", "_destination", "_id", "_name", "_two_way", "_weight")

    def __init__(
        self,
        destination: Hashable,
        weight: float,
        two_way: bool = False,
        name: str = "",
        edge_id: Hashable = None,
        blocked: bool = False,
    ):
        self._destination = destination
        self._weight = float(weight)
        self._two_way = two_way
        self._name = name
        self._id = edge_id
        self._blocked = blocked

    @property
    def destination(self) -> Hashable:
        """Id of the vertex this edge points at."""
        return self._destination

    @property
    def weight(self) -> float:
        return self._weight

    @property
    def two_way(self) -> bool:
        return self._two_way

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> Hashable:
        return self._id

    @property
    def blocked(self) -> bool:
        """Whether the edge is impassable for weighted routing."""
        return self._blocked

    def set_blocked(self, blocked: bool) -> None:
        """Mark the edge as blocked (impassable) or open.

        Args:
            blocked: New value of the blocked flag
        """
        self._blocked = blocked

    def copy(self) -> "Edge":
        """Return an independent copy of this edge."""
        return Edge(
            self._destination,
            self._weight,
            self._two_way,
            self._name,
            self._id,
            self._blocked,
        )

    def __repr__(self) -> str:
        return (
            f"Edge(destination={self._destination!r}, weight={self._weight}, "
            f"name={self._name!r}, id={self._id!r}, two_way={self._two_way}, "
            f"blocked={self._blocked})"
        )
