"""Exceptions raised by graph queries.

Mutations report failure through their boolean result and lookups return
``None`` / ``-1``; the exceptions below are reserved for queries whose
arguments must resolve to something that exists.
"""

from collections.abc import Hashable, Iterable


class GraphError(Exception):
    """Base class for all graph query errors."""

    def __init__(self, message: str):
        """Initialize the exception with a descriptive message.

        Args:
            message: Description of the error
        """
        super().__init__(message)
        self.message = message


class VertexNotFoundError(GraphError):
    """Raised when a query names a vertex id that is not in the graph."""

    def __init__(self, vertex_id: Hashable):
        super().__init__(f"Vertex not found: {vertex_id!r}")
        self.vertex_id = vertex_id


class CycleDetectedError(GraphError):
    """Exception raised when a topological order is requested for a cyclic graph.

    A cycle means that some vertices can never reach indegree zero, making it
    impossible to order them. ``unordered`` holds the ids of those vertices in
    graph insertion order.
    """

    def __init__(self, unordered: Iterable[Hashable]):
        self.unordered = list(unordered)
        super().__init__(
            f"Cycle detected: {len(self.unordered)} vertices cannot be ordered",
        )


class PathNotComputedError(GraphError):
    """Raised when a path is requested before any shortest-path search ran."""

    def __init__(self) -> None:
        super().__init__(
            "No shortest-path search has been run on this graph; "
            "call unweighted_shortest_path() or dijkstra_shortest_path() first",
        )
