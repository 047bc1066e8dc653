"""Single-source shortest paths and path reconstruction.

Each search returns a :class:`ShortestPathTree` holding the distances and
predecessors it computed. Nothing is written onto the vertices, so trees from
different searches can be kept and queried side by side.
"""

import heapq
import itertools
import math
from collections import deque
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from routegraph.graph.errors import VertexNotFoundError

if TYPE_CHECKING:
    from routegraph.graph.graph import Graph

logger = structlog.get_logger(__name__)


def reconstruct_path(
    predecessor: Mapping[Hashable, Hashable],
    origin: Hashable,
    destination: Hashable,
) -> list[Hashable]:
    """Walk the predecessor chain back from ``destination``.

    The walk stops at a vertex with no predecessor, or at a vertex whose
    predecessor is ``origin`` (which is then prepended once). The result is
    not checked against ``origin``: if ``destination`` was not reached from
    ``origin`` the path simply ends at whatever root the search used, and an
    unreached destination yields ``[destination]``.

    Args:
        predecessor: Mapping of vertex id to the id it was reached from;
            search roots and unreached vertices have no entry
        origin: Id the caller expects the path to start at
        destination: Id the path ends at

    Returns:
        Vertex ids from the start of the path to ``destination``
    """
    path = [destination]
    current = destination
    while current in predecessor and predecessor[current] != origin:
        current = predecessor[current]
        path.append(current)
    if current in predecessor:
        path.append(predecessor[current])
    path.reverse()
    return path


@dataclass
class ShortestPathTree:
    """Result of a single-source shortest-path search.

    Attributes:
        source: Id of the vertex the search started from
        weighted: True for Dijkstra (edge weights), False for hop counts
        dist: Distance from ``source`` per vertex id; ``math.inf`` if unreached
        predecessor: Id each reached vertex was relaxed from; the source and
            unreached vertices have no entry
    """

    source: Hashable
    weighted: bool
    dist: dict[Hashable, float] = field(default_factory=dict)
    predecessor: dict[Hashable, Hashable] = field(default_factory=dict)

    def distance(self, vertex_id: Hashable) -> float:
        """Distance from the source to ``vertex_id``.

        Raises:
            VertexNotFoundError: If the vertex was not part of the search
        """
        if vertex_id not in self.dist:
            raise VertexNotFoundError(vertex_id)
        return self.dist[vertex_id]

    def predecessor_of(self, vertex_id: Hashable) -> Hashable | None:
        return self.predecessor.get(vertex_id)

    def is_reachable(self, vertex_id: Hashable) -> bool:
        return not math.isinf(self.dist.get(vertex_id, math.inf))

    def path_to(self, destination: Hashable) -> list[Hashable]:
        """Path from this tree's source to ``destination``."""
        return reconstruct_path(self.predecessor, self.source, destination)


def _init_tree(graph: "Graph", source: Hashable, weighted: bool) -> ShortestPathTree:
    graph.require_vertex(source)
    tree = ShortestPathTree(
        source=source,
        weighted=weighted,
        dist={vertex.id: math.inf for vertex in graph.vertices},
    )
    tree.dist[source] = 0.0
    return tree


def unweighted_shortest_path(graph: "Graph", source: Hashable) -> ShortestPathTree:
    """Hop-count shortest paths from ``source`` by BFS relaxation.

    Edge weights and the blocked flag are ignored.

    Args:
        graph: Graph to search
        source: Id of the starting vertex

    Returns:
        Tree of hop counts and predecessors

    Raises:
        VertexNotFoundError: If ``source`` is not in the graph
    """
    tree = _init_tree(graph, source, weighted=False)
    dist = tree.dist
    queue = deque([source])

    while queue:
        current = queue.popleft()
        for edge in graph.require_vertex(current).adjacent:
            target = edge.destination
            if math.isinf(dist[target]):
                dist[target] = dist[current] + 1
                tree.predecessor[target] = current
                queue.append(target)

    logger.debug(
        "unweighted_shortest_path_complete",
        source=source,
        reached=len(tree.predecessor) + 1,
    )
    return tree


def dijkstra_shortest_path(graph: "Graph", source: Hashable) -> ShortestPathTree:
    """Weighted shortest paths from ``source`` using Dijkstra's algorithm.

    Blocked edges are never relaxed or traversed. A neighbour is only updated
    when the candidate distance is strictly smaller, so among equal-length
    routes the first one found is kept. Distances are accumulated as floats.

    The priority queue is a binary heap with lazy deletion: an improved
    vertex is pushed again and outdated entries are discarded when popped.
    Each vertex is expanded at most once and its distance is final once it
    has been popped. Negative weights are therefore not rejected, but they
    only shorten routes to vertices that are still queued, and a cycle of
    negative total weight cannot keep the search running.

    Args:
        graph: Graph to search
        source: Id of the starting vertex

    Returns:
        Tree of weighted distances and predecessors

    Raises:
        VertexNotFoundError: If ``source`` is not in the graph
    """
    tree = _init_tree(graph, source, weighted=True)
    dist = tree.dist
    # Sequence number keeps heap entries comparable when ids are not
    sequence = itertools.count()
    heap: list[tuple[float, int, Hashable]] = [(0.0, next(sequence), source)]
    skipped_blocked = 0

    settled: set[Hashable] = set()

    while heap:
        _, _, current = heapq.heappop(heap)
        if current in settled:
            continue
        settled.add(current)

        for edge in graph.require_vertex(current).adjacent:
            if edge.blocked:
                skipped_blocked += 1
                continue
            target = edge.destination
            if target in settled:
                continue
            candidate = dist[current] + edge.weight
            if candidate < dist[target]:
                dist[target] = candidate
                tree.predecessor[target] = current
                heapq.heappush(heap, (candidate, next(sequence), target))

    logger.debug(
        "dijkstra_shortest_path_complete",
        source=source,
        reached=len(tree.predecessor) + 1,
        skipped_blocked=skipped_blocked,
    )
    return tree
