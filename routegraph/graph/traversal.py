"""Traversal algorithms over a Graph: DFS, BFS, topological sort and cycle checks.

Every function keeps its visit state in local sets and dictionaries instead
of on the vertices, so calls never observe state left behind by a previous
run. Depth-first variants use an explicit stack of edge iterators; the visit
order is identical to the textbook recursive formulation, but deep road
networks cannot exhaust the interpreter recursion limit.
"""

from collections import deque
from collections.abc import Hashable, Iterator
from typing import TYPE_CHECKING

import structlog

from routegraph.graph.errors import CycleDetectedError

if TYPE_CHECKING:
    from routegraph.graph.edge import Edge
    from routegraph.graph.graph import Graph

logger = structlog.get_logger(__name__)


def _edges_of(graph: "Graph", vertex_id: Hashable) -> Iterator["Edge"]:
    return iter(graph.require_vertex(vertex_id).adjacent)


def dfs(graph: "Graph") -> list[Hashable]:
    """Depth-first order over the whole graph.

    Roots are taken in vertex insertion order, so every component is covered
    and every vertex appears exactly once.

    Args:
        graph: Graph to traverse

    Returns:
        Vertex ids in pre-order visit order
    """
    visited: set[Hashable] = set()
    order: list[Hashable] = []

    for root in graph.vertices:
        if root.id in visited:
            continue
        visited.add(root.id)
        order.append(root.id)
        stack = [iter(root.adjacent)]

        while stack:
            for edge in stack[-1]:
                target = edge.destination
                if target not in visited:
                    visited.add(target)
                    order.append(target)
                    stack.append(_edges_of(graph, target))
                    break
            else:
                stack.pop()

    logger.debug("dfs_complete", visited=len(order))
    return order


def bfs(graph: "Graph", source: Hashable) -> list[Hashable]:
    """Breadth-first order from ``source``.

    Args:
        graph: Graph to traverse
        source: Id of the starting vertex

    Returns:
        Vertex ids reachable from ``source`` in visit order, or an empty list
        if ``source`` is not in the graph
    """
    if graph.find_vertex(source) is None:
        logger.debug("bfs_source_not_found", source=source)
        return []

    visited = {source}
    order: list[Hashable] = []
    queue = deque([source])

    while queue:
        current = queue.popleft()
        order.append(current)
        for edge in _edges_of(graph, current):
            if edge.destination not in visited:
                visited.add(edge.destination)
                queue.append(edge.destination)

    logger.debug("bfs_complete", source=source, visited=len(order))
    return order


def topsort(graph: "Graph") -> list[Hashable]:
    """Topological order using Kahn's algorithm.

    Args:
        graph: Graph to order

    Returns:
        All vertex ids such that for every edge u -> v, u precedes v.
        An empty graph yields an empty list.

    Raises:
        CycleDetectedError: If the graph contains a directed cycle. The
            partial order is discarded; the error lists the vertices that
            could not be ordered.
    """
    indegree: dict[Hashable, int] = {vertex.id: 0 for vertex in graph.vertices}
    for vertex in graph.vertices:
        for edge in vertex.adjacent:
            indegree[edge.destination] += 1

    queue = deque(vertex_id for vertex_id, degree in indegree.items() if degree == 0)
    order: list[Hashable] = []

    while queue:
        current = queue.popleft()
        order.append(current)
        for edge in _edges_of(graph, current):
            indegree[edge.destination] -= 1
            if indegree[edge.destination] == 0:
                queue.append(edge.destination)

    if len(order) != len(indegree):
        unordered = [vertex_id for vertex_id, degree in indegree.items() if degree > 0]
        logger.error(
            "topsort_cycle_detected",
            ordered=len(order),
            unordered=len(unordered),
        )
        raise CycleDetectedError(unordered)

    logger.debug("topsort_complete", vertex_count=len(order))
    return order


def _cycle_from_root(
    graph: "Graph",
    root: Hashable,
    visited: set[Hashable],
) -> list[Hashable] | None:
    """DFS from ``root`` that returns the first cycle path found.

    A vertex is "on the path" while it sits on the DFS stack; reaching such a
    vertex again is a back edge and closes a cycle.

    Args:
        graph: Graph being inspected
        root: Vertex id to start from
        visited: Vertices already explored, updated in place

    Returns:
        List representing the cycle path if found, None otherwise
    """
    visited.add(root)
    path = [root]
    on_path = {root}
    stack = [_edges_of(graph, root)]

    while stack:
        for edge in stack[-1]:
            target = edge.destination
            if target in on_path:
                cycle_start = path.index(target)
                return [*path[cycle_start:], target]
            if target not in visited:
                visited.add(target)
                on_path.add(target)
                path.append(target)
                stack.append(_edges_of(graph, target))
                break
        else:
            stack.pop()
            on_path.discard(path.pop())

    return None


def find_cycles(graph: "Graph", limit: int | None = None) -> list[list[Hashable]]:
    """Find directed cycles, at most one per DFS tree.

    Args:
        graph: Graph to inspect
        limit: Stop after this many cycles; None means no limit

    Returns:
        Cycles as lists of ids whose first and last entries are equal
        (``["a", "b", "a"]``), in discovery order
    """
    cycles: list[list[Hashable]] = []
    visited: set[Hashable] = set()

    for root in graph.vertices:
        if limit is not None and len(cycles) >= limit:
            break
        if root.id in visited:
            continue
        cycle = _cycle_from_root(graph, root.id, visited)
        if cycle:
            cycles.append(cycle)

    return cycles


def find_cycle(graph: "Graph") -> list[Hashable] | None:
    """Find one directed cycle as a closed path, or None if the graph is acyclic."""
    cycles = find_cycles(graph, limit=1)
    return cycles[0] if cycles else None


def is_dag(graph: "Graph") -> bool:
    """Check whether the graph is a directed acyclic graph.

    Stops at the first back edge found; always agrees with :func:`topsort`.

    Args:
        graph: Graph to inspect

    Returns:
        True if no directed cycle exists, False otherwise
    """
    cycle = find_cycle(graph)
    if cycle is not None:
        logger.debug("back_edge_found", cycle=cycle)
        return False
    return True


def max_new_children(graph: "Graph", source: Hashable) -> tuple[int, Hashable]:
    """Find the vertex that discovers the most new vertices during a BFS.

    For every dequeued vertex, only neighbours visited for the first time
    during that dequeue are counted. On ties the vertex earliest in BFS order
    is kept.

    Args:
        graph: Graph to traverse
        source: Id of the starting vertex

    Returns:
        ``(count, vertex_id)``. When ``source`` is absent or discovers nothing
        the result is ``(0, source)``.
    """
    best_count = 0
    best_vertex = source

    if graph.find_vertex(source) is None:
        logger.debug("max_new_children_source_not_found", source=source)
        return best_count, best_vertex

    visited = {source}
    queue = deque([source])

    while queue:
        current = queue.popleft()
        new_children = 0
        for edge in _edges_of(graph, current):
            if edge.destination not in visited:
                visited.add(edge.destination)
                queue.append(edge.destination)
                new_children += 1
        if new_children > best_count:
            best_count = new_children
            best_vertex = current

    logger.debug(
        "max_new_children_complete",
        source=source,
        vertex_id=best_vertex,
        count=best_count,
    )
    return best_count, best_vertex
