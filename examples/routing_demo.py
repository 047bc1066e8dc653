"""Demonstration of routing over a small street network.

This example builds a handful of Porto intersections, runs shortest-path
searches with structured logging and correlation IDs, closes a street and
validates the network.
"""

import sys
from pathlib import Path

# Add the repository root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from routegraph import CycleDetectedError, Graph, GraphValidator
from routegraph.config import RouteGraphConfig, ValidationConfig
from routegraph.log_config import (
    bind_context,
    bind_correlation_id,
    clear_context,
    configure_from_config,
    get_logger,
    unbind_correlation_id,
)

# (id, name, longitude, latitude)
INTERSECTIONS = [
    (1, "Aliados", -8.6110, 41.1488),
    (2, "Trindade", -8.6092, 41.1527),
    (3, "Bolhao", -8.6052, 41.1497),
    (4, "Sao Bento", -8.6107, 41.1456),
    (5, "Ribeira", -8.6131, 41.1406),
]

# (source, destination, name, edge id, two way)
STREETS = [
    (1, 2, "Avenida dos Aliados", "aliados", True),
    (2, 1, "Avenida dos Aliados", "aliados", True),
    (2, 3, "Rua de Fernandes Tomas", "fernandes-tomas", False),
    (1, 4, "Praca da Liberdade", "liberdade", True),
    (4, 1, "Praca da Liberdade", "liberdade", True),
    (3, 4, "Rua 31 de Janeiro", "31-janeiro", False),
    (1, 3, "Rua Sa da Bandeira", "sa-bandeira", False),
    (4, 5, "Rua de Mouzinho da Silveira", "mouzinho", False),
]


def build_network(config: RouteGraphConfig) -> Graph:
    """Build the demo network, weighting each street by its length in km."""
    graph = Graph.from_config(config.geodesic)

    for vertex_id, name, longitude, latitude in INTERSECTIONS:
        graph.add_vertex(vertex_id, name, longitude, latitude)

    for source, destination, name, edge_id, two_way in STREETS:
        length = graph.calculate_dist(source, destination)
        graph.add_edge(source, destination, length, two_way=two_way, name=name, edge_id=edge_id)

    return graph


def describe_route(graph: Graph, origin: int, destination: int) -> None:
    """Run a weighted search and log the resulting route."""
    logger = get_logger(__name__)

    tree = graph.dijkstra_shortest_path(origin)
    if not tree.is_reachable(destination):
        logger.warning("route_unreachable", origin=origin, destination=destination)
        return

    path = graph.get_path(origin, destination)
    names = [graph.get_vertex(vertex_id).name for vertex_id in path]
    logger.info(
        "route_found",
        origin=origin,
        destination=destination,
        stops=names,
        distance_km=round(tree.distance(destination), 3),
    )


def main() -> None:
    """Main demonstration function."""
    config = RouteGraphConfig(
        validation=ValidationConfig(report_cycles=True, max_reported_cycles=3),
        json_logs=False,
    )
    configure_from_config(config)
    logger = get_logger(__name__)

    graph = build_network(config)
    logger.info("network_loaded", **graph.get_stats())
    logger.info("street_names", names=graph.get_edges_names())

    bind_correlation_id("demo-route-1")
    try:
        describe_route(graph, 2, 5)

        # Close Rua 31 de Janeiro and route again
        graph.set_edge_blocked("31-janeiro", True)
        describe_route(graph, 2, 5)

        graph.set_edge_blocked("31-janeiro", False)
    finally:
        unbind_correlation_id()

    bind_context(query="coverage")
    logger.info("hops_from_trindade", hops=graph.unweighted_shortest_path(2).dist)
    logger.info("bfs_order", order=graph.bfs(1))
    count, vertex_id = graph.max_new_children(1)
    logger.info("busiest_intersection", vertex_id=vertex_id, new_children=count)
    clear_context()

    try:
        graph.topsort()
    except CycleDetectedError as e:
        logger.info("network_is_cyclic", unordered=e.unordered, cycle=graph.find_cycle())

    report = GraphValidator(config.validation).validate(graph)
    print(report.summary())


if __name__ == "__main__":
    main()
