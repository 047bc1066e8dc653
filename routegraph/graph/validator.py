"""Road network validation with detailed reporting.

This module checks a graph loaded from map data for problems that silently
distort routing results: negative weights (which Dijkstra does not support),
two-way roads missing their reverse edge, isolated intersections, edge ids
shared by several edges, and, on request, directed cycles.
"""

from collections import Counter
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from routegraph.config import ValidationConfig
from routegraph.graph.traversal import find_cycles

if TYPE_CHECKING:
    from routegraph.graph.graph import Graph

logger = structlog.get_logger(__name__)


@dataclass
class ValidationReport:
    """Report containing validation results for a road network.

    Attributes:
        is_valid: Whether the graph passed all validation checks
        errors: List of error messages (critical issues)
        warnings: List of warning messages (potential issues)
        cycles: Detected cycles, each a closed list of vertex ids
        missing_reverse_edges: (source, destination) pairs of two-way edges
            with no edge back from destination to source
        isolated_vertices: Vertex ids with no incoming and no outgoing edges
        negative_weight_edges: (source, destination, edge id) of edges whose
            weight is below zero
        duplicate_edge_ids: Edge ids carried by more than one edge
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cycles: list[list[Hashable]] = field(default_factory=list)
    missing_reverse_edges: list[tuple[Hashable, Hashable]] = field(default_factory=list)
    isolated_vertices: set[Hashable] = field(default_factory=set)
    negative_weight_edges: list[tuple[Hashable, Hashable, Hashable]] = field(default_factory=list)
    duplicate_edge_ids: set[Hashable] = field(default_factory=set)

    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(message)
        self.is_valid = False
        logger.error("validation_error", message=message)

    def add_warning(self, message: str) -> None:
        """Add a warning message without failing validation."""
        self.warnings.append(message)
        logger.warning("validation_warning", message=message)

    def summary(self) -> str:
        """Generate a human-readable summary of the validation report."""
        lines = []
        lines.append(f"Validation Status: {'PASS' if self.is_valid else 'FAIL'}")
        lines.append(f"Errors: {len(self.errors)}")
        lines.append(f"Warnings: {len(self.warnings)}")
        lines.append(f"Cycles: {len(self.cycles)}")
        lines.append(f"Missing Reverse Edges: {len(self.missing_reverse_edges)}")
        lines.append(f"Isolated Vertices: {len(self.isolated_vertices)}")
        lines.append(f"Negative Weight Edges: {len(self.negative_weight_edges)}")
        lines.append(f"Duplicate Edge Ids: {len(self.duplicate_edge_ids)}")

        if self.errors:
            lines.append("\nErrors:")
            lines.extend(f"  - {error}" for error in self.errors)

        if self.warnings:
            lines.append("\nWarnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)

        if self.cycles:
            lines.append("\nCycles Detected:")
            for i, cycle in enumerate(self.cycles, 1):
                cycle_path = " -> ".join(str(vertex_id) for vertex_id in cycle)
                lines.append(f"  {i}. {cycle_path}")

        return "\n".join(lines)


def _join(ids) -> str:
    return ", ".join(sorted(str(vertex_id) for vertex_id in ids))


class GraphValidator:
    """Validator for road networks with detailed error reporting.

    This class provides:
    - Negative weight detection (an error unless allowed by configuration)
    - Two-way edges lacking a reverse edge
    - Isolated vertex detection
    - Duplicate edge id detection
    - Optional cycle reporting with complete paths
    """

    def __init__(self, config: ValidationConfig | None = None):
        """Initialize the validator.

        Args:
            config: Validation settings; defaults are used when omitted
        """
        self.config = config or ValidationConfig()

    def validate(self, graph: "Graph") -> ValidationReport:
        """Validate a graph and generate a detailed report.

        Args:
            graph: The Graph to validate

        Returns:
            ValidationReport containing all validation results
        """
        logger.info(
            "starting_graph_validation",
            vertex_count=graph.num_vertices,
            edge_count=graph.num_edges,
        )

        report = ValidationReport()

        negative = self._check_negative_weights(graph)
        if negative:
            report.negative_weight_edges = negative
            message = (
                f"{len(negative)} edges have negative weights; "
                "Dijkstra distances will be unreliable"
            )
            if self.config.allow_negative_weights:
                report.add_warning(message)
            else:
                report.add_error(message)

        if self.config.check_two_way_reverse:
            missing = self._check_two_way_reverse(graph)
            if missing:
                report.missing_reverse_edges = missing
                pairs = ", ".join(f"{src} -> {dst}" for src, dst in missing)
                report.add_warning(f"Two-way edges without a reverse edge: {pairs}")

        isolated = self._check_isolated_vertices(graph)
        if isolated:
            report.isolated_vertices = isolated
            report.add_warning(f"Isolated vertices: {_join(isolated)}")

        duplicates = self._check_duplicate_edge_ids(graph)
        if duplicates:
            report.duplicate_edge_ids = duplicates
            report.add_warning(f"Edge ids shared by several edges: {_join(duplicates)}")

        if self.config.report_cycles:
            cycles = self._detect_cycles(graph)
            if cycles:
                report.cycles = cycles
                for cycle in cycles:
                    cycle_path = " -> ".join(str(vertex_id) for vertex_id in cycle)
                    report.add_warning(f"Cycle detected: {cycle_path}")

        logger.info(
            "graph_validation_complete",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )

        return report

    def _check_negative_weights(self, graph: "Graph") -> list[tuple[Hashable, Hashable, Hashable]]:
        return [
            (vertex.id, edge.destination, edge.id)
            for vertex in graph.vertices
            for edge in vertex.adjacent
            if edge.weight < 0
        ]

    def _check_two_way_reverse(self, graph: "Graph") -> list[tuple[Hashable, Hashable]]:
        """Find two-way edges whose destination has no edge back to the source.

        Args:
            graph: Graph to inspect

        Returns:
            (source, destination) pairs in graph order, without repeats
        """
        missing: list[tuple[Hashable, Hashable]] = []
        for vertex in graph.vertices:
            for edge in vertex.adjacent:
                if not edge.two_way:
                    continue
                destination = graph.require_vertex(edge.destination)
                has_reverse = any(back.destination == vertex.id for back in destination.adjacent)
                pair = (vertex.id, edge.destination)
                if not has_reverse and pair not in missing:
                    missing.append(pair)

        if missing:
            logger.debug("missing_reverse_edges_found", count=len(missing))

        return missing

    def _check_isolated_vertices(self, graph: "Graph") -> set[Hashable]:
        """Find vertices that no edge enters or leaves.

        Args:
            graph: Graph to inspect

        Returns:
            Set of isolated vertex ids
        """
        touched: set[Hashable] = set()
        for vertex in graph.vertices:
            if vertex.out_degree:
                touched.add(vertex.id)
            touched.update(edge.destination for edge in vertex.adjacent)

        isolated = {vertex.id for vertex in graph.vertices} - touched

        if isolated:
            logger.debug("isolated_vertices_found", count=len(isolated))

        return isolated

    def _check_duplicate_edge_ids(self, graph: "Graph") -> set[Hashable]:
        counts = Counter(
            edge.id
            for vertex in graph.vertices
            for edge in vertex.adjacent
            if edge.id is not None
        )
        return {edge_id for edge_id, count in counts.items() if count > 1}

    def _detect_cycles(self, graph: "Graph") -> list[list[Hashable]]:
        """Detect cycles, one per DFS tree, up to ``max_reported_cycles``."""
        cycles = find_cycles(graph, limit=self.config.max_reported_cycles)

        if cycles:
            logger.debug("cycles_found", count=len(cycles))

        return cycles
