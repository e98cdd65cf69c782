"""Spatial classification of edges between positioned nodes."""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .models import AnnotatedEdge, SpatialInfo

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .models import Direction, Edge, Node

logger = logging.getLogger(__name__)


@dataclass
class SpatialConfig:
    """Thresholds for the spatial classification."""

    # min/max axis ratio above which an edge counts as diagonal
    diagonal_threshold: float = 0.5
    # Center distance below which two nodes count as close
    proximity_threshold: float = 50.0


@dataclass
class SpatialStats:
    """Aggregate counts over all classified edges."""

    total_connections: int = 0
    diagonal_connections: int = 0
    close_connections: int = 0
    direction_distribution: dict[str, int] = field(default_factory=dict)


@dataclass
class SpatialAnalysis:
    """Result of classifying a batch of edges."""

    edges: list[AnnotatedEdge]
    skipped: list[Edge]
    stats: SpatialStats

    @property
    def edges_by_source(self) -> dict[str, list[AnnotatedEdge]]:
        grouped: dict[str, list[AnnotatedEdge]] = {}
        for annotated in self.edges:
            grouped.setdefault(annotated.source, []).append(annotated)
        return grouped


def primary_directions(delta_x: float, delta_y: float) -> tuple[Direction, Direction]:
    """Return (primary, secondary) direction for a center-to-center delta.

    The dominant axis gives the primary direction; ties go to the vertical axis.
    """
    if abs(delta_x) > abs(delta_y):
        return ("right" if delta_x > 0 else "left"), ("down" if delta_y > 0 else "up")
    return ("down" if delta_y > 0 else "up"), ("right" if delta_x > 0 else "left")


def analyze_spatial_relation(
    source: Node,
    target: Node,
    config: SpatialConfig | None = None,
) -> SpatialInfo:
    """Classify the geometric relation from ``source`` to ``target``."""
    if config is None:
        config = SpatialConfig()

    source_center = source.center
    target_center = target.center
    delta_x = target_center.x - source_center.x
    delta_y = target_center.y - source_center.y

    distance = math.sqrt(delta_x * delta_x + delta_y * delta_y)
    # atan2(0, 0) is 0, no guard needed
    angle = math.degrees(math.atan2(delta_y, delta_x))

    primary, secondary = primary_directions(delta_x, delta_y)

    horizontal = abs(delta_x)
    vertical = abs(delta_y)
    longest = max(horizontal, vertical)
    ratio = min(horizontal, vertical) / longest if longest > 0 else 0.0

    return SpatialInfo(
        primary_direction=primary,
        secondary_direction=secondary,
        angle=angle,
        distance=distance,
        is_diagonal=ratio > config.diagonal_threshold,
        is_close=distance < config.proximity_threshold,
        delta_x=delta_x,
        delta_y=delta_y,
    )


def analyze(
    nodes: Iterable[Node] | Mapping[str, Node],
    edges: Sequence[Edge],
    config: SpatialConfig | None = None,
) -> SpatialAnalysis:
    """Attach a SpatialInfo to every edge whose endpoints both exist.

    Edges naming an unknown node are dropped from the result and listed in
    ``SpatialAnalysis.skipped``.
    """
    if config is None:
        config = SpatialConfig()

    node_map = dict(nodes) if isinstance(nodes, Mapping) else {n.id: n for n in nodes}

    annotated: list[AnnotatedEdge] = []
    skipped: list[Edge] = []

    for index, edge in enumerate(edges):
        source = node_map.get(edge.source)
        target = node_map.get(edge.target)
        if source is None or target is None:
            logger.warning("Node not found, skipping edge: %s -> %s", edge.source, edge.target)
            skipped.append(edge)
            continue

        spatial = analyze_spatial_relation(source, target, config)
        logger.debug(
            "%s -> %s: %s (%d deg)",
            edge.source, edge.target, spatial.primary_direction, round(spatial.angle),
        )
        annotated.append(AnnotatedEdge(edge=edge, index=index, spatial=spatial))

    return SpatialAnalysis(
        edges=annotated,
        skipped=skipped,
        stats=_create_stats(annotated),
    )


def _create_stats(edges: list[AnnotatedEdge]) -> SpatialStats:
    return SpatialStats(
        total_connections=len(edges),
        diagonal_connections=sum(1 for e in edges if e.spatial.is_diagonal),
        close_connections=sum(1 for e in edges if e.spatial.is_close),
        direction_distribution=dict(Counter(e.spatial.primary_direction for e in edges)),
    )


def format_analysis_report(analysis: SpatialAnalysis) -> str:
    """Render the aggregate report as plain text."""
    stats = analysis.stats
    lines = [
        "=== Spatial analysis report ===",
        f"Connections: {stats.total_connections}",
        f"Diagonal connections: {stats.diagonal_connections}",
        f"Close connections: {stats.close_connections}",
    ]
    if analysis.skipped:
        lines.append(f"Skipped (unresolved): {len(analysis.skipped)}")

    lines.append("Direction distribution:")
    for direction, count in stats.direction_distribution.items():
        percentage = round(count * 100 / stats.total_connections)
        lines.append(f"  {direction}: {count} ({percentage}%)")

    fan_out = {s: e for s, e in analysis.edges_by_source.items() if len(e) > 1}
    if fan_out:
        lines.append("Multiple outgoing connections:")
        for source, edges in fan_out.items():
            lines.append(f"  {source} -> {len(edges)} connections")
            for annotated in edges:
                lines.append(
                    f"    -> {annotated.target}: {annotated.spatial.primary_direction} "
                    f"({round(annotated.spatial.distance)}px)"
                )
    return "\n".join(lines)


def log_analysis_report(analysis: SpatialAnalysis) -> None:
    for line in format_analysis_report(analysis).splitlines():
        logger.info(line)
