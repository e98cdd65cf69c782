"""Rule-based connection routing between positioned nodes.

The router picks one strategy per edge from an ordered rule list (first
matching rule wins, the last rule always matches) and turns it into an
orthogonal-leaning polyline plus a label point. All geometry comes from an
immutable ``ObstacleSet`` snapshot, so routing calls share no mutable state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Callable

from .geometry import (
    compute_path_center,
    distance,
    midpoint,
    path_length,
    remove_consecutive_duplicates,
)
from .models import ConnectionType, Point, RouteResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .layout import LayoutResult
    from .models import Node, Region, RoutingContext, Side

logger = logging.getLogger(__name__)


@dataclass
class RoutingConfig:
    """Distances used by the routing strategies."""

    # Center distance below which two nodes are adjacent
    adjacency_distance: float = 100.0
    # Gap between a bypass line and the boxes it avoids
    bypass_padding: float = 30.0
    # Length of the horizontal segment forced after a side exit
    stub_length: float = 30.0
    # Vertical tolerance for two points to count as level
    level_tolerance: float = 5.0
    # Level points closer than this horizontally need no stub
    stub_suppress_distance: float = 50.0
    # Vertical spacing between parallel self-loops
    loop_spacing: float = 20.0
    # How far a self-loop bulges out of the node's right edge
    loop_width: float = 20.0
    loop_label_offset: float = 10.0


class RouteStrategy(Enum):
    """Waypoint construction strategies."""

    LOOP = "internal_loop"
    DIRECT = "direct_connection"
    INTRA_REGION_BYPASS = "intra_region_bypass"
    INTER_REGION_BYPASS = "inter_region_bypass"
    SPATIAL = "spatial_routing"
    DEFAULT = "default_connection"


@dataclass(frozen=True)
class ObstacleSet:
    """Read-only snapshot of every node box and region used for routing."""

    nodes: tuple[Node, ...] = ()
    regions: tuple[Region, ...] = ()

    @classmethod
    def from_layout(cls, layout: LayoutResult) -> ObstacleSet:
        return cls(nodes=tuple(layout.nodes.values()), regions=tuple(layout.regions))

    @classmethod
    def of(cls, nodes: Iterable[Node], regions: Iterable[Region] = ()) -> ObstacleSet:
        return cls(nodes=tuple(nodes), regions=tuple(regions))

    def obstacles_between(self, source: Node, target: Node) -> list[Node]:
        """Nodes (other than the endpoints) lying across the center-to-center segment."""
        return [
            node for node in self.nodes
            if node.id not in (source.id, target.id) and is_node_between(source, target, node)
        ]

    def has_obstacles_between(self, source: Node, target: Node) -> bool:
        return any(
            node.id not in (source.id, target.id) and is_node_between(source, target, node)
            for node in self.nodes
        )

    def region_of(self, node: Node) -> Region | None:
        for region in self.regions:
            if region.contains(node.id):
                return region
        return None


def is_node_between(source: Node, target: Node, obstacle: Node) -> bool:
    """Check whether ``obstacle`` sits on the segment between the two centers.

    The obstacle center is projected onto the segment (clamped to its ends);
    it counts when it lies within half of its larger dimension of that
    projection.
    """
    a = source.center
    b = target.center
    p = obstacle.center

    seg_x = b.x - a.x
    seg_y = b.y - a.y
    length_sq = seg_x * seg_x + seg_y * seg_y
    if length_sq == 0:
        return False

    t = ((p.x - a.x) * seg_x + (p.y - a.y) * seg_y) / length_sq
    t = max(0.0, min(1.0, t))
    projection = Point(a.x + t * seg_x, a.y + t * seg_y)

    return distance(p, projection) < max(obstacle.width, obstacle.height) / 2


def classify_connection(source: Node, target: Node) -> ConnectionType:
    """Structural connection type of an edge."""
    if source.id == target.id:
        return ConnectionType.INTERNAL
    if source.is_external or target.is_external:
        return ConnectionType.EXTERNAL
    if source.region != target.region:
        return ConnectionType.INTER_REGION
    if source.platform != target.platform:
        return ConnectionType.INTER_PLATFORM
    return ConnectionType.INTRA_PLATFORM


@dataclass(frozen=True)
class RoutingRule:
    """A named predicate paired with the strategy it selects."""

    name: str
    description: str
    condition: Callable[[Node, Node, RoutingContext], bool]
    strategy: RouteStrategy


class ConnectionRouter:
    """Routes edges over a fixed ObstacleSet.

    The router holds no per-call state; ``route`` is a pure function of its
    arguments, the obstacle snapshot and the config.
    """

    def __init__(
        self,
        obstacles: ObstacleSet | None = None,
        config: RoutingConfig | None = None,
    ):
        self.obstacles = obstacles or ObstacleSet()
        self.config = config or RoutingConfig()
        self.rules = self._build_rules()
        self._strategies: dict[RouteStrategy, Callable[[Node, Node, RoutingContext], list[Point]]] = {
            RouteStrategy.LOOP: self._loop_waypoints,
            RouteStrategy.DIRECT: self._direct_waypoints,
            RouteStrategy.INTRA_REGION_BYPASS: self._intra_region_bypass_waypoints,
            RouteStrategy.INTER_REGION_BYPASS: self._inter_region_bypass_waypoints,
            RouteStrategy.SPATIAL: self._spatial_waypoints,
            RouteStrategy.DEFAULT: self._direct_waypoints,
        }

    def _build_rules(self) -> list[RoutingRule]:
        return [
            RoutingRule(
                name="internal_system_connection",
                description="Edge from a system to itself: loop on the right side",
                condition=lambda s, t, c: c.connection_type is ConnectionType.INTERNAL,
                strategy=RouteStrategy.LOOP,
            ),
            RoutingRule(
                name="adjacent_systems_direct",
                description="Adjacent systems with nothing in between: direct line",
                condition=lambda s, t, c: (
                    self.are_adjacent(s, t)
                    and not self.obstacles.has_obstacles_between(s, t)
                    and c.connection_type is not ConnectionType.INTER_REGION
                ),
                strategy=RouteStrategy.DIRECT,
            ),
            RoutingRule(
                name="same_platform_with_obstacles",
                description="Same platform with systems in between: bypass them",
                condition=lambda s, t, c: (
                    c.connection_type is ConnectionType.INTRA_PLATFORM
                    and self.obstacles.has_obstacles_between(s, t)
                ),
                strategy=RouteStrategy.INTRA_REGION_BYPASS,
            ),
            RoutingRule(
                name="inter_region_connection",
                description="Systems in different regions: detour around the region",
                condition=lambda s, t, c: c.connection_type is ConnectionType.INTER_REGION,
                strategy=RouteStrategy.INTER_REGION_BYPASS,
            ),
            RoutingRule(
                name="spatial_optimized_routing",
                description="Shape the route from the spatial classification",
                condition=lambda s, t, c: c.spatial is not None,
                strategy=RouteStrategy.SPATIAL,
            ),
            RoutingRule(
                name="default_routing",
                description="Fallback: direct line",
                condition=lambda s, t, c: True,
                strategy=RouteStrategy.DEFAULT,
            ),
        ]

    def are_adjacent(self, source: Node, target: Node) -> bool:
        return distance(source.center, target.center) < self.config.adjacency_distance

    def select_rule(self, source: Node, target: Node, context: RoutingContext) -> RoutingRule:
        """First rule whose condition holds. ``context.connection_type`` must be set."""
        for rule in self.rules:
            if rule.condition(source, target, context):
                return rule
        return self.rules[-1]

    def route(self, source: Node, target: Node, context: RoutingContext) -> RouteResult:
        """Route one edge from ``source`` to ``target``."""
        context = replace(context, connection_type=classify_connection(source, target))
        rule = self.select_rule(source, target, context)
        logger.debug(
            "Route %s -> %s: rule '%s', strategy '%s'",
            source.id, target.id, rule.name, rule.strategy.value,
        )

        waypoints = self._strategies[rule.strategy](source, target, context)

        if rule.strategy is RouteStrategy.LOOP:
            label = self._loop_label(waypoints)
        else:
            waypoints = remove_consecutive_duplicates(waypoints)
            label = compute_path_center(waypoints)

        logger.debug(
            "Route %s -> %s: %d waypoints, length %.1f",
            source.id, target.id, len(waypoints), path_length(waypoints),
        )
        return RouteResult(waypoints=tuple(waypoints), label=label, rule=rule.name)

    # Connection points

    def exit_point(self, source: Node, target: Node, context: RoutingContext) -> Point:
        """Point on the source boundary where the edge leaves."""
        return self._attachment_point(source, source, target, context, leaving=True)

    def entry_point(self, target: Node, source: Node, context: RoutingContext) -> Point:
        """Point on the target boundary where the edge arrives."""
        return self._attachment_point(target, source, target, context, leaving=False)

    def _attachment_point(
        self,
        own: Node,
        source: Node,
        target: Node,
        context: RoutingContext,
        leaving: bool,
    ) -> Point:
        source_center = source.center
        target_center = target.center
        delta_x = target_center.x - source_center.x
        delta_y = target_center.y - source_center.y
        own_center = own.center

        # Stacked systems of one platform connect through their right sides
        if context.connection_type is ConnectionType.INTRA_PLATFORM and abs(delta_x) < own.width / 2:
            return Point(own.right, own_center.y)

        if abs(delta_x) < own.width / 4 and not self.obstacles.has_obstacles_between(source, target):
            # Target below: leave through the bottom, arrive through the top
            if (delta_y > 0) == leaving:
                return Point(own_center.x, own.bottom)
            return Point(own_center.x, own.y)

        if (delta_x >= 0) == leaving:
            return Point(own.right, own_center.y)
        return Point(own.x, own_center.y)

    # Horizontal stub

    def needs_horizontal_segment(self, exit_point: Point, entry_point: Point, source: Node) -> bool:
        """Whether a side exit must start with a horizontal stub.

        Only level exits very close to the entry may skip it.
        """
        is_side_exit = exit_point.x in (source.x, source.right)
        is_level = self._is_level(exit_point, entry_point)
        is_very_close = abs(exit_point.x - entry_point.x) < self.config.stub_suppress_distance
        return is_side_exit and not (is_level and is_very_close)

    def _is_level(self, a: Point, b: Point) -> bool:
        return abs(a.y - b.y) <= self.config.level_tolerance

    def _stub_waypoints(self, exit_point: Point, entry_point: Point, source: Node) -> list[Point]:
        if exit_point.x == source.right:
            stub_x = exit_point.x + self.config.stub_length
        else:
            stub_x = exit_point.x - self.config.stub_length

        stub_end = Point(stub_x, exit_point.y)
        if self._is_level(exit_point, entry_point):
            return [exit_point, stub_end, entry_point]
        return [exit_point, stub_end, Point(stub_x, entry_point.y), entry_point]

    # Strategies

    def _loop_waypoints(self, source: Node, target: Node, context: RoutingContext) -> list[Point]:
        """Rectangle bulging out of the right edge.

        Ends sit at ``center -/+ (spacing / 2 + index * spacing)`` rather than
        ``center + index * spacing``, which would put both ends of a first
        loop on the same point.
        """
        spacing = self.config.loop_spacing
        center_y = source.center.y
        right_edge = source.right
        loop_x = right_edge + self.config.loop_width

        # Outgoing ends stack upwards and incoming ends downwards, so the two
        # ends of a loop never coincide
        exit_y = center_y - spacing / 2 - context.parallel.outgoing_index * spacing
        entry_y = center_y + spacing / 2 + context.parallel.incoming_index * spacing

        return [
            Point(right_edge, exit_y),
            Point(loop_x, exit_y),
            Point(loop_x, entry_y),
            Point(right_edge, entry_y),
        ]

    def _loop_label(self, waypoints: Sequence[Point]) -> Point:
        return Point(
            waypoints[1].x + self.config.loop_label_offset,
            (waypoints[0].y + waypoints[-1].y) / 2,
        )

    def _direct_waypoints(self, source: Node, target: Node, context: RoutingContext) -> list[Point]:
        exit_point = self.exit_point(source, target, context)
        entry_point = self.entry_point(target, source, context)

        if self.needs_horizontal_segment(exit_point, entry_point, source):
            logger.debug("Adding horizontal stub: %s -> %s", source.id, target.id)
            return self._stub_waypoints(exit_point, entry_point, source)
        return [exit_point, entry_point]

    def _intra_region_bypass_waypoints(
        self, source: Node, target: Node, context: RoutingContext,
    ) -> list[Point]:
        blocking = self.obstacles.obstacles_between(source, target)
        if not blocking:
            return self._direct_waypoints(source, target, context)
        logger.debug(
            "Bypassing %s on %s -> %s", ", ".join(n.id for n in blocking), source.id, target.id,
        )

        exit_point = self.exit_point(source, target, context)
        entry_point = self.entry_point(target, source, context)

        # A level stub route would run straight through the obstacle
        if (
            self.needs_horizontal_segment(exit_point, entry_point, source)
            and not self._is_level(exit_point, entry_point)
        ):
            return self._stub_waypoints(exit_point, entry_point, source)

        side = self.bypass_side(context)
        return [exit_point, *self._bypass_waypoints(side, exit_point, entry_point, source, target), entry_point]

    def _inter_region_bypass_waypoints(
        self, source: Node, target: Node, context: RoutingContext,
    ) -> list[Point]:
        exit_point = self.exit_point(source, target, context)
        entry_point = self.entry_point(target, source, context)

        if self.needs_horizontal_segment(exit_point, entry_point, source):
            logger.debug("Adding horizontal stub for inter-region route: %s -> %s", source.id, target.id)
            return self._stub_waypoints(exit_point, entry_point, source)

        source_region = self.obstacles.region_of(source)
        target_region = self.obstacles.region_of(target)

        if source_region is None or target_region is None:
            side = self.bypass_side(context)
            detour = self._bypass_waypoints(side, exit_point, entry_point, source, target)
        else:
            padding = self.config.bypass_padding
            if source_region.y < target_region.y:
                detour_y = min(source_region.y, target_region.y) - padding
            else:
                detour_y = source_region.y + source_region.height + padding
            detour = [Point(exit_point.x, detour_y), Point(entry_point.x, detour_y)]

        return [exit_point, *detour, entry_point]

    def _spatial_waypoints(self, source: Node, target: Node, context: RoutingContext) -> list[Point]:
        spatial = context.spatial
        if spatial is None:
            return self._direct_waypoints(source, target, context)

        exit_point = self.exit_point(source, target, context)
        entry_point = self.entry_point(target, source, context)

        if self.needs_horizontal_segment(exit_point, entry_point, source):
            logger.debug("Adding horizontal stub for spatial route: %s -> %s", source.id, target.id)
            return self._stub_waypoints(exit_point, entry_point, source)

        if spatial.is_close and spatial.is_diagonal:
            bend = midpoint(exit_point, entry_point)
        elif spatial.is_horizontal:
            bend = Point(entry_point.x, exit_point.y)
        else:
            bend = Point(exit_point.x, entry_point.y)

        return [exit_point, bend, entry_point]

    # Bypass helpers

    @staticmethod
    def bypass_side(context: RoutingContext) -> Side:
        """Horizontal edges bypass over the top, everything else to the right."""
        if context.spatial is not None and context.spatial.is_horizontal:
            return "top"
        return "right"

    def _bypass_waypoints(
        self,
        side: Side,
        start: Point,
        end: Point,
        source: Node,
        target: Node,
    ) -> list[Point]:
        padding = self.config.bypass_padding
        if side == "right":
            x = max(source.right, target.right) + padding
            return [Point(x, start.y), Point(x, end.y)]
        if side == "left":
            x = min(source.x, target.x) - padding
            return [Point(x, start.y), Point(x, end.y)]
        if side == "top":
            y = min(source.y, target.y) - padding
            return [Point(start.x, y), Point(end.x, y)]
        y = max(source.bottom, target.bottom) + padding
        return [Point(start.x, y), Point(end.x, y)]
