"""Data models for archplot diagrams."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, NamedTuple

Direction = Literal["left", "right", "up", "down"]
Side = Literal["left", "right", "top", "bottom"]

# Platform name marking a system that lives outside the described landscape
EXTERNAL_PLATFORM = "External System"
UNSPECIFIED_PLATFORM = "Unspecified"


class ConnectionType(Enum):
    """Structural relation between the two endpoints of an edge."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    INTER_REGION = "inter-region"
    INTER_PLATFORM = "inter-platform"
    INTRA_PLATFORM = "intra-platform"


class Point(NamedTuple):
    """A point in diagram coordinates (y grows downwards)."""

    x: float
    y: float


@dataclass(frozen=True)
class Function:
    """A business function hosted by a system."""

    id: str
    name: str
    type: str | None = None


@dataclass(frozen=True)
class Node:
    """A positioned system box.

    Geometry is the top-left corner plus size. Instances are never mutated;
    the layout produces new positioned copies.
    """

    id: str
    name: str
    platform: str = UNSPECIFIED_PLATFORM
    region: str | None = None
    roles: tuple[str, ...] = ()
    functions: tuple[Function, ...] = ()
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def is_external(self) -> bool:
        return self.platform == EXTERNAL_PLATFORM


@dataclass(frozen=True)
class Edge:
    """A directed connection between two node ids."""

    source: str
    target: str
    description: str | None = None


@dataclass(frozen=True)
class Platform:
    """A positioned platform box holding a vertical stack of systems."""

    name: str
    region: str | None
    node_ids: tuple[str, ...] = ()
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0


@dataclass(frozen=True)
class Region:
    """A positioned region box holding platforms."""

    name: str
    platforms: tuple[Platform, ...] = ()
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    def contains(self, node_id: str) -> bool:
        return any(node_id in platform.node_ids for platform in self.platforms)


@dataclass(frozen=True)
class SpatialInfo:
    """Geometric classification of an edge, measured center to center."""

    primary_direction: Direction
    secondary_direction: Direction
    angle: float
    distance: float
    is_diagonal: bool
    is_close: bool
    delta_x: float
    delta_y: float

    @property
    def is_horizontal(self) -> bool:
        return self.primary_direction in ("left", "right")


@dataclass(frozen=True)
class AnnotatedEdge:
    """An edge together with its spatial classification.

    ``index`` is the position of the edge in the input edge list and
    identifies it when several edges share the same endpoints.
    """

    edge: Edge
    index: int
    spatial: SpatialInfo

    @property
    def source(self) -> str:
        return self.edge.source

    @property
    def target(self) -> str:
        return self.edge.target

    @property
    def description(self) -> str | None:
        return self.edge.description


@dataclass(frozen=True)
class ParallelPosition:
    """Where an edge sits among edges sharing its source or target."""

    incoming_index: int = 0
    outgoing_index: int = 0
    total_incoming: int = 1
    total_outgoing: int = 1
    dominant_incoming_side: Side | None = None


@dataclass(frozen=True)
class RoutingContext:
    """Per-edge input to the router. Built fresh for every routing call."""

    spatial: SpatialInfo | None = None
    parallel: ParallelPosition = field(default_factory=ParallelPosition)
    connection_type: ConnectionType | None = None


@dataclass(frozen=True)
class RouteResult:
    """A routed polyline and the point where its label goes."""

    waypoints: tuple[Point, ...]
    label: Point
    rule: str = "default_routing"

    @property
    def path_data(self) -> str:
        """SVG path data (``M x,y L x,y ...``) for the waypoints."""
        from .geometry import to_path_data

        return to_path_data(self.waypoints)


@dataclass(frozen=True)
class RoutedEdge:
    """An annotated edge paired with its computed route."""

    edge: AnnotatedEdge
    route: RouteResult
