"""Grouping of edges that share an endpoint, for parallel-edge offsets."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Literal

import networkx as nx

from .models import ParallelPosition
from .spatial import primary_directions

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .models import AnnotatedEdge, Node, Side

logger = logging.getLogger(__name__)

_SIDE_FOR_DIRECTION: dict[str, Side] = {
    "left": "left",
    "right": "right",
    "up": "top",
    "down": "bottom",
}


@dataclass
class ConnectionGroup:
    """Edges arriving at (incoming) or leaving (outgoing) one node.

    Edges are kept in insertion order; an edge's index within the group is
    its position in that order.
    """

    node_id: str
    kind: Literal["incoming", "outgoing"]
    graph: nx.MultiDiGraph = field(repr=False)
    nodes: Mapping[str, Node] = field(repr=False)
    edges: list[AnnotatedEdge] = field(default_factory=list)
    total_incoming: int = 0
    total_outgoing: int = 0
    _positions: dict[int, int] = field(default_factory=dict, repr=False)

    def add(self, annotated: AnnotatedEdge) -> None:
        self._positions[annotated.index] = len(self.edges)
        self.edges.append(annotated)
        if self.kind == "incoming":
            self.total_incoming += 1
        else:
            self.total_outgoing += 1

    def index_of(self, annotated: AnnotatedEdge) -> int:
        return self._positions.get(annotated.index, 0)

    @cached_property
    def dominant_side(self) -> Side | None:
        """Side most incoming edges point at, by majority vote.

        Each incoming edge votes with the primary direction from its source
        center to the target center. Ties go to the first side in
        left, right, top, bottom order. Outgoing groups have no side.
        """
        if self.kind != "incoming":
            return None

        target = self.nodes[self.node_id]
        votes: dict[Side, int] = {"left": 0, "right": 0, "top": 0, "bottom": 0}
        for source_id, _ in self.graph.in_edges(self.node_id):
            source = self.nodes[source_id]
            delta_x = target.center.x - source.center.x
            delta_y = target.center.y - source.center.y
            primary, _ = primary_directions(delta_x, delta_y)
            votes[_SIDE_FOR_DIRECTION[primary]] += 1

        return max(votes, key=lambda side: votes[side])


@dataclass
class ConnectionGroups:
    """Incoming groups keyed by target id and outgoing groups keyed by source id."""

    incoming: dict[str, ConnectionGroup]
    outgoing: dict[str, ConnectionGroup]
    graph: nx.MultiDiGraph

    def position_of(self, annotated: AnnotatedEdge) -> ParallelPosition:
        """Parallel position of an edge within its target and source groups."""
        incoming = self.incoming.get(annotated.target)
        outgoing = self.outgoing.get(annotated.source)
        return ParallelPosition(
            incoming_index=incoming.index_of(annotated) if incoming else 0,
            outgoing_index=outgoing.index_of(annotated) if outgoing else 0,
            total_incoming=incoming.total_incoming if incoming else 1,
            total_outgoing=outgoing.total_outgoing if outgoing else 1,
            dominant_incoming_side=incoming.dominant_side if incoming else None,
        )


def build_connection_graph(
    edges: Sequence[AnnotatedEdge],
    nodes: Mapping[str, Node],
) -> nx.MultiDiGraph:
    """Build a multigraph with one edge per resolvable annotated edge.

    Edges are keyed by their input index so duplicates stay distinct.
    """
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(nodes)
    for annotated in edges:
        if annotated.source not in nodes or annotated.target not in nodes:
            continue
        graph.add_edge(annotated.source, annotated.target, key=annotated.index, edge=annotated)
    return graph


def build_groups(
    edges: Sequence[AnnotatedEdge],
    nodes: Mapping[str, Node] | Iterable[Node],
) -> ConnectionGroups:
    """Group edges by shared target (incoming) and shared source (outgoing)."""
    node_map = dict(nodes) if isinstance(nodes, Mapping) else {n.id: n for n in nodes}
    graph = build_connection_graph(edges, node_map)

    incoming: dict[str, ConnectionGroup] = {}
    outgoing: dict[str, ConnectionGroup] = {}

    for annotated in edges:
        if annotated.source not in node_map or annotated.target not in node_map:
            logger.warning(
                "Node not found, edge left out of grouping: %s -> %s",
                annotated.source, annotated.target,
            )
            continue

        if annotated.target not in incoming:
            incoming[annotated.target] = ConnectionGroup(
                node_id=annotated.target, kind="incoming", graph=graph, nodes=node_map,
            )
        incoming[annotated.target].add(annotated)

        if annotated.source not in outgoing:
            outgoing[annotated.source] = ConnectionGroup(
                node_id=annotated.source, kind="outgoing", graph=graph, nodes=node_map,
            )
        outgoing[annotated.source].add(annotated)

    return ConnectionGroups(incoming=incoming, outgoing=outgoing, graph=graph)
