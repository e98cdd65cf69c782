"""End-to-end diagram generation: parse, lay out, analyze, group, route, render."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .grouping import ConnectionGroups, build_groups
from .layout import LayoutConfig, LayoutResult, layout_architecture
from .models import RoutedEdge, RoutingContext
from .parser import parse_business_data
from .renderer import DiagramRenderer, Theme
from .routing import ConnectionRouter, ObstacleSet, RoutingConfig
from .spatial import SpatialAnalysis, SpatialConfig, analyze

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    systems: int
    connections: int
    regions: int
    platforms: int


@dataclass
class GenerationResult:
    """Everything produced by one generation run."""

    svg: str
    stats: GenerationStats
    layout: LayoutResult
    analysis: SpatialAnalysis
    groups: ConnectionGroups
    routes: list[RoutedEdge]


class ArchitectureGenerator:
    """Turns business data into an SVG diagram."""

    def __init__(
        self,
        layout_config: LayoutConfig | None = None,
        spatial_config: SpatialConfig | None = None,
        routing_config: RoutingConfig | None = None,
        theme: Theme | None = None,
    ):
        self.layout_config = layout_config or LayoutConfig()
        self.spatial_config = spatial_config or SpatialConfig()
        self.routing_config = routing_config or RoutingConfig()
        self.renderer = DiagramRenderer(theme, self.layout_config)

    def generate(self, data: dict[str, Any]) -> GenerationResult:
        """Run the whole pipeline.

        Raises:
            ParseError: If the business data is structurally invalid.
        """
        parsed = parse_business_data(data)
        layout = layout_architecture(parsed, self.layout_config)

        analysis = analyze(layout.nodes, parsed.edges, self.spatial_config)
        groups = build_groups(analysis.edges, layout.nodes)

        # One snapshot shared by every routing call
        router = ConnectionRouter(ObstacleSet.from_layout(layout), self.routing_config)
        routes: list[RoutedEdge] = []
        for annotated in analysis.edges:
            source = layout.nodes[annotated.source]
            target = layout.nodes[annotated.target]
            context = RoutingContext(
                spatial=annotated.spatial,
                parallel=groups.position_of(annotated),
            )
            routes.append(RoutedEdge(edge=annotated, route=router.route(source, target, context)))

        svg = self.renderer.render(layout, routes).as_svg()

        stats = GenerationStats(
            systems=len(layout.nodes),
            connections=len(routes),
            regions=len(layout.regions),
            platforms=len(layout.platforms),
        )
        logger.info(
            "Generated diagram: %d systems, %d connections, %d regions, %d platforms",
            stats.systems, stats.connections, stats.regions, stats.platforms,
        )

        return GenerationResult(
            svg=svg,
            stats=stats,
            layout=layout,
            analysis=analysis,
            groups=groups,
            routes=routes,
        )


def export_svg(svg: str, path: str | Path = "business-architecture.svg") -> Path:
    """Write SVG text to ``path`` and return the path."""
    path = Path(path)
    path.write_text(svg, encoding="utf-8")
    logger.info("SVG saved: %s", path)
    return path


def demo_data() -> dict[str, Any]:
    """A small landscape with two regions, an external system and a self-loop."""
    return {
        "AS": [
            {"id": "crm", "name": "CRM System", "platform": "Customer Platform",
             "region": "Front Office", "role": ["sales_channel"]},
            {"id": "portal", "name": "Customer Portal", "platform": "Customer Platform",
             "region": "Front Office", "role": ["sales_channel"]},
            {"id": "orders", "name": "Order Management", "platform": "Customer Platform",
             "region": "Front Office"},
            {"id": "erp", "name": "ERP System", "platform": "Corporate Platform",
             "region": "Back Office", "role": ["product_fabric"]},
            {"id": "billing", "name": "Billing System", "platform": "Finance Platform",
             "region": "Back Office"},
            {"id": "bank", "name": "Bank Gateway", "platform": "External System"},
        ],
        "Function": [
            {"id": "f1", "name": "Customer management", "AS": "CRM System"},
            {"id": "f2", "name": "Order processing", "AS": "Order Management"},
            {"id": "f3", "name": "Warehouse management", "AS": "ERP System"},
            {"id": "f4", "name": "Financial accounting", "AS": "ERP System"},
            {"id": "f5", "name": "Invoicing", "AS": "Billing System"},
        ],
        "Link": [
            {"source": {"AS": "Customer Portal"}, "target": {"AS": "CRM System"},
             "description": "Customer data"},
            {"source": {"AS": "CRM System"}, "target": {"AS": "Order Management"},
             "description": "New orders"},
            {"source": {"AS": "Order Management"}, "target": {"AS": "Order Management"},
             "description": "Retry"},
            {"source": {"AS": "Order Management"}, "target": {"AS": "ERP System"},
             "description": "Order fulfilment"},
            {"source": {"AS": "ERP System"}, "target": {"AS": "Billing System"}},
            {"source": {"AS": "Billing System"}, "target": {"AS": "Bank Gateway"},
             "description": "Payment requests"},
        ],
    }
