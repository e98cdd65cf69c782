"""SVG renderer using drawsvg."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import drawsvg as draw

from .layout import LayoutConfig, wrap_text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .layout import LayoutResult
    from .models import Node, Platform, Region, RoutedEdge, SpatialInfo

logger = logging.getLogger(__name__)

LABEL_MAX_CHARS = 20
LABEL_WIDTH = 80
LABEL_HEIGHT = 20


class Theme:
    """Color theme for business-architecture diagrams."""

    def __init__(
        self,
        region_fill: str = "#ffffff",
        region_stroke: str = "#333333",
        platform_fill: str = "#fff3e0",
        platform_stroke: str = "#ffcc02",
        platform_text: str = "#e65100",
        system_fill: str = "#f1f8e9",
        system_stroke: str = "#8bc34a",
        external_fill: str = "#e8f5e8",
        external_stroke: str = "#66bb6a",
        product_fill: str = "#e3f2fd",
        product_stroke: str = "#42a5f5",
        sales_fill: str = "#fce4ec",
        sales_stroke: str = "#ec407a",
        text_color: str = "#333333",
        system_text: str = "#37474f",
        functions_fill: str = "#f3e5f5",
        functions_stroke: str = "#ba68c8",
        functions_text: str = "#6a1b9a",
        function_fill: str = "#f8bbd9",
        function_stroke: str = "#f48fb1",
        function_text: str = "#4a148c",
        edge_color: str = "#999999",
        diagonal_edge_color: str = "#ff6b35",
        close_edge_color: str = "#4ecdc4",
        label_stroke: str = "#666666",
        font_family: str = "'Segoe UI', Arial, sans-serif",
    ):
        self.region_fill = region_fill
        self.region_stroke = region_stroke
        self.platform_fill = platform_fill
        self.platform_stroke = platform_stroke
        self.platform_text = platform_text
        self.system_fill = system_fill
        self.system_stroke = system_stroke
        self.external_fill = external_fill
        self.external_stroke = external_stroke
        self.product_fill = product_fill
        self.product_stroke = product_stroke
        self.sales_fill = sales_fill
        self.sales_stroke = sales_stroke
        self.text_color = text_color
        self.system_text = system_text
        self.functions_fill = functions_fill
        self.functions_stroke = functions_stroke
        self.functions_text = functions_text
        self.function_fill = function_fill
        self.function_stroke = function_stroke
        self.function_text = function_text
        self.edge_color = edge_color
        self.diagonal_edge_color = diagonal_edge_color
        self.close_edge_color = close_edge_color
        self.label_stroke = label_stroke
        self.font_family = font_family

    def stylesheet(self) -> str:
        """CSS for every class the renderer emits."""
        system_shadow = "filter: drop-shadow(2px 2px 4px rgba(0,0,0,0.1));"
        connection_common = "fill: none; stroke-linecap: round; stroke-linejoin: round;"

        def system(name: str, fill: str, stroke: str) -> str:
            return f".{name} {{ fill: {fill}; stroke: {stroke}; stroke-width: 2; rx: 8; {system_shadow} }}"

        return "\n".join([
            f".region-bg {{ fill: {self.region_fill}; stroke: {self.region_stroke}; "
            f"stroke-width: 3; stroke-dasharray: 8,4; rx: 12; }}",
            f".region-title {{ font-family: Arial, sans-serif; font-size: 18px; "
            f"font-weight: bold; fill: {self.text_color}; }}",
            f".platform-bg {{ fill: {self.platform_fill}; stroke: {self.platform_stroke}; "
            f"stroke-width: 2; rx: 8; }}",
            f".platform-title {{ font-family: Arial, sans-serif; font-size: 14px; "
            f"font-weight: bold; fill: {self.platform_text}; }}",
            system("business-system", self.system_fill, self.system_stroke),
            system("business-system-external", self.external_fill, self.external_stroke),
            system("business-system-product", self.product_fill, self.product_stroke),
            system("business-system-sales", self.sales_fill, self.sales_stroke),
            f".business-system-title {{ font-family: {self.font_family}; font-size: 13px; "
            f"font-weight: 600; fill: {self.system_text}; }}",
            f".functions-block {{ fill: {self.functions_fill}; stroke: {self.functions_stroke}; "
            f"stroke-width: 1; rx: 6; }}",
            f".functions-title {{ font-family: {self.font_family}; font-size: 11px; "
            f"font-weight: 600; fill: {self.functions_text}; }}",
            f".function-item {{ fill: {self.function_fill}; stroke: {self.function_stroke}; "
            f"stroke-width: 1; rx: 4; }}",
            f".function-text {{ font-family: {self.font_family}; font-size: 10px; "
            f"font-weight: 500; fill: {self.function_text}; }}",
            f".business-connection {{ stroke: {self.edge_color}; stroke-width: 2; "
            f"stroke-dasharray: 5,5; {connection_common} }}",
            f".business-connection-diagonal {{ stroke: {self.diagonal_edge_color}; stroke-width: 2.5; "
            f"stroke-dasharray: 8,3; {connection_common} }}",
            f".business-connection-close {{ stroke: {self.close_edge_color}; stroke-width: 3; "
            f"stroke-dasharray: 3,2; {connection_common} }}",
            f".business-connection-external {{ stroke: {self.edge_color}; stroke-width: 2; "
            f"stroke-dasharray: 5,5; {connection_common} }}",
            f".connection-label-bg {{ fill: rgba(255,255,255,0.95); stroke: {self.label_stroke}; "
            f"stroke-width: 1; }}",
            f".connection-label-text {{ font-family: Arial, sans-serif; font-size: 10px; "
            f"font-weight: bold; fill: {self.text_color}; }}",
        ])


DEFAULT_THEME = Theme()


def truncate_label(text: str, max_chars: int = LABEL_MAX_CHARS) -> str:
    """Cut text to max_chars characters and append "..." when it was longer."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


def system_css_class(node: Node) -> str:
    if node.is_external:
        return "business-system-external"
    if "product_fabric" in node.roles:
        return "business-system-product"
    if "sales_channel" in node.roles:
        return "business-system-sales"
    return "business-system"


def connection_css_class(source: Node, target: Node, spatial: SpatialInfo | None) -> str:
    """CSS class of a connection path.

    External endpoints win over the spatial classification; diagonal wins
    over close.
    """
    if source.is_external or target.is_external:
        return "business-connection-external"
    if spatial is not None:
        if spatial.is_diagonal:
            return "business-connection-diagonal"
        if spatial.is_close:
            return "business-connection-close"
    return "business-connection"


def connection_marker_id(source: Node, target: Node) -> str:
    if source.is_external or target.is_external:
        return "arrowhead-external"
    return "arrowhead-business"


class DiagramRenderer:
    """Renders laid-out diagrams and their precomputed routes to SVG."""

    def __init__(
        self,
        theme: Theme | None = None,
        config: LayoutConfig | None = None,
    ):
        self.theme = theme or DEFAULT_THEME
        self.config = config or LayoutConfig()

    def render(self, layout: LayoutResult, routes: Sequence[RoutedEdge] = ()) -> draw.Drawing:
        """Render regions, platforms, systems and then connections on top."""
        d = draw.Drawing(layout.width, layout.height)
        d.append_css(self.theme.stylesheet())

        markers = {
            "arrowhead-business": self._make_marker("arrowhead-business"),
            "arrowhead-external": self._make_marker("arrowhead-external"),
        }

        for region in layout.regions:
            self._render_region(d, region, layout)

        for platform in layout.platforms_without_region:
            d.append(self._render_platform(platform, layout))

        for routed in routes:
            self._render_connection(d, routed, layout, markers)

        logger.debug(
            "Rendered %d regions, %d systems, %d connections",
            len(layout.regions), len(layout.nodes), len(routes),
        )
        return d

    def _make_marker(self, marker_id: str) -> draw.Marker:
        marker = draw.Marker(-0.1, -0.51, 0.9, 0.5, scale=8, orient="auto", id=marker_id)
        marker.append(
            draw.Lines(
                -0.1, 0.5,
                -0.1, -0.5,
                0.9, 0,
                fill=self.theme.edge_color,
                close=True,
            )
        )
        return marker

    def _render_region(self, d: draw.Drawing, region: Region, layout: LayoutResult) -> None:
        group = draw.Group(class_="region")
        group.append(
            draw.Rectangle(region.x, region.y, region.width, region.height, class_="region-bg")
        )
        group.append(
            draw.Text(region.name, 18, region.x + 15, region.y + 25, class_="region-title")
        )
        for platform in region.platforms:
            group.append(self._render_platform(platform, layout))
        d.append(group)

    def _render_platform(self, platform: Platform, layout: LayoutResult) -> draw.Group:
        group = draw.Group(class_="platform")
        group.append(
            draw.Rectangle(platform.x, platform.y, platform.width, platform.height, class_="platform-bg")
        )
        group.append(
            draw.Text(platform.name, 14, platform.x + 15, platform.y + 20, class_="platform-title")
        )
        for node_id in platform.node_ids:
            group.append(self._render_system(layout.nodes[node_id]))
        return group

    def _render_system(self, node: Node) -> draw.Group:
        """Render a system box with its wrapped title and function list."""
        config = self.config
        group = draw.Group(class_="system")
        group.append(
            draw.Rectangle(node.x, node.y, node.width, node.height, class_=system_css_class(node))
        )

        title_lines = wrap_text(node.name, node.width - 20, config.char_width_avg)
        for i, line in enumerate(title_lines):
            group.append(
                draw.Text(
                    line, 13, node.x + 10, node.y + 18 + i * config.title_line_height,
                    class_="business-system-title",
                )
            )

        if not node.functions:
            return group

        current_y = node.y + len(title_lines) * config.title_line_height + 20
        wrapped = [
            wrap_text(func.name, config.max_function_text_width, config.char_width_avg)
            for func in node.functions
        ]
        block_height = 35 + sum(len(lines) * config.function_line_height + 15 for lines in wrapped)

        group.append(
            draw.Rectangle(
                node.x + 10, current_y, node.width - 20, block_height,
                class_="functions-block",
            )
        )
        group.append(
            draw.Text("Functions:", 11, node.x + 15, current_y + 20, class_="functions-title")
        )

        func_y = current_y + 30
        for lines in wrapped:
            item_height = len(lines) * config.function_line_height + 10
            group.append(
                draw.Rectangle(
                    node.x + 15, func_y - 5, node.width - 30, item_height,
                    class_="function-item",
                )
            )
            for i, line in enumerate(lines):
                group.append(
                    draw.Text(
                        line, 10, node.x + 20, func_y + 10 + i * config.function_line_height,
                        class_="function-text",
                    )
                )
            func_y += item_height + 15

        return group

    def _render_connection(
        self,
        d: draw.Drawing,
        routed: RoutedEdge,
        layout: LayoutResult,
        markers: dict[str, draw.Marker],
    ) -> None:
        """Draw a precomputed route; no routing decisions happen here."""
        source = layout.nodes[routed.edge.source]
        target = layout.nodes[routed.edge.target]
        waypoints = routed.route.waypoints
        if len(waypoints) < 2:
            return

        d.append(
            draw.Path(
                routed.route.path_data,
                class_=connection_css_class(source, target, routed.edge.spatial),
                marker_end=markers[connection_marker_id(source, target)],
            )
        )

        description = routed.edge.description
        if description:
            label = routed.route.label
            d.append(
                draw.Rectangle(
                    label.x - LABEL_WIDTH / 2,
                    label.y - LABEL_HEIGHT / 2,
                    LABEL_WIDTH,
                    LABEL_HEIGHT,
                    rx=3, ry=3,
                    class_="connection-label-bg",
                )
            )
            d.append(
                draw.Text(
                    truncate_label(description),
                    10,
                    label.x, label.y + 4,
                    text_anchor="middle",
                    class_="connection-label-text",
                )
            )


def render_to_svg(
    layout: LayoutResult,
    routes: Sequence[RoutedEdge] = (),
    theme: Theme | None = None,
    filename: str | None = None,
) -> str:
    """Render a layout and its routes to SVG.

    Args:
        layout: Positioned regions, platforms and systems
        routes: Routed connections to draw on top
        theme: Optional color theme
        filename: Optional filename to save to (without extension)

    Returns:
        SVG content as string
    """
    renderer = DiagramRenderer(theme)
    drawing = renderer.render(layout, routes)

    if filename:
        drawing.save_svg(f"{filename}.svg")

    return drawing.as_svg()
