"""Layout algorithms for archplot diagrams."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from .models import Node, Platform, Region
from .parser import ParsedPlatform

if TYPE_CHECKING:
    from .parser import ParsedArchitecture


@dataclass
class LayoutConfig:
    """Configuration for layout calculations."""

    # Fixed node width for consistent appearance
    node_width: float = 320
    min_node_height: float = 80
    title_line_height: float = 16
    function_line_height: float = 20
    max_function_text_width: float = 280
    char_width_avg: float = 6  # Average character width used for wrapping
    system_padding: float = 20  # Vertical gap between systems in a platform
    platform_padding: float = 30
    region_padding: float = 40
    header_height: float = 40  # Room for region/platform titles
    platform_spacing: float = 30  # Vertical gap between platforms in a region
    min_platform_width: float = 200
    region_margin: float = 50  # Gap between regions and canvas margin
    origin_x: float = 50
    origin_y: float = 50


@dataclass
class LayoutResult:
    """Positioned nodes, platforms and regions plus the canvas size."""

    nodes: dict[str, Node]
    regions: list[Region] = field(default_factory=list)
    platforms_without_region: list[Platform] = field(default_factory=list)
    width: float = 0
    height: float = 0

    @property
    def platforms(self) -> list[Platform]:
        nested = [p for region in self.regions for p in region.platforms]
        return nested + self.platforms_without_region


def wrap_text(text: str, max_width: float, char_width: float = 6) -> list[str]:
    """Greedily wrap text on spaces to lines of at most max_width/char_width chars."""
    if not text:
        return [""]

    max_chars = math.floor(max_width / char_width)
    if len(text) <= max_chars:
        return [text]

    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        if len(current + word) > max_chars and current:
            lines.append(current.strip())
            current = f"{word} "
        else:
            current += f"{word} "

    if current.strip():
        lines.append(current.strip())

    return lines or [""]


def calculate_node_height(node: Node, config: LayoutConfig) -> float:
    """Calculate the height needed for a node's title and functions.

    Width is fixed (``config.node_width``).
    """
    title_lines = wrap_text(node.name, config.node_width - 20, config.char_width_avg)
    title_height = len(title_lines) * config.title_line_height + 10

    functions_height = 0.0
    if node.functions:
        functions_height = 25  # "Functions:" header
        for func in node.functions:
            lines = wrap_text(func.name, config.max_function_text_width, config.char_width_avg)
            functions_height += len(lines) * config.function_line_height + 8
        functions_height += 10

    height = max(title_height + functions_height + 20, config.min_node_height)

    if node.functions:
        # Room for the rendered function block with its spacing
        n = len(node.functions)
        rendered_block = 35 + n * 30 + (n - 1) * 15 + 20
        height = max(height, config.min_node_height + rendered_block)

    return height


def _stack_platform(
    platform: ParsedPlatform,
    nodes: dict[str, Node],
    positioned: dict[str, Node],
    x: float,
    y: float,
    config: LayoutConfig,
) -> Platform:
    """Stack a platform's systems vertically starting at (x, y)."""
    current_y = y + config.header_height
    max_width = 0.0
    total_height = 0.0

    for node_id in platform.node_ids:
        node = nodes[node_id]
        height = calculate_node_height(node, config)
        positioned[node_id] = replace(
            node,
            x=x + config.platform_padding,
            y=current_y,
            width=config.node_width,
            height=height,
        )
        current_y += height + config.system_padding
        max_width = max(max_width, config.node_width + config.platform_padding * 2)
        total_height += height + config.system_padding

    return Platform(
        name=platform.name,
        region=platform.region,
        node_ids=tuple(platform.node_ids),
        x=x,
        y=y,
        width=max(max_width, config.min_platform_width),
        height=total_height + 50,
    )


def layout_architecture(
    parsed: ParsedArchitecture,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """Position every system inside its platform and region.

    Regions are placed left to right; inside a region platforms stack
    vertically, and inside a platform systems stack vertically. Systems
    without a region are grouped by platform to the right of all regions.
    """
    if config is None:
        config = LayoutConfig()

    positioned: dict[str, Node] = {}
    regions: list[Region] = []

    current_region_x = config.origin_x
    for parsed_region in parsed.regions:
        current_platform_y = config.region_padding + config.header_height
        max_region_width = 0.0
        platforms: list[Platform] = []

        for parsed_platform in parsed_region.platforms:
            # Systems sit at region x + platform padding, the platform frame
            # is inset by half the region padding
            platform = _stack_platform(
                parsed_platform, parsed.nodes, positioned,
                current_region_x, current_platform_y, config,
            )
            platform = replace(platform, x=current_region_x + config.region_padding / 2)
            platforms.append(platform)

            current_platform_y += platform.height + config.platform_spacing
            max_region_width = max(max_region_width, platform.width + config.region_padding)

        region = Region(
            name=parsed_region.name,
            platforms=tuple(platforms),
            x=current_region_x,
            y=config.origin_y,
            width=max_region_width,
            height=current_platform_y - config.origin_y + config.region_padding,
        )
        regions.append(region)
        current_region_x += region.width + config.region_margin

    # Systems without a region, grouped by platform
    by_platform: dict[str, ParsedPlatform] = {}
    for node_id in parsed.nodes_without_region:
        name = parsed.nodes[node_id].platform
        by_platform.setdefault(name, ParsedPlatform(name=name, region=None)).node_ids.append(node_id)

    max_region_x = max([config.origin_x] + [r.x + r.width for r in regions])
    current_platform_x = max_region_x + config.region_margin
    platforms_without_region: list[Platform] = []
    for parsed_platform in by_platform.values():
        platform = _stack_platform(
            parsed_platform, parsed.nodes, positioned,
            current_platform_x, config.origin_y, config,
        )
        platforms_without_region.append(platform)
        current_platform_x += platform.width + config.region_margin

    # Keep input order for the node map
    nodes = {node_id: positioned[node_id] for node_id in parsed.nodes if node_id in positioned}

    boxes = [*regions, *platforms_without_region, *nodes.values()]
    width = max((b.x + b.width for b in boxes), default=config.origin_x) + config.region_margin
    height = max((b.y + b.height for b in boxes), default=config.origin_y) + config.region_margin

    return LayoutResult(
        nodes=nodes,
        regions=regions,
        platforms_without_region=platforms_without_region,
        width=width,
        height=height,
    )
