"""archplot - Business-architecture diagrams with rule-based connection routing.

Example usage:
    from archplot import ArchitectureGenerator, export_svg

    data = {
        "AS": [
            {"id": "crm", "name": "CRM", "platform": "Customer Platform", "region": "Front Office"},
            {"id": "erp", "name": "ERP", "platform": "Corporate Platform", "region": "Back Office"},
        ],
        "Link": [{"source": {"AS": "CRM"}, "target": {"AS": "ERP"}, "description": "Orders"}],
    }
    result = ArchitectureGenerator().generate(data)
    export_svg(result.svg, "architecture.svg")
"""

from .generator import (
    ArchitectureGenerator,
    GenerationResult,
    GenerationStats,
    demo_data,
    export_svg,
)
from .grouping import (
    ConnectionGroup,
    ConnectionGroups,
    build_groups,
)
from .layout import (
    LayoutConfig,
    LayoutResult,
    layout_architecture,
)
from .models import (
    AnnotatedEdge,
    ConnectionType,
    Edge,
    Function,
    Node,
    ParallelPosition,
    Platform,
    Point,
    Region,
    RoutedEdge,
    RouteResult,
    RoutingContext,
    SpatialInfo,
)
from .parser import (
    ParseError,
    ValidationResult,
    parse_business_data,
    validate_business_data,
)
from .renderer import (
    DEFAULT_THEME,
    DiagramRenderer,
    Theme,
    render_to_svg,
)
from .routing import (
    ConnectionRouter,
    ObstacleSet,
    RouteStrategy,
    RoutingConfig,
    RoutingRule,
)
from .spatial import (
    SpatialAnalysis,
    SpatialConfig,
    analyze,
    analyze_spatial_relation,
)

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "ArchitectureGenerator",
    "GenerationResult",
    "GenerationStats",
    "demo_data",
    "export_svg",
    # Models
    "AnnotatedEdge",
    "ConnectionType",
    "Edge",
    "Function",
    "Node",
    "ParallelPosition",
    "Platform",
    "Point",
    "Region",
    "RoutedEdge",
    "RouteResult",
    "RoutingContext",
    "SpatialInfo",
    # Parsing and layout
    "ParseError",
    "ValidationResult",
    "parse_business_data",
    "validate_business_data",
    "LayoutConfig",
    "LayoutResult",
    "layout_architecture",
    # Spatial analysis
    "SpatialAnalysis",
    "SpatialConfig",
    "analyze",
    "analyze_spatial_relation",
    # Grouping
    "ConnectionGroup",
    "ConnectionGroups",
    "build_groups",
    # Routing
    "ConnectionRouter",
    "ObstacleSet",
    "RouteStrategy",
    "RoutingConfig",
    "RoutingRule",
    # Rendering
    "render_to_svg",
    "DiagramRenderer",
    "Theme",
    "DEFAULT_THEME",
    # Version
    "__version__",
]
