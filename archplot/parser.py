"""Parser for business-architecture JSON data.

Expected shape::

    {
        "AS": [{"id": "crm", "name": "CRM", "platform": "...", "region": "...", "role": [...]}],
        "Function": [{"id": "f1", "name": "...", "AS": "CRM"}],
        "Link": [{"source": {"AS": "CRM"}, "target": {"AS": "ERP"}, "description": "..."}]
    }

``Links`` is accepted as an alias of ``Link``; both lists are concatenated.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models import UNSPECIFIED_PLATFORM, Edge, Function, Node

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when business data is structurally invalid."""


@dataclass
class ValidationResult:
    """Outcome of validating raw business data."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ParsedPlatform:
    """A platform and the ids of its systems, in first-seen order."""

    name: str
    region: str | None
    node_ids: list[str] = field(default_factory=list)


@dataclass
class ParsedRegion:
    name: str
    platforms: list[ParsedPlatform] = field(default_factory=list)


@dataclass
class ParsedArchitecture:
    """Unpositioned systems, their grouping and the edges between them."""

    nodes: dict[str, Node]
    edges: list[Edge]
    regions: list[ParsedRegion]
    nodes_without_region: list[str]

    @property
    def platform_count(self) -> int:
        return sum(len(region.platforms) for region in self.regions)


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ParseError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _link_end_name(end: Any) -> str:
    if isinstance(end, str):
        return end
    if not isinstance(end, dict):
        return ""
    return end.get("AS") or end.get("name") or ""


def _links(data: dict[str, Any]) -> list[Any]:
    return _require_list(data, "Link") + _require_list(data, "Links")


def parse_business_data(data: dict[str, Any]) -> ParsedArchitecture:
    """Parse raw business data into nodes, edges and region/platform grouping.

    Raises:
        ParseError: If the data is not an object, a section is not a list,
            a system has no name or a link has no source/target.
    """
    if not isinstance(data, dict):
        raise ParseError(f"Business data must be an object, got {type(data).__name__}")

    systems = _require_list(data, "AS")
    functions = _require_list(data, "Function")

    functions_by_system: dict[str, list[Function]] = {}
    for i, func in enumerate(functions):
        if not isinstance(func, dict) or not func.get("name"):
            raise ParseError(f"Function #{i} has no name")
        owner = func.get("AS")
        if not owner:
            continue
        functions_by_system.setdefault(owner, []).append(
            Function(id=str(func.get("id", func["name"])), name=func["name"], type=func.get("type"))
        )

    nodes: dict[str, Node] = {}
    id_by_name: dict[str, str] = {}
    regions: dict[str, ParsedRegion] = {}
    platforms: dict[tuple[str, str], ParsedPlatform] = {}
    nodes_without_region: list[str] = []

    for i, system in enumerate(systems):
        if not isinstance(system, dict) or not system.get("name"):
            raise ParseError(f"System #{i} has no name")

        name = system["name"]
        node = Node(
            id=str(system.get("id") or name),
            name=name,
            platform=system.get("platform") or UNSPECIFIED_PLATFORM,
            region=system.get("region"),
            roles=tuple(system.get("role") or ()),
            functions=tuple(functions_by_system.get(name, ())),
        )
        if node.id in nodes:
            logger.warning("Duplicate system id '%s', keeping the first definition", node.id)
            continue
        nodes[node.id] = node
        id_by_name[name] = node.id

        if node.region is None:
            nodes_without_region.append(node.id)
            continue

        region = regions.setdefault(node.region, ParsedRegion(name=node.region))
        key = (node.region, node.platform)
        if key not in platforms:
            platforms[key] = ParsedPlatform(name=node.platform, region=node.region)
            region.platforms.append(platforms[key])
        platforms[key].node_ids.append(node.id)

    edges: list[Edge] = []
    for i, link in enumerate(_links(data)):
        if not isinstance(link, dict) or "source" not in link or "target" not in link:
            raise ParseError(f"Link #{i} must have 'source' and 'target'")
        source = _link_end_name(link["source"])
        target = _link_end_name(link["target"])
        if not source or not target:
            logger.debug("Ignoring link #%d with an empty endpoint", i)
            continue
        # Unknown names stay as-is so routing can report and drop them
        edges.append(Edge(
            source=id_by_name.get(source, source),
            target=id_by_name.get(target, target),
            description=link.get("description"),
        ))

    parsed = ParsedArchitecture(
        nodes=nodes,
        edges=edges,
        regions=list(regions.values()),
        nodes_without_region=nodes_without_region,
    )
    logger.info(
        "Parsed %d systems, %d connections, %d regions, %d platforms, %d systems without region",
        len(nodes), len(edges), len(parsed.regions), parsed.platform_count, len(nodes_without_region),
    )
    return parsed


def validate_business_data(data: Any) -> ValidationResult:
    """Check business data without raising.

    Missing names are errors; duplicate names and links to unknown systems
    are warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(data, dict):
        return ValidationResult(is_valid=False, errors=["Business data must be an object"])

    names: set[str] = set()
    systems = data.get("AS") or []
    if not isinstance(systems, list):
        errors.append("'AS' must be a list")
        systems = []

    for i, system in enumerate(systems):
        name = system.get("name") if isinstance(system, dict) else None
        if not name:
            errors.append(f"System #{i} has no name")
            continue
        if name in names:
            warnings.append(f"Duplicate system name '{name}'")
        names.add(name)

    try:
        links = _links(data)
    except ParseError as e:
        errors.append(str(e))
        links = []

    for i, link in enumerate(links):
        if not isinstance(link, dict) or "source" not in link or "target" not in link:
            errors.append(f"Link #{i} must have 'source' and 'target'")
            continue
        for end in ("source", "target"):
            end_name = _link_end_name(link[end])
            if end_name and end_name not in names:
                warnings.append(f"Link #{i} {end} '{end_name}' is not a known system")

    for warning in warnings:
        logger.warning(warning)

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def load_business_data(path: str | Path) -> dict[str, Any]:
    """Read business data from a UTF-8 JSON file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)
