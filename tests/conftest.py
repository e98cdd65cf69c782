"""Pytest configuration and shared fixtures for archplot tests."""

import pytest

from archplot import Node, Region, demo_data
from archplot.models import Platform


def make_node(node_id, x, y, width=200, height=100, platform="Core", region="Main", **kwargs):
    """Positioned node with sensible defaults."""
    return Node(
        id=node_id,
        name=kwargs.pop("name", node_id),
        platform=platform,
        region=region,
        x=x,
        y=y,
        width=width,
        height=height,
        **kwargs,
    )


def make_region(name, nodes, x, y, width, height):
    """Region holding one platform with the given nodes."""
    platform = Platform(name=f"{name} platform", region=name, node_ids=tuple(n.id for n in nodes))
    return Region(name=name, platforms=(platform,), x=x, y=y, width=width, height=height)


@pytest.fixture
def aligned_pair():
    """Two level nodes 500 units apart (centers), same platform and region."""
    a = make_node("A", 0, 0)
    b = make_node("B", 500, 0)
    return a, b


@pytest.fixture
def blocked_row():
    """A and B in one row with C sitting between them."""
    a = make_node("A", 0, 0, 100, 50)
    c = make_node("C", 150, 0, 100, 50)
    b = make_node("B", 300, 0, 100, 50)
    return a, b, c


@pytest.fixture
def simple_data():
    """Two regions, one link."""
    return {
        "AS": [
            {"id": "crm", "name": "CRM", "platform": "Customer Platform", "region": "Front Office"},
            {"id": "erp", "name": "ERP", "platform": "Corporate Platform", "region": "Back Office"},
        ],
        "Link": [
            {"source": {"AS": "CRM"}, "target": {"AS": "ERP"}, "description": "Orders"},
        ],
    }


@pytest.fixture
def demo():
    """Built-in demo data."""
    return demo_data()
