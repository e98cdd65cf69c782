"""Unit tests for the layout module."""

import pytest

from archplot.layout import (
    LayoutConfig,
    calculate_node_height,
    layout_architecture,
    wrap_text,
)
from archplot.models import Function, Node
from archplot.parser import parse_business_data


class TestWrapText:
    """Tests for wrap_text."""

    def test_short_text_is_one_line(self):
        assert wrap_text("CRM", 300) == ["CRM"]

    def test_wraps_on_spaces(self):
        assert wrap_text("aaa bbb ccc", 42) == ["aaa bbb", "ccc"]

    def test_long_word_stays_whole(self):
        assert wrap_text("abcdefghijkl xy", 30) == ["abcdefghijkl", "xy"]

    def test_empty(self):
        assert wrap_text("", 100) == [""]


class TestNodeHeight:
    """Tests for calculate_node_height."""

    def test_minimum_height(self):
        assert calculate_node_height(Node(id="a", name="CRM"), LayoutConfig()) == 80

    def test_functions_add_room(self):
        node = Node(
            id="a",
            name="ERP",
            functions=(Function("f1", "Warehouse"), Function("f2", "Accounting")),
        )
        # 80 + 35 + 2 * 30 + 15 + 20
        assert calculate_node_height(node, LayoutConfig()) == 210

    def test_long_title_grows_node(self):
        name = " ".join(["word"] * 60)
        height = calculate_node_height(Node(id="a", name=name), LayoutConfig())
        lines = len(wrap_text(name, 300))
        assert lines > 3
        assert height == lines * 16 + 10 + 20


class TestLayoutArchitecture:
    """Tests for layout_architecture."""

    @pytest.fixture
    def one_platform(self):
        data = {
            "AS": [
                {"id": "a", "name": "Alpha", "platform": "Core", "region": "Main"},
                {"id": "b", "name": "Beta", "platform": "Core", "region": "Main"},
            ]
        }
        return layout_architecture(parse_business_data(data))

    def test_systems_stack_vertically(self, one_platform):
        a = one_platform.nodes["a"]
        b = one_platform.nodes["b"]
        assert (a.x, a.y, a.width, a.height) == (80, 120, 320, 80)
        assert (b.x, b.y) == (80, 220)

    def test_platform_and_region_frames(self, one_platform):
        region = one_platform.regions[0]
        platform = region.platforms[0]
        assert (platform.x, platform.y, platform.width, platform.height) == (70, 80, 380, 250)
        assert (region.x, region.y, region.width, region.height) == (50, 50, 420, 350)
        assert platform.node_ids == ("a", "b")

    def test_canvas_size(self, one_platform):
        assert one_platform.width == 520
        assert one_platform.height == 450

    def test_systems_fit_inside_their_platform(self, demo):
        layout = layout_architecture(parse_business_data(demo))
        for platform in layout.platforms:
            for node_id in platform.node_ids:
                node = layout.nodes[node_id]
                assert platform.x <= node.x
                assert node.right <= platform.x + platform.width
                assert platform.y <= node.y
                assert node.bottom <= platform.y + platform.height

    def test_regions_left_to_right(self, simple_data):
        layout = layout_architecture(parse_business_data(simple_data))
        first, second = layout.regions
        assert second.x == first.x + first.width + 50
        assert layout.nodes["erp"].x > layout.nodes["crm"].right

    def test_systems_without_region(self):
        data = {
            "AS": [
                {"id": "a", "name": "Alpha", "platform": "Core", "region": "Main"},
                {"id": "x", "name": "Bank", "platform": "External System"},
            ]
        }
        layout = layout_architecture(parse_business_data(data))
        platform = layout.platforms_without_region[0]
        assert platform.name == "External System"
        assert (platform.x, platform.y) == (520, 50)
        assert (layout.nodes["x"].x, layout.nodes["x"].y) == (550, 90)
        assert layout.platforms[-1] is platform

    def test_only_systems_without_region(self):
        layout = layout_architecture(parse_business_data({"AS": [{"name": "Solo"}]}))
        assert layout.regions == []
        assert layout.nodes["Solo"].x == 130

    def test_node_order_follows_input(self, demo):
        layout = layout_architecture(parse_business_data(demo))
        assert list(layout.nodes) == [s["id"] for s in demo["AS"]]

    def test_empty(self):
        layout = layout_architecture(parse_business_data({}))
        assert layout.nodes == {}
        assert layout.width == 100
        assert layout.height == 100
