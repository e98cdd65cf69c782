"""Unit tests for the spatial relation analyzer."""

import logging
import math

import pytest
from conftest import make_node

from archplot.models import Edge
from archplot.spatial import (
    SpatialConfig,
    analyze,
    analyze_spatial_relation,
    format_analysis_report,
    primary_directions,
)


class TestPrimaryDirections:
    """Tests for the dominant-axis rule."""

    def test_horizontal_dominant(self):
        assert primary_directions(100, 20) == ("right", "down")
        assert primary_directions(-100, -20) == ("left", "up")

    def test_vertical_dominant(self):
        assert primary_directions(20, 100) == ("down", "right")
        assert primary_directions(-20, -100) == ("up", "left")

    def test_tie_goes_to_vertical(self):
        assert primary_directions(50, 50) == ("down", "right")
        assert primary_directions(-50, 50) == ("down", "left")


class TestAnalyzeSpatialRelation:
    """Tests for analyze_spatial_relation."""

    def test_aligned_pair(self, aligned_pair):
        """Level nodes 500 apart: right, not diagonal, not close."""
        a, b = aligned_pair
        info = analyze_spatial_relation(a, b)
        assert info.primary_direction == "right"
        assert info.distance == 500
        assert info.angle == 0
        assert not info.is_diagonal
        assert not info.is_close
        assert info.is_horizontal
        assert (info.delta_x, info.delta_y) == (500, 0)

    def test_diagonal(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 300, 300)
        info = analyze_spatial_relation(a, b)
        assert info.is_diagonal
        assert info.primary_direction == "down"
        assert info.secondary_direction == "right"
        assert info.angle == pytest.approx(45)
        assert info.distance == pytest.approx(math.sqrt(2) * 300)

    def test_ratio_at_threshold_is_not_diagonal(self):
        """Ratio exactly 0.5 is not above the threshold."""
        a = make_node("A", 0, 0)
        b = make_node("B", 200, 100)
        assert not analyze_spatial_relation(a, b).is_diagonal

    def test_close(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 30, 0)
        info = analyze_spatial_relation(a, b)
        assert info.is_close
        assert info.primary_direction == "right"

    def test_left_and_up(self):
        a = make_node("A", 500, 0)
        b = make_node("B", 0, 0)
        info = analyze_spatial_relation(a, b)
        assert info.primary_direction == "left"
        assert info.angle == pytest.approx(180)

        c = make_node("C", 0, 400)
        up = analyze_spatial_relation(c, make_node("D", 0, 0))
        assert up.primary_direction == "up"
        assert up.angle == pytest.approx(-90)

    def test_coincident_centers(self):
        """Zero deltas: no division error, ratio 0, angle 0."""
        a = make_node("A", 0, 0)
        b = make_node("B", 0, 0)
        info = analyze_spatial_relation(a, b)
        assert info.distance == 0
        assert info.angle == 0
        assert not info.is_diagonal
        assert info.is_close
        assert info.primary_direction == "up"

    def test_translation_invariant(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 340, 120)
        moved_a = make_node("A", 1000, -250)
        moved_b = make_node("B", 1340, -130)
        assert analyze_spatial_relation(a, b) == analyze_spatial_relation(moved_a, moved_b)

    def test_custom_thresholds(self):
        a = make_node("A", 0, 0)
        b = make_node("B", 80, 0)
        config = SpatialConfig(proximity_threshold=100)
        assert analyze_spatial_relation(a, b, config).is_close
        assert not analyze_spatial_relation(a, b).is_close


class TestAnalyze:
    """Tests for batch analysis."""

    def test_skips_edges_with_missing_nodes(self, aligned_pair, caplog):
        a, b = aligned_pair
        edges = [Edge("A", "B"), Edge("A", "X"), Edge("B", "A")]

        with caplog.at_level(logging.WARNING):
            result = analyze([a, b], edges)

        assert [e.index for e in result.edges] == [0, 2]
        assert result.skipped == [Edge("A", "X")]
        assert "Node not found" in caplog.text

    def test_accepts_node_mapping(self, aligned_pair):
        a, b = aligned_pair
        result = analyze({"A": a, "B": b}, [Edge("A", "B")])
        assert len(result.edges) == 1
        assert result.edges[0].spatial.primary_direction == "right"

    def test_stats(self, aligned_pair):
        a, b = aligned_pair
        c = make_node("C", 30, 0)
        result = analyze([a, b, c], [Edge("A", "B"), Edge("B", "A"), Edge("A", "C")])
        stats = result.stats
        assert stats.total_connections == 3
        assert stats.close_connections == 1
        assert stats.diagonal_connections == 0
        assert stats.direction_distribution == {"right": 2, "left": 1}

    def test_edges_by_source(self, aligned_pair):
        a, b = aligned_pair
        result = analyze([a, b], [Edge("A", "B"), Edge("A", "B", "again"), Edge("B", "A")])
        grouped = result.edges_by_source
        assert len(grouped["A"]) == 2
        assert len(grouped["B"]) == 1

    def test_empty_input(self):
        result = analyze([], [])
        assert result.edges == []
        assert result.stats.total_connections == 0


class TestReport:
    """Tests for the text report."""

    def test_report_content(self, aligned_pair):
        a, b = aligned_pair
        result = analyze([a, b], [Edge("A", "B"), Edge("A", "B"), Edge("A", "Z")])
        report = format_analysis_report(result)
        assert "Connections: 2" in report
        assert "right: 2 (100%)" in report
        assert "Skipped (unresolved): 1" in report
        assert "A -> 2 connections" in report
        assert "-> B: right (500px)" in report
