"""Tests for chart geometry and drawing."""

from __future__ import annotations

import math
from unittest.mock import MagicMock

import pytest

from dslpdf.core.models import ChartContent, ChartStyle, Position
from dslpdf.generators.canvas import Margins, PageSurface
from dslpdf.generators.chart_renderer import (
    BAR_COLOR,
    PIE_PALETTE,
    PlotArea,
    arc_polygon,
    bar_geometry,
    color_at,
    line_points,
    pie_segments,
    render_chart,
    scale_max,
)

AREA = PlotArea(x=100, y=50, width=300, height=200)


def _chart(chart_type="bar", data=(10, 20, 30), labels=("A", "B", "C"), **extra) -> ChartContent:
    return ChartContent.model_validate({
        "type": chart_type,
        "data": {"labels": list(labels), "datasets": [{"label": "S", "data": list(data)}]},
        **extra,
    })


def _drawn_text(canvas) -> list[str]:
    texts = []
    for method in ("drawString", "drawCentredString", "drawRightString"):
        texts.extend(c.args[2] for c in getattr(canvas, method).call_args_list)
    return texts


@pytest.fixture
def surface(builtin_fonts):
    s = PageSurface(MagicMock(), builtin_fonts)
    s.begin_page((595, 842), Margins())
    return s


class TestBarGeometry:
    def test_scaling_and_centring(self):
        bars = bar_geometry([50, 100], AREA)
        slot = AREA.width / 2
        assert [b.height for b in bars] == [100, 200]
        assert bars[0].width == 30
        assert bars[0].x == pytest.approx(AREA.x + (slot - 30) / 2)
        assert bars[1].y == pytest.approx(AREA.y)

    def test_all_zero_data(self):
        bars = bar_geometry([0, 0, 0], AREA)
        assert [b.height for b in bars] == [0, 0, 0]
        assert scale_max([0, 0, 0]) == 1

    def test_negative_values_clamp_to_zero(self):
        bars = bar_geometry([-5, 10], AREA)
        assert bars[0].height == 0
        assert bars[0].y == AREA.bottom

    def test_narrow_slots(self):
        bars = bar_geometry(list(range(1, 21)), AREA)
        assert bars[0].width == pytest.approx(AREA.width / 20 * 0.7)

    def test_rtl_runs_right_to_left(self):
        ltr = bar_geometry([1, 2, 3], AREA)
        rtl = bar_geometry([1, 2, 3], AREA, rtl=True)
        assert rtl[0].x > rtl[2].x
        assert rtl[0].x == pytest.approx(ltr[2].x)

    def test_empty(self):
        assert bar_geometry([], AREA) == []


class TestLinePoints:
    def test_spacing(self):
        points = line_points([0, 50, 100], AREA)
        assert [p[0] for p in points] == [100, 250, 400]
        assert [p[1] for p in points] == [250, 150, 50]

    def test_single_point_at_left_edge(self):
        assert line_points([5], AREA) == [(AREA.x, AREA.y)]

    def test_rtl(self):
        points = line_points([1, 1], AREA, rtl=True)
        assert [p[0] for p in points] == [400, 100]


class TestPieSegments:
    def test_sweeps_sum_to_full_turn(self):
        segments = pie_segments([3, 1, 4, 1, 5])
        assert sum(s.sweep for s in segments) == pytest.approx(2 * math.pi)
        assert segments[0].start == pytest.approx(-math.pi / 2)

    def test_segments_are_contiguous(self):
        segments = pie_segments([1, 2, 3])
        for prev, nxt in zip(segments, segments[1:]):
            assert nxt.start == pytest.approx(prev.start + prev.sweep)

    def test_non_positive_values_skipped(self):
        segments = pie_segments([5, 0, -3, 5])
        assert [s.index for s in segments] == [0, 3]
        assert segments[0].fraction == pytest.approx(0.5)

    def test_nothing_to_draw(self):
        assert pie_segments([0, 0]) == []
        assert pie_segments([]) == []

    def test_arc_polygon(self):
        points = arc_polygon(0, 0, 10, 0, math.pi / 2, steps=4)
        assert len(points) == 6
        assert points[0] == (0, 0)
        assert points[1] == pytest.approx((10, 0))
        assert points[-1] == pytest.approx((0, 10))


class TestColors:
    def test_color_at(self):
        assert color_at(["#ff0000", "blue"], 3, BAR_COLOR) == "#0000FF"
        assert color_at("rgb(0,128,0)", 7, BAR_COLOR) == "#008000"
        assert color_at(None, 0, BAR_COLOR) == BAR_COLOR
        assert color_at([], 0, PIE_PALETTE[1]) == PIE_PALETTE[1]


class TestRenderChart:
    def test_bar_chart(self, surface):
        render_chart(surface, _chart(title="Sales"), Position(x=50, y=100))
        texts = _drawn_text(surface.canvas)
        assert "Sales" in texts
        assert "BAR Chart" in texts
        assert "Dataset: S" in texts
        assert {"A", "B", "C", "10", "20", "30"} <= set(texts)
        assert "Chart Error" not in texts

    def test_line_chart_draws_markers(self, surface):
        render_chart(surface, _chart("line"), Position(x=50, y=100))
        assert surface.canvas.circle.call_count == 3
        assert "LINE Chart" in _drawn_text(surface.canvas)

    def test_pie_wedges_and_legend(self, surface):
        render_chart(surface, _chart("pie", data=(1, 1, 2)), Position(x=50, y=100), ChartStyle(height=400))
        assert surface.canvas.wedge.call_count == 3
        texts = _drawn_text(surface.canvas)
        assert "C: 2 (50%)" in texts

    def test_pie_polygon_mode(self, surface):
        render_chart(surface, _chart("pie"), Position(x=50, y=100), ChartStyle(height=400), pie_arc="polygon")
        surface.canvas.wedge.assert_not_called()
        assert surface.canvas.drawPath.call_count == 3

    def test_chart_without_datasets(self, surface):
        chart = ChartContent.model_validate({"type": "bar", "data": {"datasets": []}})
        render_chart(surface, chart, Position(x=0, y=0))
        assert "BAR Chart" in _drawn_text(surface.canvas)

    def test_failure_draws_placeholder(self, surface):
        surface.canvas.wedge.side_effect = RuntimeError("backend failure")
        render_chart(surface, _chart("pie"), Position(x=50, y=100), ChartStyle(height=400))
        assert "Chart Error" in _drawn_text(surface.canvas)
        # the style guard was unwound before the placeholder
        assert surface.canvas.saveState.call_count == surface.canvas.restoreState.call_count
