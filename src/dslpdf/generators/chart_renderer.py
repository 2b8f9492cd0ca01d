"""Bar, line and pie charts drawn from canvas primitives.

Only the first dataset of a chart is plotted. The geometry helpers
(:func:`bar_geometry`, :func:`line_points`, :func:`pie_segments`,
:func:`arc_polygon`) are pure so they can be checked without a canvas;
:func:`render_chart` lays out the box, captions and axes and draws them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from ..core.models import ChartContent, ChartStyle, ChartType, ColorSpec, Dataset, Direction, Position
from ..utils.bidi import contains_rtl, prepare_text
from ..utils.colors import to_hex
from .canvas import PageSurface, Point

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 300
DEFAULT_BACKGROUND = "#F8F8F8"
DEFAULT_BORDER = "#CCCCCC"
AXIS_COLOR = "#333333"
CAPTION_COLOR = "#333333"
TEXT_COLOR = "#000000"

BAR_COLOR = "#4285F4"
LINE_COLOR = "#FF5722"
PIE_PALETTE = [
    "#4285F4", "#EA4335", "#FBBC05", "#34A853", "#FF6D01",
    "#46BDC6", "#7B1FA2", "#C2185B", "#5D4037", "#757575",
]

MAX_BAR_WIDTH = 30
BAR_FILL_RATIO = 0.7
MARKER_RADIUS = 3
LEGEND_ROW = 15
PIE_POLYGON_STEPS = 40

PieArcMode = Literal["wedge", "polygon"]


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlotArea:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class Bar:
    index: int
    x: float
    y: float
    width: float
    height: float
    value: float

    @property
    def centre(self) -> float:
        return self.x + self.width / 2


@dataclass(frozen=True)
class PieSegment:
    index: int
    value: float
    start: float
    sweep: float

    @property
    def fraction(self) -> float:
        return self.sweep / (2 * math.pi)


def scale_max(values: Sequence[float]) -> float:
    """Largest value, never below 1."""
    return max([*values, 1])


def bar_geometry(values: Sequence[float], area: PlotArea, rtl: bool = False) -> list[Bar]:
    """One bar per value, centred in equal slots; negatives get zero height."""
    if not values:
        return []
    max_value = scale_max(values)
    slot = area.width / len(values)
    width = min(MAX_BAR_WIDTH, slot * BAR_FILL_RATIO)

    bars = []
    for i, value in enumerate(values):
        height = max(0.0, value) / max_value * area.height
        slot_x = area.x + area.width - (i + 1) * slot if rtl else area.x + i * slot
        bars.append(Bar(
            index=i,
            x=slot_x + (slot - width) / 2,
            y=area.bottom - height,
            width=width,
            height=height,
            value=value,
        ))
    return bars


def line_points(values: Sequence[float], area: PlotArea, rtl: bool = False) -> list[Point]:
    """Evenly spaced points; a single value sits at the starting edge."""
    if not values:
        return []
    max_value = scale_max(values)
    spacing = area.width / (len(values) - 1) if len(values) > 1 else 0.0

    points = []
    for i, value in enumerate(values):
        offset = i * spacing
        x = area.x + area.width - offset if rtl else area.x + offset
        y = area.bottom - max(0.0, value) / max_value * area.height
        points.append((x, y))
    return points


def pie_segments(values: Sequence[float]) -> list[PieSegment]:
    """Clockwise segments from 12 o'clock for the positive values.

    Angles are radians in the page's y-down frame. Non-positive values
    get no segment; the sweeps of the rest add up to a full turn.
    """
    total = sum(v for v in values if v > 0)
    if total <= 0:
        return []

    segments = []
    angle = -math.pi / 2
    for i, value in enumerate(values):
        if value <= 0:
            continue
        sweep = value / total * 2 * math.pi
        segments.append(PieSegment(index=i, value=value, start=angle, sweep=sweep))
        angle += sweep
    return segments


def arc_polygon(
    cx: float, cy: float, r: float, start: float, sweep: float, steps: int = PIE_POLYGON_STEPS
) -> list[Point]:
    """Centre point followed by ``steps + 1`` points along the arc."""
    points = [(cx, cy)]
    for step in range(steps + 1):
        angle = start + sweep * step / steps
        points.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))
    return points


def color_at(spec: Optional[ColorSpec], index: int, fallback: str) -> str:
    """Dataset colour for *index*: lists cycle, strings apply to all."""
    if isinstance(spec, list):
        if not spec:
            return fallback
        return to_hex(spec[index % len(spec)], fallback)
    if isinstance(spec, str):
        return to_hex(spec, fallback)
    return fallback


def _format_value(value: float) -> str:
    return f"{value:g}"


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

class _ChartPainter:
    """Draws one chart; holds the per-chart layout and text settings."""

    def __init__(
        self,
        surface: PageSurface,
        chart: ChartContent,
        position: Position,
        style: ChartStyle,
        pie_arc: PieArcMode,
    ):
        self.surface = surface
        self.chart = chart
        self.x = position.x
        self.y = position.y
        self.width = style.width or DEFAULT_WIDTH
        self.height = style.height or DEFAULT_HEIGHT
        self.style = style
        self.pie_arc = pie_arc
        self.rtl = chart.is_rtl or style.direction == Direction.RTL

    # -- text helpers --------------------------------------------------------

    def _font_for(self, text: str) -> str:
        fonts = self.surface.fonts
        family = self.chart.font_family
        if self.rtl and fonts.is_available(family):
            return family
        return fonts.resolve(text, None, self.surface.default_font)

    def _label(
        self, text: str, x: float, top: float, size: float, *, color: str = TEXT_COLOR, align: str = "left"
    ) -> None:
        if not text:
            return
        visual = prepare_text(text, self.rtl and contains_rtl(text))
        self.surface.text(x, top, visual, font=self._font_for(text), size=size, color=color, align=align)

    def _caption(self, text: str, top: float, size: float, *, color: str, centred: bool) -> None:
        if self.rtl:
            self._label(text, self.x + self.width - 20, top, size, color=color, align="right")
        elif centred:
            self._label(text, self.x + self.width / 2, top, size, color=color, align="center")
        else:
            self._label(text, self.x + 20, top, size, color=color)

    # -- layout --------------------------------------------------------------

    def draw(self) -> None:
        s = self.surface
        s.rect(
            self.x, self.y, self.width, self.height,
            fill=to_hex(self.style.background_color, DEFAULT_BACKGROUND),
            stroke=to_hex(self.style.border_color, DEFAULT_BORDER),
            line_width=self.style.border_width or 1,
        )

        chart = self.chart
        if chart.title:
            self._caption(chart.title, self.y + 20, 16, color=TEXT_COLOR, centred=True)

        type_y = self.y + 45 if chart.title else self.y + 20
        self._caption(f"{chart.type.value.upper()} Chart", type_y, 14, color=CAPTION_COLOR, centred=True)

        if not chart.data.datasets:
            return
        dataset = chart.data.datasets[0]

        data_y = self.y + 80 if chart.title else self.y + 50
        self._caption(
            f"Dataset: {dataset.label or 'Unnamed dataset'}", data_y, 12, color=CAPTION_COLOR, centred=False
        )

        plot_y = data_y + 30
        area = PlotArea(
            x=self.x + 60,
            y=plot_y,
            width=self.width - 80,
            height=self.height - (plot_y - self.y) - 30,
        )
        if area.width <= 0 or area.height <= 0 or not dataset.data:
            logger.debug("Chart too small or empty, skipping plot")
            return

        if chart.type == ChartType.PIE:
            self._draw_pie(dataset, area)
            return

        s.polyline(
            [(area.x, area.y), (area.x, area.bottom), (area.x + area.width, area.bottom)],
            color=AXIS_COLOR,
        )
        if chart.type == ChartType.BAR:
            self._draw_bars(dataset, area)
        else:
            self._draw_line(dataset, area)

    def _category(self, index: int) -> str:
        labels = self.chart.data.labels
        return labels[index] if index < len(labels) else ""

    def _draw_bars(self, dataset: Dataset, area: PlotArea) -> None:
        for bar in bar_geometry(dataset.data, area, self.rtl):
            color = color_at(dataset.background_color, bar.index, BAR_COLOR)
            if bar.height > 0:
                self.surface.rect(bar.x, bar.y, bar.width, bar.height, fill=color)
            self._label(_format_value(bar.value), bar.centre, bar.y - 12, 9, align="center")
            self._label(self._category(bar.index), bar.centre, area.bottom + 5, 10, align="center")

    def _draw_line(self, dataset: Dataset, area: PlotArea) -> None:
        color = color_at(dataset.border_color, 0, LINE_COLOR)
        points = line_points(dataset.data, area, self.rtl)
        self.surface.polyline(points, color=color, width=dataset.border_width or 2)
        for i, (px, py) in enumerate(points):
            self.surface.circle(px, py, MARKER_RADIUS, fill=color)
            self._label(self._category(i), px, area.bottom + 5, 9, align="center")

    def _draw_pie(self, dataset: Dataset, area: PlotArea) -> None:
        segments = pie_segments(dataset.data)
        if not segments:
            return

        legend_height = len(segments) * LEGEND_ROW
        radius = max(0.0, min(area.width, area.height - legend_height) / 2 - 10)
        cx = area.x + area.width / 2
        cy = area.y + (area.height - legend_height) / 2

        for seg in segments:
            color = color_at(dataset.background_color, seg.index, PIE_PALETTE[seg.index % len(PIE_PALETTE)])
            if radius <= 0:
                continue
            if self.pie_arc == "polygon":
                self.surface.polygon(arc_polygon(cx, cy, radius, seg.start, seg.sweep), fill=color)
            else:
                self.surface.wedge(cx, cy, radius, seg.start, seg.sweep, fill=color)

        legend_top = area.bottom - legend_height
        for row, seg in enumerate(segments):
            color = color_at(dataset.background_color, seg.index, PIE_PALETTE[seg.index % len(PIE_PALETTE)])
            top = legend_top + row * LEGEND_ROW
            label = self._category(seg.index) or f"Item {seg.index + 1}"
            text = f"{label}: {_format_value(seg.value)} ({round(seg.fraction * 100)}%)"
            if self.rtl:
                self.surface.rect(cx + radius - 10, top, 10, 10, fill=color)
                self._label(text, cx + radius - 15, top, 9, align="right")
            else:
                self.surface.rect(cx - radius, top, 10, 10, fill=color)
                self._label(text, cx - radius + 15, top, 9)


def render_chart(
    surface: PageSurface,
    chart: ChartContent,
    position: Position,
    style: Optional[ChartStyle] = None,
    *,
    pie_arc: PieArcMode = "wedge",
) -> None:
    """Draw *chart* in its box at *position*; failures leave a "Chart Error" box."""
    style = style or ChartStyle()
    try:
        with surface.style_guard():
            _ChartPainter(surface, chart, position, style, pie_arc).draw()
    except Exception as exc:
        logger.warning("Chart render failed at (%s, %s): %s", position.x, position.y, exc)
        draw_chart_placeholder(surface, position, style)


def draw_chart_placeholder(surface: PageSurface, position: Position, style: ChartStyle) -> None:
    width = style.width or DEFAULT_WIDTH
    height = style.height or DEFAULT_HEIGHT
    with surface.style_guard():
        surface.rect(position.x, position.y, width, height, stroke=TEXT_COLOR)
        surface.text(
            position.x + width / 2,
            position.y + height / 2 - 6,
            "Chart Error",
            font=surface.fonts.builtin_font,
            size=12,
            color=TEXT_COLOR,
            align="center",
        )
