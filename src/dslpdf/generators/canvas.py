"""Drawing surface over a ReportLab canvas with a top-left origin.

DSL coordinates put ``(0, 0)`` at the top-left corner of the page with y
growing downwards; ReportLab puts it bottom-left with y growing upwards.
:class:`PageSurface` does the flip so the element renderers can work in
DSL coordinates only. Angles passed to :meth:`PageSurface.wedge` are in
radians in the same y-down frame, so they grow clockwise on the page.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from io import BytesIO
from typing import Iterator, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from ..utils.colors import to_hex
from .fonts import FontRegistry

logger = logging.getLogger(__name__)

Point = tuple[float, float]

# (align, valign) -> ReportLab drawImage anchor
_IMAGE_ANCHORS = {
    ("left", "top"): "nw",
    ("center", "top"): "n",
    ("right", "top"): "ne",
    ("left", "center"): "w",
    ("center", "center"): "c",
    ("right", "center"): "e",
    ("left", "bottom"): "sw",
    ("center", "bottom"): "s",
    ("right", "bottom"): "se",
}


def _color(value: object, default: str = "#000000") -> colors.Color:
    return colors.HexColor(to_hex(value, default))


@dataclass(frozen=True)
class Margins:
    top: float = 50
    bottom: float = 50
    left: float = 50
    right: float = 50


class PageSurface:
    """One document's canvas plus the per-page state the renderers share."""

    def __init__(
        self,
        canvas: Canvas,
        fonts: FontRegistry,
        *,
        default_font: Optional[str] = None,
    ):
        self.canvas = canvas
        self.fonts = fonts
        self.default_font = default_font
        self.direction = "ltr"
        self.width = 0.0
        self.height = 0.0
        self.margins = Margins()
        self.cursor_x = 0.0
        self.cursor_y = 0.0
        self.page_number = 0

    # -- pages ---------------------------------------------------------------

    def begin_page(self, size: tuple[float, float], margins: Margins, direction: str = "ltr") -> None:
        self.width, self.height = size
        self.margins = margins
        self.direction = direction
        self.page_number += 1
        self.canvas.setPageSize(size)
        self.cursor_x = margins.left
        self.cursor_y = margins.top

    def end_page(self) -> None:
        self.canvas.showPage()

    @property
    def content_width(self) -> float:
        return max(0.0, self.width - self.margins.left - self.margins.right)

    # -- state ---------------------------------------------------------------

    @contextmanager
    def style_guard(self) -> Iterator[PageSurface]:
        """Scope graphics state changes; restored on every exit path."""
        self.canvas.saveState()
        try:
            yield self
        finally:
            self.canvas.restoreState()

    def flip_y(self, top: float) -> float:
        return self.height - top

    # -- primitives ----------------------------------------------------------

    def rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        line_width: float = 1,
    ) -> None:
        c = self.canvas
        if fill:
            c.setFillColor(_color(fill))
        if stroke:
            c.setStrokeColor(_color(stroke))
            c.setLineWidth(line_width)
        c.rect(
            x,
            self.height - y - height,
            width,
            height,
            stroke=1 if stroke else 0,
            fill=1 if fill else 0,
        )

    def line(self, x1: float, y1: float, x2: float, y2: float, *, color: str = "#000000", width: float = 1) -> None:
        c = self.canvas
        c.setStrokeColor(_color(color))
        c.setLineWidth(width)
        c.line(x1, self.flip_y(y1), x2, self.flip_y(y2))

    def polyline(self, points: Sequence[Point], *, color: str = "#000000", width: float = 1) -> None:
        if len(points) < 2:
            return
        c = self.canvas
        c.setStrokeColor(_color(color))
        c.setLineWidth(width)
        path = c.beginPath()
        x0, y0 = points[0]
        path.moveTo(x0, self.flip_y(y0))
        for x, y in points[1:]:
            path.lineTo(x, self.flip_y(y))
        c.drawPath(path, stroke=1, fill=0)

    def polygon(self, points: Sequence[Point], *, fill: str, stroke: Optional[str] = None, line_width: float = 1) -> None:
        if len(points) < 3:
            return
        c = self.canvas
        c.setFillColor(_color(fill))
        if stroke:
            c.setStrokeColor(_color(stroke))
            c.setLineWidth(line_width)
        path = c.beginPath()
        x0, y0 = points[0]
        path.moveTo(x0, self.flip_y(y0))
        for x, y in points[1:]:
            path.lineTo(x, self.flip_y(y))
        path.close()
        c.drawPath(path, stroke=1 if stroke else 0, fill=1)

    def circle(self, cx: float, cy: float, r: float, *, fill: Optional[str] = None, stroke: Optional[str] = None) -> None:
        c = self.canvas
        if fill:
            c.setFillColor(_color(fill))
        if stroke:
            c.setStrokeColor(_color(stroke))
        c.circle(cx, self.flip_y(cy), r, stroke=1 if stroke else 0, fill=1 if fill else 0)

    def wedge(
        self,
        cx: float,
        cy: float,
        r: float,
        start: float,
        sweep: float,
        *,
        fill: str,
        stroke: Optional[str] = None,
    ) -> None:
        """Pie slice from angle *start* over *sweep* radians, clockwise on the page."""
        c = self.canvas
        c.setFillColor(_color(fill))
        if stroke:
            c.setStrokeColor(_color(stroke))
        ry = self.flip_y(cy)
        # y-down clockwise angles become counter-clockwise after the flip
        start_deg = -math.degrees(start + sweep)
        extent_deg = math.degrees(sweep)
        c.wedge(cx - r, ry - r, cx + r, ry + r, start_deg, extent_deg, stroke=1 if stroke else 0, fill=1)

    # -- text ----------------------------------------------------------------

    def set_font(self, name: str, size: float) -> None:
        self.canvas.setFont(name, size)

    def text_width(self, text: str, font: str, size: float) -> float:
        return pdfmetrics.stringWidth(text, font, size)

    def ascent(self, font: str, size: float) -> float:
        return pdfmetrics.getAscent(font, size)

    def text(
        self,
        x: float,
        top: float,
        text: str,
        *,
        font: str,
        size: float,
        color: str = "#000000",
        align: str = "left",
    ) -> None:
        """Draw one line with its top edge at *top*.

        *x* is the left edge for ``left``, the centre for ``center`` and the
        right edge for ``right``.
        """
        c = self.canvas
        c.setFont(font, size)
        c.setFillColor(_color(color))
        baseline = self.flip_y(top + self.ascent(font, size))
        if align == "center":
            c.drawCentredString(x, baseline, text)
        elif align == "right":
            c.drawRightString(x, baseline, text)
        else:
            c.drawString(x, baseline, text)

    # -- images --------------------------------------------------------------

    def image(
        self,
        data: bytes,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        align: str = "left",
        valign: str = "top",
    ) -> None:
        """Fit raster *data* into the box, keeping its aspect ratio."""
        reader = ImageReader(BytesIO(data))
        self.canvas.drawImage(
            reader,
            x,
            self.height - y - height,
            width=width,
            height=height,
            preserveAspectRatio=True,
            anchor=_IMAGE_ANCHORS.get((align, valign), "nw"),
            mask="auto",
        )
