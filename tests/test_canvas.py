"""Tests for the top-left drawing surface."""

from __future__ import annotations

import io
import math
from unittest.mock import MagicMock

import pytest
from reportlab.pdfgen.canvas import Canvas

from dslpdf.generators.canvas import Margins, PageSurface


@pytest.fixture
def mock_surface(builtin_fonts):
    surface = PageSurface(MagicMock(), builtin_fonts)
    surface.begin_page((600, 800), Margins(40, 40, 30, 30))
    return surface


class TestPages:
    def test_begin_page_sets_geometry_and_cursor(self, mock_surface):
        assert (mock_surface.width, mock_surface.height) == (600, 800)
        assert (mock_surface.cursor_x, mock_surface.cursor_y) == (30, 40)
        assert mock_surface.content_width == 540
        assert mock_surface.page_number == 1
        mock_surface.canvas.setPageSize.assert_called_once_with((600, 800))

    def test_end_page_shows_page(self, mock_surface):
        mock_surface.end_page()
        mock_surface.canvas.showPage.assert_called_once()


class TestStyleGuard:
    def test_restores_on_success(self, mock_surface):
        with mock_surface.style_guard():
            pass
        mock_surface.canvas.saveState.assert_called_once()
        mock_surface.canvas.restoreState.assert_called_once()

    def test_restores_on_error(self, mock_surface):
        with pytest.raises(RuntimeError):
            with mock_surface.style_guard():
                raise RuntimeError("boom")
        mock_surface.canvas.restoreState.assert_called_once()


class TestCoordinates:
    def test_rect_is_flipped(self, mock_surface):
        mock_surface.rect(10, 20, 100, 50, fill="#FF0000")
        mock_surface.canvas.rect.assert_called_once_with(10, 730, 100, 50, stroke=0, fill=1)

    def test_line_is_flipped(self, mock_surface):
        mock_surface.line(0, 0, 10, 100)
        mock_surface.canvas.line.assert_called_once_with(0, 800, 10, 700)

    def test_circle_is_flipped(self, mock_surface):
        mock_surface.circle(50, 100, 3, fill="red")
        mock_surface.canvas.circle.assert_called_once_with(50, 700, 3, stroke=0, fill=1)

    def test_wedge_angles(self, mock_surface):
        # quarter slice starting at 12 o'clock, clockwise on the page
        mock_surface.wedge(100, 100, 50, -math.pi / 2, math.pi / 2, fill="blue")
        args = mock_surface.canvas.wedge.call_args.args
        assert args[:4] == (50, 650, 150, 750)
        assert args[4] == pytest.approx(0.0)
        assert args[5] == pytest.approx(90.0)

    def test_text_alignment_dispatch(self, mock_surface):
        mock_surface.text(100, 10, "a", font="Helvetica", size=12, align="center")
        mock_surface.text(100, 10, "b", font="Helvetica", size=12, align="right")
        mock_surface.text(100, 10, "c", font="Helvetica", size=12)
        mock_surface.canvas.drawCentredString.assert_called_once()
        mock_surface.canvas.drawRightString.assert_called_once()
        x, baseline, text = mock_surface.canvas.drawString.call_args.args
        assert (x, text) == (100, "c")
        # baseline sits one ascent below the top edge
        assert 800 - 10 - 12 < baseline < 800 - 10


class TestRealCanvas:
    def test_draws_every_primitive(self, builtin_fonts, png_bytes):
        buf = io.BytesIO()
        surface = PageSurface(Canvas(buf), builtin_fonts)
        surface.begin_page((400, 400), Margins())
        with surface.style_guard():
            surface.rect(10, 10, 50, 50, fill="#EEEEEE", stroke="#333333")
            surface.polyline([(0, 0), (10, 10), (20, 0)])
            surface.polygon([(0, 0), (10, 10), (20, 0)], fill="green")
            surface.wedge(200, 200, 40, 0, math.pi, fill="orange")
            surface.text(20, 100, "Hello", font="Helvetica", size=12)
            surface.image(png_bytes, 100, 100, 80, 40)
        surface.end_page()
        surface.canvas.save()
        assert buf.getvalue().startswith(b"%PDF")
