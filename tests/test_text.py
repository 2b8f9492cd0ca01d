"""Tests for text element rendering."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from dslpdf.core.models import Direction, Position, TextAlign, TextStyle
from dslpdf.generators.canvas import Margins, PageSurface
from dslpdf.generators.text_renderer import (
    is_rtl_text,
    render_text,
    resolve_text_style,
    wrap_paragraph,
)


@pytest.fixture
def surface(builtin_fonts):
    s = PageSurface(MagicMock(), builtin_fonts)
    s.begin_page((595, 842), Margins())
    return s


def _strings(canvas) -> list[str]:
    return [c.args[2] for c in canvas.drawString.call_args_list]


class TestStyleResolution:
    def test_defaults(self, surface):
        rs = resolve_text_style(surface, "Hello", TextStyle(), 50)
        assert rs.font == "Helvetica"
        assert rs.size == 12
        assert rs.align == "left"
        assert rs.width == 595 - 50 - 50
        assert rs.line_height == pytest.approx(14.4)

    def test_explicit_values(self, surface):
        style = TextStyle(font_size=20, color="red", align=TextAlign.CENTER, width=200)
        rs = resolve_text_style(surface, "Hello", style, 50)
        assert (rs.size, rs.color, rs.align, rs.width) == (20, "#FF0000", "center", 200)

    def test_rtl_defaults_to_right_alignment(self, surface):
        rs = resolve_text_style(surface, "مرحبا", TextStyle(), 50)
        assert rs.rtl
        assert rs.align == "right"

    def test_direction_precedence(self, surface):
        arabic = "مرحبا"
        assert not is_rtl_text(arabic, TextStyle(direction=Direction.LTR), surface)
        assert is_rtl_text("Hello", TextStyle(direction=Direction.RTL), surface)
        assert not is_rtl_text("Hello", TextStyle(), surface)
        surface.direction = "rtl"
        assert is_rtl_text("Hello", TextStyle(), surface)


class TestWrapping:
    def test_keeps_every_word(self, surface):
        paragraph = "the quick brown fox jumps over the lazy dog"
        lines = wrap_paragraph(surface, paragraph, "Helvetica", 12, 80)
        assert len(lines) > 1
        assert " ".join(lines) == paragraph
        for line in lines:
            if " " in line:
                assert surface.text_width(line, "Helvetica", 12) <= 80

    def test_long_word_is_not_broken(self, surface):
        assert wrap_paragraph(surface, "Supercalifragilistic", "Helvetica", 12, 10) == ["Supercalifragilistic"]

    def test_blank_paragraph(self, surface):
        assert wrap_paragraph(surface, "   ", "Helvetica", 12, 100) == [""]


class TestRenderText:
    def test_draws_and_advances_cursor(self, surface):
        render_text(surface, "Hello", position=Position(x=50, y=100))
        assert _strings(surface.canvas) == ["Hello"]
        assert surface.cursor_y == pytest.approx(114.4)
        assert surface.cursor_x == 50

    def test_uses_cursor_without_position(self, surface):
        render_text(surface, "First")
        render_text(surface, "Second")
        first, second = surface.canvas.drawString.call_args_list
        assert first.args[0] == second.args[0] == 50
        assert first.args[1] - second.args[1] == pytest.approx(14.4)

    def test_blank_text_is_skipped(self, surface):
        render_text(surface, "   \n ", position=Position(x=0, y=0))
        surface.canvas.drawString.assert_not_called()
        assert surface.cursor_y == 50

    def test_newlines_split_paragraphs(self, surface):
        render_text(surface, "one\ntwo", position=Position(x=50, y=100))
        assert _strings(surface.canvas) == ["one", "two"]

    def test_right_alignment(self, surface):
        render_text(surface, "Hi", TextStyle(align=TextAlign.RIGHT, width=200), Position(x=50, y=100))
        x = surface.canvas.drawString.call_args.args[0]
        assert x == pytest.approx(250 - surface.text_width("Hi", "Helvetica", 12))

    def test_centred_alignment(self, surface):
        render_text(surface, "Hi", TextStyle(align=TextAlign.CENTER, width=200), Position(x=50, y=100))
        x = surface.canvas.drawString.call_args.args[0]
        assert x == pytest.approx(150 - surface.text_width("Hi", "Helvetica", 12) / 2)

    def test_justify_spreads_words(self, surface):
        text = "alpha beta gamma delta epsilon zeta eta theta"
        render_text(surface, text, TextStyle(align=TextAlign.JUSTIFY, width=120), Position(x=50, y=100))
        drawn = _strings(surface.canvas)
        # every word of the non-final lines is drawn on its own
        assert all(" " not in s for s in drawn[:-1])
        assert set(text.split()) <= set(" ".join(drawn).split())

    def test_underline(self, surface):
        render_text(surface, "Hi", TextStyle(underline=True), Position(x=50, y=100))
        surface.canvas.line.assert_called_once()

    def test_no_line_break(self, surface):
        text = "a long line that would normally wrap a few times"
        render_text(surface, text, TextStyle(width=40, line_break=False), Position(x=50, y=100))
        assert _strings(surface.canvas) == [text]

    def test_failure_at_cursor_draws_error_there(self, surface):
        surface.cursor_x, surface.cursor_y = 120, 300
        surface.canvas.drawString.side_effect = [RuntimeError("font exploded"), None]
        render_text(surface, "Hello")
        failed, error = surface.canvas.drawString.call_args_list
        assert error.args[2] == "[Render error]: Hello"
        assert error.args[0] == 120
        assert error.args[1] == failed.args[1]

    def test_failure_draws_error_line(self, surface):
        surface.canvas.drawString.side_effect = [RuntimeError("font exploded"), None]
        render_text(surface, "Hello", position=Position(x=50, y=100))
        assert _strings(surface.canvas)[-1] == "[Render error]: Hello"
        assert surface.cursor_y == 50
