"""Render text elements: font resolution, word wrap, alignment and RTL runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.models import Direction, Position, TextAlign, TextStyle
from ..utils.bidi import contains_rtl, prepare_text
from ..utils.colors import to_hex
from .canvas import PageSurface

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 12
LINE_HEIGHT = 1.2
ERROR_COLOR = "#FF0000"
ERROR_FONT = "Helvetica"


@dataclass(frozen=True)
class ResolvedTextStyle:
    """A text style with every default filled in."""

    font: str
    size: float
    color: str
    align: str
    rtl: bool
    width: float
    line_break: bool = True
    underline: bool = False
    indent: float = 0.0
    paragraph_gap: float = 0.0

    @property
    def line_height(self) -> float:
        return self.size * LINE_HEIGHT


def is_rtl_text(text: str, style: TextStyle, surface: PageSurface) -> bool:
    """Explicit style direction wins, then the script, then the page direction."""
    if style.direction is not None:
        return style.direction == Direction.RTL
    if contains_rtl(text):
        return True
    return surface.direction == Direction.RTL.value


def resolve_text_style(
    surface: PageSurface,
    text: str,
    style: TextStyle,
    x: float,
    *,
    default_size: float = DEFAULT_FONT_SIZE,
    default_color: str = "#000000",
) -> ResolvedTextStyle:
    rtl = is_rtl_text(text, style, surface)
    if style.align is not None:
        align = style.align.value
    else:
        align = TextAlign.RIGHT.value if rtl else TextAlign.LEFT.value

    width = style.width
    if not width or width <= 0:
        width = surface.width - surface.margins.right - x
        if width <= 0:
            width = surface.content_width

    return ResolvedTextStyle(
        font=surface.fonts.resolve(text, style.font, surface.default_font),
        size=style.font_size or default_size,
        color=to_hex(style.color, default_color) if style.color else default_color,
        align=align,
        rtl=rtl,
        width=width,
        line_break=style.line_break is not False,
        underline=bool(style.underline),
        indent=style.indent or 0.0,
        paragraph_gap=style.paragraph_gap or 0.0,
    )


def wrap_paragraph(
    surface: PageSurface, paragraph: str, font: str, size: float, width: float, first_indent: float = 0.0
) -> list[str]:
    """Greedy word wrap; words longer than the line are not broken."""
    words = paragraph.split()
    if not words:
        return [""]

    lines = []
    current = words[0]
    available = width - first_indent
    for word in words[1:]:
        candidate = f"{current} {word}"
        if surface.text_width(candidate, font, size) <= available:
            current = candidate
        else:
            lines.append(current)
            current = word
            available = width
    lines.append(current)
    return lines


def _draw_justified(surface: PageSurface, line: str, x: float, top: float, width: float, rs: ResolvedTextStyle) -> None:
    words = line.split()
    if len(words) < 2:
        surface.text(x, top, line, font=rs.font, size=rs.size, color=rs.color)
        return
    words_width = sum(surface.text_width(w, rs.font, rs.size) for w in words)
    gap = (width - words_width) / (len(words) - 1)
    cursor = x
    for word in words:
        surface.text(cursor, top, word, font=rs.font, size=rs.size, color=rs.color)
        cursor += surface.text_width(word, rs.font, rs.size) + gap


def _draw_text_block(surface: PageSurface, text: str, x: float, y: float, rs: ResolvedTextStyle) -> float:
    """Draw every paragraph of *text*; return the total height used."""
    top = y
    for paragraph in text.split("\n"):
        if rs.line_break:
            lines = wrap_paragraph(surface, paragraph, rs.font, rs.size, rs.width, rs.indent)
        else:
            lines = [paragraph]

        for idx, logical in enumerate(lines):
            line = prepare_text(logical, rs.rtl and contains_rtl(logical))
            indent = rs.indent if idx == 0 else 0.0
            line_width = surface.text_width(line, rs.font, rs.size)
            last = idx == len(lines) - 1

            if rs.align == TextAlign.JUSTIFY.value and not last:
                _draw_justified(surface, line, x + indent, top, rs.width - indent, rs)
                line_x = x + indent
                line_width = rs.width - indent
            else:
                if rs.align == TextAlign.CENTER.value:
                    line_x = x + (rs.width - line_width) / 2
                elif rs.align == TextAlign.RIGHT.value:
                    line_x = x + rs.width - line_width
                else:
                    line_x = x + indent
                surface.text(line_x, top, line, font=rs.font, size=rs.size, color=rs.color)

            if rs.underline and line.strip():
                underline_y = top + surface.ascent(rs.font, rs.size) + rs.size * 0.1
                surface.line(line_x, underline_y, line_x + line_width, underline_y, color=rs.color, width=max(0.5, rs.size / 18))

            top += rs.line_height
        top += rs.paragraph_gap
    return top - y


def render_text(
    surface: PageSurface,
    text: object,
    style: Optional[TextStyle] = None,
    position: Optional[Position] = None,
    *,
    default_size: float = DEFAULT_FONT_SIZE,
    default_color: str = "#000000",
) -> None:
    """Draw *text* at *position* (or the surface cursor) and advance the cursor.

    Blank text is skipped. A drawing failure is replaced by a red
    ``[Render error]`` line at the same spot.
    """
    content = "" if text is None else str(text)
    if not content.strip():
        logger.debug("Skipping blank text element")
        return

    style = style or TextStyle()
    x = position.x if position else surface.cursor_x
    y = position.y if position else surface.cursor_y

    try:
        with surface.style_guard():
            rs = resolve_text_style(
                surface, content, style, x, default_size=default_size, default_color=default_color
            )
            height = _draw_text_block(surface, content, x, y, rs)
    except Exception as exc:
        logger.warning("Text render failed at (%s, %s): %s", x, y, exc)
        _draw_error(surface, content, x, y)
        return

    surface.cursor_x = x
    surface.cursor_y = y + height


def _draw_error(surface: PageSurface, content: str, x: float, y: float) -> None:
    try:
        with surface.style_guard():
            surface.text(
                x,
                y,
                f"[Render error]: {content[:100]}",
                font=ERROR_FONT,
                size=DEFAULT_FONT_SIZE,
                color=ERROR_COLOR,
            )
    except Exception:
        logger.exception("Could not draw text error placeholder")
