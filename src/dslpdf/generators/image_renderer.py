"""Render image elements, with a visible placeholder when the source fails."""

from __future__ import annotations

import logging
from typing import Optional

from ..core.fetcher import ImageFetcher
from ..core.models import ImageStyle, Position
from .canvas import PageSurface

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 300
DEFAULT_HEIGHT = 200
PLACEHOLDER_SIZE = 100
PLACEHOLDER_FILL = "#F0F0F0"
PLACEHOLDER_BORDER = "#CCCCCC"
PLACEHOLDER_TEXT = "#666666"


async def render_image(
    surface: PageSurface,
    source: bytes | str,
    position: Position,
    style: Optional[ImageStyle],
    fetcher: ImageFetcher,
) -> None:
    """Resolve *source* and draw it fitted into the style box at *position*."""
    style = style or ImageStyle()
    width = style.width or DEFAULT_WIDTH
    height = style.height or DEFAULT_HEIGHT
    align = style.align.value if style.align else "left"
    valign = style.valign.value if style.valign else "top"

    try:
        data = await fetcher.fetch(source)
        with surface.style_guard():
            surface.image(data, position.x, position.y, width, height, align=align, valign=valign)
    except Exception as exc:
        label = source[:60] if isinstance(source, str) else f"<{len(source)} bytes>"
        logger.warning("Image %s could not be rendered: %s", label, exc)
        draw_image_placeholder(surface, position, style)


def draw_image_placeholder(surface: PageSurface, position: Position, style: ImageStyle) -> None:
    width = style.width or PLACEHOLDER_SIZE
    height = style.height or PLACEHOLDER_SIZE
    with surface.style_guard():
        surface.rect(
            position.x, position.y, width, height,
            fill=PLACEHOLDER_FILL, stroke=PLACEHOLDER_BORDER,
        )
        surface.text(
            position.x + width / 2,
            position.y + height / 2 - 5,
            "Image Error",
            font=surface.fonts.builtin_font,
            size=10,
            color=PLACEHOLDER_TEXT,
            align="center",
        )
