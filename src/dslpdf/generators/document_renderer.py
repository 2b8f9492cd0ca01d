"""Turn a typed :class:`~dslpdf.core.models.Document` into PDF bytes.

One canvas page is created per DSL page, in order. Each page gets its
background, then the template frame, then its elements in array order.
Element failures are contained by the element renderers; the document is
always finalized.
"""

from __future__ import annotations

import logging
from datetime import date
from io import BytesIO
from typing import Optional

from reportlab.pdfgen.canvas import Canvas

from ..core.config import RendererSettings
from ..core.fetcher import ImageFetcher
from ..core.models import (
    PAGE_SIZES,
    ChartElement,
    Document,
    Element,
    ImageElement,
    Margin,
    Page,
    PageSize,
    TextElement,
)
from .canvas import Margins, PageSurface
from .chart_renderer import render_chart
from .fonts import FontAsset, FontRegistry, shared_registry
from .image_renderer import render_image
from .templates import DEFAULT_TEMPLATE, PageTemplate, draw_frame, get_template
from .text_renderer import render_text

logger = logging.getLogger(__name__)


def page_size(page: Page, template: PageTemplate) -> tuple[float, float]:
    size = page.style.size
    if size is None:
        return template.size
    if isinstance(size, PageSize):
        return PAGE_SIZES[size]
    return (float(size[0]), float(size[1]))


def page_margins(page: Page, template: PageTemplate) -> Margins:
    margin = page.style.margin
    base = template.margins
    if margin is None:
        return base
    if isinstance(margin, Margin):
        return Margins(
            top=base.top if margin.top is None else margin.top,
            bottom=base.bottom if margin.bottom is None else margin.bottom,
            left=base.left if margin.left is None else margin.left,
            right=base.right if margin.right is None else margin.right,
        )
    return Margins(margin, margin, margin, margin)


class DocumentRenderer:
    """Renders documents with a fixed font registry, settings and image fetcher."""

    def __init__(
        self,
        fonts: Optional[FontRegistry] = None,
        settings: Optional[RendererSettings] = None,
        fetcher: Optional[ImageFetcher] = None,
        today: Optional[date] = None,
    ):
        self.settings = settings or RendererSettings()
        self.fonts = fonts or shared_registry(
            self.settings.fonts_dir,
            tuple(FontAsset(name, path) for name, path in sorted(self.settings.font_assets.items())),
            self.settings.universal_font,
            self.settings.arabic_font,
            self.settings.builtin_font,
        )
        self.fetcher = fetcher or ImageFetcher(timeout=self.settings.image_timeout)
        self.today = today

    def template_for(self, document: Document) -> PageTemplate:
        name = document.template or self.settings.default_template
        try:
            return get_template(name)
        except KeyError:
            logger.warning("Unknown template %r, using %s", name, DEFAULT_TEMPLATE.name)
            return DEFAULT_TEMPLATE

    async def render(self, document: Document) -> bytes:
        template = self.template_for(document)
        total_pages = len(document.pages)
        logger.info("Rendering %d page(s) with template %s", total_pages, template.name)

        buffer = BytesIO()
        canvas = Canvas(
            buffer,
            pagesize=page_size(document.pages[0], template),
            pageCompression=1 if self.settings.page_compression else 0,
        )
        if self.settings.title:
            canvas.setTitle(self.settings.title)
        if self.settings.author:
            canvas.setAuthor(self.settings.author)

        surface = PageSurface(canvas, self.fonts, default_font=document.default_font)

        for number, page in enumerate(document.pages, start=1):
            direction = page.style.direction or document.default_direction
            surface.begin_page(
                page_size(page, template),
                page_margins(page, template),
                direction.value if direction else "ltr",
            )

            if page.style.background_color:
                with surface.style_guard():
                    surface.rect(0, 0, surface.width, surface.height, fill=page.style.background_color)

            draw_frame(surface, template, page_number=number, total_pages=total_pages, today=self.today)

            for element in page.elements:
                await self._render_element(surface, element, template)

            surface.end_page()
            logger.debug("Page %d/%d done (%d element(s))", number, total_pages, len(page.elements))

        canvas.save()
        return buffer.getvalue()

    async def _render_element(self, surface: PageSurface, element: Element, template: PageTemplate) -> None:
        try:
            if isinstance(element, TextElement):
                render_text(
                    surface,
                    element.content,
                    element.style,
                    element.position,
                    default_size=template.font_size,
                    default_color=template.text_color,
                )
            elif isinstance(element, ImageElement):
                await render_image(surface, element.content, element.position, element.style, self.fetcher)
            elif isinstance(element, ChartElement):
                render_chart(
                    surface,
                    element.content,
                    element.position,
                    element.style,
                    pie_arc=self.settings.pie_arc,
                )
            else:
                logger.warning("Skipping element of unknown kind %s", type(element).__name__)
        except Exception:
            logger.warning("Element %s on page %d failed", element.type, surface.page_number, exc_info=True)
