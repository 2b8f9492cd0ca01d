"""Page templates: default page size, margins, fonts and the header/footer frame.

A document names its template with the top-level ``template`` key. Header
and footer texts may contain ``{{pageNumber}}``, ``{{totalPages}}`` and
``{{date}}`` placeholders.

Usage::

    from dslpdf.generators.templates import get_template, list_templates

    template = get_template("report")
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date as _date
from typing import Optional, Union

from ..core.models import PAGE_SIZES, PageSize
from ..utils.bidi import contains_rtl, prepare_text
from .canvas import Margins, PageSurface

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


# ---------------------------------------------------------------------------
# Template dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FrameText:
    """A header or footer line."""

    text: str
    height: float


@dataclass(frozen=True)
class PageTemplate:
    name: str
    display_name: str
    page_size: Union[PageSize, tuple[float, float]] = PageSize.A4
    margins: Margins = field(default_factory=Margins)
    header: Optional[FrameText] = None
    footer: Optional[FrameText] = None
    font_family: str = "DejaVuSans"
    font_size: float = 12
    text_color: str = "#000000"

    @property
    def size(self) -> tuple[float, float]:
        if isinstance(self.page_size, PageSize):
            return PAGE_SIZES[self.page_size]
        return self.page_size

    @property
    def description(self) -> str:
        label = self.page_size.value if isinstance(self.page_size, PageSize) else "custom"
        return f"Template with {label} page size"


def substitute(text: str, values: dict[str, object]) -> str:
    """Replace ``{{name}}`` placeholders; unknown names are left untouched."""
    if not text or "{{" not in text:
        return text

    def _replacer(match: re.Match) -> str:
        key = match.group(1)
        return str(values[key]) if key in values else match.group(0)

    return _PLACEHOLDER_RE.sub(_replacer, text)


# ---------------------------------------------------------------------------
# Built-in templates
# ---------------------------------------------------------------------------

DEFAULT_TEMPLATE = PageTemplate(
    name="default",
    display_name="Default",
    header=FrameText("Generated Document", 30),
    footer=FrameText("Page {{pageNumber}} of {{totalPages}}", 20),
)

MINIMAL_TEMPLATE = PageTemplate(
    name="minimal",
    display_name="Minimal",
    margins=Margins(20, 20, 20, 20),
    font_size=10,
    text_color="#333333",
)

REPORT_TEMPLATE = PageTemplate(
    name="report",
    display_name="Report",
    page_size=PageSize.LETTER,
    margins=Margins(60, 60, 60, 60),
    header=FrameText("Confidential Report", 40),
    footer=FrameText("Generated on {{date}} | Page {{pageNumber}} of {{totalPages}}", 30),
)

CYRILLIC_TEMPLATE = PageTemplate(
    name="cyrillic",
    display_name="Cyrillic",
    header=FrameText("Документ с кириллицей", 30),
    footer=FrameText("Страница {{pageNumber}} из {{totalPages}}", 20),
)

_TEMPLATE_REGISTRY: dict[str, PageTemplate] = {
    t.name: t
    for t in [DEFAULT_TEMPLATE, MINIMAL_TEMPLATE, REPORT_TEMPLATE, CYRILLIC_TEMPLATE]
}


def get_template(name: str) -> PageTemplate:
    """Get a template by name. Raises ``KeyError`` if not found."""
    key = name.lower().strip()
    if key not in _TEMPLATE_REGISTRY:
        available = ", ".join(sorted(_TEMPLATE_REGISTRY.keys()))
        raise KeyError(f"Unknown template '{name}'. Available: {available}")
    return _TEMPLATE_REGISTRY[key]


def list_templates() -> list[PageTemplate]:
    """Return all registered templates."""
    return list(_TEMPLATE_REGISTRY.values())


def register_template(template: PageTemplate) -> None:
    """Register a custom template at runtime."""
    _TEMPLATE_REGISTRY[template.name.lower().strip()] = template


# ---------------------------------------------------------------------------
# Frame drawing
# ---------------------------------------------------------------------------

def draw_frame(
    surface: PageSurface,
    template: PageTemplate,
    *,
    page_number: int,
    total_pages: int,
    today: Optional[_date] = None,
) -> None:
    """Draw the template header and footer on the current page."""
    if not template.header and not template.footer:
        return

    values = {
        "pageNumber": page_number,
        "totalPages": total_pages,
        "date": (today or _date.today()).isoformat(),
    }
    centre = surface.width / 2

    with surface.style_guard():
        if template.header and template.header.text:
            text = substitute(template.header.text, values)
            font = surface.fonts.resolve(text, template.font_family)
            surface.text(
                centre,
                template.margins.top / 2,
                prepare_text(text, contains_rtl(text)),
                font=font,
                size=template.font_size + 2,
                color=template.text_color,
                align="center",
            )

        if template.footer and template.footer.text:
            text = substitute(template.footer.text, values)
            font = surface.fonts.resolve(text, template.font_family)
            surface.text(
                centre,
                surface.height - template.margins.bottom - 20,
                prepare_text(text, contains_rtl(text)),
                font=font,
                size=template.font_size - 2,
                color=template.text_color,
                align="center",
            )
