"""Tests for page templates and the header/footer frame."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from dslpdf.core.models import PageSize
from dslpdf.generators.canvas import Margins, PageSurface
from dslpdf.generators.templates import (
    DEFAULT_TEMPLATE,
    MINIMAL_TEMPLATE,
    PageTemplate,
    draw_frame,
    get_template,
    list_templates,
    register_template,
    substitute,
)


class TestRegistry:
    def test_builtin_templates(self):
        names = {t.name for t in list_templates()}
        assert {"default", "minimal", "report", "cyrillic"} <= names

    def test_lookup_is_case_insensitive(self):
        assert get_template(" Report ").page_size == PageSize.LETTER

    def test_unknown_template(self):
        with pytest.raises(KeyError, match="Available"):
            get_template("fancy")

    def test_register_custom(self):
        custom = PageTemplate(name="Wide", display_name="Wide", page_size=(842.0, 595.0))
        register_template(custom)
        assert get_template("wide").size == (842.0, 595.0)
        assert get_template("wide").description == "Template with custom page size"

    def test_default_values(self):
        assert DEFAULT_TEMPLATE.margins == Margins(50, 50, 50, 50)
        assert DEFAULT_TEMPLATE.header.text == "Generated Document"
        assert MINIMAL_TEMPLATE.header is None
        assert MINIMAL_TEMPLATE.font_size == 10


class TestSubstitute:
    def test_known_placeholders(self):
        text = substitute("Page {{pageNumber}} of {{totalPages}}", {"pageNumber": 2, "totalPages": 5})
        assert text == "Page 2 of 5"

    def test_unknown_placeholder_kept(self):
        assert substitute("{{author}} {{date}}", {"date": "2024-01-01"}) == "{{author}} 2024-01-01"

    def test_plain_text(self):
        assert substitute("no placeholders", {}) == "no placeholders"


class TestDrawFrame:
    def _surface(self, fonts):
        surface = PageSurface(MagicMock(), fonts)
        surface.begin_page((600, 800), Margins())
        return surface

    def test_header_and_footer(self, builtin_fonts):
        surface = self._surface(builtin_fonts)
        draw_frame(surface, get_template("report"), page_number=3, total_pages=7, today=date(2024, 5, 1))
        drawn = [c.args[2] for c in surface.canvas.drawCentredString.call_args_list]
        assert drawn == ["Confidential Report", "Generated on 2024-05-01 | Page 3 of 7"]
        surface.canvas.saveState.assert_called_once()
        surface.canvas.restoreState.assert_called_once()

    def test_template_without_frame_draws_nothing(self, builtin_fonts):
        surface = self._surface(builtin_fonts)
        draw_frame(surface, MINIMAL_TEMPLATE, page_number=1, total_pages=1)
        surface.canvas.drawCentredString.assert_not_called()
