"""Heuristic repair of DSL documents before rendering.

Producers of DSL documents (people, scripts, language models) routinely
forget direction, alignment and font hints for right-to-left text. The
auto-fixer fills those in from a script heuristic so that the renderer
always sees a consistent document. It works on a deep copy of the raw
mapping and never raises.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, MutableMapping

from ..utils.bidi import Script, classify_script, contains_rtl
from ..utils.languages import UNIVERSAL_FONT, UNIVERSAL_FONTS, detect_language, get_language_config

logger = logging.getLogger(__name__)


@dataclass
class AutoFixReport:
    """What one auto-fix pass changed."""

    fixes_applied: int = 0
    text_elements: int = 0
    rtl_text_elements: int = 0

    @property
    def rtl_ratio(self) -> float:
        if not self.text_elements:
            return 0.0
        return self.rtl_text_elements / self.text_elements


class DSLAutoFixer:
    """Fills in direction, alignment and font hints from the text script.

    The majority vote for the document direction is approximate: it counts
    text elements, not characters, and a single RTL code point is enough to
    mark an element as RTL.
    """

    def __init__(self, universal_font: str = UNIVERSAL_FONT):
        self.universal_font = universal_font

    def fix(self, dsl: Any) -> Any:
        """Return a repaired deep copy of *dsl*."""
        fixed, _ = self.fix_with_report(dsl)
        return fixed

    def fix_with_report(self, dsl: Any) -> tuple[Any, AutoFixReport]:
        report = AutoFixReport()
        fixed = copy.deepcopy(dsl)

        if not isinstance(fixed, MutableMapping):
            logger.warning("Auto-fix skipped: DSL document is not an object")
            return fixed, report

        pages = fixed.get("pages")
        if not isinstance(pages, list):
            logger.warning("Auto-fix skipped: DSL document has no pages list")
            return fixed, report

        for p_idx, page in enumerate(pages, start=1):
            if not isinstance(page, MutableMapping):
                continue
            elements = page.get("elements")
            if not isinstance(elements, list):
                continue
            for e_idx, element in enumerate(elements, start=1):
                if not isinstance(element, MutableMapping) or not element.get("content"):
                    continue
                where = f"page {p_idx}, element {e_idx}"
                kind = element.get("type")
                if kind == "text":
                    self._fix_text(element, where, report)
                elif kind == "chart":
                    self._fix_chart(element, where, report)

        self._fix_document(fixed, report)

        logger.info("Auto-fix finished: %d fix(es) applied", report.fixes_applied)
        return fixed, report

    # -- elements ------------------------------------------------------------

    def _fix_text(
        self, element: MutableMapping[str, Any], where: str, report: AutoFixReport
    ) -> None:
        content = str(element["content"])
        if not content.strip():
            return

        style = element.get("style")
        if style is None:
            style = element["style"] = {}
            report.fixes_applied += 1
        elif not isinstance(style, MutableMapping):
            logger.debug("%s: style is not an object, leaving it alone", where)
            return

        report.text_elements += 1
        script = classify_script(content)

        if script is Script.RTL:
            report.rtl_text_elements += 1
            if style.get("font") not in UNIVERSAL_FONTS:
                logger.debug("%s: RTL text, font %r -> %s", where, style.get("font"), self.universal_font)
                style["font"] = self.universal_font
                report.fixes_applied += 1
            if style.get("direction") != "rtl":
                logger.debug("%s: RTL text, direction -> rtl", where)
                style["direction"] = "rtl"
                report.fixes_applied += 1
            if style.get("align") not in ("center", "right"):
                logger.debug("%s: RTL text, align %r -> right", where, style.get("align"))
                style["align"] = "right"
                report.fixes_applied += 1
            return

        if not style.get("font"):
            lang = get_language_config(detect_language(content))
            logger.debug("%s: %s text, font -> %s", where, lang.name, lang.font)
            style["font"] = lang.font
            report.fixes_applied += 1
        if not style.get("direction"):
            style["direction"] = "ltr"
            report.fixes_applied += 1

    def _fix_chart(
        self, element: MutableMapping[str, Any], where: str, report: AutoFixReport
    ) -> None:
        chart = element["content"]
        if not isinstance(chart, MutableMapping):
            return
        if not any(contains_rtl(text) for text in _chart_texts(chart)):
            return

        options = chart.get("options")
        if options is None:
            options = chart["options"] = {}
            report.fixes_applied += 1
        elif not isinstance(options, MutableMapping):
            logger.debug("%s: chart options is not an object, leaving it alone", where)
            return

        if options.get("rtl") is not True:
            logger.debug("%s: RTL chart, options.rtl -> true", where)
            options["rtl"] = True
            report.fixes_applied += 1
        font = options.get("font")
        if not isinstance(font, MutableMapping) or font.get("family") != self.universal_font:
            logger.debug("%s: RTL chart, font family -> %s", where, self.universal_font)
            options["font"] = {"family": self.universal_font}
            report.fixes_applied += 1
        if chart.get("textDirection") != "rtl":
            chart["textDirection"] = "rtl"
            report.fixes_applied += 1

    # -- document ------------------------------------------------------------

    def _fix_document(self, dsl: MutableMapping[str, Any], report: AutoFixReport) -> None:
        if not dsl.get("defaultDirection"):
            direction = "rtl" if report.rtl_ratio > 0.5 else "ltr"
            logger.debug(
                "Document direction -> %s (%d of %d text elements RTL)",
                direction, report.rtl_text_elements, report.text_elements,
            )
            dsl["defaultDirection"] = direction
            report.fixes_applied += 1
        if not dsl.get("defaultFont"):
            dsl["defaultFont"] = self.universal_font
            report.fixes_applied += 1


def _chart_texts(chart: MutableMapping[str, Any]) -> list[Any]:
    texts: list[Any] = [chart.get("title")]
    data = chart.get("data")
    if isinstance(data, MutableMapping):
        labels = data.get("labels")
        if isinstance(labels, list):
            texts.extend(labels)
        datasets = data.get("datasets")
        if isinstance(datasets, list):
            texts.extend(ds.get("label") for ds in datasets if isinstance(ds, MutableMapping))
    return texts


_DEFAULT_FIXER = DSLAutoFixer()


def auto_fix_dsl(dsl: Any) -> Any:
    """Return a repaired deep copy of a raw DSL document."""
    return _DEFAULT_FIXER.fix(dsl)
