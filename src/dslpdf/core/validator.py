"""Structural validation of raw DSL documents.

The validator walks the raw mapping (not the pydantic tree) so that it can
report *every* defect in one pass instead of stopping at the first one.
It never mutates its input.

Usage::

    result = validate_dsl(dsl)
    if not result.valid:
        for err in result.errors:
            print(err)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .models import ChartType, Direction, ElementType, PageSize, ValidationResult

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Field specs
# ---------------------------------------------------------------------------

# A field spec is either a primitive kind name or a tuple of allowed values.
FieldSpec = Any

_DIRECTIONS = tuple(d.value for d in Direction)

TEXT_STYLE_FIELDS: dict[str, FieldSpec] = {
    "font": "string",
    "fontSize": "number",
    "color": "string",
    "width": "number",
    "align": ("left", "center", "right", "justify"),
    "direction": _DIRECTIONS,
    "lineBreak": "bool",
    "underline": "bool",
    "paragraphGap": "number",
    "indent": "number",
}

IMAGE_STYLE_FIELDS: dict[str, FieldSpec] = {
    "width": "number",
    "height": "number",
    "align": ("left", "center", "right"),
    "valign": ("top", "center", "bottom"),
}

CHART_STYLE_FIELDS: dict[str, FieldSpec] = {
    "width": "number",
    "height": "number",
    "backgroundColor": "string",
    "borderColor": "string",
    "borderWidth": "number",
    "direction": _DIRECTIONS,
}

_MARGIN_SIDES = ("top", "bottom", "left", "right")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_field(value: Any, spec: FieldSpec) -> str | None:
    """Return a short problem description, or *None* when *value* fits."""
    if isinstance(spec, tuple):
        if value not in spec:
            return f"must be one of: {', '.join(spec)} (got {value!r})"
        return None
    if spec == "number" and not _is_number(value):
        return "must be a number"
    if spec == "string" and not isinstance(value, str):
        return "must be a string"
    if spec == "bool" and not isinstance(value, bool):
        return "must be a boolean"
    return None


def _check_style(
    style: Any, fields: Mapping[str, FieldSpec], where: str, errors: list[str]
) -> None:
    if style is None:
        return
    if not isinstance(style, Mapping):
        errors.append(f"{where}: style must be an object")
        return
    for key, value in style.items():
        spec = fields.get(key)
        if spec is None:
            logger.debug("%s: ignoring unknown style key %r", where, key)
            continue
        if value is None:
            continue
        problem = _check_field(value, spec)
        if problem:
            errors.append(f"{where}: style.{key} {problem}")


# ---------------------------------------------------------------------------
# Per-kind content checks
# ---------------------------------------------------------------------------

def _check_text(element: Mapping[str, Any], where: str, errors: list[str]) -> None:
    content = element.get("content")
    if not isinstance(content, (str, int, float)) or isinstance(content, bool):
        errors.append(f"{where}: text content must be a string")
    _check_style(element.get("style"), TEXT_STYLE_FIELDS, where, errors)


def _check_image(element: Mapping[str, Any], where: str, errors: list[str]) -> None:
    content = element.get("content")
    if isinstance(content, (bytes, bytearray)):
        if not content:
            errors.append(f"{where}: image content must not be empty")
    elif not isinstance(content, str) or not content.strip():
        errors.append(
            f"{where}: image content must be a URL, file path, data URI or raw bytes"
        )
    _check_style(element.get("style"), IMAGE_STYLE_FIELDS, where, errors)


def _check_chart(element: Mapping[str, Any], where: str, errors: list[str]) -> None:
    _check_style(element.get("style"), CHART_STYLE_FIELDS, where, errors)

    chart = element.get("content")
    if not isinstance(chart, Mapping):
        errors.append(f"{where}: chart content must be an object")
        return

    allowed = ", ".join(t.value for t in ChartType)
    chart_type = chart.get("type")
    if chart_type is None:
        errors.append(f"{where}: chart type is required (one of: {allowed})")
    elif chart_type not in {t.value for t in ChartType}:
        errors.append(
            f"{where}: unsupported chart type {chart_type!r} (expected one of: {allowed})"
        )

    if chart.get("title") is not None and not isinstance(chart["title"], str):
        errors.append(f"{where}: chart title must be a string")
    if chart.get("textDirection") is not None and chart["textDirection"] not in _DIRECTIONS:
        errors.append(f"{where}: chart textDirection must be one of: {', '.join(_DIRECTIONS)}")
    if chart.get("options") is not None and not isinstance(chart["options"], Mapping):
        errors.append(f"{where}: chart options must be an object")

    data = chart.get("data")
    if data is None:
        errors.append(f"{where}: chart data is required")
        return
    if not isinstance(data, Mapping):
        errors.append(f"{where}: chart data must be an object")
        return

    labels = data.get("labels")
    if labels is not None and not isinstance(labels, list):
        errors.append(f"{where}: chart data.labels must be an array")

    datasets = data.get("datasets")
    if datasets is None:
        errors.append(f"{where}: chart data.datasets is required")
        return
    if not isinstance(datasets, list):
        errors.append(f"{where}: chart data.datasets must be an array")
        return

    for d_idx, dataset in enumerate(datasets, start=1):
        if not isinstance(dataset, Mapping):
            errors.append(f"{where}: dataset {d_idx} must be an object")
            continue
        values = dataset.get("data")
        if not isinstance(values, list) or not all(_is_number(v) for v in values):
            errors.append(f"{where}: dataset {d_idx} data must be an array of numbers")
        if dataset.get("label") is not None and not isinstance(dataset["label"], str):
            errors.append(f"{where}: dataset {d_idx} label must be a string")


_ELEMENT_CHECKS: dict[ElementType, Callable[[Mapping[str, Any], str, list[str]], None]] = {
    ElementType.TEXT: _check_text,
    ElementType.IMAGE: _check_image,
    ElementType.CHART: _check_chart,
}

_missing_kinds = set(ElementType) - set(_ELEMENT_CHECKS)
if _missing_kinds:  # pragma: no cover - guards future ElementType additions
    raise TypeError(f"No validation rule for element kinds: {sorted(_missing_kinds)}")


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class DSLValidator:
    """Checks a raw DSL mapping and aggregates every violated constraint."""

    def validate(self, dsl: Any) -> ValidationResult:
        if dsl is None:
            return ValidationResult(valid=False, errors=["DSL input is required"])
        if not isinstance(dsl, Mapping):
            return ValidationResult(valid=False, errors=["DSL document must be an object"])

        errors: list[str] = []
        self._check_document_fields(dsl, errors)

        pages = dsl.get("pages")
        if pages is None:
            errors.append("Pages are required")
        elif not isinstance(pages, list):
            errors.append("Pages must be an array")
        elif not pages:
            errors.append("At least one page is required")
        else:
            for p_idx, page in enumerate(pages, start=1):
                self._check_page(page, p_idx, errors)

        if errors:
            logger.debug("DSL validation failed with %d error(s)", len(errors))
            return ValidationResult(valid=False, errors=errors)
        return ValidationResult(valid=True)

    # -- document ------------------------------------------------------------

    @staticmethod
    def _check_document_fields(dsl: Mapping[str, Any], errors: list[str]) -> None:
        for key in ("template", "defaultFont"):
            if dsl.get(key) is not None and not isinstance(dsl[key], str):
                errors.append(f"{key} must be a string")
        direction = dsl.get("defaultDirection")
        if direction is not None and direction not in _DIRECTIONS:
            errors.append(
                f"defaultDirection must be one of: {', '.join(_DIRECTIONS)} (got {direction!r})"
            )

    # -- pages ---------------------------------------------------------------

    def _check_page(self, page: Any, p_idx: int, errors: list[str]) -> None:
        where = f"Page {p_idx}"
        if not isinstance(page, Mapping):
            errors.append(f"{where} must be an object")
            return

        self._check_page_style(page.get("style"), where, errors)

        elements = page.get("elements")
        if elements is None:
            errors.append(f"{where} elements are required")
            return
        if not isinstance(elements, list):
            errors.append(f"{where} elements must be an array")
            return
        if not elements:
            errors.append(f"{where} must have at least one element")
            return

        for e_idx, element in enumerate(elements, start=1):
            self._check_element(element, f"{where}, element {e_idx}", errors)

    @staticmethod
    def _check_page_style(style: Any, where: str, errors: list[str]) -> None:
        if style is None:
            return
        if not isinstance(style, Mapping):
            errors.append(f"{where}: style must be an object")
            return

        size = style.get("size")
        if size is not None:
            names = tuple(s.value for s in PageSize)
            if isinstance(size, str):
                if size.lower() not in names:
                    errors.append(
                        f"{where}: style.size must be one of: {', '.join(names)} "
                        f"or a [width, height] pair (got {size!r})"
                    )
            elif not (
                isinstance(size, list)
                and len(size) == 2
                and all(_is_number(v) and v > 0 for v in size)
            ):
                errors.append(f"{where}: style.size must be a page name or a [width, height] pair")

        margin = style.get("margin")
        if margin is not None and not _is_number(margin):
            if isinstance(margin, Mapping):
                for side, value in margin.items():
                    if side not in _MARGIN_SIDES:
                        errors.append(f"{where}: style.margin has unknown side {side!r}")
                    elif value is not None and not _is_number(value):
                        errors.append(f"{where}: style.margin.{side} must be a number")
            else:
                errors.append(f"{where}: style.margin must be a number or an object")

        if style.get("backgroundColor") is not None and not isinstance(
            style["backgroundColor"], str
        ):
            errors.append(f"{where}: style.backgroundColor must be a string")

        direction = style.get("direction")
        if direction is not None and direction not in _DIRECTIONS:
            errors.append(f"{where}: style.direction must be one of: {', '.join(_DIRECTIONS)}")

    # -- elements ------------------------------------------------------------

    @staticmethod
    def _check_element(element: Any, where: str, errors: list[str]) -> None:
        if not isinstance(element, Mapping):
            errors.append(f"{where} must be an object")
            return

        kinds = ", ".join(k.value for k in ElementType)
        raw_type = element.get("type")
        kind: ElementType | None = None
        if raw_type is None:
            errors.append(f"{where}: type is required (one of: {kinds})")
        else:
            try:
                kind = ElementType(raw_type)
            except ValueError:
                errors.append(f"{where}: type must be one of: {kinds} (got {raw_type!r})")

        position = element.get("position")
        if position is None:
            errors.append(f"{where}: position is required")
        elif not isinstance(position, Mapping):
            errors.append(f"{where}: position must be an object with x and y")
        else:
            for axis in ("x", "y"):
                if axis not in position:
                    errors.append(f"{where}: position {axis} is required")
                elif not _is_number(position[axis]):
                    errors.append(f"{where}: position {axis} must be a number")

        if "content" not in element or element["content"] is None:
            errors.append(f"{where}: content is required")
            return

        if kind is not None:
            _ELEMENT_CHECKS[kind](element, where, errors)


_DEFAULT_VALIDATOR = DSLValidator()


def validate_dsl(dsl: Any) -> ValidationResult:
    """Validate a raw DSL document. See :class:`DSLValidator`."""
    return _DEFAULT_VALIDATOR.validate(dsl)
