"""Pydantic models for the DSL document tree.

These models form the typed representation between the raw JSON DSL and
the renderers. The raw ``dict`` form is what callers hand in and what the
validator and auto-fixer operate on; :meth:`Document.from_dsl` turns a
(validated) mapping into this tree, and the renderers read it only.

Field names follow Python conventions and are aliased to the camelCase
keys used on the wire (``fontSize``, ``backgroundColor``, ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ElementType(str, Enum):
    """Kinds of page elements. The set is closed."""
    TEXT = "text"
    IMAGE = "image"
    CHART = "chart"


class ChartType(str, Enum):
    """Supported chart kinds."""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"


class Direction(str, Enum):
    LTR = "ltr"
    RTL = "rtl"


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class HorizontalAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VerticalAlign(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class PageSize(str, Enum):
    A4 = "a4"
    LETTER = "letter"
    LEGAL = "legal"


# Points, portrait orientation.
PAGE_SIZES: dict[PageSize, tuple[float, float]] = {
    PageSize.A4: (595.28, 841.89),
    PageSize.LETTER: (612.0, 792.0),
    PageSize.LEGAL: (612.0, 1008.0),
}


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class DSLModel(BaseModel):
    """Common config: camelCase aliases, name population, extra keys kept."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


def _empty_if_none(value: Any) -> Any:
    """``"style": null`` and friends mean "use the defaults"."""
    return {} if value is None else value


class Position(DSLModel):
    """Top-left anchored canvas coordinate, in points."""
    x: float
    y: float


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------

class TextStyle(DSLModel):
    font: Optional[str] = None
    font_size: Optional[float] = None
    color: Optional[str] = None
    width: Optional[float] = None
    align: Optional[TextAlign] = None
    direction: Optional[Direction] = None
    line_break: Optional[bool] = None
    underline: Optional[bool] = None
    paragraph_gap: Optional[float] = None
    indent: Optional[float] = None


class ImageStyle(DSLModel):
    width: Optional[float] = None
    height: Optional[float] = None
    align: Optional[HorizontalAlign] = None
    valign: Optional[VerticalAlign] = None


class ChartStyle(DSLModel):
    width: Optional[float] = None
    height: Optional[float] = None
    background_color: Optional[str] = None
    border_color: Optional[str] = None
    border_width: Optional[float] = None
    direction: Optional[Direction] = None


class Margin(DSLModel):
    top: Optional[float] = None
    bottom: Optional[float] = None
    left: Optional[float] = None
    right: Optional[float] = None


class PageStyle(DSLModel):
    size: Optional[Union[PageSize, tuple[float, float]]] = None
    margin: Optional[Union[float, Margin]] = None
    background_color: Optional[str] = None
    direction: Optional[Direction] = None

    @field_validator("size", mode="before")
    @classmethod
    def _lower_size(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value


# ---------------------------------------------------------------------------
# Chart content
# ---------------------------------------------------------------------------

# Unusable list entries stay as None; the chart renderer uses its palette there.
ColorSpec = Union[str, list[Optional[str]]]


class Dataset(DSLModel):
    label: Optional[str] = None
    data: list[float] = Field(default_factory=list)
    background_color: Optional[ColorSpec] = None
    border_color: Optional[ColorSpec] = None
    border_width: Optional[float] = None

    @field_validator("background_color", "border_color", mode="before")
    @classmethod
    def _loose_colors(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            return [v if isinstance(v, str) else None for v in value]
        return None

    @field_validator("border_width", mode="before")
    @classmethod
    def _loose_width(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        return None


class ChartData(DSLModel):
    labels: list[str] = Field(default_factory=list)
    datasets: list[Dataset] = Field(default_factory=list)

    @field_validator("labels", mode="before")
    @classmethod
    def _stringify_labels(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return ["" if v is None else str(v) for v in value]
        return value


class ChartFont(DSLModel):
    family: Optional[str] = None

    @field_validator("family", mode="before")
    @classmethod
    def _string_family(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None


class ChartOptions(DSLModel):
    rtl: bool = False
    font: Optional[ChartFont] = None

    @field_validator("rtl", mode="before")
    @classmethod
    def _strict_flag(cls, value: Any) -> bool:
        return value is True

    @field_validator("font", mode="before")
    @classmethod
    def _font_shape(cls, value: Any) -> Any:
        # a bare string names the family
        if isinstance(value, str):
            return {"family": value}
        if isinstance(value, Mapping):
            return value
        return None


class ChartContent(DSLModel):
    type: ChartType
    title: Optional[str] = None
    text_direction: Optional[Direction] = None
    data: ChartData
    options: Annotated[ChartOptions, BeforeValidator(_empty_if_none)] = Field(default_factory=ChartOptions)

    @property
    def is_rtl(self) -> bool:
        return self.options.rtl or self.text_direction == Direction.RTL

    @property
    def font_family(self) -> Optional[str]:
        return self.options.font.family if self.options.font else None

    def text_fragments(self) -> list[str]:
        """Every user-visible string of the chart (title and labels)."""
        parts = [self.title or ""]
        parts.extend(self.data.labels)
        parts.extend(ds.label or "" for ds in self.data.datasets)
        return [p for p in parts if p]


# ---------------------------------------------------------------------------
# Elements (closed, tagged union)
# ---------------------------------------------------------------------------

class TextElement(DSLModel):
    type: Literal["text"] = "text"
    content: str
    position: Position
    style: Annotated[TextStyle, BeforeValidator(_empty_if_none)] = Field(default_factory=TextStyle)

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> str:
        return "" if value is None else str(value)


class ImageElement(DSLModel):
    type: Literal["image"] = "image"
    content: Union[bytes, str]
    position: Position
    style: Annotated[ImageStyle, BeforeValidator(_empty_if_none)] = Field(default_factory=ImageStyle)


class ChartElement(DSLModel):
    type: Literal["chart"] = "chart"
    content: ChartContent
    position: Position
    style: Annotated[ChartStyle, BeforeValidator(_empty_if_none)] = Field(default_factory=ChartStyle)


Element = Annotated[
    Union[TextElement, ImageElement, ChartElement],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Page & Document
# ---------------------------------------------------------------------------

class Page(DSLModel):
    elements: list[Element] = Field(default_factory=list)
    style: Annotated[PageStyle, BeforeValidator(_empty_if_none)] = Field(default_factory=PageStyle)


class Document(DSLModel):
    """The top-level DSL document."""
    template: Optional[str] = None
    default_font: Optional[str] = None
    default_direction: Optional[Direction] = None
    pages: list[Page] = Field(min_length=1)

    @classmethod
    def from_dsl(cls, dsl: Mapping[str, Any]) -> Document:
        """Build the typed tree from a raw DSL mapping."""
        return cls.model_validate(dict(dsl))

    def to_dsl(self) -> dict[str, Any]:
        """Dump back to the camelCase wire form."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class ValidationResult(BaseModel):
    """Outcome of a structural check; ``errors`` lists every defect found."""
    valid: bool
    errors: list[str] = Field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid
