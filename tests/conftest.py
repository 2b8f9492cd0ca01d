"""Shared fixtures for the dslpdf test suite."""

from __future__ import annotations

import copy
import io
import json
from pathlib import Path

import pytest
from PIL import Image

from dslpdf.core.config import RendererSettings
from dslpdf.generators.fonts import FontRegistry

SAMPLE_PATH = Path(__file__).parent.parent / "examples" / "sample_report.json"


@pytest.fixture
def sample_path() -> Path:
    return SAMPLE_PATH


@pytest.fixture
def sample_dsl() -> dict:
    return json.loads(SAMPLE_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def builtin_fonts() -> FontRegistry:
    """Registry without any TrueType file: everything resolves to Helvetica."""
    return FontRegistry()


@pytest.fixture
def settings() -> RendererSettings:
    return RendererSettings(image_timeout=1.0)


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


def make_dsl(*elements: dict, **doc_fields) -> dict:
    """One-page document holding *elements*."""
    dsl = {"pages": [{"elements": [copy.deepcopy(e) for e in elements]}]}
    dsl.update(doc_fields)
    return dsl


def text_element(content="Hello", x=50, y=100, **style) -> dict:
    element = {"type": "text", "content": content, "position": {"x": x, "y": y}}
    if style:
        element["style"] = style
    return element


def chart_element(chart_type="bar", data=(10, 20, 30), labels=("A", "B", "C"), title=None, **style) -> dict:
    content = {
        "type": chart_type,
        "data": {
            "labels": list(labels),
            "datasets": [{"label": "Series", "data": list(data)}],
        },
    }
    if title is not None:
        content["title"] = title
    element = {"type": "chart", "content": content, "position": {"x": 50, "y": 150}}
    if style:
        element["style"] = style
    return element


def image_element(content, **style) -> dict:
    element = {"type": "image", "content": content, "position": {"x": 60, "y": 300}}
    if style:
        element["style"] = style
    return element
