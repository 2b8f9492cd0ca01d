"""Renderer settings - loaded from a config file, the environment and CLI flags.

Config file format (YAML or JSON)::

    # dslpdf.yaml
    fonts_dir: "./fonts"
    font_assets:
      NotoSansArabic: "./fonts/NotoSansArabic-Regular.ttf"
    default_template: "report"
    image_timeout: 10
    pie_arc: "polygon"
    title: "Quarterly report"
    author: "Finance"

Precedence, lowest to highest: model defaults, config file, environment
(``DSLPDF_FONTS_DIR``, ``DSLPDF_TEMPLATE``), explicit keyword overrides.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from ..utils.languages import ARABIC_FONT, BUILTIN_FONT, UNIVERSAL_FONT
from .fetcher import DEFAULT_IMAGE_TIMEOUT

logger = logging.getLogger(__name__)

ENV_FONTS_DIR = "DSLPDF_FONTS_DIR"
ENV_TEMPLATE = "DSLPDF_TEMPLATE"


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class RendererSettings(BaseModel):
    """Everything the renderer needs that is not part of the DSL document."""

    fonts_dir: Optional[Path] = None
    font_assets: dict[str, Path] = Field(default_factory=dict)

    universal_font: str = UNIVERSAL_FONT
    arabic_font: str = ARABIC_FONT
    builtin_font: str = BUILTIN_FONT

    default_template: str = "default"
    image_timeout: Optional[float] = DEFAULT_IMAGE_TIMEOUT
    pie_arc: Literal["wedge", "polygon"] = "wedge"

    # PDF metadata
    title: str = ""
    author: str = ""
    page_compression: bool = True


# ---------------------------------------------------------------------------
# Loader - config file (YAML / JSON) + environment + overrides
# ---------------------------------------------------------------------------

def _read_config_file(config_path: str | Path) -> dict[str, Any]:
    path = Path(config_path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        data = json.loads(raw)
    else:
        # .yaml / .yml, and YAML is a superset of JSON for anything else
        data = yaml.safe_load(raw)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_settings(config_path: str | Path | None = None, **overrides: Any) -> RendererSettings:
    """Build :class:`RendererSettings` from a config file, env vars and overrides.

    Keyword overrides that are ``None`` are ignored, so CLI options that
    were not given do not clobber file values.
    """
    data: dict[str, Any] = {}

    if config_path:
        data.update(_read_config_file(config_path))
        logger.debug("Loaded settings from %s", config_path)

    env_fonts = os.environ.get(ENV_FONTS_DIR)
    if env_fonts:
        data["fonts_dir"] = env_fonts
    env_template = os.environ.get(ENV_TEMPLATE)
    if env_template:
        data["default_template"] = env_template

    for key, value in overrides.items():
        if value is not None:
            data[key] = value

    return RendererSettings(**data)
