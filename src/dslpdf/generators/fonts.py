"""Font registration and per-element font resolution.

ReportLab keeps one process-wide font table. :class:`FontRegistry` is the
explicit record of which TrueType fonts *this* renderer registered (or was
told are registered), and it is what the renderers consult; nothing reads
ReportLab's table behind its back. Build one at startup and pass it in::

    registry = FontRegistry.discover(fonts_dir="./fonts")
    pdf = await render_dsl_to_pdf(dsl, fonts=registry)
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..utils.bidi import contains_rtl, is_arabic_only
from ..utils.languages import ARABIC_FONT, BUILTIN_FONT, UNIVERSAL_FONT, UNIVERSAL_FONT_BOLD

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Candidate locations
# ---------------------------------------------------------------------------

_SYSTEM_FONT_DIRS = [
    Path("/usr/share/fonts/truetype/dejavu"),
    Path("/usr/share/fonts/dejavu"),
    Path("/usr/share/fonts/truetype/noto"),
    Path("/usr/share/fonts/noto"),
    Path("/Library/Fonts"),
    Path("C:/Windows/Fonts"),
]

# Font name -> file names to look for, in priority order
_FONT_FILES: dict[str, list[str]] = {
    UNIVERSAL_FONT: ["DejaVuSans.ttf"],
    UNIVERSAL_FONT_BOLD: ["DejaVuSans-Bold.ttf"],
    ARABIC_FONT: ["NotoSansArabic-Regular.ttf", "NotoSansArabic.ttf"],
}


def _first_existing_path(candidates: Iterable[Path]) -> Optional[Path]:
    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate
    return None


@dataclass(frozen=True)
class FontAsset:
    """A TrueType font file to register under *name*."""

    name: str
    path: Path


def default_font_assets(fonts_dir: str | Path | None = None) -> list[FontAsset]:
    """Find the known fonts in *fonts_dir* and the usual system locations."""
    search_dirs = list(_SYSTEM_FONT_DIRS)
    if fonts_dir:
        search_dirs.insert(0, Path(fonts_dir).expanduser())

    assets = []
    for name, filenames in _FONT_FILES.items():
        found = _first_existing_path(d / f for d in search_dirs for f in filenames)
        if found:
            assets.append(FontAsset(name, found))
        else:
            logger.debug("No file found for font %s", name)
    return assets


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class FontRegistry:
    """Records available fonts and resolves the font for a text run.

    *preregistered* names are trusted to already be known to ReportLab;
    tests use it to stand up a registry without real font files.
    """

    def __init__(
        self,
        *,
        universal_font: str = UNIVERSAL_FONT,
        arabic_font: str = ARABIC_FONT,
        builtin_font: str = BUILTIN_FONT,
        preregistered: Iterable[str] = (),
    ):
        self.universal_font = universal_font
        self.arabic_font = arabic_font
        self.builtin_font = builtin_font
        self._fonts: dict[str, Optional[Path]] = {name: None for name in preregistered}

    # -- construction --------------------------------------------------------

    @classmethod
    def from_assets(cls, assets: Iterable[FontAsset], **kwargs) -> FontRegistry:
        registry = cls(**kwargs)
        for asset in assets:
            registry.register(asset)
        return registry

    @classmethod
    def discover(
        cls,
        fonts_dir: str | Path | None = None,
        extra_assets: Iterable[FontAsset] = (),
        **kwargs,
    ) -> FontRegistry:
        """Register the default fonts found on disk plus *extra_assets*."""
        assets = default_font_assets(fonts_dir) + list(extra_assets)
        registry = cls.from_assets(assets, **kwargs)
        logger.info("Font registry ready: %s", ", ".join(registry.names()) or "built-in only")
        return registry

    def register(self, asset: FontAsset) -> bool:
        """Register *asset* with ReportLab. Returns False if it cannot be loaded."""
        if asset.name in self._fonts:
            return True
        try:
            pdfmetrics.registerFont(TTFont(asset.name, str(asset.path)))
        except Exception as exc:
            logger.warning("Failed to register font %s from %s: %s", asset.name, asset.path, exc)
            return False
        self._fonts[asset.name] = asset.path
        logger.debug("Registered font %s from %s", asset.name, asset.path)
        return True

    # -- queries -------------------------------------------------------------

    def names(self) -> list[str]:
        return list(self._fonts)

    def is_available(self, name: Optional[str]) -> bool:
        if not name:
            return False
        return name in self._fonts or name in pdfmetrics.standardFonts

    def resolve(
        self,
        text: str = "",
        preferred: Optional[str] = None,
        default_font: Optional[str] = None,
    ) -> str:
        """Pick the font to draw *text* with.

        RTL text gets the Arabic font when the text is Arabic-only and that
        font is registered, otherwise the universal font. Other text tries
        *preferred*, then *default_font*, then the universal font. The
        built-in font is the last resort.
        """
        if contains_rtl(text):
            if is_arabic_only(text) and self.is_available(self.arabic_font):
                return self.arabic_font
            candidates = [self.universal_font]
        else:
            candidates = [preferred, default_font, self.universal_font]

        for name in candidates:
            if self.is_available(name):
                return name

        if preferred:
            logger.debug("Font %r unavailable, falling back to %s", preferred, self.builtin_font)
        return self.builtin_font


@functools.lru_cache(maxsize=None)
def shared_registry(
    fonts_dir: str | Path | None = None,
    extra_assets: tuple[FontAsset, ...] = (),
    universal_font: str = UNIVERSAL_FONT,
    arabic_font: str = ARABIC_FONT,
    builtin_font: str = BUILTIN_FONT,
) -> FontRegistry:
    """One discovered registry per font configuration, built on first use."""
    return FontRegistry.discover(
        fonts_dir,
        extra_assets,
        universal_font=universal_font,
        arabic_font=arabic_font,
        builtin_font=builtin_font,
    )
