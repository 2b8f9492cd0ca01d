"""Per-language rendering defaults (direction, font, alignment)."""

from __future__ import annotations

from dataclasses import dataclass

from .bidi import Script, classify_script

# Covers Latin, Cyrillic and Arabic glyphs; used for every script so no
# element ever depends on a font that was never registered.
UNIVERSAL_FONT = "DejaVuSans"
UNIVERSAL_FONT_BOLD = "DejaVuSans-Bold"
UNIVERSAL_FONTS = (UNIVERSAL_FONT, UNIVERSAL_FONT_BOLD)

# Strictly-Arabic glyph set, only used when registered.
ARABIC_FONT = "NotoSansArabic"

# Always available inside ReportLab.
BUILTIN_FONT = "Helvetica"


@dataclass(frozen=True)
class LanguageConfig:
    code: str
    name: str
    direction: str
    font: str
    align: str


LANGUAGES: dict[str, LanguageConfig] = {
    "en": LanguageConfig("en", "English", "ltr", UNIVERSAL_FONT, "left"),
    "ru": LanguageConfig("ru", "Русский", "ltr", UNIVERSAL_FONT, "left"),
    "ar": LanguageConfig("ar", "العربية", "rtl", UNIVERSAL_FONT, "right"),
}

_SCRIPT_LANGUAGE = {
    Script.RTL: "ar",
    Script.CYRILLIC: "ru",
    Script.LATIN: "en",
}


def detect_language(text: object) -> str:
    """Map the script heuristic onto a language code (``ar``/``ru``/``en``)."""
    return _SCRIPT_LANGUAGE[classify_script(text)]


def get_language_config(code: str) -> LanguageConfig:
    """Return the defaults for *code*, falling back to English."""
    return LANGUAGES.get(code, LANGUAGES["en"])
