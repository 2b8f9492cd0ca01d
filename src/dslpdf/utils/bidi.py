"""Bidirectional text helpers.

Classification here is an explicit, range-based heuristic: a string is
treated as RTL as soon as one code point falls in an RTL block. It is not
language detection and is knowingly approximate for short or mixed-script
strings.
"""

from __future__ import annotations

import re
import unicodedata
from enum import Enum

# ---------------------------------------------------------------------------
# Unicode ranges
# ---------------------------------------------------------------------------

_RTL_RANGES = (
    "\u0590-\u05FF"  # Hebrew
    "\u0600-\u06FF"  # Arabic
    "\u0700-\u074F"  # Syriac
    "\u0750-\u077F"  # Arabic Supplement
    "\u0780-\u07BF"  # Thaana
    "\u07C0-\u07FF"  # NKo
    "\u08A0-\u08FF"  # Arabic Extended-A
    "\uFB1D-\uFDFF"  # Hebrew + Arabic Presentation Forms-A
    "\uFE70-\uFEFF"  # Arabic Presentation Forms-B
    "\u200F"          # RIGHT-TO-LEFT MARK
)

_ARABIC_RANGES = (
    "\u0600-\u06FF"
    "\u0750-\u077F"
    "\u08A0-\u08FF"
    "\uFB50-\uFDFF"
    "\uFE70-\uFEFF"
)

_RTL_RE = re.compile(f"[{_RTL_RANGES}]")
_ARABIC_CHAR_RE = re.compile(f"[{_ARABIC_RANGES}]")
_CYRILLIC_RE = re.compile("[\u0400-\u04FF]")
_TOKEN_RE = re.compile(r"\s+|\S+")

_MIRRORED = str.maketrans("()[]{}<>\u00AB\u00BB", ")(][}{><\u00BB\u00AB")


class Script(str, Enum):
    """Coarse script classes used to pick direction and font defaults."""
    RTL = "rtl"
    CYRILLIC = "cyrillic"
    LATIN = "latin"


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def contains_rtl(text: object) -> bool:
    """True if any code point of *text* lies in an RTL Unicode block."""
    if not isinstance(text, str) or not text:
        return False
    return bool(_RTL_RE.search(text))


def contains_cyrillic(text: object) -> bool:
    """True if *text* contains Cyrillic letters."""
    if not isinstance(text, str) or not text:
        return False
    return bool(_CYRILLIC_RE.search(text))


def _is_neutral(ch: str) -> bool:
    return ch.isspace() or ch.isdigit() or unicodedata.category(ch).startswith("P")


def is_arabic_only(text: object) -> bool:
    """True if every letter-like character of *text* is in the Arabic blocks.

    Whitespace, digits and punctuation are ignored; at least one Arabic
    character is required.
    """
    if not isinstance(text, str) or not text:
        return False
    seen_arabic = False
    for ch in text:
        if _ARABIC_CHAR_RE.match(ch):
            seen_arabic = True
            continue
        if _is_neutral(ch):
            continue
        return False
    return seen_arabic


def classify_script(text: object) -> Script:
    """Range heuristic: any RTL code point wins, then Cyrillic, else Latin."""
    if contains_rtl(text):
        return Script.RTL
    if contains_cyrillic(text):
        return Script.CYRILLIC
    return Script.LATIN


# ---------------------------------------------------------------------------
# Display preparation
# ---------------------------------------------------------------------------

def prepare_text(text: str, rtl: bool = False) -> str:
    """Reorder *text* for a canvas that lays glyphs out left to right.

    For RTL text the token order is reversed, tokens containing RTL
    characters are reversed character-wise (with bracket mirroring) and
    LTR tokens such as numbers or Latin words keep their own order. This is
    a naive visual reordering, not the Unicode bidi algorithm, and does no
    glyph shaping.
    """
    if not text:
        return ""
    if not rtl:
        return text

    lines = []
    for line in text.split("\n"):
        tokens = _TOKEN_RE.findall(line)
        visual = []
        for token in reversed(tokens):
            if contains_rtl(token):
                visual.append(token[::-1].translate(_MIRRORED))
            else:
                visual.append(token)
        lines.append("".join(visual))
    return "\n".join(lines)
