"""Color normalization helpers.

Every color that reaches the canvas goes through :func:`to_hex` first, so
the renderers only ever deal with a single ``#RRGGBB`` notation.

Accepted inputs::

    "#1a73e8"            -> "#1A73E8"
    "#abc"               -> "#AABBCC"
    "rgb(255, 0, 0)"     -> "#FF0000"
    "rgba(255,0,0,0.5)"  -> "#FF0000"   (alpha dropped)
    "navy"               -> "#000080"
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_HEX6_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_HEX3_RE = re.compile(r"^#[0-9A-Fa-f]{3}$")
_RGB_RE = re.compile(r"^rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$", re.IGNORECASE)
_RGBA_RE = re.compile(
    r"^rgba\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([\d.]+)\s*\)$",
    re.IGNORECASE,
)

NAMED_COLORS: dict[str, str] = {
    # Basic
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "green": "#008000",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
    # Grays
    "gray": "#808080",
    "grey": "#808080",
    "darkgray": "#404040",
    "darkgrey": "#404040",
    "lightgray": "#C0C0C0",
    "lightgrey": "#C0C0C0",
    "silver": "#C0C0C0",
    "dimgray": "#696969",
    "dimgrey": "#696969",
    "gainsboro": "#DCDCDC",
    "whitesmoke": "#F5F5F5",
    # Extended
    "orange": "#FFA500",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "brown": "#A52A2A",
    "navy": "#000080",
    "teal": "#008080",
    "olive": "#808000",
    "lime": "#00FF00",
    "aqua": "#00FFFF",
    "fuchsia": "#FF00FF",
    "maroon": "#800000",
    "gold": "#FFD700",
    "indigo": "#4B0082",
    "violet": "#EE82EE",
    "turquoise": "#40E0D0",
    "salmon": "#FA8072",
    "khaki": "#F0E68C",
    "tan": "#D2B48C",
    "coral": "#FF7F50",
    "crimson": "#DC143C",
    "forestgreen": "#228B22",
    "limegreen": "#32CD32",
    "orangered": "#FF4500",
    "royalblue": "#4169E1",
    "skyblue": "#87CEEB",
    "steelblue": "#4682B4",
    "tomato": "#FF6347",
}

BLACK = "#000000"
WHITE = "#FFFFFF"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clamp_channel(value: float) -> int:
    return min(255, max(0, int(round(value))))


def _channels_to_hex(r: float, g: float, b: float) -> str:
    return f"#{_clamp_channel(r):02X}{_clamp_channel(g):02X}{_clamp_channel(b):02X}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def to_hex(value: object, default: str = BLACK) -> str:
    """Normalize *value* to ``#RRGGBB``; return *default* when unrecognized.

    Never raises, whatever the input type.
    """
    if not isinstance(value, str) or not value.strip():
        logger.debug("Invalid color input %r, using default %s", value, default)
        return default

    color = value.strip()

    if _HEX6_RE.match(color):
        return color.upper()

    if _HEX3_RE.match(color):
        r, g, b = color[1], color[2], color[3]
        return f"#{r}{r}{g}{g}{b}{b}".upper()

    m = _RGB_RE.match(color)
    if m:
        return _channels_to_hex(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _RGBA_RE.match(color)
    if m:
        result = _channels_to_hex(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        logger.debug("Alpha channel dropped: %s -> %s", color, result)
        return result

    named = NAMED_COLORS.get(color.lower())
    if named:
        return named

    logger.warning("Unknown color format %r, using default %s", value, default)
    return default


def to_rgb(value: object, default: str = BLACK) -> tuple[int, int, int]:
    """Return ``(r, g, b)`` channels (0-255) for any accepted color notation."""
    hex_color = to_hex(value, default)
    return (
        int(hex_color[1:3], 16),
        int(hex_color[3:5], 16),
        int(hex_color[5:7], 16),
    )


def extract_alpha(value: object) -> float:
    """Return the alpha of an ``rgba()`` color, ``1.0`` for everything else."""
    if not isinstance(value, str):
        return 1.0
    m = _RGBA_RE.match(value.strip())
    if not m:
        return 1.0
    try:
        alpha = float(m.group(4))
    except ValueError:
        return 1.0
    return min(1.0, max(0.0, alpha))


def is_valid_color(value: object) -> bool:
    """True if :func:`to_hex` would recognize *value*."""
    if not isinstance(value, str):
        return False
    color = value.strip()
    return bool(
        _HEX6_RE.match(color)
        or _HEX3_RE.match(color)
        or _RGB_RE.match(color)
        or _RGBA_RE.match(color)
        or color.lower() in NAMED_COLORS
    )


def darken(value: object, factor: float = 0.2) -> str:
    """Blend a color linearly toward black by *factor* (0..1)."""
    factor = min(1.0, max(0.0, factor))
    r, g, b = to_rgb(value)
    return _channels_to_hex(r * (1 - factor), g * (1 - factor), b * (1 - factor))


def lighten(value: object, factor: float = 0.2) -> str:
    """Blend a color linearly toward white by *factor* (0..1)."""
    factor = min(1.0, max(0.0, factor))
    r, g, b = to_rgb(value)
    return _channels_to_hex(
        r + (255 - r) * factor,
        g + (255 - g) * factor,
        b + (255 - b) * factor,
    )


def contrast_color(value: object) -> str:
    """Pick black or white text for a background (ITU-R BT.601 luma, threshold 128)."""
    r, g, b = to_rgb(value)
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return BLACK if luminance >= 128 else WHITE
