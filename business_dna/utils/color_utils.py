"""Color parsing and filtering helpers shared by the color extractors."""

import colorsys
import re
from typing import Optional

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_RE = re.compile(
    r"^rgba?\(\s*(\d{1,3})[\s,]+(\d{1,3})[\s,]+(\d{1,3})(?:[\s,/]+([\d.]+%?))?\s*\)$", re.IGNORECASE
)

NEAR_WHITE = 240  # All channels above this
NEAR_BLACK = 15  # All channels below this
GRAY_SPREAD = 20  # Max channel spread for a gray


def to_hex(value: str) -> Optional[str]:
    """
    Parse a CSS color into ``#RRGGBB`` (upper-case), or None.

    Fully transparent ``rgba`` values count as no color.

    Examples:
        >>> to_hex("#e63946")
        '#E63946'
        >>> to_hex("#fff")
        '#FFFFFF'
        >>> to_hex("rgb(230, 57, 70)")
        '#E63946'
        >>> to_hex("rgba(0, 0, 0, 0)") is None
        True
    """
    if not value:
        return None
    value = value.strip()

    match = _HEX_RE.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return f"#{digits[:6].upper()}"

    match = _RGB_RE.match(value)
    if match:
        alpha = match.group(4)
        if alpha is not None:
            alpha_value = float(alpha.rstrip("%")) / (100 if alpha.endswith("%") else 1)
            if alpha_value == 0:
                return None
        r, g, b = (min(int(match.group(i)), 255) for i in (1, 2, 3))
        return f"#{r:02X}{g:02X}{b:02X}"

    return None


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    digits = hex_color.lstrip("#")
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def is_grayscale(hex_color: str) -> bool:
    """
    Near-white, near-black and low-spread grays carry no brand signal.

    Examples:
        >>> is_grayscale("#FAFAFA")
        True
        >>> is_grayscale("#808080")
        True
        >>> is_grayscale("#E63946")
        False
    """
    r, g, b = hex_to_rgb(hex_color)
    if r > NEAR_WHITE and g > NEAR_WHITE and b > NEAR_WHITE:
        return True
    if r < NEAR_BLACK and g < NEAR_BLACK and b < NEAR_BLACK:
        return True
    return max(r, g, b) - min(r, g, b) < GRAY_SPREAD


def saturation(hex_color: str) -> float:
    """HLS saturation in [0, 1]."""
    r, g, b = hex_to_rgb(hex_color)
    _, _, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return s
