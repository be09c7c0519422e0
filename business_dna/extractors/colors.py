"""
Brand color extraction.

Colors come from four places, merged in this order:
1. CSS custom properties (``--primary``, ``--brand-color`` ...)
2. Computed styles of prominent elements (buttons, nav, headings)
3. The logo image, quantized with Pillow
4. Dominant colors the vision service reports for page images

Grays carry no brand signal and are dropped. The most saturated vision color
is treated as the accent and takes the third slot.
"""

import io
import logging
from typing import Callable, Iterable, Optional

import requests
from PIL import Image

from business_dna import constants
from business_dna.schemas.dna import BrandColors
from business_dna.utils.color_utils import is_grayscale, saturation, to_hex

ACCENT_INDEX = 2
LOGO_THUMBNAIL_SIZE = (128, 128)
LOGO_FETCH_TIMEOUT_SECONDS = 10


def _brand_hexes(values: Iterable[str]) -> list[str]:
    """Normalize, drop grays and duplicates, keep first-seen order."""
    result = []
    for value in values:
        hex_color = to_hex(value)
        if hex_color and not is_grayscale(hex_color) and hex_color not in result:
            result.append(hex_color)
    return result


def pick_accent(vision_colors: Iterable[str]) -> Optional[str]:
    """
    Most saturated non-gray color (first wins on ties).

    Examples:
        >>> pick_accent(["#808080", "#E63946", "#457B9D"])
        '#E63946'
        >>> pick_accent(["#FFFFFF"]) is None
        True
    """
    candidates = _brand_hexes(vision_colors)
    if not candidates:
        return None
    return max(candidates, key=saturation)


def merge_brand_colors(
    css_colors: Iterable[str] = (),
    element_colors: Iterable[str] = (),
    logo_colors: Iterable[str] = (),
    vision_colors: Iterable[str] = (),
    limit: int = constants.MAX_BRAND_COLORS,
) -> list[str]:
    """
    Merge color sources into one brand palette.

    Args:
        css_colors: CSS custom-property values
        element_colors: Computed colors of buttons, nav and headings
        logo_colors: Dominant logo colors
        vision_colors: Vision dominant colors, strongest first

    Returns:
        Up to ``limit`` upper-case ``#RRGGBB`` colors, no grays, no duplicates
    """
    vision_colors = list(vision_colors)
    palette = _brand_hexes([*css_colors, *element_colors, *logo_colors])[:limit]

    accent = pick_accent(vision_colors)
    if accent and accent not in palette:
        if len(palette) > ACCENT_INDEX:
            palette[ACCENT_INDEX] = accent
        else:
            palette.append(accent)

    for hex_color in _brand_hexes(vision_colors):
        if len(palette) >= limit:
            break
        if hex_color not in palette:
            palette.append(hex_color)

    return palette[:limit]


def brand_colors_from_palette(palette: list[str]) -> BrandColors:
    """Fill primary/secondary/accent from palette positions, defaults where missing."""
    defaults = [constants.DEFAULT_PRIMARY_COLOR, constants.DEFAULT_SECONDARY_COLOR, constants.DEFAULT_ACCENT_COLOR]
    slots = [palette[i] if i < len(palette) else defaults[i] for i in range(3)]
    return BrandColors(
        primary=slots[0],
        secondary=slots[1],
        accent=slots[2],
        palette=palette[: constants.MAX_BRAND_COLORS],
    )


def extract_palette(image_bytes: bytes, max_colors: int = constants.MAX_BRAND_COLORS) -> list[str]:
    """
    Dominant non-gray colors of an image, most common first.

    Raises:
        OSError: If Pillow cannot decode the bytes
    """
    with Image.open(io.BytesIO(image_bytes)) as img:
        img = img.convert("RGB")
        img.thumbnail(LOGO_THUMBNAIL_SIZE)
        # Quantize wider than needed so grays do not crowd out brand colors
        quantized = img.quantize(colors=max_colors * 3)
        palette = quantized.getpalette() or []
        counts = sorted(quantized.getcolors() or [], reverse=True)

    hexes = []
    for _, index in counts:
        r, g, b = palette[index * 3 : index * 3 + 3]
        hexes.append(f"#{r:02X}{g:02X}{b:02X}")
    return _brand_hexes(hexes)[:max_colors]


class LogoPaletteExtractor:
    """
    Fetches a logo and returns its dominant brand colors.

    Usage:
        palette = LogoPaletteExtractor()
        colors = palette("https://peakfitness.com/logo.png")
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = LOGO_FETCH_TIMEOUT_SECONDS,
        max_colors: int = constants.MAX_BRAND_COLORS,
        fetch: Optional[Callable[[str], bytes]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", constants.USER_AGENT)
        self.timeout = timeout
        self.max_colors = max_colors
        self._fetch = fetch or self._download
        self.logger = logger or logging.getLogger(__name__)

    def _download(self, url: str) -> bytes:
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def __call__(self, logo_url: Optional[str]) -> list[str]:
        if not logo_url:
            return []
        try:
            colors = extract_palette(self._fetch(logo_url), self.max_colors)
        except (requests.RequestException, OSError, ValueError) as e:
            self.logger.warning(f"Logo palette failed for {logo_url}: {e}")
            return []
        self.logger.debug(f"Logo palette for {logo_url}: {colors}")
        return colors
