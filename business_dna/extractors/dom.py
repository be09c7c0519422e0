"""Small BeautifulSoup helpers shared by the DOM-selector extractors."""

from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from business_dna.schemas.page import SemanticPage

SKIP_IMAGE_HINTS = ("data:image", "pixel", "spacer", "blank.gif", "1x1", "tracking")


def soup_for(page: SemanticPage) -> Optional[BeautifulSoup]:
    """Parsed DOM snapshot of a page, or None when no HTML was kept."""
    if not page.html:
        return None
    return BeautifulSoup(page.html, "html.parser")


def text_of(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return " ".join(el.get_text(" ").split())


def first_text(container: Tag, selector: str) -> str:
    return text_of(container.select_one(selector))


def image_url(container: Tag, base_url: str) -> Optional[str]:
    img = container.find("img")
    if img is None:
        return None
    src = img.get("src") or img.get("data-src")
    if not src or any(hint in src.lower() for hint in SKIP_IMAGE_HINTS):
        return None
    return urljoin(base_url, src)
