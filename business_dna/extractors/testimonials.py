"""
Testimonial extraction with false-positive suppression.

Three candidate sources, in order:
1. Carousel/slider list items holding a quote paragraph and a name element
2. Testimonial-like containers (classes, blockquote, schema.org Review)
3. ``"Quote" - First Last`` patterns in page text

Nothing is invented: a candidate survives only with a real quote and a
plausible, non-placeholder author, and never when it reads like a form or CTA.
"""

import re
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from business_dna import constants
from business_dna.schemas.entities import ExtractedTestimonial
from business_dna.schemas.page import SemanticPage

PLACEHOLDER_NAMES = {
    "john doe",
    "jane doe",
    "john smith",
    "jane smith",
    "happy customer",
    "satisfied client",
    "anonymous",
    "customer name",
    "your name",
    "client name",
}

FORM_KEYWORDS = [
    "call us",
    "text us",
    "drop in",
    "pricing",
    "schedule",
    "submit",
    "form",
    "email",
    "phone",
    "contact us",
    "sign up",
    "subscribe",
    "get started",
    "free",
]

CONTAINER_SELECTORS = [
    '[class*="testimonial"]',
    '[class*="review"]',
    "blockquote",
    '[itemtype*="Review"]',
    ".client-feedback",
    ".customer-review",
    "[data-testimonial]",
]
_ANY_CONTAINER = ", ".join(CONTAINER_SELECTORS)

MIN_QUOTE_CHARS = 50
MAX_QUOTE_CHARS = 1000
MIN_AUTHOR_CHARS = 3
MAX_AUTHOR_CHARS = 30
DEDUPE_PREFIX_CHARS = 50

AUTHOR_RE = re.compile(r"^[A-Z][\w'.-]*(?:\s+[A-Z][\w'.-]*)+$")
TEXT_REVIEW_RE = re.compile(r'"([^"]{50,500})"\s*[-—–]\s*([A-Z][a-zA-Z]+\s+[A-Z][a-zA-Z]+)')
QUOTE_MARKS = "\"'“”‘’«»"


def is_form_content(text: str) -> bool:
    """
    True when text reads like a form, CTA or legal notice.

    Examples:
        >>> is_form_content("Call us today or submit the form below")
        True
        >>> is_form_content("Best gym I've been to, the coaches really care.")
        False
    """
    lower = text.lower()
    if "by submitting" in lower or "privacy policy" in lower:
        return True
    return sum(1 for kw in FORM_KEYWORDS if kw in lower) >= 2


def is_placeholder_name(name: str) -> bool:
    return name.strip().lower() in PLACEHOLDER_NAMES


def clean_quote(text: str) -> str:
    return " ".join(text.split()).strip(QUOTE_MARKS + " ")


def split_author(raw: str) -> tuple[str, Optional[str]]:
    """
    Split "Name, Title" / "Name - Title" into parts.

    Examples:
        >>> split_author("- Maria Lopez, Member since 2019")
        ('Maria Lopez', 'Member since 2019')
    """
    raw = " ".join(raw.split()).strip(" -—–~")
    parts = re.split(r"\s*[,|]\s*|\s+[-—–]\s+", raw, maxsplit=1)
    name = parts[0].strip()
    title = parts[1].strip() if len(parts) > 1 and parts[1].strip() else None
    return name, title


def is_valid_testimonial(quote: str, author: str) -> bool:
    if not (MIN_QUOTE_CHARS <= len(quote) <= MAX_QUOTE_CHARS):
        return False
    if not (MIN_AUTHOR_CHARS <= len(author) <= MAX_AUTHOR_CHARS):
        return False
    if not AUTHOR_RE.match(author) or is_placeholder_name(author):
        return False
    return not is_form_content(quote)


def _rating(container: Tag) -> Optional[int]:
    rated = container.select_one("[data-rating]")
    if rated is not None:
        match = re.search(r"\d+", rated.get("data-rating", ""))
        value = int(match.group(0)) if match else None
    else:
        value = len(container.select('.star-filled, .star.active, [class*="star-full"]')) or None
    return value if value is not None and 1 <= value <= 5 else None


class _Collector:
    """Accumulates validated testimonials with prefix de-duplication."""

    def __init__(self, limit: int):
        self.limit = limit
        self.items: list[ExtractedTestimonial] = []
        self._seen: set[str] = set()

    @property
    def full(self) -> bool:
        return len(self.items) >= self.limit

    def offer(self, quote: str, raw_author: str, source: str, rating: Optional[int] = None, confidence: float = 0.8):
        if self.full:
            return
        quote = clean_quote(quote)
        author, title = split_author(raw_author)
        if not is_valid_testimonial(quote, author):
            return
        key = quote[:DEDUPE_PREFIX_CHARS].lower()
        if key in self._seen:
            return
        self._seen.add(key)
        self.items.append(
            ExtractedTestimonial(
                quote=quote,
                author_name=author,
                author_title=title,
                rating=rating,
                source=source,
                confidence=confidence,
            )
        )


def _from_list_items(soup: BeautifulSoup, page: SemanticPage, out: _Collector):
    for li in soup.find_all("li"):
        if out.full:
            return
        full_text = li.get_text("\n").strip()
        if len(full_text) < 100 or is_form_content(full_text):
            continue

        paragraph = li.find("p")
        quote = paragraph.get_text(" ") if paragraph else ""
        names = li.select('strong, .name, [class*="name"], [class*="author"]')
        author = names[-1].get_text(" ") if names else ""

        if not author:
            lines = [line.strip() for line in full_text.split("\n") if line.strip()]
            if len(lines) > 1:
                author = lines[-1]
                quote = " ".join(lines[:-1])

        out.offer(quote, author, page.url, rating=_rating(li), confidence=0.75)


def _from_containers(soup: BeautifulSoup, page: SemanticPage, out: _Collector):
    for selector in CONTAINER_SELECTORS:
        for container in soup.select(selector):
            if out.full:
                return
            # Section wrappers pair the first card's quote with the last card's author
            inner_cards = [d for d in container.select(_ANY_CONTAINER) if d.find("p")]
            if len(inner_cards) >= 2:
                continue
            full_text = container.get_text(" ").strip()
            if is_form_content(full_text):
                continue

            quote, author = "", ""
            quote_el = container.select_one('p, .quote-text, [class*="quote"], [class*="text"]')
            if quote_el is not None:
                quote = quote_el.get_text(" ")
            else:
                parts = re.split(r"\s[—–-]\s", full_text)
                quote = parts[0]
                if len(parts) >= 2:
                    author = parts[-1]

            if not author:
                names = container.select('.author, .name, [class*="name"], [class*="author"], cite, strong, .reviewer')
                if names:
                    author = names[-1].get_text(" ")
                    role = container.select_one('.role, .position, [class*="role"]')
                    if role is not None and role.get_text(strip=True) and "," not in author:
                        author = f"{author}, {role.get_text(' ')}"

            out.offer(quote, author, page.url, rating=_rating(container), confidence=0.85)


def _line_around(text: str, start: int, end: int) -> str:
    line_end = text.find("\n", end)
    return text[text.rfind("\n", 0, start) + 1 : line_end if line_end != -1 else len(text)]


def _from_text(page: SemanticPage, out: _Collector):
    for match in TEXT_REVIEW_RE.finditer(page.raw_text):
        if out.full:
            return
        if is_form_content(_line_around(page.raw_text, match.start(), match.end())):
            continue
        out.offer(match.group(1), match.group(2), page.url, confidence=0.7)


def extract_testimonials(pages: Iterable[SemanticPage], limit: int = constants.MAX_TESTIMONIALS) -> list[ExtractedTestimonial]:
    """
    Extract real customer testimonials across all pages.

    Args:
        pages: Crawled pages (social-proof pages first is fine, any order works)
        limit: Result cap, clamped to 1..10

    Returns:
        Validated testimonials, unique by the first 50 chars of the quote
    """
    limit = max(1, min(limit, constants.MAX_TESTIMONIALS_LIMIT))
    out = _Collector(limit)
    pages = list(pages)

    for page in pages:
        if out.full:
            break
        if page.html:
            soup = BeautifulSoup(page.html, "html.parser")
            _from_list_items(soup, page, out)
            _from_containers(soup, page, out)

    for page in pages:
        if out.full:
            break
        _from_text(page, out)

    return out.items
