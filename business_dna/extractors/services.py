"""
Service extraction.

Service cards are the strongest signal; after that, headings and list items
on service pages are candidates, kept only when they read like an offering
("Personal Training", "Group Yoga") rather than navigation or section titles
("Our Mission", "View All", "Pricing").
"""

import re
from typing import Iterable, Optional

from business_dna import constants
from business_dna.extractors.dom import first_text, image_url, soup_for, text_of
from business_dna.schemas.entities import ExtractedService
from business_dna.schemas.page import SemanticIntent, SemanticPage

SERVICE_KEYWORDS = [
    "training",
    "program",
    "class",
    "service",
    "fitness",
    "coaching",
    "nutrition",
    "lifestyle",
    "strength",
    "cardio",
    "yoga",
    "pilates",
    "personal",
    "group",
    "individual",
    "design",
    "consultation",
    "repair",
    "installation",
    "cleaning",
    "therapy",
    "treatment",
    "massage",
    "session",
]

EXCLUDE_KEYWORDS = [
    "our",
    "vision",
    "mission",
    "value",
    "core",
    "about",
    "contact",
    "schedule",
    "hours",
    "location",
    "pricing",
    "rates",
    "why",
    "what do",
    "who we",
    "how to",
    "view all",
    "learn more",
    "get started",
    "testimonial",
    "faq",
    "privacy",
    "terms",
]
_EXCLUDE_RE = re.compile(r"\b(?:" + "|".join(re.escape(k) for k in EXCLUDE_KEYWORDS) + r")\b", re.IGNORECASE)

CARD_SELECTORS = [
    '[class*="service"] [class*="card"]',
    '[class*="service"] [class*="item"]',
    '#services [class*="card"]',
    ".service-card",
    '[class*="offering"]',
]

SERVICE_PATH_HINTS = ("service", "offer", "program", "class", "treatment")

MIN_NAME_CHARS = 3
MAX_NAME_CHARS = 100
MAX_DESCRIPTION_CHARS = 300


def looks_like_service(text: str) -> bool:
    """
    Service-domain wording or a short title, and nothing navigational.

    Examples:
        >>> looks_like_service("Personal Training")
        True
        >>> looks_like_service("Our Mission")
        False
        >>> looks_like_service("Learn More")
        False
    """
    lower = text.lower()
    has_keyword = any(kw in lower for kw in SERVICE_KEYWORDS)
    short_title = 5 < len(text) < 40 and text[:1].isupper()
    if "?" in text or _EXCLUDE_RE.search(text):
        return False
    return has_keyword or short_title


def _is_service_page(page: SemanticPage) -> bool:
    path = page.path.lower()
    return page.semantic_intent == SemanticIntent.SERVICE_OFFERING or any(h in path for h in SERVICE_PATH_HINTS)


class _Catalog:
    def __init__(self, limit: int):
        self.limit = limit
        self.items: list[ExtractedService] = []
        self._seen: set[str] = set()

    @property
    def full(self) -> bool:
        return len(self.items) >= self.limit

    def add(
        self,
        name: str,
        description: str = "",
        features: Optional[list[str]] = None,
        image: Optional[str] = None,
        require_service_wording: bool = True,
    ):
        name = " ".join(name.split()).strip(" :-–")
        if self.full or not (MIN_NAME_CHARS <= len(name) <= MAX_NAME_CHARS):
            return
        if require_service_wording and not looks_like_service(name):
            return
        key = name.lower()
        if key in self._seen:
            return
        self._seen.add(key)
        self.items.append(
            ExtractedService(
                name=name,
                description=description.strip()[:MAX_DESCRIPTION_CHARS],
                features=features or [],
                image_url=image,
            )
        )


def extract_services(pages: Iterable[SemanticPage], limit: int = constants.MAX_SERVICES) -> list[ExtractedService]:
    """
    Extract offered services.

    Args:
        pages: Crawled pages
        limit: Result cap, clamped to 1..20

    Returns:
        Services unique by lower-cased name
    """
    catalog = _Catalog(max(1, min(limit, constants.MAX_SERVICES_LIMIT)))
    pages = list(pages)

    for page in pages:
        soup = soup_for(page)
        if soup is None:
            continue
        for selector in CARD_SELECTORS:
            for card in soup.select(selector):
                if catalog.full:
                    return catalog.items
                features = [
                    text_of(li) for li in card.find_all("li") if 3 < len(text_of(li)) < 100
                ]
                catalog.add(
                    first_text(card, 'h3, h4, h2, .title, [class*="title"]'),
                    first_text(card, 'p, .description, [class*="description"]'),
                    features,
                    image_url(card, page.url),
                    require_service_wording=False,
                )

    for page in filter(_is_service_page, pages):
        # First heading is the page title ("Our Services")
        for heading in page.headings[1:]:
            if catalog.full:
                return catalog.items
            if 5 < len(heading) < 100:
                first_word = heading.split()[0].lower()
                description = next((p for p in page.paragraphs if first_word in p.lower()), "")
                catalog.add(heading, description)

        for item in page.list_items:
            if catalog.full:
                return catalog.items
            if 10 < len(item) < 150:
                name, _, description = item.partition(":")
                catalog.add(name, description)

    return catalog.items
