"""Page-level records: what the renderer returns and what the classifier produces.

The enums are declared in a fixed order. ``SemanticIntent`` order breaks
ties between equally scored intents and ``EmotionalTone`` order breaks ties
between equally matched tones.
"""

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field

from business_dna import constants


class SemanticIntent(str, Enum):
    """What a page is for. Declaration order is the tie-break order."""

    VISION_MISSION = "vision_mission"
    VALUE_PROPOSITION = "value_proposition"
    SERVICE_OFFERING = "service_offering"
    TEAM_CULTURE = "team_culture"
    SOCIAL_PROOF = "social_proof"
    OPERATIONAL = "operational"
    EDUCATIONAL = "educational"
    LEGAL = "legal"
    PROMOTIONAL = "promotional"
    UNKNOWN = "unknown"


class EmotionalTone(str, Enum):
    """Voice of the copy. Declaration order is the tie-break order."""

    LUXURY = "luxury"
    AUTHORITATIVE = "authoritative"
    FRIENDLY = "friendly"
    CASUAL = "casual"
    PROFESSIONAL = "professional"


class ContentPriority(str, Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    SUPPLEMENTARY = "supplementary"


@dataclass(frozen=True)
class CrawlBudget:
    """Limits for one crawl. Hitting any of them stops the crawl early, not with an error."""

    max_pages: int = constants.DEFAULT_MAX_PAGES
    max_depth: int = constants.DEFAULT_MAX_DEPTH
    page_timeout: float = constants.DEFAULT_PAGE_TIMEOUT_SECONDS
    crawl_timeout: float = constants.DEFAULT_CRAWL_TIMEOUT_SECONDS

    @classmethod
    def from_config(cls, config) -> "CrawlBudget":
        return cls(
            max_pages=config.max_pages,
            max_depth=config.max_depth,
            page_timeout=config.page_timeout,
            crawl_timeout=config.crawl_timeout,
        )


@dataclass
class RenderedPage:
    """Output of a renderer for one URL.

    ``css_colors`` (custom properties) and ``element_colors`` (computed styles of
    buttons, nav and headings) are only filled when the renderer can evaluate
    styles (Playwright); static renderers leave them empty.
    """

    url: str
    html: str
    final_url: str = ""
    image_urls: list[str] = field(default_factory=list)
    link_urls: list[str] = field(default_factory=list)
    css_colors: list[str] = field(default_factory=list)
    element_colors: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.final_url:
            self.final_url = self.url


class SemanticPage(BaseModel):
    """One crawled page with its text content and semantic classification."""

    url: str
    path: str = "/"
    title: str = ""
    headings: list[str] = Field(default_factory=list)
    paragraphs: list[str] = Field(default_factory=list)
    list_items: list[str] = Field(default_factory=list)
    raw_text: str = ""

    semantic_intent: SemanticIntent = SemanticIntent.UNKNOWN
    intent_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    emotional_tone: EmotionalTone = EmotionalTone.PROFESSIONAL
    key_phrases: list[str] = Field(default_factory=list)
    content_priority: ContentPriority = ContentPriority.SUPPLEMENTARY

    # Carried alongside the text for downstream extractors
    site_name: str | None = None
    meta_description: str | None = None
    image_urls: list[str] = Field(default_factory=list)
    link_urls: list[str] = Field(default_factory=list)
    html: str = Field(default="", exclude=True, repr=False)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "url": "https://peakfitness.com/about",
                "path": "/about",
                "title": "About Us | Peak Fitness",
                "headings": ["Our Story", "Our Mission"],
                "semantic_intent": "vision_mission",
                "intent_confidence": 0.8,
                "emotional_tone": "friendly",
                "key_phrases": ["we believe in a fitness community for everyone"],
                "content_priority": "critical",
            }
        },
    )

    @property
    def is_home(self) -> bool:
        return self.path in ("", "/")

    @property
    def text_length(self) -> int:
        return len(self.raw_text)

    @staticmethod
    def path_of(url: str) -> str:
        """
        Return the URL path, with "/" for the site root.

        Examples:
            >>> SemanticPage.path_of("https://peakfitness.com")
            '/'
            >>> SemanticPage.path_of("https://peakfitness.com/about/")
            '/about/'
        """
        return urlparse(url).path or "/"
