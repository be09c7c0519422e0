"""
Identity Consolidator.

Folds classified pages, extracted entities and vision enrichment into one
BusinessDNA record. Site-wide elements (header, footer) are built once here
instead of once per page.
"""

import re
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Optional

from business_dna import constants
from business_dna.config import Thresholds, get_thresholds
from business_dna.exceptions import ExtractionError
from business_dna.extractors.colors import brand_colors_from_palette
from business_dna.extractors.contact import section_anchor
from business_dna.schemas.dna import (
    BusinessDNA,
    ConsolidatedFooter,
    ConsolidatedHeader,
    EducationalContent,
    Location,
    SemanticImageMap,
)
from business_dna.schemas.entities import ExtractedEntities, HiddenGemType, NavigationLink
from business_dna.schemas.page import ContentPriority, EmotionalTone, SemanticIntent, SemanticPage
from business_dna.schemas.vision import EnrichedImage, EnrichmentResult
from business_dna.utils.url_helpers import hostname_business_name

MIN_SITE_NAME_CHARS = 2
MAX_SITE_NAME_CHARS = 80
MIN_TAGLINE_CHARS = 20
MAX_TAGLINE_CHARS = 200
MAX_SHORT_PARAGRAPH_CHARS = 100
MIN_CORE_VALUE_CHARS = 10
MAX_CORE_VALUE_CHARS = 100
MAX_EDUCATIONAL_SUMMARY_CHARS = 300

# Caption keywords that place an image in a section of a generated site
IMAGE_SECTION_KEYWORDS = {
    "hero": ("hero", "banner", "main"),
    "services": ("service", "work", "equipment"),
    "about": ("team", "office", "staff"),
    "testimonials": ("customer", "client"),
}
IMAGE_SECTION_CAPS = {"hero": 3, "services": 10, "about": 5, "testimonials": 5, "gallery": 20}

YEAR_RE = re.compile(r"\b(1[89]\d{2}|20\d{2})\b")


def home_page(pages: list[SemanticPage]) -> SemanticPage:
    return next((p for p in pages if p.is_home), pages[0])


def title_segment(title: str) -> str:
    """
    Examples:
        >>> title_segment("Peak Fitness | Personal Training in Denver")
        'Peak Fitness'
    """
    return title.split("|")[0].strip()


def find_logo_url(images: list[EnrichedImage]) -> Optional[str]:
    """First image whose URL or caption mentions a logo."""
    for image in images:
        caption = (image.semantic_caption or "").lower()
        if "logo" in image.url.lower() or "logo" in caption:
            return image.url
    return None


def majority_tone(pages: list[SemanticPage]) -> EmotionalTone:
    """Most common page tone; ties go to the tone declared first."""
    counts = Counter(p.emotional_tone for p in pages)
    if not counts:
        return EmotionalTone.PROFESSIONAL
    order = list(EmotionalTone)
    return max(order, key=lambda tone: (counts.get(tone, 0), -order.index(tone)))


class IdentityConsolidator:
    """Builds the BusinessDNA aggregate from everything a run collected."""

    def __init__(
        self,
        thresholds: Optional[Thresholds] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.thresholds = thresholds or get_thresholds()
        self._now = now

    def consolidate(
        self,
        pages: list[SemanticPage],
        entities: Optional[ExtractedEntities] = None,
        enrichment: Optional[EnrichmentResult] = None,
        business_name_hint: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> BusinessDNA:
        """
        Consolidate a run into a BusinessDNA record.

        Args:
            pages: Classified pages in crawl order
            entities: Extracted entities (empty when omitted)
            enrichment: Vision enrichment result (no images when omitted)
            business_name_hint: Caller-supplied name, wins over anything found
            source_url: Seed URL; defaults to the first page's URL

        Returns:
            BusinessDNA

        Raises:
            ExtractionError: If pages is empty
        """
        if not pages:
            raise ExtractionError("Cannot consolidate a business identity from zero pages")

        entities = entities or ExtractedEntities()
        enrichment = enrichment or EnrichmentResult()
        source_url = source_url or pages[0].url
        extracted_at = self._now()

        home = home_page(pages)
        business_name = self.business_name(pages, business_name_hint, source_url)
        about = self._about_page(pages)
        gems = entities.hidden_gems
        logo_url = find_logo_url(enrichment.images)

        header = ConsolidatedHeader(
            logo_url=logo_url,
            business_name=business_name,
            tagline=self.tagline(home),
            primary_navigation=self.navigation(pages, entities.navigation),
            top_bar_phone=entities.contact_info.phone,
            top_bar_email=entities.contact_info.email,
        )
        footer = ConsolidatedFooter(
            contact_info=entities.contact_info,
            social_links=entities.social_links,
            business_hours=entities.business_hours,
            legal_links=[
                NavigationLink(label=title_segment(p.title) or p.path, href=p.url)
                for p in pages
                if p.semantic_intent == SemanticIntent.LEGAL
            ],
            certifications=entities.certifications[: constants.MAX_CERTIFICATIONS],
            copyright_text=f"© {extracted_at.year} {business_name}. All rights reserved.",
        )

        locations = []
        if entities.contact_info.address:
            locations.append(
                Location(
                    address=entities.contact_info.address,
                    phone=entities.contact_info.phone,
                    hours=entities.business_hours,
                )
            )

        return BusinessDNA(
            business_name=business_name,
            tagline=header.tagline,
            source_url=source_url,
            extracted_at=extracted_at,
            vision_statement=self._about_paragraph(about, ("vision", "aspire")),
            mission_statement=self._about_paragraph(about, ("mission", "purpose")),
            core_values=self.core_values(about),
            brand_personality=majority_tone(pages),
            unique_selling_points=self.unique_selling_points(pages),
            hidden_gems=gems,
            founding_story=self.founding_story(entities),
            achievements=[g.text for g in gems if g.type in (HiddenGemType.AWARD, HiddenGemType.CERTIFICATION)],
            services=entities.services,
            team_members=entities.team_members,
            team_culture=self._about_paragraph(about, ("team", "culture")),
            testimonials=entities.testimonials,
            faqs=entities.faqs,
            educational_content=self.educational_content(pages),
            enriched_images=enrichment.images,
            brand_colors=brand_colors_from_palette(entities.colors),
            semantic_image_map=self.semantic_image_map(enrichment.images, logo_url),
            consolidated_header=header,
            consolidated_footer=footer,
            locations=locations,
            semantic_pages=pages,
            content_sparsity=self.thresholds.sparsity_for(sum(p.text_length for p in pages)),
            total_pages_scraped=len(pages),
            vision_analysis_complete=enrichment.complete,
        )

    # ─── Identity ────────────────────────────────────────────────────────

    @staticmethod
    def business_name(pages: list[SemanticPage], hint: Optional[str], source_url: str) -> str:
        """Hint, site metadata, title segment, first heading, then hostname."""
        if hint and hint.strip():
            return hint.strip()

        home = home_page(pages)
        site_name = (home.site_name or "").strip()
        if MIN_SITE_NAME_CHARS <= len(site_name) <= MAX_SITE_NAME_CHARS:
            return site_name

        segment = title_segment(home.title)
        if segment:
            return segment
        if home.headings:
            return home.headings[0]
        return hostname_business_name(source_url) or source_url

    @staticmethod
    def tagline(home: SemanticPage) -> Optional[str]:
        description = (home.meta_description or "").strip()
        if MIN_TAGLINE_CHARS <= len(description) <= MAX_TAGLINE_CHARS:
            return description
        if len(home.headings) > 1:
            return home.headings[1]
        return next(
            (p for p in home.paragraphs if MIN_TAGLINE_CHARS < len(p) < MAX_SHORT_PARAGRAPH_CHARS),
            None,
        )

    @staticmethod
    def navigation(pages: list[SemanticPage], extracted: list[NavigationLink]) -> list[NavigationLink]:
        """Extracted menu links, or labels of the crawled non-supplementary pages."""
        if extracted:
            return extracted[: constants.MAX_NAV_LINKS]

        links = []
        seen = set()
        for page in pages:
            if page.content_priority == ContentPriority.SUPPLEMENTARY:
                continue
            label = title_segment(page.title) or page.path.replace("/", " ").replace("-", " ").strip().title()
            href = section_anchor(page.url)
            if not label or href in seen:
                continue
            seen.add(href)
            links.append(NavigationLink(label=label, href=href))
            if len(links) >= constants.MAX_NAV_LINKS:
                break
        return links

    # ─── Soul and story ──────────────────────────────────────────────────

    @staticmethod
    def _about_page(pages: list[SemanticPage]) -> Optional[SemanticPage]:
        about = next((p for p in pages if p.semantic_intent == SemanticIntent.VISION_MISSION), None)
        return about or next((p for p in pages if "about" in p.path.lower()), None)

    @staticmethod
    def _about_paragraph(about: Optional[SemanticPage], keywords: tuple[str, ...]) -> Optional[str]:
        if about is None:
            return None
        return next((p for p in about.paragraphs if any(k in p.lower() for k in keywords)), None)

    @staticmethod
    def core_values(about: Optional[SemanticPage]) -> list[str]:
        if about is None:
            return []
        values = [li for li in about.list_items if MIN_CORE_VALUE_CHARS < len(li) < MAX_CORE_VALUE_CHARS]
        return values[: constants.MAX_CORE_VALUES]

    @staticmethod
    def unique_selling_points(pages: list[SemanticPage]) -> list[str]:
        phrases = dict.fromkeys(phrase for p in pages for phrase in p.key_phrases)
        return list(phrases)[: constants.MAX_UNIQUE_SELLING_POINTS]

    @staticmethod
    def founding_story(entities: ExtractedEntities) -> Optional[str]:
        gem = next((g for g in entities.hidden_gems if g.type == HiddenGemType.FOUNDING_DATE), None)
        if gem is None:
            return None
        year = YEAR_RE.search(gem.text)
        return f"Established {year.group(1)}" if year else gem.text

    @staticmethod
    def educational_content(pages: list[SemanticPage]) -> list[EducationalContent]:
        content = []
        for page in pages:
            if page.semantic_intent != SemanticIntent.EDUCATIONAL:
                continue
            summary = page.paragraphs[0] if page.paragraphs else "; ".join(page.key_phrases)
            content.append(
                EducationalContent(
                    title=title_segment(page.title) or page.path,
                    url=page.url,
                    summary=summary[:MAX_EDUCATIONAL_SUMMARY_CHARS],
                )
            )
        return content

    # ─── Visuals ─────────────────────────────────────────────────────────

    @staticmethod
    def semantic_image_map(images: list[EnrichedImage], logo_url: Optional[str] = None) -> SemanticImageMap:
        candidates = [img for img in images if img.url != logo_url]
        sections: dict[str, list[str]] = {}
        for section, keywords in IMAGE_SECTION_KEYWORDS.items():
            matches = [
                img.url
                for img in candidates
                if any(k in (img.semantic_caption or "").lower() for k in keywords)
            ]
            sections[section] = matches[: IMAGE_SECTION_CAPS[section]]

        if not sections["hero"] and candidates:
            sections["hero"] = [candidates[0].url]

        return SemanticImageMap(
            gallery=[img.url for img in candidates][: IMAGE_SECTION_CAPS["gallery"]],
            **sections,
        )
