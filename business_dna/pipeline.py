"""
Business DNA pipeline.

One run: crawl the site, extract and classify each page as it arrives, pull
entities out of the pages, enrich images with the vision service, mine OCR
text for hidden gems, merge brand colors, then consolidate everything into a
BusinessDNA record.

Usage:
    with PlaywrightRenderer() as renderer:
        dna = BusinessDNAPipeline(renderer).run("https://peakfitness.com")
"""

import time
from typing import Callable, Optional

from business_dna.collectors.crawl_scheduler import CrawlResult, CrawlScheduler
from business_dna.collectors.renderer import Renderer
from business_dna.config import Thresholds, TotalContentConfig, get_thresholds
from business_dna.exceptions import CrawlFailedError
from business_dna.extractors.colors import merge_brand_colors
from business_dna.extractors.contact import (
    extract_business_hours,
    extract_certifications,
    extract_contact_info,
    extract_navigation,
    extract_social_links,
)
from business_dna.extractors.faqs import extract_faqs
from business_dna.extractors.hidden_gems import extract_hidden_gems_from_images
from business_dna.extractors.page_content import PageContentExtractor
from business_dna.extractors.semantic_classifier import SemanticClassifier
from business_dna.extractors.services import extract_services
from business_dna.extractors.team import extract_team_members
from business_dna.extractors.testimonials import extract_testimonials
from business_dna.schemas.dna import BusinessDNA
from business_dna.schemas.entities import ExtractedEntities
from business_dna.schemas.page import CrawlBudget, RenderedPage, SemanticPage
from business_dna.schemas.vision import EnrichmentResult, VisionOptions
from business_dna.services.identity_consolidator import IdentityConsolidator, find_logo_url
from business_dna.utils.logger import PipelineLogger
from business_dna.utils.url_helpers import canonical_url
from business_dna.vision.client import VisionClient
from business_dna.vision.enrichment import VisionEnrichmentAdapter


class BusinessDNAPipeline:
    """Orchestrates one extraction run per ``run()`` call; holds no state between runs."""

    def __init__(
        self,
        renderer: Renderer,
        vision_client: Optional[VisionClient] = None,
        config: Optional[TotalContentConfig] = None,
        logger: Optional[PipelineLogger] = None,
        logo_palette: Optional[Callable[[str], list[str]]] = None,
        thresholds: Optional[Thresholds] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            renderer: Renders one URL into HTML plus collected assets
            vision_client: Vision service client; None skips image enrichment
            config: Crawl budget and feature switches
            logger: Pipeline logger (defaults to a new one per pipeline); its warning
                and error tracking is reset at the start of every run
            logo_palette: Callable returning dominant colors for a logo URL
            thresholds: Classifier and sparsity thresholds
            clock: Monotonic clock for the crawl budget
        """
        self.renderer = renderer
        self.vision_client = vision_client
        self.config = config or TotalContentConfig()
        self.logger = logger or PipelineLogger()
        self.logo_palette = logo_palette
        self.thresholds = thresholds or get_thresholds()
        self.clock = clock

    def run(self, seed_url: str, business_name_hint: Optional[str] = None) -> BusinessDNA:
        """
        Extract the business identity behind ``seed_url``.

        Raises:
            CrawlFailedError: If not a single page could be rendered
        """
        start = time.monotonic()
        self.logger.clear_tracking()
        self.logger.log_run_start(seed_url, self.config.max_pages)

        with self.logger.time_stage("crawl", url=seed_url):
            crawl, pages = self._crawl(seed_url)
        if not pages:
            self.logger.error("No pages extracted", url=seed_url, failures=len(crawl.failures))
            raise CrawlFailedError(seed_url, crawl.failures)

        with self.logger.time_stage("entities", pages=len(pages)):
            entities = self._extract_entities(pages)

        with self.logger.time_stage("vision"):
            enrichment = self._enrich(pages)

        entities.hidden_gems = extract_hidden_gems_from_images(enrichment.ocr_texts)
        entities.colors = self._brand_colors(crawl.pages, enrichment)

        with self.logger.time_stage("consolidate"):
            dna = IdentityConsolidator(self.thresholds).consolidate(
                pages,
                entities,
                enrichment,
                business_name_hint=business_name_hint,
                source_url=seed_url,
            )

        self.logger.log_run_complete(
            dna.business_name,
            dna.total_pages_scraped,
            dna.content_sparsity.value,
            time.monotonic() - start,
        )
        return dna

    # ─── Stages ──────────────────────────────────────────────────────────

    def _crawl(self, seed_url: str) -> tuple[CrawlResult, list[SemanticPage]]:
        extractor = PageContentExtractor(self.config.max_images_per_page)
        classifier = SemanticClassifier(self.thresholds)
        pages: list[SemanticPage] = []

        def on_page(rendered: RenderedPage):
            page = extractor.extract(
                rendered.html,
                canonical_url(rendered.final_url),
                rendered.image_urls,
                rendered.link_urls,
            )
            page = classifier.classify_page(page)
            self.logger.debug(
                f"Classified {page.path}",
                intent=page.semantic_intent.value,
                confidence=page.intent_confidence,
                tone=page.emotional_tone.value,
            )
            pages.append(page)

        scheduler = CrawlScheduler(
            self.renderer,
            priority_paths=self.config.priority_paths,
            logger=self.logger,
            clock=self.clock,
        )
        crawl = scheduler.crawl(seed_url, CrawlBudget.from_config(self.config), on_page=on_page)
        for url, reason in crawl.failures.items():
            self.logger.warning("Page skipped", url=url, reason=reason)
        return crawl, pages

    def _extract_entities(self, pages: list[SemanticPage]) -> ExtractedEntities:
        entities = ExtractedEntities(
            services=extract_services(pages),
            testimonials=extract_testimonials(pages),
            team_members=extract_team_members(pages),
            faqs=extract_faqs(pages),
            contact_info=extract_contact_info(pages),
            social_links=extract_social_links(pages),
            navigation=extract_navigation(pages),
            business_hours=extract_business_hours(pages),
            certifications=extract_certifications(pages),
        )
        self.logger.info(
            "Entities extracted",
            services=len(entities.services),
            testimonials=len(entities.testimonials),
            team_members=len(entities.team_members),
            faqs=len(entities.faqs),
        )
        return entities

    def _enrich(self, pages: list[SemanticPage]) -> EnrichmentResult:
        image_urls = list(dict.fromkeys(url for page in pages for url in page.image_urls))
        image_urls = image_urls[: self.config.max_total_images]

        client = self.vision_client if self.config.vision_enabled else None
        adapter = VisionEnrichmentAdapter(client, logger=self.logger)
        enrichment = adapter.enrich(image_urls, VisionOptions.from_config(self.config))
        if client is not None and not enrichment.complete:
            self.logger.warning("Vision analysis incomplete, continuing without image enrichment")
        return enrichment

    def _brand_colors(self, rendered: list[RenderedPage], enrichment: EnrichmentResult) -> list[str]:
        logo_colors: list[str] = []
        logo_url = find_logo_url(enrichment.images)
        if self.logo_palette is not None and logo_url:
            logo_colors = self.logo_palette(logo_url)

        vision_colors = [s.hex for s in sorted(enrichment.colors, key=lambda s: s.score, reverse=True)]
        return merge_brand_colors(
            css_colors=[c for page in rendered for c in page.css_colors],
            element_colors=[c for page in rendered for c in page.element_colors],
            logo_colors=logo_colors,
            vision_colors=vision_colors,
        )
