"""Fan page images out to the vision service and fold the results back in discovery order."""

import logging
from typing import Iterable, Optional

from business_dna import constants
from business_dna.schemas.vision import EnrichedImage, EnrichmentResult, VisionOptions, VisionResult
from business_dna.utils.worker_pool import WorkerPool
from business_dna.vision.client import VisionClient


def vision_confidence(result: Optional[VisionResult]) -> float:
    if result is None:
        return 0.0
    if result.ocr_success:
        return constants.VISION_CONFIDENCE_OCR
    if result.colors_success or result.caption_success:
        return constants.VISION_CONFIDENCE_PARTIAL
    return 0.0


def enriched_image(url: str, result: Optional[VisionResult]) -> EnrichedImage:
    if result is None or not result.success:
        return EnrichedImage.passthrough(url)

    extracted_text = [b.text for b in result.text_blocks if b.text.strip()]
    if not extracted_text and result.ocr_text:
        extracted_text = [result.ocr_text]

    return EnrichedImage(
        url=url,
        semantic_caption=result.caption if result.caption_success else None,
        extracted_text=extracted_text,
        dominant_colors=[c.hex for c in result.colors] if result.colors_success else [],
        vision_confidence=vision_confidence(result),
        analyzed=True,
    )


class VisionEnrichmentAdapter:
    """
    Runs vision analysis over a run's images with bounded concurrency.

    One adapter per pipeline run: the result cache lives on the instance.
    """

    def __init__(self, client: Optional[VisionClient], logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)
        self._cache: dict[str, VisionResult] = {}

    def _analyze(self, url: str, options: VisionOptions) -> VisionResult:
        if url not in self._cache:
            self._cache[url] = self.client.analyze(url, options)
        return self._cache[url]

    def enrich(self, image_urls: Iterable[str], options: VisionOptions) -> EnrichmentResult:
        """
        Enrich images, passing through anything not analyzed.

        Args:
            image_urls: Image URLs in discovery order (duplicates allowed)
            options: Which analyses to run and how many images to send

        Returns:
            EnrichmentResult with one EnrichedImage per unique URL, in order.
            ``complete`` is True only when at least one image was analyzed.
        """
        unique = list(dict.fromkeys(u for u in image_urls if u))
        passthrough = EnrichmentResult(images=[EnrichedImage.passthrough(u) for u in unique], complete=False)

        if not unique:
            return passthrough
        if self.client is None:
            self.logger.info("No vision client configured, images pass through unenriched")
            return passthrough
        if not (options.enable_ocr or options.enable_colors or options.enable_captions):
            self.logger.info("All vision analyses disabled, images pass through unenriched")
            return passthrough
        try:
            available = self.client.is_available()
        except Exception as e:
            self.logger.warning(f"Vision availability check failed ({e}), images pass through unenriched")
            return passthrough
        if not available:
            self.logger.warning("Vision service unavailable, images pass through unenriched")
            return passthrough

        to_send = unique[: options.max_images]
        pool = WorkerPool(max_workers=options.concurrency, logger=self.logger)
        outcomes = pool.map(lambda url: self._analyze(url, options), to_send, desc="Vision analysis")

        results: dict[str, VisionResult] = {}
        for success, url, value in outcomes:
            results[url] = value if success else VisionResult.failed(url, str(value))

        images = [enriched_image(url, results.get(url)) for url in unique]
        vision_results = [results[url] for url in to_send]
        analyzed = sum(1 for r in vision_results if r.success)
        self.logger.info(f"Vision enriched {analyzed}/{len(to_send)} images ({len(unique) - len(to_send)} over budget)")

        return EnrichmentResult(images=images, vision_results=vision_results, complete=analyzed > 0)
