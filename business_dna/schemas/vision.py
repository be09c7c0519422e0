"""Vision service request options and results."""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field

from business_dna import constants


@dataclass(frozen=True)
class VisionOptions:
    enable_ocr: bool = True
    enable_colors: bool = True
    enable_captions: bool = True
    max_images: int = constants.DEFAULT_MAX_IMAGES_FOR_VISION
    concurrency: int = constants.DEFAULT_VISION_CONCURRENCY

    @classmethod
    def from_config(cls, config) -> "VisionOptions":
        return cls(
            enable_ocr=config.enable_ocr,
            enable_colors=config.enable_color_extraction,
            enable_captions=config.enable_semantic_captions,
            max_images=config.max_images_for_vision,
            concurrency=config.vision_concurrency,
        )


class TextBlock(BaseModel):
    text: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class ColorSwatch(BaseModel):
    hex: str
    score: float = 0.0
    pixel_fraction: float = 0.0


class VisionResult(BaseModel):
    """What the vision service returned for one image.

    ``ocr_success`` / ``colors_success`` / ``caption_success`` record which
    analyses actually produced output, since one may fail while others succeed.
    """

    image_url: str
    ocr_text: str = ""
    text_blocks: list[TextBlock] = Field(default_factory=list)
    colors: list[ColorSwatch] = Field(default_factory=list)
    caption: Optional[str] = None
    ocr_success: bool = False
    colors_success: bool = False
    caption_success: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.ocr_success or self.colors_success or self.caption_success

    @classmethod
    def failed(cls, image_url: str, error: str) -> "VisionResult":
        return cls(image_url=image_url, error=error)


class EnrichedImage(BaseModel):
    """A discovered image, with vision facts when it was analyzed."""

    url: str
    semantic_caption: Optional[str] = None
    extracted_text: list[str] = Field(default_factory=list)
    dominant_colors: list[str] = Field(default_factory=list)
    vision_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    analyzed: bool = False

    @classmethod
    def passthrough(cls, url: str) -> "EnrichedImage":
        return cls(url=url)


class EnrichmentResult(BaseModel):
    """Images in discovery order plus the raw results for the ones that were sent."""

    images: list[EnrichedImage] = Field(default_factory=list)
    vision_results: list[VisionResult] = Field(default_factory=list)
    complete: bool = False

    @property
    def ocr_texts(self) -> list[tuple[str, str]]:
        """(image_url, text) for every image with OCR output."""
        return [(r.image_url, r.ocr_text) for r in self.vision_results if r.ocr_success and r.ocr_text]

    @property
    def colors(self) -> list[ColorSwatch]:
        swatches = []
        for result in self.vision_results:
            if result.colors_success:
                swatches.extend(result.colors)
        return swatches
