"""Pydantic records passed between pipeline stages."""

from business_dna.schemas.dna import (
    BrandColors,
    BusinessDNA,
    ConsolidatedFooter,
    ConsolidatedHeader,
    ContentSparsity,
    EducationalContent,
    Location,
    SemanticImageMap,
    SiteIdentity,
)
from business_dna.schemas.entities import (
    ContactInfo,
    ExtractedEntities,
    ExtractedFAQ,
    ExtractedService,
    ExtractedTeamMember,
    ExtractedTestimonial,
    HiddenGem,
    HiddenGemType,
    NavigationLink,
    SocialLinks,
)
from business_dna.schemas.page import (
    ContentPriority,
    CrawlBudget,
    EmotionalTone,
    RenderedPage,
    SemanticIntent,
    SemanticPage,
)
from business_dna.schemas.vision import (
    ColorSwatch,
    EnrichedImage,
    EnrichmentResult,
    TextBlock,
    VisionOptions,
    VisionResult,
)

__all__ = [
    "BrandColors",
    "BusinessDNA",
    "ColorSwatch",
    "ConsolidatedFooter",
    "ConsolidatedHeader",
    "ContactInfo",
    "ContentPriority",
    "ContentSparsity",
    "CrawlBudget",
    "EducationalContent",
    "EmotionalTone",
    "EnrichedImage",
    "EnrichmentResult",
    "ExtractedEntities",
    "ExtractedFAQ",
    "ExtractedService",
    "ExtractedTeamMember",
    "ExtractedTestimonial",
    "HiddenGem",
    "HiddenGemType",
    "Location",
    "NavigationLink",
    "RenderedPage",
    "SemanticImageMap",
    "SemanticIntent",
    "SemanticPage",
    "SiteIdentity",
    "SocialLinks",
    "TextBlock",
    "VisionOptions",
    "VisionResult",
]
