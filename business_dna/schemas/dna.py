"""The consolidated Business DNA record and its lighter SiteIdentity view."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from business_dna import constants
from business_dna.schemas.entities import (
    ContactInfo,
    ExtractedFAQ,
    ExtractedService,
    ExtractedTeamMember,
    ExtractedTestimonial,
    HiddenGem,
    NavigationLink,
    SocialLinks,
)
from business_dna.schemas.page import EmotionalTone, SemanticPage
from business_dna.schemas.vision import EnrichedImage


class ContentSparsity(str, Enum):
    RICH = "rich"
    MODERATE = "moderate"
    SPARSE = "sparse"


class BrandColors(BaseModel):
    primary: str = constants.DEFAULT_PRIMARY_COLOR
    secondary: str = constants.DEFAULT_SECONDARY_COLOR
    accent: str = constants.DEFAULT_ACCENT_COLOR
    palette: list[str] = Field(default_factory=list, max_length=constants.MAX_BRAND_COLORS)
    neutrals: list[str] = Field(default_factory=lambda: list(constants.DEFAULT_NEUTRAL_COLORS))


class ConsolidatedHeader(BaseModel):
    logo_url: Optional[str] = None
    business_name: str
    tagline: Optional[str] = None
    primary_navigation: list[NavigationLink] = Field(default_factory=list, max_length=constants.MAX_NAV_LINKS)
    cta_button: NavigationLink = Field(default_factory=lambda: NavigationLink(label="Contact Us", href="#contact"))
    top_bar_phone: Optional[str] = None
    top_bar_email: Optional[str] = None


class ConsolidatedFooter(BaseModel):
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    business_hours: Optional[str] = None
    legal_links: list[NavigationLink] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list, max_length=constants.MAX_CERTIFICATIONS)
    copyright_text: str = ""


class EducationalContent(BaseModel):
    title: str
    url: str
    summary: str = ""


class Location(BaseModel):
    address: str
    phone: Optional[str] = None
    hours: Optional[str] = None


class SemanticImageMap(BaseModel):
    """Image URLs grouped by where a generated site would place them."""

    hero: list[str] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list)
    about: list[str] = Field(default_factory=list)
    testimonials: list[str] = Field(default_factory=list)
    gallery: list[str] = Field(default_factory=list)


class PageSummary(BaseModel):
    url: str
    path: str
    title: str


class SiteIdentity(BaseModel):
    """Lighter view of a BusinessDNA for callers that only need the basics."""

    business_name: str
    tagline: Optional[str] = None
    source_url: str
    extracted_at: datetime
    logo_url: Optional[str] = None
    hero_images: list[str] = Field(default_factory=list)
    gallery_images: list[str] = Field(default_factory=list)
    primary_colors: list[str] = Field(default_factory=list)
    accent_color: Optional[str] = None
    navigation: list[NavigationLink] = Field(default_factory=list)
    pages: list[PageSummary] = Field(default_factory=list)
    services: list[ExtractedService] = Field(default_factory=list)
    testimonials: list[ExtractedTestimonial] = Field(default_factory=list)
    team_members: list[ExtractedTeamMember] = Field(default_factory=list)
    faqs: list[ExtractedFAQ] = Field(default_factory=list)
    core_values: list[str] = Field(default_factory=list)
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    business_hours: Optional[str] = None
    visual_vibe: str = ""
    content_sparsity: ContentSparsity = ContentSparsity.SPARSE
    extracted_facts: list[HiddenGem] = Field(default_factory=list)
    vision_analysis_complete: bool = False
    semantic_image_map: SemanticImageMap = Field(default_factory=SemanticImageMap)


class BusinessDNA(BaseModel):
    """Everything known about one business after a pipeline run."""

    # Identity
    business_name: str
    tagline: Optional[str] = None
    source_url: str
    extracted_at: datetime

    # Soul
    vision_statement: Optional[str] = None
    mission_statement: Optional[str] = None
    core_values: list[str] = Field(default_factory=list)
    brand_personality: EmotionalTone = EmotionalTone.PROFESSIONAL
    unique_selling_points: list[str] = Field(default_factory=list)

    # Story
    hidden_gems: list[HiddenGem] = Field(default_factory=list)
    founding_story: Optional[str] = None
    achievements: list[str] = Field(default_factory=list)

    # Offerings and people
    services: list[ExtractedService] = Field(default_factory=list)
    team_members: list[ExtractedTeamMember] = Field(default_factory=list)
    team_culture: Optional[str] = None
    testimonials: list[ExtractedTestimonial] = Field(default_factory=list)
    faqs: list[ExtractedFAQ] = Field(default_factory=list)
    educational_content: list[EducationalContent] = Field(default_factory=list)

    # Visuals
    enriched_images: list[EnrichedImage] = Field(default_factory=list)
    brand_colors: BrandColors = Field(default_factory=BrandColors)
    semantic_image_map: SemanticImageMap = Field(default_factory=SemanticImageMap)

    # Layout
    consolidated_header: ConsolidatedHeader
    consolidated_footer: ConsolidatedFooter = Field(default_factory=ConsolidatedFooter)
    locations: list[Location] = Field(default_factory=list)

    semantic_pages: list[SemanticPage] = Field(default_factory=list)

    # Metadata
    content_sparsity: ContentSparsity = ContentSparsity.SPARSE
    total_pages_scraped: int = Field(default=0, ge=0)
    vision_analysis_complete: bool = False
    pipeline_version: str = constants.PIPELINE_VERSION

    model_config = ConfigDict(frozen=True)

    def to_site_identity(self) -> SiteIdentity:
        """Project this record onto the lighter SiteIdentity shape."""
        return SiteIdentity(
            business_name=self.business_name,
            tagline=self.tagline,
            source_url=self.source_url,
            extracted_at=self.extracted_at,
            logo_url=self.consolidated_header.logo_url,
            hero_images=list(self.semantic_image_map.hero),
            gallery_images=list(self.semantic_image_map.gallery),
            primary_colors=list(self.brand_colors.palette),
            accent_color=self.brand_colors.accent,
            navigation=list(self.consolidated_header.primary_navigation),
            pages=[PageSummary(url=p.url, path=p.path, title=p.title) for p in self.semantic_pages],
            services=list(self.services),
            testimonials=list(self.testimonials),
            team_members=list(self.team_members),
            faqs=list(self.faqs),
            core_values=list(self.core_values),
            contact_info=self.consolidated_footer.contact_info,
            social_links=self.consolidated_footer.social_links,
            business_hours=self.consolidated_footer.business_hours,
            visual_vibe=self.brand_personality.value,
            content_sparsity=self.content_sparsity,
            extracted_facts=list(self.hidden_gems),
            vision_analysis_complete=self.vision_analysis_complete,
            semantic_image_map=self.semantic_image_map,
        )
