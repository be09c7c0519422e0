"""Typed entities pulled out of crawled pages and OCR text."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HiddenGemType(str, Enum):
    FOUNDING_DATE = "founding_date"
    AWARD = "award"
    CERTIFICATION = "certification"
    STATISTIC = "statistic"
    LOCATION_DETAIL = "location_detail"
    SLOGAN = "slogan"


class HiddenGem(BaseModel):
    """A fact found in image text (badges, banners, signage)."""

    type: HiddenGemType
    text: str
    source: str  # Image URL the text was read from
    confidence: float = Field(..., ge=0.0, le=1.0)
    display_suggestion: str = ""

    model_config = ConfigDict(frozen=True)


class ExtractedService(BaseModel):
    name: str
    description: str = ""
    features: list[str] = Field(default_factory=list)
    image_url: Optional[str] = None


class ExtractedTestimonial(BaseModel):
    quote: str
    author_name: str
    author_title: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    source: str = ""  # Page URL
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class ExtractedTeamMember(BaseModel):
    name: str
    role: str
    bio: str = ""
    image_url: Optional[str] = None


class ExtractedFAQ(BaseModel):
    question: str
    answer: str


class ContactInfo(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.phone or self.email or self.address)


class SocialLinks(BaseModel):
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    youtube: Optional[str] = None
    yelp: Optional[str] = None
    tiktok: Optional[str] = None

    def as_list(self) -> list[str]:
        return [url for url in self.model_dump().values() if url]


class NavigationLink(BaseModel):
    label: str
    href: str
    is_external: bool = False


class ExtractedEntities(BaseModel):
    """Everything the entity extractors hand to the consolidator."""

    services: list[ExtractedService] = Field(default_factory=list)
    testimonials: list[ExtractedTestimonial] = Field(default_factory=list)
    team_members: list[ExtractedTeamMember] = Field(default_factory=list)
    faqs: list[ExtractedFAQ] = Field(default_factory=list)
    hidden_gems: list[HiddenGem] = Field(default_factory=list)
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    navigation: list[NavigationLink] = Field(default_factory=list)
    business_hours: Optional[str] = None
    certifications: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)  # Merged brand palette, at most 5
