"""
Contact, social and navigation extraction.

Searches the home page first, then footer-like regions of every page, since
that is where businesses put phone numbers, addresses, hours and badges.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from business_dna import constants
from business_dna.extractors.dom import soup_for, text_of
from business_dna.schemas.entities import ContactInfo, NavigationLink, SocialLinks
from business_dna.schemas.page import SemanticPage
from business_dna.utils.url_helpers import is_same_domain, is_social_url

PHONE_PATTERN = re.compile(r"(?<!\d)(\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
ADDRESS_PATTERN = re.compile(
    r"\d+\s+[A-Za-z\s]+(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Drive|Dr|Lane|Ln|Way)\b[^,\n]*,?\s*[A-Za-z\s]+,?\s*[A-Z]{2}\s*\d{5}"
)
HOURS_PATTERN = re.compile(r"(?:monday|mon)\b[\s\S]{0,100}(?:sunday|sun|\d\s*(?:pm|am))\b", re.IGNORECASE)
CERTIFICATION_PATTERN = re.compile(r"\b(?:BBB|certified|licensed|insured|accredited)\b[^.!?\n]{0,40}", re.IGNORECASE)

PLACEHOLDER_EMAIL_DOMAINS = ("example.com", "email.com", "domain.com", "yourdomain.com", "sentry.io")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")
ORG_EMAIL_PREFIXES = ("info@", "contact@", "hello@", "office@", "support@", "book@", "bookings@")

ADDRESS_SELECTORS = [
    '[itemtype*="PostalAddress"]',
    '[itemprop="address"]',
    ".address",
    "address",
    'footer [class*="address"]',
    'footer [class*="location"]',
]
FOOTER_SELECTOR = 'footer, #footer, [class*="footer"], [role="contentinfo"]'
NAV_SELECTORS = [
    "nav a",
    "header nav a",
    ".nav a",
    "#nav a",
    '[role="navigation"] a',
    ".menu a",
    "header ul li a",
]

# Profile URL patterns per platform; share/intent endpoints are not profiles
SOCIAL_MEDIA_PATTERNS = {
    "facebook": re.compile(r"(?:https?://)?(?:www\.|m\.)?facebook\.com/(?!sharer|share|dialog)[\w.-]+", re.IGNORECASE),
    "instagram": re.compile(r"(?:https?://)?(?:www\.)?instagram\.com/(?!p/|share)[\w.-]+", re.IGNORECASE),
    "twitter": re.compile(r"(?:https?://)?(?:www\.)?(?:twitter\.com|x\.com)/(?!intent|share|home)[\w]+", re.IGNORECASE),
    "linkedin": re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/(?:company|in)/[\w.-]+", re.IGNORECASE),
    "youtube": re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/(?:c/|channel/|user/|@)[\w.-]+", re.IGNORECASE),
    "yelp": re.compile(r"(?:https?://)?(?:www\.)?yelp\.com/biz/[\w.-]+", re.IGNORECASE),
    "tiktok": re.compile(r"(?:https?://)?(?:www\.)?tiktok\.com/@[\w.-]+", re.IGNORECASE),
}


@dataclass
class _Region:
    page: SemanticPage
    text: str
    soup: Optional[BeautifulSoup]


def _home_first(pages: list[SemanticPage]) -> list[SemanticPage]:
    home = [p for p in pages if p.is_home]
    return home + [p for p in pages if not p.is_home]


def _regions(pages: Iterable[SemanticPage]) -> list[_Region]:
    """Home page body, then footer regions of every page (home page first)."""
    pages = _home_first(list(pages))
    if not pages:
        return []

    regions = []
    home = pages[0]
    home_soup = soup_for(home)
    home_text = text_of(home_soup.body or home_soup) if home_soup is not None else home.raw_text
    regions.append(_Region(home, home_text, home_soup))

    for page in pages:
        soup = home_soup if page is home else soup_for(page)
        if soup is None:
            continue
        for footer in soup.select(FOOTER_SELECTOR):
            regions.append(_Region(page, text_of(footer), footer))
    return regions


def _is_business_email(email: str) -> bool:
    lower = email.lower()
    return not lower.endswith(IMAGE_EXTENSIONS) and not any(d in lower for d in PLACEHOLDER_EMAIL_DOMAINS)


def _find_email(regions: list[_Region]) -> Optional[str]:
    candidates = []
    for region in regions:
        if region.soup is not None:
            for a in region.soup.select('a[href^="mailto:"]'):
                candidates.append(a["href"][len("mailto:"):].split("?")[0].strip())
        candidates.extend(EMAIL_PATTERN.findall(region.text))

    valid = [e for e in candidates if e and _is_business_email(e)]
    org = [e for e in valid if e.lower().startswith(ORG_EMAIL_PREFIXES)]
    return (org or valid or [None])[0]


def _find_phone(regions: list[_Region]) -> Optional[str]:
    for region in regions:
        if region.soup is not None:
            tel = region.soup.select_one('a[href^="tel:"]')
            if tel is not None:
                label = text_of(tel)
                match = PHONE_PATTERN.search(label) or PHONE_PATTERN.search(tel["href"])
                if match:
                    return match.group(0).strip()
        match = PHONE_PATTERN.search(region.text)
        if match:
            return match.group(0).strip()
    return None


def _find_address(regions: list[_Region]) -> Optional[str]:
    for region in regions:
        if region.soup is None:
            continue
        for selector in ADDRESS_SELECTORS:
            for el in region.soup.select(selector):
                text = text_of(el)
                if 10 < len(text) < 200 and re.search(r"\d", text):
                    return text
    for region in regions:
        match = ADDRESS_PATTERN.search(region.text)
        if match:
            return " ".join(match.group(0).split())
    return None


def extract_contact_info(pages: Iterable[SemanticPage]) -> ContactInfo:
    """Phone, email and street address from the home page and footers."""
    regions = _regions(pages)
    return ContactInfo(
        phone=_find_phone(regions),
        email=_find_email(regions),
        address=_find_address(regions),
    )


def extract_social_links(pages: Iterable[SemanticPage]) -> SocialLinks:
    """First profile link per platform, home page first."""
    found: dict[str, str] = {}
    for page in _home_first(list(pages)):
        soup = soup_for(page)
        hrefs = [a["href"] for a in soup.find_all("a", href=True)] if soup is not None else page.link_urls
        for href in hrefs:
            for platform, pattern in SOCIAL_MEDIA_PATTERNS.items():
                if platform in found:
                    continue
                match = pattern.search(href)
                if match:
                    url = match.group(0)
                    if not url.startswith("http"):
                        url = f"https://{url}"
                    found[platform] = url
        if len(found) == len(SOCIAL_MEDIA_PATTERNS):
            break
    return SocialLinks(**found)


def section_anchor(href: str) -> str:
    """
    Map a page URL to the single-page section anchor a generated site uses.

    Examples:
        >>> section_anchor("https://peakfitness.com/about-us/")
        '#aboutus'
        >>> section_anchor("https://peakfitness.com/")
        '#hero'
    """
    path = urlparse(href).path.strip("/")
    last = path.split("/")[-1] if path else "hero"
    last = re.sub(r"\.html?$", "", last, flags=re.IGNORECASE)
    return "#" + re.sub(r"[-_]", "", last).lower()


def extract_navigation(pages: Iterable[SemanticPage], limit: int = constants.MAX_NAV_LINKS) -> list[NavigationLink]:
    """
    Primary navigation labels from the home page menu.

    Returns:
        Up to ``limit`` same-site links with section anchors as hrefs
    """
    pages = _home_first(list(pages))
    links: list[NavigationLink] = []
    seen_labels: set[str] = set()
    seen_hrefs: set[str] = set()

    for page in pages:
        soup = soup_for(page)
        if soup is None:
            continue
        for selector in NAV_SELECTORS:
            for a in soup.select(selector):
                if len(links) >= limit:
                    return links
                href = (a.get("href") or "").strip()
                label = text_of(a)
                if not href or not (2 <= len(label) <= 30) or label.lower() in seen_labels:
                    continue
                if href.lower().startswith(("mailto:", "tel:", "javascript:")):
                    continue
                if href.startswith("#"):
                    anchor = href
                else:
                    absolute = urljoin(page.url, href)
                    if is_social_url(absolute) or not is_same_domain(absolute, page.url):
                        continue
                    anchor = section_anchor(absolute)
                if anchor in seen_hrefs or anchor == "#":
                    continue
                seen_hrefs.add(anchor)
                seen_labels.add(label.lower())
                links.append(NavigationLink(label=label, href=anchor))
        if links:
            break
    return links


def extract_business_hours(pages: Iterable[SemanticPage]) -> Optional[str]:
    for region in _regions(pages):
        match = HOURS_PATTERN.search(region.text)
        if match:
            return " ".join(match.group(0).split())
    return None


def extract_certifications(pages: Iterable[SemanticPage], limit: int = constants.MAX_CERTIFICATIONS) -> list[str]:
    """Trust badges mentioned in footers ("Licensed & Insured", "BBB Accredited")."""
    found: list[str] = []
    seen: set[str] = set()
    # First region is the whole home page body; only footers count here
    for region in _regions(pages)[1:]:
        for match in CERTIFICATION_PATTERN.finditer(region.text):
            text = match.group(0).strip(" ,;:-")
            if text.lower() not in seen:
                seen.add(text.lower())
                found.append(text)
            if len(found) >= limit:
                return found
    return found
