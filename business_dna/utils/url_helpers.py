"""
URL helper utilities for the crawl scheduler and extractors.

This module provides functions for URL normalization and filtering.
"""

import re
from urllib.parse import urljoin, urlparse, urlunparse

from business_dna.constants import SKIP_EXTENSIONS, SKIP_PATTERNS, SOCIAL_HOSTS

_SKIP_RE = [re.compile(p, re.IGNORECASE) for p in SKIP_PATTERNS]
_NON_PAGE_SCHEMES = ("mailto:", "tel:", "javascript:", "data:", "sms:")


def normalize_url(url: str, base_url: str | None = None) -> str:
    """
    Normalize URL by adding scheme if missing and resolving relative URLs.

    Args:
        url: URL to normalize
        base_url: Base URL for resolving relative URLs (optional)

    Returns:
        Normalized absolute URL with scheme

    Examples:
        >>> normalize_url("peakfitness.com")
        'https://peakfitness.com'
        >>> normalize_url("/about", "https://peakfitness.com")
        'https://peakfitness.com/about'
    """
    url = url.strip()
    has_scheme = url.lower().startswith(("http://", "https://"))

    if base_url and not has_scheme and not url.startswith("//"):
        url = urljoin(base_url, url)
        has_scheme = url.lower().startswith(("http://", "https://"))

    if url.startswith("//"):
        url = f"https:{url}"
    elif not has_scheme:
        url = f"https://{url}"

    return url


def canonical_url(url: str) -> str:
    """
    Canonical form used for the visited set: lower-case scheme and host,
    no fragment, no trailing slash.

    Examples:
        >>> canonical_url("HTTPS://PeakFitness.com/About/#team")
        'https://peakfitness.com/About'
        >>> canonical_url("https://peakfitness.com/")
        'https://peakfitness.com'
    """
    parsed = urlparse(normalize_url(url))
    path = parsed.path.rstrip("/")
    return urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), path, parsed.params, parsed.query, ""))


def get_host(url: str) -> str:
    """
    Host without a leading ``www.``.

    Examples:
        >>> get_host("https://www.peakfitness.com/about")
        'peakfitness.com'
    """
    host = urlparse(normalize_url(url)).netloc.lower()
    return host[4:] if host.startswith("www.") else host


def is_same_domain(url1: str, url2: str) -> bool:
    """
    Check if two URLs belong to the same site (``www.`` ignored).

    Examples:
        >>> is_same_domain("https://www.peakfitness.com/about", "https://peakfitness.com/team")
        True
        >>> is_same_domain("https://peakfitness.com", "https://other.com")
        False
    """
    return get_host(url1) == get_host(url2)


def is_page_link(href: str) -> bool:
    """False for mailto/tel/javascript links and bare fragments."""
    href = href.strip().lower()
    return bool(href) and not href.startswith("#") and not href.startswith(_NON_PAGE_SCHEMES)


def should_skip_url(url: str) -> bool:
    """
    True for crawler traps, pagination and binary assets.

    Examples:
        >>> should_skip_url("https://peakfitness.com/blog/page/3")
        True
        >>> should_skip_url("https://peakfitness.com/brochure.pdf")
        True
        >>> should_skip_url("https://peakfitness.com/services")
        False
    """
    parsed = urlparse(url)
    if parsed.path.lower().endswith(SKIP_EXTENSIONS):
        return True
    target = parsed.path + (f"?{parsed.query}" if parsed.query else "")
    return any(pattern.search(target) for pattern in _SKIP_RE)


def is_social_url(url: str) -> bool:
    host = get_host(url)
    return any(host == social or host.endswith(f".{social}") for social in SOCIAL_HOSTS)


def hostname_business_name(url: str) -> str:
    """
    Best-effort business name from the hostname.

    Examples:
        >>> hostname_business_name("https://www.peak-fitness.com")
        'Peak Fitness'
    """
    host = get_host(url)
    label = host.split(".")[0] if host else ""
    return " ".join(part.capitalize() for part in re.split(r"[-_]+", label) if part)
