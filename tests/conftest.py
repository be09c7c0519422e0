"""Shared fixtures for business_dna tests.

No network or browser: sites are dicts of canonical URL -> HTML served by a
fake renderer, and the vision service is a scripted fake.
"""

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

# Add the repo root so tests run without an install
sys.path.insert(0, str(Path(__file__).parent.parent))

from business_dna.config import Thresholds  # noqa: E402
from business_dna.exceptions import RenderError, VisionError  # noqa: E402
from business_dna.extractors.page_content import PageContentExtractor  # noqa: E402
from business_dna.extractors.semantic_classifier import SemanticClassifier  # noqa: E402
from business_dna.schemas.page import RenderedPage, SemanticPage  # noqa: E402
from business_dna.schemas.vision import ColorSwatch, TextBlock, VisionOptions, VisionResult  # noqa: E402
from business_dna.utils.url_helpers import canonical_url  # noqa: E402

SITE = "https://peakfitness.com"


# ─── Fakes ────────────────────────────────────────────────────────────────────


class FakeClock:
    """Monotonic clock the tests move forward by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeRenderer:
    """
    Serves HTML from a dict keyed by canonical URL.

    Unknown URLs raise RenderError, like a 404 would. ``seconds_per_page``
    moves an attached FakeClock forward on every render call.
    """

    def __init__(
        self,
        site: dict[str, str],
        redirects: Optional[dict[str, str]] = None,
        failing: Optional[set[str]] = None,
        clock: Optional[FakeClock] = None,
        seconds_per_page: float = 0.0,
        css_colors: Optional[list[str]] = None,
        element_colors: Optional[list[str]] = None,
    ):
        self.site = {canonical_url(url): html for url, html in site.items()}
        self.redirects = {canonical_url(k): canonical_url(v) for k, v in (redirects or {}).items()}
        self.failing = {canonical_url(url) for url in failing or set()}
        self.clock = clock
        self.seconds_per_page = seconds_per_page
        self.css_colors = css_colors or []
        self.element_colors = element_colors or []
        self.calls: list[str] = []
        self.timeouts: list[float] = []

    def render(self, url: str, timeout: float) -> RenderedPage:
        self.calls.append(url)
        self.timeouts.append(timeout)
        if self.clock is not None:
            self.clock.advance(self.seconds_per_page)

        key = canonical_url(url)
        if key in self.failing:
            raise RenderError(url, "HTTP 500")
        final = self.redirects.get(key, key)
        if final not in self.site:
            raise RenderError(url, "HTTP 404")
        return RenderedPage(
            url=url,
            html=self.site[final],
            final_url=final,
            css_colors=list(self.css_colors) if final == canonical_url(SITE) else [],
            element_colors=list(self.element_colors) if final == canonical_url(SITE) else [],
        )


class FakeVisionClient:
    """
    Scripted vision service.

    ``responses`` maps image URL to a VisionResult or an exception to raise;
    unknown URLs get a caption-only result.
    """

    def __init__(self, responses: Optional[dict] = None, available: bool = True, fail_all: bool = False):
        self.responses = responses or {}
        self.available = available
        self.fail_all = fail_all
        self.calls: list[str] = []

    def is_available(self) -> bool:
        return self.available

    def analyze(self, image_url: str, options: VisionOptions) -> VisionResult:
        self.calls.append(image_url)
        if self.fail_all:
            raise VisionError(f"Vision service returned 503 for {image_url}", status_code=503, retryable=True)
        response = self.responses.get(image_url)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return VisionResult(image_url=image_url, caption="a photo", caption_success=True)
        return response

    def batch_analyze(self, image_urls: list[str], options: VisionOptions) -> list[VisionResult]:
        return [self.analyze(url, options) for url in image_urls]


def ocr_result(image_url: str, text: str, colors: Optional[list[str]] = None, caption: str = "") -> VisionResult:
    """VisionResult with OCR text and optional colors/caption."""
    return VisionResult(
        image_url=image_url,
        ocr_text=text,
        text_blocks=[TextBlock(text=text, confidence=0.95)],
        colors=[ColorSwatch(hex=c, score=1.0 - i * 0.1) for i, c in enumerate(colors or [])],
        caption=caption or None,
        ocr_success=True,
        colors_success=bool(colors),
        caption_success=bool(caption),
    )


# ─── HTML builders ────────────────────────────────────────────────────────────


def html_page(
    title: str = "",
    body: str = "",
    head: str = "",
    nav: str = "",
    footer: str = "",
) -> str:
    """Minimal but well-formed page; ``nav`` and ``footer`` are inner HTML."""
    nav_html = f"<header><nav>{nav}</nav></header>" if nav else ""
    footer_html = f"<footer>{footer}</footer>" if footer else ""
    return (
        f"<html><head><title>{title}</title>{head}</head>"
        f"<body>{nav_html}<main>{body}</main>{footer_html}</body></html>"
    )


def links(*paths: str) -> str:
    return "".join(f'<a href="{p}">{p.strip("/").replace("-", " ").title() or "Home"}</a>' for p in paths)


def make_page(url: str, html: str, classify: bool = True, thresholds: Optional[Thresholds] = None) -> SemanticPage:
    """Run the real extractor (and classifier) over HTML."""
    page = PageContentExtractor().extract(html, canonical_url(url))
    if classify:
        page = SemanticClassifier(thresholds or Thresholds()).classify_page(page)
    return page


# ─── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def thresholds() -> Thresholds:
    return Thresholds()


@pytest.fixture
def page_factory(thresholds) -> Callable[..., SemanticPage]:
    def _make(url: str, html: str, classify: bool = True) -> SemanticPage:
        return make_page(url, html, classify=classify, thresholds=thresholds)

    return _make


@pytest.fixture
def small_business_site() -> dict[str, str]:
    """A five-page fitness studio site with the usual sections."""
    nav = links("/", "/about", "/services", "/team", "/contact")
    footer = (
        '<p>Call us at <a href="tel:+13035550142">(303) 555-0142</a> or email '
        '<a href="mailto:info@peakfitness.com">info@peakfitness.com</a></p>'
        '<p class="address">1200 Larimer Street, Denver, CO 80204</p>'
        "<p>Hours: Monday - Friday 6am - 9pm, Saturday 8am - 2pm</p>"
        "<p>Licensed and insured fitness professionals. BBB Accredited Business.</p>"
        '<a href="https://www.facebook.com/peakfitnessdenver">Facebook</a>'
        '<a href="https://instagram.com/peakfitness">Instagram</a>'
        '<a href="https://www.yelp.com/biz/peak-fitness-denver">Yelp</a>'
    )
    return {
        SITE: html_page(
            "Peak Fitness | Personal Training in Denver",
            "<h1>Peak Fitness</h1><h2>Stronger every single day</h2>"
            "<p>Peak Fitness is a friendly neighborhood gym for everyone in Denver who wants to get stronger.</p>"
            '<img src="/images/logo.png" alt="Peak Fitness logo"><img src="/images/hero.jpg" alt="Gym floor">',
            head='<meta name="description" content="Personal training and group fitness classes in downtown Denver.">'
            '<meta property="og:site_name" content="Peak Fitness">',
            nav=nav,
            footer=footer,
        ),
        f"{SITE}/about": html_page(
            "About Us | Peak Fitness",
            "<h1>Our Story</h1>"
            "<p>Our mission is to make strength training approachable for every body and every age.</p>"
            "<p>Our vision is a community where everyone feels at home in the gym.</p>"
            "<p>Our team culture is built on encouragement, patience and showing up for each other.</p>"
            "<ul><li>Community over competition</li><li>Progress over perfection</li></ul>",
            nav=nav,
            footer=footer,
        ),
        f"{SITE}/services": html_page(
            "Services | Peak Fitness",
            "<h1>Our Services</h1>"
            '<div class="services"><div class="service-card"><h3>Personal Training</h3>'
            "<p>One-on-one coaching tailored to your goals.</p></div>"
            '<div class="service-card"><h3>Group Yoga</h3><p>Small classes for all levels.</p></div></div>',
            nav=nav,
            footer=footer,
        ),
        f"{SITE}/team": html_page(
            "Meet the Team | Peak Fitness",
            "<h1>Meet Our Team</h1>"
            '<div class="team"><div class="member"><h3>Jane Park</h3><p class="role">Head Coach</p>'
            "<p>Jane has coached for fifteen years.</p></div>"
            '<div class="member"><h3>Marcus Lee</h3><p class="role">Nutrition Coach</p>'
            "<p>Marcus builds meal plans that stick.</p></div></div>",
            nav=nav,
            footer=footer,
        ),
        f"{SITE}/contact": html_page(
            "Contact | Peak Fitness",
            "<h1>Contact Us</h1><p>Call us or stop by, we are open Monday through Saturday.</p>",
            nav=nav,
            footer=footer,
        ),
    }
