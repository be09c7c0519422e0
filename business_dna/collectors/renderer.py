"""
Renderers turn a URL into a RenderedPage.

- PlaywrightRenderer: headless Chromium, one browser per crawl session.
  Also collects image URLs, links and brand colors from the live DOM.
- StaticRenderer: plain HTTP GET, for sites that need no JavaScript and for
  environments without a browser.

Both raise RenderError on failure; the crawl scheduler absorbs it per page.
"""

import logging
import math
from typing import Protocol
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from business_dna.constants import USER_AGENT
from business_dna.exceptions import RenderError
from business_dna.schemas.page import RenderedPage

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, url: str, timeout: float) -> RenderedPage:
        """Render ``url`` within ``timeout`` seconds or raise RenderError."""
        ...


# Collects what the extractors cannot recover from serialized HTML alone:
# resolved image sources (lazy-loaded and CSS backgrounds), absolute hrefs,
# CSS custom properties and computed colors of brand-carrying elements.
EXTRACT_PAGE_ASSETS_JS = """
() => {
    const images = new Set();
    document.querySelectorAll('img').forEach(img => {
        const src = img.currentSrc || img.src || img.getAttribute('data-src');
        if (src && !src.startsWith('data:')) images.add(src);
    });
    document.querySelectorAll('[style*="background"], section, header, [class*="hero"]').forEach(el => {
        const bg = getComputedStyle(el).backgroundImage;
        const match = bg && bg.match(/url\\(["']?([^"')]+)["']?\\)/);
        if (match && !match[1].startsWith('data:')) images.add(new URL(match[1], location.href).href);
    });

    const links = [];
    document.querySelectorAll('a[href]').forEach(a => links.push(a.href));

    const cssColors = [];
    const rootStyle = getComputedStyle(document.documentElement);
    const varNames = [
        '--primary', '--secondary', '--accent', '--cta',
        '--primary-color', '--secondary-color', '--accent-color', '--brand-color',
        '--highlight-color', '--button-color', '--color-primary', '--color-secondary',
        '--color-accent', '--main-color', '--theme-color', '--link-color',
    ];
    for (const name of varNames) {
        const value = rootStyle.getPropertyValue(name).trim();
        if (value) cssColors.push(value);
    }

    const elementColors = [];
    const selector = 'button, .btn, [class*="button"], [class*="cta"], nav, header, h1, h2, a[class*="btn"], [class*="accent"]';
    document.querySelectorAll(selector).forEach(el => {
        const cs = getComputedStyle(el);
        for (const value of [cs.backgroundColor, cs.color, cs.borderColor]) {
            if (value && value !== 'rgba(0, 0, 0, 0)' && value !== 'transparent') elementColors.push(value);
        }
    });

    return {
        images: [...images].slice(0, 60),
        links: links,
        cssColors: cssColors,
        elementColors: elementColors.slice(0, 60),
    };
}
"""


def navigation_timeout_ms(timeout: float) -> int:
    """Seconds to Playwright milliseconds, never 0 (Playwright reads 0 as no timeout)."""
    return max(1, math.ceil(timeout * 1000))


class PlaywrightRenderer:
    """
    Renders JavaScript-heavy pages using Playwright.

    Uses a single browser instance per session; use as a context manager so
    the browser is closed when the crawl ends.
    """

    def __init__(self, headless: bool = True, max_images_per_page: int = 20):
        """
        Initialize the renderer.

        Args:
            headless: Run browser in headless mode (default True)
            max_images_per_page: Image URLs kept per rendered page
        """
        self.headless = headless
        self.max_images_per_page = max_images_per_page
        self._playwright = None
        self._browser = None
        self._context = None
        self._initialized = False
        self._available = None  # None = not checked, True/False = checked

    def _ensure_initialized(self) -> bool:
        """
        Lazily start Playwright and the browser.

        Returns:
            True if the browser is ready, False otherwise
        """
        if self._initialized:
            return True

        if self._available is False:
            return False

        try:
            from playwright.sync_api import sync_playwright

            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=self.headless)
            self._context = self._browser.new_context(
                user_agent=USER_AGENT,
                viewport={"width": 1280, "height": 720},
            )
            self._initialized = True
            self._available = True
            logger.info("Playwright browser initialized")
            return True

        except Exception as e:
            logger.warning(f"Failed to initialize Playwright: {e}. Run: playwright install chromium")
            self._available = False
            return False

    def render(self, url: str, timeout: float) -> RenderedPage:
        """
        Render a page with JavaScript and collect its assets.

        Args:
            url: URL to render
            timeout: Seconds allowed for navigation

        Raises:
            RenderError: Browser unavailable, navigation failed or timed out
        """
        if not self._ensure_initialized():
            raise RenderError(url, "Playwright browser unavailable")

        try:
            page = self._context.new_page()
            try:
                response = page.goto(url, wait_until="networkidle", timeout=navigation_timeout_ms(timeout))
                if response is not None and response.status >= 400:
                    raise RenderError(url, f"HTTP {response.status}")

                html = page.content()
                assets = page.evaluate(EXTRACT_PAGE_ASSETS_JS)
                logger.debug(f"Playwright rendered {url}: {len(html)} chars")

                return RenderedPage(
                    url=url,
                    final_url=page.url,
                    html=html,
                    image_urls=assets.get("images", [])[: self.max_images_per_page],
                    link_urls=assets.get("links", []),
                    css_colors=assets.get("cssColors", []),
                    element_colors=assets.get("elementColors", []),
                )
            finally:
                page.close()

        except RenderError:
            raise
        except Exception as e:
            raise RenderError(url, str(e)) from e

    def close(self):
        """Close the browser and release resources."""
        for name in ("_context", "_browser"):
            resource = getattr(self, name)
            if resource is not None:
                try:
                    resource.close()
                except Exception as e:
                    logger.debug(f"Ignoring error while closing Playwright {name}: {e}")
                setattr(self, name, None)

        if self._playwright is not None:
            try:
                self._playwright.stop()
            except Exception as e:
                logger.debug(f"Ignoring error while stopping Playwright: {e}")
            self._playwright = None

        self._initialized = False
        logger.debug("Playwright browser closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class StaticRenderer:
    """Fetches raw HTML with requests; no JavaScript, no computed styles."""

    def __init__(self, session: requests.Session | None = None, max_images_per_page: int = 20):
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.max_images_per_page = max_images_per_page

    def render(self, url: str, timeout: float) -> RenderedPage:
        try:
            response = self.session.get(url, timeout=timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RenderError(url, str(e)) from e

        content_type = response.headers.get("Content-Type", "")
        if content_type and "html" not in content_type.lower():
            raise RenderError(url, f"Not an HTML page ({content_type})")

        html = response.text
        final_url = response.url or url
        soup = BeautifulSoup(html, "html.parser")

        images = []
        for img in soup.find_all("img"):
            src = img.get("src") or img.get("data-src")
            if src and not src.startswith("data:"):
                absolute = urljoin(final_url, src)
                if absolute not in images:
                    images.append(absolute)

        links = [urljoin(final_url, a["href"]) for a in soup.find_all("a", href=True)]

        return RenderedPage(
            url=url,
            final_url=final_url,
            html=html,
            image_urls=images[: self.max_images_per_page],
            link_urls=links,
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
