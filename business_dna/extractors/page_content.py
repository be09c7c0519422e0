"""
Page content extractor: rendered HTML -> unclassified SemanticPage.

Pulls the text a business site communicates with (title, headings,
paragraphs, list items) plus a capped markdown-ish ``raw_text`` used for
classification, sparsity and regex extractors downstream.
"""

from typing import Iterable
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from business_dna import constants
from business_dna.schemas.page import SemanticPage
from business_dna.utils.url_helpers import is_page_link, is_same_domain


def clean_text(text: str) -> str:
    """Collapse all whitespace runs to single spaces."""
    return " ".join(text.split())


class PageContentExtractor:
    """
    Deterministic HTML-to-text extraction with BeautifulSoup.

    Same HTML and URL always produce the same SemanticPage.
    """

    STRIP_TAGS = ["script", "style", "noscript", "template", "iframe", "svg"]

    def __init__(self, max_images_per_page: int = constants.DEFAULT_MAX_IMAGES_PER_PAGE):
        self.max_images_per_page = max_images_per_page

    def extract(
        self,
        html: str,
        url: str,
        image_urls: Iterable[str] = (),
        link_urls: Iterable[str] = (),
    ) -> SemanticPage:
        """
        Extract text content from a rendered page.

        Args:
            html: Rendered HTML
            url: Final page URL
            image_urls: Image URLs collected by the renderer (derived from <img> when empty)
            link_urls: Link URLs collected by the renderer (derived from <a> when empty)

        Returns:
            SemanticPage with intent ``unknown`` and confidence 0
        """
        soup = BeautifulSoup(html or "", "html.parser")

        site_name = self._site_name(soup)
        meta_description = self._meta_description(soup)
        images = list(image_urls) or self._image_urls(soup, url)
        links = list(link_urls) or self._link_urls(soup, url)

        for tag in soup(self.STRIP_TAGS):
            tag.decompose()

        title = ""
        if soup.title and soup.title.get_text(strip=True):
            title = clean_text(soup.title.get_text(" "))
        else:
            h1 = soup.find("h1")
            if h1:
                title = clean_text(h1.get_text(" "))

        headings = self._texts(soup.find_all(["h1", "h2", "h3"]))
        paragraphs = [p for p in self._texts(soup.find_all("p")) if len(p) > constants.MIN_PARAGRAPH_CHARS]
        list_items = [
            li
            for li in self._texts(soup.find_all("li"))
            if constants.MIN_LIST_ITEM_CHARS <= len(li) <= constants.MAX_LIST_ITEM_CHARS
        ]

        return SemanticPage(
            url=url,
            path=SemanticPage.path_of(url),
            title=title,
            headings=headings,
            paragraphs=paragraphs,
            list_items=list_items,
            raw_text=self._raw_text(title, headings, paragraphs, list_items),
            site_name=site_name,
            meta_description=meta_description,
            image_urls=images[: self.max_images_per_page],
            link_urls=links,
            html=html or "",
        )

    @staticmethod
    def _texts(elements) -> list[str]:
        texts = []
        for el in elements:
            text = clean_text(el.get_text(" "))
            if text:
                texts.append(text)
        return texts

    @staticmethod
    def _raw_text(title: str, headings: list[str], paragraphs: list[str], list_items: list[str]) -> str:
        lines = []
        if title:
            lines.append(f"# {title}")
        lines.extend(f"## {h}" for h in headings)
        lines.extend(paragraphs)
        lines.extend(f"- {li}" for li in list_items)
        return "\n".join(lines)[: constants.RAW_TEXT_MAX_CHARS]

    @staticmethod
    def _site_name(soup: BeautifulSoup) -> str | None:
        og = soup.find("meta", attrs={"property": "og:site_name"})
        if og and og.get("content", "").strip():
            return clean_text(og["content"])
        org_name = soup.select_one('[itemtype*="Organization"] [itemprop="name"], [itemtype*="LocalBusiness"] [itemprop="name"]')
        if org_name:
            name = org_name.get("content") or org_name.get_text(" ")
            if name and name.strip():
                return clean_text(name)
        return None

    @staticmethod
    def _meta_description(soup: BeautifulSoup) -> str | None:
        for attrs in ({"name": "description"}, {"property": "og:description"}):
            tag = soup.find("meta", attrs=attrs)
            if tag and tag.get("content", "").strip():
                return clean_text(tag["content"])
        return None

    @staticmethod
    def _image_urls(soup: BeautifulSoup, url: str) -> list[str]:
        images = []
        for img in soup.find_all("img"):
            src = img.get("src") or img.get("data-src")
            if not src or src.startswith("data:"):
                continue
            absolute = urljoin(url, src)
            if absolute not in images:
                images.append(absolute)
        return images

    @staticmethod
    def _link_urls(soup: BeautifulSoup, url: str) -> list[str]:
        links = []
        for a in soup.find_all("a", href=True):
            if not is_page_link(a["href"]):
                continue
            absolute = urljoin(url, a["href"])
            if is_same_domain(absolute, url) and absolute not in links:
                links.append(absolute)
        return links
