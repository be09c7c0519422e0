"""
Priority-first crawl of a single business site.

The frontier is one deque: URLs whose path mentions a priority section
(about, services, team, ...) go to the front, everything else to the back.
Each URL is rendered at most once. The crawl stops, without error, when the
page budget is spent, the frontier is empty, or the crawl clock runs out.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from business_dna import constants
from business_dna.collectors.renderer import Renderer
from business_dna.schemas.page import CrawlBudget, RenderedPage
from business_dna.utils.url_helpers import (
    canonical_url,
    is_page_link,
    is_same_domain,
    normalize_url,
    should_skip_url,
)


class StopReason(str, Enum):
    MAX_PAGES = "max_pages"
    FRONTIER_EXHAUSTED = "frontier_exhausted"
    TIMEOUT = "timeout"


@dataclass
class CrawlResult:
    pages: list[RenderedPage] = field(default_factory=list)  # Crawl order
    visited: set[str] = field(default_factory=set)
    failures: dict[str, str] = field(default_factory=dict)  # url -> reason
    stop_reason: StopReason = StopReason.FRONTIER_EXHAUSTED
    elapsed: float = 0.0


class CrawlFrontier:
    """Pending URLs plus the visited set for one crawl."""

    def __init__(self, priority_paths: Iterable[str]):
        self.priority_paths = [p.lower() for p in priority_paths if p and p != "/"]
        self._queue: deque[tuple[str, int]] = deque()
        self._queued: set[str] = set()
        self.visited: set[str] = set()

    def __len__(self) -> int:
        return len(self._queue)

    def is_priority(self, url: str) -> bool:
        path = urlparse(url).path.lower()
        return any(p in path for p in self.priority_paths)

    def add(self, urls: Iterable[str], depth: int) -> int:
        """
        Enqueue unseen URLs at ``depth``.

        Priority URLs go to the front in the order they were discovered;
        the rest go to the back. Returns the number of URLs added.
        """
        priority, regular = [], []
        for url in urls:
            if url in self.visited or url in self._queued:
                continue
            self._queued.add(url)
            (priority if self.is_priority(url) else regular).append((url, depth))

        self._queue.extendleft(reversed(priority))
        self._queue.extend(regular)
        return len(priority) + len(regular)

    def pop(self) -> Optional[tuple[str, int]]:
        while self._queue:
            url, depth = self._queue.popleft()
            self._queued.discard(url)
            if url not in self.visited:
                return url, depth
        return None

    def mark_visited(self, url: str):
        self.visited.add(url)


class CrawlScheduler:
    """Drives a renderer over one site within a CrawlBudget."""

    def __init__(
        self,
        renderer: Renderer,
        priority_paths: Iterable[str] | None = None,
        logger=None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.renderer = renderer
        self.priority_paths = list(priority_paths if priority_paths is not None else constants.PRIORITY_PATHS)
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock

    def crawl(
        self,
        seed_url: str,
        budget: CrawlBudget,
        on_page: Callable[[RenderedPage], None] | None = None,
    ) -> CrawlResult:
        """
        Crawl from ``seed_url`` until a budget limit or an empty frontier.

        Args:
            seed_url: Site entry point (scheme optional)
            budget: Page, depth and time limits
            on_page: Called with each rendered page as soon as it arrives

        Returns:
            CrawlResult with pages in crawl order and per-URL render failures
        """
        seed = canonical_url(normalize_url(seed_url))
        frontier = CrawlFrontier(self.priority_paths)
        frontier.add([seed], depth=0)
        result = CrawlResult(visited=frontier.visited)

        start = self.clock()
        while True:
            if len(result.pages) >= budget.max_pages:
                result.stop_reason = StopReason.MAX_PAGES
                break

            elapsed = self.clock() - start
            if elapsed >= budget.crawl_timeout:
                result.stop_reason = StopReason.TIMEOUT
                self.logger.warning(
                    f"Crawl timeout after {elapsed:.1f}s with {len(result.pages)} pages, stopping early"
                )
                break

            item = frontier.pop()
            if item is None:
                result.stop_reason = StopReason.FRONTIER_EXHAUSTED
                break

            url, depth = item
            frontier.mark_visited(url)
            page_timeout = min(budget.page_timeout, budget.crawl_timeout - elapsed)

            try:
                page = self.renderer.render(url, page_timeout)
            except Exception as e:
                result.failures[url] = str(e)
                self.logger.warning(f"Failed to render {url}: {e}")
                continue

            # Redirect targets count as visited too
            final = canonical_url(page.final_url or url)
            if final != url:
                if final in frontier.visited:
                    self.logger.debug(f"Skipping {url}: redirected to already crawled {final}")
                    continue
                frontier.mark_visited(final)

            result.pages.append(page)
            self.logger.info(f"Rendered page {len(result.pages)}/{budget.max_pages}: {url} (depth={depth})")
            if on_page is not None:
                on_page(page)

            if depth < budget.max_depth:
                added = frontier.add(self._discover_links(page, seed), depth + 1)
                self.logger.debug(f"Discovered {added} new links on {url}")

        result.elapsed = self.clock() - start
        self.logger.info(
            f"Crawl finished: {len(result.pages)} pages, {len(result.failures)} failures, "
            f"stop_reason={result.stop_reason.value}, elapsed={result.elapsed:.1f}s"
        )
        return result

    def _discover_links(self, page: RenderedPage, seed: str) -> list[str]:
        """Same-site page links in document order, canonicalized and de-duplicated."""
        base = page.final_url or page.url
        hrefs = page.link_urls
        if not hrefs:
            soup = BeautifulSoup(page.html, "html.parser")
            hrefs = [a["href"] for a in soup.find_all("a", href=True)]

        links = []
        seen = set()
        for href in hrefs:
            if not is_page_link(href):
                continue
            absolute = normalize_url(href, base)
            if not absolute.startswith(("http://", "https://")) or not is_same_domain(absolute, seed):
                continue
            if should_skip_url(absolute):
                continue
            url = canonical_url(absolute)
            if url not in seen:
                seen.add(url)
                links.append(url)
        return links
