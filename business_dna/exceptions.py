"""Exceptions raised by the business DNA pipeline.

Per-page render failures and per-image vision failures are absorbed at
their own stage; only ``CrawlFailedError`` (no usable pages at all)
reaches the caller of ``BusinessDNAPipeline.run``.
"""


class BusinessDNAError(Exception):
    """Base class for pipeline errors."""


class RenderError(BusinessDNAError):
    """A single page could not be rendered."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to render {url}: {reason}")


class VisionError(BusinessDNAError):
    """The vision service failed for an image or a batch."""

    def __init__(self, message: str, status_code: int | None = None, retryable: bool = False):
        self.status_code = status_code
        self.retryable = retryable
        super().__init__(message)


class ExtractionError(BusinessDNAError):
    """Consolidation was asked to build a record from nothing."""


class CrawlFailedError(ExtractionError):
    """The crawl produced zero pages."""

    def __init__(self, url: str, failures: dict[str, str] | None = None):
        self.url = url
        self.failures = failures or {}
        super().__init__(f"No pages could be extracted from {url} ({len(self.failures)} render failures)")
