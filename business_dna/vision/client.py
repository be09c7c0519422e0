"""
Vision service clients.

The pipeline only depends on the ``VisionClient`` protocol; ``HttpVisionClient``
talks to an external OCR/color/caption service over HTTP.

Wire format (``POST {base_url}/analyze``):
    request:  {"image_url": str, "features": {"ocr": bool, "colors": bool, "caption": bool}}
    response: {"ocr_text": str | null, "text_blocks": [...], "colors": [...] | null,
               "caption": str | null, "error": str | null}

A ``null`` field means that analysis was not run or failed.
"""

import logging
import os
import time
from typing import Callable, Optional, Protocol

import httpx

from business_dna import constants
from business_dna.exceptions import VisionError
from business_dna.schemas.vision import ColorSwatch, TextBlock, VisionOptions, VisionResult


class VisionClient(Protocol):
    def analyze(self, image_url: str, options: VisionOptions) -> VisionResult: ...

    def batch_analyze(self, image_urls: list[str], options: VisionOptions) -> list[VisionResult]: ...

    def is_available(self) -> bool: ...


def parse_analysis(image_url: str, payload: dict, options: VisionOptions) -> VisionResult:
    """Turn a service response into a VisionResult, honoring which features were requested."""
    ocr_text = payload.get("ocr_text")
    colors = payload.get("colors")
    caption = payload.get("caption")

    return VisionResult(
        image_url=image_url,
        ocr_text=(ocr_text or "").strip() if options.enable_ocr else "",
        text_blocks=[TextBlock(**b) for b in payload.get("text_blocks") or []] if options.enable_ocr else [],
        colors=[ColorSwatch(**c) for c in colors or []] if options.enable_colors else [],
        caption=caption if options.enable_captions else None,
        ocr_success=options.enable_ocr and ocr_text is not None,
        colors_success=options.enable_colors and bool(colors),
        caption_success=options.enable_captions and bool(caption),
        error=payload.get("error"),
    )


class HttpVisionClient:
    """
    HTTP client for the vision service with retry on transient failures.

    Usage:
        with HttpVisionClient("http://vision.internal:8080") as client:
            if client.is_available():
                result = client.analyze(url, VisionOptions())
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = constants.VISION_REQUEST_TIMEOUT_SECONDS,
        max_retries: int = constants.VISION_MAX_RETRIES,
        backoff_seconds: float = constants.VISION_INITIAL_BACKOFF_SECONDS,
        http_client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep
        self.logger = logger or logging.getLogger(__name__)

        headers = {"User-Agent": constants.USER_AGENT}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = http_client or httpx.Client(headers=headers, timeout=httpx.Timeout(timeout, connect=10.0))

    @classmethod
    def from_env(cls) -> Optional["HttpVisionClient"]:
        """Client for ``VISION_SERVICE_URL``, or None when it is not set."""
        base_url = os.getenv("VISION_SERVICE_URL")
        if not base_url:
            return None
        return cls(base_url, api_key=os.getenv("VISION_SERVICE_API_KEY"))

    def is_available(self) -> bool:
        try:
            response = self._client.get(f"{self.base_url}/health")
        except httpx.HTTPError as e:
            self.logger.warning(f"Vision service health check failed: {e}")
            return False
        return response.status_code == 200

    def analyze(self, image_url: str, options: VisionOptions) -> VisionResult:
        """
        Analyze one image.

        Raises:
            VisionError: On a non-retryable error or after retries run out
        """
        body = {
            "image_url": image_url,
            "features": {
                "ocr": options.enable_ocr,
                "colors": options.enable_colors,
                "caption": options.enable_captions,
            },
        }

        last_error: Optional[VisionError] = None
        for attempt in range(self.max_retries):
            try:
                response = self._client.post(f"{self.base_url}/analyze", json=body)
            except httpx.TimeoutException as e:
                last_error = VisionError(f"Timeout analyzing {image_url}: {e}", retryable=True)
            except httpx.HTTPError as e:
                last_error = VisionError(f"Request failed for {image_url}: {e}", retryable=True)
            else:
                if response.status_code == 200:
                    return parse_analysis(image_url, response.json(), options)
                retryable = response.status_code in constants.VISION_RETRYABLE_STATUS_CODES
                last_error = VisionError(
                    f"Vision service returned {response.status_code} for {image_url}",
                    status_code=response.status_code,
                    retryable=retryable,
                )
                if not retryable:
                    raise last_error

            if attempt < self.max_retries - 1:
                wait_time = self.backoff_seconds * (2**attempt)  # 0.5s, 1s, 2s
                self.logger.warning(f"{last_error}, retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries})")
                self._sleep(wait_time)

        raise last_error

    def batch_analyze(self, image_urls: list[str], options: VisionOptions) -> list[VisionResult]:
        """Analyze images one by one; a failed image becomes a failed result in its slot."""
        results = []
        for url in image_urls:
            try:
                results.append(self.analyze(url, options))
            except VisionError as e:
                results.append(VisionResult.failed(url, str(e)))
        return results

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
