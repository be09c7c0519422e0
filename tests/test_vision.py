"""Tests for the vision HTTP client and the enrichment adapter."""

import json

import httpx
import pytest
from conftest import FakeVisionClient, ocr_result

from business_dna.exceptions import VisionError
from business_dna.schemas.vision import VisionOptions, VisionResult
from business_dna.vision.client import HttpVisionClient, parse_analysis
from business_dna.vision.enrichment import VisionEnrichmentAdapter, enriched_image, vision_confidence

BASE = "http://vision.test"
IMG = "https://peakfitness.com/images/badge.png"
OK_PAYLOAD = {
    "ocr_text": "Established 1998",
    "text_blocks": [{"text": "Established 1998", "confidence": 0.97}],
    "colors": [{"hex": "#E63946", "score": 0.8, "pixel_fraction": 0.4}],
    "caption": "a gym badge",
    "error": None,
}

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _client(handler, **kwargs):
    """HttpVisionClient over a mock transport, recording backoff sleeps."""
    sleeps = []
    client = HttpVisionClient(
        BASE,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        sleep=sleeps.append,
        **kwargs,
    )
    return client, sleeps


def _scripted(*responses):
    """Handler returning the given status codes (or raising exceptions) in order."""
    requests = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        step = queue.pop(0)
        if isinstance(step, Exception):
            raise step
        return httpx.Response(step, json=OK_PAYLOAD if step == 200 else {"error": "nope"})

    return handler, requests


def _urls(n: int) -> list[str]:
    return [f"https://peakfitness.com/images/{i}.jpg" for i in range(n)]


# ─── parse_analysis ───────────────────────────────────────────────────────────


class TestParseAnalysis:
    def test_full_response(self):
        result = parse_analysis(IMG, OK_PAYLOAD, VisionOptions())

        assert result.ocr_text == "Established 1998"
        assert result.colors[0].hex == "#E63946"
        assert result.ocr_success and result.colors_success and result.caption_success

    def test_null_fields_are_failures(self):
        result = parse_analysis(IMG, {"ocr_text": None, "colors": None, "caption": "a sign"}, VisionOptions())

        assert not result.ocr_success
        assert not result.colors_success
        assert result.caption_success
        assert result.success

    def test_disabled_features_ignored(self):
        result = parse_analysis(IMG, OK_PAYLOAD, VisionOptions(enable_ocr=False, enable_colors=False))

        assert result.ocr_text == ""
        assert result.colors == []
        assert not result.ocr_success


# ─── HttpVisionClient ─────────────────────────────────────────────────────────


class TestHttpVisionClient:
    def test_analyze_sends_requested_features(self):
        handler, requests = _scripted(200)
        client, _ = _client(handler)

        result = client.analyze(IMG, VisionOptions(enable_captions=False))

        assert result.ocr_success
        assert requests[0].url == f"{BASE}/analyze"
        assert json.loads(requests[0].content) == {
            "image_url": IMG,
            "features": {"ocr": True, "colors": True, "caption": False},
        }

    def test_retries_transient_status_with_backoff(self):
        handler, requests = _scripted(503, 502, 200)
        client, sleeps = _client(handler)

        assert client.analyze(IMG, VisionOptions()).ocr_success
        assert len(requests) == 3
        assert sleeps == [0.5, 1.0]

    def test_retries_timeouts(self):
        handler, requests = _scripted(httpx.ReadTimeout("slow"), 200)
        client, sleeps = _client(handler)

        assert client.analyze(IMG, VisionOptions()).ocr_success
        assert sleeps == [0.5]

    def test_gives_up_after_max_retries(self):
        handler, requests = _scripted(503, 503, 503)
        client, sleeps = _client(handler)

        with pytest.raises(VisionError) as exc_info:
            client.analyze(IMG, VisionOptions())

        assert exc_info.value.status_code == 503
        assert exc_info.value.retryable
        assert len(requests) == 3
        assert sleeps == [0.5, 1.0]

    def test_client_error_is_not_retried(self):
        handler, requests = _scripted(400)
        client, sleeps = _client(handler)

        with pytest.raises(VisionError) as exc_info:
            client.analyze(IMG, VisionOptions())

        assert exc_info.value.status_code == 400
        assert len(requests) == 1
        assert sleeps == []

    def test_batch_turns_failures_into_failed_results(self):
        handler, _ = _scripted(200, 404)
        client, _ = _client(handler)

        results = client.batch_analyze([IMG, f"{IMG}?v=2"], VisionOptions())

        assert results[0].success
        assert not results[1].success
        assert "404" in results[1].error

    def test_health(self):
        client, _ = _client(lambda request: httpx.Response(200 if request.url.path == "/health" else 404))
        assert client.is_available()

    def test_health_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused")

        client, _ = _client(handler)
        assert not client.is_available()

    def test_invalid_retry_count(self):
        with pytest.raises(ValueError):
            HttpVisionClient(BASE, max_retries=0)

    def test_from_env(self, monkeypatch):
        monkeypatch.delenv("VISION_SERVICE_URL", raising=False)
        assert HttpVisionClient.from_env() is None

        monkeypatch.setenv("VISION_SERVICE_URL", f"{BASE}/")
        with HttpVisionClient.from_env() as client:
            assert client.base_url == BASE


# ─── Enrichment ───────────────────────────────────────────────────────────────


class TestVisionConfidence:
    def test_levels(self):
        assert vision_confidence(ocr_result(IMG, "Established 1998")) == 0.9
        assert vision_confidence(VisionResult(image_url=IMG, caption="a sign", caption_success=True)) == 0.5
        assert vision_confidence(VisionResult.failed(IMG, "boom")) == 0.0
        assert vision_confidence(None) == 0.0

    def test_failed_result_passes_through(self):
        image = enriched_image(IMG, VisionResult.failed(IMG, "boom"))
        assert not image.analyzed
        assert image.vision_confidence == 0.0


class TestVisionEnrichmentAdapter:
    def test_images_enriched_in_discovery_order(self):
        urls = _urls(4)
        client = FakeVisionClient({urls[2]: ocr_result(urls[2], "Voted Best Gym 2023", colors=["#E63946"])})

        result = VisionEnrichmentAdapter(client).enrich(urls + [urls[0]], VisionOptions(concurrency=2))

        assert [img.url for img in result.images] == urls
        assert result.images[2].extracted_text == ["Voted Best Gym 2023"]
        assert result.images[2].dominant_colors == ["#E63946"]
        assert result.images[0].semantic_caption == "a photo"
        assert result.ocr_texts == [(urls[2], "Voted Best Gym 2023")]
        assert result.complete

    def test_max_images_caps_what_is_sent(self):
        urls = _urls(6)
        client = FakeVisionClient()

        result = VisionEnrichmentAdapter(client).enrich(urls, VisionOptions(max_images=2))

        assert sorted(client.calls) == sorted(urls[:2])
        assert len(result.images) == 6
        assert [img.analyzed for img in result.images] == [True, True, False, False, False, False]

    def test_each_url_analyzed_once(self):
        urls = _urls(2)
        client = FakeVisionClient()
        adapter = VisionEnrichmentAdapter(client)

        adapter.enrich(urls, VisionOptions(concurrency=1))
        adapter.enrich(urls, VisionOptions(concurrency=1))

        assert sorted(client.calls) == sorted(urls)

    def test_all_failures_are_incomplete_not_fatal(self):
        urls = _urls(3)
        result = VisionEnrichmentAdapter(FakeVisionClient(fail_all=True)).enrich(urls, VisionOptions())

        assert not result.complete
        assert [img.url for img in result.images] == urls
        assert not any(img.analyzed for img in result.images)
        assert all(r.error for r in result.vision_results)

    def test_one_failure_does_not_sink_the_batch(self):
        urls = _urls(3)
        client = FakeVisionClient({urls[1]: VisionError("boom", status_code=500)})

        result = VisionEnrichmentAdapter(client).enrich(urls, VisionOptions())

        assert [img.analyzed for img in result.images] == [True, False, True]
        assert result.complete

    def test_unavailable_service_passes_through(self):
        client = FakeVisionClient(available=False)
        result = VisionEnrichmentAdapter(client).enrich(_urls(2), VisionOptions())

        assert client.calls == []
        assert not result.complete
        assert len(result.images) == 2

    def test_failing_availability_check_passes_through(self):
        class _UnreachableVision(FakeVisionClient):
            def is_available(self) -> bool:
                raise RuntimeError("vision endpoint DNS failure")

        client = _UnreachableVision()
        result = VisionEnrichmentAdapter(client).enrich(_urls(2), VisionOptions())

        assert client.calls == []
        assert not result.complete
        assert [img.analyzed for img in result.images] == [False, False]

    def test_no_client(self):
        result = VisionEnrichmentAdapter(None).enrich(_urls(2), VisionOptions())
        assert not result.complete
        assert result.vision_results == []

    def test_all_features_disabled(self):
        client = FakeVisionClient()
        options = VisionOptions(enable_ocr=False, enable_colors=False, enable_captions=False)

        result = VisionEnrichmentAdapter(client).enrich(_urls(2), options)

        assert client.calls == []
        assert not result.complete

    def test_no_images(self):
        result = VisionEnrichmentAdapter(FakeVisionClient()).enrich([], VisionOptions())
        assert result.images == []
        assert not result.complete
