"""Tests for the renderers that do not need a browser."""

import pytest
import requests
from conftest import SITE

from business_dna.collectors.renderer import PlaywrightRenderer, StaticRenderer, navigation_timeout_ms
from business_dna.exceptions import RenderError


def _response(status: int = 200, body: str = "", content_type: str = "text/html; charset=utf-8", url: str = SITE):
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.headers["Content-Type"] = content_type
    response.url = url
    return response


class FakeSession(requests.Session):
    """Session returning canned responses instead of touching the network."""

    def __init__(self, response=None, error=None):
        super().__init__()
        self.response = response
        self.error = error
        self.requested = []

    def get(self, url, **kwargs):
        self.requested.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


class TestStaticRenderer:
    def test_render_collects_assets(self):
        html = (
            '<html><body><img src="/images/hero.jpg"><img src="/images/hero.jpg">'
            '<img src="data:image/png;base64,AAAA"><a href="/about">About</a></body></html>'
        )
        session = FakeSession(_response(body=html, url=f"{SITE}/home"))
        page = StaticRenderer(session=session).render(SITE, timeout=5)

        assert page.final_url == f"{SITE}/home"
        assert page.image_urls == [f"{SITE}/images/hero.jpg"]
        assert page.link_urls == [f"{SITE}/about"]
        assert page.css_colors == []
        assert session.requested[0][1]["timeout"] == 5

    def test_http_error(self):
        renderer = StaticRenderer(session=FakeSession(_response(status=404)))
        with pytest.raises(RenderError, match="404"):
            renderer.render(f"{SITE}/missing", timeout=5)

    def test_connection_error(self):
        renderer = StaticRenderer(session=FakeSession(error=requests.ConnectionError("refused")))
        with pytest.raises(RenderError) as exc_info:
            renderer.render(SITE, timeout=5)
        assert exc_info.value.url == SITE

    def test_non_html_rejected(self):
        renderer = StaticRenderer(session=FakeSession(_response(body="%PDF", content_type="application/pdf")))
        with pytest.raises(RenderError, match="Not an HTML page"):
            renderer.render(f"{SITE}/menu", timeout=5)


class TestPlaywrightRenderer:
    def test_unavailable_browser_raises_render_error(self):
        renderer = PlaywrightRenderer()
        renderer._available = False

        with pytest.raises(RenderError, match="unavailable"):
            renderer.render(SITE, timeout=5)

    def test_close_without_start(self):
        with PlaywrightRenderer() as renderer:
            pass
        assert renderer._browser is None

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(30, 30000), (2.5, 2500), (0.0004, 1), (0.0015, 2), (0, 1)],
    )
    def test_navigation_timeout_never_zero(self, seconds, expected):
        assert navigation_timeout_ms(seconds) == expected

    def test_sub_millisecond_budget_still_bounds_navigation(self):
        page = _FakeBrowserPage()
        renderer = PlaywrightRenderer()
        renderer._initialized = True
        renderer._context = _FakeBrowserContext(page)

        rendered = renderer.render(SITE, timeout=0.0002)

        assert page.goto_timeouts == [1]
        assert page.closed
        assert rendered.image_urls == [f"{SITE}/images/hero.jpg"]


class _FakeBrowserPage:
    """Just enough of a Playwright page for one render call."""

    url = SITE

    def __init__(self):
        self.goto_timeouts = []
        self.closed = False

    def goto(self, url, wait_until, timeout):
        self.goto_timeouts.append(timeout)
        return None

    def content(self):
        return "<html><body><p>Peak Fitness</p></body></html>"

    def evaluate(self, script):
        return {"images": [f"{SITE}/images/hero.jpg"], "links": [], "cssColors": [], "elementColors": []}

    def close(self):
        self.closed = True


class _FakeBrowserContext:
    def __init__(self, page):
        self.page = page

    def new_page(self):
        return self.page
