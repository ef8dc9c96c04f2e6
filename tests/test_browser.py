"""Tests for Chromium rendering."""

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from conftest import make_pdf
from eml_print.attachment_handler import Attachment
from eml_print.browser import BrowserSession, RenderTimeoutError
from eml_print.config import ConversionConfig
from eml_print.html_renderer import build_email_html
from eml_print.message import ParsedMessage
from eml_print.pdf_merger import append_pdf_attachments, count_pages


def test_render_requires_start():
    with pytest.raises(RuntimeError):
        BrowserSession().render_pdf("<p>x</p>")


def test_close_without_start():
    session = BrowserSession()
    session.close()
    assert not session.is_running


class StubPage:
    """Page whose set_content raises the given error."""

    def __init__(self, error=None):
        self.error = error
        self.closed = False

    def set_default_timeout(self, timeout):
        self.timeout = timeout

    def set_content(self, html_content, wait_until=None, timeout=None):
        if self.error:
            raise self.error

    def pdf(self, **options):
        self.options = options
        return make_pdf(1)

    def close(self):
        self.closed = True


class StubBrowser:
    def __init__(self, page):
        self.page = page

    def new_page(self):
        return self.page


def session_with_page(page):
    session = BrowserSession(ConversionConfig(render_timeout=5))
    session._browser = StubBrowser(page)
    return session


class TestRenderPdf:
    """render_pdf against a stub browser."""

    def test_timeout_raises_and_closes_page(self):
        page = StubPage(PlaywrightTimeoutError("Timeout 5000ms exceeded"))

        with pytest.raises(RenderTimeoutError):
            session_with_page(page).render_pdf("<p>x</p>")

        assert page.closed

    def test_other_error_propagates_and_closes_page(self):
        page = StubPage(RuntimeError("page crashed"))

        with pytest.raises(RuntimeError, match="page crashed"):
            session_with_page(page).render_pdf("<p>x</p>")

        assert page.closed

    def test_success_closes_page(self):
        page = StubPage()

        pdf = session_with_page(page).render_pdf("<p>x</p>")

        assert pdf.startswith(b"%PDF")
        assert page.closed
        assert page.timeout == 5000
        assert page.options["format"] == "A4"
        assert page.options["print_background"] is True


@pytest.fixture(scope="module")
def chromium():
    """A real browser session, skipped where Chromium is not installed."""
    session = BrowserSession(ConversionConfig(render_timeout=30))
    try:
        session.start()
    except Exception as e:
        pytest.skip(f"Chromium unavailable: {e}")
    yield session
    session.close()


class TestChromiumRendering:
    """Rendering through a real browser."""

    def test_renders_pdf(self, chromium):
        message = ParsedMessage(
            subject="Hello",
            from_header="Jane Doe <jane@example.com>",
            to_header="john@example.com",
            html="<p>Body text</p>",
        )
        document, _ = build_email_html(message)

        pdf = chromium.render_pdf(document)

        assert pdf.startswith(b"%PDF")
        assert count_pages(pdf) >= 1

    def test_page_count_with_attachments(self, chromium):
        body = chromium.render_pdf("<html><body><p>One page</p></body></html>")
        attachments = [
            Attachment(content_type="application/pdf", content=make_pdf(2), filename="a.pdf"),
            Attachment(content_type="application/pdf", content=b"junk", filename="b.pdf"),
        ]

        merged = append_pdf_attachments(body, attachments)

        assert count_pages(merged) == count_pages(body) + 2

    def test_restart(self, chromium):
        chromium.restart()
        assert chromium.is_running
        assert chromium.render_pdf("<p>after restart</p>").startswith(b"%PDF")
