"""Headless Chromium rendering through Playwright."""

import logging
from typing import Optional

from playwright.sync_api import (
    Browser,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    sync_playwright,
)

from .config import ConversionConfig

logger = logging.getLogger(__name__)


class RenderTimeoutError(RuntimeError):
    """Raised when loading a document exceeds the render timeout."""


class BrowserSession:
    """
    A long-lived Chromium instance shared across conversions.

    Each call to render_pdf() uses its own page, closed afterwards whether or
    not rendering succeeded. Use as a context manager so the browser is shut
    down on every exit path.
    """

    def __init__(self, config: Optional[ConversionConfig] = None) -> None:
        self.config = config or ConversionConfig()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    def __enter__(self) -> "BrowserSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    def start(self) -> None:
        """Launch the Playwright driver and Chromium."""
        if self.is_running:
            return

        logger.info("Launching browser...")
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(
                headless=self.config.headless,
                executable_path=self.config.browser_executable,
            )
        except Exception:
            self._playwright.stop()
            self._playwright = None
            raise

    def close(self) -> None:
        """Shut down Chromium and the Playwright driver."""
        try:
            if self._browser is not None:
                self._browser.close()
                logger.info("Browser closed")
        finally:
            self._browser = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None

    def restart(self) -> None:
        """Relaunch the browser to release memory accumulated over a batch."""
        logger.info("Restarting browser to free memory...")
        self.close()
        self.start()

    def render_pdf(self, html_content: str) -> bytes:
        """
        Print an HTML document to PDF.

        Args:
            html_content: Self-contained HTML document

        Returns:
            PDF bytes

        Raises:
            RenderTimeoutError: if loading the document takes too long
                (the PDF export itself is not bounded)
        """
        if self._browser is None:
            raise RuntimeError("BrowserSession not started")

        page = self._browser.new_page()
        try:
            page.set_default_timeout(self.config.render_timeout_ms)
            page.set_content(
                html_content,
                wait_until="domcontentloaded",
                timeout=self.config.render_timeout_ms,
            )
            return page.pdf(
                format=self.config.get_page_format(),
                print_background=True,
                margin=self.config.get_margins(),
                prefer_css_page_size=False,
                display_header_footer=False,
            )
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(
                f"Rendering exceeded {self.config.render_timeout:g}s"
            ) from e
        finally:
            page.close()
