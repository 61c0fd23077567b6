"""XPath text extraction from a single page load.

Every call walks the same sequence of stages:

    NAVIGATE → WAIT → READ → RELEASE

- NAVIGATE: open a fresh context/page and load the URL (no navigation
  timeout by default; valuation pages can be very slow).
- WAIT: wait for the XPath to match. A timeout is logged and ignored, the
  node may already be in the static markup.
- READ: evaluate the XPath against the live document and take the first
  node's textContent. Attribute nodes work too (``//object/@data``), which
  Playwright's own selector engine cannot return.
- RELEASE: close the context on every path.

Any fault in NAVIGATE/WAIT/READ takes a full-page screenshot into the
snapshot directory and turns the result into ``None``. Callers only ever
see a string or ``None``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

from playwright.async_api import Page, BrowserContext, TimeoutError as PlaywrightTimeoutError
from playwright_stealth import Stealth

from src.common.config import ScraperSettings

logger = logging.getLogger(__name__)

NODE_EXISTS_JS = """(xpath) => document.evaluate(
    xpath, document, null, XPathResult.FIRST_ORDERED_NODE_TYPE, null
).singleNodeValue !== null"""

NODE_TEXT_JS = """(xpath) => {
    const node = document.evaluate(
        xpath, document, null, XPathResult.FIRST_ORDERED_NODE_TYPE, null
    ).singleNodeValue;
    return node ? node.textContent : null;
}"""


class ContextFactory(Protocol):
    async def new_context(self, **options) -> BrowserContext: ...


class FetchStage(str, Enum):
    """Stages of one extraction, in order."""
    NAVIGATE = "navigate"
    WAIT = "wait"
    READ = "read"
    RELEASE = "release"


@dataclass
class ExtractionAttempt:
    """Record of a single extract() call."""
    url: str
    locator: str
    stage: FetchStage = FetchStage.NAVIGATE
    value: Optional[str] = None
    wait_timed_out: bool = False
    fault: Optional[str] = None
    failed_stage: Optional[FetchStage] = None
    snapshot_path: Optional[Path] = None
    released: bool = False

    @property
    def found(self) -> bool:
        return self.value is not None


class PageFetcher:
    """Extracts text at an XPath from a URL using the shared browser."""

    def __init__(self, browser: ContextFactory, settings: ScraperSettings | None = None):
        self._browser = browser
        self.settings = settings or ScraperSettings()

    async def extract(self, url: str, locator: str) -> str | None:
        """Return the text at ``locator`` on ``url``, or None if absent."""
        attempt = await self.run(url, locator)
        return attempt.value

    async def run(self, url: str, locator: str) -> ExtractionAttempt:
        """Run all stages for one URL and return the full attempt record."""
        attempt = ExtractionAttempt(url=url, locator=locator)
        context: Optional[BrowserContext] = None
        page: Optional[Page] = None

        try:
            context = await self._browser.new_context(**self._context_options())
            page = await context.new_page()
            if self.settings.stealth:
                await Stealth().apply_stealth_async(page)

            await self._navigate(page, attempt)
            await self._wait_for_node(page, attempt)
            await self._read_content(page, attempt)
        except Exception as e:
            attempt.value = None
            attempt.fault = f"{type(e).__name__}: {e}"
            attempt.failed_stage = attempt.stage
            logger.error(
                "Error pulling xpath (%s) from page (%s) during %s: %s",
                locator, url, attempt.stage.value, e,
            )
            if page is not None:
                attempt.snapshot_path = await self._capture_snapshot(page)
        finally:
            await self._release(context, attempt)

        return attempt

    # --- Stages ---

    async def _navigate(self, page: Page, attempt: ExtractionAttempt):
        attempt.stage = FetchStage.NAVIGATE
        logger.debug("Navigating to %s", attempt.url)
        await page.goto(attempt.url, timeout=self.settings.navigation_timeout_ms)

    async def _wait_for_node(self, page: Page, attempt: ExtractionAttempt):
        attempt.stage = FetchStage.WAIT
        try:
            await page.wait_for_function(
                NODE_EXISTS_JS,
                arg=attempt.locator,
                timeout=self.settings.wait_timeout_ms,
            )
        except PlaywrightTimeoutError:
            attempt.wait_timed_out = True
            logger.warning(
                "wait for xpath was not successful: %s (%s)", attempt.locator, attempt.url
            )

    async def _read_content(self, page: Page, attempt: ExtractionAttempt):
        attempt.stage = FetchStage.READ
        text = await page.evaluate(NODE_TEXT_JS, attempt.locator)
        if isinstance(text, str) and text.strip():
            attempt.value = text.strip()
        else:
            attempt.value = None
            logger.debug("No content at %s on %s", attempt.locator, attempt.url)

    async def _release(self, context: Optional[BrowserContext], attempt: ExtractionAttempt):
        attempt.stage = FetchStage.RELEASE
        if context is None:
            return
        try:
            await context.close()
            attempt.released = True
        except Exception as e:
            logger.warning("Failed to close browser context for %s: %s", attempt.url, e)

    # --- Helpers ---

    def _context_options(self) -> dict:
        options: dict = {}
        if self.settings.user_agent:
            options["user_agent"] = self.settings.user_agent
        return options

    async def _capture_snapshot(self, page: Page) -> Path | None:
        """Save a full-page screenshot for debugging a failed extraction."""
        snapshot_dir = Path(self.settings.snapshot_dir)
        path = snapshot_dir / f"xpath-error-{int(time.time() * 1000)}.png"
        try:
            snapshot_dir.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path), full_page=True)
            logger.info("Screenshot saved: %s", path)
            return path
        except Exception as e:
            logger.warning("Screenshot failed: %s", e)
            return None
