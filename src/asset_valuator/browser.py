"""Shared headless Chromium session.

One browser is launched per run and closed at the end. Each extraction asks
the session for a fresh context, so no cookies or navigation state leak
between pages.

On a Raspberry Pi the bundled Playwright Chromium does not run, so the
system package at /usr/bin/chromium is used instead (with --no-sandbox).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Playwright

from src.common.config import ScraperSettings

logger = logging.getLogger(__name__)

PI_MODEL_PATH = Path("/proc/device-tree/model")
PI_CHROMIUM_PATH = "/usr/bin/chromium"


def is_raspberry_pi(model_path: Path = PI_MODEL_PATH) -> bool:
    """Detect a Raspberry Pi from the device-tree model string."""
    try:
        model = model_path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return False
    return "raspberry pi" in model.lower()


def build_launch_options(
    settings: ScraperSettings, on_pi: Optional[bool] = None
) -> dict:
    """Assemble chromium.launch() keyword arguments for this platform."""
    if on_pi is None:
        on_pi = is_raspberry_pi()

    args: list[str] = []
    executable_path = settings.executable_path

    if on_pi:
        executable_path = executable_path or PI_CHROMIUM_PATH
        args.append("--no-sandbox")

    options: dict = {"headless": settings.headless, "args": args}
    if executable_path:
        options["executable_path"] = executable_path
    return options


class BrowserSession:
    """Owns the Playwright driver and the single Chromium instance for a run."""

    def __init__(self, settings: ScraperSettings | None = None):
        self.settings = settings or ScraperSettings()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    # --- Lifecycle ---

    async def start(self):
        """Launch Chromium (headless unless configured otherwise)."""
        options = build_launch_options(self.settings)
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(**options)
        logger.info(
            "Chromium launched (headless=%s, executable=%s)",
            options["headless"], options.get("executable_path", "bundled"),
        )

    async def stop(self):
        """Close the browser and stop the Playwright driver."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser closed")

    async def __aenter__(self) -> BrowserSession:
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()

    # --- Contexts ---

    async def new_context(self, **options) -> BrowserContext:
        """Open an isolated browser context (fresh cookies and storage)."""
        if self._browser is None:
            raise RuntimeError("Browser session not started")
        return await self._browser.new_context(**options)
