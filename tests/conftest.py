"""Shared test fixtures for Asset Valuator."""

import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from src.common.config import ScraperSettings


# --- Browser doubles ---
#
# Documents are modeled as {url: {xpath: text}}. A locator missing from a
# URL's document makes wait_for_function time out and evaluate return None,
# as a real page would.


class FakePage:
    def __init__(self, browser: "FakeBrowser"):
        self._browser = browser
        self.url = None
        self.screenshots: list[tuple[str, bool]] = []

    async def goto(self, url, timeout=None):
        self._browser.goto_calls.append((url, timeout))
        if url in self._browser.goto_errors:
            raise self._browser.goto_errors[url]
        self.url = url

    async def wait_for_function(self, expression, arg=None, timeout=None):
        self._browser.wait_calls.append((arg, timeout))
        if self._browser.always_timeout or arg not in self._browser.documents.get(self.url, {}):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def evaluate(self, expression, arg=None):
        if self.url in self._browser.evaluate_errors:
            raise self._browser.evaluate_errors[self.url]
        return self._browser.documents.get(self.url, {}).get(arg)

    async def screenshot(self, path=None, full_page=False):
        if self._browser.screenshot_error:
            raise self._browser.screenshot_error
        self.screenshots.append((path, full_page))
        self._browser.screenshots.append(path)


class FakeContext:
    def __init__(self, browser: "FakeBrowser", options: dict):
        self._browser = browser
        self.options = options
        self.pages: list[FakePage] = []
        self.closed = False

    async def new_page(self):
        page = FakePage(self._browser)
        self.pages.append(page)
        return page

    async def close(self):
        self.closed = True


class FakeBrowser:
    """Stands in for BrowserSession: hands out FakeContexts."""

    def __init__(
        self,
        documents: dict | None = None,
        goto_errors: dict | None = None,
        evaluate_errors: dict | None = None,
        screenshot_error: Exception | None = None,
        always_timeout: bool = False,
    ):
        self.documents = documents or {}
        self.goto_errors = goto_errors or {}
        self.evaluate_errors = evaluate_errors or {}
        self.screenshot_error = screenshot_error
        self.always_timeout = always_timeout
        self.contexts: list[FakeContext] = []
        self.goto_calls: list[tuple[str, int]] = []
        self.wait_calls: list[tuple[str, int]] = []
        self.screenshots: list[str] = []

    async def new_context(self, **options):
        context = FakeContext(self, options)
        self.contexts.append(context)
        return context


class FakeFetcher:
    """Stands in for PageFetcher: returns canned values per (url, locator)."""

    def __init__(self, values: dict | None = None):
        self.values = values or {}
        self.calls: list[tuple[str, str]] = []

    async def extract(self, url, locator):
        self.calls.append((url, locator))
        return self.values.get((url, locator))


class FakeLedger:
    def __init__(self, fail_ids: set | None = None):
        self.fail_ids = fail_ids or set()
        self.updates: list[tuple[int, float]] = []

    def update_asset_balance(self, asset_id, amount):
        self.updates.append((asset_id, amount))
        return asset_id not in self.fail_ids


# --- Fixtures ---


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def scraper_settings(tmp_path) -> ScraperSettings:
    """Scraper settings with stealth off and snapshots under tmp_path."""
    return ScraperSettings(
        stealth=False,
        wait_timeout_ms=50,
        snapshot_dir=str(tmp_path / "snapshots"),
    )


@pytest.fixture
def make_browser():
    return FakeBrowser


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def make_ledger():
    return FakeLedger


@pytest.fixture
def sample_registry() -> dict:
    """Registry JSON with one vehicle, one property, one unsupported asset."""
    return {
        "1001": {
            "url": "https://www.kbb.com/honda/civic/2020/?intent=trade-in-sell&mileage=30000",
            "adjustment": -1500,
            "mileageStart": 30000,
            "mileageDate": "2024-01-01",
        },
        "1002": {
            "url": "https://www.zillow.com/homedetails/1-Main-St/111_zpid/",
            "redfin": "https://www.redfin.com/CA/Town/1-Main-St/home/222",
        },
        "1003": {
            "url": "https://www.edmunds.com/honda/civic/2020/appraisal/",
        },
    }
