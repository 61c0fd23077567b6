"""Tests for the page fetcher state machine, using browser doubles."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from src.common.config import ScraperSettings
from src.asset_valuator.page_fetcher import FetchStage, PageFetcher

PAGE_URL = "https://www.kbb.com/honda/civic/2020/?mileage=30000"
SVG_URL = "https://www.kbb.com/price-advisor/widget.svg"
OBJECT_XPATH = "//object/@data"
PRICE_XPATH = "//*[@id='RangeBox']/*[name()='text'][4]"


class TestSuccessfulExtraction:
    def test_returns_stripped_text(self, make_browser, scraper_settings):
        browser = make_browser(documents={SVG_URL: {PRICE_XPATH: "  $25,000 \n"}})
        fetcher = PageFetcher(browser, scraper_settings)

        assert asyncio.run(fetcher.extract(SVG_URL, PRICE_XPATH)) == "$25,000"

    def test_attribute_locator(self, make_browser, scraper_settings):
        browser = make_browser(documents={PAGE_URL: {OBJECT_XPATH: SVG_URL}})
        fetcher = PageFetcher(browser, scraper_settings)

        assert asyncio.run(fetcher.extract(PAGE_URL, OBJECT_XPATH)) == SVG_URL

    def test_attempt_record(self, make_browser, scraper_settings):
        browser = make_browser(documents={SVG_URL: {PRICE_XPATH: "$25,000"}})
        fetcher = PageFetcher(browser, scraper_settings)

        attempt = asyncio.run(fetcher.run(SVG_URL, PRICE_XPATH))
        assert attempt.found
        assert attempt.stage == FetchStage.RELEASE
        assert attempt.released
        assert not attempt.wait_timed_out
        assert attempt.fault is None
        assert attempt.snapshot_path is None

    def test_navigation_uses_configured_timeouts(self, make_browser, scraper_settings):
        browser = make_browser(documents={SVG_URL: {PRICE_XPATH: "$1"}})
        fetcher = PageFetcher(browser, scraper_settings)
        asyncio.run(fetcher.extract(SVG_URL, PRICE_XPATH))

        assert browser.goto_calls == [(SVG_URL, 0)]
        assert browser.wait_calls == [(PRICE_XPATH, 50)]

    def test_fresh_context_per_call(self, make_browser, scraper_settings):
        browser = make_browser(documents={
            PAGE_URL: {OBJECT_XPATH: SVG_URL},
            SVG_URL: {PRICE_XPATH: "$25,000"},
        })
        fetcher = PageFetcher(browser, scraper_settings)

        asyncio.run(fetcher.extract(PAGE_URL, OBJECT_XPATH))
        asyncio.run(fetcher.extract(SVG_URL, PRICE_XPATH))

        assert len(browser.contexts) == 2
        assert all(c.closed for c in browser.contexts)
        assert all(len(c.pages) == 1 for c in browser.contexts)

    def test_user_agent_passed_to_context(self, make_browser, tmp_path):
        settings = ScraperSettings(stealth=False, user_agent="TestAgent/1.0", snapshot_dir=str(tmp_path))
        browser = make_browser()
        asyncio.run(PageFetcher(browser, settings).extract(PAGE_URL, OBJECT_XPATH))

        assert browser.contexts[0].options == {"user_agent": "TestAgent/1.0"}


class TestAbsence:
    def test_missing_node_times_out_and_returns_none(self, make_browser, scraper_settings):
        browser = make_browser(documents={PAGE_URL: {}})
        fetcher = PageFetcher(browser, scraper_settings)

        attempt = asyncio.run(fetcher.run(PAGE_URL, OBJECT_XPATH))
        assert attempt.value is None
        assert attempt.wait_timed_out
        assert attempt.fault is None
        assert attempt.snapshot_path is None
        assert browser.contexts[0].closed

    def test_wait_timeout_still_reads_content(self, make_browser, scraper_settings):
        """A timed-out wait proceeds to the read; static markup may hold the node."""
        browser = make_browser(
            documents={SVG_URL: {PRICE_XPATH: "$25,000"}}, always_timeout=True,
        )
        fetcher = PageFetcher(browser, scraper_settings)

        attempt = asyncio.run(fetcher.run(SVG_URL, PRICE_XPATH))
        assert attempt.wait_timed_out
        assert attempt.value == "$25,000"

    def test_blank_content_is_absent(self, make_browser, scraper_settings):
        browser = make_browser(documents={SVG_URL: {PRICE_XPATH: "   "}})
        fetcher = PageFetcher(browser, scraper_settings)

        assert asyncio.run(fetcher.extract(SVG_URL, PRICE_XPATH)) is None


class TestFaults:
    def test_evaluation_fault_snapshots_and_returns_none(self, make_browser, scraper_settings):
        browser = make_browser(
            documents={PAGE_URL: {OBJECT_XPATH: SVG_URL}},
            evaluate_errors={PAGE_URL: RuntimeError("Execution context was destroyed")},
        )
        fetcher = PageFetcher(browser, scraper_settings)

        attempt = asyncio.run(fetcher.run(PAGE_URL, OBJECT_XPATH))
        assert attempt.value is None
        assert attempt.failed_stage == FetchStage.READ
        assert "Execution context was destroyed" in attempt.fault
        assert attempt.snapshot_path is not None
        assert attempt.snapshot_path.parent == Path(scraper_settings.snapshot_dir)
        assert attempt.snapshot_path.name.startswith("xpath-error-")
        assert attempt.snapshot_path.suffix == ".png"
        assert browser.contexts[0].pages[0].screenshots == [(str(attempt.snapshot_path), True)]
        assert browser.contexts[0].closed

    def test_navigation_fault_is_contained(self, make_browser, scraper_settings):
        browser = make_browser(goto_errors={PAGE_URL: RuntimeError("net::ERR_NAME_NOT_RESOLVED")})
        fetcher = PageFetcher(browser, scraper_settings)

        attempt = asyncio.run(fetcher.run(PAGE_URL, OBJECT_XPATH))
        assert attempt.value is None
        assert attempt.failed_stage == FetchStage.NAVIGATE
        assert attempt.snapshot_path is not None
        assert browser.wait_calls == []
        assert browser.contexts[0].closed

    def test_screenshot_failure_does_not_propagate(self, make_browser, scraper_settings):
        browser = make_browser(
            evaluate_errors={PAGE_URL: RuntimeError("boom")},
            screenshot_error=RuntimeError("Target closed"),
        )
        fetcher = PageFetcher(browser, scraper_settings)

        attempt = asyncio.run(fetcher.run(PAGE_URL, OBJECT_XPATH))
        assert attempt.value is None
        assert attempt.snapshot_path is None
        assert browser.contexts[0].closed

    def test_context_close_failure_is_logged(self, make_browser, scraper_settings):
        browser = make_browser(documents={SVG_URL: {PRICE_XPATH: "$1"}})
        fetcher = PageFetcher(browser, scraper_settings)

        async def failing_close():
            raise RuntimeError("already closed")

        async def scenario():
            context = await browser.new_context()
            context.close = failing_close
            browser.new_context = AsyncMock(return_value=context)
            return await fetcher.run(SVG_URL, PRICE_XPATH)

        attempt = asyncio.run(scenario())
        assert attempt.value == "$1"
        assert not attempt.released


class TestStealth:
    def test_stealth_applied_per_page(self, make_browser, tmp_path):
        settings = ScraperSettings(stealth=True, snapshot_dir=str(tmp_path))
        browser = make_browser(documents={SVG_URL: {PRICE_XPATH: "$1"}})

        stealth = MagicMock()
        stealth.apply_stealth_async = AsyncMock()
        with patch("src.asset_valuator.page_fetcher.Stealth", return_value=stealth):
            asyncio.run(PageFetcher(browser, settings).extract(SVG_URL, PRICE_XPATH))

        stealth.apply_stealth_async.assert_awaited_once_with(browser.contexts[0].pages[0])
