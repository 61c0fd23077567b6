"""CLI entry point for the asset valuator.

Scrapes current values for every asset in the registry and pushes them to
Lunch Money as balance updates.

Usage:
    LUNCH_MONEY_API_KEY=... python -m src.asset_valuator.main
    python -m src.asset_valuator.main --assets ~/assets.json --verbose

The registry path defaults to $ASSET_PATH, then ./assets.json.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from src.common.config import Settings, get_assets_path, get_lunch_money_api_key
from src.common.logging import setup_logging

from .browser import BrowserSession
from .ledger import LunchMoneyClient
from .models import AssetDescriptor, RunSummary
from .orchestrator import AssetOrchestrator
from .page_fetcher import PageFetcher
from .registry import RegistryError, load_registry

# Named explicitly: under `python -m` __name__ is "__main__"
logger = logging.getLogger("src.asset_valuator.main")


async def run(
    assets: list[AssetDescriptor],
    ledger: LunchMoneyClient,
    settings: Settings,
) -> RunSummary:
    """Value all assets with one shared browser session."""
    async with BrowserSession(settings.scraper) as browser:
        fetcher = PageFetcher(browser, settings.scraper)
        orchestrator = AssetOrchestrator(fetcher, ledger, settings=settings)
        return await orchestrator.run(assets)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Update Lunch Money asset balances from KBB/Zillow/Redfin valuations"
    )
    parser.add_argument(
        "--assets",
        help="Path to the asset registry JSON (default: $ASSET_PATH or ./assets.json)",
    )
    parser.add_argument(
        "--headful", action="store_true",
        help="Show the browser window (default: headless)",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        token = get_lunch_money_api_key()
    except ValueError as e:
        logger.error("Lunch Money API key not set: %s", e)
        return 1

    logger.info("Updating price data %s", datetime.now().isoformat(timespec="seconds"))

    assets_path = Path(args.assets) if args.assets else get_assets_path()
    try:
        assets = load_registry(assets_path)
    except RegistryError as e:
        logger.error("%s", e)
        return 1

    settings = Settings.load()
    if args.headful:
        settings.scraper.headless = False

    with LunchMoneyClient(token, settings.ledger) as ledger:
        summary = asyncio.run(run(assets, ledger, settings))

    logger.info(
        "assets updated (%d/%d, %d skipped, %d failed)",
        len(summary.updated), summary.total, len(summary.skipped), len(summary.failed),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
