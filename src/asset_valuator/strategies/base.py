"""Base class for valuation strategies.

A strategy turns one AssetDescriptor into a single price, fetching pages
through the injected PageFetcher. Returning None means "no usable value";
the orchestrator then skips the ledger update for that asset.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from src.common.config import LocatorSettings

from ..models import AssetDescriptor
from ..page_fetcher import PageFetcher
from ..parsing import is_usable, parse_currency

logger = logging.getLogger(__name__)


class ValuationStrategy(ABC):
    """Abstract base for per-source valuation strategies."""

    def __init__(self, fetcher: PageFetcher, locators: LocatorSettings | None = None) -> None:
        self.fetcher = fetcher
        self.locators = locators or LocatorSettings()

    @abstractmethod
    async def valuate(self, asset: AssetDescriptor) -> float | None:
        """Return the asset's current value, or None if it cannot be read."""
        ...

    @staticmethod
    def _parse_price(text: str | None, source: str) -> float | None:
        """Parse extracted price text, logging and returning None if unusable."""
        if text is None:
            return None
        value = parse_currency(text)
        if not is_usable(value):
            logger.warning("Could not parse %s price from %r", source, text)
            return None
        return value
