"""Kelley Blue Book vehicle valuation.

KBB does not render the price in the page DOM. The price advisor widget is
an <object> whose ``data`` attribute points at an SVG document, and the
price is a <text> element inside that SVG. So the value takes two fetches:
first the SVG URL, then the text from the SVG itself.
"""

from __future__ import annotations

import logging

from src.common.config import LocatorSettings, VehicleSettings

from ..mileage import project_mileage, rewrite_mileage
from ..models import AssetDescriptor
from ..page_fetcher import PageFetcher
from .base import ValuationStrategy

logger = logging.getLogger(__name__)


class VehicleValuationStrategy(ValuationStrategy):
    """Values a vehicle from its KBB price advisor page."""

    def __init__(
        self,
        fetcher: PageFetcher,
        locators: LocatorSettings | None = None,
        vehicle_settings: VehicleSettings | None = None,
    ) -> None:
        super().__init__(fetcher, locators)
        self.vehicle_settings = vehicle_settings or VehicleSettings()

    def working_url(self, asset: AssetDescriptor) -> str:
        """Return the valuation URL with the mileage parameter brought up to date."""
        if not asset.has_mileage_context:
            return asset.url

        yearly = asset.yearly_mileage
        if yearly is None:
            yearly = self.vehicle_settings.default_yearly_mileage

        mileage = project_mileage(asset.mileage_start, asset.mileage_date, yearly)
        return rewrite_mileage(asset.url, mileage)

    async def valuate(self, asset: AssetDescriptor) -> float | None:
        # Work on a copy so the registry entry keeps its original URL
        working = asset.model_copy(update={"url": self.working_url(asset)})

        svg_url = await self.fetcher.extract(working.url, self.locators.kbb_price_document)
        if not svg_url:
            logger.warning("could not find svg path for %s", working.url)
            return None

        price_text = await self.fetcher.extract(svg_url, self.locators.kbb_price_text)
        if not price_text:
            logger.warning("could not find kbb price on svg %s", svg_url)
            return None

        price = self._parse_price(price_text, "kbb")
        if price is None:
            return None

        if asset.adjustment:
            logger.info("applying adjustment of %s", asset.adjustment)
            price = price + asset.adjustment

        if price < 0:
            logger.warning("adjusted price %s is negative, clamping to 0", price)
            price = 0.0

        return price
