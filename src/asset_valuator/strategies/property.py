"""Zillow home valuation, optionally averaged with Redfin."""

from __future__ import annotations

import logging

from ..models import AssetDescriptor
from ..reconciler import reconcile
from .base import ValuationStrategy

logger = logging.getLogger(__name__)


class PropertyValuationStrategy(ValuationStrategy):
    """Values real estate from a Zillow estimate plus an optional Redfin estimate."""

    async def valuate(self, asset: AssetDescriptor) -> float | None:
        zillow_text = await self.fetcher.extract(asset.url, self.locators.zillow_home_value)
        if not zillow_text:
            logger.warning("could not find zillow home value for %s", asset.url)
            return None

        zillow_value = self._parse_price(zillow_text, "zillow")
        if zillow_value is None:
            return None

        if not asset.secondary_url:
            return zillow_value

        redfin_text = await self.fetcher.extract(
            asset.secondary_url, self.locators.redfin_home_value
        )
        redfin_value = self._parse_price(redfin_text, "redfin")
        if redfin_value is None:
            logger.warning(
                "could not find redfin home value for %s, using zillow only",
                asset.secondary_url,
            )
            return zillow_value

        logger.info("redfin: %s, zillow: %s", redfin_text, zillow_text)
        return reconcile([zillow_value, redfin_value])
