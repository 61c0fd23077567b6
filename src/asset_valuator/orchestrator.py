"""Batch valuation run over the asset registry."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Protocol

from src.common.config import Settings

from .models import AssetDescriptor, AssetKind, RunSummary
from .page_fetcher import PageFetcher
from .strategies import (
    PropertyValuationStrategy,
    ValuationStrategy,
    VehicleValuationStrategy,
)

logger = logging.getLogger(__name__)


class Ledger(Protocol):
    def update_asset_balance(self, asset_id: int, amount: float) -> bool: ...


def default_strategies(
    fetcher: PageFetcher, settings: Settings
) -> dict[AssetKind, ValuationStrategy]:
    """Build the strategy table for every supported AssetKind."""
    return {
        AssetKind.VEHICLE: VehicleValuationStrategy(
            fetcher, settings.locators, settings.vehicle
        ),
        AssetKind.PROPERTY: PropertyValuationStrategy(fetcher, settings.locators),
    }


class AssetOrchestrator:
    """Values each asset in turn and pushes the result to the ledger.

    Assets are processed strictly in registry order, one at a time. A
    failure in one asset is logged and recorded, never raised.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        ledger: Ledger,
        strategies: Mapping[AssetKind, ValuationStrategy] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.ledger = ledger
        if strategies is None:
            strategies = default_strategies(fetcher, settings or Settings())
        self.strategies = dict(strategies)

    async def run(self, assets: Iterable[AssetDescriptor]) -> RunSummary:
        summary = RunSummary()
        for asset in assets:
            await self.process(asset, summary)

        logger.info(
            "Run complete: %d updated, %d skipped, %d failed",
            len(summary.updated), len(summary.skipped), len(summary.failed),
        )
        return summary

    async def process(self, asset: AssetDescriptor, summary: RunSummary) -> None:
        """Value one asset and record the outcome in summary."""
        strategy = self.strategies.get(asset.kind)
        if strategy is None:
            logger.error("unsupported asset type: %s (%s)", asset.asset_id, asset.url)
            summary.skipped.append(asset.asset_id)
            return

        logger.info("--- Asset %s (%s) ---", asset.asset_id, asset.kind.value)
        try:
            value = await strategy.valuate(asset)
        except Exception:
            logger.exception("Valuation failed for asset %s", asset.asset_id)
            summary.failed.append(asset.asset_id)
            return

        if value is None:
            summary.skipped.append(asset.asset_id)
            return

        summary.valuations[asset.asset_id] = value
        if self.ledger.update_asset_balance(asset.ledger_id, value):
            summary.updated.append(asset.asset_id)
        else:
            summary.failed.append(asset.asset_id)
