"""Asset registry loading.

The registry is a JSON object keyed by ledger asset id:

    {
        "12345": {"url": "https://www.kbb.com/...&mileage=30000", "adjustment": -1500},
        "67890": {"url": "https://www.zillow.com/...", "redfin": "https://www.redfin.com/..."}
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .models import AssetDescriptor, AssetKind

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Raised when the asset registry cannot be read or validated."""


def parse_registry(data: dict) -> list[AssetDescriptor]:
    """Build descriptors from a decoded registry, keeping key order.

    Entries that fail validation are logged and left out. Only a registry
    that is not a JSON object is fatal.
    """
    if not isinstance(data, dict):
        raise RegistryError("asset registry must be a JSON object keyed by asset id")

    assets = []
    for asset_id, entry in data.items():
        if not isinstance(entry, dict):
            logger.error("Skipping asset %s: entry must be an object", asset_id)
            continue
        try:
            asset = AssetDescriptor(**{**entry, "asset_id": asset_id})
        except ValidationError as e:
            logger.error("Skipping asset %s: %s", asset_id, e)
            continue

        if asset.kind == AssetKind.UNSUPPORTED:
            logger.warning("Asset %s has an unsupported source: %s", asset_id, asset.url)
        assets.append(asset)

    skipped = len(data) - len(assets)
    if skipped:
        logger.warning("%d invalid registry entries skipped", skipped)
    return assets


def load_registry(path: Path) -> list[AssetDescriptor]:
    """Load and validate the asset registry JSON file.

    Raises:
        RegistryError: If the file is missing, not JSON, or not an object.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise RegistryError(f"asset registry not found: {path}") from e
    except json.JSONDecodeError as e:
        raise RegistryError(f"asset registry is not valid JSON: {path}: {e}") from e

    assets = parse_registry(data)
    logger.info("Loaded %d assets from %s", len(assets), path)
    return assets
