"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

DEFAULT_ASSETS_FILENAME = "assets.json"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class ScraperSettings(BaseModel):
    """Settings for the headless browser and page extraction."""
    headless: bool = True
    stealth: bool = True
    # 0 disables the navigation timeout; the node wait is the effective bound
    navigation_timeout_ms: int = 0
    wait_timeout_ms: int = 30_000
    snapshot_dir: str = Field(default_factory=tempfile.gettempdir)
    executable_path: Optional[str] = None
    user_agent: Optional[str] = None


class LocatorSettings(BaseModel):
    """XPath locators for each valuation source."""
    # KBB embeds its price widget as an <object> pointing at an SVG document
    kbb_price_document: str = "//object/@data"
    # 4th text node of the range box; positional, breaks if KBB reorders bands
    kbb_price_text: str = "//*[@id='RangeBox']/*[name()='text'][4]"
    zillow_home_value: str = (
        '//*[@id="home-details-home-values"]/div/div[1]/div/div/div[1]/div/p/h3'
    )
    redfin_home_value: str = (
        '//*[@data-rf-test-id="abp-price"]/div[@class="statsValue"]'
    )


class VehicleSettings(BaseModel):
    """Defaults for vehicle mileage projection."""
    default_yearly_mileage: int = 12_000


class LedgerSettings(BaseModel):
    """Lunch Money API settings."""
    base_url: str = "https://dev.lunchmoney.app/v1"
    request_timeout: int = 30


class Settings(BaseModel):
    """Top-level application settings."""
    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    locators: LocatorSettings = Field(default_factory=LocatorSettings)
    vehicle: VehicleSettings = Field(default_factory=VehicleSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)

    @classmethod
    def load(cls) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


def get_lunch_money_api_key() -> str:
    """Get Lunch Money API key from environment."""
    key = os.getenv("LUNCH_MONEY_API_KEY", "")
    if not key:
        raise ValueError("LUNCH_MONEY_API_KEY not set in environment")
    return key


def get_assets_path() -> Path:
    """Resolve the asset registry path (ASSET_PATH, else ./assets.json)."""
    path = os.getenv("ASSET_PATH", "")
    if path:
        return Path(path)
    return Path.cwd() / DEFAULT_ASSETS_FILENAME


# Singleton settings instance
settings = Settings.load()
