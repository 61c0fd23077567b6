"""Data models for asset valuation.

AssetDescriptor mirrors one entry of the assets.json registry. The source
kind is resolved once when the descriptor is built, so dispatch never has to
re-match URLs.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


# === Enums ===

class AssetKind(str, Enum):
    """Valuation strategy selected by the primary URL's host."""
    VEHICLE = "vehicle"
    PROPERTY = "property"
    UNSUPPORTED = "unsupported"


# Host suffix → kind
SOURCE_DOMAINS: dict[str, AssetKind] = {
    "kbb.com": AssetKind.VEHICLE,
    "zillow.com": AssetKind.PROPERTY,
}


def classify_source(url: str) -> AssetKind:
    """Map a valuation URL to its AssetKind by host name."""
    host = (urlparse(url).hostname or "").lower()
    for domain, kind in SOURCE_DOMAINS.items():
        if host == domain or host.endswith("." + domain):
            return kind
    return AssetKind.UNSUPPORTED


# === Registry Models ===

class AssetDescriptor(BaseModel):
    """One tracked asset and where to find its value."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    asset_id: str = Field(validation_alias=AliasChoices("asset_id", "id"))
    url: str
    secondary_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("secondary_url", "secondaryUrl", "redfin"),
    )
    adjustment: Optional[float] = None
    mileage_start: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("mileage_start", "mileageStart"),
    )
    mileage_date: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("mileage_date", "mileageDate"),
    )
    yearly_mileage: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("yearly_mileage", "yearlyMileage"),
    )
    kind: AssetKind = AssetKind.UNSUPPORTED

    @field_validator("asset_id", mode="before")
    @classmethod
    def _coerce_asset_id(cls, value):
        text = str(value).strip()
        try:
            int(text)
        except ValueError:
            raise ValueError(f"asset id must be numeric, got {value!r}") from None
        return text

    @field_validator("mileage_date", mode="before")
    @classmethod
    def _parse_mileage_date(cls, value):
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min, tzinfo=timezone.utc)
        if isinstance(value, str):
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        return value

    @model_validator(mode="after")
    def _resolve_kind(self) -> AssetDescriptor:
        self.kind = classify_source(self.url)
        return self

    @property
    def ledger_id(self) -> int:
        """Numeric id expected by the ledger API."""
        return int(self.asset_id)

    @property
    def has_mileage_context(self) -> bool:
        """Projection needs both a baseline reading and its date."""
        return self.mileage_start is not None and self.mileage_date is not None


# === Run Results ===

class RunSummary(BaseModel):
    """Outcome of one batch run, by asset id."""
    updated: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    valuations: dict[str, float] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.updated) + len(self.skipped) + len(self.failed)
