"""Vehicle mileage projection.

KBB prices depend on the odometer reading, so the last known reading is
extrapolated linearly to today and written into the valuation URL.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

from .parsing import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_YEARLY_MILEAGE = 12_000
DAYS_PER_YEAR = 365.25  # leap-year average
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60

MILEAGE_PARAM_RE = re.compile(r"mileage=\d+")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def fractional_years(since: datetime, as_of: datetime | None = None) -> float:
    """Years elapsed between two instants (negative if since is in the future)."""
    as_of = _as_utc(as_of or datetime.now(timezone.utc))
    elapsed = as_of - _as_utc(since)
    return elapsed.total_seconds() / SECONDS_PER_YEAR


def project_mileage(
    mileage_start: int,
    mileage_date: datetime,
    yearly_mileage: int | None = DEFAULT_YEARLY_MILEAGE,
    as_of: datetime | None = None,
) -> int:
    """Estimate current mileage from a dated odometer reading.

    Args:
        mileage_start: Odometer reading at mileage_date.
        mileage_date: When the reading was taken. Naive values are UTC.
        yearly_mileage: Assumed usage per year (None → 12,000).
        as_of: Instant to project to (default now).

    Returns:
        Projected mileage, rounded to the nearest integer. Not clamped, so a
        future mileage_date yields less than mileage_start.
    """
    if yearly_mileage is None:
        yearly_mileage = DEFAULT_YEARLY_MILEAGE

    years = fractional_years(mileage_date, as_of)
    logger.info("Fractional year: %s", years)

    mileage = round_half_up(mileage_start + years * yearly_mileage)
    logger.info("Adjusting mileage: %d", mileage)
    return mileage


def rewrite_mileage(url: str, mileage: int) -> str:
    """Substitute the mileage query parameter's value in a KBB URL.

    URLs without a numeric mileage parameter are returned unchanged.
    """
    if not MILEAGE_PARAM_RE.search(url):
        logger.warning("No mileage parameter in %s, leaving URL unchanged", url)
        return url
    return MILEAGE_PARAM_RE.sub(f"mileage={mileage}", url, count=1)
