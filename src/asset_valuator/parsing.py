"""Currency text parsing."""

from __future__ import annotations

import math
import re

NON_NUMERIC_RE = re.compile(r"[^0-9.]")
LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_currency(text: str) -> float:
    """Parse a currency string like "$12,345.67" into a float.

    Everything except digits and "." is stripped, then the leading number is
    parsed ("1.2.3" reads as 1.2). Returns NaN when no digits remain.
    """
    cleaned = NON_NUMERIC_RE.sub("", text or "")
    match = LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return math.nan
    return float(match.group())


def is_usable(value: float | None) -> bool:
    """True when value is a finite number that can be sent to the ledger."""
    return value is not None and math.isfinite(value)


def round_half_up(value: float) -> int:
    """Round halves upward (2.5 -> 3, -2.5 -> -2) rather than to even."""
    return math.floor(value + 0.5)
