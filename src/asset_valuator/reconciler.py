"""Combine independent price readings into one valuation."""

from __future__ import annotations

from typing import Iterable, Optional

from .parsing import is_usable, round_half_up


def reconcile(readings: Iterable[Optional[float]]) -> float | None:
    """Reduce price readings to a single figure.

    Unusable readings (None, NaN or infinite) are dropped. A single remaining
    reading is returned unchanged; several are averaged and rounded to an
    integer.
    Returns None when nothing usable remains.
    """
    usable = [r for r in readings if is_usable(r)]
    if not usable:
        return None
    if len(usable) == 1:
        return usable[0]
    return round_half_up(sum(usable) / len(usable))
