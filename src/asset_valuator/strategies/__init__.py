"""Valuation strategies, one per source kind."""

from .base import ValuationStrategy
from .property import PropertyValuationStrategy
from .vehicle import VehicleValuationStrategy

__all__ = [
    "ValuationStrategy",
    "PropertyValuationStrategy",
    "VehicleValuationStrategy",
]
