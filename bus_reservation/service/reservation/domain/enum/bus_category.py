"""
Bus category - closed set of service classes used for pricing

UNCLASSIFIED only appears for legacy rows whose stored category no longer parses;
new buses must pick one of the priced categories.
"""

from enum import StrEnum

from bus_reservation.platform.logging.loguru_io import Logger


class BusCategory(StrEnum):
    ECONOMY = 'economy'
    STANDARD = 'standard'
    LUXURY = 'luxury'
    UNCLASSIFIED = 'unclassified'

    @classmethod
    def parse(cls, raw: str | None) -> 'BusCategory':
        """Map a stored value to a category, falling back to UNCLASSIFIED for unknown values."""
        try:
            return cls((raw or '').strip().lower())
        except ValueError:
            Logger.base.warning(f'⚠️ [DATA] Unknown bus category {raw!r}, treating as unclassified')
            return cls.UNCLASSIFIED

    @classmethod
    def priced(cls) -> list['BusCategory']:
        return [category for category in cls if category is not cls.UNCLASSIFIED]
