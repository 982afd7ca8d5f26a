"""
Fare Calculator - pure pricing rule

fare = base fare x category multiplier x route multiplier, rounded half-up to cents.
"""

from decimal import ROUND_HALF_UP, Decimal

from bus_reservation.platform.exception.exceptions import InvalidInputError
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory


CENTS = Decimal('0.01')
DEFAULT_MULTIPLIER = Decimal('1.0')


def category_multiplier(category: BusCategory) -> Decimal:
    match category:
        case BusCategory.LUXURY:
            return Decimal('1.5')
        case BusCategory.STANDARD:
            return Decimal('1.0')
        case BusCategory.ECONOMY:
            return Decimal('0.8')
        case BusCategory.UNCLASSIFIED:
            Logger.base.warning(
                '⚠️ [FARE] Pricing a bus with an unclassified category at 1.0x, '
                'fix the bus record'
            )
            return DEFAULT_MULTIPLIER


def calculate_fare(
    *, base_fare: Decimal, category: BusCategory, route_multiplier: Decimal
) -> Decimal:
    if base_fare <= 0:
        raise InvalidInputError('Base fare must be positive')
    if route_multiplier <= 0:
        raise InvalidInputError('Route fare multiplier must be positive')

    fare = base_fare * category_multiplier(category) * route_multiplier
    return fare.quantize(CENTS, rounding=ROUND_HALF_UP)
