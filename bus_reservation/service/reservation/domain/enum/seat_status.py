from enum import StrEnum


class SeatStatus(StrEnum):
    """Occupancy state of one seat on one travel date"""

    AVAILABLE = 'available'
    OCCUPIED = 'occupied'
    BLOCKED = 'blocked'
