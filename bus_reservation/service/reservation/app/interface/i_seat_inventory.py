from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from bus_reservation.service.reservation.domain.entity.booking_entity import Booking
from bus_reservation.service.reservation.domain.entity.seat_entity import SeatLayout


class ISeatInventory(ABC):
    """Per-bus, per-travel-date seat occupancy"""

    @abstractmethod
    async def is_available(self, *, bus_id: int, seat_number: int, travel_date: date) -> bool:
        pass

    @abstractmethod
    async def occupy(
        self, *, bus_id: int, seat_number: int, travel_date: date, booking_id: UUID
    ) -> None:
        """
        Raises:
            SeatOutOfRangeError: seat number outside [1, total_seats]
            SeatUnavailableError: seat already occupied or blocked for that date
        """
        pass

    @abstractmethod
    async def release(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        """
        Raises:
            SeatNotOccupiedError: nothing to release
        """
        pass

    @abstractmethod
    async def available_count(self, *, bus_id: int, travel_date: date) -> int:
        """
        total_seats minus every occupancy row, Occupied and Blocked alike.
        With no Blocked seats this is total_seats minus Confirmed bookings.
        """
        pass

    @abstractmethod
    async def seat_layout(self, *, bus_id: int, travel_date: date) -> SeatLayout:
        pass

    @abstractmethod
    async def block(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        pass

    @abstractmethod
    async def unblock(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        pass

    @abstractmethod
    async def rebuild(self, *, bus_id: int, travel_date: date, confirmed: list[Booking]) -> int:
        """Re-derive occupied seats from Confirmed bookings; returns number of rows changed"""
        pass

    @abstractmethod
    async def clear_bus(self, *, bus_id: int) -> None:
        pass
