from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from bus_reservation.service.reservation.domain.entity.booking_entity import (
    Booking,
    BookingCandidate,
)


class IBookingLedger(ABC):
    """Authoritative record of bookings; the seat inventory is a projection of its Confirmed rows"""

    @abstractmethod
    async def record(self, *, candidate: BookingCandidate) -> Booking:
        """Persist a new Confirmed booking with a fresh id and timestamps"""
        pass

    @abstractmethod
    async def find(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def find_all(self) -> list[Booking]:
        """Every booking regardless of status, most recent first"""
        pass

    @abstractmethod
    async def find_by_user(self, *, user_id: int) -> list[Booking]:
        """Most recent first"""
        pass

    @abstractmethod
    async def find_by_bus(self, *, bus_id: int) -> list[Booking]:
        """Most recent first"""
        pass

    @abstractmethod
    async def find_confirmed(self, *, bus_id: int, travel_date: date) -> list[Booking]:
        pass

    @abstractmethod
    async def find_departed(self, *, before: date) -> list[Booking]:
        """Confirmed bookings whose travel date is earlier than `before`"""
        pass

    @abstractmethod
    async def count_confirmed(self, *, bus_id: int, travel_date: date) -> int:
        pass

    @abstractmethod
    async def has_confirmed_for_bus(self, *, bus_id: int) -> bool:
        pass

    @abstractmethod
    async def has_confirmed_for_schedule(self, *, schedule_id: int) -> bool:
        pass

    @abstractmethod
    async def cancel(self, *, booking_id: UUID) -> Booking:
        """
        Confirmed -> Cancelled

        Raises:
            BookingNotFoundError, AlreadyCancelledError, AlreadyCompletedError
        """
        pass

    @abstractmethod
    async def complete(self, *, booking_id: UUID) -> Booking:
        """Confirmed -> Completed (departure sweep only)"""
        pass

    @abstractmethod
    async def update_passenger(
        self, *, booking_id: UUID, passenger_name: str, passenger_phone: str
    ) -> Booking:
        pass

    @abstractmethod
    async def delete(self, *, booking_id: UUID) -> None:
        """Hard delete; only used to compensate a reservation that failed mid-unit"""
        pass
