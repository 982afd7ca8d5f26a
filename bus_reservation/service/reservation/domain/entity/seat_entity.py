from datetime import date
from typing import Optional
from uuid import UUID

import attrs

from bus_reservation.service.reservation.domain.enum.seat_status import SeatStatus


@attrs.define(frozen=True)
class SeatOccupancy:
    """A non-available seat on one travel date; available seats have no occupancy."""

    bus_id: int
    seat_number: int
    travel_date: date
    status: SeatStatus
    booking_id: Optional[UUID] = None


@attrs.define(frozen=True)
class SeatView:
    seat_number: int
    status: SeatStatus
    booking_id: Optional[UUID] = None


@attrs.define(frozen=True)
class SeatLayout:
    bus_id: int
    travel_date: date
    total_seats: int
    seats: list[SeatView]

    @property
    def available_count(self) -> int:
        return sum(1 for seat in self.seats if seat.status is SeatStatus.AVAILABLE)

    @property
    def occupied_count(self) -> int:
        return sum(1 for seat in self.seats if seat.status is SeatStatus.OCCUPIED)

    @property
    def blocked_count(self) -> int:
        return sum(1 for seat in self.seats if seat.status is SeatStatus.BLOCKED)

    def rows(self, seats_per_row: int = 4) -> list[list[SeatView]]:
        return [
            self.seats[i : i + seats_per_row] for i in range(0, len(self.seats), seats_per_row)
        ]
