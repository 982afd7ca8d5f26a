from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils import compat as uuid_utils

from bus_reservation.platform.exception.exceptions import (
    AlreadyCancelledError,
    AlreadyCompletedError,
    InvalidInputError,
)
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.domain.enum.booking_status import BookingStatus


def validate_passenger(*, passenger_name: str, passenger_phone: str) -> tuple[str, str]:
    name = (passenger_name or '').strip()
    phone = (passenger_phone or '').strip()
    if not name:
        raise InvalidInputError('Passenger name is required')
    if not phone:
        raise InvalidInputError('Passenger phone is required')
    return name, phone


@attrs.define(frozen=True)
class BookingCandidate:
    """A validated reservation request, priced but not yet recorded."""

    user_id: int
    bus_id: int
    schedule_id: int
    seat_number: int
    passenger_name: str
    passenger_phone: str
    fare: Decimal
    travel_date: date


@attrs.define
class Booking:
    id: UUID
    user_id: int
    bus_id: int
    schedule_id: int
    seat_number: int
    passenger_name: str
    passenger_phone: str
    fare: Decimal
    travel_date: date
    status: BookingStatus = BookingStatus.CONFIRMED
    booked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def confirm(cls, candidate: BookingCandidate) -> 'Booking':
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid_utils.uuid7(),
            user_id=candidate.user_id,
            bus_id=candidate.bus_id,
            schedule_id=candidate.schedule_id,
            seat_number=candidate.seat_number,
            passenger_name=candidate.passenger_name,
            passenger_phone=candidate.passenger_phone,
            fare=candidate.fare,
            travel_date=candidate.travel_date,
            status=BookingStatus.CONFIRMED,
            booked_at=now,
            created_at=now,
            updated_at=now,
        )

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id

    def validate_mutable(self) -> None:
        """
        Raises:
            AlreadyCancelledError / AlreadyCompletedError: terminal bookings are immutable
        """
        match self.status:
            case BookingStatus.CANCELLED:
                raise AlreadyCancelledError()
            case BookingStatus.COMPLETED:
                raise AlreadyCompletedError()
            case BookingStatus.CONFIRMED:
                return

    @Logger.io
    def cancel(self) -> 'Booking':
        self.validate_mutable()
        return attrs.evolve(
            self, status=BookingStatus.CANCELLED, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def complete(self) -> 'Booking':
        self.validate_mutable()
        return attrs.evolve(
            self, status=BookingStatus.COMPLETED, updated_at=datetime.now(timezone.utc)
        )

    def change_passenger(self, *, passenger_name: str, passenger_phone: str) -> 'Booking':
        self.validate_mutable()
        name, phone = validate_passenger(
            passenger_name=passenger_name, passenger_phone=passenger_phone
        )
        return attrs.evolve(
            self,
            passenger_name=name,
            passenger_phone=phone,
            updated_at=datetime.now(timezone.utc),
        )
