from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bus_reservation.platform.exception.exceptions import BookingNotFoundError
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.interface.i_booking_ledger import IBookingLedger
from bus_reservation.service.reservation.domain.entity.booking_entity import (
    Booking,
    BookingCandidate,
)
from bus_reservation.service.reservation.domain.enum.booking_status import BookingStatus
from bus_reservation.service.reservation.driven_adapter.model.booking_model import BookingModel


class BookingLedgerImpl(IBookingLedger):
    """Booking ledger on the unit-of-work session; never commits on its own"""

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def record(self, *, candidate: BookingCandidate) -> Booking:
        booking = Booking.confirm(candidate)
        self.session.add(
            BookingModel(
                id=booking.id,
                user_id=booking.user_id,
                bus_id=booking.bus_id,
                schedule_id=booking.schedule_id,
                seat_number=booking.seat_number,
                passenger_name=booking.passenger_name,
                passenger_phone=booking.passenger_phone,
                fare=booking.fare,
                status=booking.status.value,
                travel_date=booking.travel_date,
                booked_at=booking.booked_at,
                created_at=booking.created_at,
                updated_at=booking.updated_at,
            )
        )
        await self.session.flush()
        return booking

    @Logger.io
    async def find(self, *, booking_id: UUID) -> Optional[Booking]:
        result = await self.session.execute(
            select(BookingModel).where(BookingModel.id == booking_id)
        )
        booking_model = result.scalar_one_or_none()
        return self._model_to_entity(booking_model) if booking_model else None

    @Logger.io(truncate_content=True)
    async def find_all(self) -> list[Booking]:
        result = await self.session.execute(
            select(BookingModel).order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def find_by_user(self, *, user_id: int) -> list[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def find_by_bus(self, *, bus_id: int) -> list[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.bus_id == bus_id)
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def find_confirmed(self, *, bus_id: int, travel_date: date) -> list[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(
                BookingModel.bus_id == bus_id,
                BookingModel.travel_date == travel_date,
                BookingModel.status == BookingStatus.CONFIRMED.value,
            )
            .order_by(BookingModel.seat_number)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def find_departed(self, *, before: date) -> list[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(
                BookingModel.travel_date < before,
                BookingModel.status == BookingStatus.CONFIRMED.value,
            )
            .order_by(BookingModel.travel_date, BookingModel.bus_id, BookingModel.seat_number)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def count_confirmed(self, *, bus_id: int, travel_date: date) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(BookingModel)
            .where(
                BookingModel.bus_id == bus_id,
                BookingModel.travel_date == travel_date,
                BookingModel.status == BookingStatus.CONFIRMED.value,
            )
        )
        return result.scalar_one()

    @Logger.io
    async def has_confirmed_for_bus(self, *, bus_id: int) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    BookingModel.bus_id == bus_id,
                    BookingModel.status == BookingStatus.CONFIRMED.value,
                )
            )
        )
        return bool(result.scalar())

    @Logger.io
    async def has_confirmed_for_schedule(self, *, schedule_id: int) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    BookingModel.schedule_id == schedule_id,
                    BookingModel.status == BookingStatus.CONFIRMED.value,
                )
            )
        )
        return bool(result.scalar())

    @Logger.io
    async def cancel(self, *, booking_id: UUID) -> Booking:
        return await self._transition(booking_id=booking_id, target=BookingStatus.CANCELLED)

    @Logger.io
    async def complete(self, *, booking_id: UUID) -> Booking:
        return await self._transition(booking_id=booking_id, target=BookingStatus.COMPLETED)

    @Logger.io
    async def update_passenger(
        self, *, booking_id: UUID, passenger_name: str, passenger_phone: str
    ) -> Booking:
        current = await self._get_or_raise(booking_id=booking_id)
        changed = current.change_passenger(
            passenger_name=passenger_name, passenger_phone=passenger_phone
        )
        await self.session.execute(
            update(BookingModel)
            .where(BookingModel.id == booking_id)
            .values(
                passenger_name=changed.passenger_name,
                passenger_phone=changed.passenger_phone,
                updated_at=changed.updated_at,
            )
        )
        return changed

    @Logger.io
    async def delete(self, *, booking_id: UUID) -> None:
        await self.session.execute(delete(BookingModel).where(BookingModel.id == booking_id))

    async def _transition(self, *, booking_id: UUID, target: BookingStatus) -> Booking:
        current = await self._get_or_raise(booking_id=booking_id)
        # Raises AlreadyCancelled/AlreadyCompleted for terminal bookings
        changed = current.cancel() if target is BookingStatus.CANCELLED else current.complete()

        # Conditional on the status we read, so a concurrent transition cannot be overwritten
        result = await self.session.execute(
            update(BookingModel)
            .where(
                BookingModel.id == booking_id,
                BookingModel.status == BookingStatus.CONFIRMED.value,
            )
            .values(status=target.value, updated_at=changed.updated_at)
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            latest = await self._get_or_raise(booking_id=booking_id)
            latest.validate_mutable()
        return changed

    async def _get_or_raise(self, *, booking_id: UUID) -> Booking:
        result = await self.session.execute(
            select(BookingModel).where(BookingModel.id == booking_id)
        )
        booking_model = result.scalar_one_or_none()
        if not booking_model:
            raise BookingNotFoundError()
        return self._model_to_entity(booking_model)

    @staticmethod
    def _model_to_entity(booking_model: BookingModel) -> Booking:
        return Booking(
            id=booking_model.id,
            user_id=booking_model.user_id,
            bus_id=booking_model.bus_id,
            schedule_id=booking_model.schedule_id,
            seat_number=booking_model.seat_number,
            passenger_name=booking_model.passenger_name,
            passenger_phone=booking_model.passenger_phone,
            fare=booking_model.fare,
            travel_date=booking_model.travel_date,
            status=BookingStatus(booking_model.status),
            booked_at=_as_utc(booking_model.booked_at),
            created_at=_as_utc(booking_model.created_at),
            updated_at=_as_utc(booking_model.updated_at),
        )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
