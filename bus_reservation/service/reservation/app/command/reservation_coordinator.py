"""
Reservation Coordinator

Orchestrates the Seat Inventory and the Booking Ledger so that a seat is Occupied
exactly when a Confirmed booking points at it.

Reserve flow:
1. Validate passenger details and resolve user, bus, schedule and route (short read unit)
2. Price the seat with the Fare Calculator
3. Take the per-seat key lock (bounded wait)
4. In one unit of work: check availability -> record booking -> occupy seat -> commit
   (the only unit retried on transient storage contention)
5. If occupy loses the seat, delete the ledger record and surface SeatUnavailableError

Cancel flow:
1. Resolve booking, check ownership and status
2. Under the seat key lock: ledger cancel -> inventory release -> commit
"""

import asyncio
from datetime import date
import time
from typing import Awaitable, Callable, Self, TypeVar
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from bus_reservation.platform.config.core_setting import Settings
from bus_reservation.platform.config.di import Container
from bus_reservation.platform.database.unit_of_work import AbstractUnitOfWork
from bus_reservation.platform.exception.exceptions import (
    BookingNotFoundError,
    BusNotFoundError,
    CustomBaseError,
    InvalidInputError,
    NotFoundError,
    NotOwnerError,
    RouteNotFoundError,
    ScheduleNotFoundError,
    SeatNotOccupiedError,
    SeatUnavailableError,
    StorageFailureError,
    UserNotFoundError,
)
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.platform.metrics.reservation_metrics import metrics
from bus_reservation.platform.state.seat_lock import SeatLock, SeatLockTimeoutError
from bus_reservation.service.reservation.domain.entity.booking_entity import (
    Booking,
    BookingCandidate,
    validate_passenger,
)
from bus_reservation.service.reservation.domain.fare_calculator import calculate_fare


_T = TypeVar('_T')

tracer = trace.get_tracer(__name__)


def _result_of(error: CustomBaseError) -> str:
    match error:
        case SeatUnavailableError():
            return 'seat_unavailable'
        case InvalidInputError():
            return 'invalid'
        case NotFoundError():
            return 'not_found'
        case NotOwnerError():
            return 'forbidden'
        case StorageFailureError():
            return 'storage_failure'
        case _:
            return 'rejected'


class ReservationCoordinator:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        seat_lock: SeatLock,
        max_retries: int = 3,
        retry_backoff: float = 0.05,
    ) -> None:
        self.uow_factory = uow_factory
        self.seat_lock = seat_lock
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        seat_lock: SeatLock = Depends(Provide[Container.seat_lock]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            seat_lock=seat_lock,
            max_retries=config.RESERVATION_MAX_RETRIES,
            retry_backoff=config.RESERVATION_RETRY_BACKOFF_SECONDS,
        )

    # ========== reserve ==========

    @Logger.io
    async def reserve(
        self,
        *,
        user_id: int,
        bus_id: int,
        schedule_id: int,
        seat_number: int,
        passenger_name: str,
        passenger_phone: str,
        travel_date: date,
    ) -> Booking:
        start = time.perf_counter()
        with tracer.start_as_current_span(
            'coordinator.reserve',
            attributes={
                'user.id': user_id,
                'bus.id': bus_id,
                'seat.number': seat_number,
                'travel_date': travel_date.isoformat(),
            },
        ) as span:
            try:
                candidate = await self._price_candidate(
                    user_id=user_id,
                    bus_id=bus_id,
                    schedule_id=schedule_id,
                    seat_number=seat_number,
                    passenger_name=passenger_name,
                    passenger_phone=passenger_phone,
                    travel_date=travel_date,
                )
                booking = await self._under_seat_lock(
                    bus_id=bus_id,
                    seat_number=seat_number,
                    travel_date=travel_date,
                    operation=lambda: self._with_storage_retries(
                        lambda: self._reserve_once(candidate=candidate)
                    ),
                )
            except CustomBaseError as e:
                metrics.record_reservation(
                    result=_result_of(e), duration=time.perf_counter() - start
                )
                raise

            span.set_attribute('booking.id', str(booking.id))
            metrics.record_reservation(result='success', duration=time.perf_counter() - start)
            return booking

    async def _price_candidate(
        self,
        *,
        user_id: int,
        bus_id: int,
        schedule_id: int,
        seat_number: int,
        passenger_name: str,
        passenger_phone: str,
        travel_date: date,
    ) -> BookingCandidate:
        name, phone = validate_passenger(
            passenger_name=passenger_name, passenger_phone=passenger_phone
        )

        async def resolve() -> BookingCandidate:
            async with self.uow_factory() as uow:
                if not await uow.user_repo.get_by_id(user_id=user_id):
                    raise UserNotFoundError()

                bus = await uow.bus_registry.get(bus_id=bus_id)
                if not bus:
                    raise BusNotFoundError()
                if not bus.is_active:
                    raise InvalidInputError(
                        f'Bus {bus.bus_number} is {bus.status.value} and not accepting reservations'
                    )
                bus.validate_seat_number(seat_number)

                schedule = await uow.schedule_registry.get(schedule_id=schedule_id)
                if not schedule:
                    raise ScheduleNotFoundError()
                if schedule.bus_id != bus_id:
                    raise InvalidInputError(f'Schedule {schedule_id} does not belong to bus {bus_id}')
                if not schedule.runs_on(travel_date):
                    raise InvalidInputError(
                        f'Schedule {schedule_id} does not run on {travel_date.isoformat()}'
                    )

                route = await uow.route_registry.get(route_id=schedule.route_id)
                if not route:
                    raise RouteNotFoundError()

            fare = calculate_fare(
                base_fare=bus.base_fare,
                category=bus.category,
                route_multiplier=route.fare_multiplier,
            )
            return BookingCandidate(
                user_id=user_id,
                bus_id=bus_id,
                schedule_id=schedule_id,
                seat_number=seat_number,
                passenger_name=name,
                passenger_phone=phone,
                fare=fare,
                travel_date=travel_date,
            )

        return await self._single_attempt(resolve)

    async def _reserve_once(self, *, candidate: BookingCandidate) -> Booking:
        async with self.uow_factory() as uow:
            available = await uow.seat_inventory.is_available(
                bus_id=candidate.bus_id,
                seat_number=candidate.seat_number,
                travel_date=candidate.travel_date,
            )
            if not available:
                raise SeatUnavailableError(
                    f'Seat {candidate.seat_number} on bus {candidate.bus_id} is not available '
                    f'for {candidate.travel_date.isoformat()}'
                )

            booking = await uow.booking_ledger.record(candidate=candidate)
            try:
                await uow.seat_inventory.occupy(
                    bus_id=booking.bus_id,
                    seat_number=booking.seat_number,
                    travel_date=booking.travel_date,
                    booking_id=booking.id,
                )
            except SeatUnavailableError:
                # Compensate: the booking must not outlive its failed seat write
                await uow.booking_ledger.delete(booking_id=booking.id)
                await uow.commit()
                metrics.compensating_rollbacks.inc()
                Logger.base.warning(
                    f'↩️ [RESERVE] Seat {booking.seat_number} on bus {booking.bus_id} was taken '
                    f'after booking {booking.id} was recorded, ledger entry removed'
                )
                raise

            await uow.commit()

        Logger.base.info(
            f'🎫 [RESERVE] Booking {booking.id} confirmed: bus {booking.bus_id} '
            f'seat {booking.seat_number} on {booking.travel_date} fare {booking.fare}'
        )
        return booking

    # ========== cancel ==========

    @Logger.io
    async def cancel(
        self, *, booking_id: UUID, requesting_user_id: int, admin_override: bool = False
    ) -> Booking:
        with tracer.start_as_current_span(
            'coordinator.cancel',
            attributes={'booking.id': str(booking_id), 'user.id': requesting_user_id},
        ):
            try:
                booking = await self._load_for_change(
                    booking_id=booking_id,
                    requesting_user_id=requesting_user_id,
                    admin_override=admin_override,
                )
                booking.validate_mutable()
                cancelled = await self._under_seat_lock(
                    bus_id=booking.bus_id,
                    seat_number=booking.seat_number,
                    travel_date=booking.travel_date,
                    operation=lambda: self._single_attempt(
                        lambda: self._cancel_once(booking=booking)
                    ),
                )
            except CustomBaseError as e:
                metrics.record_cancellation(result=_result_of(e))
                raise

            metrics.record_cancellation(result='success')
            return cancelled

    async def _cancel_once(self, *, booking: Booking) -> Booking:
        async with self.uow_factory() as uow:
            cancelled = await uow.booking_ledger.cancel(booking_id=booking.id)
            try:
                await uow.seat_inventory.release(
                    bus_id=booking.bus_id,
                    seat_number=booking.seat_number,
                    travel_date=booking.travel_date,
                )
            except SeatNotOccupiedError:
                # Ledger is authoritative; resync_inventory repairs the seat side
                Logger.base.warning(
                    f'⚠️ [CANCEL] Booking {booking.id} cancelled but bus {booking.bus_id} '
                    f'seat {booking.seat_number} on {booking.travel_date} had nothing to release'
                )
            await uow.commit()

        Logger.base.info(f'🚫 [CANCEL] Booking {booking.id} cancelled')
        return cancelled

    # ========== passenger update ==========

    @Logger.io
    async def update_passenger(
        self,
        *,
        booking_id: UUID,
        requesting_user_id: int,
        passenger_name: str,
        passenger_phone: str,
    ) -> Booking:
        await self._load_for_change(booking_id=booking_id, requesting_user_id=requesting_user_id)

        async def apply() -> Booking:
            async with self.uow_factory() as uow:
                updated = await uow.booking_ledger.update_passenger(
                    booking_id=booking_id,
                    passenger_name=passenger_name,
                    passenger_phone=passenger_phone,
                )
                await uow.commit()
                return updated

        return await self._single_attempt(apply)

    # ========== maintenance ==========

    @Logger.io
    async def complete_departed(self, *, today: date) -> list[Booking]:
        """Mark Confirmed bookings whose travel date has passed as Completed and free their seats."""

        async def sweep() -> list[Booking]:
            completed: list[Booking] = []
            async with self.uow_factory() as uow:
                for booking in await uow.booking_ledger.find_departed(before=today):
                    completed.append(await uow.booking_ledger.complete(booking_id=booking.id))
                    try:
                        await uow.seat_inventory.release(
                            bus_id=booking.bus_id,
                            seat_number=booking.seat_number,
                            travel_date=booking.travel_date,
                        )
                    except SeatNotOccupiedError:
                        Logger.base.warning(
                            f'⚠️ [SWEEP] Booking {booking.id} had no occupied seat to release'
                        )
                await uow.commit()
            return completed

        completed = await self._single_attempt(sweep)
        Logger.base.info(
            f'🏁 [SWEEP] Completed {len(completed)} departed booking(s) before {today.isoformat()}'
        )
        return completed

    @Logger.io
    async def resync_inventory(self, *, bus_id: int, travel_date: date) -> int:
        async def rebuild() -> int:
            async with self.uow_factory() as uow:
                if not await uow.bus_registry.get(bus_id=bus_id):
                    raise BusNotFoundError()
                confirmed = await uow.booking_ledger.find_confirmed(
                    bus_id=bus_id, travel_date=travel_date
                )
                changed = await uow.seat_inventory.rebuild(
                    bus_id=bus_id, travel_date=travel_date, confirmed=confirmed
                )
                await uow.commit()
                return changed

        return await self._single_attempt(rebuild)

    # ========== helpers ==========

    async def _load_for_change(
        self, *, booking_id: UUID, requesting_user_id: int, admin_override: bool = False
    ) -> Booking:
        async def load() -> Booking:
            async with self.uow_factory() as uow:
                booking = await uow.booking_ledger.find(booking_id=booking_id)
                if not booking:
                    raise BookingNotFoundError()
                if admin_override or booking.is_owned_by(requesting_user_id):
                    return booking
                requester = await uow.user_repo.get_by_id(user_id=requesting_user_id)
                if requester and requester.is_admin:
                    return booking
                raise NotOwnerError()

        return await self._single_attempt(load)

    async def _under_seat_lock(
        self,
        *,
        bus_id: int,
        seat_number: int,
        travel_date: date,
        operation: Callable[[], Awaitable[_T]],
    ) -> _T:
        key = SeatLock.key_for(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date)
        try:
            async with self.seat_lock.hold(key=key):
                metrics.seats_in_flight.inc()
                try:
                    return await operation()
                finally:
                    metrics.seats_in_flight.dec()
        except SeatLockTimeoutError as e:
            metrics.lock_timeouts.inc()
            raise SeatUnavailableError(
                f'Seat {seat_number} on bus {bus_id} is being reserved by another request'
            ) from e

    async def _with_storage_retries(self, operation: Callable[[], Awaitable[_T]]) -> _T:
        """
        Run the check-record-occupy unit, retrying it whole on transient contention.
        Only reserve goes through here; every other unit gets one attempt.

        Raises:
            StorageFailureError: retries exhausted or a non-transient storage error
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                return await operation()
            except OperationalError as e:
                if attempt == self.max_retries:
                    raise StorageFailureError() from e
                metrics.storage_retries.inc()
                Logger.base.warning(
                    f'🔁 [STORAGE] Transient error on attempt {attempt}/{self.max_retries}: {e}'
                )
                await asyncio.sleep(self.retry_backoff * attempt)
            except SQLAlchemyError as e:
                raise StorageFailureError() from e
        raise StorageFailureError()

    async def _single_attempt(self, operation: Callable[[], Awaitable[_T]]) -> _T:
        try:
            return await operation()
        except SQLAlchemyError as e:
            raise StorageFailureError() from e
