from contextlib import asynccontextmanager
from datetime import date, time
from decimal import Decimal
from typing import AsyncIterator, Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from bus_reservation.platform.config.di import Container
from bus_reservation.platform.database.unit_of_work import AbstractUnitOfWork
from bus_reservation.platform.exception.exceptions import (
    BusNotFoundError,
    ConflictError,
    RouteNotFoundError,
    ScheduleNotFoundError,
    SeatUnavailableError,
)
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.platform.state.seat_lock import SeatLock, SeatLockTimeoutError
from bus_reservation.service.reservation.domain.entity.bus_entity import Bus
from bus_reservation.service.reservation.domain.entity.route_entity import Route
from bus_reservation.service.reservation.domain.entity.schedule_entity import Schedule
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.bus_status import BusStatus
from bus_reservation.service.reservation.domain.enum.day_of_week import DayOfWeek


class FleetAdminUseCase:
    """
    Administrative writes for buses, routes, schedules and seat holds.

    Deletes are refused while anything still depends on the record:
    - bus: Confirmed bookings
    - route: schedules
    - schedule: Confirmed bookings
    """

    def __init__(
        self, *, uow_factory: Callable[[], AbstractUnitOfWork], seat_lock: SeatLock
    ) -> None:
        self.uow_factory = uow_factory
        self.seat_lock = seat_lock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        seat_lock: SeatLock = Depends(Provide[Container.seat_lock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, seat_lock=seat_lock)

    # ========== bus ==========

    @Logger.io
    async def create_bus(
        self,
        *,
        bus_number: str,
        name: str,
        category: BusCategory,
        total_seats: int,
        base_fare: Decimal,
        status: BusStatus = BusStatus.ACTIVE,
    ) -> Bus:
        bus = Bus.create(
            bus_number=bus_number,
            name=name,
            category=category,
            total_seats=total_seats,
            base_fare=base_fare,
            status=status,
        )
        async with self.uow_factory() as uow:
            if await uow.bus_registry.get_by_number(bus_number=bus.bus_number):
                raise ConflictError(f'Bus number {bus.bus_number} already exists')
            created = await uow.bus_registry.create(bus=bus)
            await uow.commit()

        Logger.base.info(f'🚌 [FLEET] Registered bus {created.bus_number} ({created.id})')
        return created

    @Logger.io
    async def update_bus(
        self,
        *,
        bus_id: int,
        bus_number: Optional[str] = None,
        name: Optional[str] = None,
        category: Optional[BusCategory] = None,
        base_fare: Optional[Decimal] = None,
        status: Optional[BusStatus] = None,
        total_seats: Optional[int] = None,
    ) -> Bus:
        async with self.uow_factory() as uow:
            bus = await uow.bus_registry.get(bus_id=bus_id)
            if not bus:
                raise BusNotFoundError()
            updated = bus.update(
                bus_number=bus_number,
                name=name,
                category=category,
                base_fare=base_fare,
                status=status,
                total_seats=total_seats,
            )
            if updated.bus_number != bus.bus_number:
                if await uow.bus_registry.get_by_number(bus_number=updated.bus_number):
                    raise ConflictError(f'Bus number {updated.bus_number} already exists')
            await uow.bus_registry.update(bus=updated)
            await uow.commit()
        return updated

    @Logger.io
    async def delete_bus(self, *, bus_id: int) -> None:
        async with self.uow_factory() as uow:
            if not await uow.bus_registry.get(bus_id=bus_id):
                raise BusNotFoundError()
            if await uow.booking_ledger.has_confirmed_for_bus(bus_id=bus_id):
                raise ConflictError('Bus has confirmed bookings and cannot be deleted')
            await uow.schedule_registry.delete_by_bus(bus_id=bus_id)
            await uow.seat_inventory.clear_bus(bus_id=bus_id)
            await uow.bus_registry.delete(bus_id=bus_id)
            await uow.commit()

        Logger.base.info(f'🗑️ [FLEET] Deleted bus {bus_id}')

    # ========== route ==========

    @Logger.io
    async def create_route(
        self,
        *,
        source: str,
        destination: str,
        distance_km: Decimal,
        duration_minutes: int,
        fare_multiplier: Decimal = Decimal('1.0'),
    ) -> Route:
        route = Route.create(
            source=source,
            destination=destination,
            distance_km=distance_km,
            duration_minutes=duration_minutes,
            fare_multiplier=fare_multiplier,
        )
        async with self.uow_factory() as uow:
            created = await uow.route_registry.create(route=route)
            await uow.commit()
        return created

    @Logger.io
    async def update_route(
        self,
        *,
        route_id: int,
        source: Optional[str] = None,
        destination: Optional[str] = None,
        distance_km: Optional[Decimal] = None,
        duration_minutes: Optional[int] = None,
        fare_multiplier: Optional[Decimal] = None,
    ) -> Route:
        async with self.uow_factory() as uow:
            route = await uow.route_registry.get(route_id=route_id)
            if not route:
                raise RouteNotFoundError()
            updated = route.update(
                source=source,
                destination=destination,
                distance_km=distance_km,
                duration_minutes=duration_minutes,
                fare_multiplier=fare_multiplier,
            )
            await uow.route_registry.update(route=updated)
            await uow.commit()
        return updated

    @Logger.io
    async def delete_route(self, *, route_id: int) -> None:
        async with self.uow_factory() as uow:
            if not await uow.route_registry.get(route_id=route_id):
                raise RouteNotFoundError()
            if await uow.schedule_registry.exists_for_route(route_id=route_id):
                raise ConflictError('Route is used by a schedule and cannot be deleted')
            await uow.route_registry.delete(route_id=route_id)
            await uow.commit()

    # ========== schedule ==========

    @Logger.io
    async def create_schedule(
        self,
        *,
        bus_id: int,
        route_id: int,
        departure_time: time,
        arrival_time: time,
        day_of_week: Optional[DayOfWeek] = None,
        service_date: Optional[date] = None,
    ) -> Schedule:
        schedule = Schedule.create(
            bus_id=bus_id,
            route_id=route_id,
            departure_time=departure_time,
            arrival_time=arrival_time,
            day_of_week=day_of_week,
            service_date=service_date,
        )
        async with self.uow_factory() as uow:
            if not await uow.bus_registry.get(bus_id=bus_id):
                raise BusNotFoundError()
            if not await uow.route_registry.get(route_id=route_id):
                raise RouteNotFoundError()
            created = await uow.schedule_registry.create(schedule=schedule)
            await uow.commit()
        return created

    @Logger.io
    async def update_schedule(
        self,
        *,
        schedule_id: int,
        departure_time: Optional[time] = None,
        arrival_time: Optional[time] = None,
        day_of_week: Optional[DayOfWeek] = None,
        service_date: Optional[date] = None,
    ) -> Schedule:
        async with self.uow_factory() as uow:
            schedule = await uow.schedule_registry.get(schedule_id=schedule_id)
            if not schedule:
                raise ScheduleNotFoundError()
            updated = schedule.reschedule(
                departure_time=departure_time,
                arrival_time=arrival_time,
                day_of_week=day_of_week,
                service_date=service_date,
            )
            await uow.schedule_registry.update(schedule=updated)
            await uow.commit()
        return updated

    @Logger.io
    async def delete_schedule(self, *, schedule_id: int) -> None:
        async with self.uow_factory() as uow:
            if not await uow.schedule_registry.get(schedule_id=schedule_id):
                raise ScheduleNotFoundError()
            if await uow.booking_ledger.has_confirmed_for_schedule(schedule_id=schedule_id):
                raise ConflictError('Schedule has confirmed bookings and cannot be deleted')
            await uow.schedule_registry.delete(schedule_id=schedule_id)
            await uow.commit()

    # ========== seat holds ==========

    @Logger.io
    async def block_seat(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        async with self._seat_key(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date):
            async with self.uow_factory() as uow:
                await uow.seat_inventory.block(
                    bus_id=bus_id, seat_number=seat_number, travel_date=travel_date
                )
                await uow.commit()
        Logger.base.info(f'⛔ [FLEET] Blocked bus {bus_id} seat {seat_number} on {travel_date}')

    @Logger.io
    async def unblock_seat(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        async with self._seat_key(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date):
            async with self.uow_factory() as uow:
                await uow.seat_inventory.unblock(
                    bus_id=bus_id, seat_number=seat_number, travel_date=travel_date
                )
                await uow.commit()
        Logger.base.info(f'✅ [FLEET] Unblocked bus {bus_id} seat {seat_number} on {travel_date}')

    @asynccontextmanager
    async def _seat_key(
        self, *, bus_id: int, seat_number: int, travel_date: date
    ) -> AsyncIterator[None]:
        key = SeatLock.key_for(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date)
        try:
            async with self.seat_lock.hold(key=key):
                yield
        except SeatLockTimeoutError as e:
            raise SeatUnavailableError(
                f'Seat {seat_number} on bus {bus_id} is being changed by another request'
            ) from e
