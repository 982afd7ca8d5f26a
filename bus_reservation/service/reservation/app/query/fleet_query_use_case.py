from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from bus_reservation.platform.config.di import Container
from bus_reservation.platform.database.unit_of_work import AbstractUnitOfWork
from bus_reservation.platform.exception.exceptions import (
    BusNotFoundError,
    RouteNotFoundError,
    ScheduleNotFoundError,
)
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.domain.entity.bus_entity import Bus
from bus_reservation.service.reservation.domain.entity.route_entity import Route
from bus_reservation.service.reservation.domain.entity.schedule_entity import Schedule


class FleetQueryUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def get_bus(self, *, bus_id: int) -> Bus:
        async with self.uow_factory() as uow:
            bus = await uow.bus_registry.get(bus_id=bus_id)
        if not bus:
            raise BusNotFoundError()
        return bus

    @Logger.io(truncate_content=True)
    async def list_buses(self, *, active_only: bool = False) -> list[Bus]:
        async with self.uow_factory() as uow:
            return await uow.bus_registry.list_all(active_only=active_only)

    @Logger.io
    async def get_route(self, *, route_id: int) -> Route:
        async with self.uow_factory() as uow:
            route = await uow.route_registry.get(route_id=route_id)
        if not route:
            raise RouteNotFoundError()
        return route

    @Logger.io(truncate_content=True)
    async def list_routes(self) -> list[Route]:
        async with self.uow_factory() as uow:
            return await uow.route_registry.list_all()

    @Logger.io
    async def get_schedule(self, *, schedule_id: int) -> Schedule:
        async with self.uow_factory() as uow:
            schedule = await uow.schedule_registry.get(schedule_id=schedule_id)
        if not schedule:
            raise ScheduleNotFoundError()
        return schedule

    @Logger.io(truncate_content=True)
    async def list_schedules(self, *, active_only: bool = False) -> list[Schedule]:
        async with self.uow_factory() as uow:
            return await uow.schedule_registry.list_all(active_only=active_only)

    @Logger.io
    async def list_schedules_by_bus(self, *, bus_id: int) -> list[Schedule]:
        async with self.uow_factory() as uow:
            if not await uow.bus_registry.get(bus_id=bus_id):
                raise BusNotFoundError()
            return await uow.schedule_registry.list_by_bus(bus_id=bus_id)
