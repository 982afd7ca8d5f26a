from datetime import date
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from bus_reservation.platform.config.di import Container
from bus_reservation.platform.database.unit_of_work import AbstractUnitOfWork
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.domain.entity.seat_entity import SeatLayout


class SeatQueryUseCase:
    """Seat reads; each call runs in its own short unit of work."""

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
    async def is_available(self, *, bus_id: int, seat_number: int, travel_date: date) -> bool:
        async with self.uow_factory() as uow:
            return await uow.seat_inventory.is_available(
                bus_id=bus_id, seat_number=seat_number, travel_date=travel_date
            )

    @Logger.io
    async def available_count(self, *, bus_id: int, travel_date: date) -> int:
        async with self.uow_factory() as uow:
            return await uow.seat_inventory.available_count(bus_id=bus_id, travel_date=travel_date)

    @Logger.io
    async def confirmed_count(self, *, bus_id: int, travel_date: date) -> int:
        """Ledger side of the seat count; admin holds are not included"""
        async with self.uow_factory() as uow:
            return await uow.booking_ledger.count_confirmed(bus_id=bus_id, travel_date=travel_date)

    @Logger.io(truncate_content=True)
    async def seat_layout(self, *, bus_id: int, travel_date: date) -> SeatLayout:
        async with self.uow_factory() as uow:
            return await uow.seat_inventory.seat_layout(bus_id=bus_id, travel_date=travel_date)
