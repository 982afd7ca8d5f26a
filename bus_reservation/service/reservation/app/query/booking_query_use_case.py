from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from bus_reservation.platform.config.di import Container
from bus_reservation.platform.database.unit_of_work import AbstractUnitOfWork
from bus_reservation.platform.exception.exceptions import (
    BookingNotFoundError,
    BusNotFoundError,
    NotOwnerError,
)
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.domain.entity.booking_entity import Booking
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity


class BookingQueryUseCase:
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
    async def get(self, *, booking_id: UUID, requester: UserEntity) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_ledger.find(booking_id=booking_id)
        if not booking:
            raise BookingNotFoundError()
        if not requester.is_admin and not booking.is_owned_by(requester.id or 0):
            raise NotOwnerError('Only the booking owner can view this booking')
        return booking

    @Logger.io
    async def find_by_user(self, *, user_id: int) -> list[Booking]:
        async with self.uow_factory() as uow:
            return await uow.booking_ledger.find_by_user(user_id=user_id)

    @Logger.io
    async def find_by_bus(self, *, bus_id: int) -> list[Booking]:
        async with self.uow_factory() as uow:
            if not await uow.bus_registry.get(bus_id=bus_id):
                raise BusNotFoundError()
            return await uow.booking_ledger.find_by_bus(bus_id=bus_id)

    @Logger.io(truncate_content=True)
    async def list_all(self) -> list[Booking]:
        async with self.uow_factory() as uow:
            return await uow.booking_ledger.find_all()
