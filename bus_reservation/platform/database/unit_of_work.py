"""
Unit of Work Pattern - one database session shared by every repository of a request

Architecture:
- UoW owns the session lifecycle (opened on enter, closed on exit)
- UoW owns commit/rollback; leaving the block without commit rolls back
- Repositories receive the shared session from the UoW
- Use cases coordinate the Booking Ledger and the Seat Inventory through one UoW,
  so a booking row and its seat occupancy are committed together or not at all
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from bus_reservation.service.reservation.app.interface.i_booking_ledger import IBookingLedger
    from bus_reservation.service.reservation.app.interface.i_bus_registry import IBusRegistry
    from bus_reservation.service.reservation.app.interface.i_route_registry import IRouteRegistry
    from bus_reservation.service.reservation.app.interface.i_schedule_registry import (
        IScheduleRegistry,
    )
    from bus_reservation.service.reservation.app.interface.i_seat_inventory import ISeatInventory
    from bus_reservation.service.reservation.app.interface.i_user_repo import IUserRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the reservation service

    Usage:
        async with uow_factory() as uow:
            booking = await uow.booking_ledger.record(candidate=...)
            await uow.seat_inventory.occupy(...)
            await uow.commit()
    """

    booking_ledger: IBookingLedger
    seat_inventory: ISeatInventory
    bus_registry: IBusRegistry
    route_registry: IRouteRegistry
    schedule_registry: IScheduleRegistry
    user_repo: IUserRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    A fresh session is opened per `async with`, so one instance must not be entered twice
    concurrently; use the DI factory to get a new UoW per unit.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from bus_reservation.service.reservation.driven_adapter.repo.booking_ledger_impl import (
            BookingLedgerImpl,
        )
        from bus_reservation.service.reservation.driven_adapter.repo.bus_registry_impl import (
            BusRegistryImpl,
        )
        from bus_reservation.service.reservation.driven_adapter.repo.route_registry_impl import (
            RouteRegistryImpl,
        )
        from bus_reservation.service.reservation.driven_adapter.repo.schedule_registry_impl import (
            ScheduleRegistryImpl,
        )
        from bus_reservation.service.reservation.driven_adapter.repo.seat_inventory_impl import (
            SeatInventoryImpl,
        )
        from bus_reservation.service.reservation.driven_adapter.repo.user_repo_impl import (
            UserRepoImpl,
        )

        self.session = self.session_factory()

        # Create repositories with shared session
        self.booking_ledger = BookingLedgerImpl(session=self.session)
        self.seat_inventory = SeatInventoryImpl(session=self.session)
        self.bus_registry = BusRegistryImpl(session=self.session)
        self.route_registry = RouteRegistryImpl(session=self.session)
        self.schedule_registry = ScheduleRegistryImpl(session=self.session)
        self.user_repo = UserRepoImpl(session=self.session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'UnitOfWork used outside of `async with`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
