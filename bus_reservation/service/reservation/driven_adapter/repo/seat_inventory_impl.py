"""
Seat Inventory on the seat_occupancy table

Available seats have no row; Occupied and Blocked seats have exactly one row per
(bus, travel date, seat). Occupy is an insert guarded by the unique constraint inside a
SAVEPOINT, so a lost race surfaces as SeatUnavailableError and leaves the surrounding
unit of work usable for its compensating step.
"""

from datetime import date, datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bus_reservation.platform.exception.exceptions import (
    BusNotFoundError,
    SeatNotBlockedError,
    SeatNotOccupiedError,
    SeatUnavailableError,
)
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.interface.i_seat_inventory import ISeatInventory
from bus_reservation.service.reservation.domain.entity.booking_entity import Booking
from bus_reservation.service.reservation.domain.entity.bus_entity import Bus
from bus_reservation.service.reservation.domain.entity.seat_entity import (
    SeatLayout,
    SeatOccupancy,
    SeatView,
)
from bus_reservation.service.reservation.domain.enum.seat_status import SeatStatus
from bus_reservation.service.reservation.driven_adapter.model.bus_model import BusModel
from bus_reservation.service.reservation.driven_adapter.model.seat_occupancy_model import (
    SeatOccupancyModel,
)
from bus_reservation.service.reservation.driven_adapter.repo.bus_registry_impl import (
    BusRegistryImpl,
)


class SeatInventoryImpl(ISeatInventory):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def is_available(self, *, bus_id: int, seat_number: int, travel_date: date) -> bool:
        bus = await self._get_bus(bus_id=bus_id)
        if not 1 <= seat_number <= bus.total_seats:
            return False
        occupancy = await self._get_occupancy(
            bus_id=bus_id, seat_number=seat_number, travel_date=travel_date
        )
        return occupancy is None

    @Logger.io
    async def occupy(
        self, *, bus_id: int, seat_number: int, travel_date: date, booking_id: UUID
    ) -> None:
        bus = await self._get_bus(bus_id=bus_id)
        bus.validate_seat_number(seat_number)
        await self._insert(
            bus_id=bus_id,
            seat_number=seat_number,
            travel_date=travel_date,
            status=SeatStatus.OCCUPIED,
            booking_id=booking_id,
        )
        Logger.base.info(
            f'💺 [SEAT] Occupied bus {bus_id} seat {seat_number} on {travel_date} '
            f'for booking {booking_id}'
        )

    @Logger.io
    async def release(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        result = await self.session.execute(
            delete(SeatOccupancyModel).where(
                self._key_clause(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date),
                SeatOccupancyModel.status == SeatStatus.OCCUPIED.value,
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise SeatNotOccupiedError(
                f'Seat {seat_number} on bus {bus_id} is not occupied for {travel_date}'
            )
        Logger.base.info(f'🪑 [SEAT] Released bus {bus_id} seat {seat_number} on {travel_date}')

    @Logger.io
    async def available_count(self, *, bus_id: int, travel_date: date) -> int:
        bus = await self._get_bus(bus_id=bus_id)
        result = await self.session.execute(
            select(func.count())
            .select_from(SeatOccupancyModel)
            .where(
                SeatOccupancyModel.bus_id == bus_id,
                SeatOccupancyModel.travel_date == travel_date,
                SeatOccupancyModel.seat_number.between(1, bus.total_seats),
            )
        )
        return bus.total_seats - result.scalar_one()

    @Logger.io
    async def seat_layout(self, *, bus_id: int, travel_date: date) -> SeatLayout:
        bus = await self._get_bus(bus_id=bus_id)
        occupancies = {
            occupancy.seat_number: occupancy
            for occupancy in await self._list_occupancies(bus_id=bus_id, travel_date=travel_date)
        }
        seats = []
        for seat_number in range(1, bus.total_seats + 1):
            occupancy = occupancies.get(seat_number)
            if occupancy is None:
                seats.append(SeatView(seat_number=seat_number, status=SeatStatus.AVAILABLE))
            else:
                seats.append(
                    SeatView(
                        seat_number=seat_number,
                        status=occupancy.status,
                        booking_id=occupancy.booking_id,
                    )
                )
        return SeatLayout(
            bus_id=bus_id, travel_date=travel_date, total_seats=bus.total_seats, seats=seats
        )

    @Logger.io
    async def block(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        bus = await self._get_bus(bus_id=bus_id)
        bus.validate_seat_number(seat_number)
        await self._insert(
            bus_id=bus_id,
            seat_number=seat_number,
            travel_date=travel_date,
            status=SeatStatus.BLOCKED,
            booking_id=None,
        )

    @Logger.io
    async def unblock(self, *, bus_id: int, seat_number: int, travel_date: date) -> None:
        result = await self.session.execute(
            delete(SeatOccupancyModel).where(
                self._key_clause(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date),
                SeatOccupancyModel.status == SeatStatus.BLOCKED.value,
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise SeatNotBlockedError(
                f'Seat {seat_number} on bus {bus_id} is not blocked for {travel_date}'
            )

    @Logger.io
    async def rebuild(self, *, bus_id: int, travel_date: date, confirmed: list[Booking]) -> int:
        expected = {booking.seat_number: booking.id for booking in confirmed}
        current = await self._list_occupancies(bus_id=bus_id, travel_date=travel_date)
        kept: set[int] = set()
        changed = 0

        for occupancy in current:
            matches_ledger = (
                occupancy.status is SeatStatus.OCCUPIED
                and expected.get(occupancy.seat_number) == occupancy.booking_id
            )
            admin_hold = (
                occupancy.status is SeatStatus.BLOCKED and occupancy.seat_number not in expected
            )
            if matches_ledger or admin_hold:
                kept.add(occupancy.seat_number)
                continue
            await self.session.execute(
                delete(SeatOccupancyModel).where(
                    self._key_clause(
                        bus_id=bus_id, seat_number=occupancy.seat_number, travel_date=travel_date
                    )
                )
            )
            changed += 1

        for seat_number, booking_id in expected.items():
            if seat_number in kept:
                continue
            self.session.add(
                self._new_row(
                    bus_id=bus_id,
                    seat_number=seat_number,
                    travel_date=travel_date,
                    status=SeatStatus.OCCUPIED,
                    booking_id=booking_id,
                )
            )
            changed += 1

        await self.session.flush()
        if changed:
            Logger.base.warning(
                f'🔧 [SEAT] Rebuilt occupancy for bus {bus_id} on {travel_date}: '
                f'{changed} row(s) changed'
            )
        return changed

    @Logger.io
    async def clear_bus(self, *, bus_id: int) -> None:
        await self.session.execute(
            delete(SeatOccupancyModel).where(SeatOccupancyModel.bus_id == bus_id)
        )

    # ========== helpers ==========

    async def _insert(
        self,
        *,
        bus_id: int,
        seat_number: int,
        travel_date: date,
        status: SeatStatus,
        booking_id: Optional[UUID],
    ) -> None:
        existing = await self._get_occupancy(
            bus_id=bus_id, seat_number=seat_number, travel_date=travel_date
        )
        if existing is not None:
            raise SeatUnavailableError(
                f'Seat {seat_number} is already {existing.status.value} for {travel_date}'
            )
        try:
            async with self.session.begin_nested():
                self.session.add(
                    self._new_row(
                        bus_id=bus_id,
                        seat_number=seat_number,
                        travel_date=travel_date,
                        status=status,
                        booking_id=booking_id,
                    )
                )
        except IntegrityError as e:
            # Another writer committed the same (bus, date, seat) after our read
            raise SeatUnavailableError(
                f'Seat {seat_number} was taken for {travel_date} by a concurrent reservation'
            ) from e

    async def _get_bus(self, *, bus_id: int) -> Bus:
        result = await self.session.execute(select(BusModel).where(BusModel.id == bus_id))
        bus_model = result.scalar_one_or_none()
        if not bus_model:
            raise BusNotFoundError()
        return BusRegistryImpl.model_to_entity(bus_model)

    async def _get_occupancy(
        self, *, bus_id: int, seat_number: int, travel_date: date
    ) -> Optional[SeatOccupancy]:
        result = await self.session.execute(
            select(SeatOccupancyModel).where(
                self._key_clause(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date)
            )
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def _list_occupancies(self, *, bus_id: int, travel_date: date) -> list[SeatOccupancy]:
        result = await self.session.execute(
            select(SeatOccupancyModel)
            .where(
                SeatOccupancyModel.bus_id == bus_id,
                SeatOccupancyModel.travel_date == travel_date,
            )
            .order_by(SeatOccupancyModel.seat_number)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @staticmethod
    def _key_clause(*, bus_id: int, seat_number: int, travel_date: date):
        return and_(
            SeatOccupancyModel.bus_id == bus_id,
            SeatOccupancyModel.travel_date == travel_date,
            SeatOccupancyModel.seat_number == seat_number,
        )

    @staticmethod
    def _new_row(
        *,
        bus_id: int,
        seat_number: int,
        travel_date: date,
        status: SeatStatus,
        booking_id: Optional[UUID],
    ) -> SeatOccupancyModel:
        return SeatOccupancyModel(
            bus_id=bus_id,
            seat_number=seat_number,
            travel_date=travel_date,
            status=status.value,
            booking_id=booking_id,
            updated_at=datetime.now(timezone.utc),
        )

    @staticmethod
    def _model_to_entity(model: SeatOccupancyModel) -> SeatOccupancy:
        return SeatOccupancy(
            bus_id=model.bus_id,
            seat_number=model.seat_number,
            travel_date=model.travel_date,
            status=SeatStatus(model.status),
            booking_id=model.booking_id,
        )
