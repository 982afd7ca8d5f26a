from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bus_reservation.platform.exception.exceptions import BusNotFoundError
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.interface.i_bus_registry import IBusRegistry
from bus_reservation.service.reservation.domain.entity.bus_entity import Bus
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.bus_status import BusStatus
from bus_reservation.service.reservation.driven_adapter.model.bus_model import BusModel


class BusRegistryImpl(IBusRegistry):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, bus: Bus) -> Bus:
        bus_model = BusModel(
            bus_number=bus.bus_number,
            name=bus.name,
            category=bus.category.value,
            total_seats=bus.total_seats,
            base_fare=bus.base_fare,
            status=bus.status.value,
            created_at=bus.created_at or datetime.now(timezone.utc),
            updated_at=bus.updated_at or datetime.now(timezone.utc),
        )
        self.session.add(bus_model)
        await self.session.flush()
        return self.model_to_entity(bus_model)

    @Logger.io
    async def get(self, *, bus_id: int) -> Optional[Bus]:
        result = await self.session.execute(select(BusModel).where(BusModel.id == bus_id))
        bus_model = result.scalar_one_or_none()
        return self.model_to_entity(bus_model) if bus_model else None

    @Logger.io
    async def get_by_number(self, *, bus_number: str) -> Optional[Bus]:
        result = await self.session.execute(
            select(BusModel).where(BusModel.bus_number == bus_number)
        )
        bus_model = result.scalar_one_or_none()
        return self.model_to_entity(bus_model) if bus_model else None

    @Logger.io
    async def list_all(self, *, active_only: bool = False) -> list[Bus]:
        stmt = select(BusModel).order_by(BusModel.id)
        if active_only:
            stmt = stmt.where(BusModel.status == BusStatus.ACTIVE.value)
        result = await self.session.execute(stmt)
        return [self.model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def update(self, *, bus: Bus) -> Bus:
        # total_seats is deliberately absent: it never changes after creation
        result = await self.session.execute(
            update(BusModel)
            .where(BusModel.id == bus.id)
            .values(
                bus_number=bus.bus_number,
                name=bus.name,
                category=bus.category.value,
                base_fare=bus.base_fare,
                status=bus.status.value,
                updated_at=bus.updated_at or datetime.now(timezone.utc),
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise BusNotFoundError()
        return bus

    @Logger.io
    async def delete(self, *, bus_id: int) -> None:
        await self.session.execute(delete(BusModel).where(BusModel.id == bus_id))

    @staticmethod
    def model_to_entity(bus_model: BusModel) -> Bus:
        return Bus(
            id=bus_model.id,
            bus_number=bus_model.bus_number,
            name=bus_model.name,
            category=BusCategory.parse(bus_model.category),
            total_seats=bus_model.total_seats,
            base_fare=bus_model.base_fare,
            status=BusStatus(bus_model.status),
            created_at=bus_model.created_at,
            updated_at=bus_model.updated_at,
        )
