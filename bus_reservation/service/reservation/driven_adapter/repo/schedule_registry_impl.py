from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bus_reservation.platform.exception.exceptions import ScheduleNotFoundError
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.interface.i_schedule_registry import (
    IScheduleRegistry,
)
from bus_reservation.service.reservation.domain.entity.schedule_entity import Schedule
from bus_reservation.service.reservation.domain.enum.bus_status import BusStatus
from bus_reservation.service.reservation.domain.enum.day_of_week import DayOfWeek
from bus_reservation.service.reservation.driven_adapter.model.bus_model import BusModel
from bus_reservation.service.reservation.driven_adapter.model.schedule_model import (
    ScheduleModel,
)


class ScheduleRegistryImpl(IScheduleRegistry):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, schedule: Schedule) -> Schedule:
        schedule_model = ScheduleModel(
            bus_id=schedule.bus_id,
            route_id=schedule.route_id,
            departure_time=schedule.departure_time,
            arrival_time=schedule.arrival_time,
            day_of_week=schedule.day_of_week.value if schedule.day_of_week else None,
            service_date=schedule.service_date,
            created_at=schedule.created_at or datetime.now(timezone.utc),
        )
        self.session.add(schedule_model)
        await self.session.flush()
        return self._model_to_entity(schedule_model)

    @Logger.io
    async def get(self, *, schedule_id: int) -> Optional[Schedule]:
        result = await self.session.execute(
            select(ScheduleModel).where(ScheduleModel.id == schedule_id)
        )
        schedule_model = result.scalar_one_or_none()
        return self._model_to_entity(schedule_model) if schedule_model else None

    @Logger.io
    async def list_all(self, *, active_only: bool = False) -> list[Schedule]:
        stmt = select(ScheduleModel).order_by(ScheduleModel.id)
        if active_only:
            stmt = stmt.join(BusModel, BusModel.id == ScheduleModel.bus_id).where(
                BusModel.status == BusStatus.ACTIVE.value
            )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def list_by_bus(self, *, bus_id: int) -> list[Schedule]:
        result = await self.session.execute(
            select(ScheduleModel)
            .where(ScheduleModel.bus_id == bus_id)
            .order_by(ScheduleModel.departure_time, ScheduleModel.id)
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def exists_for_route(self, *, route_id: int) -> bool:
        result = await self.session.execute(
            select(exists().where(ScheduleModel.route_id == route_id))
        )
        return bool(result.scalar())

    @Logger.io
    async def update(self, *, schedule: Schedule) -> Schedule:
        result = await self.session.execute(
            update(ScheduleModel)
            .where(ScheduleModel.id == schedule.id)
            .values(
                departure_time=schedule.departure_time,
                arrival_time=schedule.arrival_time,
                day_of_week=schedule.day_of_week.value if schedule.day_of_week else None,
                service_date=schedule.service_date,
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise ScheduleNotFoundError()
        return schedule

    @Logger.io
    async def delete(self, *, schedule_id: int) -> None:
        await self.session.execute(delete(ScheduleModel).where(ScheduleModel.id == schedule_id))

    @Logger.io
    async def delete_by_bus(self, *, bus_id: int) -> None:
        await self.session.execute(delete(ScheduleModel).where(ScheduleModel.bus_id == bus_id))

    def _model_to_entity(self, schedule_model: ScheduleModel) -> Schedule:
        return Schedule(
            id=schedule_model.id,
            bus_id=schedule_model.bus_id,
            route_id=schedule_model.route_id,
            departure_time=schedule_model.departure_time,
            arrival_time=schedule_model.arrival_time,
            day_of_week=DayOfWeek(schedule_model.day_of_week)
            if schedule_model.day_of_week
            else None,
            service_date=schedule_model.service_date,
            created_at=schedule_model.created_at,
        )
