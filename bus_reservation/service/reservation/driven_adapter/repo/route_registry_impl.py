from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bus_reservation.platform.exception.exceptions import RouteNotFoundError
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.interface.i_route_registry import IRouteRegistry
from bus_reservation.service.reservation.domain.entity.route_entity import Route
from bus_reservation.service.reservation.driven_adapter.model.route_model import RouteModel


class RouteRegistryImpl(IRouteRegistry):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, route: Route) -> Route:
        route_model = RouteModel(
            source=route.source,
            destination=route.destination,
            distance_km=route.distance_km,
            duration_minutes=route.duration_minutes,
            fare_multiplier=route.fare_multiplier,
            created_at=route.created_at or datetime.now(timezone.utc),
            updated_at=route.updated_at or datetime.now(timezone.utc),
        )
        self.session.add(route_model)
        await self.session.flush()
        return self._model_to_entity(route_model)

    @Logger.io
    async def get(self, *, route_id: int) -> Optional[Route]:
        result = await self.session.execute(select(RouteModel).where(RouteModel.id == route_id))
        route_model = result.scalar_one_or_none()
        return self._model_to_entity(route_model) if route_model else None

    @Logger.io
    async def list_all(self) -> list[Route]:
        result = await self.session.execute(select(RouteModel).order_by(RouteModel.id))
        return [self._model_to_entity(model) for model in result.scalars().all()]

    @Logger.io
    async def update(self, *, route: Route) -> Route:
        result = await self.session.execute(
            update(RouteModel)
            .where(RouteModel.id == route.id)
            .values(
                source=route.source,
                destination=route.destination,
                distance_km=route.distance_km,
                duration_minutes=route.duration_minutes,
                fare_multiplier=route.fare_multiplier,
                updated_at=route.updated_at or datetime.now(timezone.utc),
            )
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise RouteNotFoundError()
        return route

    @Logger.io
    async def delete(self, *, route_id: int) -> None:
        await self.session.execute(delete(RouteModel).where(RouteModel.id == route_id))

    def _model_to_entity(self, route_model: RouteModel) -> Route:
        return Route(
            id=route_model.id,
            source=route_model.source,
            destination=route_model.destination,
            distance_km=route_model.distance_km,
            duration_minutes=route_model.duration_minutes,
            fare_multiplier=route_model.fare_multiplier,
            created_at=route_model.created_at,
            updated_at=route_model.updated_at,
        )
