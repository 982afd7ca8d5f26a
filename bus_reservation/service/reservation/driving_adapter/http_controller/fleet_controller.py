from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status

from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.command.fleet_admin_use_case import (
    FleetAdminUseCase,
)
from bus_reservation.service.reservation.app.command.reservation_coordinator import (
    ReservationCoordinator,
)
from bus_reservation.service.reservation.app.query.fleet_query_use_case import FleetQueryUseCase
from bus_reservation.service.reservation.app.query.seat_query_use_case import SeatQueryUseCase
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity
from bus_reservation.service.reservation.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)
from bus_reservation.service.reservation.driving_adapter.http_controller.schema.fleet_schema import (
    BusCreateRequest,
    BusResponse,
    BusUpdateRequest,
    RouteCreateRequest,
    RouteResponse,
    RouteUpdateRequest,
    ScheduleCreateRequest,
    ScheduleResponse,
    ScheduleUpdateRequest,
    SeatHoldRequest,
    SeatLayoutResponse,
)


bus_router = APIRouter()
route_router = APIRouter()
schedule_router = APIRouter()


# ============================ Bus ============================


@bus_router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_bus(
    request: BusCreateRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> BusResponse:
    bus = await use_case.create_bus(
        bus_number=request.bus_number,
        name=request.name,
        category=request.category,
        total_seats=request.total_seats,
        base_fare=request.base_fare,
        status=request.status,
    )
    return BusResponse.from_entity(bus)


@bus_router.get('', response_model=List[BusResponse])
@Logger.io
async def list_buses(
    active_only: bool = False,
    use_case: FleetQueryUseCase = Depends(FleetQueryUseCase.depends),
) -> list[BusResponse]:
    buses = await use_case.list_buses(active_only=active_only)
    return [BusResponse.from_entity(bus) for bus in buses]


@bus_router.get('/{bus_id}')
@Logger.io
async def get_bus(
    bus_id: int,
    use_case: FleetQueryUseCase = Depends(FleetQueryUseCase.depends),
) -> BusResponse:
    return BusResponse.from_entity(await use_case.get_bus(bus_id=bus_id))


@bus_router.patch('/{bus_id}')
@Logger.io
async def update_bus(
    bus_id: int,
    request: BusUpdateRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> BusResponse:
    bus = await use_case.update_bus(
        bus_id=bus_id,
        bus_number=request.bus_number,
        name=request.name,
        category=request.category,
        base_fare=request.base_fare,
        status=request.status,
        total_seats=request.total_seats,
    )
    return BusResponse.from_entity(bus)


@bus_router.delete('/{bus_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_bus(
    bus_id: int,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> None:
    await use_case.delete_bus(bus_id=bus_id)


@bus_router.get('/{bus_id}/seats')
@Logger.io
async def get_seat_layout(
    bus_id: int,
    travel_date: date = Query(...),
    current_user: UserEntity = Depends(get_current_user),
    use_case: SeatQueryUseCase = Depends(SeatQueryUseCase.depends),
) -> SeatLayoutResponse:
    layout = await use_case.seat_layout(bus_id=bus_id, travel_date=travel_date)
    return SeatLayoutResponse.from_layout(layout, include_booking_ids=current_user.is_admin)


@bus_router.post('/{bus_id}/seats/{seat_number}/block', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def block_seat(
    bus_id: int,
    seat_number: int,
    request: SeatHoldRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> None:
    await use_case.block_seat(
        bus_id=bus_id, seat_number=seat_number, travel_date=request.travel_date
    )


@bus_router.delete('/{bus_id}/seats/{seat_number}/block', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def unblock_seat(
    bus_id: int,
    seat_number: int,
    travel_date: date = Query(...),
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> None:
    await use_case.unblock_seat(bus_id=bus_id, seat_number=seat_number, travel_date=travel_date)


@bus_router.post('/{bus_id}/seats/resync')
@Logger.io
async def resync_seats(
    bus_id: int,
    request: SeatHoldRequest,
    _admin: UserEntity = Depends(require_admin),
    coordinator: ReservationCoordinator = Depends(ReservationCoordinator.depends),
) -> dict[str, int]:
    changed = await coordinator.resync_inventory(bus_id=bus_id, travel_date=request.travel_date)
    return {'changed': changed}


@bus_router.get('/{bus_id}/schedules', response_model=List[ScheduleResponse])
@Logger.io
async def list_bus_schedules(
    bus_id: int,
    use_case: FleetQueryUseCase = Depends(FleetQueryUseCase.depends),
) -> list[ScheduleResponse]:
    schedules = await use_case.list_schedules_by_bus(bus_id=bus_id)
    return [ScheduleResponse.from_entity(schedule) for schedule in schedules]


# ============================ Route ============================


@route_router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_route(
    request: RouteCreateRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> RouteResponse:
    route = await use_case.create_route(
        source=request.source,
        destination=request.destination,
        distance_km=request.distance_km,
        duration_minutes=request.duration_minutes,
        fare_multiplier=request.fare_multiplier,
    )
    return RouteResponse.from_entity(route)


@route_router.get('', response_model=List[RouteResponse])
@Logger.io
async def list_routes(
    use_case: FleetQueryUseCase = Depends(FleetQueryUseCase.depends),
) -> list[RouteResponse]:
    return [RouteResponse.from_entity(route) for route in await use_case.list_routes()]


@route_router.get('/{route_id}')
@Logger.io
async def get_route(
    route_id: int,
    use_case: FleetQueryUseCase = Depends(FleetQueryUseCase.depends),
) -> RouteResponse:
    return RouteResponse.from_entity(await use_case.get_route(route_id=route_id))


@route_router.patch('/{route_id}')
@Logger.io
async def update_route(
    route_id: int,
    request: RouteUpdateRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> RouteResponse:
    route = await use_case.update_route(
        route_id=route_id,
        source=request.source,
        destination=request.destination,
        distance_km=request.distance_km,
        duration_minutes=request.duration_minutes,
        fare_multiplier=request.fare_multiplier,
    )
    return RouteResponse.from_entity(route)


@route_router.delete('/{route_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_route(
    route_id: int,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> None:
    await use_case.delete_route(route_id=route_id)


# ============================ Schedule ============================


@schedule_router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_schedule(
    request: ScheduleCreateRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> ScheduleResponse:
    schedule = await use_case.create_schedule(
        bus_id=request.bus_id,
        route_id=request.route_id,
        departure_time=request.departure_time,
        arrival_time=request.arrival_time,
        day_of_week=request.day_of_week,
        service_date=request.service_date,
    )
    return ScheduleResponse.from_entity(schedule)


@schedule_router.get('', response_model=List[ScheduleResponse])
@Logger.io
async def list_schedules(
    active_only: bool = False,
    use_case: FleetQueryUseCase = Depends(FleetQueryUseCase.depends),
) -> list[ScheduleResponse]:
    schedules = await use_case.list_schedules(active_only=active_only)
    return [ScheduleResponse.from_entity(schedule) for schedule in schedules]


@schedule_router.get('/{schedule_id}')
@Logger.io
async def get_schedule(
    schedule_id: int,
    use_case: FleetQueryUseCase = Depends(FleetQueryUseCase.depends),
) -> ScheduleResponse:
    return ScheduleResponse.from_entity(await use_case.get_schedule(schedule_id=schedule_id))


@schedule_router.patch('/{schedule_id}')
@Logger.io
async def update_schedule(
    schedule_id: int,
    request: ScheduleUpdateRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> ScheduleResponse:
    schedule = await use_case.update_schedule(
        schedule_id=schedule_id,
        departure_time=request.departure_time,
        arrival_time=request.arrival_time,
        day_of_week=request.day_of_week,
        service_date=request.service_date,
    )
    return ScheduleResponse.from_entity(schedule)


@schedule_router.delete('/{schedule_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_schedule(
    schedule_id: int,
    _admin: UserEntity = Depends(require_admin),
    use_case: FleetAdminUseCase = Depends(FleetAdminUseCase.depends),
) -> None:
    await use_case.delete_schedule(schedule_id=schedule_id)
