from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.app.command.reservation_coordinator import (
    ReservationCoordinator,
)
from bus_reservation.service.reservation.app.query.booking_query_use_case import (
    BookingQueryUseCase,
)
from bus_reservation.service.reservation.domain.entity.user_entity import UserEntity
from bus_reservation.service.reservation.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)
from bus_reservation.service.reservation.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
    CancelBookingResponse,
    DepartureSweepRequest,
    PassengerUpdateRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: UserEntity = Depends(get_current_user),
    coordinator: ReservationCoordinator = Depends(ReservationCoordinator.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('bus_id', request.bus_id)
        span.set_attribute('seat_number', request.seat_number)
        span.set_attribute('user_id', current_user.id or 0)

        booking = await coordinator.reserve(
            user_id=current_user.id or 0,
            bus_id=request.bus_id,
            schedule_id=request.schedule_id,
            seat_number=request.seat_number,
            passenger_name=request.passenger_name,
            passenger_phone=request.passenger_phone,
            travel_date=request.travel_date,
        )
        return BookingResponse.from_entity(booking)


@router.get('', response_model=List[BookingResponse])
@Logger.io
async def list_all_bookings(
    _admin: UserEntity = Depends(require_admin),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> list[BookingResponse]:
    bookings = await use_case.list_all()
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.get('/my_booking', response_model=List[BookingResponse])
@Logger.io
async def list_my_bookings(
    current_user: UserEntity = Depends(get_current_user),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> list[BookingResponse]:
    bookings = await use_case.find_by_user(user_id=current_user.id or 0)
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.get('/bus/{bus_id}', response_model=List[BookingResponse])
@Logger.io
async def list_bus_bookings(
    bus_id: int,
    _admin: UserEntity = Depends(require_admin),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> list[BookingResponse]:
    bookings = await use_case.find_by_bus(bus_id=bus_id)
    return [BookingResponse.from_entity(booking) for booking in bookings]


@router.post('/complete_departed', response_model=List[BookingResponse])
@Logger.io
async def complete_departed_bookings(
    request: DepartureSweepRequest,
    _admin: UserEntity = Depends(require_admin),
    coordinator: ReservationCoordinator = Depends(ReservationCoordinator.depends),
) -> list[BookingResponse]:
    completed = await coordinator.complete_departed(today=request.today)
    return [BookingResponse.from_entity(booking) for booking in completed]


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: BookingQueryUseCase = Depends(BookingQueryUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get(booking_id=booking_id, requester=current_user)
    return BookingResponse.from_entity(booking)


@router.patch('/{booking_id}/cancel', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_booking(
    booking_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    coordinator: ReservationCoordinator = Depends(ReservationCoordinator.depends),
) -> CancelBookingResponse:
    booking = await coordinator.cancel(
        booking_id=booking_id,
        requesting_user_id=current_user.id or 0,
        admin_override=current_user.is_admin,
    )
    return CancelBookingResponse(
        id=booking.id,
        status=booking.status,
        seat_number=booking.seat_number,
        travel_date=booking.travel_date,
    )


@router.patch('/{booking_id}/passenger')
@Logger.io
async def update_passenger(
    booking_id: UUID,
    request: PassengerUpdateRequest,
    current_user: UserEntity = Depends(get_current_user),
    coordinator: ReservationCoordinator = Depends(ReservationCoordinator.depends),
) -> BookingResponse:
    booking = await coordinator.update_passenger(
        booking_id=booking_id,
        requesting_user_id=current_user.id or 0,
        passenger_name=request.passenger_name,
        passenger_phone=request.passenger_phone,
    )
    return BookingResponse.from_entity(booking)
