from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from bus_reservation.service.reservation.domain.entity.booking_entity import Booking
from bus_reservation.service.reservation.domain.enum.booking_status import BookingStatus


class BookingCreateRequest(BaseModel):
    bus_id: int
    schedule_id: int
    seat_number: int
    passenger_name: str = Field(..., max_length=100)
    passenger_phone: str = Field(..., max_length=20)
    travel_date: date

    class Config:
        json_schema_extra = {
            'example': {
                'bus_id': 1,
                'schedule_id': 1,
                'seat_number': 12,
                'passenger_name': 'Alice Chen',
                'passenger_phone': '0912345678',
                'travel_date': '2025-06-01',
            }
        }


class PassengerUpdateRequest(BaseModel):
    passenger_name: str = Field(..., max_length=100)
    passenger_phone: str = Field(..., max_length=20)


class BookingResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'user_id': 2,
                'bus_id': 1,
                'schedule_id': 1,
                'seat_number': 12,
                'passenger_name': 'Alice Chen',
                'passenger_phone': '0912345678',
                'fare': '36.00',
                'status': 'confirmed',
                'travel_date': '2025-06-01',
                'booked_at': '2025-05-20T10:30:00Z',
                'updated_at': '2025-05-20T10:30:00Z',
            }
        },
    }

    id: UUID
    user_id: int
    bus_id: int
    schedule_id: int
    seat_number: int
    passenger_name: str
    passenger_phone: str
    fare: Decimal
    status: BookingStatus
    travel_date: date
    booked_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            bus_id=booking.bus_id,
            schedule_id=booking.schedule_id,
            seat_number=booking.seat_number,
            passenger_name=booking.passenger_name,
            passenger_phone=booking.passenger_phone,
            fare=booking.fare,
            status=booking.status,
            travel_date=booking.travel_date,
            booked_at=booking.booked_at,
            updated_at=booking.updated_at,
        )


class CancelBookingResponse(BaseModel):
    id: UUID
    status: BookingStatus
    seat_number: int
    travel_date: date

    class Config:
        json_schema_extra = {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'status': 'cancelled',
                'seat_number': 12,
                'travel_date': '2025-06-01',
            }
        }


class DepartureSweepRequest(BaseModel):
    today: date

    class Config:
        json_schema_extra = {'example': {'today': '2025-06-02'}}
