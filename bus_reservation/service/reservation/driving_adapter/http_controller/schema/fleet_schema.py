from datetime import date, time
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from bus_reservation.service.reservation.domain.entity.bus_entity import Bus
from bus_reservation.service.reservation.domain.entity.route_entity import Route
from bus_reservation.service.reservation.domain.entity.schedule_entity import Schedule
from bus_reservation.service.reservation.domain.entity.seat_entity import SeatLayout
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.bus_status import BusStatus
from bus_reservation.service.reservation.domain.enum.day_of_week import DayOfWeek
from bus_reservation.service.reservation.domain.enum.seat_status import SeatStatus


# ========== Bus ==========


class BusCreateRequest(BaseModel):
    bus_number: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    category: BusCategory
    total_seats: int = Field(..., gt=0)
    base_fare: Decimal = Field(..., gt=0, decimal_places=2)
    status: BusStatus = BusStatus.ACTIVE

    class Config:
        json_schema_extra = {
            'example': {
                'bus_number': 'KA-01-1234',
                'name': 'Night Rider',
                'category': 'luxury',
                'total_seats': 40,
                'base_fare': '20.00',
            }
        }


class BusUpdateRequest(BaseModel):
    bus_number: Optional[str] = Field(None, min_length=1, max_length=20)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[BusCategory] = None
    base_fare: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    status: Optional[BusStatus] = None
    total_seats: Optional[int] = None


class BusResponse(BaseModel):
    id: int
    bus_number: str
    name: str
    category: BusCategory
    total_seats: int
    base_fare: Decimal
    status: BusStatus

    @classmethod
    def from_entity(cls, bus: Bus) -> 'BusResponse':
        return cls(
            id=bus.id or 0,
            bus_number=bus.bus_number,
            name=bus.name,
            category=bus.category,
            total_seats=bus.total_seats,
            base_fare=bus.base_fare,
            status=bus.status,
        )


# ========== Route ==========


class RouteCreateRequest(BaseModel):
    source: str = Field(..., min_length=1, max_length=100)
    destination: str = Field(..., min_length=1, max_length=100)
    distance_km: Decimal = Field(..., gt=0)
    duration_minutes: int = Field(..., gt=0)
    fare_multiplier: Decimal = Field(Decimal('1.0'), gt=0)

    class Config:
        json_schema_extra = {
            'example': {
                'source': 'Bangalore',
                'destination': 'Mysore',
                'distance_km': '145.0',
                'duration_minutes': 180,
                'fare_multiplier': '1.2',
            }
        }


class RouteUpdateRequest(BaseModel):
    source: Optional[str] = Field(None, min_length=1, max_length=100)
    destination: Optional[str] = Field(None, min_length=1, max_length=100)
    distance_km: Optional[Decimal] = Field(None, gt=0)
    duration_minutes: Optional[int] = Field(None, gt=0)
    fare_multiplier: Optional[Decimal] = Field(None, gt=0)


class RouteResponse(BaseModel):
    id: int
    source: str
    destination: str
    distance_km: Decimal
    duration_minutes: int
    fare_multiplier: Decimal

    @classmethod
    def from_entity(cls, route: Route) -> 'RouteResponse':
        return cls(
            id=route.id or 0,
            source=route.source,
            destination=route.destination,
            distance_km=route.distance_km,
            duration_minutes=route.duration_minutes,
            fare_multiplier=route.fare_multiplier,
        )


# ========== Schedule ==========


class ScheduleCreateRequest(BaseModel):
    bus_id: int
    route_id: int
    departure_time: time
    arrival_time: time
    day_of_week: Optional[DayOfWeek] = None
    service_date: Optional[date] = None

    class Config:
        json_schema_extra = {
            'example': {
                'bus_id': 1,
                'route_id': 1,
                'departure_time': '08:00:00',
                'arrival_time': '11:00:00',
                'day_of_week': 'saturday',
            }
        }


class ScheduleUpdateRequest(BaseModel):
    departure_time: Optional[time] = None
    arrival_time: Optional[time] = None
    day_of_week: Optional[DayOfWeek] = None
    service_date: Optional[date] = None


class ScheduleResponse(BaseModel):
    id: int
    bus_id: int
    route_id: int
    departure_time: time
    arrival_time: time
    day_of_week: Optional[DayOfWeek] = None
    service_date: Optional[date] = None

    @classmethod
    def from_entity(cls, schedule: Schedule) -> 'ScheduleResponse':
        return cls(
            id=schedule.id or 0,
            bus_id=schedule.bus_id,
            route_id=schedule.route_id,
            departure_time=schedule.departure_time,
            arrival_time=schedule.arrival_time,
            day_of_week=schedule.day_of_week,
            service_date=schedule.service_date,
        )


# ========== Seats ==========


class SeatHoldRequest(BaseModel):
    travel_date: date


class SeatResponse(BaseModel):
    seat_number: int
    status: SeatStatus
    booking_id: Optional[UUID] = None


class SeatLayoutResponse(BaseModel):
    bus_id: int
    travel_date: date
    total_seats: int
    available_count: int
    occupied_count: int
    blocked_count: int
    seats: list[SeatResponse]

    @classmethod
    def from_layout(cls, layout: SeatLayout, *, include_booking_ids: bool) -> 'SeatLayoutResponse':
        return cls(
            bus_id=layout.bus_id,
            travel_date=layout.travel_date,
            total_seats=layout.total_seats,
            available_count=layout.available_count,
            occupied_count=layout.occupied_count,
            blocked_count=layout.blocked_count,
            seats=[
                SeatResponse(
                    seat_number=seat.seat_number,
                    status=seat.status,
                    booking_id=seat.booking_id if include_booking_ids else None,
                )
                for seat in layout.seats
            ],
        )
