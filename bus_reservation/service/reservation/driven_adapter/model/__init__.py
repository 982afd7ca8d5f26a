"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from bus_reservation.service.reservation.driven_adapter.model.booking_model import BookingModel
from bus_reservation.service.reservation.driven_adapter.model.bus_model import BusModel
from bus_reservation.service.reservation.driven_adapter.model.route_model import RouteModel
from bus_reservation.service.reservation.driven_adapter.model.schedule_model import (
    ScheduleModel,
)
from bus_reservation.service.reservation.driven_adapter.model.seat_occupancy_model import (
    SeatOccupancyModel,
)
from bus_reservation.service.reservation.driven_adapter.model.user_model import UserModel

__all__ = [
    'BookingModel',
    'BusModel',
    'RouteModel',
    'ScheduleModel',
    'SeatOccupancyModel',
    'UserModel',
]
