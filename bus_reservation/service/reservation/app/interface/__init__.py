"""Reservation application ports"""

from bus_reservation.service.reservation.app.interface.i_booking_ledger import IBookingLedger
from bus_reservation.service.reservation.app.interface.i_bus_registry import IBusRegistry
from bus_reservation.service.reservation.app.interface.i_password_hasher import IPasswordHasher
from bus_reservation.service.reservation.app.interface.i_route_registry import IRouteRegistry
from bus_reservation.service.reservation.app.interface.i_schedule_registry import (
    IScheduleRegistry,
)
from bus_reservation.service.reservation.app.interface.i_seat_inventory import ISeatInventory
from bus_reservation.service.reservation.app.interface.i_user_repo import IUserRepo

__all__ = [
    'IBookingLedger',
    'IBusRegistry',
    'IPasswordHasher',
    'IRouteRegistry',
    'IScheduleRegistry',
    'ISeatInventory',
    'IUserRepo',
]
