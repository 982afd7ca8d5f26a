"""Reservation Domain Enums"""

from bus_reservation.service.reservation.domain.enum.booking_status import BookingStatus
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.bus_status import BusStatus
from bus_reservation.service.reservation.domain.enum.day_of_week import DayOfWeek
from bus_reservation.service.reservation.domain.enum.seat_status import SeatStatus
from bus_reservation.service.reservation.domain.enum.user_role import UserRole

__all__ = ['BookingStatus', 'BusCategory', 'BusStatus', 'DayOfWeek', 'SeatStatus', 'UserRole']
