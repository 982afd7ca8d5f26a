"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from bus_reservation.service.reservation.app.command import (
    fleet_admin_use_case,
    reservation_coordinator,
    user_account_use_case,
)
from bus_reservation.service.reservation.app.query import (
    booking_query_use_case,
    fleet_query_use_case,
    seat_query_use_case,
)
from bus_reservation.service.reservation.driving_adapter.http_controller import user_controller
from bus_reservation.service.reservation.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    reservation_coordinator,
    fleet_admin_use_case,
    user_account_use_case,
    booking_query_use_case,
    fleet_query_use_case,
    seat_query_use_case,
    role_auth,
    user_controller,
]
