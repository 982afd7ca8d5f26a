from enum import StrEnum


class BusStatus(StrEnum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    MAINTENANCE = 'maintenance'
