from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from bus_reservation.platform.exception.exceptions import InvalidInputError, SeatOutOfRangeError
from bus_reservation.platform.logging.loguru_io import Logger
from bus_reservation.service.reservation.domain.enum.bus_category import BusCategory
from bus_reservation.service.reservation.domain.enum.bus_status import BusStatus


@attrs.define
class Bus:
    bus_number: str
    name: str
    category: BusCategory
    total_seats: int
    base_fare: Decimal
    status: BusStatus = BusStatus.ACTIVE
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        bus_number: str,
        name: str,
        category: BusCategory,
        total_seats: int,
        base_fare: Decimal,
        status: BusStatus = BusStatus.ACTIVE,
    ) -> 'Bus':
        bus_number = (bus_number or '').strip()
        name = (name or '').strip()
        if not bus_number:
            raise InvalidInputError('Bus number is required')
        if not name:
            raise InvalidInputError('Bus name is required')
        if category is BusCategory.UNCLASSIFIED:
            raise InvalidInputError(
                f'Bus category must be one of: {", ".join(c.value for c in BusCategory.priced())}'
            )
        if total_seats <= 0:
            raise InvalidInputError('Total seats must be positive')
        if base_fare <= 0:
            raise InvalidInputError('Base fare must be positive')

        now = datetime.now(timezone.utc)
        return cls(
            bus_number=bus_number,
            name=name,
            category=category,
            total_seats=total_seats,
            base_fare=base_fare,
            status=status,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status is BusStatus.ACTIVE

    def validate_seat_number(self, seat_number: int) -> None:
        if not 1 <= seat_number <= self.total_seats:
            raise SeatOutOfRangeError(seat_number=seat_number, total_seats=self.total_seats)

    @Logger.io
    def update(
        self,
        *,
        bus_number: Optional[str] = None,
        name: Optional[str] = None,
        category: Optional[BusCategory] = None,
        base_fare: Optional[Decimal] = None,
        status: Optional[BusStatus] = None,
        total_seats: Optional[int] = None,
    ) -> 'Bus':
        """
        Apply an administrative update

        Raises:
            InvalidInputError: on invalid values, or when total_seats would change
                (date-scoped occupancy is keyed on the existing seat numbering)
        """
        if total_seats is not None and total_seats != self.total_seats:
            raise InvalidInputError(
                'Total seats cannot be changed after creation; register a new bus instead'
            )
        if bus_number is not None and not bus_number.strip():
            raise InvalidInputError('Bus number is required')
        if name is not None and not name.strip():
            raise InvalidInputError('Bus name is required')
        if category is BusCategory.UNCLASSIFIED:
            raise InvalidInputError('Bus category cannot be set to unclassified')
        if base_fare is not None and base_fare <= 0:
            raise InvalidInputError('Base fare must be positive')

        return attrs.evolve(
            self,
            bus_number=bus_number.strip() if bus_number is not None else self.bus_number,
            name=name.strip() if name is not None else self.name,
            category=category or self.category,
            base_fare=base_fare if base_fare is not None else self.base_fare,
            status=status or self.status,
            updated_at=datetime.now(timezone.utc),
        )
