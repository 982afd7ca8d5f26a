from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from bus_reservation.platform.exception.exceptions import InvalidInputError


@attrs.define
class Route:
    source: str
    destination: str
    distance_km: Decimal
    duration_minutes: int
    fare_multiplier: Decimal = Decimal('1.0')
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        source: str,
        destination: str,
        distance_km: Decimal,
        duration_minutes: int,
        fare_multiplier: Decimal = Decimal('1.0'),
    ) -> 'Route':
        route = cls(
            source=(source or '').strip(),
            destination=(destination or '').strip(),
            distance_km=distance_km,
            duration_minutes=duration_minutes,
            fare_multiplier=fare_multiplier,
        )
        route.validate()
        now = datetime.now(timezone.utc)
        return attrs.evolve(route, created_at=now, updated_at=now)

    def validate(self) -> None:
        if not self.source or not self.destination:
            raise InvalidInputError('Route source and destination are required')
        if self.source.lower() == self.destination.lower():
            raise InvalidInputError('Route source and destination must differ')
        if self.distance_km <= 0:
            raise InvalidInputError('Route distance must be positive')
        if self.duration_minutes <= 0:
            raise InvalidInputError('Route duration must be positive')
        if self.fare_multiplier <= 0:
            raise InvalidInputError('Route fare multiplier must be positive')

    def update(self, **changes: object) -> 'Route':
        cleaned = {key: value for key, value in changes.items() if value is not None}
        for key in ('source', 'destination'):
            if key in cleaned:
                cleaned[key] = str(cleaned[key]).strip()
        updated = attrs.evolve(self, **cleaned, updated_at=datetime.now(timezone.utc))
        updated.validate()
        return updated
