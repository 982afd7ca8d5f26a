from datetime import date, datetime, time, timezone
from typing import Optional

import attrs

from bus_reservation.platform.exception.exceptions import InvalidInputError
from bus_reservation.service.reservation.domain.enum.day_of_week import DayOfWeek


@attrs.define
class Schedule:
    """
    Links a bus to a route at fixed times.

    A weekly schedule sets day_of_week; a one-off trip sets service_date instead.
    """

    bus_id: int
    route_id: int
    departure_time: time
    arrival_time: time
    day_of_week: Optional[DayOfWeek] = None
    service_date: Optional[date] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        bus_id: int,
        route_id: int,
        departure_time: time,
        arrival_time: time,
        day_of_week: Optional[DayOfWeek] = None,
        service_date: Optional[date] = None,
    ) -> 'Schedule':
        if (day_of_week is None) == (service_date is None):
            raise InvalidInputError('Schedule needs exactly one of day_of_week or service_date')
        if departure_time == arrival_time:
            raise InvalidInputError('Departure and arrival time must differ')
        return cls(
            bus_id=bus_id,
            route_id=route_id,
            departure_time=departure_time,
            arrival_time=arrival_time,
            day_of_week=day_of_week,
            service_date=service_date,
            created_at=datetime.now(timezone.utc),
        )

    def reschedule(
        self,
        *,
        departure_time: Optional[time] = None,
        arrival_time: Optional[time] = None,
        day_of_week: Optional[DayOfWeek] = None,
        service_date: Optional[date] = None,
    ) -> 'Schedule':
        if day_of_week is not None and service_date is not None:
            raise InvalidInputError('Schedule needs exactly one of day_of_week or service_date')
        rescheduled = attrs.evolve(
            self,
            departure_time=departure_time or self.departure_time,
            arrival_time=arrival_time or self.arrival_time,
        )
        # Switching between weekly and one-off replaces the other field
        if day_of_week is not None:
            rescheduled = attrs.evolve(rescheduled, day_of_week=day_of_week, service_date=None)
        elif service_date is not None:
            rescheduled = attrs.evolve(rescheduled, day_of_week=None, service_date=service_date)
        if rescheduled.departure_time == rescheduled.arrival_time:
            raise InvalidInputError('Departure and arrival time must differ')
        return rescheduled

    def runs_on(self, travel_date: date) -> bool:
        if self.service_date is not None:
            return self.service_date == travel_date
        return self.day_of_week == DayOfWeek.of(travel_date)
