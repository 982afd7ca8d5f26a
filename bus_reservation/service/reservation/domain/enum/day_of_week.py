from datetime import date
from enum import StrEnum


class DayOfWeek(StrEnum):
    MONDAY = 'monday'
    TUESDAY = 'tuesday'
    WEDNESDAY = 'wednesday'
    THURSDAY = 'thursday'
    FRIDAY = 'friday'
    SATURDAY = 'saturday'
    SUNDAY = 'sunday'

    @classmethod
    def of(cls, day: date) -> 'DayOfWeek':
        # date.weekday(): Monday == 0, matching declaration order
        return list(cls)[day.weekday()]
