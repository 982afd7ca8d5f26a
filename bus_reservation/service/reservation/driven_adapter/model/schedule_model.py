from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, String, Time, func
from sqlalchemy.orm import Mapped, mapped_column

from bus_reservation.platform.database.orm_db_setting import Base


class ScheduleModel(Base):
    __tablename__ = 'schedule'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bus_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    route_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    departure_time: Mapped[time] = mapped_column(Time, nullable=False)
    arrival_time: Mapped[time] = mapped_column(Time, nullable=False)
    day_of_week: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    service_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
