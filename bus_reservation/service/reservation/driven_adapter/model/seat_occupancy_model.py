from datetime import date, datetime
from typing import Optional
import uuid

from sqlalchemy import Date, DateTime, Integer, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from bus_reservation.platform.database.orm_db_setting import Base


class SeatOccupancyModel(Base):
    """
    One row per non-available seat per travel date.

    The unique constraint is the storage-level guard against a second occupant.
    """

    __tablename__ = 'seat_occupancy'
    __table_args__ = (
        UniqueConstraint('bus_id', 'travel_date', 'seat_number', name='uq_seat_occupancy_key'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bus_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    travel_date: Mapped[date] = mapped_column(Date, nullable=False)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)  # occupied / blocked
    booking_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
