from datetime import date, datetime
from decimal import Decimal
import uuid

from sqlalchemy import Date, DateTime, Index, Integer, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from bus_reservation.platform.database.orm_db_setting import Base


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (
        Index('ix_booking_bus_date_status', 'bus_id', 'travel_date', 'status'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    bus_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    schedule_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    seat_number: Mapped[int] = mapped_column(Integer, nullable=False)
    passenger_name: Mapped[str] = mapped_column(String(100), nullable=False)
    passenger_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    fare: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='confirmed', nullable=False)
    travel_date: Mapped[date] = mapped_column(Date, nullable=False)
    booked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
