import uuid
import enum
import datetime as dt
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, Text, JSON, Boolean, Numeric, ForeignKey, Index, text
from salon.core.base import Base, TimestampedMixin


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


# Only these hold a slot on the calendar
OCCUPYING_STATUSES = (AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value)


class Appointment(Base, TimestampedMixin):
    # nullable only for hard-block pseudo-appointments
    client_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("client.id", ondelete="SET NULL"), nullable=True)
    service_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("service.id", ondelete="SET NULL"), nullable=True)

    date: Mapped[dt.date] = mapped_column(Date, index=True)
    start_time: Mapped[str] = mapped_column(String(5))  # HH:MM
    end_time: Mapped[str] = mapped_column(String(5))    # start_time + duration, persisted at booking time
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0)

    status: Mapped[str] = mapped_column(String(16), default=AppointmentStatus.PENDING.value, index=True)
    total_cost: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), default=0)
    is_blocked: Mapped[bool] = mapped_column(Boolean, default=False)

    client_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)  # admin notes / block reason
    inspo_photos: Mapped[list] = mapped_column(JSON, default=list)

    __table_args__ = (
        Index("ix_appointment_date_start", "date", "start_time"),
        # storage-level backstop against two live bookings on the same start
        Index(
            "uq_appointment_live_start", "date", "start_time", unique=True,
            postgresql_where=text("status IN ('pending', 'confirmed')"),
            sqlite_where=text("status IN ('pending', 'confirmed')"),
        ),
    )


class BookingDayLock(Base, TimestampedMixin):
    """One row per calendar day, row-locked while a booking on that day is checked and inserted."""
    __tablename__ = "booking_day_lock"
    day: Mapped[dt.date] = mapped_column(Date, unique=True)
