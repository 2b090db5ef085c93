import datetime as dt
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, Text, Boolean, Index, CheckConstraint
from salon.core.base import Base, TimestampedMixin

# Either recurring (day_of_week 0=Sun..6=Sat) or pinned to one calendar date; times are "HH:MM"
class AvailabilityRule(Base, TimestampedMixin):
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    day_of_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    all_day: Mapped[bool] = mapped_column(Boolean, default=False)
    start_time: Mapped[str] = mapped_column(String(5))
    end_time: Mapped[str] = mapped_column(String(5))
    slot_duration: Mapped[int] = mapped_column(Integer, default=30)
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("slot_duration >= 15 AND slot_duration <= 120", name="ck_availability_slot_duration"),
        Index("ix_availability_date_active", "date", "active"),
        Index("ix_availability_dow_active", "day_of_week", "is_recurring", "active"),
    )

class BlockedDate(Base, TimestampedMixin):
    __tablename__ = "blocked_date"
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    day_of_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    all_day: Mapped[bool] = mapped_column(Boolean, default=True)
    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    reason: Mapped[str] = mapped_column(String(255))
    active: Mapped[bool] = mapped_column(Boolean, default=True)

    __table_args__ = (
        Index("ix_blocked_date_date_active", "date", "active"),
        Index("ix_blocked_date_dow_active", "day_of_week", "is_recurring", "active"),
    )
