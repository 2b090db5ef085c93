from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, Numeric, Boolean
from salon.core.base import Base, TimestampedMixin

class Service(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(120))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(24), default="other")  # haircut | coloring | styling | treatment | extensions | other
    duration_minutes: Mapped[int] = mapped_column(Integer)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False))
    active: Mapped[bool] = mapped_column(Boolean, default=True)
