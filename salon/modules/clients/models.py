from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String
from salon.core.base import Base, TimestampedMixin

class Client(Base, TimestampedMixin):
    name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
