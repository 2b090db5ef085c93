from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, JSON
from salon.core.base import Base, TimestampedMixin

class OutboundMessage(Base, TimestampedMixin):
    __tablename__ = "outbound_message"

    channel: Mapped[str] = mapped_column(String(16))  # sms | email
    to: Mapped[str] = mapped_column(String(128))
    template: Mapped[str] = mapped_column(String(64))
    subject: Mapped[str | None] = mapped_column(String(120), nullable=True)
    body: Mapped[str] = mapped_column(Text)
    meta: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="queued")  # queued | sent | failed
