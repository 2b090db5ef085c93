import logging
from string import Template
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.config import settings
from salon.modules.notifications.models import OutboundMessage
from salon.modules.appointments.models import Appointment
from salon.modules.clients.models import Client

log = logging.getLogger(__name__)

# name -> (subject, body)
TEMPLATES: dict[str, tuple[str, str]] = {
    "booking_received": (
        "We received your booking request",
        "Hi $client_name, we received your request for $service_name on $date at $start_time. "
        "We will confirm it shortly.",
    ),
    "booking_admin_alert": (
        "New booking request",
        "$client_name requested $service_name on $date at $start_time ($duration min).",
    ),
    "booking_confirmed": (
        "Your appointment is confirmed",
        "Hi $client_name, your appointment on $date at $start_time is confirmed.",
    ),
    "booking_cancelled": (
        "Your appointment was cancelled",
        "Hi $client_name, your appointment on $date at $start_time has been cancelled.",
    ),
}

class NotificationsService:
    def __init__(self, s: AsyncSession): self.s = s

    async def send(self, *, channel: str, to: str, template: str, variables: dict | None) -> OutboundMessage:
        if template not in TEMPLATES:
            raise ValueError(f"Unknown notification template '{template}'")
        subject, body = TEMPLATES[template]
        rendered_subject = Template(subject).safe_substitute(variables or {})
        rendered_body = Template(body).safe_substitute(variables or {})
        m = OutboundMessage(channel=channel, to=to, template=template, subject=rendered_subject or None, body=rendered_body, meta=variables or {}, status="sent")
        self.s.add(m); await self.s.flush()
        # No delivery adapter: the persisted row is the record of what would be sent
        return m

class AppointmentNotifier:
    """Maps appointment events onto client/admin messages."""

    def __init__(self, s: AsyncSession):
        self.s = s
        self.messages = NotificationsService(s)

    @staticmethod
    def _vars(appt: Appointment, client: Client | None, service_name: str | None) -> dict:
        return {
            "client_name": client.name if client else "Client",
            "service_name": service_name or "your service",
            "date": appt.date.isoformat(),
            "start_time": appt.start_time,
            "duration": appt.duration_minutes,
            "appointment_id": str(appt.id),
        }

    async def _to_client(self, template: str, client: Client | None, variables: dict) -> None:
        if client is None:
            return
        if client.email:
            await self.messages.send(channel="email", to=client.email, template=template, variables=variables)
        if client.phone:
            await self.messages.send(channel="sms", to=client.phone, template=template, variables=variables)

    async def _to_admin(self, template: str, variables: dict) -> None:
        if settings.ADMIN_EMAIL:
            await self.messages.send(channel="email", to=settings.ADMIN_EMAIL, template=template, variables=variables)
        if settings.ADMIN_PHONE:
            await self.messages.send(channel="sms", to=settings.ADMIN_PHONE, template=template, variables=variables)

    async def notify(self, event: str, appt: Appointment, client: Client | None, service_name: str | None = None) -> bool:
        """
        Record the messages for ``event`` (booked | confirmed | cancelled) and commit.
        Failures are logged and rolled back, never raised. Returns False after a
        rollback, in which case the caller must refresh any instances it still holds.
        """
        if not settings.NOTIFICATIONS_ENABLED:
            return True
        appt_id = appt.id
        variables = self._vars(appt, client, service_name)
        try:
            if event == "booked":
                await self._to_client("booking_received", client, variables)
                await self._to_admin("booking_admin_alert", variables)
            elif event == "confirmed":
                await self._to_client("booking_confirmed", client, variables)
            elif event == "cancelled":
                await self._to_client("booking_cancelled", client, variables)
            else:
                return True
            await self.s.commit()
            return True
        except Exception:
            log.exception(f"Notification '{event}' for appointment {appt_id} failed")
            await self.s.rollback()
            return False
