import uuid
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from salon.core.config import settings
from salon.core.errors import ValidationError, NotFoundError, ConflictError
from salon.modules.appointments.repository import AppointmentRepository
from salon.modules.appointments.models import Appointment, AppointmentStatus, OCCUPYING_STATUSES
from salon.modules.appointments.schemas import BookingRequest, HardBlockRequest, AppointmentStatusChange
from salon.modules.availability.intervals import is_clock_time, to_minutes, to_clock, intervals_overlap, parse_calendar_date
from salon.modules.availability.resolver import occupied_window
from salon.modules.catalog.repository import ServiceRepository
from salon.modules.clients.repository import ClientRepository
from salon.modules.events.outbox import OutboxService
from salon.modules.notifications.service import AppointmentNotifier

logger = logging.getLogger(__name__)

S = AppointmentStatus
VALID_NEXT = {
    S.PENDING.value: {S.CONFIRMED.value, S.CANCELLED.value},
    S.CONFIRMED.value: {S.COMPLETED.value, S.CANCELLED.value, S.NO_SHOW.value},
    S.COMPLETED.value: set(),
    S.CANCELLED.value: set(),
    S.NO_SHOW.value: set(),
}

MINUTES_PER_DAY = 24 * 60

def _event(obj: Appointment) -> dict:
    return {
        "date": obj.date.isoformat(),
        "start_time": obj.start_time,
        "end_time": obj.end_time,
        "status": obj.status,
        "is_blocked": obj.is_blocked,
    }

class AppointmentService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.appts = AppointmentRepository(session)
        self.services = ServiceRepository(session)
        self.clients = ClientRepository(session)

    async def _check_free(self, day, start: int, end: int) -> None:
        for a in await self.appts.list_occupying_on(day):
            w = occupied_window(a)
            if intervals_overlap(start, end, w.start, w.end):
                raise ConflictError("This time slot is already booked.")

    async def _insert(self, **data) -> Appointment:
        try:
            return await self.appts.create(**data)
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("This time slot is already booked.")

    # ---- Booking ----
    async def book(self, payload: BookingRequest) -> Appointment:
        """
        Conflict check and insert run under the day's row lock, so two requests
        for the same day are serialized. Overlap is judged on full intervals.
        """
        day = parse_calendar_date(payload.date)
        if not is_clock_time(payload.start_time):
            raise ValidationError("Start time must be in HH:MM 24-hour format.")

        await self.appts.lock_day(day)

        service = await self.services.get(payload.service_id)
        if not service:
            raise NotFoundError("Service not found.")
        client = await self.clients.get(payload.client_id)
        if not client:
            raise NotFoundError("Client not found.")

        duration = service.duration_minutes
        if not duration or duration <= 0:
            duration = settings.DEFAULT_SERVICE_DURATION_MINUTES
            logger.warning(f"Service {service.id} has no duration; booking with default {duration} minutes")
        start = to_minutes(payload.start_time)
        end = start + duration
        # an end of 24:00 is not a valid clock time
        if end >= MINUTES_PER_DAY:
            raise ValidationError("Appointment must end on the same day.")
        if payload.end_time and payload.end_time != to_clock(end):
            logger.info(f"Ignoring client end time {payload.end_time}; derived {to_clock(end)} from service duration")

        await self._check_free(day, start, end)

        obj = await self._insert(
            client_id=client.id,
            service_id=service.id,
            date=day,
            start_time=to_clock(start),
            end_time=to_clock(end),
            duration_minutes=duration,
            status=S.PENDING.value,
            total_cost=service.price or 0,
            is_blocked=False,
            client_notes=payload.client_notes,
            inspo_photos=list(payload.inspo_photos or []),
        )
        await OutboxService(self.session).enqueue("APPOINTMENT_BOOKED", "appointment", obj.id, _event(obj))
        await self.session.commit()
        logger.info(f"Appointment {obj.id} booked for {day} {obj.start_time}-{obj.end_time}")

        if not await AppointmentNotifier(self.session).notify("booked", obj, client, service.name):
            await self.session.refresh(obj)
        return obj

    async def block(self, payload: HardBlockRequest) -> Appointment:
        day = parse_calendar_date(payload.date)
        if not is_clock_time(payload.start_time) or not is_clock_time(payload.end_time):
            raise ValidationError("Times must be in HH:MM 24-hour format.")
        start, end = to_minutes(payload.start_time), to_minutes(payload.end_time)
        if start >= end:
            raise ValidationError("Start time must be before end time.")

        await self.appts.lock_day(day)
        await self._check_free(day, start, end)

        obj = await self._insert(
            client_id=None,
            service_id=None,
            date=day,
            start_time=to_clock(start),
            end_time=to_clock(end),
            duration_minutes=end - start,
            status=S.CONFIRMED.value,
            total_cost=0,
            is_blocked=True,
            notes=payload.reason or "Blocked by admin",
        )
        await OutboxService(self.session).enqueue("SLOT_BLOCKED", "appointment", obj.id, _event(obj))
        await self.session.commit()
        return obj

    async def unblock_day(self, date: str) -> int:
        day = parse_calendar_date(date)
        removed = await self.appts.delete_blocks_on(day)
        if not removed:
            raise NotFoundError("No blocked slots found for this date.")
        await OutboxService(self.session).enqueue("SLOTS_UNBLOCKED", "day", day.isoformat(), {"removed": removed})
        await self.session.commit()
        return removed

    # ---- Ledger ----
    async def get(self, appt_id: uuid.UUID) -> Appointment:
        obj = await self.appts.get(appt_id)
        if not obj:
            raise NotFoundError("Appointment not found.")
        return obj

    async def list(self, client_id: uuid.UUID | None, date: str | None, status: AppointmentStatus | None, limit: int, offset: int):
        day = parse_calendar_date(date) if date else None
        return await self.appts.list(client_id=client_id, day=day, status=status.value if status else None, limit=limit, offset=offset)

    async def change_status(self, appt_id: uuid.UUID, payload: AppointmentStatusChange) -> Appointment:
        obj = await self.get(appt_id)
        nxt = payload.status.value
        prev = obj.status
        if nxt not in VALID_NEXT.get(prev, set()):
            raise ValidationError(f"Cannot change status from '{prev}' to '{nxt}'.")
        obj.status = nxt
        if payload.notes:
            obj.notes = payload.notes
        await OutboxService(self.session).enqueue(
            "APPOINTMENT_STATUS_CHANGED", "appointment", obj.id,
            {"from": prev, "to": nxt}
        )
        await self.session.commit()

        if nxt in (S.CONFIRMED.value, S.CANCELLED.value) and obj.client_id:
            client = await self.clients.get(obj.client_id)
            if not await AppointmentNotifier(self.session).notify(nxt, obj, client):
                await self.session.refresh(obj)
        return obj

    async def cancel(self, appt_id: uuid.UUID) -> Appointment:
        obj = await self.get(appt_id)
        if obj.is_blocked:
            raise ValidationError("Blocked slots can only be released by an admin.")
        if obj.status not in OCCUPYING_STATUSES:
            raise ValidationError(f"Appointment is already {obj.status}.")
        return await self.change_status(appt_id, AppointmentStatusChange(status=S.CANCELLED))

    async def delete(self, appt_id: uuid.UUID) -> None:
        obj = await self.get(appt_id)
        await self.appts.delete(obj)
        await OutboxService(self.session).enqueue("APPOINTMENT_DELETED", "appointment", appt_id, {})
        await self.session.commit()
