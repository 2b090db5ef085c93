import uuid
import datetime as dt
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_
from sqlalchemy.exc import IntegrityError
from salon.modules.appointments.models import Appointment, BookingDayLock, OCCUPYING_STATUSES

class AppointmentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> Appointment:
        obj = Appointment(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, appt_id: uuid.UUID) -> Appointment | None:
        res = await self.session.execute(select(Appointment).where(Appointment.id == appt_id))
        return res.scalar_one_or_none()

    async def list(self, *, client_id: uuid.UUID | None = None, day: dt.date | None = None, status: str | None = None, limit: int = 100, offset: int = 0) -> Sequence[Appointment]:
        cond = []
        if client_id:
            cond.append(Appointment.client_id == client_id)
        if day:
            cond.append(Appointment.date == day)
        if status:
            cond.append(Appointment.status == status)
        q = select(Appointment).where(and_(*cond)).order_by(Appointment.date.asc(), Appointment.start_time.asc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_in_range(self, start: dt.date, end: dt.date, *, occupying_only: bool = False) -> Sequence[Appointment]:
        """Appointments with start <= date <= end."""
        cond = [Appointment.date >= start, Appointment.date <= end]
        if occupying_only:
            cond.append(Appointment.status.in_(OCCUPYING_STATUSES))
        q = select(Appointment).where(and_(*cond)).order_by(Appointment.date.asc(), Appointment.start_time.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def list_occupying_on(self, day: dt.date) -> Sequence[Appointment]:
        return await self.list_in_range(day, day, occupying_only=True)

    async def delete(self, obj: Appointment) -> None:
        await self.session.delete(obj)
        await self.session.flush()

    async def delete_blocks_on(self, day: dt.date) -> int:
        res = await self.session.execute(
            delete(Appointment).where(Appointment.date == day, Appointment.is_blocked.is_(True))
        )
        await self.session.flush()
        return res.rowcount or 0

    # serialization
    async def lock_day(self, day: dt.date) -> BookingDayLock:
        """
        SELECT ... FOR UPDATE on the day's lock row, creating it on first use.
        Must run before anything else in the transaction: a lost creation race
        rolls the transaction back and re-selects.
        """
        q = select(BookingDayLock).where(BookingDayLock.day == day).with_for_update()
        row = (await self.session.execute(q)).scalar_one_or_none()
        if row:
            return row
        self.session.add(BookingDayLock(day=day))
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
        return (await self.session.execute(q)).scalar_one()
