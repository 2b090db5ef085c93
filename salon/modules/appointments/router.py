import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from salon.core.db import get_session
from salon.core.security import require_scopes
from salon.modules.appointments.schemas import BookingRequest, HardBlockRequest, AppointmentStatusChange, AppointmentOut
from salon.modules.appointments.models import AppointmentStatus
from salon.modules.appointments.service import AppointmentService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> AppointmentService:
    return AppointmentService(session)

# ---- Booking ----

@router.post("/book", response_model=AppointmentOut, status_code=201)
async def book_appointment(payload: BookingRequest, service: AppointmentService = Depends(svc)):
    return await service.book(payload)

@router.post("/block", response_model=AppointmentOut, status_code=201, dependencies=[Depends(require_scopes("appointments:write"))])
async def block_time_slot(payload: HardBlockRequest, service: AppointmentService = Depends(svc)):
    return await service.block(payload)

@router.delete("/blocked/{date}", dependencies=[Depends(require_scopes("appointments:write"))])
async def unblock_date(date: str, service: AppointmentService = Depends(svc)):
    removed = await service.unblock_day(date)
    return {"message": "Blocked slots removed.", "removed": removed}

# ---- Ledger ----

@router.get("", response_model=list[AppointmentOut], dependencies=[Depends(require_scopes("appointments:read"))])
async def list_appointments(
    client_id: uuid.UUID | None = Query(None, alias="clientId"),
    date: str | None = None,
    status: AppointmentStatus | None = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: AppointmentService = Depends(svc),
):
    return await service.list(client_id, date, status, limit, offset)

@router.get("/{appt_id}", response_model=AppointmentOut, dependencies=[Depends(require_scopes("appointments:read"))])
async def get_appointment(appt_id: uuid.UUID, service: AppointmentService = Depends(svc)):
    return await service.get(appt_id)

@router.post("/{appt_id}/status", response_model=AppointmentOut, dependencies=[Depends(require_scopes("appointments:write"))])
async def change_status(appt_id: uuid.UUID, payload: AppointmentStatusChange, service: AppointmentService = Depends(svc)):
    return await service.change_status(appt_id, payload)

@router.post("/{appt_id}/cancel", response_model=AppointmentOut)
async def cancel_appointment(appt_id: uuid.UUID, service: AppointmentService = Depends(svc)):
    return await service.cancel(appt_id)

@router.delete("/{appt_id}", dependencies=[Depends(require_scopes("appointments:write"))])
async def delete_appointment(appt_id: uuid.UUID, service: AppointmentService = Depends(svc)):
    await service.delete(appt_id)
    return {"message": "Appointment deleted."}
