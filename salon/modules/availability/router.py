import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.db import get_session
from salon.core.security import require_scopes
from salon.modules.availability.service import AvailabilityService
from salon.modules.availability.resolver import SlotResolver
from salon.modules.availability.scanner import MonthScanner
from salon.modules.availability.schemas import (
    AvailabilityCreate, AvailabilityUpdate, AvailabilityOut, WeeklyAvailabilitySet,
    BlockedDateCreate, BlockedDateUpdate, BlockedDateOut,
    SlotsOut, DayAvailabilityOut, CalendarOut,
)

router = APIRouter()

def svc(s: AsyncSession = Depends(get_session)) -> AvailabilityService:
    return AvailabilityService(s)

# ---- Public: slot resolution ----

@router.get("/slots", response_model=SlotsOut)
async def get_slots(
    date: str | None = None,
    service_id: uuid.UUID | None = Query(None, alias="serviceId"),
    s: AsyncSession = Depends(get_session),
):
    result = await SlotResolver(s).resolve(date, service_id=service_id)
    return SlotsOut(slots=result.slots, duration=result.duration, duration_fallback=result.duration_fallback)

@router.get("/dates/{year}/{month}", response_model=list[DayAvailabilityOut])
async def get_available_dates(
    year: int,
    month: int,
    service_id: uuid.UUID | None = Query(None, alias="serviceId"),
    s: AsyncSession = Depends(get_session),
):
    days = await MonthScanner(s).scan(year, month, service_id=service_id)
    return [DayAvailabilityOut(date=d.date, available=d.available, slot_count=d.slot_count) for d in days]

# ---- Admin: calendar feed ----

@router.get("/calendar", response_model=CalendarOut, dependencies=[Depends(require_scopes("availability:read"))])
async def get_calendar(month: int, year: int, service: AvailabilityService = Depends(svc)):
    return await service.calendar(year, month)

# ---- Admin: availability rules ----

@router.get("", response_model=list[AvailabilityOut], dependencies=[Depends(require_scopes("availability:read"))])
async def list_availability(service: AvailabilityService = Depends(svc)):
    return await service.list_rules()

@router.post("/create", response_model=AvailabilityOut, status_code=201, dependencies=[Depends(require_scopes("availability:write"))])
async def create_availability(payload: AvailabilityCreate, service: AvailabilityService = Depends(svc)):
    return await service.create_rule(payload)

@router.post("/set", response_model=AvailabilityOut, dependencies=[Depends(require_scopes("availability:write"))])
async def set_weekly_availability(payload: WeeklyAvailabilitySet, service: AvailabilityService = Depends(svc)):
    return await service.set_weekly(payload)

@router.delete("/deactivate/{day_of_week}", dependencies=[Depends(require_scopes("availability:write"))])
async def deactivate_weekly_availability(day_of_week: int, service: AvailabilityService = Depends(svc)):
    await service.deactivate_weekly(day_of_week)
    return {"message": "Availability deactivated."}

# ---- Admin: blocked dates ----

@router.get("/blocked", response_model=list[BlockedDateOut], dependencies=[Depends(require_scopes("availability:read"))])
async def list_blocked_dates(service: AvailabilityService = Depends(svc)):
    return await service.list_blocks()

@router.post("/blocked", response_model=BlockedDateOut, status_code=201, dependencies=[Depends(require_scopes("availability:write"))])
async def create_blocked_date(payload: BlockedDateCreate, service: AvailabilityService = Depends(svc)):
    return await service.create_block(payload)

@router.put("/blocked/{block_id}", response_model=BlockedDateOut, dependencies=[Depends(require_scopes("availability:write"))])
async def update_blocked_date(block_id: uuid.UUID, payload: BlockedDateUpdate, service: AvailabilityService = Depends(svc)):
    return await service.update_block(block_id, payload)

@router.delete("/blocked/{block_id}", dependencies=[Depends(require_scopes("availability:write"))])
async def delete_blocked_date(block_id: uuid.UUID, service: AvailabilityService = Depends(svc)):
    await service.delete_block(block_id)
    return {"message": "Blocked date removed."}

# id routes last so the literal paths above win

@router.put("/{rule_id}", response_model=AvailabilityOut, dependencies=[Depends(require_scopes("availability:write"))])
async def update_availability(rule_id: uuid.UUID, payload: AvailabilityUpdate, service: AvailabilityService = Depends(svc)):
    return await service.update_rule(rule_id, payload)

@router.delete("/{rule_id}", dependencies=[Depends(require_scopes("availability:write"))])
async def delete_availability(rule_id: uuid.UUID, service: AvailabilityService = Depends(svc)):
    await service.delete_rule(rule_id)
    return {"message": "Availability deleted."}
