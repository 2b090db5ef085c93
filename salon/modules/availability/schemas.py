import uuid
import datetime as dt
from pydantic import AliasChoices, Field
from salon.core.schemas import CamelModel
from salon.modules.appointments.schemas import AppointmentOut

# ---- Availability rules ----

class AvailabilityCreate(CamelModel):
    is_recurring: bool = False
    day_of_week: int | None = None
    date: str | None = None  # YYYY-MM-DD, required when not recurring
    all_day: bool = False
    start_time: str | None = None
    end_time: str | None = None
    slot_duration: int | None = None
    notes: str | None = None

class AvailabilityUpdate(CamelModel):
    is_recurring: bool | None = None
    day_of_week: int | None = None
    date: str | None = None
    all_day: bool | None = None
    start_time: str | None = None
    end_time: str | None = None
    slot_duration: int | None = None
    active: bool | None = None
    notes: str | None = None

class WeeklyAvailabilitySet(CamelModel):
    day_of_week: int
    start_time: str
    end_time: str
    slot_duration: int | None = None
    notes: str | None = None

class AvailabilityOut(CamelModel):
    id: uuid.UUID
    is_recurring: bool
    day_of_week: int | None = None
    date: dt.date | None = None
    all_day: bool
    start_time: str
    end_time: str
    slot_duration: int
    active: bool
    notes: str | None = None

# ---- Blocked dates ----

class BlockedDateCreate(CamelModel):
    is_recurring: bool = False
    day_of_week: int | None = Field(default=None, validation_alias=AliasChoices("dayOfWeek", "recurringDayOfWeek", "day_of_week"))
    date: str | None = None
    all_day: bool = True
    start_time: str | None = None
    end_time: str | None = None
    reason: str | None = None

class BlockedDateUpdate(CamelModel):
    is_recurring: bool | None = None
    day_of_week: int | None = Field(default=None, validation_alias=AliasChoices("dayOfWeek", "recurringDayOfWeek", "day_of_week"))
    date: str | None = None
    all_day: bool | None = None
    start_time: str | None = None
    end_time: str | None = None
    reason: str | None = None
    active: bool | None = None

class BlockedDateOut(CamelModel):
    id: uuid.UUID
    is_recurring: bool
    day_of_week: int | None = None
    date: dt.date | None = None
    all_day: bool
    start_time: str | None = None
    end_time: str | None = None
    reason: str
    active: bool

# ---- Resolution ----

class SlotsOut(CamelModel):
    slots: list[str]
    duration: int
    duration_fallback: bool = False

class DayAvailabilityOut(CamelModel):
    date: dt.date
    available: bool
    slot_count: int

class CalendarOut(CamelModel):
    appointments: list[AppointmentOut]
    blocked_dates: list[BlockedDateOut]
    availability: list[AvailabilityOut]
