import uuid
import datetime as dt
from pydantic import Field
from salon.core.schemas import CamelModel
from salon.modules.appointments.models import AppointmentStatus

# ---- Appointments ----

class BookingRequest(CamelModel):
    client_id: uuid.UUID
    service_id: uuid.UUID
    date: str
    start_time: str
    end_time: str | None = None  # recomputed from the service duration
    client_notes: str | None = None
    inspo_photos: list[str] = Field(default_factory=list)

class HardBlockRequest(CamelModel):
    date: str
    start_time: str
    end_time: str
    reason: str | None = None

class AppointmentStatusChange(CamelModel):
    status: AppointmentStatus
    notes: str | None = None

class AppointmentOut(CamelModel):
    id: uuid.UUID
    client_id: uuid.UUID | None = None
    service_id: uuid.UUID | None = None
    date: dt.date
    start_time: str
    end_time: str
    duration_minutes: int
    status: AppointmentStatus
    total_cost: float
    is_blocked: bool
    client_notes: str | None = None
    notes: str | None = None
    inspo_photos: list[str] = Field(default_factory=list)
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None
