import uuid
from pydantic import Field
from salon.core.schemas import CamelModel

class ServiceCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    category: str = Field(default="other", pattern="^(haircut|coloring|styling|treatment|extensions|other)$")
    duration_minutes: int = Field(..., ge=5, le=600)
    price: float = Field(..., ge=0)
    active: bool = True

class ServiceOut(ServiceCreate):
    id: uuid.UUID
