import uuid
from pydantic import EmailStr, Field
from salon.core.schemas import CamelModel

class ClientCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr | None = None
    phone: str | None = None

class ClientOut(CamelModel):
    id: uuid.UUID
    name: str
    email: str | None
    phone: str | None
