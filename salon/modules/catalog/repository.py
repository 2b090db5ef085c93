import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from salon.modules.catalog.models import Service

class ServiceRepository:
    def __init__(self, s: AsyncSession): self.s = s

    async def create(self, **data) -> Service:
        obj = Service(**data); self.s.add(obj); await self.s.flush(); return obj

    async def get(self, service_id: uuid.UUID) -> Service | None:
        res = await self.s.execute(select(Service).where(Service.id == service_id))
        return res.scalar_one_or_none()

    async def list_active(self) -> Sequence[Service]:
        r = await self.s.execute(select(Service).where(Service.active.is_(True)).order_by(Service.name.asc()))
        return r.scalars().all()

    async def duration_of(self, service_id: uuid.UUID | None) -> int | None:
        """Duration lookup used by slot resolution; None when the service is unknown."""
        if service_id is None:
            return None
        svc = await self.get(service_id)
        return svc.duration_minutes if svc else None
