import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.db import get_session
from salon.core.errors import NotFoundError
from salon.core.security import require_scopes
from salon.modules.catalog.schemas import ServiceCreate, ServiceOut
from salon.modules.catalog.repository import ServiceRepository

router = APIRouter()

@router.post("", response_model=ServiceOut, status_code=201, dependencies=[Depends(require_scopes("catalog:write"))])
async def create_service(payload: ServiceCreate, s: AsyncSession = Depends(get_session)):
    repo = ServiceRepository(s); obj = await repo.create(**payload.model_dump()); await s.commit(); return obj

@router.get("", response_model=list[ServiceOut])
async def list_services(s: AsyncSession = Depends(get_session)):
    return await ServiceRepository(s).list_active()

@router.get("/{service_id}", response_model=ServiceOut)
async def get_service(service_id: uuid.UUID, s: AsyncSession = Depends(get_session)):
    obj = await ServiceRepository(s).get(service_id)
    if not obj:
        raise NotFoundError("Service not found.")
    return obj
