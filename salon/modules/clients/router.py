import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.db import get_session
from salon.modules.clients.schemas import ClientCreate, ClientOut
from salon.modules.clients.service import ClientService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> ClientService:
    return ClientService(session)

@router.post("", response_model=ClientOut, status_code=201)
async def create_client(
    payload: ClientCreate,
    service: ClientService = Depends(svc),
):
    return await service.create(payload)

@router.get("/{client_id}", response_model=ClientOut)
async def get_client(
    client_id: uuid.UUID,
    service: ClientService = Depends(svc),
):
    return await service.get(client_id)
