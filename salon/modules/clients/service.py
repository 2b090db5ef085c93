import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from salon.core.errors import NotFoundError
from salon.modules.clients.repository import ClientRepository
from salon.modules.clients.schemas import ClientCreate
from salon.modules.clients.models import Client

class ClientService:
    def __init__(self, session: AsyncSession):
        self.repo = ClientRepository(session)
        self.session = session

    async def create(self, payload: ClientCreate) -> Client:
        obj = await self.repo.create(**payload.model_dump(exclude_unset=True))
        await self.session.commit()
        return obj

    async def get(self, client_id: uuid.UUID) -> Client:
        obj = await self.repo.get(client_id)
        if not obj:
            raise NotFoundError("Client not found.")
        return obj
