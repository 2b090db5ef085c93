import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from salon.modules.clients.models import Client

class ClientRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **data) -> Client:
        obj = Client(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, client_id: uuid.UUID) -> Client | None:
        res = await self.session.execute(select(Client).where(Client.id == client_id))
        return res.scalar_one_or_none()
