import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from salon.modules.availability.models import AvailabilityRule, BlockedDate

class AvailabilityRepository:
    def __init__(self, s: AsyncSession): self.s = s

    # rules
    async def create_rule(self, **data) -> AvailabilityRule:
        obj = AvailabilityRule(**data); self.s.add(obj); await self.s.flush(); return obj

    async def get_rule(self, rule_id: uuid.UUID) -> AvailabilityRule | None:
        res = await self.s.execute(select(AvailabilityRule).where(AvailabilityRule.id == rule_id))
        return res.scalar_one_or_none()

    async def get_recurring_rule(self, day_of_week: int) -> AvailabilityRule | None:
        res = await self.s.execute(select(AvailabilityRule).where(
            AvailabilityRule.is_recurring.is_(True),
            AvailabilityRule.day_of_week == day_of_week,
        ).order_by(AvailabilityRule.created_at.asc()).limit(1))
        return res.scalar_one_or_none()

    async def list_active_rules(self) -> Sequence[AvailabilityRule]:
        res = await self.s.execute(select(AvailabilityRule).where(
            AvailabilityRule.active.is_(True)
        ).order_by(AvailabilityRule.date.asc().nulls_last(), AvailabilityRule.day_of_week.asc(), AvailabilityRule.start_time.asc()))
        return res.scalars().all()

    async def delete_rule(self, obj: AvailabilityRule) -> None:
        await self.s.delete(obj); await self.s.flush()

    # blocks
    async def create_block(self, **data) -> BlockedDate:
        obj = BlockedDate(**data); self.s.add(obj); await self.s.flush(); return obj

    async def get_block(self, block_id: uuid.UUID) -> BlockedDate | None:
        res = await self.s.execute(select(BlockedDate).where(BlockedDate.id == block_id))
        return res.scalar_one_or_none()

    async def list_active_blocks(self) -> Sequence[BlockedDate]:
        res = await self.s.execute(select(BlockedDate).where(
            BlockedDate.active.is_(True)
        ).order_by(BlockedDate.date.asc().nulls_last(), BlockedDate.day_of_week.asc()))
        return res.scalars().all()

    async def delete_block(self, obj: BlockedDate) -> None:
        await self.s.delete(obj); await self.s.flush()
