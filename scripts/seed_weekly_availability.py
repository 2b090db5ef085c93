import asyncio
import os
import sys
from sqlalchemy.future import select

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from salon.core.config import settings
from salon.core.db import SessionLocal, init_models
from salon.modules.availability.models import AvailabilityRule

WORKING_DAYS = range(1, 6)  # Monday to Friday (0 = Sunday)

async def main():
    """
    Seeds the default weekly schedule: Monday to Friday, 09:00 to 17:00,
    30-minute slots. Does nothing when recurring rules already exist.
    """
    print("Seeding weekly availability...")
    await init_models()
    async with SessionLocal() as db:
        existing = (await db.execute(select(AvailabilityRule).where(AvailabilityRule.is_recurring.is_(True)))).scalars().first()
        if existing:
            print("  Recurring availability already present, skipping.")
            return
        for day in WORKING_DAYS:
            db.add(AvailabilityRule(
                is_recurring=True,
                day_of_week=day,
                all_day=False,
                start_time=settings.ALL_DAY_START,
                end_time=settings.ALL_DAY_END,
                slot_duration=settings.DEFAULT_SLOT_MINUTES,
                active=True,
                notes="Default weekly hours",
            ))
            print(f"  - day {day}: {settings.ALL_DAY_START}-{settings.ALL_DAY_END}")
        await db.commit()
    print("Done.")

if __name__ == "__main__":
    asyncio.run(main())
