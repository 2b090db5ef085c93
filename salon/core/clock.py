from datetime import datetime, date
from zoneinfo import ZoneInfo
from .config import settings

def salon_tz() -> ZoneInfo:
    return ZoneInfo(settings.SALON_TIMEZONE)

def now_local() -> datetime:
    """Wall-clock time at the salon."""
    return datetime.now(salon_tz())

def today_local() -> date:
    return now_local().date()
