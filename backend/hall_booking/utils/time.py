from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from ..config import get_settings


def business_zone() -> ZoneInfo:
    return ZoneInfo(get_settings().business_timezone)


def business_today(now: datetime | None = None) -> date:
    """Calendar date at the venues' location; bookings are whole local days."""
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return current.astimezone(business_zone()).date()


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
