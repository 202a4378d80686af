# app/helpers/time.py
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Annotated, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from pydantic import AfterValidator

from config.appconfig import settings

ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (sqlite drops tzinfo on read)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Schema datetime: naive input is read as UTC, aware input is converted to UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def to_local(value: datetime) -> datetime:
    return as_utc(value).astimezone(local_zone())


def format_br_date(value: Union[datetime, date, None]) -> str:
    """dd/mm/yyyy in the ward's calendar."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = to_local(value).date()
    return value.strftime("%d/%m/%Y")


def local_day_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """UTC [start, end) of the local calendar day containing ``now``."""
    local_now = to_local(now or utcnow())
    start = datetime.combine(local_now.date(), time.min, tzinfo=local_zone())
    end = start + ONE_DAY
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def days_since(start: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since ``start`` (never negative)."""
    elapsed = (as_utc(now or utcnow()) - as_utc(start)) / ONE_DAY
    return max(0, math.floor(elapsed))


def treatment_day(start: datetime, now: Optional[datetime] = None) -> int:
    """
    Ordinal treatment day (Dn) of a course started at ``start``.

    ceil of elapsed days, floored at 1 so the start instant itself is D1.
    """
    elapsed = (as_utc(now or utcnow()) - as_utc(start)) / ONE_DAY
    return max(1, math.ceil(elapsed))
