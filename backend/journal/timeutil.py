"""UTC clock and timestamp helpers."""
from datetime import date, datetime
from typing import Callable

import pytz

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as a fixed-width UTC ISO-8601 string.

    The width never varies (microseconds are always present), so string
    order equals chronological order.
    """
    return to_utc(value).isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def utc_date(value: datetime) -> date:
    return to_utc(value).date()
