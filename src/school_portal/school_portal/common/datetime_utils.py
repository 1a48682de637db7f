from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ConfigurationError

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current aware time in UTC.

    Note: Wrapped so tests can pass their own clock instead.
    """
    return datetime.now(timezone.utc)


def school_zone(name: str) -> ZoneInfo:
    """Resolve a named IANA zone; fixed offsets and server-local time are not accepted."""
    if not name or name.upper() == "UTC":
        raise ConfigurationError(f"Zona waktu sekolah harus berupa nama wilayah, bukan {name!r}")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Zona waktu tidak dikenal: {name!r}") from e


def local_midnight(moment: datetime, tz: tzinfo) -> datetime:
    """Start of the calendar day that contains `moment`, as seen in `tz`."""
    if moment.tzinfo is None:
        # Naive values are taken as UTC, never as server-local time.
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(tz)
    return datetime(local.year, local.month, local.day, tzinfo=tz)


def day_start(day: date, tz: tzinfo) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz)
