from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DailyAttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one staff member's attendance for one calendar day.

    `date` is the tz-aware midnight of that day in the school's time zone.
    Its existence for today is proof of attendance for the reminder job.
    """

    teacher_id: str
    date: datetime
    status: DailyAttendanceStatus = DailyAttendanceStatus.PRESENT
    teacher_name: Optional[str] = None
    notes: Optional[str] = None
    recorded_at: Optional[datetime] = None

    @property
    def record_id(self) -> str:
        return f"{self.teacher_id}_{self.date:%Y-%m-%d}"


@dataclass(frozen=True)
class DailyRecap:
    """Read-model for the admin attendance recap of a single day."""

    date: datetime
    recorded: list[AttendanceRecord]
    missing: list[dict]


@dataclass(frozen=True)
class MonthlyRecap:
    teacher_id: str
    year: int
    month: int
    counts: dict[str, int]
    records: list[AttendanceRecord]
