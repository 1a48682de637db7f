from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance store. `day` arguments are tz-aware midnights in the school zone."""

    def list_for_day(self, day: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_teacher_and_day(self, teacher_id: str, day: datetime) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord, *, updated_by: str) -> str:
        """Create or replace the single record of (teacher, day); returns its id."""

        raise NotImplementedError

    def list_for_teacher_between(self, teacher_id: str, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        """Records with start <= date < end, oldest first."""

        raise NotImplementedError
