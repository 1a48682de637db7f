from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional

from ..access.model import Session
from ..common.datetime_utils import Clock, day_start, local_midnight, now_utc
from ..common.validators import require_max_length
from ..core.constants import DEFAULT_DISPLAY_NAME, MAX_ATTENDANCE_NOTES
from ..core.enums import DailyAttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.repository import UserRepository
from .model import AttendanceRecord, DailyRecap, MonthlyRecap
from .repository import AttendanceRepository


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        tz: tzinfo,
        clock: Optional[Clock] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._tz = tz
        self._clock = clock or now_utc

    def today(self) -> datetime:
        return local_midnight(self._clock(), self._tz)

    def record(
        self,
        session: Session,
        *,
        status: str,
        notes: Optional[str] = None,
        day: Optional[date] = None,
    ) -> AttendanceRecord:
        """Create or update the signed-in staff member's record for `day` (default: today)."""
        if session.role != Role.STAFF:
            raise AuthorizationError("Hanya guru yang dapat mencatat kehadiran")

        try:
            status_value = DailyAttendanceStatus(status)
        except ValueError:
            raise ValidationError("Status kehadiran harus dipilih")

        notes = (notes or "").strip() or None
        require_max_length(notes, "Catatan", MAX_ATTENDANCE_NOTES)

        target = day_start(day, self._tz) if day else self.today()
        record = AttendanceRecord(
            teacher_id=session.uid,
            date=target,
            status=status_value,
            teacher_name=session.display_name or DEFAULT_DISPLAY_NAME,
            notes=notes,
            recorded_at=self._clock().astimezone(self._tz),
        )
        self._attendance.upsert(record, updated_by=session.uid)
        return record

    def get_for_day(self, teacher_id: str, day: Optional[date] = None) -> Optional[AttendanceRecord]:
        target = day_start(day, self._tz) if day else self.today()
        return self._attendance.get_for_teacher_and_day(teacher_id, target)

    def monthly_recap(self, teacher_id: str, *, year: int, month: int) -> MonthlyRecap:
        year, month = int(year), int(month)
        if not 1 <= month <= 12:
            raise ValidationError("Bulan tidak valid")
        start = datetime(year, month, 1, tzinfo=self._tz)
        end = datetime(year + 1, 1, 1, tzinfo=self._tz) if month == 12 else datetime(year, month + 1, 1, tzinfo=self._tz)

        records = list(self._attendance.list_for_teacher_between(teacher_id, start, end))
        counts = {s.value: 0 for s in DailyAttendanceStatus}
        for r in records:
            counts[r.status.value] += 1
        return MonthlyRecap(teacher_id=teacher_id, year=year, month=month, counts=counts, records=records)

    def daily_recap(self, day: Optional[date] = None) -> DailyRecap:
        """Recorded attendance for a day plus the staff who have not recorded anything."""
        target = day_start(day, self._tz) if day else self.today()
        records = sorted(self._attendance.list_for_day(target), key=lambda r: (r.teacher_name or "", r.teacher_id))
        recorded = {r.teacher_id for r in records}

        missing = [
            {
                "uid": s.uid,
                "display_name": s.display_name or DEFAULT_DISPLAY_NAME,
                "has_push_token": s.has_push_token,
            }
            for s in self._users.list_by_role(Role.STAFF)
            if s.uid not in recorded
        ]
        missing.sort(key=lambda m: m["display_name"])
        return DailyRecap(date=target, recorded=records, missing=missing)


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "teacher_id": r.teacher_id,
        "teacher_name": r.teacher_name,
        "date": r.date.strftime("%Y-%m-%d"),
        "status": r.status.value,
        "notes": r.notes or "",
        "recorded_at": r.recorded_at.isoformat() if r.recorded_at else None,
    }
