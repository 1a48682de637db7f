from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import day_start
from ..core.enums import DailyAttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "teacher_uid, work_date, teacher_name, status, notes, recorded_at"


class MySQLAttendanceRepository(AttendanceRepository):
    """Stores the calendar day as a DATE; `recorded_at` is kept in UTC."""

    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_record(self, r: Dict[str, Any]) -> AttendanceRecord:
        return AttendanceRecord(
            teacher_id=str(r["teacher_uid"]),
            date=day_start(r["work_date"], self._tz),
            status=DailyAttendanceStatus(r["status"]),
            teacher_name=r.get("teacher_name"),
            notes=r.get("notes") or None,
            recorded_at=from_db_datetime(r.get("recorded_at"), self._tz),
        )

    def list_for_day(self, day: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM teacher_daily_attendance WHERE work_date=%s",
                (day.date(),),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def get_for_teacher_and_day(self, teacher_id: str, day: datetime) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM teacher_daily_attendance WHERE teacher_uid=%s AND work_date=%s",
                (teacher_id, day.date()),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def upsert(self, record: AttendanceRecord, *, updated_by: str) -> str:
        recorded_at = to_db_datetime(record.recorded_at or datetime.now(timezone.utc))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teacher_daily_attendance
                    (teacher_uid, work_date, teacher_name, status, notes, recorded_at, last_updated_by_uid)
                VALUES (%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    teacher_name=VALUES(teacher_name), status=VALUES(status), notes=VALUES(notes),
                    recorded_at=VALUES(recorded_at), last_updated_by_uid=VALUES(last_updated_by_uid)
                """,
                (
                    record.teacher_id,
                    record.date.date(),
                    record.teacher_name,
                    record.status.value,
                    record.notes,
                    recorded_at,
                    updated_by,
                ),
            )
        return record.record_id

    def list_for_teacher_between(self, teacher_id: str, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM teacher_daily_attendance
                WHERE teacher_uid=%s AND work_date >= %s AND work_date < %s
                ORDER BY work_date ASC
                """,
                (teacher_id, start.date(), end.date()),
            )
            return [self._to_record(r) for r in fetchall(cur)]
