from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Mapping, Optional, Sequence

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from ..core.enums import DailyAttendanceStatus
from .model import AttendanceRecord
from .repository import AttendanceRepository

ATTENDANCE_COLLECTION = "teacherDailyAttendance"


class FirestoreAttendanceRepository(AttendanceRepository):
    def __init__(self, client, *, tz: tzinfo):
        self._client = client
        self._tz = tz

    def _records(self):
        return self._client.collection(ATTENDANCE_COLLECTION)

    def _to_record(self, data: Mapping[str, Any]) -> AttendanceRecord:
        recorded_at = data.get("recordedAt")
        return AttendanceRecord(
            teacher_id=str(data.get("teacherUid")),
            # Firestore hands timestamps back in UTC.
            date=data["date"].astimezone(self._tz),
            status=DailyAttendanceStatus(data.get("status", DailyAttendanceStatus.PRESENT.value)),
            teacher_name=data.get("teacherName"),
            notes=data.get("notes") or None,
            recorded_at=recorded_at.astimezone(self._tz) if isinstance(recorded_at, datetime) else None,
        )

    def list_for_day(self, day: datetime) -> Sequence[AttendanceRecord]:
        query = self._records().where(filter=FieldFilter("date", "==", day))
        return [self._to_record(doc.to_dict() or {}) for doc in query.stream()]

    def get_for_teacher_and_day(self, teacher_id: str, day: datetime) -> Optional[AttendanceRecord]:
        snap = self._records().document(f"{teacher_id}_{day:%Y-%m-%d}").get()
        if not snap.exists:
            return None
        return self._to_record(snap.to_dict() or {})

    def upsert(self, record: AttendanceRecord, *, updated_by: str) -> str:
        self._records().document(record.record_id).set(
            {
                "teacherUid": record.teacher_id,
                "teacherName": record.teacher_name,
                "date": record.date,
                "status": record.status.value,
                "notes": record.notes or "",
                "lastUpdatedByUid": updated_by,
                "recordedAt": record.recorded_at or firestore.SERVER_TIMESTAMP,
            },
            merge=True,
        )
        return record.record_id

    def list_for_teacher_between(self, teacher_id: str, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        # Equality-only query; the date window is applied here so no composite index is needed.
        query = self._records().where(filter=FieldFilter("teacherUid", "==", teacher_id))
        records = [self._to_record(doc.to_dict() or {}) for doc in query.stream()]
        records = [r for r in records if start <= r.date < end]
        records.sort(key=lambda r: r.date)
        return records
