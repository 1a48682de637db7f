from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from google.api_core.exceptions import NotFound

from school_portal.attendance.firestore_attendance_repository import FirestoreAttendanceRepository
from school_portal.attendance.model import AttendanceRecord
from school_portal.core.enums import DailyAttendanceStatus, Role
from school_portal.users.firestore_user_repository import FirestoreUserRepository

JAKARTA = ZoneInfo("Asia/Jakarta")


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, store, doc_id):
        self._store = store
        self._id = doc_id

    def get(self):
        return FakeSnapshot(self._id, self._store.get(self._id))

    def set(self, data, merge=False):
        current = self._store.get(self._id, {}) if merge else {}
        self._store[self._id] = {**current, **data}

    def update(self, data):
        if self._id not in self._store:
            raise NotFound(f"No document to update: {self._id}")
        self._store[self._id].update(data)


class FakeQuery:
    def __init__(self, store, filters=(), limit=None):
        self._store = store
        self._filters = list(filters)
        self._limit = limit

    def where(self, *, filter):
        return FakeQuery(self._store, self._filters + [filter], self._limit)

    def limit(self, n):
        return FakeQuery(self._store, self._filters, n)

    def stream(self):
        hits = [
            FakeSnapshot(doc_id, data)
            for doc_id, data in self._store.items()
            if all(f.op_string == "==" and data.get(f.field_path) == f.value for f in self._filters)
        ]
        return iter(hits[: self._limit] if self._limit else hits)


class FakeCollection(FakeQuery):
    def document(self, doc_id):
        return FakeDocument(self._store, doc_id)


class FakeFirestore:
    def __init__(self):
        self.collections: dict[str, dict] = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))


@pytest.fixture
def client():
    db = FakeFirestore()
    db.collections["users"] = {
        "t1": {"uid": "t1", "role": "guru", "displayName": "Bu Sari", "email": "sari@smapna.sch.id", "fcmToken": "tok"},
        "t2": {"uid": "t2", "role": "guru", "tugasTambahan": ["kepala_tata_usaha"]},
        "a1": {"uid": "a1", "role": "admin"},
        "x1": {"uid": "x1", "role": "siswa"},
    }
    return db


def test_users_by_role_skips_other_roles(client):
    repo = FirestoreUserRepository(client)

    assert sorted(p.uid for p in repo.list_by_role(Role.STAFF)) == ["t1", "t2"]
    assert [p.uid for p in repo.list_by_role(Role.ADMIN)] == ["a1"]


def test_user_lookups(client):
    repo = FirestoreUserRepository(client)

    assert repo.get_profile("t2").duties
    assert repo.get_profile("nobody") is None
    assert repo.get_by_email("sari@smapna.sch.id").uid == "t1"
    assert repo.get_by_email("none@smapna.sch.id") is None


def test_update_fcm_token(client):
    repo = FirestoreUserRepository(client)

    assert repo.update_fcm_token("t1", None) is True
    assert client.collections["users"]["t1"]["fcmToken"] is None
    assert repo.update_fcm_token("nobody", "tok") is False


def test_attendance_upsert_and_day_query(client):
    repo = FirestoreAttendanceRepository(client, tz=JAKARTA)
    day = datetime(2026, 3, 4, tzinfo=JAKARTA)
    record = AttendanceRecord(
        teacher_id="t1",
        date=day,
        status=DailyAttendanceStatus.PERMITTED,
        teacher_name="Bu Sari",
        recorded_at=datetime(2026, 3, 4, 2, 0, tzinfo=timezone.utc),
    )

    assert repo.upsert(record, updated_by="t1") == "t1_2026-03-04"
    stored = client.collections["teacherDailyAttendance"]["t1_2026-03-04"]
    assert stored["lastUpdatedByUid"] == "t1"
    assert stored["status"] == "Izin"

    found = repo.list_for_day(day)
    assert [r.teacher_id for r in found] == ["t1"]
    assert repo.get_for_teacher_and_day("t1", day).status == DailyAttendanceStatus.PERMITTED
    assert repo.get_for_teacher_and_day("t2", day) is None


def test_attendance_between_is_half_open(client):
    repo = FirestoreAttendanceRepository(client, tz=JAKARTA)
    for d in (1, 15, 31):
        repo.upsert(AttendanceRecord(teacher_id="t1", date=datetime(2026, 3, d, tzinfo=JAKARTA)), updated_by="t1")
    repo.upsert(AttendanceRecord(teacher_id="t1", date=datetime(2026, 4, 1, tzinfo=JAKARTA)), updated_by="t1")

    records = repo.list_for_teacher_between(
        "t1", datetime(2026, 3, 1, tzinfo=JAKARTA), datetime(2026, 4, 1, tzinfo=JAKARTA)
    )

    assert [r.date.day for r in records] == [1, 15, 31]
