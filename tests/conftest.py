from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from school_portal.attendance.model import AttendanceRecord
from school_portal.core.enums import Role
from school_portal.core.exceptions import PushGatewayError
from school_portal.notifications.model import DispatchResult, PushMessage, RecipientResult
from school_portal.users.model import UserProfile

JAKARTA = ZoneInfo("Asia/Jakarta")


class InMemoryUsers:
    def __init__(self, profiles=()):
        self.profiles: dict[str, UserProfile] = {p.uid: p for p in profiles}
        self.list_calls = 0
        self.fail_with: Optional[Exception] = None

    def list_by_role(self, role: Role):
        self.list_calls += 1
        if self.fail_with:
            raise self.fail_with
        return [p for p in self.profiles.values() if p.role == role]

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        return self.profiles.get(uid)

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        for p in self.profiles.values():
            if p.email == email:
                return p
        return None

    def update_fcm_token(self, uid: str, token: Optional[str]) -> bool:
        p = self.profiles.get(uid)
        if not p:
            return False
        self.profiles[uid] = UserProfile(
            uid=p.uid,
            role=p.role,
            display_name=p.display_name,
            email=p.email,
            duties=p.duties,
            assigned_subjects=p.assigned_subjects,
            fcm_token=token,
            password_hash=p.password_hash,
            is_active=p.is_active,
        )
        return True


class InMemoryAttendance:
    def __init__(self, records=()):
        self.records: dict[str, AttendanceRecord] = {r.record_id: r for r in records}
        self.updated_by: dict[str, str] = {}
        self.queried_days: list[datetime] = []
        self.fail_with: Optional[Exception] = None

    def list_for_day(self, day: datetime):
        self.queried_days.append(day)
        if self.fail_with:
            raise self.fail_with
        return [r for r in self.records.values() if r.date == day]

    def get_for_teacher_and_day(self, teacher_id: str, day: datetime):
        return self.records.get(f"{teacher_id}_{day:%Y-%m-%d}")

    def upsert(self, record: AttendanceRecord, *, updated_by: str) -> str:
        self.records[record.record_id] = record
        self.updated_by[record.record_id] = updated_by
        return record.record_id

    def list_for_teacher_between(self, teacher_id: str, start: datetime, end: datetime):
        items = [r for r in self.records.values() if r.teacher_id == teacher_id and start <= r.date < end]
        return sorted(items, key=lambda r: r.date)


class FakeGateway:
    """Records every dispatch; `failing_indexes` marks recipients the gateway rejects."""

    def __init__(self, failing_indexes=(), error: Optional[Exception] = None):
        self.failing_indexes = set(failing_indexes)
        self.error = error
        self.calls: list[tuple[list[str], PushMessage]] = []

    def send_multicast(self, tokens, message: PushMessage) -> DispatchResult:
        self.calls.append((list(tokens), message))
        if self.error:
            raise self.error
        return DispatchResult.from_responses(
            RecipientResult(token=t, success=i not in self.failing_indexes, error=None if i not in self.failing_indexes else "unregistered")
            for i, t in enumerate(tokens)
        )


def staff(uid: str, token: Optional[str] = None, **kwargs) -> UserProfile:
    return UserProfile(uid=uid, role=Role.STAFF, display_name=kwargs.pop("display_name", uid.upper()), fcm_token=token, **kwargs)


def attended(uid: str, day: datetime) -> AttendanceRecord:
    return AttendanceRecord(teacher_id=uid, date=day)


@pytest.fixture
def jakarta():
    return JAKARTA


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday 2026-03-04 10:00 WIB
    return datetime(2026, 3, 4, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def today(fixed_now) -> datetime:
    return datetime(2026, 3, 4, tzinfo=JAKARTA)


@pytest.fixture
def reminder_message() -> PushMessage:
    return PushMessage(title="Pengingat Kehadiran Harian", body="Anda belum mencatat kehadiran untuk hari ini.")


@pytest.fixture
def make_staff():
    return staff


@pytest.fixture
def make_attended():
    return attended


@pytest.fixture
def users_factory():
    return InMemoryUsers


@pytest.fixture
def attendance_factory():
    return InMemoryAttendance


@pytest.fixture
def gateway_factory():
    return FakeGateway


@pytest.fixture
def gateway_error():
    return PushGatewayError("FCM unavailable")


@pytest.fixture
def make_app(clock):
    """Flask app in testing mode around in-memory collaborators."""
    from config import testing as test_settings
    from school_portal.container import assemble
    from school_portal.main import create_app

    def _make(users=None, attendance=None, gateway=None):
        container = assemble(
            users_repo=users if users is not None else InMemoryUsers(),
            attendance_repo=attendance if attendance is not None else InMemoryAttendance(),
            push_gateway=gateway if gateway is not None else FakeGateway(),
            settings=test_settings,
            clock=clock,
        )
        return create_app(settings_module="config.testing", container=container)

    return _make


@pytest.fixture
def sign_in():
    from school_portal.access.model import Session

    def _sign_in(client, uid="t1", role=Role.STAFF, duties=(), name=None):
        """Put `uid` in the cookie; a profile is stored for it unless one already exists."""
        users = client.application.extensions["school_portal"].users_repo
        if users.get_profile(uid) is None:
            users.profiles[uid] = UserProfile(uid=uid, role=role, display_name=name, duties=frozenset(duties))
        with client.session_transaction() as sess:
            sess.update(Session.from_profile(users.get_profile(uid)).to_cookie())

    return _sign_in
