from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .attendance.firestore_attendance_repository import FirestoreAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import school_zone
from .core.constants import REMINDER_BODY, REMINDER_TIMEZONE, REMINDER_TITLE
from .core.exceptions import ConfigurationError
from .database.connection import DatabaseConnection, DBConfig
from .database.firebase import FirebaseConfig, get_app, get_firestore
from .notifications.fcm_gateway import FCMPushGateway
from .notifications.gateway import PushGateway
from .notifications.model import PushMessage
from .reminders.service import AttendanceReminderJob
from .users.firestore_user_repository import FirestoreUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    push_gateway: PushGateway

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    reminder_job: AttendanceReminderJob


def reminder_message(settings: Any) -> PushMessage:
    base_url = (getattr(settings, "APP_BASE_URL", "") or "").rstrip("/")
    return PushMessage(
        title=getattr(settings, "REMINDER_TITLE", REMINDER_TITLE),
        body=getattr(settings, "REMINDER_BODY", REMINDER_BODY),
        link=f"{base_url}/" if base_url else None,
    )


def _firebase_config(settings: Any) -> FirebaseConfig:
    return FirebaseConfig(
        credentials=getattr(settings, "FIREBASE_CREDENTIALS", None),
        project_id=getattr(settings, "FIREBASE_PROJECT_ID", None),
    )


def _firestore_backend(settings: Any, tz):
    config = _firebase_config(settings)
    client = get_firestore(config)
    return (
        FirestoreUserRepository(client),
        FirestoreAttendanceRepository(client, tz=tz),
        FCMPushGateway(get_app(config)),
    )


def _mysql_backend(settings: Any, tz):
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(getattr(settings, "DB_CONFIG", {})))
    # Push still goes through FCM; only the records live in MySQL.
    firebase = _firebase_config(settings)
    return (
        MySQLUserRepository(conn),
        MySQLAttendanceRepository(conn, tz=tz),
        FCMPushGateway(get_app(firebase)),
    )


def assemble(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    push_gateway: PushGateway,
    settings: Any,
    clock=None,
) -> Container:
    """Wire services around already-built collaborators (used by tests and scripts too)."""
    tz = school_zone(getattr(settings, "REMINDER_TIMEZONE", REMINDER_TIMEZONE))

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        push_gateway=push_gateway,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, tz=tz, clock=clock),
        reminder_job=AttendanceReminderJob(
            users_repo,
            attendance_repo,
            push_gateway,
            timezone=tz,
            message=reminder_message(settings),
            clock=clock,
        ),
    )


def build_container(settings: Any) -> Container:
    tz = school_zone(getattr(settings, "REMINDER_TIMEZONE", REMINDER_TIMEZONE))
    backend = str(getattr(settings, "STORAGE_BACKEND", "firestore")).lower()

    if backend == "firestore":
        users_repo, attendance_repo, gateway = _firestore_backend(settings, tz)
    elif backend == "mysql":
        users_repo, attendance_repo, gateway = _mysql_backend(settings, tz)
    else:
        raise ConfigurationError(f"STORAGE_BACKEND tidak dikenal: {backend!r}")

    logger.info("Using %s storage backend", backend)
    return assemble(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        push_gateway=gateway,
        settings=settings,
    )
