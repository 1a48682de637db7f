from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import UserProfile
from .profile_mapping import parse_duties
from .repository import UserRepository

_PROFILE_COLUMNS = """
    u.uid, u.role, u.display_name, u.email, u.fcm_token, u.password_hash, u.is_active,
    GROUP_CONCAT(DISTINCT d.duty) AS duties,
    GROUP_CONCAT(DISTINCT s.subject SEPARATOR '\\n') AS subjects
"""

_PROFILE_JOINS = """
    FROM users u
    LEFT JOIN user_duties d ON d.uid = u.uid
    LEFT JOIN user_subjects s ON s.uid = u.uid
"""


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_profile(row: Dict[str, Any]) -> Optional[UserProfile]:
        try:
            role = Role(row["role"])
        except ValueError:
            return None
        duties = (row.get("duties") or "").split(",") if row.get("duties") else []
        subjects = (row.get("subjects") or "").split("\n") if row.get("subjects") else []
        return UserProfile(
            uid=str(row["uid"]),
            role=role,
            display_name=row.get("display_name"),
            email=row.get("email"),
            duties=parse_duties(duties, uid=str(row["uid"])),
            assigned_subjects=tuple(subjects),
            fcm_token=row.get("fcm_token") or None,
            password_hash=row.get("password_hash"),
            is_active=bool(row.get("is_active", True)),
        )

    def list_by_role(self, role: Role) -> Sequence[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROFILE_COLUMNS}
                {_PROFILE_JOINS}
                WHERE u.role=%s
                GROUP BY u.uid
                ORDER BY u.uid
                """,
                (role.value,),
            )
            profiles = [self._to_profile(r) for r in fetchall(cur)]
            return [p for p in profiles if p]

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROFILE_COLUMNS}
                {_PROFILE_JOINS}
                WHERE u.uid=%s
                GROUP BY u.uid
                """,
                (uid,),
            )
            row = fetchone(cur)
            return self._to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PROFILE_COLUMNS}
                {_PROFILE_JOINS}
                WHERE u.email=%s
                GROUP BY u.uid
                """,
                (email,),
            )
            row = fetchone(cur)
            return self._to_profile(row) if row else None

    def update_fcm_token(self, uid: str, token: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET fcm_token=%s WHERE uid=%s", (token, uid))
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when the value is unchanged.
            cur.execute("SELECT 1 AS found FROM users WHERE uid=%s", (uid,))
            return fetchone(cur) is not None
