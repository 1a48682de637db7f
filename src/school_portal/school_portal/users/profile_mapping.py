"""Conversion between stored user documents/rows and `UserProfile`."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..core.enums import Duty, Role
from .model import UserProfile

logger = logging.getLogger(__name__)


def parse_duties(values: Optional[Iterable[str]], *, uid: str = "?") -> frozenset[Duty]:
    duties: set[Duty] = set()
    for raw in values or ():
        try:
            duties.add(Duty(raw))
        except ValueError:
            logger.warning("Ignoring unknown duty %r on profile %s", raw, uid)
    return frozenset(duties)


def profile_from_document(uid: str, data: Mapping[str, Any]) -> Optional[UserProfile]:
    """Build a profile from a `users/{uid}` document.

    Returns None when the role is missing or not one of the known roles.
    """
    try:
        role = Role(data.get("role"))
    except ValueError:
        logger.warning("Profile %s has unsupported role %r", uid, data.get("role"))
        return None

    return UserProfile(
        uid=str(data.get("uid") or uid),
        role=role,
        display_name=data.get("displayName"),
        email=data.get("email"),
        duties=parse_duties(data.get("tugasTambahan"), uid=uid),
        assigned_subjects=tuple(data.get("assignedMapel") or ()),
        fcm_token=data.get("fcmToken") or None,
        password_hash=data.get("passwordHash"),
        is_active=bool(data.get("isActive", True)),
    )
