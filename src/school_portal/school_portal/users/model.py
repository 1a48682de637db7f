from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Duty, Role


@dataclass(frozen=True)
class UserProfile:
    """Domain entity: a stored user profile (admin or staff member).

    Note: Plain data object, no storage access here. Immutable for the duration
    of a reminder run.
    """

    uid: str
    role: Role
    display_name: Optional[str] = None
    email: Optional[str] = None
    duties: frozenset[Duty] = field(default_factory=frozenset)
    assigned_subjects: tuple[str, ...] = ()
    fcm_token: Optional[str] = None
    password_hash: Optional[str] = None
    is_active: bool = True

    @property
    def has_push_token(self) -> bool:
        return bool(self.fcm_token and self.fcm_token.strip())
