from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Duty, Role
from ..users.model import UserProfile


@dataclass(frozen=True)
class AccessContext:
    """Read-only input to the resolver, recomputed on every authorization check."""

    role: Role
    duties: frozenset[Duty] = field(default_factory=frozenset)


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect_to: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """Identity of the signed-in user, passed explicitly to the resolver and handlers."""

    uid: str
    role: Role
    display_name: Optional[str] = None
    duties: frozenset[Duty] = field(default_factory=frozenset)

    @property
    def context(self) -> AccessContext:
        return AccessContext(role=self.role, duties=self.duties)

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "Session":
        return cls(
            uid=profile.uid,
            role=profile.role,
            display_name=profile.display_name,
            duties=profile.duties,
        )

    def to_cookie(self) -> dict:
        """What we store into the Flask session after login; requests only read `uid` back."""
        return {
            "uid": self.uid,
            "role": self.role.value,
            "name": self.display_name,
            "duties": sorted(d.value for d in self.duties),
        }
