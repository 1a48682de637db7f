from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import UserProfile


class UserRepository(Protocol):
    """Repository interface for the user directory.

    Note (DIP): services depend on this interface, never on Firestore or MySQL directly.
    """

    def list_by_role(self, role: Role) -> Sequence[UserProfile]:
        raise NotImplementedError

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def update_fcm_token(self, uid: str, token: Optional[str]) -> bool:
        raise NotImplementedError
