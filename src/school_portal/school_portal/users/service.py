from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash

from ..access.model import Session
from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError, ValidationError
from .model import UserProfile
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login) and rebuild sessions from stored profiles."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> Session:
        email = (email or "").strip().lower()
        profile = self._users.get_by_email(email) if email else None
        if not profile or not profile.is_active or not profile.password_hash:
            raise AuthenticationError("Email atau kata sandi salah")

        try:
            ok = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Email atau kata sandi salah")

        return Session.from_profile(profile)

    def session_for(self, uid: str) -> Optional[Session]:
        """Fresh session for `uid`, or None when the profile is missing, inactive or malformed."""
        profile = self._users.get_profile(uid)
        if not profile or not profile.is_active:
            logger.warning("Profile for uid %s not found or inactive", uid)
            return None
        return Session.from_profile(profile)

    def profile(self, session: Session) -> Optional[UserProfile]:
        return self._users.get_profile(session.uid)


class UserService:
    """Use case: push-token registration for the signed-in user."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register_push_token(self, session: Session, token: str) -> None:
        token = require_non_empty(token, "Token notifikasi")
        if not self._users.update_fcm_token(session.uid, token):
            raise ValidationError("Profil pengguna tidak ditemukan")
        logger.info("Push token registered for %s", session.uid)

    def clear_push_token(self, session: Session) -> None:
        # Permission denied on the device: forget the old token so no reminder targets it.
        self._users.update_fcm_token(session.uid, None)
        logger.info("Push token cleared for %s", session.uid)
