from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, g, redirect, request, session

from ..core.constants import LOGIN_PATH
from ..users.service import AuthService
from .model import Session
from .resolver import normalize_path, resolve_access, under

logger = logging.getLogger(__name__)

PUBLIC_PATHS = (
    LOGIN_PATH,
    "/logout",
    "/static",
    "/healthz",
)


def is_public(path: str) -> bool:
    path = normalize_path(path)
    return any(under(path, p) for p in PUBLIC_PATHS)


def load_session(auth: AuthService) -> Optional[Session]:
    """Session for the uid in the cookie, rebuilt from the stored profile.

    Role and duties are never taken from the cookie itself.
    """
    uid = session.get("uid")
    if not isinstance(uid, str) or not uid.strip():
        return None
    return auth.session_for(uid)


def current_session() -> Optional[Session]:
    return g.get("current_session")


def store_session(s: Session) -> None:
    session.clear()
    session.update(s.to_cookie())


def register(app: Flask, auth: AuthService) -> None:
    """Install the access guard in front of every non-public route."""

    @app.before_request
    def access_guard():
        g.current_session = load_session(auth) if session else None
        if g.current_session is None and session:
            # Cookie present but the profile is gone, inactive or malformed.
            session.clear()

        path = request.path
        if is_public(path):
            return None

        decision = resolve_access(g.current_session, path)
        if decision.allowed:
            return None

        logger.debug("Access to %s denied, redirecting to %s", path, decision.redirect_to)
        return redirect(decision.redirect_to)
