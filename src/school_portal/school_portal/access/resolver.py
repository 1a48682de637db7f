"""Route-level access rules.

Every rule lives in this module; callers only ask `resolve_access(session, path)`.
The functions here are pure: no I/O, no module state that changes after import,
and they never raise.

Precedence:
    1. no session (or an unknown role)  -> redirect to login
    2. admin                            -> admin routes; staff routes redirect to admin landing
    3. staff                            -> staff routes; admin routes only through a duty grant
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Optional

from ..core.constants import (
    ADMIN_LANDING,
    ADMIN_PREFIX,
    LOGIN_PATH,
    STAFF_LANDING,
    STAFF_PREFIX,
)
from ..core.enums import Duty, Role
from .model import AccessContext, AccessDecision, Session

# Admin sub-paths a staff member may open through a duty, besides the exact landing page.
LEADERSHIP_ADMIN_ROUTES = frozenset(
    {
        "/admin/reports",
        "/admin/grades",
        "/admin/violation-reports",
        "/admin/activity-reports",
        "/admin/class-agenda",
        "/admin/attendance-recap",
        "/admin/school-profile",
    }
)

DUTY_ADMIN_ROUTES = MappingProxyType(
    {
        Duty.PRINCIPAL: LEADERSHIP_ADMIN_ROUTES,
        Duty.HEAD_OF_ADMINISTRATION: LEADERSHIP_ADMIN_ROUTES,
    }
)

_LOGIN = AccessDecision(allowed=False, redirect_to=LOGIN_PATH)
_ALLOW = AccessDecision(allowed=True)


def normalize_path(path: Any) -> str:
    if not isinstance(path, str) or not path:
        return "/"
    path = path.split("?", 1)[0].split("#", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def under(path: str, prefix: str) -> bool:
    """Segment-aware prefix test: `/admin/reports/x` is under `/admin/reports`, `/admin/reportsx` is not."""
    return path == prefix or path.startswith(prefix + "/")


def landing_path(context: Optional[AccessContext]) -> str:
    if context is None:
        return LOGIN_PATH
    if context.role == Role.ADMIN:
        return ADMIN_LANDING
    if context.role == Role.STAFF:
        return STAFF_LANDING
    return LOGIN_PATH


def admin_routes_for(duties: Iterable[Duty]) -> frozenset[str]:
    routes: set[str] = set()
    for duty in duties:
        routes |= DUTY_ADMIN_ROUTES.get(duty, frozenset())
    return frozenset(routes)


def _staff_may_open_admin(context: AccessContext, path: str) -> bool:
    granted = admin_routes_for(context.duties)
    if not granted:
        return False
    if path == ADMIN_LANDING:
        return True
    return any(under(path, route) for route in granted)


def decide(context: Optional[AccessContext], path: Any) -> AccessDecision:
    """Allow/deny `path` for an access context (None means unauthenticated)."""
    if context is None or not isinstance(context.role, Role):
        return _LOGIN

    path = normalize_path(path)
    is_admin_route = under(path, ADMIN_PREFIX)
    is_staff_route = under(path, STAFF_PREFIX)

    if context.role == Role.ADMIN:
        if is_staff_route:
            return AccessDecision(allowed=False, redirect_to=ADMIN_LANDING)
        return _ALLOW

    if context.role == Role.STAFF:
        if is_admin_route and not _staff_may_open_admin(context, path):
            return AccessDecision(allowed=False, redirect_to=STAFF_LANDING)
        return _ALLOW

    return _LOGIN


def resolve_access(session: Optional[Session], path: Any) -> AccessDecision:
    if session is None:
        return _LOGIN
    try:
        context = AccessContext(role=Role(session.role), duties=frozenset(session.duties or ()))
    except (AttributeError, TypeError, ValueError):
        # Malformed session objects fail closed.
        return _LOGIN
    return decide(context, path)


def can_access(context: Optional[AccessContext], path: Any) -> bool:
    return decide(context, path).allowed
