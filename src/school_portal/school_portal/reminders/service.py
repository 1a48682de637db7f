"""Daily attendance reminder.

Finds the staff members who have not recorded attendance for today and still
have a push token, then sends all of them one multicast notification.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import tzinfo
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, local_midnight, now_utc
from ..core.enums import Role, RunOutcome
from ..notifications.gateway import PushGateway
from ..notifications.model import PushMessage
from ..users.model import UserProfile
from ..users.repository import UserRepository
from .model import RunResult

logger = logging.getLogger(__name__)


def compute_pending(staff: Iterable[UserProfile], records: Iterable[AttendanceRecord]) -> list[UserProfile]:
    """Staff without a record for the day who can be notified; input order is kept."""
    recorded = {r.teacher_id for r in records}
    return [s for s in staff if s.uid not in recorded and s.has_push_token]


def run_daily_reminder(
    clock: Clock,
    staff_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    push_gateway: PushGateway,
    *,
    timezone: tzinfo,
    message: PushMessage,
) -> RunResult:
    """One reminder run. Never raises; failures come back as `RunOutcome.FAILED`."""
    today = None
    try:
        today = local_midnight(clock(), timezone)
        logger.info("Starting attendance reminder for %s", f"{today:%Y-%m-%d}")

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="reminder-fetch") as pool:
            staff_future = pool.submit(staff_repo.list_by_role, Role.STAFF)
            records_future = pool.submit(attendance_repo.list_for_day, today)
            staff = list(staff_future.result())
            records = list(records_future.result())

        if not staff:
            logger.info("No users with role '%s' found, nothing to do", Role.STAFF.value)
            return RunResult(outcome=RunOutcome.NO_STAFF, today=today)

        recorded_count = len({r.teacher_id for r in records})
        logger.info("Found %d staff, %d already recorded attendance today", len(staff), recorded_count)

        pending = compute_pending(staff, records)
        if not pending:
            logger.info("All staff have recorded attendance or have no push token, no notifications sent")
            return RunResult(
                outcome=RunOutcome.NO_PENDING,
                today=today,
                staff_count=len(staff),
                recorded_count=recorded_count,
            )

        tokens = [s.fcm_token.strip() for s in pending]
        logger.info("Sending attendance reminder to %d staff", len(tokens))
        dispatch = push_gateway.send_multicast(tokens, message)

        logger.info("Reminder sent: %d succeeded, %d failed", dispatch.success_count, dispatch.failure_count)
        if dispatch.failure_count:
            logger.warning("Tokens that caused failures: %s", ", ".join(dispatch.failed_tokens))

        return RunResult(
            outcome=RunOutcome.SENT,
            today=today,
            staff_count=len(staff),
            recorded_count=recorded_count,
            pending=tuple(pending),
            dispatch=dispatch,
        )
    except Exception as e:
        logger.exception("Attendance reminder run failed")
        return RunResult(outcome=RunOutcome.FAILED, today=today, error=str(e) or e.__class__.__name__)


class AttendanceReminderJob:
    """Binds the collaborators so the scheduler, the CLI script and the admin endpoint share one run."""

    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        gateway: PushGateway,
        *,
        timezone: tzinfo,
        message: PushMessage,
        clock: Optional[Clock] = None,
    ):
        self._users = users
        self._attendance = attendance
        self._gateway = gateway
        self._timezone = timezone
        self._message = message
        self._clock = clock or now_utc

    @property
    def timezone(self) -> tzinfo:
        return self._timezone

    def run(self) -> RunResult:
        return run_daily_reminder(
            self._clock,
            self._users,
            self._attendance,
            self._gateway,
            timezone=self._timezone,
            message=self._message,
        )

    __call__ = run
