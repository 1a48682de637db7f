from __future__ import annotations

import logging
from typing import Any, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..common.datetime_utils import school_zone
from ..core.constants import REMINDER_CRON, REMINDER_TIMEZONE
from .service import AttendanceReminderJob

logger = logging.getLogger(__name__)

JOB_ID = "send_attendance_reminder"

# Prevents the scheduler from starting more than once per process (Flask reloader, imports).
_scheduler: Optional[BackgroundScheduler] = None


CRON_DAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat", "sun")


def _crontab_day_of_week(field: str) -> str:
    """Translate crontab weekday numbers (0 or 7 = Sunday) into APScheduler day names.

    APScheduler counts 0 as Monday, so `1-5` must not be handed over as-is.
    """
    parts: list[str] = []
    for part in field.split(","):
        rng, _, step = part.partition("/")
        if rng == "*" or not rng.replace("-", "").isdigit():
            parts.append(part)
            continue
        lo, _, hi = rng.partition("-")
        first, last = int(lo), int(hi or lo)
        if not (0 <= first <= 7 and 0 <= last <= 7 and first <= last):
            raise ValueError(f"Invalid day-of-week field: {field!r}")
        days = range(first, last + 1, int(step or 1))
        parts.extend(CRON_DAY_NAMES[d] for d in days)
    return ",".join(dict.fromkeys(parts))


def build_trigger(cron: str = REMINDER_CRON, timezone: str = REMINDER_TIMEZONE) -> CronTrigger:
    """Cron trigger with standard crontab semantics, evaluated in a named zone (never UTC or server-local)."""
    fields = cron.split()
    if len(fields) != 5:
        raise ValueError(f"Expected 5 crontab fields, got {len(fields)}: {cron!r}")
    minute, hour, day, month, day_of_week = fields
    return CronTrigger(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=_crontab_day_of_week(day_of_week),
        timezone=school_zone(timezone),
    )


def _run(job: AttendanceReminderJob) -> None:
    result = job.run()
    logger.info("Scheduled attendance reminder finished: %s", result.outcome.value)


def start_scheduler(job: AttendanceReminderJob, settings: Any) -> Optional[BackgroundScheduler]:
    """Start APScheduler with the daily reminder.

    - Respects ENABLE_SCHEDULER
    - Does nothing when a scheduler is already running in this process
    """
    global _scheduler

    if not getattr(settings, "ENABLE_SCHEDULER", False):
        logger.info("Scheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    if _scheduler is not None:
        logger.info("Scheduler already running, skipping initialization")
        return _scheduler

    cron = getattr(settings, "REMINDER_CRON", REMINDER_CRON)
    tz_name = getattr(settings, "REMINDER_TIMEZONE", REMINDER_TIMEZONE)
    trigger = build_trigger(cron, tz_name)

    scheduler = BackgroundScheduler(timezone=school_zone(tz_name))
    scheduler.add_job(
        _run,
        trigger=trigger,
        args=[job],
        id=JOB_ID,
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=15 * 60,
    )
    scheduler.start()
    _scheduler = scheduler

    logger.info("Scheduler started: attendance reminder at '%s' (%s)", cron, tz_name)
    return scheduler


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
