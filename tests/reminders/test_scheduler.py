from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

from school_portal.core.exceptions import ConfigurationError
from school_portal.reminders import scheduler
from school_portal.reminders.scheduler import _crontab_day_of_week, build_trigger, shutdown_scheduler, start_scheduler

JAKARTA = ZoneInfo("Asia/Jakarta")


@pytest.mark.parametrize(
    "field, expected",
    [
        ("1-5", "mon,tue,wed,thu,fri"),
        ("0", "sun"),
        ("7", "sun"),
        ("0,6", "sun,sat"),
        ("*", "*"),
        ("1-5/2", "mon,wed,fri"),
        ("mon-fri", "mon-fri"),
    ],
)
def test_crontab_weekdays_are_translated(field, expected):
    assert _crontab_day_of_week(field) == expected


def test_invalid_weekday_is_rejected():
    with pytest.raises(ValueError):
        _crontab_day_of_week("3-9")


def test_default_trigger_fires_at_ten_on_weekdays():
    trigger = build_trigger()
    friday_noon = datetime(2026, 3, 6, 12, 0, tzinfo=JAKARTA)

    next_fire = trigger.get_next_fire_time(None, friday_noon)

    assert next_fire == datetime(2026, 3, 9, 10, 0, tzinfo=JAKARTA)
    assert next_fire.weekday() == 0


def test_trigger_fires_same_day_before_ten():
    trigger = build_trigger("0 10 * * 1-5", "Asia/Jakarta")
    wednesday_morning = datetime(2026, 3, 4, 7, 30, tzinfo=JAKARTA)

    assert trigger.get_next_fire_time(None, wednesday_morning) == datetime(2026, 3, 4, 10, 0, tzinfo=JAKARTA)


def test_trigger_rejects_short_cron():
    with pytest.raises(ValueError):
        build_trigger("0 10 * *", "Asia/Jakarta")


@pytest.mark.parametrize("tz", ["UTC", ""])
def test_trigger_requires_named_zone(tz):
    with pytest.raises(ConfigurationError):
        build_trigger("0 10 * * 1-5", tz)


def test_disabled_scheduler_does_not_start():
    settings = SimpleNamespace(ENABLE_SCHEDULER=False)

    assert start_scheduler(object(), settings) is None
    assert scheduler._scheduler is None


@pytest.fixture
def enabled_settings():
    yield SimpleNamespace(ENABLE_SCHEDULER=True, REMINDER_CRON="0 10 * * 1-5", REMINDER_TIMEZONE="Asia/Jakarta")
    shutdown_scheduler()


def test_enabled_scheduler_starts_once(enabled_settings):
    job = object()

    first = start_scheduler(job, enabled_settings)
    second = start_scheduler(job, enabled_settings)

    assert first is not None
    assert second is first
    assert first.running

    scheduled = first.get_job(scheduler.JOB_ID)
    assert scheduled.coalesce is True
    assert scheduled.args == (job,)
    assert str(scheduled.trigger.timezone) == "Asia/Jakarta"
    assert len(first.get_jobs()) == 1


def test_shutdown_allows_a_fresh_start(enabled_settings):
    first = start_scheduler(object(), enabled_settings)
    shutdown_scheduler()

    second = start_scheduler(object(), enabled_settings)

    assert second is not first
    assert scheduler._scheduler is second
