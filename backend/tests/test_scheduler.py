"""
test_scheduler.py - ComplianceScheduler registration, cron fire times and manual triggers.

The APScheduler instance is never started: triggers are asked for their next fire time
directly, with a fixed "now", so no test depends on the host clock or timezone.
"""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from compliance.config import Settings
from compliance.core.constants import COMPLIANCE_REMINDER_JOB_ID, GST_REMINDER_JOB_ID, LOG_CLEANUP_JOB_ID
from compliance.models import ActivityLog, Notification
from compliance.scheduler.runner import ComplianceScheduler, JobResult, build_compliance_scheduler, run_job

IST = ZoneInfo("Asia/Kolkata")


@pytest.fixture()
def compliance_scheduler(session_factory, mailer, ist_clock) -> ComplianceScheduler:
    cs = build_compliance_scheduler(Settings(), session_factory, mailer=mailer, clock=ist_clock(2026, 1, 20))
    cs.configure()
    yield cs
    cs.shutdown()


def _job(cs: ComplianceScheduler, job_id: str):
    return {j.id: j for j in cs.scheduler.get_jobs()}[job_id]


def _next_fire(cs: ComplianceScheduler, job_id: str, now: datetime) -> datetime:
    return _job(cs, job_id).trigger.get_next_fire_time(None, now)


# ── configure() ───────────────────────────────────────────────────────


def test_configure_registers_three_jobs(compliance_scheduler):
    ids = {j.id for j in compliance_scheduler.scheduler.get_jobs()}
    assert ids == {GST_REMINDER_JOB_ID, COMPLIANCE_REMINDER_JOB_ID, LOG_CLEANUP_JOB_ID}


def test_scheduled_callables_are_the_manual_triggers(compliance_scheduler):
    cs = compliance_scheduler
    assert _job(cs, GST_REMINDER_JOB_ID).func == cs.trigger_gst_reminders
    assert _job(cs, COMPLIANCE_REMINDER_JOB_ID).func == cs.trigger_compliance_reminders
    assert _job(cs, LOG_CLEANUP_JOB_ID).func == cs.trigger_log_cleanup


def test_jobs_listing_before_start(compliance_scheduler):
    listing = {j["id"]: j for j in compliance_scheduler.jobs()}
    assert set(listing) == {GST_REMINDER_JOB_ID, COMPLIANCE_REMINDER_JOB_ID, LOG_CLEANUP_JOB_ID}
    assert all(j["next_run_time"] is None for j in listing.values())
    assert "cron" in listing[GST_REMINDER_JOB_ID]["trigger"]


# ── Fire times (Saturday 17 Oct 2026, 09:00 IST) ──────────────────────


NOW = datetime(2026, 10, 17, 9, 0, tzinfo=IST)


def test_gst_reminders_fire_daily_at_eight(compliance_scheduler):
    assert _next_fire(compliance_scheduler, GST_REMINDER_JOB_ID, NOW) == datetime(2026, 10, 18, 8, 0, tzinfo=IST)


def test_compliance_reminders_fire_monday_at_nine(compliance_scheduler):
    fire = _next_fire(compliance_scheduler, COMPLIANCE_REMINDER_JOB_ID, NOW)
    assert fire == datetime(2026, 10, 19, 9, 0, tzinfo=IST)
    assert fire.astimezone(IST).weekday() == 0


def test_log_cleanup_fires_first_of_month_at_two(compliance_scheduler):
    assert _next_fire(compliance_scheduler, LOG_CLEANUP_JOB_ID, NOW) == datetime(2026, 11, 1, 2, 0, tzinfo=IST)


def test_schedule_uses_configured_timezone_not_utc(compliance_scheduler):
    """02:00 UTC is 07:30 IST, so the 08:00 IST run is still ahead today (02:30 UTC)."""
    now_utc = datetime(2026, 10, 17, 2, 0, tzinfo=timezone.utc)
    fire = _next_fire(compliance_scheduler, GST_REMINDER_JOB_ID, now_utc)
    assert fire == datetime(2026, 10, 17, 2, 30, tzinfo=timezone.utc)


def test_cron_expressions_come_from_settings(session_factory, mailer):
    settings = Settings(scheduler_timezone="UTC", gst_reminder_cron="30 6 * * *")
    cs = build_compliance_scheduler(settings, session_factory, mailer=mailer)
    cs.configure()
    fire = _next_fire(cs, GST_REMINDER_JOB_ID, datetime(2026, 10, 17, 7, 0, tzinfo=timezone.utc))
    assert fire == datetime(2026, 10, 18, 6, 30, tzinfo=timezone.utc)


def test_invalid_timezone_rejected():
    with pytest.raises(ValueError):
        Settings(scheduler_timezone="Mars/Olympus_Mons")


# ── Manual triggers ──────────────────────────────────────────────────


def test_manual_trigger_matches_scheduled_invocation(db_session, compliance_scheduler, make_vendor):
    make_vendor(">1Cr")
    cs = compliance_scheduler

    scheduled = _job(cs, GST_REMINDER_JOB_ID).func()
    manual = cs.trigger_gst_reminders()

    assert isinstance(scheduled, JobResult) and isinstance(manual, JobResult)
    assert (scheduled.job_id, scheduled.ok, scheduled.count) == (manual.job_id, manual.ok, manual.count)
    assert manual.count == 1
    # No dedup across runs: each run writes its own row
    assert db_session.query(Notification).count() == 2


def test_trigger_by_id(db_session, compliance_scheduler, make_vendor, make_user):
    make_vendor(compliance_status="pending")
    user = make_user()
    db_session.add(ActivityLog(user_id=user.user_id, action="LOGIN", timestamp=datetime(2020, 1, 1, tzinfo=timezone.utc)))
    db_session.commit()

    assert compliance_scheduler.trigger(COMPLIANCE_REMINDER_JOB_ID).count == 1
    assert compliance_scheduler.trigger(LOG_CLEANUP_JOB_ID).count == 1


def test_trigger_unknown_job(compliance_scheduler):
    with pytest.raises(KeyError):
        compliance_scheduler.trigger("payroll")


# ── run_job() ─────────────────────────────────────────────────────────


class _Boom:
    def run(self) -> int:
        raise RuntimeError("database is locked")


class _Fine:
    def run(self) -> int:
        return 4


def test_run_job_catches_fatal_errors():
    result = run_job("log_cleanup", _Boom())

    assert result.ok is False
    assert result.count == 0
    assert result.error == "database is locked"
    assert result.finished_at is not None


def test_run_job_success_to_dict():
    d = run_job("gst_reminders", _Fine()).to_dict()

    assert d["job_id"] == "gst_reminders"
    assert d["ok"] is True
    assert d["count"] == 4
    assert d["error"] is None
    assert datetime.fromisoformat(d["finished_at"]) >= datetime.fromisoformat(d["started_at"])
