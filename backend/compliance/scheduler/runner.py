"""
Scheduler for the compliance jobs: GST reminders daily, compliance nagging weekly, log cleanup monthly.

All cron expressions are evaluated in settings.scheduler_timezone. The scheduled callables are the
manual trigger methods themselves, so an operator (or test) calling trigger_gst_reminders() goes
through exactly the same code path as the 08:00 tick. Every run goes through run_job, which
catches and logs failures: APScheduler never sees a job exception and never retries.
"""
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from compliance.config import Settings
from compliance.core.constants import COMPLIANCE_REMINDER_JOB_ID, GST_REMINDER_JOB_ID, LOG_CLEANUP_JOB_ID
from compliance.scheduler.clock import Clock, zoned_clock
from compliance.scheduler.compliance_reminder_job import ComplianceReminderJob
from compliance.scheduler.gst_reminder_job import GSTReminderJob, ReminderMailer
from compliance.scheduler.log_cleanup_job import LogCleanupJob
from compliance.services.compliance_store import ComplianceStore
from compliance.services.email_notify import SmtpMailer

logger = logging.getLogger(__name__)


class Job(Protocol):
    def run(self) -> int: ...


@dataclass
class JobResult:
    job_id: str
    ok: bool
    count: int = 0
    error: str | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["finished_at"] = self.finished_at.isoformat() if self.finished_at else None
        return d


def run_job(job_id: str, job: Job) -> JobResult:
    """Run one job to completion. Fatal errors are logged and returned as ok=False, never raised."""
    result = JobResult(job_id=job_id, ok=False)
    try:
        result.count = job.run()
        result.ok = True
    except Exception as e:
        logger.exception("Job %s failed: %s", job_id, e)
        result.error = str(e)
    result.finished_at = datetime.now(timezone.utc)
    return result


class ComplianceScheduler:
    def __init__(
        self,
        gst_job: GSTReminderJob,
        compliance_job: ComplianceReminderJob,
        cleanup_job: LogCleanupJob,
        settings: Settings,
        scheduler: BaseScheduler | None = None,
    ):
        self.settings = settings
        self._jobs: dict[str, Job] = {
            GST_REMINDER_JOB_ID: gst_job,
            COMPLIANCE_REMINDER_JOB_ID: compliance_job,
            LOG_CLEANUP_JOB_ID: cleanup_job,
        }
        self._triggers: dict[str, Callable[[], JobResult]] = {
            GST_REMINDER_JOB_ID: self.trigger_gst_reminders,
            COMPLIANCE_REMINDER_JOB_ID: self.trigger_compliance_reminders,
            LOG_CLEANUP_JOB_ID: self.trigger_log_cleanup,
        }
        self.scheduler = scheduler or BackgroundScheduler(timezone=settings.scheduler_timezone)

    # --- Manual triggers (also the scheduled callables) ---

    def trigger_gst_reminders(self) -> JobResult:
        return run_job(GST_REMINDER_JOB_ID, self._jobs[GST_REMINDER_JOB_ID])

    def trigger_compliance_reminders(self) -> JobResult:
        return run_job(COMPLIANCE_REMINDER_JOB_ID, self._jobs[COMPLIANCE_REMINDER_JOB_ID])

    def trigger_log_cleanup(self) -> JobResult:
        return run_job(LOG_CLEANUP_JOB_ID, self._jobs[LOG_CLEANUP_JOB_ID])

    def trigger(self, job_id: str) -> JobResult:
        """Run a job by id, outside the schedule. Unknown id -> KeyError."""
        logger.info("Manually triggering %s", job_id)
        return self._triggers[job_id]()

    # --- Schedule ---

    def _cron(self, expr: str) -> CronTrigger:
        return CronTrigger.from_crontab(expr, timezone=self.settings.scheduler_timezone)

    def configure(self) -> None:
        s = self.settings
        for job_id, expr in (
            (GST_REMINDER_JOB_ID, s.gst_reminder_cron),
            (COMPLIANCE_REMINDER_JOB_ID, s.compliance_reminder_cron),
            (LOG_CLEANUP_JOB_ID, s.log_cleanup_cron),
        ):
            self.scheduler.add_job(self._triggers[job_id], self._cron(expr), id=job_id, replace_existing=True)
        logger.info(
            "Scheduled jobs (%s): GST reminders '%s', compliance reminders '%s', log cleanup '%s'",
            s.scheduler_timezone,
            s.gst_reminder_cron,
            s.compliance_reminder_cron,
            s.log_cleanup_cron,
        )

    def start(self) -> None:
        self.scheduler.start()
        logger.info("Compliance scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def jobs(self) -> list[dict[str, Any]]:
        """Configured jobs with their trigger and next fire time (None until the scheduler starts)."""
        out = []
        for job in self.scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            out.append(
                {
                    "id": job.id,
                    "trigger": str(job.trigger),
                    "next_run_time": next_run.isoformat() if next_run else None,
                }
            )
        return out


def build_compliance_scheduler(
    settings: Settings,
    session_factory: Callable[[], Session],
    mailer: ReminderMailer | None = None,
    clock: Clock | None = None,
    scheduler: BaseScheduler | None = None,
) -> ComplianceScheduler:
    """Wire store, mailer, clock and the three jobs into a ComplianceScheduler (not yet configured or started)."""
    store = ComplianceStore(session_factory)
    clock = clock or zoned_clock(settings.scheduler_timezone)
    return ComplianceScheduler(
        GSTReminderJob(store, mailer or SmtpMailer(settings), clock),
        ComplianceReminderJob(store),
        LogCleanupJob(store, clock, settings.activity_log_retention_days),
        settings,
        scheduler=scheduler,
    )
