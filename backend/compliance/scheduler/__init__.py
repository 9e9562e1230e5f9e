from compliance.scheduler.compliance_reminder_job import ComplianceReminderJob
from compliance.scheduler.gst_reminder_job import GSTReminderJob
from compliance.scheduler.log_cleanup_job import LogCleanupJob
from compliance.scheduler.runner import ComplianceScheduler, JobResult, build_compliance_scheduler, run_job

__all__ = [
    "ComplianceReminderJob",
    "ComplianceScheduler",
    "GSTReminderJob",
    "JobResult",
    "LogCleanupJob",
    "build_compliance_scheduler",
    "run_job",
]
