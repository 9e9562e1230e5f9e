"""Monthly retention: delete activity logs older than the retention window in one statement."""
import logging
from datetime import timedelta, timezone

from compliance.scheduler.clock import Clock
from compliance.services.compliance_store import ComplianceStore

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 90


class LogCleanupJob:
    def __init__(self, store: ComplianceStore, clock: Clock, retention_days: int = DEFAULT_RETENTION_DAYS):
        self.store = store
        self.clock = clock
        self.retention_days = retention_days

    def cutoff(self):
        """Rows with timestamp strictly before this (UTC) are deleted; a row exactly retention_days old stays."""
        return self.clock().astimezone(timezone.utc) - timedelta(days=self.retention_days)

    def run(self) -> int:
        logger.info("Running log cleanup job")
        deleted = self.store.delete_activity_logs_before(self.cutoff())
        logger.info("Log cleanup completed: deleted %s log entries older than %s days", deleted, self.retention_days)
        return deleted
