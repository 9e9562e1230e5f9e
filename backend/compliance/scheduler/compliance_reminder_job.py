"""Weekly nag: one in-app warning per vendor whose compliance status is still pending."""
import logging

from compliance.core.constants import (
    CHANNEL_IN_APP,
    COMPLIANCE_PENDING,
    COMPLIANCE_REMINDER_MESSAGE,
    COMPLIANCE_REMINDER_TITLE,
)
from compliance.services.compliance_store import ComplianceStore

logger = logging.getLogger(__name__)


class ComplianceReminderJob:
    def __init__(self, store: ComplianceStore):
        self.store = store

    def run(self) -> int:
        logger.info("Running compliance reminder job")
        vendors = self.store.list_vendors_by_compliance_status(COMPLIANCE_PENDING)

        reminders_sent = 0
        for vendor in vendors:
            try:
                self.store.add_notification(
                    vendor.user_id,
                    COMPLIANCE_REMINDER_TITLE,
                    COMPLIANCE_REMINDER_MESSAGE,
                    type="warning",
                    channel=CHANNEL_IN_APP,
                )
                reminders_sent += 1
            except Exception as e:
                logger.exception(
                    "Failed to send compliance reminder to user %s <%s>: %s", vendor.user_id, vendor.email, e
                )

        logger.info("Compliance reminder job completed: sent %s reminders", reminders_sent)
        return reminders_sent
