"""
Daily GST reminder: for every vendor, work out the filing frequency from the turnover bracket,
find the due-date rules that fall on today, and for each one email the vendor and record an
email notification.

Vendors are processed one at a time. Email and notification insert are not transactional: a
failed send (or failed insert after a send) is logged with the vendor's identity and the loop
moves on to the next vendor. There is no retry inside a run; tomorrow's tick is the retry.
"""
import logging
from typing import Protocol

from compliance.core.constants import CHANNEL_EMAIL, GST_REMINDER_MESSAGE, GST_REMINDER_TITLE
from compliance.core.due_dates import classify_filing_frequency, matching_due_dates
from compliance.core.errors import ReminderDeliveryError
from compliance.scheduler.clock import Clock
from compliance.services.compliance_store import ComplianceStore, VendorContact

logger = logging.getLogger(__name__)


class ReminderMailer(Protocol):
    def send_gst_reminder(self, vendor: VendorContact, due_date_description: str) -> bool: ...


class GSTReminderJob:
    def __init__(self, store: ComplianceStore, mailer: ReminderMailer, clock: Clock):
        self.store = store
        self.mailer = mailer
        self.clock = clock

    def run(self) -> int:
        """Send today's reminders. Returns notification rows written. StorageError from the vendor query propagates."""
        logger.info("Running GST reminder job")
        today = self.clock().date()
        vendors = self.store.list_vendor_contacts()

        reminders_sent = 0
        for vendor in vendors:
            frequency = classify_filing_frequency(vendor.turnover_range)
            due = matching_due_dates(today, frequency)
            if not due:
                continue
            try:
                for rule in due:
                    if not self.mailer.send_gst_reminder(vendor, rule.description):
                        raise ReminderDeliveryError(f"email channel did not deliver {rule.description!r}")
                    self.store.add_notification(
                        vendor.user_id,
                        GST_REMINDER_TITLE,
                        GST_REMINDER_MESSAGE.format(description=rule.description),
                        type="warning",
                        channel=CHANNEL_EMAIL,
                    )
                    reminders_sent += 1
            except Exception as e:
                logger.exception(
                    "Failed to send GST reminder to user %s <%s>: %s", vendor.user_id, vendor.email, e
                )

        logger.info("GST reminder job completed for %s (%s vendors): sent %s reminders", today, len(vendors), reminders_sent)
        return reminders_sent
