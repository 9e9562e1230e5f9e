"""
Centralized constants for the scheduler and notifications.

Change job IDs or notification copy here instead of scattering literals across jobs and routes.
"""

# Scheduler job IDs (must match ids used by ComplianceScheduler.configure and the admin routes)
GST_REMINDER_JOB_ID = "gst_reminders"
COMPLIANCE_REMINDER_JOB_ID = "compliance_reminders"
LOG_CLEANUP_JOB_ID = "log_cleanup"
JOB_IDS = (GST_REMINDER_JOB_ID, COMPLIANCE_REMINDER_JOB_ID, LOG_CLEANUP_JOB_ID)

# User roles (users.role)
ROLE_VENDOR = "vendor"
ROLE_CA = "ca"
ROLE_ADMIN = "admin"
ROLES = (ROLE_VENDOR, ROLE_CA, ROLE_ADMIN)

# vendors.compliance_status values the jobs look at
COMPLIANCE_PENDING = "pending"

# notifications.channel
CHANNEL_IN_APP = "in-app"
CHANNEL_EMAIL = "email"
CHANNEL_WHATSAPP = "whatsapp"
NOTIFICATION_CHANNELS = (CHANNEL_IN_APP, CHANNEL_EMAIL, CHANNEL_WHATSAPP)

# Notification copy written by the jobs
GST_REMINDER_TITLE = "GST Filing Reminder"
GST_REMINDER_MESSAGE = "Reminder: {description} is due today"
COMPLIANCE_REMINDER_TITLE = "Compliance Status Pending"
COMPLIANCE_REMINDER_MESSAGE = (
    "Please complete your compliance requirements. Contact your assigned CA for assistance."
)

# Email
BRAND_NAME = "NammaCompliance"
GST_REMINDER_SUBJECT = "GST Return Filing Reminder - NammaCompliance"
SMTP_TIMEOUT_SECONDS = 10

# Notifications API: hard cap on rows per list request
NOTIFICATIONS_LIST_LIMIT = 200

# Admin activity log view: hard cap on rows per page
ACTIVITY_LOGS_PAGE_LIMIT = 200
