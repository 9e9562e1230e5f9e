from compliance.models.activity_log import ActivityLog
from compliance.models.notification import Notification
from compliance.models.user import User
from compliance.models.vendor import Vendor

__all__ = [
    "ActivityLog",
    "Notification",
    "User",
    "Vendor",
]
