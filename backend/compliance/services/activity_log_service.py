"""
Record user actions in activity_logs (read by admin log views, purged by the log cleanup job).
A failed write is logged and rolled back; it never fails the request that triggered it.
"""
import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from compliance.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


def record_activity(
    db: Session,
    user_id: int,
    action: str,
    details: dict[str, Any] | str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> ActivityLog | None:
    if details is not None and not isinstance(details, str):
        details = json.dumps(details, default=str)
    row = ActivityLog(
        user_id=user_id,
        action=action,
        details=details,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:512] or None,
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error logging activity %s for user %s: %s", action, user_id, e)
        return None
    return row
