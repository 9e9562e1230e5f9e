"""
Admin API: list scheduled jobs, run a job out of schedule, broadcast a notification, read activity logs.

Every call is recorded in activity_logs for the calling admin.
"""
import logging
import math
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from compliance.api.deps import (
    CurrentUser,
    get_compliance_scheduler,
    get_compliance_store,
    log_activity,
    require_role,
)
from compliance.core.constants import (
    ACTIVITY_LOGS_PAGE_LIMIT,
    CHANNEL_IN_APP,
    JOB_IDS,
    NOTIFICATION_CHANNELS,
    ROLE_ADMIN,
    ROLES,
)
from compliance.core.errors import StorageError, error_to_http
from compliance.scheduler.runner import ComplianceScheduler
from compliance.services.compliance_store import ComplianceStore

router = APIRouter()
logger = logging.getLogger(__name__)

require_admin = require_role(ROLE_ADMIN)


# --- Jobs ---


@router.get("/jobs")
def list_jobs(
    _admin: CurrentUser = Depends(require_admin),
    _log: None = Depends(log_activity("VIEW_SCHEDULED_JOBS")),
    scheduler: ComplianceScheduler = Depends(get_compliance_scheduler),
) -> dict[str, Any]:
    return {"timezone": scheduler.settings.scheduler_timezone, "jobs": scheduler.jobs()}


@router.post("/jobs/{job_id}/run")
def run_job_now(
    job_id: str,
    admin: CurrentUser = Depends(require_admin),
    _log: None = Depends(log_activity("TRIGGER_JOB")),
    scheduler: ComplianceScheduler = Depends(get_compliance_scheduler),
) -> dict[str, Any]:
    """
    Run a scheduled job now (gst_reminders, compliance_reminders, log_cleanup).
    Same code path as the scheduled tick; a failed run comes back as ok=false with the error.
    """
    if job_id not in JOB_IDS:
        raise HTTPException(status_code=404, detail=f"Unknown job {job_id}")
    logger.info("Admin %s triggered %s", admin.user_id, job_id)
    return scheduler.trigger(job_id).to_dict()


# --- Broadcast ---


class BroadcastRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=256)
    message: str = Field(..., min_length=1)
    target_role: str | None = Field(None, description="vendor, ca or admin; omit for all users")
    channel: str = Field(CHANNEL_IN_APP, description="in-app, email or whatsapp")


@router.post("/broadcast")
def broadcast(
    body: BroadcastRequest,
    _admin: CurrentUser = Depends(require_admin),
    _log: None = Depends(log_activity("BROADCAST_NOTIFICATION")),
    store: ComplianceStore = Depends(get_compliance_store),
) -> dict[str, Any]:
    """
    Write the same notification for every user (or every user with target_role).
    Rows are stored only; nothing is sent on the external channel.
    """
    if body.channel not in NOTIFICATION_CHANNELS:
        raise HTTPException(status_code=400, detail="Invalid channel. Must be in-app, email, or whatsapp")
    if body.target_role and body.target_role not in ROLES:
        raise HTTPException(status_code=400, detail="Invalid target role. Must be vendor, ca, or admin")
    try:
        user_ids = store.list_user_ids(body.target_role)
        if not user_ids:
            raise HTTPException(status_code=404, detail="No target users found")
        count = store.add_notifications(user_ids, body.title, body.message, channel=body.channel)
    except StorageError as e:
        logger.exception("Broadcast notification failed: %s", e)
        raise error_to_http(e) from e
    return {
        "message": "Broadcast notification sent successfully",
        "broadcast": {
            "title": body.title,
            "message": body.message,
            "target_role": body.target_role or "all",
            "channel": body.channel,
            "recipient_count": count,
        },
    }


# --- Activity logs ---


@router.get("/logs")
def list_activity_logs(
    user_id: int | None = Query(None, description="Only this user's actions"),
    action: str | None = Query(None, description="Substring of the action name"),
    start_date: datetime | None = Query(None, description="Inclusive lower bound (naive values are UTC)"),
    end_date: datetime | None = Query(None, description="Inclusive upper bound (naive values are UTC)"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=ACTIVITY_LOGS_PAGE_LIMIT),
    _admin: CurrentUser = Depends(require_admin),
    _log: None = Depends(log_activity("VIEW_SYSTEM_LOGS")),
    store: ComplianceStore = Depends(get_compliance_store),
) -> dict[str, Any]:
    """Activity logs with the acting user, newest first, paginated."""
    try:
        entries, total = store.list_activity_logs(
            user_id=user_id,
            action=action,
            start=start_date,
            end=end_date,
            limit=limit,
            offset=(page - 1) * limit,
        )
    except StorageError as e:
        logger.exception("Listing activity logs failed: %s", e)
        raise error_to_http(e) from e
    return {
        "logs": [
            {
                "id": entry.log_id,
                "user_id": entry.user_id,
                "user_name": entry.user_name,
                "user_email": entry.user_email,
                "user_role": entry.user_role,
                "action": entry.action,
                "details": entry.details,
                "ip_address": entry.ip_address,
                "user_agent": entry.user_agent,
                "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
            }
            for entry in entries
        ],
        "pagination": {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)},
    }
