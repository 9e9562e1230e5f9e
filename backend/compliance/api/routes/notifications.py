"""
User notifications API: the caller's own notifications only.

Supports: list (with unread filter and unread count), mark one read, mark all read.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from compliance.api.deps import CurrentUser, get_current_user
from compliance.core.constants import NOTIFICATIONS_LIST_LIMIT
from compliance.db.session import get_db
from compliance.models.notification import Notification

router = APIRouter()


def _serialize(r: Notification) -> dict[str, Any]:
    return {
        "notif_id": r.notif_id,
        "title": r.title,
        "message": r.message,
        "type": r.type,
        "channel": r.channel,
        "is_read": bool(r.is_read),
        "sent_at": r.sent_at.isoformat() if r.sent_at else None,
    }


# --- List ---


@router.get("/notifications")
def list_notifications(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    limit: int = Query(50, ge=1, le=NOTIFICATIONS_LIST_LIMIT),
    unread_only: bool = Query(False),
) -> dict[str, Any]:
    """List the caller's notifications, newest first, plus the unread count (for the badge)."""
    q = db.query(Notification).filter(Notification.user_id == user.user_id)
    if unread_only:
        q = q.filter(Notification.is_read.is_(False))
    rows = q.order_by(Notification.sent_at.desc(), Notification.notif_id.desc()).limit(limit).all()
    unread_count = (
        db.query(Notification)
        .filter(Notification.user_id == user.user_id, Notification.is_read.is_(False))
        .count()
    )
    return {"notifications": [_serialize(r) for r in rows], "unread_count": unread_count}


# --- Mark one read ---


@router.patch("/notifications/{notif_id}/read")
def mark_notification_read(
    notif_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> dict[str, Any]:
    row = (
        db.query(Notification)
        .filter(Notification.notif_id == notif_id, Notification.user_id == user.user_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Notification not found")
    if not row.is_read:
        row.is_read = True
        db.commit()
    return {"ok": True, "notif_id": notif_id, "is_read": True}


# --- Mark all read ---


@router.post("/notifications/mark-all-read")
def mark_all_read(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> dict[str, Any]:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user.user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return {"ok": True, "marked_count": updated}
