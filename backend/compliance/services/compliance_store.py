"""
Storage collaborator for the scheduled jobs and the admin broadcast and log views.

Constructed with a session factory and handed to each job (no shared global handle), so tests can
point it at an in-memory database. Every operation opens its own session and commits before
returning; any SQLAlchemy failure surfaces as StorageError.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from compliance.core.constants import CHANNEL_IN_APP, ROLE_VENDOR
from compliance.core.errors import StorageError
from compliance.models.activity_log import ActivityLog
from compliance.models.notification import Notification
from compliance.models.user import User
from compliance.models.vendor import Vendor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VendorContact:
    """A vendor profile joined with its user row: everything a reminder needs."""

    user_id: int
    vendor_id: int
    name: str
    email: str
    business_name: str
    business_type: str
    turnover_range: str
    gst_number: str | None
    compliance_status: str


def _vendor_contact(vendor: Vendor, user: User) -> VendorContact:
    return VendorContact(
        user_id=user.user_id,
        vendor_id=vendor.vendor_id,
        name=user.name,
        email=user.email,
        business_name=vendor.business_name,
        business_type=vendor.business_type,
        turnover_range=vendor.turnover_range,
        gst_number=vendor.gst_number,
        compliance_status=vendor.compliance_status,
    )


@dataclass(frozen=True)
class ActivityLogEntry:
    """An activity log row joined with the acting user."""

    log_id: int
    user_id: int
    user_name: str
    user_email: str
    user_role: str
    action: str
    details: str | None
    ip_address: str | None
    user_agent: str | None
    timestamp: datetime | None


def _timestamp_value(db: Session, moment: datetime):
    """Bind `moment` (as UTC) for comparison against ActivityLog.timestamp."""
    moment = moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    if db.get_bind().dialect.name == "sqlite":
        # SQLite compares DATETIME text; CURRENT_TIMESTAMP rows carry no fractional seconds
        return func.julianday(moment.strftime("%Y-%m-%d %H:%M:%S.%f"))
    return moment


def _timestamp_column(db: Session):
    if db.get_bind().dialect.name == "sqlite":
        return func.julianday(ActivityLog.timestamp)
    return ActivityLog.timestamp


class ComplianceStore:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _vendor_query(self, db: Session):
        return (
            db.query(Vendor, User)
            .join(User, Vendor.user_id == User.user_id)
            .filter(User.role == ROLE_VENDOR)
        )

    def list_vendor_contacts(self) -> list[VendorContact]:
        """All vendor-role users with their vendor profile. Order is whatever the database returns."""
        db = self._session_factory()
        try:
            return [_vendor_contact(v, u) for v, u in self._vendor_query(db).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Could not list vendors: {e}") from e
        finally:
            db.close()

    def list_vendors_by_compliance_status(self, status: str) -> list[VendorContact]:
        db = self._session_factory()
        try:
            rows = self._vendor_query(db).filter(Vendor.compliance_status == status).all()
            return [_vendor_contact(v, u) for v, u in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Could not list vendors with compliance_status={status}: {e}") from e
        finally:
            db.close()

    def list_user_ids(self, role: str | None = None) -> list[int]:
        """User ids, optionally only those with `role`."""
        db = self._session_factory()
        try:
            q = db.query(User.user_id)
            if role:
                q = q.filter(User.role == role)
            return [user_id for (user_id,) in q.all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Could not list users: {e}") from e
        finally:
            db.close()

    def add_notification(
        self,
        user_id: int,
        title: str,
        message: str,
        type: str = "info",
        channel: str = CHANNEL_IN_APP,
    ) -> int:
        """Insert one notification row; returns its notif_id."""
        db = self._session_factory()
        try:
            row = Notification(user_id=user_id, title=title, message=message, type=type, channel=channel)
            db.add(row)
            db.commit()
            return row.notif_id
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Could not insert notification for user {user_id}: {e}") from e
        finally:
            db.close()

    def add_notifications(
        self,
        user_ids: list[int],
        title: str,
        message: str,
        type: str = "info",
        channel: str = CHANNEL_IN_APP,
    ) -> int:
        """Insert the same notification for every user in one transaction; returns rows written."""
        db = self._session_factory()
        try:
            db.add_all(
                Notification(user_id=uid, title=title, message=message, type=type, channel=channel)
                for uid in user_ids
            )
            db.commit()
            return len(user_ids)
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Could not insert {len(user_ids)} notifications: {e}") from e
        finally:
            db.close()

    def delete_activity_logs_before(self, cutoff: datetime) -> int:
        """Bulk delete activity logs with timestamp strictly before cutoff; returns deleted count."""
        db = self._session_factory()
        try:
            deleted = (
                db.query(ActivityLog)
                .filter(_timestamp_column(db) < _timestamp_value(db, cutoff))
                .delete(synchronize_session=False)
            )
            db.commit()
            logger.debug("Deleted %s activity logs older than %s", deleted, cutoff.isoformat())
            return deleted
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Could not delete activity logs before {cutoff.isoformat()}: {e}") from e
        finally:
            db.close()

    def list_activity_logs(
        self,
        user_id: int | None = None,
        action: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[ActivityLogEntry], int]:
        """
        Activity logs joined with their user, newest first, plus the total matching count.

        `action` matches as a substring; `start` and `end` are inclusive bounds on the timestamp.
        """
        db = self._session_factory()
        try:
            q = db.query(ActivityLog, User).join(User, ActivityLog.user_id == User.user_id)
            if user_id is not None:
                q = q.filter(ActivityLog.user_id == user_id)
            if action:
                q = q.filter(ActivityLog.action.contains(action, autoescape=True))
            if start is not None:
                q = q.filter(_timestamp_column(db) >= _timestamp_value(db, start))
            if end is not None:
                q = q.filter(_timestamp_column(db) <= _timestamp_value(db, end))
            total = q.count()
            rows = (
                q.order_by(_timestamp_column(db).desc(), ActivityLog.log_id.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            entries = [
                ActivityLogEntry(
                    log_id=log.log_id,
                    user_id=log.user_id,
                    user_name=user.name,
                    user_email=user.email,
                    user_role=user.role,
                    action=log.action,
                    details=log.details,
                    ip_address=log.ip_address,
                    user_agent=log.user_agent,
                    timestamp=log.timestamp,
                )
                for log, user in rows
            ]
            return entries, total
        except SQLAlchemyError as e:
            raise StorageError(f"Could not list activity logs: {e}") from e
        finally:
            db.close()
