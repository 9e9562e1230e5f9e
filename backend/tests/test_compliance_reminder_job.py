"""
test_compliance_reminder_job.py - weekly in-app nag for vendors with pending compliance.
"""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from compliance.core.errors import StorageError
from compliance.models import Notification
from compliance.scheduler.compliance_reminder_job import ComplianceReminderJob
from compliance.services.compliance_store import ComplianceStore


def test_pending_vendors_get_in_app_warning(db_session, store, make_vendor):
    pending = make_vendor(compliance_status="pending")
    make_vendor(compliance_status="compliant")

    assert ComplianceReminderJob(store).run() == 1

    rows = db_session.query(Notification).all()
    assert len(rows) == 1
    assert rows[0].user_id == pending.user_id
    assert rows[0].title == "Compliance Status Pending"
    assert rows[0].message.startswith("Please complete your compliance requirements.")
    assert rows[0].type == "warning"
    assert rows[0].channel == "in-app"


def test_no_pending_vendors(db_session, store, make_vendor):
    make_vendor(compliance_status="compliant")

    assert ComplianceReminderJob(store).run() == 0
    assert db_session.query(Notification).count() == 0


def test_pending_profile_on_non_vendor_user_is_skipped(store, make_vendor):
    make_vendor(compliance_status="pending", role="ca")

    assert ComplianceReminderJob(store).run() == 0


def test_insert_failure_does_not_abort_loop(db_session, session_factory, make_vendor):
    first = make_vendor(compliance_status="pending")
    second = make_vendor(compliance_status="pending")
    third = make_vendor(compliance_status="pending")

    class FlakyStore(ComplianceStore):
        def add_notification(self, user_id, *args, **kwargs):
            if user_id == second.user_id:
                raise StorageError("disk I/O error")
            return super().add_notification(user_id, *args, **kwargs)

    assert ComplianceReminderJob(FlakyStore(session_factory)).run() == 2
    notified = {r.user_id for r in db_session.query(Notification).all()}
    assert notified == {first.user_id, third.user_id}


def test_vendor_query_failure_is_fatal():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

    with pytest.raises(StorageError):
        ComplianceReminderJob(ComplianceStore(lambda: db)).run()
