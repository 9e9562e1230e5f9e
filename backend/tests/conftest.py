"""
Shared test fixtures: in-memory SQLite database, a store and session factory bound to it,
vendor/user factories, a recording fake mailer, and a FastAPI TestClient with the database,
store and scheduler dependencies pointed at the test database.

Each test function gets freshly created tables (dropped afterwards).
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"  # Must be set before importing compliance modules
os.environ["ENABLE_CRON_JOBS"] = "false"

from datetime import datetime
from zoneinfo import ZoneInfo

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from compliance.config import settings
from compliance.db.base import Base
from compliance.models import User, Vendor
from compliance.scheduler.clock import fixed_clock
from compliance.services.compliance_store import ComplianceStore, VendorContact

IST = ZoneInfo("Asia/Kolkata")

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@event.listens_for(engine, "connect")
def _enable_fk(dbapi_conn, _):
    """SQLite ignores FKs by default, turn them on."""
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


class FakeMailer:
    """Records reminder sends. Emails in `fail_for` raise; emails in `reject_for` return False."""

    def __init__(self, fail_for=(), reject_for=()):
        self.fail_for = set(fail_for)
        self.reject_for = set(reject_for)
        self.sent: list[tuple[str, str]] = []
        self.attempts: list[str] = []

    def send_gst_reminder(self, vendor: VendorContact, due_date_description: str) -> bool:
        self.attempts.append(vendor.email)
        if vendor.email in self.fail_for:
            raise ConnectionError(f"SMTP connection refused for {vendor.email}")
        if vendor.email in self.reject_for:
            return False
        self.sent.append((vendor.email, due_date_description))
        return True


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def db_session():
    """Create all tables, yield a session, then tear down."""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session_factory():
    return TestSessionLocal


@pytest.fixture()
def store(session_factory) -> ComplianceStore:
    return ComplianceStore(session_factory)


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def ist_clock():
    """Factory: clock pinned to a wall time in Asia/Kolkata."""

    def _make(year, month, day, hour=8, minute=0):
        return fixed_clock(datetime(year, month, day, hour, minute, tzinfo=IST))

    return _make


@pytest.fixture()
def make_user(db_session: Session):
    counter = {"n": 0}

    def _make(role="vendor", name=None, email=None) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.in",
            password_hash="x",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def make_vendor(db_session: Session, make_user):
    """Factory: a user (vendor role by default) plus its vendor profile."""

    def _make(
        turnover_range=">1Cr",
        compliance_status="pending",
        role="vendor",
        email=None,
        name=None,
        business_name="Sri Lakshmi Traders",
        business_type="retail",
        gst_number="29ABCDE1234F1Z5",
    ) -> Vendor:
        user = make_user(role=role, name=name, email=email)
        vendor = Vendor(
            user_id=user.user_id,
            business_name=business_name,
            business_type=business_type,
            turnover_range=turnover_range,
            gst_number=gst_number,
            compliance_status=compliance_status,
        )
        db_session.add(vendor)
        db_session.commit()
        return vendor

    return _make


@pytest.fixture()
def admin_user(make_user) -> User:
    return make_user(role="admin", name="Admin", email="admin@nammacompliance.in")


@pytest.fixture()
def auth_header():
    """Factory: Authorization header carrying a valid token for `user`."""

    def _make(user: User) -> dict[str, str]:
        token = jwt.encode(
            {"userId": user.user_id, "role": user.role, "email": user.email, "name": user.name},
            settings.jwt_secret,
            algorithm="HS256",
        )
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def client(db_session: Session, session_factory, mailer, ist_clock) -> TestClient:
    """TestClient whose DB, store and scheduler all use the test database.

    The scheduler's clock is pinned to 20 Jan 2026 08:00 IST (a GSTR-1 monthly due date).
    """
    from compliance.api.deps import get_compliance_scheduler, get_compliance_store
    from compliance.db.session import get_db
    from compliance.main import app
    from compliance.scheduler.runner import build_compliance_scheduler

    compliance_scheduler = build_compliance_scheduler(
        settings, session_factory, mailer=mailer, clock=ist_clock(2026, 1, 20)
    )
    compliance_scheduler.configure()

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_compliance_scheduler] = lambda: compliance_scheduler
    app.dependency_overrides[get_compliance_store] = lambda: ComplianceStore(session_factory)
    yield TestClient(app)
    app.dependency_overrides.clear()
