"""Initial schema: users, vendors, notifications, activity_logs.

- vendors.user_id: 1:1 with a vendor-role user; turnover_range drives GST filing frequency.
- notifications: written by the reminder jobs and admin broadcasts; only is_read changes later.
- activity_logs.timestamp indexed for the monthly retention delete.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("password_hash", sa.String(256), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("language", sa.String(8), nullable=False, server_default="en"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
        sa.UniqueConstraint("phone"),
        sa.CheckConstraint("role IN ('vendor', 'ca', 'admin')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "vendors",
        sa.Column("vendor_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("business_name", sa.String(256), nullable=False),
        sa.Column("business_type", sa.String(64), nullable=False),
        sa.Column("turnover_range", sa.String(16), nullable=False),
        sa.Column("gst_number", sa.String(32), nullable=True),
        sa.Column("license_type", sa.String(64), nullable=True),
        sa.Column("compliance_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("assigned_ca_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("vendor_id"),
    )
    op.create_index("ix_vendors_user_id", "vendors", ["user_id"], unique=True)
    op.create_index("ix_vendors_compliance_status", "vendors", ["compliance_status"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("notif_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="info"),
        sa.Column("channel", sa.String(16), nullable=False, server_default="in-app"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sent_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("notif_id"),
        sa.CheckConstraint("type IN ('info', 'warning', 'success', 'error')", name="ck_notifications_type"),
        sa.CheckConstraint("channel IN ('in-app', 'email', 'whatsapp')", name="ck_notifications_channel"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"], unique=False)

    op.create_table(
        "activity_logs",
        sa.Column("log_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("log_id"),
    )
    op.create_index("ix_activity_logs_timestamp", "activity_logs", ["timestamp"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_activity_logs_timestamp", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_vendors_compliance_status", table_name="vendors")
    op.drop_index("ix_vendors_user_id", table_name="vendors")
    op.drop_table("vendors")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
