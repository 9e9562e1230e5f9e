"""Notification sent to a user (in-app, email or whatsapp).

Rows are written by the scheduled jobs and admin broadcasts and never change afterwards,
except is_read which the user flips from the notifications API.
"""
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, false
from sqlalchemy.sql import func

from compliance.db.base import Base


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint("type IN ('info', 'warning', 'success', 'error')", name="ck_notifications_type"),
        CheckConstraint("channel IN ('in-app', 'email', 'whatsapp')", name="ck_notifications_channel"),
    )

    notif_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    title = Column(String(256), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(16), nullable=False, server_default="info")
    channel = Column(String(16), nullable=False, server_default="in-app")
    is_read = Column(Boolean, nullable=False, server_default=false(), default=False)
    sent_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
