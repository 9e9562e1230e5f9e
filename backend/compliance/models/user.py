"""Portal user. role decides which dashboard and jobs apply: vendor, ca (chartered accountant) or admin."""
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from compliance.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("role IN ('vendor', 'ca', 'admin')", name="ck_users_role"),)

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)
    email = Column(String(256), nullable=False, unique=True, index=True)
    phone = Column(String(32), nullable=True, unique=True)
    password_hash = Column(String(256), nullable=False)
    role = Column(String(16), nullable=False)
    language = Column(String(8), nullable=False, server_default="en")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
