"""Vendor business profile, 1:1 with a vendor-role user.

turnover_range is one of compliance.core.due_dates.TURNOVER_RANGES and decides GST filing frequency.
assigned_ca_id points at the CA user who handles this vendor's cases.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from compliance.db.base import Base


class Vendor(Base):
    __tablename__ = "vendors"

    vendor_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, unique=True, index=True)
    business_name = Column(String(256), nullable=False)
    business_type = Column(String(64), nullable=False)
    turnover_range = Column(String(16), nullable=False)
    gst_number = Column(String(32), nullable=True)
    license_type = Column(String(64), nullable=True)
    compliance_status = Column(String(16), nullable=False, server_default="pending", index=True)
    assigned_ca_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
