from compliance.services.compliance_store import ActivityLogEntry, ComplianceStore, VendorContact
from compliance.services.email_notify import SmtpMailer, compose_gst_reminder

__all__ = ["ActivityLogEntry", "ComplianceStore", "VendorContact", "SmtpMailer", "compose_gst_reminder"]
