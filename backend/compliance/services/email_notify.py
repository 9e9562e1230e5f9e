"""
Send GST filing reminders by email via SMTP (Google Gmail or other).
Set SMTP_USER, SMTP_PASSWORD (and optionally NOTIFY_FROM) in .env. Use a Gmail App Password (not your normal password).
"""
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from compliance.config import Settings, settings as default_settings
from compliance.core.constants import BRAND_NAME, GST_REMINDER_SUBJECT, SMTP_TIMEOUT_SECONDS
from compliance.services.compliance_store import VendorContact

logger = logging.getLogger(__name__)

_GST_REMINDER_TEXT = """\
Dear {name},

This is a friendly reminder that your GST return filing is due on {due}.

Business Details:
- Business Name: {business_name}
- GST Number: {gst_number}
- Business Type: {business_type}

Please ensure you file your GST return on time to avoid penalties.

If you need assistance, please contact your assigned CA or open a case in the {brand} portal.

Best regards,
{brand} Team
"""

_GST_REMINDER_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px;">
    <h2 style="color: #333;">{brand}</h2>
    <div style="background-color: white; padding: 20px; border-left: 4px solid #ffc107;">
      <h3 style="color: #856404; margin-top: 0;">GST Return Filing Reminder</h3>
      <p>Dear <strong>{name}</strong>,</p>
      <p>This is a friendly reminder that your GST return filing is due on <strong>{due}</strong>.</p>
      <ul>
        <li><strong>Business Name:</strong> {business_name}</li>
        <li><strong>GST Number:</strong> {gst_number}</li>
        <li><strong>Business Type:</strong> {business_type}</li>
      </ul>
      <p>Please ensure you file your GST return on time to avoid penalties.</p>
      <p><a href="{dashboard_url}">Open {brand} Portal</a></p>
    </div>
    <p style="color: #888; font-size: 12px;">This is an automated reminder from {brand}. Please do not reply to this email.</p>
  </div>
</div>
"""


def compose_gst_reminder(
    vendor: VendorContact, due_date_description: str, frontend_url: str
) -> tuple[str, str, str]:
    """Build (subject, plain text, html) for one vendor and one due-date rule description."""
    fields = {
        "name": vendor.name,
        "due": due_date_description,
        "business_name": vendor.business_name,
        "gst_number": vendor.gst_number or "Not provided",
        "business_type": vendor.business_type,
        "brand": BRAND_NAME,
    }
    text = _GST_REMINDER_TEXT.format(**fields)
    body_html = _GST_REMINDER_HTML.format(
        dashboard_url=html.escape(f"{frontend_url.rstrip('/')}/dashboard"),
        **{k: html.escape(str(v)) for k, v in fields.items()},
    )
    return GST_REMINDER_SUBJECT, text, body_html


class SmtpMailer:
    """Email channel. One SMTP connection per message; failures are logged and reported as False."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or default_settings

    def _from_address(self) -> str:
        if self.settings.notify_from:
            return self.settings.notify_from
        if self.settings.smtp_user:
            return f"{BRAND_NAME} <{self.settings.smtp_user}>"
        return f"{BRAND_NAME} <noreply@localhost>"

    def send(self, to_email: str, subject: str, text: str, body_html: str | None = None) -> bool:
        """Send one message. Returns True if sent, False if skipped or failed."""
        to_email = (to_email or "").strip()
        if not to_email:
            return False
        user = self.settings.smtp_user
        password = self.settings.smtp_password
        if not user or not password:
            logger.warning("SMTP_USER or SMTP_PASSWORD not set; cannot email %s", to_email)
            return False
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self._from_address()
        msg["To"] = to_email
        msg.attach(MIMEText(text, "plain"))
        if body_html:
            msg.attach(MIMEText(body_html, "html"))
        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS) as server:
                server.starttls()
                server.login(user, password)
                server.sendmail(user, [to_email], msg.as_string())
            logger.info("Email sent to %s: %s", to_email, subject)
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("Failed to send email to %s: %s", to_email, e)
            return False

    def send_gst_reminder(self, vendor: VendorContact, due_date_description: str) -> bool:
        subject, text, body_html = compose_gst_reminder(vendor, due_date_description, self.settings.frontend_url)
        return self.send(vendor.email, subject, text, body_html)
