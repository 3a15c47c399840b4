"""
Email Notification Service
==========================

Emails a plant's owner when the plant reports an event (e.g. it fell over).

Author: Potbot Team
"""

import logging
import smtplib
from email.mime.text import MIMEText

from potbot.models import NotificationType

logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends plain-text notification emails over SMTP.

    Configure with environment variables (see potbot.config):
    - POTBOT_EMAIL_ADDRESS: Sender address, also the SMTP username
    - POTBOT_EMAIL_PASSWORD: SMTP password or app password
    - POTBOT_MAIL_SERVER: SMTP server hostname
    - POTBOT_MAIL_PORT: SMTP server port (default: 587)
    """

    def __init__(self, from_email: str, password: str, smtp_host: str, smtp_port: int = 587):
        self.from_email = from_email
        self.password = password
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port

        self.is_configured = bool(from_email and password and smtp_host)
        if not self.is_configured:
            logger.warning(
                "Email service not configured. Set POTBOT_EMAIL_ADDRESS, POTBOT_EMAIL_PASSWORD "
                "and POTBOT_MAIL_SERVER to enable plant notifications."
            )

    @staticmethod
    def format_plant_notification(plant_id: str, notification_type: str) -> tuple[str, str]:
        """
        Subject and body for a plant notification.

        Known types get their own wording; anything else gets a generic
        message quoting the type.
        """
        if notification_type == NotificationType.FALLEN:
            return (
                "Your plant has fallen over",
                f"Hi, your plant (ID: {plant_id}) appears to have fallen over. Please check on it.",
            )
        return (
            f"Potbot notification for {plant_id}",
            f"Your plant (ID: {plant_id}) sent notification: {notification_type}",
        )

    def send_plant_notification(self, to: str, plant_id: str, notification_type: str) -> bool:
        """
        Email the owner of a plant.

        Args:
            to: Owner's email address
            plant_id: Plant that raised the notification
            notification_type: Event name sent by the plant

        Returns:
            True if the email was handed to the SMTP server, False otherwise
        """
        if not self.is_configured:
            logger.error(f"Email not configured, cannot notify owner of {plant_id}")
            return False

        subject, body = self.format_plant_notification(plant_id, notification_type)

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.from_email, self.password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {e}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send notification email: {type(e).__name__}: {e}")
            return False

        logger.info(f"[{plant_id}] Notification {notification_type!r} sent to owner")
        return True
