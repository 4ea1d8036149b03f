import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
import logging
from typing import List, Optional

from onboardflow.platform.config import settings
from onboardflow.workflows.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome aboard!"
REMINDER_SUBJECT = "Reminder: please fill the New Employee form"
THANKYOU_SUBJECT = "Thank you for completing the New Employee form"


def welcome_body(first_name: str) -> str:
    return (
        f"Hi {first_name},\n\n"
        "Welcome to the team! Please fill the New Employee form so we can "
        "finish setting up your accounts.\n"
    )


def reminder_body(first_name: str, reminder_number: int) -> str:
    return (
        f"Hi {first_name},\n\n"
        f"This is reminder #{reminder_number}: the New Employee form is still "
        "waiting for you. HR has been notified.\n"
    )


def thankyou_body(first_name: str) -> str:
    return (
        f"Hi {first_name},\n\n"
        "Thanks for filling the New Employee form. You're all set!\n"
    )


class EmailService:
    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = settings.SMTP_ENABLED if enabled is None else enabled
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER
        self.password = settings.SMTP_PASSWORD
        self.from_email = settings.SMTP_FROM_EMAIL
        self.use_tls = settings.SMTP_TLS

    def send_email(self, to_emails: List[str], subject: str, body: str) -> None:
        """
        Send a plain-text email to a list of recipients.

        When SMTP is disabled the message is only logged. Delivery failures
        raise EmailDeliveryError so the calling activity is retried.
        """
        if not to_emails:
            raise EmailDeliveryError("No recipients given")

        if not self.enabled:
            logger.info(f"[DRY RUN] Email to {to_emails}: {subject}")
            return

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = ", ".join(to_emails)
        msg.attach(MIMEText(body, "plain"))

        try:
            with smtplib.SMTP(self.host, self.port) as server:
                if self.use_tls:
                    server.starttls()

                if self.user and self.password:
                    server.login(self.user, self.password)

                server.sendmail(self.from_email, to_emails, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"Failed to send email to {to_emails}: {e}") from e

        logger.info(f"Email sent to {to_emails}")
