import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Dict, Protocol

from company_service.config import Settings

logger = logging.getLogger(__name__)

TEMPLATES: Dict[str, Dict[str, str]] = {
    "otp": {
        "subject": "Your Company OTP Code",
        "body": (
            "Dear Company,\n\n"
            "Your One-Time Password (OTP) is: {otp}\n"
            "This code is valid for {minutes} minutes.\n\n"
            "If you did not request this OTP, please ignore this email.\n\n"
            "Regards,\nJob Portal Team"
        ),
    },
    "approval": {
        "subject": "Your company account has been approved",
        "body": (
            "Dear {company_name},\n\n"
            "Your company profile has been reviewed and approved. "
            "You can now sign in and start posting jobs.\n\n"
            "Regards,\nJob Portal Team"
        ),
    },
    "rejection": {
        "subject": "Your company account needs attention",
        "body": (
            "Dear {company_name},\n\n"
            "Your company profile could not be approved for the following reason:\n\n"
            "{reason}\n\n"
            "Regards,\nJob Portal Team"
        ),
    },
}


class Notifier(Protocol):
    async def notify(self, address: str, template: str, data: dict) -> bool:
        ...


def render(template: str, data: dict) -> EmailMessage:
    entry = TEMPLATES[template]
    msg = EmailMessage()
    msg["To"] = data.get("to", "")
    msg["Subject"] = entry["subject"]
    msg.set_content(entry["body"].format(**data))
    return msg


class EmailNotifier:
    """SMTP notification transport.

    Delivery never raises: failures and timeouts are logged and reported as
    ``False`` so callers can decide whether a failed send matters.
    """

    def __init__(self, settings: Settings):
        self.server = settings.mail_server
        self.port = settings.mail_port
        self.use_tls = settings.mail_use_tls
        self.username = settings.mail_username
        self.password = settings.mail_password
        self.sender = settings.mail_default_sender or settings.mail_username
        self.suppress_send = settings.mail_suppress_send
        self.timeout = settings.mail_timeout_seconds

    @property
    def dev_mode(self) -> bool:
        return self.suppress_send or not self.username or not self.password

    async def startup(self):
        if self.dev_mode:
            logger.warning("Mail credentials missing or sending suppressed; emails will only be logged")

    async def shutdown(self):
        logger.info("Email notifier closed")

    def _send(self, msg: EmailMessage):
        with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            smtp.login(self.username, self.password)
            smtp.send_message(msg)

    async def notify(self, address: str, template: str, data: dict) -> bool:
        if not address:
            return False
        if template not in TEMPLATES:
            logger.error("Unknown email template %s", template)
            return False
        try:
            msg = render(template, {**data, "to": address})
        except KeyError as exc:
            logger.error("Missing field %s for email template %s", exc, template)
            return False
        msg["From"] = self.sender or "no-reply@company.local"

        if self.dev_mode:
            logger.info("Dev email (not sent) to %s [%s]: %s", address, template, msg.get_content().strip())
            return True

        try:
            await asyncio.wait_for(asyncio.to_thread(self._send, msg), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Timed out sending %s email to %s", template, address)
            return False
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send %s email to %s: %s", template, address, exc)
            return False
        logger.info("Mail sent to %s [%s]", address, template)
        return True
