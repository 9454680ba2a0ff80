# clearance_watch/notify/email_notifier.py

"""SMTP email notifier for detected differences."""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from clearance_watch.config.settings import Settings
from clearance_watch.errors import NotifyError
from clearance_watch.models.record import Record
from clearance_watch.notify.formatters import (
    render_html_table,
    render_plain_text,
)

logger = logging.getLogger("clearance_watch.notify")

_SMTP_TIMEOUT = 20  # seconds


class EmailNotifier:
    """Send one multipart email per cycle listing every difference.

    Port 587 uses STARTTLS; any other port uses implicit SSL.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str,
        recipients: list[str],
        subject: str,
        mute_link_base: str,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.recipients = list(recipients)
        self.subject = subject
        self.mute_link_base = mute_link_base

    @classmethod
    def from_settings(cls) -> "EmailNotifier":
        """Build a notifier from the ``CW_EMAIL_*`` settings."""
        return cls(
            host=Settings.EMAIL_SMTP_HOST,
            port=Settings.EMAIL_SMTP_PORT,
            username=Settings.EMAIL_USERNAME,
            password=Settings.EMAIL_PASSWORD,
            sender=Settings.EMAIL_FROM,
            recipients=Settings.EMAIL_TO,
            subject=Settings.EMAIL_SUBJECT,
            mute_link_base=Settings.MUTE_LINK_BASE,
        )

    def build_message(self, differences: list[Record]) -> EmailMessage:
        """Compose the email without sending it."""
        msg = EmailMessage()
        msg["Subject"] = self.subject
        msg["From"] = self.sender
        msg["To"] = ", ".join(self.recipients)
        msg.set_content(render_plain_text(differences))
        msg.add_alternative(
            render_html_table(differences, self.mute_link_base),
            subtype="html",
        )
        return msg

    def notify(self, differences: list[Record]) -> None:
        """Send the differences email, raising NotifyError on failure."""
        required = (self.host, self.username, self.password, self.sender)
        if not all(required) or not self.recipients:
            raise NotifyError(
                "Email config incomplete; set CW_EMAIL_USERNAME, "
                "CW_EMAIL_PASSWORD, CW_EMAIL_FROM, CW_EMAIL_TO"
            )

        msg = self.build_message(differences)
        context = ssl.create_default_context()
        try:
            if self.port == 587:
                with smtplib.SMTP(
                    self.host, self.port, timeout=_SMTP_TIMEOUT
                ) as s:
                    s.ehlo()
                    s.starttls(context=context)
                    s.login(self.username, self.password)
                    s.send_message(msg)
            else:
                with smtplib.SMTP_SSL(
                    self.host,
                    self.port,
                    context=context,
                    timeout=_SMTP_TIMEOUT,
                ) as s:
                    s.login(self.username, self.password)
                    s.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotifyError(f"Failed to send email: {exc}") from exc

        logger.info(
            "Email with %d differences sent to %s",
            len(differences),
            ", ".join(self.recipients),
        )
