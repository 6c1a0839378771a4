"""
Confirmation-code delivery over SMTP.

Uses `settings.SENDER_EMAIL` / `settings.APP_PASSWORD` for SMTP auth against
`settings.SMTP_HOST:settings.SMTP_PORT` with STARTTLS. Transport failures are
reported as `DeliveryError`.
"""

import smtplib
from email.mime.text import MIMEText
from typing import Optional

from anonverse.database.config.config import settings
from anonverse.errors import DeliveryError


class SmtpMailer:
    """
    Callable mailer: ``mailer(email, code)`` sends one confirmation code.

    Parameters
    ----------
    host, port : optional
        SMTP endpoint; defaults from settings.
    sender, password : optional
        Mailbox credentials; defaults from settings.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        sender: Optional[str] = None,
        password: Optional[str] = None,
    ):
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.sender = sender if sender is not None else settings.SENDER_EMAIL
        self.password = password if password is not None else settings.APP_PASSWORD

    def __call__(self, email: str, code: str) -> None:
        if not self.sender:
            raise DeliveryError("No sender mailbox is configured")

        msg = MIMEText(f"Your Anonverse confirmation code is: {code}")
        msg["Subject"] = "Confirm your Anonverse account"
        msg["From"] = self.sender
        msg["To"] = email

        try:
            with smtplib.SMTP(self.host, self.port) as server:
                server.starttls()
                server.login(self.sender, self.password)
                server.sendmail(self.sender, email, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"Could not deliver confirmation email: {e}") from e
