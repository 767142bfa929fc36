"""SMTP client for delivering MFA one-time codes"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from cibil_analyzer.config import settings
from cibil_analyzer.domain.exceptions import EmailDeliveryError
from cibil_analyzer.infrastructure.observability.metrics import email_failure_counter

logger = logging.getLogger(__name__)


class MailerClient:
    """Client for the outbound mail relay"""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        sender: Optional[str] = None,
    ):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username if username is not None else settings.smtp_username
        self.password = password if password is not None else settings.smtp_password
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.sender = sender or settings.mail_from
        self.timeout = settings.smtp_timeout_seconds

    @property
    def demo_mode(self) -> bool:
        """No relay credentials configured: codes are logged, not sent"""
        return not (self.username and self.password)

    def build_code_message(self, to_address: str, code: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to_address
        message["Subject"] = "Your Verification Code"
        message.set_content(f"Your CIBIL Score Analysis verification code is: {code}")
        message.add_alternative(
            "<b>Your CIBIL Score Analysis verification code is: "
            f'<h2 style="color: #6366f1;">{code}</h2></b>',
            subtype="html",
        )
        return message

    def send_one_time_code(self, to_address: str, code: str) -> None:
        """
        Email a verification code.

        Raises:
            EmailDeliveryError: On connection, authentication or relay errors
        """
        if self.demo_mode:
            logger.info(f"[DEMO MODE] MFA code for {to_address} is: {code}")
            return

        message = self.build_code_message(to_address, code)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            email_failure_counter.inc()
            raise EmailDeliveryError(f"Mail relay error: {e}") from e

        logger.info("MFA code sent", extra={"recipient": to_address})
