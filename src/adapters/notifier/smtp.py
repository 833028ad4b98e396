"""
SMTP notifier adapter - Implements Notifier protocol.

Delivers OTP codes by email. Configuration is an immutable value passed in
at construction; a new SMTP connection is opened per message and every
network operation runs under the configured timeout.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from src.domain.exceptions import NotifierError

logger = logging.getLogger(__name__)

SUBJECT = "Email Verification OTP"

_HTML_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2>Verify Your Email</h2>
  <p>Thank you for registering. Please use the following OTP to verify your email address:</p>
  <div style="background-color: #f4f4f4; padding: 10px; text-align: center; font-size: 24px; letter-spacing: 5px;">
    <strong>{code}</strong>
  </div>
  <p>This OTP will expire in {ttl_minutes} minutes.</p>
  <p>If you didn't request this, please ignore this email.</p>
</div>
"""


@dataclass(frozen=True)
class SmtpConfig:
    """Connection settings for the SMTP relay."""

    host: str
    port: int
    sender: str
    username: str = ""
    password: str = ""
    use_tls: bool = True
    timeout_seconds: float = 10.0


class SmtpNotifier:
    """
    Implements Notifier protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, config: SmtpConfig, ttl_minutes: int = 15) -> None:
        self._config = config
        self._ttl_minutes = ttl_minutes

    @property
    def config(self) -> SmtpConfig:
        return self._config

    def build_message(self, email: str, code: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self._config.sender
        message["To"] = email
        message.set_content(
            f"Your verification code is {code}. It expires in {self._ttl_minutes} minutes."
        )
        message.add_alternative(
            _HTML_TEMPLATE.format(code=code, ttl_minutes=self._ttl_minutes), subtype="html"
        )
        return message

    def send_otp(self, email: str, code: str) -> None:
        """
        Send the OTP email.

        Raises:
            NotifierError: On connection, authentication, or delivery failure
        """
        message = self.build_message(email, code)
        config = self._config
        try:
            with smtplib.SMTP(config.host, config.port, timeout=config.timeout_seconds) as server:
                server.ehlo()
                if config.use_tls:
                    server.starttls()
                    server.ehlo()
                if config.username:
                    server.login(config.username, config.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("OTP delivery failed for %s", email)
            raise NotifierError("Failed to send verification email") from e

        logger.info("OTP delivered to %s", email)
