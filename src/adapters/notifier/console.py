"""
Console notifier adapter - Implements Notifier protocol.

Logs OTP codes instead of emailing them. Development use only.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def send_otp(self, email: str, code: str) -> None:
        """
        Log the OTP (simulates email delivery).

        Logged at INFO level so it shows up in container logs.

        Args:
            email: Recipient email address (normalized by domain layer)
            code: Numeric verification code
        """
        logger.info("[VERIFICATION] Email: %s Code: %s", email, code)
