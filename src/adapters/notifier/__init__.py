"""Notifier adapters - OTP delivery implementations."""

from .console import ConsoleNotifier
from .smtp import SmtpConfig, SmtpNotifier

__all__ = ["ConsoleNotifier", "SmtpConfig", "SmtpNotifier"]
