"""Alert adapters - Alert delivery implementations."""

from .console import ConsoleAlertSender
from .sendgrid import AlertDeliveryError, SendGridAlertSender

__all__ = ["AlertDeliveryError", "ConsoleAlertSender", "SendGridAlertSender"]
