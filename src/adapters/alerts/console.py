"""
Console alert sender adapter - Implements AlertSender protocol.

This module provides a console-based implementation of the domain's
alert sender port, logging alerts instead of e-mailing them. It is used
when no e-mail API key is configured.
"""

import logging

from src.domain.ports import AlertMessage

logger = logging.getLogger(__name__)


class ConsoleAlertSender:
    """
    Implements AlertSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints alerts to stdout.
    """

    async def send(self, message: AlertMessage) -> None:
        """
        Log the alert (simulates e-mail delivery).

        The alert is logged at INFO level so it shows up in server logs.

        Args:
            message: Alert built by the alerting stage
        """
        logger.info(
            "[ALERT] To: %s Subject: %s\n%s", message.to, message.subject, message.text
        )
