"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from typing import Protocol

from .records import RecordStore


@dataclass(frozen=True)
class AlertMessage:
    """E-mail alert describing a failure."""

    to: str
    sender: str
    subject: str
    text: str
    html: str


class UserStore(Protocol):
    """Port interface for reading user records."""

    def load(self) -> RecordStore:
        """
        Read the whole record store, blocking the caller.

        Returns:
            Snapshot of every stored record as of the call

        Raises:
            StoreReadError: If the store could not be read
            StoreParseError: If the store content is malformed
        """
        ...

    async def load_async(self) -> RecordStore:
        """
        Read the whole record store without blocking the event loop.

        Raises the same errors as load() once the read settles.
        """
        ...


class ErrorLog(Protocol):
    """Port interface for the append-only error log."""

    def append(self, entry: str) -> None:
        """
        Append one serialized entry followed by the record separator.

        Args:
            entry: Serialized failure record
        """
        ...


class AlertSender(Protocol):
    """Port interface for alert delivery."""

    async def send(self, message: AlertMessage) -> None:
        """
        Deliver an alert.

        Args:
            message: Alert to deliver

        Raises:
            Exception: Any delivery failure; callers decide how to report it
        """
        ...
