"""
Record types - User records, record store snapshots and field errors.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class UserRecord:
    """A stored user entry. Only ``email`` is inspected by the service."""

    key: str
    email: str
    attributes: Mapping[str, Any] = field(default_factory=dict)


class RecordStore(Mapping[str, UserRecord]):
    """
    Read-only snapshot of every user record, keyed by storage key.

    A snapshot is loaded wholesale per request and never updated.
    """

    def __init__(self, records: Mapping[str, UserRecord] | None = None) -> None:
        self._records = MappingProxyType(dict(records or {}))

    def __getitem__(self, key: str) -> UserRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def emails(self) -> set[str]:
        """Return every stored email value."""
        return {record.email for record in self._records.values()}

    def has_email(self, email: str | None) -> bool:
        """Exact, case-sensitive membership check."""
        if email is None:
            return False
        return email in self.emails()


@dataclass(frozen=True)
class FieldError:
    """A single validation error, rendered as ``{field: message}``."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {self.field: self.message}


@dataclass(frozen=True)
class RegisterCredentials:
    """Registration payload. Exists only while a request is handled."""

    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None


@dataclass(frozen=True)
class LoginCredentials:
    """Login payload. Login is by email address only."""

    email: str | None = None
