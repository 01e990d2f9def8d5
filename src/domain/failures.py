"""
Failure values - Tagged errors routed through the error pipeline.

A Failure is created once from the exception that interrupted a request
and then handed, unchanged, from stage to stage until one of them
produces a response.
"""

import json
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from .exceptions import NotFoundError


class FailureKind(str, Enum):
    """
    Classification of a failure.

    NOT_FOUND carries the ``404`` tag used by the classification stage.
    Everything else is UNCLASSIFIED and answered by the default stage.
    """

    NOT_FOUND = "404"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class Failure:
    """An error travelling through the error pipeline."""

    kind: FailureKind
    name: str
    message: str
    stack: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_not_found(self) -> bool:
        return self.kind is FailureKind.NOT_FOUND

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failure":
        """
        Build a Failure from a raised exception.

        NotFoundError maps to NOT_FOUND and is named by its tag, every other
        exception keeps its class name and is UNCLASSIFIED.
        """
        if isinstance(exc, NotFoundError):
            kind = FailureKind.NOT_FOUND
            name = FailureKind.NOT_FOUND.value
        else:
            kind = FailureKind.UNCLASSIFIED
            name = type(exc).__name__

        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(kind=kind, name=name, message=str(exc), stack=stack.rstrip())

    def describe(self) -> dict[str, str]:
        """Serializable ``{name, message, stack}`` view."""
        return {"name": self.name, "message": self.message, "stack": self.stack}

    def to_log_entry(self) -> str:
        """Render the append-only log record (without separator)."""
        entry = self.describe()
        entry["timestamp"] = self.timestamp.isoformat()
        return json.dumps(entry, indent=4)
