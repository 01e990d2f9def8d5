"""
JSON file store adapter - Implements UserStore protocol.

The store is a single JSON object mapping arbitrary keys to user records.
A record is either an object with an ``email`` string or a bare email
string. The file is read and parsed in full on every call.
"""

import json
import logging
from pathlib import Path
from typing import Any

from starlette.concurrency import run_in_threadpool

from src.domain.exceptions import StoreParseError, StoreReadError
from src.domain.records import RecordStore, UserRecord

logger = logging.getLogger(__name__)


class JsonFileUserStore:
    """
    Implements UserStore protocol over a JSON document on disk.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Holds no state besides the path, so one instance can serve every request.
    """

    def __init__(self, path: str | Path) -> None:
        """
        Initialize store with the path of the JSON document.

        Args:
            path: Location of the record file
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> RecordStore:
        """
        Read and parse the whole record file.

        Raises:
            StoreReadError: If the file cannot be read
            StoreParseError: If the content is not a valid record document
        """
        try:
            raw = self._path.read_bytes()
        except OSError as e:
            logger.error("Could not read record store %s: %s", self._path, e)
            raise StoreReadError(f"Could not read record store: {self._path}") from e

        return parse_records(raw)

    async def load_async(self) -> RecordStore:
        """Read the record file in a worker thread."""
        return await run_in_threadpool(self.load)


def parse_records(raw: bytes | str) -> RecordStore:
    """
    Parse a record document.

    Raises:
        StoreParseError: On invalid JSON, a non-object document, or a record
            without an email string
    """
    try:
        document = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StoreParseError(f"Record store is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise StoreParseError("Record store must be a JSON object")

    return RecordStore({key: _to_record(key, value) for key, value in document.items()})


def _to_record(key: str, value: Any) -> UserRecord:
    if isinstance(value, str):
        return UserRecord(key=key, email=value)
    if isinstance(value, dict) and isinstance(value.get("email"), str):
        attributes = {k: v for k, v in value.items() if k != "email"}
        return UserRecord(key=key, email=value["email"], attributes=attributes)
    raise StoreParseError(f"Record {key!r} has no email")
