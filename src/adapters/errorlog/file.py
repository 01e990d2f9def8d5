"""
File error log adapter - Implements ErrorLog protocol.

Appends one serialized failure per call, each followed by a CRLF record
separator. The file is opened, written and flushed per entry (no fsync).
"""

from pathlib import Path

RECORD_SEPARATOR = "\r\n"


class FileErrorLog:
    """
    Implements ErrorLog protocol over an append-only text file.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, entry: str) -> None:
        """
        Append an entry and flush it before returning.

        OSError propagates to the caller.
        """
        with self._path.open("a", encoding="utf-8", newline="") as fh:
            fh.write(entry + RECORD_SEPARATOR)
            fh.flush()
