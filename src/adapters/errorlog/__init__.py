"""Error log adapters - Failure log implementations."""

from .file import RECORD_SEPARATOR, FileErrorLog

__all__ = ["RECORD_SEPARATOR", "FileErrorLog"]
