"""Store adapters - Record store implementations."""

from .json_file import JsonFileUserStore, parse_records

__all__ = ["JsonFileUserStore", "parse_records"]
