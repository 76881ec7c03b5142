"""Adapters - I/O implementations of ports."""

from .json_outline import JsonOutlineSource, OutlineLoadError
from .uuid_ids import UuidIdentifierProvider
from .file_anniversaries import FileAnniversaryProvider
from .calendar_file import CalendarFileWriter

__all__ = [
    "JsonOutlineSource",
    "OutlineLoadError",
    "UuidIdentifierProvider",
    "FileAnniversaryProvider",
    "CalendarFileWriter",
]
