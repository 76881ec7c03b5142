"""Functional core - pure calendar generation with no I/O."""

from .outline import (
    DateSpec,
    DiaryExpression,
    EntryKind,
    InvalidInput,
    OutlineDocument,
    OutlineEntry,
    Repeater,
    Timestamp,
    TimestampKind,
)
from .options import ExportOptions
from .text import escape, fold
from .timestamps import normalize, format_timestamp
from .categories import Genealogy, get_categories, is_blocked
from .components import ComponentFields, build_valarm, build_vevent, build_vtodo
from .diary import render_diary
from .transcoder import ExportContext, transcode_document, transcode_entry
from .assembler import combine, export_document, wrap

__all__ = [
    # Outline model
    "DateSpec",
    "DiaryExpression",
    "EntryKind",
    "InvalidInput",
    "OutlineDocument",
    "OutlineEntry",
    "Repeater",
    "Timestamp",
    "TimestampKind",
    "ExportOptions",
    # Text
    "escape",
    "fold",
    # Timestamps
    "normalize",
    "format_timestamp",
    # Categories and blocking
    "Genealogy",
    "get_categories",
    "is_blocked",
    # Components
    "ComponentFields",
    "build_valarm",
    "build_vevent",
    "build_vtodo",
    "render_diary",
    # Transcoding and assembly
    "ExportContext",
    "transcode_document",
    "transcode_entry",
    "combine",
    "export_document",
    "wrap",
]
