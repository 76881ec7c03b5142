"""Ports - interfaces/protocols for external dependencies."""

from .outline_source import OutlineSource
from .identifier_provider import IdentifierProvider
from .anniversary_provider import AnniversaryProvider

__all__ = [
    "OutlineSource",
    "IdentifierProvider",
    "AnniversaryProvider",
]
