"""Identifier provider interface."""

from typing import Protocol


class IdentifierProvider(Protocol):
    """Interface for generating stable entry identifiers."""

    def new_id(self) -> str:
        """Return an identifier never handed out before in this process."""
        ...
