"""Anniversary provider interface."""

from typing import Protocol


class AnniversaryProvider(Protocol):
    """Interface for pre-rendered anniversary components."""

    def render(self) -> str:
        """Return calendar component text, or "" when disabled."""
        ...
