"""Outline source interface."""

from pathlib import Path
from typing import Protocol

from orgcal.core.outline import OutlineDocument


class OutlineSource(Protocol):
    """Interface for loading a parsed outline tree from any backend."""

    def load(self, path: Path) -> OutlineDocument:
        """Load one document."""
        ...
