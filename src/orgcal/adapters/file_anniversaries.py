"""File-based anniversary provider."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileAnniversaryProvider:
    """
    Pre-rendered anniversary components kept in a text file.

    Implements AnniversaryProvider protocol. A missing file means no
    anniversaries.
    """

    def __init__(self, path: Path | str | None):
        self.path = Path(path).expanduser() if path else None

    def render(self) -> str:
        if self.path is None:
            return ""
        if not self.path.exists():
            logger.warning(f"Anniversaries file not found: {self.path}")
            return ""
        return self.path.read_text(encoding="utf-8")
