"""Calendar file writer."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class CalendarFileWriter:
    """Writes calendar text as UTF-8, optionally with CRLF line endings."""

    def __init__(self, path: Path | str, crlf: bool = False):
        self.path = Path(path).expanduser()
        self.crlf = crlf

    def write(self, text: str) -> Path:
        if self.crlf:
            text = text.replace("\r\n", "\n").replace("\n", "\r\n")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the line endings exactly as given
        with self.path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info(f"Wrote calendar to {self.path}")
        return self.path
