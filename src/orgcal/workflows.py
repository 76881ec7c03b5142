"""Shared workflow layer between the CLI and the calendar engine.

Each export_* function: loads outlines through the adapters, runs the pure
core, optionally writes the result, and returns the calendar text.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from .adapters.calendar_file import CalendarFileWriter
from .adapters.file_anniversaries import FileAnniversaryProvider
from .adapters.json_outline import JsonOutlineSource, OutlineLoadError
from .adapters.uuid_ids import UuidIdentifierProvider
from .config import Config
from .core.assembler import combine, export_document
from .ports import AnniversaryProvider, IdentifierProvider, OutlineSource

logger = logging.getLogger(__name__)


def load_restriction(path: Path | str) -> dict[str, frozenset[int]]:
    """Read an agenda restriction: {"work.org": [12, 340], ...}."""
    path = Path(path).expanduser()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return {str(name): frozenset(int(p) for p in positions) for name, positions in data.items()}
    except OSError as e:
        raise OutlineLoadError(f"Cannot read {path}: {e}") from e
    except (ValueError, TypeError, AttributeError) as e:
        raise OutlineLoadError(f"Malformed restriction in {path}: {e}") from e


def _write(config: Config, output: Path | str | None, text: str) -> None:
    if output:
        CalendarFileWriter(output, crlf=config.crlf).write(text)


def export_file(
    config: Config,
    path: Path | str,
    output: Path | str | None = None,
    source: OutlineSource | None = None,
    ids: IdentifierProvider | None = None,
    now: datetime | None = None,
) -> str:
    """Export one outline file as a standalone calendar."""
    source = source or JsonOutlineSource()
    ids = ids or UuidIdentifierProvider()
    document = source.load(Path(path))
    text = export_document(
        document,
        config.export_options(),
        ids.new_id,
        now or datetime.now(timezone.utc),
    )
    _write(config, output, text)
    return text


def export_combined(
    config: Config,
    paths: Sequence[Path | str],
    output: Path | str | None = None,
    restriction: dict[str, frozenset[int]] | None = None,
    jobs: int | None = None,
    source: OutlineSource | None = None,
    ids: IdentifierProvider | None = None,
    anniversaries: AnniversaryProvider | None = None,
    now: datetime | None = None,
) -> str:
    """Combine many outline files into one calendar."""
    source = source or JsonOutlineSource()
    ids = ids or UuidIdentifierProvider()
    anniversaries = anniversaries or FileAnniversaryProvider(config.anniversaries_file or None)

    documents = [source.load(Path(p)) for p in paths]
    logger.debug(f"Loaded {len(documents)} outline files")
    text = combine(
        documents,
        config.export_options(),
        ids.new_id,
        now or datetime.now(timezone.utc),
        restriction=restriction,
        anniversaries=anniversaries.render(),
        max_workers=jobs or config.jobs,
    )
    _write(config, output, text)
    return text
