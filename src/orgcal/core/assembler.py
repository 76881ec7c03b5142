"""VCALENDAR assembly for single documents and combined exports."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import PurePath
from typing import Callable, Mapping, Sequence

from .options import ExportOptions
from .outline import OutlineDocument
from .text import escape, fold
from .timestamps import local_zone_name
from .transcoder import ExportContext, transcode_document

logger = logging.getLogger(__name__)

DEFAULT_OWNER = "orgcal"


def wrap(
    name: str,
    owner: str,
    timezone: str,
    description: str,
    body: str,
    ttl: str | None = None,
) -> str:
    """Enclose component text in a VCALENDAR envelope."""
    header = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"X-WR-CALNAME:{escape(name)}",
        f"PRODID:-//{escape(owner.strip() or DEFAULT_OWNER)}//{escape(name)}//EN",
        f"X-WR-TIMEZONE:{escape(timezone)}",
        f"X-WR-CALDESC:{escape(description)}",
        "CALSCALE:GREGORIAN",
    ]
    if ttl:
        header.append(f"X-PUBLISHED-TTL:{escape(ttl)}")

    parts = [fold("\n".join(header))]
    body = body.strip("\n")
    if body:
        parts.append(body)
    parts.append("END:VCALENDAR")
    return "\n".join(parts) + "\n"


def export_document(
    document: OutlineDocument,
    options: ExportOptions,
    new_id: Callable[[], str],
    now: datetime,
) -> str:
    """Export one document as a standalone calendar."""
    ctx = ExportContext(options=options, new_id=new_id, now=now)
    body = "\n".join(transcode_document(document, ctx))
    return wrap(
        document.title or PurePath(document.name).stem,
        document.author,
        options.timezone or local_zone_name(),
        document.description,
        body,
        options.ttl,
    )


def combine(
    documents: Sequence[OutlineDocument],
    options: ExportOptions,
    new_id: Callable[[], str],
    now: datetime,
    restriction: Mapping[str, frozenset[int]] | None = None,
    anniversaries: str = "",
    max_workers: int = 1,
) -> str:
    """
    Combine many documents into a single calendar.

    ``restriction`` maps a document name to the entry positions to include;
    when given, every unlisted entry (and every entry of an unlisted
    document) is suppressed. Documents may be transcoded in parallel, output
    always follows the order of ``documents``.
    """

    def transcode(document: OutlineDocument) -> str:
        marked = None
        if restriction is not None:
            marked = frozenset(restriction.get(document.name, ()))
        ctx = ExportContext(options=options, new_id=new_id, now=now, marked=marked)
        return "\n".join(transcode_document(document, ctx))

    if max_workers > 1 and len(documents) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            texts = list(pool.map(transcode, documents))
    else:
        texts = [transcode(document) for document in documents]

    if anniversaries.strip():
        texts.append(anniversaries.strip("\n"))
    logger.info(f"Combined {len(documents)} documents")

    return wrap(
        options.combined_name,
        options.combined_owner,
        options.timezone or local_zone_name(),
        options.combined_description,
        "\n".join(text for text in texts if text),
        options.ttl,
    )
