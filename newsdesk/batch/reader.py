"""Batch topic files: one ``topic,days,max_items`` record per line."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchEntry:
    topic: str
    days: int
    max_items: int


def parse_line(line: str) -> BatchEntry | None:
    """Parse one record, returning None for blank or malformed lines."""
    line = line.strip()
    if not line:
        return None

    parts = [part.strip() for part in line.split(",")]
    if len(parts) != 3:
        logger.warning("Skipping invalid line in input file: %s", line)
        return None

    topic, days, max_items = parts
    try:
        return BatchEntry(topic=topic, days=int(days), max_items=int(max_items))
    except ValueError:
        logger.warning("Skipping line with non-numeric scope: %s", line)
        return None


def read_batch_file(path: Path) -> list[BatchEntry]:
    """Read all valid records of ``path`` in file order."""
    with path.open(encoding="utf-8") as handle:
        entries = [entry for entry in map(parse_line, handle) if entry is not None]
    logger.debug("Read %d entries from %s", len(entries), path)
    return entries
