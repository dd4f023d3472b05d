"""Shared reader for the content JSON files."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from vanguard.engine.logger import ChannelLogger


def read_entries(
    path: Path,
    key: Optional[str] = None,
    logger: Optional[ChannelLogger] = None,
) -> List[Dict]:
    """Return the object entries of one content file.

    A file holds a list of objects, a single object, or (with ``key``) an
    object wrapping the list under that key. Anything else is skipped with a
    warning, as are non-object list items.
    """

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError:
        if logger:
            logger.warning("Skipping undecodable file %s", path.name)
        return []
    if isinstance(data, dict):
        data = data.get(key, data) if key else data
        if isinstance(data, dict):
            data = [data]
    if not isinstance(data, list):
        if logger:
            logger.warning("Skipping %s: expected a list of objects, got %s", path.name, type(data).__name__)
        return []
    entries = [entry for entry in data if isinstance(entry, dict)]
    if len(entries) != len(data) and logger:
        logger.warning("Skipping %d non-object entries in %s", len(data) - len(entries), path.name)
    return entries


def iter_content(
    directory: Path,
    key: Optional[str] = None,
    logger: Optional[ChannelLogger] = None,
) -> Iterator[Tuple[Path, Dict]]:
    """Yield ``(path, entry)`` for every object in ``directory/*.json``."""

    if not directory.exists():
        return
    for path in sorted(directory.glob("*.json")):
        for entry in read_entries(path, key, logger):
            yield path, entry


__all__ = ["read_entries", "iter_content"]
