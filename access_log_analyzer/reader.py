"""Input source expansion, validation and generator-based line reading."""

import glob
import os
from typing import Generator, Iterable

from access_log_analyzer.errors import SourceError


def expand_paths(raw_paths: Iterable[str]) -> list[str]:
    """Split comma-separated entries, expand globs and deduplicate.

    Paths are not checked for existence here; a glob that matches nothing
    is kept verbatim so the pipeline reports it as a missing source.
    """
    expanded = []
    seen = set()

    for raw in raw_paths:
        for item in raw.split(","):
            item = item.strip()
            if not item:
                continue
            if any(c in item for c in ("*", "?", "[")):
                matches = sorted(glob.glob(item)) or [item]
            else:
                matches = [item]
            for m in matches:
                if m not in seen:
                    seen.add(m)
                    expanded.append(m)

    return expanded


def check_source(path: str):
    """Raise SourceError if path is not a readable, non-empty file."""
    if not os.path.isfile(path):
        raise SourceError(path, "does not exist")
    if os.path.getsize(path) == 0:
        raise SourceError(path, "is empty")
    if not os.access(path, os.R_OK):
        raise SourceError(path, "is not readable")


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each line of a single file. Undecodable bytes become U+FFFD."""
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        yield from f
