"""Inspector logic: list, decode, and search stored segments."""

import os
from dataclasses import asdict

from reqlog.engine import LogEngine
from reqlog.storage import list_segments


def list_segment_files(root: str) -> list[tuple[str, int]]:
    """Return (segment filename, size in bytes) ordered by segment number."""
    return [(name, os.path.getsize(os.path.join(root, name))) for name in list_segments(root)]


def decode_segment(engine: LogEngine, name: str | None = None) -> dict[str, dict]:
    """Decoded entries of a segment as plain dicts, ready for json.dumps."""
    return {entry_id: asdict(entry) for entry_id, entry in engine.retrieve(name).items()}


def search_entries(engine: LogEngine, text: str) -> list[tuple[str, str, dict]]:
    """Search every segment for entries whose stored record contains ``text``.

    Returns (segment, entry id, entry dict) tuples in segment order.
    """
    results = []
    for segment in engine.segments():
        for entry_id, entry in engine.retrieve(segment).items():
            haystack = " ".join(str(value) for value in entry.to_record().values())
            if text in haystack:
                results.append((segment, entry_id, asdict(entry)))
    return results
