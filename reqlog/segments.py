"""In-memory view of the current segment with size-based rotation."""

import logging
import os
import re

from reqlog.storage import DEFAULT_SEGMENT, load_segment, serialize_document, write_document

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"\d+")


def next_segment_name(name: str) -> str | None:
    """Increment the first number embedded in ``name``. None if there is none."""
    match = _NUMBER.search(name)
    if match is None:
        return None
    number = int(match.group(0)) + 1
    return name[: match.start()] + str(number) + name[match.end():]


class SegmentStore:
    """Holds the writable segment's entries in insertion order.

    Persisting rewrites the whole segment file. Once the file as it would
    be written with the newest entry exceeds ``max_bytes``, the store moves
    on to the next numbered segment, keeping only that entry in memory.
    """

    def __init__(self, root: str, max_bytes: int):
        self._root = root
        self._max_bytes = max_bytes
        self.name = DEFAULT_SEGMENT
        self.entries: dict = {}

    @property
    def path(self) -> str:
        return os.path.join(self._root, self.name)

    def open(self, name: str) -> dict:
        """Make ``name`` current and load its entries (empty if unreadable)."""
        self.name = name
        self.entries = load_segment(self._root, name)
        return self.entries

    def append(self, entry_id: str, encoded) -> None:
        self.entries[entry_id] = encoded

    def document(self) -> dict:
        return {"logs": self.entries}

    def projected_size(self) -> int:
        """Bytes the next :meth:`persist` will write, appended entries included."""
        return len(serialize_document(self.document()))

    def compact(self) -> None:
        """Drop everything but the most recently appended entry."""
        if self.entries:
            last_id = next(reversed(self.entries))
            self.entries = {last_id: self.entries[last_id]}

    def rotate_if_needed(self) -> bool:
        """Move to the next segment when the size threshold is exceeded.

        Measured after ``append``, so the candidate entry is counted with
        the same indentation the file gets. Returns True if rotation happened.
        """
        size = self.projected_size()
        if size <= self._max_bytes:
            return False

        new_name = next_segment_name(self.name)
        if new_name is None:
            logger.error("Malformed segment name %s, skipping rotation", self.name)
            return False

        logger.info(
            "Segment %s reached %d bytes (limit %d), rotating to %s",
            self.name, size, self._max_bytes, new_name,
        )
        self.name = new_name
        self.compact()
        return True

    def persist(self) -> None:
        """Overwrite the current segment file with the in-memory entries."""
        write_document(self.path, self.document())
