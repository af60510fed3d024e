"""Log engine: captures requests into numbered segments and reads them back."""

import logging
import os
import threading
import uuid
from datetime import datetime, timezone

from reqlog.codec import CodecError, decode_entry, encode_entry
from reqlog.config import CaptureConfig
from reqlog.models import CapturedEntry, normalize_request
from reqlog.redactor import redact
from reqlog.segments import SegmentStore
from reqlog.storage import (
    CONFIG_FILE,
    INDEX_FILE,
    ConfigSnapshot,
    bootstrap,
    ensure_directory,
    latest_segment,
    list_segments,
    load_config_snapshot,
    load_index,
    segment_number,
    write_document,
)

logger = logging.getLogger(__name__)


class LogEngine:
    """Single-writer capture/retrieve engine over one store directory.

    Every call re-reads the index and config snapshot from disk, so several
    engines (or restarts) pointed at the same directory see each other's
    writes. Calls on one engine are serialized by a lock.
    """

    def __init__(self, config: CaptureConfig, time_func=None, id_factory=None):
        self._config = config
        self._root = config.path
        self._time_func = time_func or (lambda: datetime.now(timezone.utc))
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._lock = threading.Lock()
        self._segments = SegmentStore(self._root, config.max_segment_bytes)
        self._index: dict[str, str] = {}
        self._snapshot = ConfigSnapshot()

    @property
    def config(self) -> CaptureConfig:
        return self._config

    @property
    def current_segment(self) -> str:
        return self._segments.name

    # --- Write path -------------------------------------------------------
    def capture(self, request) -> str:
        """Persist one request. Returns the id it was stored under.

        Raises CannotCreateFile if the store files cannot be created.
        Failures while saving are logged and otherwise ignored.
        """
        with self._lock:
            name = self._prepare()
            self._segments.open(name)
            self._index = load_index(self._root)
            self._snapshot = load_config_snapshot(self._root)
            if self._config.disable_proto is not None:
                self._snapshot.disable_proto = self._config.disable_proto

            entry = normalize_request(request, self._config, self._time_func())
            redact(entry, self._config.obfuscate)

            entry_id = self._id_factory()
            encoded = encode_entry(entry, binary=not self._snapshot.disable_proto)
            self._segments.append(entry_id, encoded)
            self._segments.rotate_if_needed()
            self._index[entry_id] = self._segments.name

            self._save()
            logger.debug("Captured %s into %s", entry_id, self._segments.name)
            return entry_id

    def _save(self) -> None:
        try:
            self._segments.persist()
            write_document(os.path.join(self._root, INDEX_FILE), {"indexes": self._index})
            write_document(
                os.path.join(self._root, CONFIG_FILE), self._snapshot.to_document()
            )
        except OSError as exc:
            logger.error("Failed to save store files under %s: %s", self._root, exc)

    # --- Read path --------------------------------------------------------
    def retrieve_raw(self, segment_name: str | None = None) -> dict:
        """Stored (still encoded) entries of a segment, latest segment by default.

        Names other than ``logs_<n>.json`` are refused so lookups cannot
        create files outside the store directory.
        """
        if segment_name and segment_number(segment_name) is None:
            logger.warning("Ignoring invalid segment name %r", segment_name)
            return {}
        with self._lock:
            name = self._prepare(segment_name)
            return dict(self._segments.open(name))

    def retrieve(self, segment_name: str | None = None) -> dict[str, CapturedEntry]:
        """Decoded entries of a segment. Undecodable entries are skipped."""
        raw = self.retrieve_raw(segment_name)
        entries = {}
        for entry_id, value in raw.items():
            try:
                entries[entry_id] = decode_entry(value)
            except CodecError as exc:
                logger.warning("Skipping entry %s: %s", entry_id, exc)
        return entries

    def find(self, entry_id: str) -> CapturedEntry | None:
        """Look an entry up through the index."""
        with self._lock:
            ensure_directory(self._root)
            locator = load_index(self._root).get(entry_id)
        if locator is None:
            return None
        if locator not in self.segments():
            logger.warning("Index points %s at missing segment %s", entry_id, locator)
            return None
        return self.retrieve(locator).get(entry_id)

    def segments(self) -> list[str]:
        return list_segments(self._root)

    def _prepare(self, segment_name: str | None = None) -> str:
        """Bootstrap the store and resolve which segment to use."""
        ensure_directory(self._root)
        if segment_name:
            name = segment_name
        else:
            name = latest_segment(self._root)
        bootstrap(self._root, name)
        return name
