"""Store directory bootstrap, document I/O, and recovering loaders."""

import json
import logging
import os
import re
from dataclasses import dataclass

from reqlog.validator import (
    ValidationError,
    validate_config_document,
    validate_index_document,
    validate_segment_document,
)

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"
CONFIG_FILE = "config.json"
DEFAULT_SEGMENT = "logs_0.json"
SEGMENT_PATTERN = re.compile(r"^logs_(\d+)\.json$")

EMPTY_INDEX = {"indexes": {}}
EMPTY_SEGMENT = {"logs": {}}


class CannotCreateFile(Exception):
    """Raised when a required store file cannot be created."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Cannot create {filename} file")


@dataclass
class ConfigSnapshot:
    """Encoding mode last used by the store."""

    disable_proto: bool = False

    def to_document(self) -> dict:
        return {"disableProto": self.disable_proto}

    @classmethod
    def from_document(cls, document: dict) -> "ConfigSnapshot":
        return cls(disable_proto=document["disableProto"])


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------


def ensure_directory(root: str) -> None:
    """Create the store root. Failures are logged; later file operations surface them."""
    if os.path.isdir(root):
        return
    logger.debug("Store path %s does not exist, creating it", root)
    try:
        os.makedirs(root, exist_ok=True)
    except OSError as exc:
        logger.error("Error while creating store directory %s: %s", root, exc)


def ensure_file(root: str, name: str, default: dict) -> str:
    """Create ``name`` holding ``default`` if missing. Returns its path."""
    path = os.path.join(root, name)
    try:
        if not os.path.exists(path):
            write_document(path, default)
    except OSError as exc:
        logger.error("Cannot create %s file: %s", name, exc)
        raise CannotCreateFile(name) from exc
    return path


def bootstrap(root: str, segment_name: str) -> None:
    """Guarantee the directory, index, segment and config snapshot exist."""
    ensure_directory(root)
    ensure_file(root, INDEX_FILE, EMPTY_INDEX)
    ensure_file(root, segment_name, EMPTY_SEGMENT)
    ensure_file(root, CONFIG_FILE, ConfigSnapshot().to_document())


# ---------------------------------------------------------------------------
# Document I/O
# ---------------------------------------------------------------------------


def read_document(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_document(path: str, document) -> None:
    """Serialize ``document`` over ``path``, replacing the whole file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2)


def serialize_document(document) -> bytes:
    """Bytes exactly as :func:`write_document` would write them."""
    return json.dumps(document, indent=2).encode("utf-8")


# ---------------------------------------------------------------------------
# Loaders (never raise on bad content)
# ---------------------------------------------------------------------------


def _load(path: str, validate, what: str):
    try:
        return validate(read_document(path))
    except ValidationError as exc:
        logger.warning(
            "%s at %s is malformed (field '%s'): %s. Will replace it on next save",
            what, path, exc.field, exc,
        )
    except (OSError, ValueError) as exc:
        logger.warning("Got error while parsing %s at %s: %s", what, path, exc)
    return None


def load_index(root: str) -> dict[str, str]:
    document = _load(os.path.join(root, INDEX_FILE), validate_index_document, "index")
    return dict(document["indexes"]) if document is not None else {}


def load_config_snapshot(root: str) -> ConfigSnapshot:
    document = _load(
        os.path.join(root, CONFIG_FILE), validate_config_document, "config snapshot"
    )
    return ConfigSnapshot.from_document(document) if document is not None else ConfigSnapshot()


def load_segment(root: str, name: str) -> dict:
    document = _load(os.path.join(root, name), validate_segment_document, "segment")
    return dict(document["logs"]) if document is not None else {}


# ---------------------------------------------------------------------------
# Segment discovery
# ---------------------------------------------------------------------------


def segment_number(name: str) -> int | None:
    match = SEGMENT_PATTERN.match(name)
    return int(match.group(1)) if match else None


def list_segments(root: str) -> list[str]:
    """Segment filenames under ``root`` ordered by numeric suffix."""
    try:
        names = os.listdir(root)
    except OSError:
        return []
    segments = [name for name in names if segment_number(name) is not None]
    segments.sort(key=segment_number)
    return segments


def latest_segment(root: str, default: str = DEFAULT_SEGMENT) -> str:
    segments = list_segments(root)
    return segments[-1] if segments else default
