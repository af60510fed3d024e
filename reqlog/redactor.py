"""Strip sensitive body fields from a captured entry before it is persisted."""

from collections.abc import Iterable

from reqlog.models import CapturedEntry

REDACTION_MARKER = "***"
TIMESTAMP_FIELD = "occurred"


def redact(entry: CapturedEntry, fields: Iterable[str]) -> CapturedEntry:
    """Replace every configured, truthy body field with the redaction marker.

    The timestamp field is never touched. Mutates and returns ``entry``.
    """
    for name in fields:
        if name == TIMESTAMP_FIELD:
            continue
        if entry.body.get(name):
            entry.body[name] = REDACTION_MARKER
    return entry
