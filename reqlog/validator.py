"""Validate parsed store documents before they are trusted."""

from __future__ import annotations


class ValidationError(Exception):
    """Raised when a store document lacks a required top-level field."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Missing required field: '{field}'")


def _require(document, field: str, expected: type) -> None:
    if not isinstance(document, dict):
        raise ValidationError(
            field, f"Expected a JSON object, got {type(document).__name__}"
        )
    if field not in document:
        raise ValidationError(field)
    if not isinstance(document[field], expected):
        raise ValidationError(
            field,
            f"'{field}' must be of type {expected.__name__}, "
            f"got {type(document[field]).__name__}",
        )


def validate_index_document(document) -> dict:
    """Check ``{"indexes": {id: locator}}`` and return it unchanged."""
    _require(document, "indexes", dict)
    for entry_id, locator in document["indexes"].items():
        if not isinstance(locator, str):
            raise ValidationError(
                "indexes", f"locator for '{entry_id}' must be a string"
            )
    return document


def validate_config_document(document) -> dict:
    """Check ``{"disableProto": bool}`` and return it unchanged."""
    _require(document, "disableProto", bool)
    return document


def validate_segment_document(document) -> dict:
    """Check ``{"logs": {id: encoded}}`` and return it unchanged."""
    _require(document, "logs", dict)
    return document
