"""Tests for reqlog.validator."""

import pytest

from reqlog.validator import (
    ValidationError,
    validate_config_document,
    validate_index_document,
    validate_segment_document,
)


class TestValidIndex:
    def test_valid_documents_returned_unchanged(self):
        doc = {"indexes": {"a": "logs_0.json"}}
        assert validate_index_document(doc) is doc
        assert validate_config_document({"disableProto": True}) == {"disableProto": True}
        assert validate_segment_document({"logs": {}}) == {"logs": {}}


class TestMissingFields:
    @pytest.mark.parametrize(
        "validate, field",
        [
            (validate_index_document, "indexes"),
            (validate_config_document, "disableProto"),
            (validate_segment_document, "logs"),
        ],
    )
    def test_missing_field_named(self, validate, field):
        with pytest.raises(ValidationError) as exc_info:
            validate({"something": "else"})
        assert exc_info.value.field == field
        assert f"'{field}'" in str(exc_info.value)

    def test_non_object_document(self):
        with pytest.raises(ValidationError, match="Expected a JSON object"):
            validate_segment_document(["logs"])


class TestWrongTypes:
    def test_logs_must_be_object(self):
        with pytest.raises(ValidationError, match="must be of type dict"):
            validate_segment_document({"logs": []})

    def test_disable_proto_must_be_bool(self):
        with pytest.raises(ValidationError):
            validate_config_document({"disableProto": "yes"})

    def test_locator_must_be_string(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_index_document({"indexes": {"a": 1}})
        assert exc_info.value.field == "indexes"
