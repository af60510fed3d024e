"""Encode and decode captured entries as Protocol Buffers or plain JSON records."""

from __future__ import annotations

import base64
import binascii

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from reqlog.models import CapturedEntry

# ---------------------------------------------------------------------------
# Message schema
# ---------------------------------------------------------------------------

PROTO_PACKAGE = "reqlog"
PROTO_MESSAGE = "CapturedRequest"

# Field numbers follow tuple order and must never be reassigned.
_PROTO_FIELDS = ("method", "body", "query_params", "headers", "ip", "occurred")


class CodecError(Exception):
    """Raised when an entry cannot be encoded or a stored value decoded."""


def _build_message_class():
    """Build the ``CapturedRequest`` message class from an in-code descriptor.

    proto2 syntax is used so that optional scalars keep presence, which
    lets ``method`` and ``ip`` round-trip as ``None``.
    """
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="reqlog/captured_request.proto",
        package=PROTO_PACKAGE,
        syntax="proto2",
    )
    message = file_proto.message_type.add(name=PROTO_MESSAGE)
    for number, name in enumerate(_PROTO_FIELDS, start=1):
        message.field.add(
            name=name,
            number=number,
            type=descriptor_pb2.FieldDescriptorProto.TYPE_STRING,
            label=descriptor_pb2.FieldDescriptorProto.LABEL_OPTIONAL,
        )

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    descriptor = pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.{PROTO_MESSAGE}")
    return message_factory.GetMessageClass(descriptor)


CapturedRequest = _build_message_class()


# ---------------------------------------------------------------------------
# Protobuf encoding
# ---------------------------------------------------------------------------


def _entry_to_proto(entry: CapturedEntry):
    record = entry.to_record()
    message = CapturedRequest(
        body=record["body"],
        query_params=record["queryParams"],
        headers=record["headers"],
        occurred=record["occurred"],
    )
    if entry.method is not None:
        message.method = entry.method
    if entry.ip is not None:
        message.ip = entry.ip
    return message


def _proto_to_entry(message) -> CapturedEntry:
    record = {
        "body": message.body,
        "queryParams": message.query_params,
        "headers": message.headers,
        "occurred": message.occurred,
    }
    if message.HasField("method"):
        record["method"] = message.method
    if message.HasField("ip"):
        record["ip"] = message.ip
    return CapturedEntry.from_record(record)


def encode_binary(entry: CapturedEntry) -> str:
    """Serialize to protobuf wire bytes, returned as base64 text for JSON storage."""
    try:
        data = _entry_to_proto(entry).SerializeToString()
    except Exception as exc:
        raise CodecError(f"Protobuf serialization failed: {exc}") from exc
    return base64.b64encode(data).decode("ascii")


def decode_binary(value: str) -> CapturedEntry:
    """Inverse of :func:`encode_binary`."""
    try:
        message = CapturedRequest()
        message.ParseFromString(base64.b64decode(value, validate=True))
        return _proto_to_entry(message)
    except (binascii.Error, DecodeError, ValueError, KeyError) as exc:
        raise CodecError(f"Protobuf deserialization failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Text encoding
# ---------------------------------------------------------------------------


def encode_text(entry: CapturedEntry) -> dict:
    try:
        return entry.to_record()
    except (TypeError, ValueError) as exc:
        raise CodecError(f"JSON serialization failed: {exc}") from exc


def decode_text(record: dict) -> CapturedEntry:
    try:
        return CapturedEntry.from_record(record)
    except (KeyError, TypeError, ValueError) as exc:
        raise CodecError(f"JSON deserialization failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Mode dispatch
# ---------------------------------------------------------------------------


def encode_entry(entry: CapturedEntry, binary: bool) -> str | dict:
    return encode_binary(entry) if binary else encode_text(entry)


def decode_entry(value) -> CapturedEntry:
    """Decode a stored value, picking the encoding from its shape.

    Segments written before an encoding switch keep working this way.
    """
    if isinstance(value, str):
        return decode_binary(value)
    if isinstance(value, dict):
        return decode_text(value)
    raise CodecError(f"Unsupported stored value of type {type(value).__name__}")
