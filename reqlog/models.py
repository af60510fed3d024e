"""Captured request model and normalization of inbound requests."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from reqlog.config import CaptureConfig

# Added by the transport, never part of what the client meant to send.
SIZE_HEADER = "content-length"


@dataclass
class RequestSnapshot:
    """Framework-neutral view of an inbound request."""

    method: str | None = None
    body: Any = None
    query_params: Mapping | None = None
    headers: Mapping | None = None
    ip: str | None = None


@dataclass
class CapturedEntry:
    """One normalized request as persisted, before encoding."""

    body: dict = field(default_factory=dict)
    query_params: dict = field(default_factory=dict)
    headers: dict = field(default_factory=dict)
    occurred: str = ""  # ISO 8601, never redacted
    method: str | None = None
    ip: str | None = None

    def to_record(self) -> dict:
        """Plain record as stored in text-mode segments."""
        record = {}
        if self.method is not None:
            record["method"] = self.method
        record["body"] = json.dumps(self.body, default=str)
        record["queryParams"] = json.dumps(self.query_params, default=str)
        record["headers"] = json.dumps(self.headers, default=str)
        if self.ip is not None:
            record["ip"] = self.ip
        record["occurred"] = self.occurred
        return record

    @classmethod
    def from_record(cls, record: dict) -> "CapturedEntry":
        return cls(
            method=record.get("method"),
            body=json.loads(record.get("body") or "{}"),
            query_params=json.loads(record.get("queryParams") or "{}"),
            headers=json.loads(record.get("headers") or "{}"),
            ip=record.get("ip"),
            occurred=record["occurred"],
        )


def format_timestamp(now: datetime) -> str:
    """ISO 8601 with millisecond precision and a Z suffix."""
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def normalize_request(request, config: CaptureConfig, now: datetime) -> CapturedEntry:
    """Build a CapturedEntry from any object exposing the RequestSnapshot attributes.

    Fields disabled in ``config`` are left empty. The transport size header
    is dropped from captured headers.
    """
    body = getattr(request, "body", None)
    query = getattr(request, "query_params", None) or {}
    headers = {
        name: value
        for name, value in (getattr(request, "headers", None) or {}).items()
        if name.lower() != SIZE_HEADER
    }

    return CapturedEntry(
        method=getattr(request, "method", None) if config.method else None,
        body=dict(body) if config.body and isinstance(body, Mapping) else {},
        query_params=dict(query) if config.query_params else {},
        headers=headers if config.headers else {},
        ip=getattr(request, "ip", None) if config.ip else None,
        occurred=format_timestamp(now),
    )
