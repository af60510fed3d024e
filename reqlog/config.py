"""Capture configuration: frozen dataclass loaded from YAML and environment variables."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

# camelCase names accepted in YAML files for parity with the capture contract
_ALIASES = {
    "queryParams": "query_params",
    "disableProto": "disable_proto",
    "maxSegmentBytes": "max_segment_bytes",
}

_BOOL_FIELDS = ("method", "body", "query_params", "headers", "ip", "disable_proto")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _parse_fields(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class CaptureConfig:
    path: str = "./request_logs"
    method: bool = True
    body: bool = True
    query_params: bool = True
    headers: bool = False
    ip: bool = False
    obfuscate: tuple[str, ...] = ("password",)
    disable_proto: bool | None = None  # None keeps whatever the store last used
    max_segment_bytes: int = 5000


def load_yaml_config(path: str | None) -> dict:
    """Load capture settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as exc:
        logger.warning("Invalid YAML in %s, using defaults: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return {_ALIASES.get(key, key): value for key, value in data.items()}


def load_config(yaml_data: dict | None = None) -> CaptureConfig:
    """Build CaptureConfig from defaults, then YAML data, then environment variables."""
    values = {
        key: value
        for key, value in (yaml_data or {}).items()
        if key in CaptureConfig.__dataclass_fields__
    }
    for attr in _BOOL_FIELDS:
        if isinstance(values.get(attr), str):
            values[attr] = _parse_bool(values[attr])
    if "obfuscate" in values:
        fields = values["obfuscate"] or ()
        if isinstance(fields, str):
            values["obfuscate"] = _parse_fields(fields)
        else:
            values["obfuscate"] = tuple(str(name) for name in fields)
    if "max_segment_bytes" in values:
        values["max_segment_bytes"] = int(values["max_segment_bytes"])

    env = os.environ
    if "REQLOG_PATH" in env:
        values["path"] = env["REQLOG_PATH"]
    for attr, var in (
        ("method", "REQLOG_CAPTURE_METHOD"),
        ("body", "REQLOG_CAPTURE_BODY"),
        ("query_params", "REQLOG_CAPTURE_QUERY"),
        ("headers", "REQLOG_CAPTURE_HEADERS"),
        ("ip", "REQLOG_CAPTURE_IP"),
        ("disable_proto", "REQLOG_DISABLE_PROTO"),
    ):
        if var in env:
            values[attr] = _parse_bool(env[var])
    if "REQLOG_OBFUSCATE" in env:
        values["obfuscate"] = _parse_fields(env["REQLOG_OBFUSCATE"])
    if "REQLOG_MAX_SEGMENT_BYTES" in env:
        values["max_segment_bytes"] = int(env["REQLOG_MAX_SEGMENT_BYTES"])

    values["path"] = os.path.abspath(values.get("path", CaptureConfig.path))
    return CaptureConfig(**values)
