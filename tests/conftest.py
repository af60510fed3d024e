"""Shared pytest fixtures for the request log store test suite."""

import itertools
from datetime import datetime, timezone

import pytest

from reqlog.config import CaptureConfig
from reqlog.engine import LogEngine
from reqlog.models import RequestSnapshot

FIXED_NOW = datetime(2025, 1, 15, 12, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture()
def make_config(tmp_path):
    """Factory for configs rooted in a per-test store directory."""

    def _make(**overrides) -> CaptureConfig:
        values = dict(path=str(tmp_path / "store"))
        values.update(overrides)
        return CaptureConfig(**values)

    return _make


@pytest.fixture()
def make_engine():
    """Factory for engines with a frozen clock and predictable ids ``<prefix>-0001``."""

    def _make(config: CaptureConfig, prefix: str = "entry") -> LogEngine:
        counter = itertools.count(1)
        return LogEngine(
            config,
            time_func=lambda: FIXED_NOW,
            id_factory=lambda: f"{prefix}-{next(counter):04d}",
        )

    return _make


@pytest.fixture()
def config(make_config) -> CaptureConfig:
    return make_config()


@pytest.fixture()
def engine(config, make_engine) -> LogEngine:
    return make_engine(config)


@pytest.fixture()
def sample_request() -> RequestSnapshot:
    return RequestSnapshot(
        method="POST",
        body={"user": "alice", "password": "hunter2"},
        query_params={"page": "2"},
        headers={"Content-Type": "application/json", "Content-Length": "42"},
        ip="10.0.0.7",
    )
