"""Flask integration: capture every inbound request before it is handled."""

import logging

from flask import Flask, request

from reqlog.engine import LogEngine
from reqlog.models import RequestSnapshot

logger = logging.getLogger(__name__)


def snapshot_from_flask(req) -> RequestSnapshot:
    """Copy the parts of a Flask request the store cares about."""
    body = req.get_json(silent=True)
    if body is None:
        body = req.form.to_dict()
    return RequestSnapshot(
        method=req.method,
        body=body,
        query_params=req.args.to_dict(),
        headers=dict(req.headers),
        ip=req.remote_addr,
    )


def install_capture(app: Flask, engine: LogEngine) -> None:
    """Register a before_request hook that stores each request via ``engine``.

    Capture problems never fail the request being served.
    """

    @app.before_request
    def _capture_request():
        try:
            engine.capture(snapshot_from_flask(request))
        except Exception:
            logger.exception("Failed to capture %s %s", request.method, request.path)

    app.extensions["reqlog"] = engine
