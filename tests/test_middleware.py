"""Tests for the Flask capture hook and the demo service."""

import logging

import pytest
from flask import Flask

from main import create_app
from reqlog.middleware import install_capture, snapshot_from_flask


@pytest.fixture()
def app(engine):
    application = create_app(engine)
    application.config["TESTING"] = True
    return application


@pytest.fixture()
def client(app):
    return app.test_client()


class TestSnapshotFromFlask:
    def test_json_request(self):
        app = Flask(__name__)
        with app.test_request_context(
            "/items?page=3", method="PUT", json={"name": "widget"},
            environ_base={"REMOTE_ADDR": "192.168.1.9"},
        ):
            from flask import request

            snapshot = snapshot_from_flask(request)
        assert snapshot.method == "PUT"
        assert snapshot.body == {"name": "widget"}
        assert snapshot.query_params == {"page": "3"}
        assert snapshot.ip == "192.168.1.9"
        assert snapshot.headers["Content-Type"] == "application/json"

    def test_form_request(self):
        app = Flask(__name__)
        with app.test_request_context("/login", method="POST", data={"user": "bob"}):
            from flask import request

            snapshot = snapshot_from_flask(request)
        assert snapshot.body == {"user": "bob"}

    def test_no_body(self):
        app = Flask(__name__)
        with app.test_request_context("/"):
            from flask import request

            snapshot = snapshot_from_flask(request)
        assert snapshot.body == {}


class TestCaptureHook:
    def test_every_request_captured(self, client, engine):
        client.get("/health")
        client.post("/api/things", json={"a": 1})
        assert len(engine.retrieve()) == 2

    def test_captured_fields(self, client, engine):
        resp = client.post("/login?next=/home", json={"user": "u", "password": "secret"})
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "captured", "path": "/login"}

        (entry,) = engine.retrieve().values()
        assert entry.method == "POST"
        assert entry.body == {"user": "u", "password": "***"}
        assert entry.query_params == {"next": "/home"}
        assert entry.headers == {}
        assert entry.ip is None

    def test_headers_without_size_header(self, make_config, make_engine):
        engine = make_engine(make_config(headers=True, ip=True))
        app = Flask(__name__)
        install_capture(app, engine)
        app.add_url_rule("/", "root", lambda: "ok", methods=["POST"])

        app.test_client().post("/", json={"k": "v"}, headers={"X-Request-Id": "abc"})

        (entry,) = engine.retrieve().values()
        assert entry.headers["X-Request-Id"] == "abc"
        assert not any(name.lower() == "content-length" for name in entry.headers)
        assert entry.ip == "127.0.0.1"

    def test_capture_failure_does_not_break_request(
        self, tmp_path, make_config, make_engine, caplog
    ):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        engine = make_engine(make_config(path=str(blocker / "store")))
        client = create_app(engine).test_client()

        with caplog.at_level(logging.ERROR):
            resp = client.get("/anything")

        assert resp.status_code == 200
        assert "Failed to capture GET /anything" in caplog.text

    def test_engine_registered_on_app(self, app, engine):
        assert app.extensions["reqlog"] is engine


class TestHealth:
    def test_health_reports_segments(self, client):
        client.get("/warmup")
        data = client.get("/health").get_json()
        assert data["status"] == "healthy"
        assert data["segment"] == "logs_0.json"
        assert data["segments"] == ["logs_0.json"]
