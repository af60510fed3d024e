"""Request capture service, a small Flask app that stores every request it receives."""

import argparse
import logging
import os
import sys

from flask import Flask, jsonify

from reqlog.config import load_config, load_yaml_config
from reqlog.engine import LogEngine
from reqlog.middleware import install_capture

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [reqlog] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def create_app(engine: LogEngine) -> Flask:
    """Flask application factory."""
    app = Flask(__name__)
    install_capture(app, engine)

    @app.route("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "segment": engine.current_segment,
            "segments": engine.segments(),
        })

    @app.route("/", defaults={"path": ""}, methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    @app.route("/<path:path>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    def echo(path):
        return jsonify({"status": "captured", "path": "/" + path})

    return app


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Request capture service")
    parser.add_argument(
        "--config", default=os.environ.get("REQLOG_CONFIG"),
        help="Path to YAML config file with capture settings",
    )
    parser.add_argument("--host", default=os.environ.get("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "5000")))
    return parser


def main():
    args = build_cli_parser().parse_args()
    config = load_config(load_yaml_config(args.config))
    logger.info(
        "Config: path=%s, max_segment_bytes=%d, disable_proto=%s, obfuscate=%s",
        config.path, config.max_segment_bytes, config.disable_proto,
        ",".join(config.obfuscate) or "-",
    )

    app = create_app(LogEngine(config))
    app.run(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
