"""CLI store inspector: list, decode, look up, and search captured requests."""

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, replace

from reqlog.config import load_config, load_yaml_config
from reqlog.engine import LogEngine
from reqlog.inspector import decode_segment, list_segment_files, search_entries
from reqlog.storage import CannotCreateFile

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [reqlog] %(levelname)s %(message)s",
    stream=sys.stderr,
)


def _human_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect captured request segments")
    parser.add_argument("--path", default=None,
                        help="Store directory (default: REQLOG_PATH or ./request_logs)")
    parser.add_argument("--config", default=os.environ.get("REQLOG_CONFIG"),
                        help="Path to YAML config file")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="List all segments")
    group.add_argument("--decode", nargs="?", const="", metavar="SEGMENT",
                       help="Decode a segment (latest if omitted)")
    group.add_argument("--entry", metavar="ID", help="Show a single entry by id")
    group.add_argument("--search", metavar="TEXT", help="Search text across all segments")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(load_yaml_config(args.config))
    if args.path:
        # --path beats REQLOG_PATH
        config = replace(config, path=os.path.abspath(args.path))
    engine = LogEngine(config)

    try:
        if args.list:
            files = list_segment_files(config.path) if os.path.isdir(config.path) else []
            if not files:
                print("No segments found.")
                return 0
            for name, size in files:
                print(f"  {name}  ({_human_size(size)})")

        elif args.decode is not None:
            entries = decode_segment(engine, args.decode or None)
            print(json.dumps(entries, indent=2))

        elif args.entry:
            entry = engine.find(args.entry)
            if entry is None:
                print(f"Error: entry {args.entry} not found", file=sys.stderr)
                return 1
            print(json.dumps(asdict(entry), indent=2))

        elif args.search:
            results = search_entries(engine, args.search)
            if not results:
                print(f"No matches found for '{args.search}'.")
                return 0
            for segment, entry_id, entry in results:
                print(f"  [{segment}:{entry_id}] {json.dumps(entry)}")
    except CannotCreateFile as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
