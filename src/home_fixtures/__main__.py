from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dateutil import parser as date_parser

from .config import AppConfig, ConfigError, configure_logging, load_settings
from .dates import upcoming_weekend
from .extraction import extract_with_timeout
from .fetcher import FetchError, fetch_schedule

LOGGER = logging.getLogger("home_fixtures")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="home-fixtures",
        description="Find a club team's home games for the upcoming weekend.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: $HOME_FIXTURES_CONFIG).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (DEBUG, INFO, ...).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Print the weekend's home games as JSON.")
    source = extract.add_mutually_exclusive_group(required=True)
    source.add_argument("--event", help="Event identifier on the schedule site.")
    source.add_argument(
        "--html-file",
        type=Path,
        help="Parse a saved schedule page instead of downloading it.",
    )
    extract.add_argument("--club", help="Club identifier within the event (with --event).")
    extract.add_argument("--team", help="Tracked team name (default from configuration).")
    extract.add_argument(
        "--reference-date",
        help="ISO date used instead of today to pick the weekend, e.g. 2025-08-28.",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0).")
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: $PORT or 8080).",
    )
    return parser


def _reference_time(value: Optional[str], config: AppConfig) -> datetime:
    if not value:
        return datetime.now(tz=config.tz)
    parsed = date_parser.isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=config.tz)
    return parsed


def _run_extract(args: argparse.Namespace, config: AppConfig) -> int:
    if args.team:
        config = replace(config, tracked_team=args.team)
    try:
        reference = _reference_time(args.reference_date, config)
    except ValueError:
        print(f"Invalid --reference-date: {args.reference_date!r}", file=sys.stderr)
        return 2
    weekend = upcoming_weekend(reference, config.tz)

    if args.html_file:
        html = args.html_file.read_text(encoding="utf-8", errors="replace")
    else:
        if not args.club:
            print("--club is required together with --event.", file=sys.stderr)
            return 2
        try:
            html = fetch_schedule(args.event, args.club, config).html
        except FetchError as exc:
            print(f"Schedule could not be downloaded ({exc.url}): {exc}", file=sys.stderr)
            return 2

    games = extract_with_timeout(html, weekend, config)
    payload: List[dict] = [game.to_dict() for game in games]
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def _run_serve(args: argparse.Namespace, config: AppConfig) -> int:
    import uvicorn

    from .api import create_app

    port = args.port or config.port
    LOGGER.info("Serving home games for %s on %s:%s", config.tracked_team, args.host, port)
    uvicorn.run(create_app(config), host=args.host, port=port, log_level=config.log_level.lower())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_settings(path=args.config)
        if args.log_level:
            config = replace(config, log_level=args.log_level.upper())
    except (ConfigError, OSError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    configure_logging(config.log_level)

    if args.command == "extract":
        return _run_extract(args, config)
    return _run_serve(args, config)


if __name__ == "__main__":
    raise SystemExit(main())
