"""
Command-line entrypoint.

Usage:
    python -m sleeptrack serve                 # starts the API under uvicorn
    python -m sleeptrack import samples.json   # bulk upsert from a JSON export
    python -m sleeptrack summary               # print last night's summary
    python -m sleeptrack expiry                # print seconds until the cache expires
"""
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def _parse_now(value: Optional[str]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    from sleeptrack.ingest.validation import parse_instant
    return parse_instant(value)


def _run_serve(host: str, port: int) -> None:
    import uvicorn
    uvicorn.run("sleeptrack.api.main:app", host=host, port=port)


def _run_summary(now: datetime) -> int:
    from sleeptrack.analysis.nightly import summarize_last_night
    from sleeptrack.config import get_settings
    from sleeptrack.db.engine import get_store

    settings = get_settings()
    summary = summarize_last_night(
        get_store(),
        now,
        cutoff_utc_hour=settings.window_cutoff_utc_hour,
        interruption_threshold_minutes=settings.interruption_threshold_minutes,
    )
    if summary is None:
        logger.info("No sleep tracked since %s", now.isoformat())
        return 1
    print(json.dumps(summary.to_dict(), indent=2))
    return 0


def _run_expiry(now: datetime) -> int:
    from sleeptrack.analysis.expiry import seconds_until_expiry
    from sleeptrack.config import get_settings

    settings = get_settings()
    print(seconds_until_expiry(
        now,
        tz_name=settings.local_timezone,
        hour=settings.cache_expiry_hour,
        minute=settings.cache_expiry_minute,
    ))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sleeptrack")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    imp = sub.add_parser("import", help="Import samples from a JSON file")
    imp.add_argument("file", type=Path)
    imp.add_argument("--subject", default=None)

    for name, help_text in (
        ("summary", "Print last night's summary"),
        ("expiry", "Print seconds until the cached summary expires"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--now", default=None, help="ISO 8601 instant to use instead of the clock")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        _run_serve(args.host, args.port)
        return 0
    if args.command == "import":
        from sleeptrack.scripts.import_samples import run_import
        run_import(args.file, args.subject)
        return 0
    if args.command == "summary":
        return _run_summary(_parse_now(args.now))
    return _run_expiry(_parse_now(args.now))


if __name__ == "__main__":
    sys.exit(main())
