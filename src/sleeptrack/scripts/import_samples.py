"""
Import script: load a JSON array of sleep-stage samples into the store.

Usage:
    python -m sleeptrack import samples.json --subject default
    python -m sleeptrack.scripts.import_samples samples.json   (direct invocation)

Each element uses the same shape as POST /api/samples. Invalid elements are
logged and skipped; valid ones are upserted, so re-importing the same export
is harmless.
"""
import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from sleeptrack.ingest.validation import SampleValidationError, validate_sample

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0


def import_samples(store, payloads: List[Any]) -> ImportResult:
    """Validate and upsert each payload. StorageError propagates."""
    result = ImportResult()
    for index, payload in enumerate(payloads):
        try:
            sample = validate_sample(payload)
        except SampleValidationError as exc:
            logger.warning("Skipping sample #%d: %s", index, exc)
            result.skipped += 1
            continue
        store.put(sample)
        result.imported += 1
    return result


def load_payloads(path: Path) -> List[Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of samples")
    return data


def run_import(path: Path, subject: Optional[str] = None) -> ImportResult:
    from sleeptrack.config import get_settings
    from sleeptrack.db.engine import get_engine
    from sleeptrack.store.sample_store import SampleStore

    store = SampleStore(get_engine(), subject=subject or get_settings().subject)
    result = import_samples(store, load_payloads(path))
    logger.info(
        "Import complete. Imported: %d, Skipped (invalid): %d",
        result.imported,
        result.skipped,
    )
    return result


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Import sleep-stage samples")
    parser.add_argument("file", type=Path, help="JSON file holding an array of samples")
    parser.add_argument(
        "--subject",
        default=None,
        help="Subject to import into (default: SUBJECT setting)",
    )
    args = parser.parse_args(argv)
    run_import(args.file, args.subject)


if __name__ == "__main__":
    main()
