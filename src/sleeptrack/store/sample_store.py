"""
SampleStore: durable, start-ordered storage of sleep samples for one subject.

Each subject's rows are written and read by exactly one store operation at a
time. Serialization is a per-subject lock from a process-wide registry, so
stores for different subjects never contend with each other.

Idempotency: rows are keyed by (subject, start_utc). Writing a sample whose
start already exists replaces that row in place, inside one transaction.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from sleeptrack.ingest.validation import SampleValidationError
from sleeptrack.models.sleep import SleepSample, SleepSampleRecord

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when the underlying database rejects a read or write."""


_registry_lock = threading.Lock()
_subject_locks: Dict[str, threading.Lock] = {}


def _lock_for(subject: str) -> threading.Lock:
    with _registry_lock:
        lock = _subject_locks.get(subject)
        if lock is None:
            lock = _subject_locks[subject] = threading.Lock()
        return lock


def to_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to UTC at millisecond precision (the storage key)."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise SampleValidationError(f"Timestamp must carry a UTC offset: {value.isoformat()}")
    utc = value.astimezone(timezone.utc)
    return utc.replace(microsecond=utc.microsecond // 1000 * 1000)


def as_utc(value: datetime) -> datetime:
    """Aware UTC from a stored timestamp; SQLite returns them naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SampleStore:
    """Sleep samples for a single subject."""

    def __init__(self, engine, subject: str = "default"):
        """
        Args:
            engine: SQLAlchemy engine (SQLModel create_engine result).
            subject: Whose samples this store owns.
        """
        self.engine = engine
        self.subject = subject
        self._lock = _lock_for(subject)

    def put(self, sample: SleepSample) -> None:
        """
        Insert the sample, or replace the stored one with the same start.

        Raises:
            SampleValidationError: if start/end are naive datetimes.
            StorageError: if the write fails (nothing is committed).
        """
        start_utc = to_utc(sample.start)
        end_utc = to_utc(sample.end)

        with self._lock:
            try:
                with Session(self.engine) as s:
                    existing = s.get(
                        SleepSampleRecord, {"subject": self.subject, "start_utc": start_utc}
                    )
                    replaced = existing is not None
                    if replaced:
                        existing.end_utc = end_utc
                        existing.stage = sample.stage
                        existing.duration = sample.duration
                        existing.duration_seconds = sample.duration_seconds
                        s.add(existing)
                    else:
                        s.add(SleepSampleRecord(
                            subject=self.subject,
                            start_utc=start_utc,
                            end_utc=end_utc,
                            stage=sample.stage,
                            duration=sample.duration,
                            duration_seconds=sample.duration_seconds,
                        ))
                    s.commit()
            except SQLAlchemyError as exc:
                logger.error("Failed to store sample %s for %s: %s", start_utc, self.subject, exc)
                raise StorageError(f"Could not store sample starting {start_utc}") from exc

        logger.debug(
            "%s sample %s (%s) for %s",
            "Replaced" if replaced else "Inserted",
            start_utc.isoformat(),
            sample.stage.value,
            self.subject,
        )

    def samples_after(self, cutoff: datetime) -> List[SleepSample]:
        """
        Return samples with start strictly after cutoff, ascending by start.

        Each call is a fresh read; an empty list is a normal result.

        Raises:
            StorageError: if the read fails.
        """
        cutoff_utc = to_utc(cutoff)
        with self._lock:
            try:
                with Session(self.engine) as s:
                    rows = s.exec(
                        select(SleepSampleRecord)
                        .where(SleepSampleRecord.subject == self.subject)
                        .where(SleepSampleRecord.start_utc > cutoff_utc)
                        .order_by(SleepSampleRecord.start_utc)
                    ).all()
                    return [_to_sample(row) for row in rows]
            except SQLAlchemyError as exc:
                logger.error("Failed to read samples for %s: %s", self.subject, exc)
                raise StorageError(f"Could not read samples after {cutoff_utc}") from exc


def _to_sample(row: SleepSampleRecord) -> SleepSample:
    return SleepSample(
        stage=row.stage,
        start=as_utc(row.start_utc),
        end=as_utc(row.end_utc),
        duration=row.duration,
        duration_seconds=row.duration_seconds,
    )
