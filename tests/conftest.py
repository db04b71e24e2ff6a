"""Shared test fixtures."""
from datetime import datetime, timezone
from typing import Generator

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from sleeptrack.models.sleep import SleepSample, SleepSampleRecord, SleepStage  # noqa: F401
from sleeptrack.ingest.validation import parse_duration
from sleeptrack.store.sample_store import SampleStore


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(engine) -> SampleStore:
    return SampleStore(engine, subject="default")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_sample(stage: str, start: datetime, end: datetime, duration: str) -> SleepSample:
    """Build a SleepSample the way the ingest boundary would."""
    return SleepSample(
        stage=SleepStage(stage),
        start=start,
        end=end,
        duration=duration,
        duration_seconds=parse_duration(duration),
    )
