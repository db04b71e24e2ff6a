"""Sleep models: the stored sample row and its in-memory counterpart."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class SleepStage(str, Enum):
    AWAKE = "awake"
    CORE = "core"
    REM = "rem"
    DEEP = "deep"


class SleepSampleRecord(SQLModel, table=True):
    """Persisted sleep-stage interval.

    Primary key is (subject, start_utc), which doubles as the ordered index
    for windowed range scans. Timestamps are written as aware UTC; backends
    without timezone support (SQLite) hand them back naive, still in UTC.
    """

    subject: str = Field(default="default", primary_key=True)
    start_utc: datetime = Field(sa_column=Column(DateTime(timezone=True), primary_key=True))
    end_utc: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    stage: SleepStage

    duration: str  # raw "SS" | "MM:SS" | "HH:MM:SS" as received
    duration_seconds: int  # parsed from duration, never derived from end - start


@dataclass
class SleepSample:
    """
    One contiguous interval of a single sleep stage.

    start/end are timezone-aware. duration_seconds is supplied independently
    of start/end and is the only length the aggregator trusts.
    """

    stage: SleepStage
    start: datetime
    end: datetime
    duration: str
    duration_seconds: int
