"""
Ingest boundary: validates raw sample payloads before they reach the store.

Payload shape (JSON object):

    {
        "type": "awake" | "core" | "rem" | "deep",   # "stage" is accepted too
        "start": "2025-01-15T22:00:00-06:00",       # ISO 8601, offset or Z required
        "end": "2025-01-15T23:00:00Z",
        "duration": "1:00:00"                       # SS | MM:SS | HH:MM:SS
    }

Anything else raises SampleValidationError; nothing partial is ever stored.
"""
import re
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from sleeptrack.models.sleep import SleepSample, SleepStage

ISO8601_INSTANT = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})$",
    re.ASCII,
)
DURATION = re.compile(r"^\d+(?::\d{2}){0,2}$", re.ASCII)
MAX_DURATION_SECONDS = 2**63 - 1  # largest value an INTEGER column holds


class SampleValidationError(ValueError):
    """Raised when an ingest payload is malformed."""


def parse_duration(value: str) -> int:
    """Convert "SS", "MM:SS" or "HH:MM:SS" to whole seconds ("90" -> 90, "1:40:00" -> 6000)."""
    if not isinstance(value, str) or not DURATION.fullmatch(value):
        raise SampleValidationError(f"Invalid duration: {value!r}")
    seconds = 0
    for part in value.split(":"):
        seconds = seconds * 60 + int(part)
    if seconds > MAX_DURATION_SECONDS:
        raise SampleValidationError(f"Duration out of range: {value!r}")
    return seconds


def parse_instant(value: Any) -> datetime:
    """Parse a strict ISO 8601 instant with an explicit offset into an aware datetime."""
    if not isinstance(value, str) or not ISO8601_INSTANT.fullmatch(value):
        raise SampleValidationError(f"Invalid ISO 8601 instant: {value!r}")
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:  # e.g. month 13 matches the pattern but is not a date
        raise SampleValidationError(f"Invalid ISO 8601 instant: {value!r}") from exc


class SampleIn(BaseModel):
    """Validated ingest payload."""

    model_config = ConfigDict(extra="ignore")

    stage: SleepStage = Field(validation_alias=AliasChoices("type", "stage"))
    start: datetime
    end: datetime
    duration: str

    @field_validator("stage", mode="before")
    @classmethod
    def _stage_is_literal(cls, v: Any) -> Any:
        if not isinstance(v, str):
            raise ValueError("stage must be a string")
        return v

    @field_validator("start", "end", mode="before")
    @classmethod
    def _strict_instant(cls, v: Any) -> datetime:
        try:
            return parse_instant(v)
        except SampleValidationError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("duration", mode="before")
    @classmethod
    def _duration_grammar(cls, v: Any) -> str:
        try:
            parse_duration(v)
        except SampleValidationError as exc:
            raise ValueError(str(exc)) from exc
        return v

    def to_sample(self) -> SleepSample:
        return SleepSample(
            stage=self.stage,
            start=self.start,
            end=self.end,
            duration=self.duration,
            duration_seconds=parse_duration(self.duration),
        )


def validate_sample(payload: Any) -> SleepSample:
    """
    Validate one raw ingest payload and convert it to a SleepSample.

    Args:
        payload: Decoded JSON value (expected to be a dict).

    Returns:
        SleepSample with aware start/end (original offsets preserved; the
        store normalizes to UTC) and a parsed duration.

    Raises:
        SampleValidationError: on any malformed field or non-object payload.
    """
    if not isinstance(payload, dict):
        raise SampleValidationError("Sample must be a JSON object")
    try:
        return SampleIn.model_validate(payload).to_sample()
    except ValidationError as exc:
        raise SampleValidationError(_summarize(exc)) from exc


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "sample"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
