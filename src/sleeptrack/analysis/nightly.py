"""
Nightly sleep summary: last night's window, total sleep and interruptions.

Pure functions over List[SleepSample]; the only I/O is the store read in
summarize_last_night(). "Last night" is every sample starting strictly after
18:00 UTC on the previous UTC calendar day, a fixed-offset stand-in for noon
Central time that deliberately ignores daylight saving.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sleeptrack.models.sleep import SleepSample, SleepStage

WINDOW_CUTOFF_UTC_HOUR = 18
INTERRUPTION_THRESHOLD_MINUTES = 15


@dataclass
class NightlySummary:
    hours: int
    minutes: int
    start: datetime  # start of the first sample in the window
    end: datetime  # end of the last sample in the window
    interruptions: int

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape served by GET /api/sleep."""
        return {
            "duration": {"hours": self.hours, "minutes": self.minutes},
            "start": format_instant(self.start),
            "end": format_instant(self.end),
            "interruptions": self.interruptions,
        }


def format_instant(value: datetime) -> str:
    """UTC ISO 8601 with millisecond precision and a Z suffix."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def window_cutoff(now: datetime, cutoff_utc_hour: int = WINDOW_CUTOFF_UTC_HOUR) -> datetime:
    """Return cutoff_utc_hour:00 UTC on the UTC calendar day before now."""
    yesterday = now.astimezone(timezone.utc) - timedelta(days=1)
    return yesterday.replace(hour=cutoff_utc_hour, minute=0, second=0, microsecond=0)


def aggregate(
    samples: List[SleepSample],
    interruption_threshold_minutes: int = INTERRUPTION_THRESHOLD_MINUTES,
) -> Optional[NightlySummary]:
    """
    Summarize one night's samples.

    Args:
        samples: Samples in the window, ascending by start (not re-sorted here).
        interruption_threshold_minutes: Awake samples strictly longer than
            this count as interruptions. Shorter awake samples are ignored.

    Returns:
        NightlySummary, or None when there are no samples (no data is not
        the same thing as zero sleep).
    """
    if not samples:
        return None

    threshold_seconds = interruption_threshold_minutes * 60
    total_seconds = 0
    interruptions = 0
    for sample in samples:
        if sample.stage != SleepStage.AWAKE:
            total_seconds += sample.duration_seconds
        elif sample.duration_seconds > threshold_seconds:
            interruptions += 1

    return NightlySummary(
        hours=total_seconds // 3600,
        minutes=(total_seconds % 3600) // 60,
        start=samples[0].start,
        end=samples[-1].end,
        interruptions=interruptions,
    )


def summarize_last_night(
    store,
    now: datetime,
    cutoff_utc_hour: int = WINDOW_CUTOFF_UTC_HOUR,
    interruption_threshold_minutes: int = INTERRUPTION_THRESHOLD_MINUTES,
) -> Optional[NightlySummary]:
    """Read the window for now from a SampleStore and aggregate it."""
    cutoff = window_cutoff(now, cutoff_utc_hour)
    return aggregate(store.samples_after(cutoff), interruption_threshold_minutes)
