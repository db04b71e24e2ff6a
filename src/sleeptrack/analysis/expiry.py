"""
Cache expiry: seconds until the next local wall-clock threshold (07:35 Central).

The UTC offset for a given calendar date is probed rather than looked up:
render 12:00 UTC on that date in the local zone and read back the hour
(-6 for CST, -5 for CDT). The threshold for that date is then placed in UTC
with that offset. Today's threshold is used if it is still ahead of now,
otherwise tomorrow's, probed separately, so the result stays exact on the
two days a year the offset changes.
"""
import math
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

LOCAL_TIMEZONE = "America/Chicago"
EXPIRY_HOUR = 7
EXPIRY_MINUTE = 35


def utc_offset_hours(day: date, tz: ZoneInfo) -> int:
    """Whole-hour UTC offset tz observes on day, probed at 12:00 UTC."""
    probe = datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc)
    local = probe.astimezone(tz)
    # Zones far enough east roll the probe onto the next local day
    day_shift = (local.date() - day).days
    return day_shift * 24 + local.hour - 12


def target_instant(day: date, tz: ZoneInfo, hour: int = EXPIRY_HOUR, minute: int = EXPIRY_MINUTE) -> datetime:
    """UTC instant of hour:minute local wall-clock time on day."""
    midnight_utc = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return midnight_utc + timedelta(hours=hour - utc_offset_hours(day, tz), minutes=minute)


def seconds_until_expiry(
    now: datetime,
    tz_name: str = LOCAL_TIMEZONE,
    hour: int = EXPIRY_HOUR,
    minute: int = EXPIRY_MINUTE,
) -> int:
    """
    Whole seconds from now until the next hour:minute in tz_name.

    Args:
        now: Current instant (timezone-aware).
        tz_name: IANA zone whose wall clock defines the threshold.

    Returns:
        Non-negative integer, suitable as a Cache-Control max-age.
    """
    tz = ZoneInfo(tz_name)
    now_utc = now.astimezone(timezone.utc)

    target = target_instant(now_utc.astimezone(tz).date(), tz, hour, minute)
    if target <= now_utc:
        tomorrow = (now_utc + timedelta(hours=24)).astimezone(tz).date()
        target = target_instant(tomorrow, tz, hour, minute)

    return max(0, math.floor((target - now_utc).total_seconds()))
