"""HTML home page showing last night's summary."""
from datetime import datetime
from html import escape
from typing import Optional
from zoneinfo import ZoneInfo

from sleeptrack.analysis.nightly import NightlySummary

_COUNT_WORDS = ["no", "one", "two", "three", "four", "five"]


def reaction(hours: int) -> str:
    if hours <= 4:
        return "\U0001F92C"  # face with symbols on mouth
    if hours == 5:
        return "\U0001F44E\U0001F3FB"  # thumbs down
    if hours == 6:
        return "\U0001F937\U0001F3FB\u200d\u2642\ufe0f"  # shrug
    if hours == 7:
        return "\U0001F610"  # neutral face
    return "\U0001F929"  # star-struck


def interruption_label(count: int) -> str:
    """Styled phrase for the interruption count ("no interruptions", "one interruption", ...)."""
    if count == 0:
        return '<span class="good">no interruptions</span>'
    if count == 1:
        return '<span class="neutral">one interruption \U0001F928</span>'
    word = _COUNT_WORDS[count] if count < len(_COUNT_WORDS) else str(count)
    return f'<span class="bad">{word} interruptions</span>'


def format_local_time(value: datetime, tz: ZoneInfo) -> str:
    """e.g. "10:05 PM" in tz."""
    local = value.astimezone(tz)
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"


def render_home_page(summary: Optional[NightlySummary], owner_name: str, tz_name: str) -> str:
    tz = ZoneInfo(tz_name)
    name = escape(owner_name)

    if summary is None:
        body = f"<p>{name} did not track sleep last night</p>"
    else:
        body = (
            f"<p>{name} slept for</p>\n"
            f'<div class="duration">'
            f'<span class="hours">{summary.hours}h</span> '
            f'<span class="minutes">{summary.minutes}m</span>'
            f"<span>{reaction(summary.hours)}</span>"
            f"</div>\n"
            f'<p class="startend">{format_local_time(summary.start, tz)} → '
            f"{format_local_time(summary.end, tz)}</p>\n"
            f'<p class="interruption">With {interruption_label(summary.interruptions)}</p>'
        )

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="UTF-8" />\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0" />\n'
        '<meta name="theme-color" content="#131f25" />\n'
        f"<title>{name}'s Sleep</title>\n"
        '<link rel="stylesheet" type="text/css" href="main.css" />\n'
        "</head>\n"
        f"<body>\n<main>\n{body}\n</main>\n</body>\n"
        "</html>\n"
    )
