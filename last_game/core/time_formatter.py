# last_game/core/time_formatter.py
"""
Provides pure, stateless utilities to render timestamps and game durations.

Users write their date and time formats with Java/Linux-style tokens
(`yyyy-MM-dd`, `hh:mm a`, ...) rather than `strftime` directives, so this
module ships its own small token formatter. Every public function fails
soft: a bad timestamp produces an empty string, never an exception, so one
broken field cannot take down a whole rendered template.
"""

import math
import re
from datetime import datetime, tzinfo
from typing import Callable, Dict, Final, Optional

from last_game.types import TimeClass

DEFAULT_PATTERN: Final[str] = "yyyy-MM-dd HH:mm"
DEFAULT_DATE_PATTERN: Final[str] = "yyyy-MM-dd"
DEFAULT_TIME_PATTERN: Final[str] = "hh:mm"

SECONDS_PER_DAY: Final[int] = 24 * 3600

# Alternation order matters: `yyyy` before the two-letter tokens so the
# longest token wins, and a single scan keeps replacements non-overlapping.
TOKEN_PATTERN = re.compile(r"yyyy|MM|dd|HH|hh|mm|ss|a")

_TOKEN_RENDERERS: Dict[str, Callable[[datetime], str]] = {
    "yyyy": lambda dt: str(dt.year),
    "MM": lambda dt: f"{dt.month:02d}",
    "dd": lambda dt: f"{dt.day:02d}",
    "HH": lambda dt: f"{dt.hour:02d}",
    "hh": lambda dt: f"{(dt.hour % 12) or 12:02d}",
    "mm": lambda dt: f"{dt.minute:02d}",
    "ss": lambda dt: f"{dt.second:02d}",
    "a": lambda dt: "AM" if dt.hour < 12 else "PM",
}


def format_with_pattern(moment: datetime, pattern: Optional[str] = None) -> str:
    """
    Renders `moment` using a token pattern.

    Recognized tokens are `yyyy, MM, dd, HH, hh, mm, ss, a`; anything else is
    copied through verbatim. An empty pattern falls back to `yyyy-MM-dd HH:mm`.

    Example:
        >>> format_with_pattern(datetime(2024, 3, 9, 0, 5), "dd/MM/yyyy hh:mm a")
        '09/03/2024 12:05 AM'
    """
    fmt = pattern or DEFAULT_PATTERN
    return TOKEN_PATTERN.sub(lambda m: _TOKEN_RENDERERS[m.group(0)](moment), fmt)


def _to_datetime(ts: int, tz: Optional[tzinfo]) -> datetime:
    # tz=None renders in the machine's local timezone.
    return datetime.fromtimestamp(ts, tz)


def _format_epoch(ts: Optional[int], pattern: str, tz: Optional[tzinfo]) -> str:
    if not ts:
        return ""
    try:
        return format_with_pattern(_to_datetime(ts, tz), pattern)
    except (OverflowError, OSError, ValueError, TypeError):
        return ""


def format_date_only(
    ts: Optional[int], date_pattern: Optional[str] = None, tz: Optional[tzinfo] = None
) -> str:
    """Formats an epoch-seconds timestamp with the date pattern (default `yyyy-MM-dd`)."""
    return _format_epoch(ts, date_pattern or DEFAULT_DATE_PATTERN, tz)


def format_time_only(
    ts: Optional[int], time_pattern: Optional[str] = None, tz: Optional[tzinfo] = None
) -> str:
    """Formats an epoch-seconds timestamp with the time pattern (default `hh:mm`)."""
    return _format_epoch(ts, time_pattern or DEFAULT_TIME_PATTERN, tz)


def format_timestamp(
    ts: Optional[int],
    date_pattern: Optional[str] = None,
    time_pattern: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Formats date and time separately and joins them with a single space.

    Either half is omitted if it rendered empty; both empty yields "".
    """
    date_part = format_date_only(ts, date_pattern, tz)
    time_part = format_time_only(ts, time_pattern, tz)
    if date_part and time_part:
        return f"{date_part} {time_part}"
    return date_part or time_part or ""


def format_duration(
    start: Optional[int], end: Optional[int], time_class: Optional[TimeClass] = None
) -> str:
    """
    Renders the elapsed time between two epoch-seconds timestamps.

    Daily games are reported in whole days ("1 day", "3 days"), rounding half
    a day up. Every other time class is rendered as a clock-like `HH:MM` of
    wall-clock time; the hour count is not capped at 24.

    Returns:
        The duration string, or "" if an endpoint is missing or `end < start`.
    """
    if not start or not end or end < start:
        return ""

    elapsed = end - start
    if time_class is TimeClass.DAILY:
        days = max(0, math.floor(elapsed / SECONDS_PER_DAY + 0.5))
        return "1 day" if days == 1 else f"{days} days"

    total_minutes = elapsed // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"
