from datetime import datetime, timedelta, tzinfo
from typing import Any, Optional
from dateutil import parser as dtparse
from dateutil import tz

from egw_mcp.config import settings
from egw_mcp.domain.errors import ToolValidationError

DEFAULT_TZ = tz.gettz(settings.default_timezone) or tz.UTC

# Checked in this order; first hit wins ("today" beats "tomorrow" beats "next week").
RELATIVE_TOKENS = (
    ("today", timedelta(0)),
    ("tomorrow", timedelta(days=1)),
    ("next week", timedelta(days=7)),
)

def now_local(zone: Optional[tzinfo] = None) -> datetime:
    """Current time in `zone` (DEFAULT_TZ if omitted)."""
    return datetime.now(zone or DEFAULT_TZ)

def resolve(text: str, now: Optional[datetime] = None) -> datetime:
    """
    Resolve a natural-language or literal date into an aware datetime.
    Inputs:
        text: "today", "tomorrow", "next week" (substring, any case), or any
              literal dateutil can parse.
        now: reference clock (defaults to the current time in DEFAULT_TZ).
    Returns:
        datetime; unparseable input falls back to `now`, never raises.
    """
    now = now or now_local()
    lowered = (text or "").lower()
    for token, offset in RELATIVE_TOKENS:
        if token in lowered:
            return now + offset
    try:
        parsed = dtparse.parse(text, default=now.replace(hour=0, minute=0, second=0, microsecond=0))
    except (ValueError, OverflowError, TypeError):
        return now
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=now.tzinfo)

def apply_time(instant: datetime, time_of_day: str) -> datetime:
    """Move `instant` to HH:MM on the same calendar day."""
    hours, _, minutes = (time_of_day or "").strip().partition(":")
    try:
        return instant.replace(hour=int(hours), minute=int(minutes or 0), second=0, microsecond=0)
    except ValueError as e:
        raise ToolValidationError(f"Invalid time '{time_of_day}', expected HH:MM") from e

def from_backend(value: Any, zone: Optional[tzinfo] = None) -> Optional[datetime]:
    """Backend instants arrive as epoch seconds or ISO strings. Returns datetime|None."""
    zone = zone or DEFAULT_TZ
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=zone)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, zone)
        except (ValueError, OverflowError, OSError):
            return None
    try:
        parsed = dtparse.parse(str(value))
    except (ValueError, OverflowError):
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=zone)

def format_instant(instant: Optional[datetime], missing: str = "Not set") -> str:
    """Human readable date, e.g. 'Sat Oct 17, 2026 09:00 CDT'."""
    if instant is None:
        return missing
    return instant.strftime("%a %b %d, %Y %H:%M %Z").strip()
