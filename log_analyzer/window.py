"""Time-window filtering relative to the current instant."""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Iterable

from log_analyzer.models import LogEvent

logger = logging.getLogger(__name__)

DEFAULT_HOURS = 24


def normalize_hours(hours, default: float = DEFAULT_HOURS) -> float:
    """Return hours if it is a positive finite number, otherwise default."""
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        if hours is not None:
            logger.warning("Invalid window %r, falling back to %s hours", hours, default)
        return default
    try:
        finite = math.isfinite(hours)
    except OverflowError:
        finite = False
    if not finite or hours <= 0:
        logger.warning("Invalid window %r, falling back to %s hours", hours, default)
        return default
    return hours


def cutoff_for(hours, now: datetime | None = None) -> datetime:
    """Instant `hours` before now. `now` is read fresh unless given."""
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        return now - timedelta(hours=normalize_hours(hours))
    except OverflowError:
        # Window reaches past datetime.min; every dated event qualifies.
        return datetime.min.replace(tzinfo=timezone.utc)


def within_window(events: Iterable[LogEvent], hours, now: datetime | None = None) -> list[LogEvent]:
    """Keep events strictly newer than the cutoff; undated events are dropped."""
    cutoff = cutoff_for(hours, now)
    return [e for e in events if e.timestamp is not None and e.timestamp > cutoff]


def newest_first(events: Iterable[LogEvent]) -> list[LogEvent]:
    """Stable sort by timestamp, most recent first."""
    return sorted(events, key=lambda e: e.timestamp, reverse=True)
