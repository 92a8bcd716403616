"""Log line parser: free-text prefix plus a trailing JSON payload.

The logging middleware writes lines shaped like::

    2024-05-01 12:00:00 [ERROR]: API Request Failed {"method": "GET", ...}

Parsing happens in two independent phases:
  1. Isolate the JSON object that closes exactly at the end of the line.
  2. Pull the timestamp and level tag out of the text in front of it.

Anything without a trailing JSON object is not a log event (blank lines,
banners, stack-trace continuations) and yields None.
"""

import json
import logging
import math
import re
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from log_analyzer.models import DEFAULT_LEVEL, LOG_LEVELS, LogEvent

logger = logging.getLogger(__name__)

TIMESTAMP_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})")
LEVEL_PATTERN = re.compile(r"\[(ERROR|WARN|INFO|DEBUG)\]")
DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s)?\s*$", re.IGNORECASE)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_DECODER = json.JSONDecoder()

# Unit suffix -> milliseconds multiplier
_DURATION_UNITS = {None: 1, "ms": 1, "s": 1000}


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def parse_timestamp(value: Any) -> datetime | None:
    """Convert prefix text, ISO 8601 text or epoch milliseconds into an aware datetime.

    Naive values are taken as local time, which is how the middleware
    renders its line prefix. Instants that cannot be represented return None.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        ts = datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError:
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(text)
        except ValueError:
            return None
    if ts.tzinfo is None:
        try:
            ts = ts.astimezone()
        except (ValueError, OverflowError, OSError):
            return None
    return ts


def parse_duration(value: Any) -> int | None:
    """Normalize '123ms', '1.5s', 123 or 12.7 to whole milliseconds.

    Malformed values are absent (None), never zero.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            return None
        return int(value)
    if not isinstance(value, str):
        return None
    m = DURATION_PATTERN.match(value)
    if not m:
        return None
    number, unit = m.groups()
    unit = unit.lower() if unit else None
    return int(float(number) * _DURATION_UNITS[unit])


def parse_status(value: Any) -> int | None:
    """HTTP status as int; None for missing or non-numeric values."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


# ---------------------------------------------------------------------------
# Line parsing
# ---------------------------------------------------------------------------


def find_trailing_json(line: str) -> tuple[int, dict[str, Any]] | None:
    """Return (start_index, payload) of the JSON object ending the line.

    Opening braces are tried from the end of the line backwards; the first
    one whose object decodes and closes exactly at end-of-line wins, so
    braces in the free text before the payload cannot corrupt it.
    """
    text = line.rstrip()
    if not text.endswith("}"):
        return None
    end = len(text)
    start = text.rfind("{")
    while start != -1:
        try:
            payload, stop = _DECODER.raw_decode(text, start)
        except (ValueError, RecursionError):
            payload, stop = None, -1
        if stop == end and isinstance(payload, dict):
            return start, payload
        start = text.rfind("{", 0, start)
    return None


def _resolve_level(prefix: str, payload: dict[str, Any]) -> str:
    m = LEVEL_PATTERN.search(prefix)
    if m:
        return m.group(1)
    level = payload.get("level")
    if isinstance(level, str) and level.upper() in LOG_LEVELS:
        return level.upper()
    return DEFAULT_LEVEL


def parse_line(line: str) -> LogEvent | None:
    """Parse a single raw log line. Returns None for unparseable lines."""
    if not isinstance(line, str):
        return None
    stripped = line.rstrip("\r\n")
    found = find_trailing_json(stripped)
    if found is None:
        return None
    start, payload = found
    prefix = stripped[:start]

    m = TIMESTAMP_PATTERN.match(prefix)
    timestamp = parse_timestamp(m.group(1)) if m else parse_timestamp(payload.get("timestamp"))

    return LogEvent(
        timestamp=timestamp,
        level=_resolve_level(prefix, payload),
        method=_optional_str(payload.get("method")),
        url=_optional_str(payload.get("url")),
        status=parse_status(payload.get("status")),
        duration=parse_duration(payload.get("duration")),
        user_id=_optional_str(payload.get("userId")),
        error_category=_optional_str(payload.get("errorCategory")),
        security_event=_optional_str(payload.get("securityEvent") or None),
        message=_optional_str(payload.get("message")),
        request_id=_optional_str(payload.get("requestId")),
        severity=_optional_str(payload.get("severity")),
        ip=_optional_str(payload.get("ip")),
        fields=MappingProxyType(payload),
        raw=stripped,
    )


def parse_lines(lines) -> list[LogEvent]:
    """Parse an iterable of lines, dropping the unparseable ones."""
    events = []
    skipped = 0
    for line in lines:
        event = parse_line(line)
        if event is None:
            if line.strip():
                skipped += 1
            continue
        events.append(event)
    if skipped:
        logger.debug("Skipped %d unparseable line(s)", skipped)
    return events
