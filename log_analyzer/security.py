"""Security event predicates.

An event is security-relevant when it carries an explicit marker field, or
when its message contains the literal, case-sensitive word "Security".
The second check is a heuristic and misses messages that phrase security
relevance differently.
"""

from typing import Iterable

from log_analyzer.models import LogEvent

SECURITY_KEYWORD = "Security"


def has_security_marker(event: LogEvent) -> bool:
    """True if the event was logged with a securityEvent field."""
    return bool(event.security_event)


def mentions_security(event: LogEvent, keyword: str = SECURITY_KEYWORD) -> bool:
    """True if the message contains the keyword (case-sensitive)."""
    return event.message is not None and keyword in event.message


def is_security_event(event: LogEvent) -> bool:
    return has_security_marker(event) or mentions_security(event)


def filter_security_events(events: Iterable[LogEvent]) -> list[LogEvent]:
    return [e for e in events if is_security_event(e)]
