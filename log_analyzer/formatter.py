"""Output formatters: human-readable text and JSON for each report."""

import json
from functools import partial
from typing import Callable

from log_analyzer.models import APIUsageStats, LogEvent, SummaryReport, event_to_dict

RULE = "=" * 50
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

USAGE_FOOTER = "\n".join([
    RULE,
    "Usage:",
    "  python main.py [command] [hours]",
    "  Commands: summary, errors, stats, security, generate",
    "  Example: python main.py errors 12",
])


def _ts(event: LogEvent) -> str:
    if event.timestamp is None:
        return "unknown time"
    try:
        return event.timestamp.astimezone().strftime(TIMESTAMP_FORMAT)
    except (ValueError, OverflowError, OSError):
        return event.timestamp.isoformat()


def _error_text(event: LogEvent) -> str:
    return event.message or event.get("originalError") or "Unknown"


def _known_user(event: LogEvent, anonymous_user: str) -> bool:
    return bool(event.user_id) and event.user_id != anonymous_user


def _hours_label(hours: float) -> str:
    return f"{hours:g}"


def format_errors_text(events: list[LogEvent], hours: float, anonymous_user: str = "anonymous") -> str:
    lines = [f"Recent Errors (Last {_hours_label(hours)} hours):", RULE]
    if not events:
        lines.append("No errors found!")
        return "\n".join(lines)
    for index, event in enumerate(events, start=1):
        lines.append("")
        lines.append(f"{index}. [{_ts(event)}] {event.level}")
        lines.append(f"   Request: {event.method or '-'} {event.url or '-'}")
        lines.append(f"   Error: {_error_text(event)}")
        lines.append(f"   Category: {event.error_category or 'Unknown'}")
        lines.append(f"   Request ID: {event.request_id or '-'}")
        if _known_user(event, anonymous_user):
            lines.append(f"   User: {event.user_id}")
    return "\n".join(lines)


def format_stats_text(stats: APIUsageStats, hours: float) -> str:
    lines = [f"API Usage Statistics (Last {_hours_label(hours)} hours):", RULE]
    lines.append(f"Total Requests: {stats.total_requests}")
    lines.append(f"Successful: {stats.successful_requests}")
    lines.append(f"Errors: {stats.error_requests}")
    lines.append(f"Success Rate: {stats.success_rate}%")
    lines.append(f"Average Response Time: {stats.average_response_time}ms")

    if stats.endpoints:
        lines.append("")
        lines.append("Top Endpoints:")
        ranked = sorted(stats.endpoints.items(), key=lambda item: item[1], reverse=True)
        for endpoint, count in ranked[:10]:
            lines.append(f"   {endpoint}: {count} requests")

    if stats.slowest_requests:
        lines.append("")
        lines.append("Slowest Requests:")
        for index, request in enumerate(stats.slowest_requests[:5], start=1):
            lines.append(f"   {index}. {request.endpoint} - {request.duration}ms")

    if stats.most_active_users:
        lines.append("")
        lines.append("Most Active Users:")
        for user, count in list(stats.most_active_users.items())[:5]:
            lines.append(f"   {user}: {count} requests")

    if stats.errors_by_type:
        lines.append("")
        lines.append("Errors by Type:")
        for category, count in sorted(stats.errors_by_type.items()):
            lines.append(f"   {category}: {count}")
    return "\n".join(lines)


def format_security_text(events: list[LogEvent], hours: float, anonymous_user: str = "anonymous") -> str:
    lines = [f"Security Events (Last {_hours_label(hours)} hours):", RULE]
    if not events:
        lines.append("No security events found!")
        return "\n".join(lines)
    for index, event in enumerate(events, start=1):
        lines.append("")
        lines.append(f"{index}. [{_ts(event)}] {event.severity or 'MEDIUM'}")
        lines.append(f"   Event: {event.security_event or event.message}")
        lines.append(f"   IP: {event.ip or '-'}")
        lines.append(f"   Request: {event.method or '-'} {event.url or '-'}")
        if _known_user(event, anonymous_user):
            lines.append(f"   User: {event.user_id}")
    return "\n".join(lines)


def format_summary_text(report: SummaryReport) -> str:
    s = report.summary
    lines = [f"Summary Report ({report.time_range}):", RULE]
    lines.append(f"Total Requests: {s.total_requests}")
    lines.append(f"Success Rate: {s.success_rate}%")
    lines.append(f"Error Count: {s.error_count}")
    lines.append(f"Security Events: {s.security_event_count}")
    lines.append(f"Avg Response Time: {s.average_response_time}ms")

    if report.top_endpoints:
        lines.append("")
        lines.append("Top Endpoints:")
        for index, item in enumerate(report.top_endpoints[:5], start=1):
            lines.append(f"   {index}. {item.endpoint} ({item.count} requests)")

    if report.recent_errors:
        lines.append("")
        lines.append("Recent Errors:")
        for index, event in enumerate(report.recent_errors[:3], start=1):
            lines.append(f"   {index}. {event.error_category or 'Unknown'}: {_error_text(event)}")

    if report.security_events:
        lines.append("")
        lines.append("Security Alerts:")
        for index, event in enumerate(report.security_events, start=1):
            lines.append(f"   {index}. {event.security_event or event.message}")
    return "\n".join(lines)


def to_json(data) -> str:
    """JSON for any report result: events, stats or summary."""
    if isinstance(data, list):
        payload = [event_to_dict(e) for e in data]
    else:
        payload = data.to_dict()
    return json.dumps(payload, indent=2, default=str)


def get_formatter(command: str, output_format: str = "text",
                  anonymous_user: str = "anonymous") -> Callable[[object, float], str]:
    """Factory that returns a (data, hours) renderer for a report command."""
    if output_format == "json":
        return lambda data, hours: to_json(data)
    formatters = {
        "errors": partial(format_errors_text, anonymous_user=anonymous_user),
        "stats": format_stats_text,
        "security": partial(format_security_text, anonymous_user=anonymous_user),
        "summary": lambda report, hours: format_summary_text(report),
    }
    try:
        return formatters[command]
    except KeyError:
        raise ValueError(f"No formatter for command {command!r}") from None
