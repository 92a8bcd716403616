"""Summary report composition from the three sub-reports."""

from datetime import datetime

from log_analyzer.models import APIUsageStats, LogEvent, ReportSummary, SummaryReport
from log_analyzer.stats import top_endpoints


def describe_window(hours: float) -> str:
    return f"Last {hours:g} hours"


def compose_summary_report(
    hours: float,
    generated_at: datetime,
    errors: list[LogEvent],
    stats: APIUsageStats,
    security_events: list[LogEvent],
    top_endpoints_limit: int = 10,
    recent_errors_limit: int = 10,
    security_events_limit: int = 5,
) -> SummaryReport:
    """Assemble one snapshot from results computed for the same window and instant."""
    summary = ReportSummary(
        total_requests=stats.total_requests,
        success_rate=stats.success_rate,
        error_count=len(errors),
        security_event_count=len(security_events),
        average_response_time=stats.average_response_time,
    )
    return SummaryReport(
        time_range=describe_window(hours),
        generated_at=generated_at,
        summary=summary,
        top_endpoints=top_endpoints(stats, top_endpoints_limit),
        recent_errors=errors[:recent_errors_limit],
        security_events=security_events[:security_events_limit],
        slowest_requests=list(stats.slowest_requests),
    )
