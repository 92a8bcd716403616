"""Tests for log_analyzer/formatter.py"""

import json
from datetime import datetime, timezone

import pytest

from log_analyzer.formatter import (
    format_errors_text,
    format_security_text,
    format_stats_text,
    format_summary_text,
    get_formatter,
    to_json,
)
from log_analyzer.models import (
    APIUsageStats,
    EndpointCount,
    LogEvent,
    ReportSummary,
    SlowRequest,
    SummaryReport,
)

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _error(**kwargs):
    defaults = dict(timestamp=NOW, level="ERROR", method="GET", url="/api/orders",
                    message="Database unavailable", error_category="DATABASE_CONNECTION_ERROR",
                    request_id="req-1", user_id="user-7")
    defaults.update(kwargs)
    return LogEvent(**defaults)


class TestErrorsText:
    def test_no_errors(self):
        assert "No errors found!" in format_errors_text([], 24)

    def test_lists_errors(self):
        text = format_errors_text([_error()], 12)
        assert "Last 12 hours" in text
        assert "1. [" in text
        assert "Request: GET /api/orders" in text
        assert "Error: Database unavailable" in text
        assert "Category: DATABASE_CONNECTION_ERROR" in text
        assert "Request ID: req-1" in text
        assert "User: user-7" in text

    def test_anonymous_user_hidden(self):
        assert "User:" not in format_errors_text([_error(user_id="anonymous")], 24)

    def test_original_error_fallback(self):
        event = _error(message=None, fields={"originalError": "ECONNREFUSED"})
        assert "Error: ECONNREFUSED" in format_errors_text([event], 24)


class TestStatsText:
    def test_contains_totals(self):
        stats = APIUsageStats(
            total_requests=4, successful_requests=3, error_requests=1,
            endpoints={"GET /a": 3, "POST /b": 1}, average_response_time=120,
            slowest_requests=[SlowRequest("GET /a", 900, NOW, "r1")],
            most_active_users={"user-1": 2},
            errors_by_type={"SERVER_ERROR": 1},
        )
        text = format_stats_text(stats, 24)
        assert "Total Requests: 4" in text
        assert "Success Rate: 75%" in text
        assert "Average Response Time: 120ms" in text
        assert "GET /a: 3 requests" in text
        assert "1. GET /a - 900ms" in text
        assert "user-1: 2 requests" in text
        assert "SERVER_ERROR: 1" in text

    def test_empty_stats(self):
        text = format_stats_text(APIUsageStats(), 24)
        assert "Total Requests: 0" in text
        assert "Success Rate: 0%" in text
        assert "Top Endpoints" not in text


class TestSecurityText:
    def test_no_events(self):
        assert "No security events found!" in format_security_text([], 24)

    def test_lists_events(self):
        event = LogEvent(timestamp=NOW, security_event="Login attempt with invalid password",
                         severity="HIGH", ip="10.0.0.5", method="POST", url="/api/auth/login")
        text = format_security_text([event], 24)
        assert "HIGH" in text
        assert "Event: Login attempt with invalid password" in text
        assert "IP: 10.0.0.5" in text

    def test_default_severity(self):
        event = LogEvent(timestamp=NOW, message="Security notice")
        text = format_security_text([event], 24)
        assert "MEDIUM" in text
        assert "Event: Security notice" in text


class TestSummaryText:
    def test_sections(self):
        report = SummaryReport(
            time_range="Last 24 hours",
            generated_at=NOW,
            summary=ReportSummary(total_requests=10, success_rate=90, error_count=1,
                                  security_event_count=1, average_response_time=55),
            top_endpoints=[EndpointCount("GET /a", 10)],
            recent_errors=[_error()],
            security_events=[LogEvent(timestamp=NOW, security_event="Brute force")],
        )
        text = format_summary_text(report)
        assert "Summary Report (Last 24 hours)" in text
        assert "Success Rate: 90%" in text
        assert "1. GET /a (10 requests)" in text
        assert "1. DATABASE_CONNECTION_ERROR: Database unavailable" in text
        assert "1. Brute force" in text


class TestJson:
    def test_event_list(self):
        data = json.loads(to_json([_error(fields={"extra": 1})]))
        assert data[0]["extra"] == 1
        assert data[0]["level"] == "ERROR"
        assert data[0]["timestamp"] == NOW.isoformat()

    def test_stats(self):
        data = json.loads(to_json(APIUsageStats(total_requests=2)))
        assert data["totalRequests"] == 2


class TestGetFormatter:
    def test_json_formatter(self):
        formatter = get_formatter("stats", "json")
        assert json.loads(formatter(APIUsageStats(), 24))["totalRequests"] == 0

    def test_text_formatters(self):
        assert "No errors" in get_formatter("errors")([], 24)
        assert "No security events" in get_formatter("security")([], 24)

    def test_custom_anonymous_user(self):
        formatter = get_formatter("errors", anonymous_user="guest")
        assert "User:" not in formatter([_error(user_id="guest")], 24)

    def test_unknown_command(self):
        with pytest.raises(ValueError):
            get_formatter("bogus")
