"""Structured records produced by the parser and the report builders."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

LOG_LEVELS = ("ERROR", "WARN", "INFO", "DEBUG")
DEFAULT_LEVEL = "INFO"


def _empty_fields() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class LogEvent:
    timestamp: datetime | None
    level: str = DEFAULT_LEVEL
    method: str | None = None
    url: str | None = None
    status: int | None = None
    duration: int | None = None  # milliseconds
    user_id: str | None = None
    error_category: str | None = None
    security_event: str | None = None
    message: str | None = None
    request_id: str | None = None
    severity: str | None = None
    ip: str | None = None
    fields: Mapping[str, Any] = field(default_factory=_empty_fields, hash=False, repr=False)
    raw: str = field(default="", compare=False, repr=False)

    @property
    def endpoint(self) -> str | None:
        """'METHOD url' for request entries, None otherwise."""
        if self.method and self.url:
            return f"{self.method} {self.url}"
        return None

    def get(self, key: str, default: Any = None) -> Any:
        """Look up any key carried in the original JSON payload."""
        return self.fields.get(key, default)


@dataclass(frozen=True)
class SlowRequest:
    endpoint: str
    duration: int
    timestamp: datetime | None
    request_id: str | None = None


@dataclass(frozen=True)
class EndpointCount:
    endpoint: str
    count: int


@dataclass
class APIUsageStats:
    total_requests: int = 0
    successful_requests: int = 0
    error_requests: int = 0
    endpoints: dict[str, int] = field(default_factory=dict)
    methods: dict[str, int] = field(default_factory=dict)
    status_codes: dict[int, int] = field(default_factory=dict)
    average_response_time: int = 0
    slowest_requests: list[SlowRequest] = field(default_factory=list)
    most_active_users: dict[str, int] = field(default_factory=dict)
    errors_by_type: dict[str, int] = field(default_factory=dict)

    @property
    def success_rate(self) -> int:
        """Whole-number percentage of requests that succeeded."""
        if not self.total_requests:
            return 0
        return round_half_up(self.successful_requests / self.total_requests * 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRequests": self.total_requests,
            "successfulRequests": self.successful_requests,
            "errorRequests": self.error_requests,
            "endpoints": dict(self.endpoints),
            "methods": dict(self.methods),
            "statusCodes": {str(k): v for k, v in self.status_codes.items()},
            "averageResponseTime": self.average_response_time,
            "slowestRequests": [slow_request_to_dict(r) for r in self.slowest_requests],
            "mostActiveUsers": dict(self.most_active_users),
            "errorsByType": dict(self.errors_by_type),
        }


@dataclass(frozen=True)
class ReportSummary:
    total_requests: int = 0
    success_rate: int = 0
    error_count: int = 0
    security_event_count: int = 0
    average_response_time: int = 0


@dataclass
class SummaryReport:
    time_range: str
    generated_at: datetime
    summary: ReportSummary
    top_endpoints: list[EndpointCount] = field(default_factory=list)
    recent_errors: list[LogEvent] = field(default_factory=list)
    security_events: list[LogEvent] = field(default_factory=list)
    slowest_requests: list[SlowRequest] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeRange": self.time_range,
            "generatedAt": self.generated_at.isoformat(),
            "summary": {
                "totalRequests": self.summary.total_requests,
                "successRate": self.summary.success_rate,
                "errorCount": self.summary.error_count,
                "securityEventCount": self.summary.security_event_count,
                "averageResponseTime": self.summary.average_response_time,
            },
            "topEndpoints": [
                {"endpoint": e.endpoint, "count": e.count} for e in self.top_endpoints
            ],
            "recentErrors": [event_to_dict(e) for e in self.recent_errors],
            "securityEvents": [event_to_dict(e) for e in self.security_events],
            "slowestRequests": [slow_request_to_dict(r) for r in self.slowest_requests],
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, not to even."""
    return math.floor(value + 0.5)


def _isoformat(ts: datetime | None) -> str | None:
    return ts.isoformat() if ts is not None else None


def event_to_dict(event: LogEvent) -> dict[str, Any]:
    """JSON payload of the event with the resolved timestamp and level on top."""
    data = dict(event.fields)
    data["timestamp"] = _isoformat(event.timestamp)
    data["level"] = event.level
    return data


def slow_request_to_dict(request: SlowRequest) -> dict[str, Any]:
    return {
        "endpoint": request.endpoint,
        "duration": f"{request.duration}ms",
        "durationMs": request.duration,
        "timestamp": _isoformat(request.timestamp),
        "requestId": request.request_id,
    }
