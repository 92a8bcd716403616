"""API usage statistics: endpoint, method and status histograms, latency, users."""

from collections import Counter
from typing import Iterable

from log_analyzer.models import APIUsageStats, EndpointCount, LogEvent, SlowRequest, round_half_up

ANONYMOUS_USER = "anonymous"
SLOWEST_LIMIT = 10


def is_successful(status: int | None) -> bool:
    """2xx and 3xx count as success; anything else, or no status, does not."""
    return status is not None and 200 <= status < 400


def compute_api_usage_stats(
    events: Iterable[LogEvent],
    slowest_limit: int = SLOWEST_LIMIT,
    anonymous_user: str = ANONYMOUS_USER,
) -> APIUsageStats:
    """Consume request events in one pass and produce aggregated statistics.

    Only events carrying both a method and a url are requests. Events
    without a duration are left out of the average and the slowest list.
    """
    endpoints = Counter()
    methods = Counter()
    status_codes = Counter()
    users = Counter()
    error_types = Counter()
    slow = []
    total = 0
    successful = 0
    total_duration = 0
    duration_count = 0

    for event in events:
        endpoint = event.endpoint
        if endpoint is None:
            continue
        total += 1
        endpoints[endpoint] += 1
        methods[event.method] += 1

        if event.status is not None:
            status_codes[event.status] += 1
        if is_successful(event.status):
            successful += 1

        if event.duration is not None:
            total_duration += event.duration
            duration_count += 1
            slow.append(SlowRequest(
                endpoint=endpoint,
                duration=event.duration,
                timestamp=event.timestamp,
                request_id=event.request_id,
            ))

        if event.user_id and event.user_id != anonymous_user:
            users[event.user_id] += 1

        if event.error_category:
            error_types[event.error_category] += 1

    average = round_half_up(total_duration / duration_count) if duration_count else 0
    # sorted() is stable, so equal durations keep encounter order
    slowest = sorted(slow, key=lambda r: r.duration, reverse=True)[:max(slowest_limit, 0)]

    return APIUsageStats(
        total_requests=total,
        successful_requests=successful,
        error_requests=total - successful,
        endpoints=dict(endpoints),
        methods=dict(methods),
        status_codes=dict(status_codes),
        average_response_time=average,
        slowest_requests=slowest,
        most_active_users=dict(users.most_common()),
        errors_by_type=dict(error_types),
    )


def top_endpoints(stats: APIUsageStats, limit: int = 10) -> list[EndpointCount]:
    """Endpoints by request count, highest first; ties keep first-seen order."""
    ranked = sorted(stats.endpoints.items(), key=lambda item: item[1], reverse=True)
    return [EndpointCount(endpoint=name, count=count) for name, count in ranked[:max(limit, 0)]]
