"""Sample log writer producing lines in the request-logging middleware format."""

import json
import os
import random
from contextlib import ExitStack
from datetime import datetime, timedelta, timezone

from log_analyzer.config import Config

ENDPOINTS = [
    ("GET", "/api/products"),
    ("GET", "/api/products/featured"),
    ("GET", "/api/categories"),
    ("POST", "/api/orders"),
    ("GET", "/api/orders/my-orders"),
    ("POST", "/api/auth/login"),
    ("PUT", "/api/admin/orders/status"),
]
STATUSES = [200, 200, 200, 201, 304, 400, 401, 404, 500]
ERROR_CATEGORIES = {
    400: "VALIDATION_ERROR",
    401: "INVALID_TOKEN",
    404: "CLIENT_ERROR",
    500: "SERVER_ERROR",
}
SECURITY_EVENTS = [
    ("Login attempt with invalid password", "HIGH"),
    ("Login attempt with non-existent email", "MEDIUM"),
    ("Login attempt on deactivated account", "HIGH"),
]
USER_IDS = [f"user-{i}" for i in range(1, 11)] + ["anonymous"]

LINE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_log_line(timestamp: datetime, level: str, message: str, payload: dict) -> str:
    """Render one line: local-time prefix, bracketed level, message, JSON tail."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    prefix = timestamp.strftime(LINE_TIMESTAMP_FORMAT)
    return f"{prefix} [{level}]: {message} {json.dumps(payload)}"


def generate_request(rng: random.Random, timestamp: datetime) -> tuple[str, str, dict]:
    """Generate (level, message, payload) for one completed request."""
    method, url = rng.choice(ENDPOINTS)
    status = rng.choice(STATUSES)
    payload = {
        "requestId": f"{rng.getrandbits(36):09x}",
        "method": method,
        "url": url,
        "status": status,
        "duration": f"{rng.randint(5, 1500)}ms",
        "userId": rng.choice(USER_IDS),
        "timestamp": timestamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    if status >= 500:
        payload["errorCategory"] = ERROR_CATEGORIES[500]
        payload["message"] = "Internal server error"
        return "ERROR", "API Request Failed (Server Error)", payload
    if status >= 400:
        payload["errorCategory"] = ERROR_CATEGORIES.get(status, "CLIENT_ERROR")
        payload["message"] = "Request rejected"
        return "WARN", "API Request Failed (Client Error)", payload
    return "INFO", "API Request Completed", payload


def generate_security_event(rng: random.Random, timestamp: datetime) -> tuple[str, str, dict]:
    event, severity = rng.choice(SECURITY_EVENTS)
    payload = {
        "requestId": f"{rng.getrandbits(36):09x}",
        "securityEvent": event,
        "severity": severity,
        "method": "POST",
        "url": "/api/auth/login",
        "ip": f"10.0.0.{rng.randint(1, 254)}",
        "userId": "anonymous",
        "timestamp": timestamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    level = "ERROR" if severity in ("HIGH", "CRITICAL") else "WARN"
    return level, f"Security Event [{severity}]: {event}", payload


def write_sample_logs(config: Config, count: int = 100, hours: float = 24,
                      seed: int | None = None, now: datetime | None = None) -> dict[str, int]:
    """Append `count` entries spread over the last `hours` to the three sources.

    Every entry goes to the api and combined sources; ERROR entries also go
    to the error source. Returns the number of lines written per source.
    """
    rng = random.Random(seed)
    if now is None:
        now = datetime.now(timezone.utc)
    os.makedirs(config.logs_dir, exist_ok=True)

    entries = []
    for _ in range(count):
        ts = now - timedelta(seconds=rng.uniform(0, hours * 3600))
        if rng.random() < 0.1:
            entries.append((ts, *generate_security_event(rng, ts)))
        else:
            entries.append((ts, *generate_request(rng, ts)))
    entries.sort(key=lambda e: e[0])

    written = {"api": 0, "combined": 0, "error": 0}
    with ExitStack() as stack:
        handles = {
            name: stack.enter_context(open(config.source_path(name), "a", encoding="utf-8"))
            for name in written
        }
        for ts, level, message, payload in entries:
            line = format_log_line(ts, level, message, payload) + "\n"
            targets = ["api", "combined"]
            if level == "ERROR":
                targets.append("error")
            for name in targets:
                handles[name].write(line)
                written[name] += 1
    return written
