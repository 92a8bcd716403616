from datetime import datetime, timedelta, timezone

import pytest

from log_analyzer.config import Config
from log_analyzer.simulator import format_log_line


def make_line(hours_ago=0.0, level="INFO", text="API Request Completed", now=None, **payload):
    """Helper to build a middleware-format line a given number of hours old."""
    if now is None:
        now = datetime.now(timezone.utc)
    ts = now - timedelta(hours=hours_ago)
    return format_log_line(ts, level, text, payload)


def make_request(hours_ago=0.0, method="GET", url="/api/products", status=200,
                 duration="100ms", **extra):
    payload = {"method": method, "url": url, "status": status}
    if duration is not None:
        payload["duration"] = duration
    payload.update(extra)
    return make_line(hours_ago, **payload)


@pytest.fixture
def logs_dir(tmp_path):
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture
def config(logs_dir):
    return Config(logs_dir=str(logs_dir))


@pytest.fixture
def write_log(logs_dir):
    """Write lines to a named file in the logs directory."""
    def _write(filename, lines):
        (logs_dir / filename).write_text("\n".join(lines) + "\n", encoding="utf-8")
        return logs_dir / filename
    return _write
