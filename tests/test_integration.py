"""Integration tests: E2E via subprocess against a temporary logs directory."""

import json
import os
import subprocess
import sys

import pytest
from conftest import make_line, make_request

MAIN_PY = os.path.join(os.path.dirname(__file__), "..", "main.py")


def _run(*args: str) -> subprocess.CompletedProcess:
    """Run main.py with given args, return CompletedProcess."""
    return subprocess.run(
        [sys.executable, MAIN_PY, *args],
        capture_output=True,
        text=True,
    )


@pytest.fixture
def populated(logs_dir, write_log):
    write_log("error.log", [
        make_line(1, level="ERROR", message="Payment gateway timeout",
                  errorCategory="PAYMENT_ERROR", requestId="req-9", method="POST", url="/api/orders"),
        make_line(30, level="ERROR", message="Old failure"),
    ])
    write_log("api.log", [
        make_request(1, url="/api/products", duration="50ms", userId="user-1"),
        make_request(2, url="/api/products", duration="900ms", userId="anonymous"),
        make_request(3, method="POST", url="/api/orders", status=500, duration="300ms"),
    ])
    write_log("combined.log", [
        make_line(1, level="WARN", securityEvent="Login attempt with invalid password",
                  severity="HIGH", ip="10.0.0.9"),
        make_line(2, message="Routine message"),
    ])
    return logs_dir


class TestEmptyLogsDir:
    @pytest.mark.parametrize("command", ["summary", "errors", "stats", "security"])
    def test_every_command_succeeds(self, logs_dir, command):
        result = _run(command, "--logs-dir", str(logs_dir))
        assert result.returncode == 0
        assert "Usage:" in result.stdout

    def test_no_errors_message(self, logs_dir):
        result = _run("errors", "--logs-dir", str(logs_dir))
        assert "No errors found!" in result.stdout


class TestReports:
    def test_default_command_is_summary(self, populated):
        result = _run("--logs-dir", str(populated))
        assert result.returncode == 0
        assert "Summary Report (Last 24 hours)" in result.stdout
        assert "Total Requests: 3" in result.stdout
        assert "Error Count: 1" in result.stdout
        assert "Security Events: 1" in result.stdout

    def test_errors_with_hours(self, populated):
        narrow = _run("errors", "24", "--logs-dir", str(populated))
        wide = _run("errors", "48", "--logs-dir", str(populated))
        assert "Payment gateway timeout" in narrow.stdout
        assert "Old failure" not in narrow.stdout
        assert "Old failure" in wide.stdout

    def test_non_numeric_hours_default(self, populated):
        result = _run("errors", "soon", "--logs-dir", str(populated))
        assert result.returncode == 0
        assert "Last 24 hours" in result.stdout

    def test_stats(self, populated):
        result = _run("stats", "--logs-dir", str(populated))
        assert "Total Requests: 3" in result.stdout
        assert "GET /api/products: 2 requests" in result.stdout
        assert "1. GET /api/products - 900ms" in result.stdout

    def test_security(self, populated):
        result = _run("security", "--logs-dir", str(populated))
        assert "Login attempt with invalid password" in result.stdout
        assert "IP: 10.0.0.9" in result.stdout


class TestJsonOutput:
    def test_summary_json(self, populated):
        result = _run("summary", "--output", "json", "--logs-dir", str(populated))
        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["summary"]["totalRequests"] == 3
        assert data["summary"]["averageResponseTime"] == 417
        assert data["topEndpoints"][0] == {"endpoint": "GET /api/products", "count": 2}

    def test_stats_json_excludes_anonymous(self, populated):
        data = json.loads(_run("stats", "--output", "json", "--logs-dir", str(populated)).stdout)
        assert data["mostActiveUsers"] == {"user-1": 1}

    def test_errors_json(self, populated):
        data = json.loads(_run("errors", "--output", "json", "--logs-dir", str(populated)).stdout)
        assert len(data) == 1
        assert data[0]["requestId"] == "req-9"


class TestGenerate:
    def test_generate_then_report(self, logs_dir):
        result = _run("generate", "12", "--logs-dir", str(logs_dir), "--count", "25", "--seed", "1")
        assert result.returncode == 0
        assert (logs_dir / "api.log").exists()
        data = json.loads(_run("stats", "--output", "json", "--logs-dir", str(logs_dir)).stdout)
        assert data["totalRequests"] == 25


class TestConfigErrors:
    def test_invalid_yaml_exits_1(self, tmp_path, logs_dir):
        bad = tmp_path / "bad.yaml"
        bad.write_text("logs_dir: [unclosed\n")
        result = _run("summary", "--config", str(bad), "--logs-dir", str(logs_dir))
        assert result.returncode == 1
        assert "Error:" in result.stderr

    def test_config_directory_exits_1(self, tmp_path, logs_dir):
        result = _run("summary", "--config", str(tmp_path), "--logs-dir", str(logs_dir))
        assert result.returncode == 1
        assert "Error:" in result.stderr
        assert "Traceback" not in result.stderr

    def test_invalid_command(self):
        result = _run("explode")
        assert result.returncode == 2
