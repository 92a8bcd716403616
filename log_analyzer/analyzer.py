"""LogAnalyzer: on-demand reports over the API log files.

Every call re-reads its source files in full; nothing is cached between
calls. Log-reading trouble never escapes a public method: it is logged for
the operator and the caller gets the same empty result as for a missing
file.
"""

import logging
from datetime import datetime, timezone

from log_analyzer.config import Config
from log_analyzer.models import APIUsageStats, LogEvent, SummaryReport
from log_analyzer.parser import parse_lines
from log_analyzer.reader import read_lines
from log_analyzer.reports import compose_summary_report
from log_analyzer.security import filter_security_events
from log_analyzer.stats import compute_api_usage_stats
from log_analyzer.window import newest_first, normalize_hours, within_window

logger = logging.getLogger(__name__)


class LogAnalyzer:
    def __init__(self, config: Config | None = None):
        self._config = config or Config()

    @property
    def config(self) -> Config:
        return self._config

    def window_hours(self, hours) -> float:
        """Effective window: hours if positive, else the configured default."""
        return normalize_hours(hours, default=normalize_hours(self._config.default_hours))

    def _load_events(self, source: str, hours: float, now: datetime | None) -> list[LogEvent]:
        """Read, parse and window-filter one source. OSError propagates."""
        path = self._config.source_path(source)
        events = parse_lines(read_lines(path))
        kept = within_window(events, hours, now)
        logger.debug("%s: %d event(s) parsed, %d inside %s-hour window",
                     path, len(events), len(kept), hours)
        return kept

    def get_recent_errors(self, hours=None, now: datetime | None = None) -> list[LogEvent]:
        """Error-log events inside the window, newest first."""
        hours = self.window_hours(hours)
        try:
            return newest_first(self._load_events("error", hours, now))
        except OSError:
            logger.exception("Error reading error logs")
            return []

    def get_api_usage_stats(self, hours=None, now: datetime | None = None) -> APIUsageStats:
        """Aggregate statistics over API-log request events inside the window."""
        hours = self.window_hours(hours)
        try:
            events = self._load_events("api", hours, now)
        except OSError:
            logger.exception("Error analyzing API logs")
            return APIUsageStats()
        return compute_api_usage_stats(
            events,
            slowest_limit=self._config.slowest_limit,
            anonymous_user=self._config.anonymous_user,
        )

    def get_security_events(self, hours=None, now: datetime | None = None) -> list[LogEvent]:
        """Combined-log events flagged as security-relevant, newest first."""
        hours = self.window_hours(hours)
        try:
            events = self._load_events("combined", hours, now)
        except OSError:
            logger.exception("Error reading security logs")
            return []
        return newest_first(filter_security_events(events))

    def generate_summary_report(self, hours=None) -> SummaryReport:
        """One consistent snapshot: all sub-reports share the same window and instant."""
        hours = self.window_hours(hours)
        now = datetime.now(timezone.utc)
        errors = self.get_recent_errors(hours, now=now)
        stats = self.get_api_usage_stats(hours, now=now)
        security_events = self.get_security_events(hours, now=now)
        return compose_summary_report(
            hours,
            generated_at=now,
            errors=errors,
            stats=stats,
            security_events=security_events,
            top_endpoints_limit=self._config.top_endpoints_limit,
            recent_errors_limit=self._config.recent_errors_limit,
            security_events_limit=self._config.security_events_limit,
        )
