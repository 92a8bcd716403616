"""Time-windowed reports over the API's request, error and combined logs."""

from log_analyzer.analyzer import LogAnalyzer
from log_analyzer.config import Config, load_config, load_yaml_config
from log_analyzer.errors import ConfigError, LogAnalyzerError
from log_analyzer.models import APIUsageStats, LogEvent, SummaryReport
from log_analyzer.parser import parse_line

__all__ = [
    "LogAnalyzer",
    "Config",
    "load_config",
    "load_yaml_config",
    "ConfigError",
    "LogAnalyzerError",
    "APIUsageStats",
    "LogEvent",
    "SummaryReport",
    "parse_line",
]
