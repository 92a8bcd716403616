"""Exception types raised by the analyzer."""


class LogAnalyzerError(Exception):
    """Base class for analyzer errors."""


class ConfigError(LogAnalyzerError):
    """Configuration could not be loaded or is invalid."""
