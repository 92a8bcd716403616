"""Configuration loading from env vars and an optional YAML file."""

import logging
import os
from dataclasses import dataclass, fields

import yaml

from log_analyzer.errors import ConfigError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Logical source name -> Config attribute holding its filename
SOURCES = {
    "error": "error_log",
    "api": "api_log",
    "combined": "combined_log",
}


@dataclass(frozen=True)
class Config:
    logs_dir: str = "./logs"
    error_log: str = "error.log"
    api_log: str = "api.log"
    combined_log: str = "combined.log"
    default_hours: float = 24
    anonymous_user: str = "anonymous"
    slowest_limit: int = 10
    top_endpoints_limit: int = 10
    recent_errors_limit: int = 10
    security_events_limit: int = 5
    log_level: str = "WARNING"

    def source_path(self, name: str) -> str:
        """Full path of a logical source: 'error', 'api' or 'combined'."""
        try:
            attr = SOURCES[name]
        except KeyError:
            raise ConfigError(f"Unknown log source: {name!r}") from None
        return os.path.join(self.logs_dir, getattr(self, attr))


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_yaml_config(path: str | None) -> dict:
    """Load overrides from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config from env vars with defaults, then apply YAML overrides."""
    values = {
        "logs_dir": os.environ.get("LOGS_DIR", Config.logs_dir),
        "error_log": os.environ.get("ERROR_LOG", Config.error_log),
        "api_log": os.environ.get("API_LOG", Config.api_log),
        "combined_log": os.environ.get("COMBINED_LOG", Config.combined_log),
        "default_hours": _env_number("DEFAULT_HOURS", Config.default_hours, float),
        "log_level": os.environ.get("LOG_LEVEL", Config.log_level).upper(),
    }

    known = {f.name for f in fields(Config)}
    for key, value in (yaml_data or {}).items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        values[key] = value

    for key in ("slowest_limit", "top_endpoints_limit", "recent_errors_limit", "security_events_limit"):
        if key in values and (isinstance(values[key], bool) or not isinstance(values[key], int) or values[key] < 0):
            raise ConfigError(f"{key} must be a non-negative integer, got {values[key]!r}")

    values["log_level"] = str(values["log_level"]).upper()
    if values["log_level"] not in LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    return Config(**values)
