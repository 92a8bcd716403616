"""Read named log sources from the logs directory."""

import logging

logger = logging.getLogger(__name__)


def read_lines(filepath: str) -> list[str]:
    """Return every line of the file, newlines stripped.

    A missing file is "no data yet" and returns []. Any other OSError
    propagates to the caller.
    """
    try:
        with open(filepath, "r", encoding="utf-8", errors="replace") as f:
            return f.read().splitlines()
    except FileNotFoundError:
        logger.debug("Log source %s does not exist yet", filepath)
        return []

