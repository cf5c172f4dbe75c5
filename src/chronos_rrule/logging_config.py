"""
Shared logging configuration for chronos-rrule
"""

import inspect
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    # Unknown names come back as "Level <name>"
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level=None):
    """Configure stderr logging once and return the calling module's logger"""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=_resolve_level(level or os.getenv("CHRONOS_RRULE_LOG_LEVEL", "INFO")),
            stream=sys.stderr,
            format=LOG_FORMAT,
        )

    frame = inspect.stack()[1]
    module = inspect.getmodule(frame[0])
    return logging.getLogger(module.__name__ if module else __name__)
