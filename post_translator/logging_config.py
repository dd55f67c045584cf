"""
Logging Setup

Configures loguru sinks from the logging section of config.yaml.
"""
import sys
from pathlib import Path

from loguru import logger

from post_translator.config import LOG_FILE, LOG_LEVEL, LOG_RETENTION, LOG_ROTATION


def setup_logging(level: str = LOG_LEVEL, log_file: str | None = LOG_FILE) -> None:
    """
    Install the stderr and rotating file sinks.

    Args:
        level: Minimum level for both sinks
        log_file: Log file path, or None to log to stderr only
    """
    logger.remove()
    logger.add(sys.stderr, level=level)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            encoding="utf-8",
            enqueue=True,
        )
