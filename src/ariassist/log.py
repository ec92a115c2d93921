"""Logger configuration for ariassist.

The library logs through loguru but stays silent until an application opts in
by calling ``setup_logger``.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import LOG_CONSOLE_FORMAT, LOG_FILE_FORMAT


def setup_logger(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure loguru with console and optional file output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only console logging.
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
    """
    logger.remove()
    logger.enable("ariassist")

    logger.add(
        sys.stderr,
        format=LOG_CONSOLE_FORMAT,
        level=level.upper(),
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=LOG_FILE_FORMAT,
            level=level.upper(),
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
        )

    logger.info(f"Logger initialized with level={level.upper()}")
