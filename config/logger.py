import sys
from loguru import logger

from config.environment import log_level, log_file

_configured = False


def setup_logging(level=None, file_path=None):
    """
    Configure loguru sinks once per process.

    A colored stdout sink at the requested level, plus an optional
    rotating file sink that always records DEBUG.
    """
    global _configured
    if _configured:
        return logger

    level = level or log_level
    file_path = file_path or log_file

    logger.remove()
    logger.add(
        sys.stdout,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{message}</cyan>"
        ),
        level=level,
        colorize=True,
    )

    if file_path:
        logger.add(
            file_path,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            encoding="utf-8",
        )

    _configured = True
    return logger
