import sys

from loguru import logger

import daylayout.settings as settings


def configure_logging(
    *,
    level: str | None = None,
    colorize: bool | None = None,
    format: str | None = None,
):
    """
    Parameters:
    - level: minimum log level to output (e.g., "DEBUG", "INFO").
    - colorize: whether to use ANSI colors in the console.
    - format: Loguru format string for console output.

    Anything left as None falls back to the APP_LOG_* environment settings.
    """
    effective_level = level or settings.LOG_LEVEL
    effective_colorize = settings.LOG_COLORIZE if colorize is None else colorize
    effective_format = format or settings.LOG_FORMAT

    logger.remove()

    logger.add(
        sys.stdout,
        level=effective_level,
        colorize=effective_colorize,
        format=effective_format,
    )
