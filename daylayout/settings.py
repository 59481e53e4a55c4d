"""Runtime configuration, read once from the environment at import."""

from __future__ import annotations

import os
from datetime import timedelta


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() not in ("0", "false", "no")


# Layout engine
MIN_DURATION_MINUTES = int(os.getenv("LAYOUT_MIN_DURATION_MINUTES", "30"))
MIN_DURATION = timedelta(minutes=MIN_DURATION_MINUTES)
ARRANGER = os.getenv("LAYOUT_ARRANGER", "side").lower()
PIXELS_PER_MINUTE = float(os.getenv("LAYOUT_PIXELS_PER_MINUTE", "1.0"))

# Behavior
CACHE_ENABLED = _flag("LAYOUT_CACHE_ENABLED", "true")
CACHE_SIZE = int(os.getenv("LAYOUT_CACHE_SIZE", "128"))

# Logging (consumed by daylayout.logger)
LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO").upper()
LOG_COLORIZE = _flag("APP_LOG_COLORIZE", "true")
LOG_FORMAT = os.getenv(
    "APP_LOG_FORMAT",
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <7}</level> | {message}",
)
