"""
PathWatch Utilities Package.

Configuration and logging shared across the backend.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.logger import configure_logging, get_logger, shutdown_logging, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "shutdown_logging",
    "LoggerMixin",
]
