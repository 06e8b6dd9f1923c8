"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from liveconf.telemetry.events import (
    CALLBACK_FAILED,
    CONFIG_PRELOADED,
    CONFIG_RELOAD_FAILED,
    CONFIG_RELOADED,
    CONFIGURATION_BUILT,
    CONFIGURATION_INVALID,
    FRAGMENT_LOAD_FAILED,
    FRAGMENT_LOADED,
    SOURCE_CHANGED,
    SOURCE_UNAVAILABLE,
    WATCH_ERROR,
    WATCHER_DISPOSE_FAILED,
    WATCHER_START_FAILED,
    WATCHER_STARTED,
    WATCHER_STOPPED,
)
from liveconf.telemetry.logger import configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    "SOURCE_UNAVAILABLE",
    "FRAGMENT_LOADED",
    "FRAGMENT_LOAD_FAILED",
    "CONFIGURATION_BUILT",
    "CONFIGURATION_INVALID",
    "CONFIG_RELOADED",
    "CONFIG_RELOAD_FAILED",
    "CONFIG_PRELOADED",
    "WATCHER_STARTED",
    "WATCHER_START_FAILED",
    "WATCHER_STOPPED",
    "WATCHER_DISPOSE_FAILED",
    "WATCH_ERROR",
    "SOURCE_CHANGED",
    "CALLBACK_FAILED",
]
