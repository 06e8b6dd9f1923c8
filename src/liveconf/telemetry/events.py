"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# Source events
SOURCE_UNAVAILABLE = "source_unavailable"
FRAGMENT_LOADED = "fragment_loaded"
FRAGMENT_LOAD_FAILED = "fragment_load_failed"

# Binding events
CONFIGURATION_BUILT = "configuration_built"
CONFIGURATION_INVALID = "configuration_invalid"
CONFIG_RELOADED = "config_reloaded"
CONFIG_RELOAD_FAILED = "config_reload_failed"
CONFIG_PRELOADED = "config_preloaded"

# Watch events
WATCHER_STARTED = "watcher_started"
WATCHER_START_FAILED = "watcher_start_failed"
WATCHER_STOPPED = "watcher_stopped"
WATCHER_DISPOSE_FAILED = "watcher_dispose_failed"
WATCH_ERROR = "watch_error"
SOURCE_CHANGED = "source_changed"
CALLBACK_FAILED = "watch_callback_failed"
