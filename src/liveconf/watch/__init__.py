"""Change watching: file watch drivers and the reload-orchestrating manager."""

from liveconf.watch.driver import FileWatcher, create_file_watcher
from liveconf.watch.manager import WatchManager
from liveconf.watch.options import HotReloadConfig, WatchOptions, normalize_hot_reload

__all__ = [
    "FileWatcher",
    "create_file_watcher",
    "WatchManager",
    "WatchOptions",
    "HotReloadConfig",
    "normalize_hot_reload",
]
