"""File watch driver.

Turns a file path into reload notifications, in one of two modes:

- ``watch``: watchdog filesystem events, debounced. Every event restarts a
  timer; the reload fires once the timer elapses without a newer event, so
  a burst of saves yields exactly one reload.
- ``interval``: mtime polling. The first tick records a baseline; later
  ticks reload only when the mtime differs from the last observation
  (a file appearing or disappearing counts as a difference).

Failures of the watch mechanism are reported through ``on_error`` and the
log, never raised into the caller. In ``watch`` mode that covers failures to
schedule or start the observer; an error raised later inside watchdog's own
emitter thread stays in that thread and is not reported. Use ``interval``
mode where such failures must surface, since every failed stat reaches
``on_error``.
"""

import asyncio
import inspect
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from liveconf.core.errors import WatchError
from liveconf.core.loader import Disposer, RawData, ReloadCallback
from liveconf.telemetry import (
    CALLBACK_FAILED,
    CONFIG_RELOAD_FAILED,
    SOURCE_CHANGED,
    WATCH_ERROR,
    WATCHER_STARTED,
    WATCHER_STOPPED,
    get_logger,
)
from liveconf.watch.options import WatchOptions

log = get_logger(__name__)

# inotify also reports opens and read-only closes; those are not changes
_IGNORED_EVENTS = frozenset({"opened", "closed_no_write"})
_UNSET: Any = object()


class _FileEventHandler(FileSystemEventHandler):
    """Forwards events for one file from the observer thread to the event loop."""

    def __init__(self, path: Path, loop: asyncio.AbstractEventLoop, notify: Callable[[], None]):
        self._target = str(path)
        self._loop = loop
        self._notify = notify

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in _IGNORED_EVENTS:
            return
        paths = {os.fsdecode(event.src_path), os.fsdecode(getattr(event, "dest_path", "") or "")}
        if self._target not in paths:
            return
        try:
            self._loop.call_soon_threadsafe(self._notify)
        except RuntimeError:
            # Event loop already closed; the watcher is being torn down.
            return


class FileWatcher:
    """Watches one file and awaits ``on_reload`` after each (debounced) change.

    Usage:
        >>> watcher = FileWatcher("config.yaml", WatchOptions(), load, on_reload)
        >>> watcher.start()
        >>> # ... file edits trigger on_reload ...
        >>> await watcher.close()
    """

    def __init__(
        self,
        path: Path | str,
        options: WatchOptions,
        load: Callable[[], Awaitable[RawData]],
        on_reload: ReloadCallback,
        name: str = "FileWatcher",
    ):
        """Initialize the watcher; nothing is watched until start().

        Args:
            path: File to watch. It does not need to exist yet.
            options: Mode, timings and callbacks.
            load: Re-reads the source; used to feed ``options.on_change``.
            on_reload: Awaited after every detected change.
            name: Label used in log events.
        """
        self.path = Path(os.path.abspath(path))
        self.options = options
        self._load = load
        self._on_reload = on_reload
        self._log = log.bind(watcher=name, path=str(self.path))
        self._loop: asyncio.AbstractEventLoop | None = None
        self._observer: Any = None
        self._timer: asyncio.TimerHandle | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._started = False
        self._closed = False

    @property
    def running(self) -> bool:
        return self._started and not self._closed

    def start(self) -> None:
        """Start watching. Must be called from within a running event loop.

        Raises:
            WatchError: If the watcher was already started.
        """
        if self._started:
            raise WatchError(f"Watcher for {self.path} already started")

        self._loop = asyncio.get_running_loop()
        self._started = True

        if self.options.type == "interval":
            self._poll_task = self._loop.create_task(self._poll())
        else:
            self._start_observer()

        self._log.info(
            WATCHER_STARTED,
            mode=self.options.type,
            debounce_ms=self.options.debounce_ms,
            interval_ms=self.options.interval_ms,
        )

    def notify(self) -> None:
        """Record one raw change event and (re)start the debounce timer."""
        if self._closed or self._loop is None:
            return
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._loop.call_later(self.options.debounce_ms / 1000, self._fire)

    async def close(self) -> None:
        """Stop watching. Idempotent.

        A reload that already fired is allowed to finish.
        """
        if self._closed:
            return
        self._closed = True

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass  # Expected

        if self._observer is not None:
            observer, self._observer = self._observer, None
            observer.stop()
            await asyncio.to_thread(observer.join, 2.0)

        if self._started:
            self._log.info(WATCHER_STOPPED, mode=self.options.type)

    def _start_observer(self) -> None:
        assert self._loop is not None
        observer = Observer()
        handler = _FileEventHandler(self.path, self._loop, self.notify)
        try:
            observer.schedule(handler, str(self.path.parent), recursive=False)
            observer.daemon = True
            observer.start()
        except OSError as e:
            self._spawn(self._report(WatchError(f"Cannot watch {self.path}: {e}")))
            return
        self._observer = observer

    def _fire(self) -> None:
        self._timer = None
        if not self._closed:
            self._spawn(self._reload())

    def _spawn(self, coro: Awaitable[None]) -> None:
        assert self._loop is not None
        task = self._loop.create_task(coro)  # type: ignore[arg-type]
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _reload(self) -> None:
        self._log.info(SOURCE_CHANGED, mode=self.options.type)
        try:
            if self.options.on_change is not None:
                data = await self._load()
                await self._call_safely(self.options.on_change, data)
            await self._on_reload()
        except Exception as e:
            self._log.error(CONFIG_RELOAD_FAILED, error=str(e), error_type=type(e).__name__)
            await self._call_safely(self.options.on_error, e)

    async def _poll(self) -> None:
        last = _UNSET
        while not self._closed:
            try:
                current = await asyncio.to_thread(self._mtime)
            except OSError as e:
                await self._report(WatchError(f"Cannot stat {self.path}: {e}"))
            else:
                if last is not _UNSET and current != last:
                    self._spawn(self._reload())
                last = current
            await asyncio.sleep(self.options.interval_ms / 1000)

    def _mtime(self) -> int | None:
        try:
            return self.path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    async def _report(self, error: WatchError) -> None:
        self._log.error(WATCH_ERROR, error=str(error))
        await self._call_safely(self.options.on_error, error)

    async def _call_safely(self, callback: Callable[..., Any] | None, *args: Any) -> None:
        if callback is None:
            return
        try:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self._log.warning(
                CALLBACK_FAILED,
                callback=getattr(callback, "__name__", repr(callback)),
                error=str(e),
            )


def create_file_watcher(
    path: Path | str,
    options: WatchOptions,
    load: Callable[[], Awaitable[RawData]],
    on_reload: ReloadCallback,
    name: str = "FileWatcher",
) -> Disposer:
    """Start a FileWatcher and return its disposer."""
    watcher = FileWatcher(path, options, load, on_reload, name=name)
    watcher.start()
    return watcher.close
