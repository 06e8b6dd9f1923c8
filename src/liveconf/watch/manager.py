"""Watch manager.

Starts a watcher for every watchable loader of a runtime configuration and
runs the reload pipeline when one of them reports a change:

    raw registry reload(loader) → raw registry read(rc) → factory reload()

Reload cycles are serialized through one lock, so two sources changing at
the same time can never apply an older merge after a newer one.
"""

import asyncio
import functools
import inspect
from typing import TYPE_CHECKING

from liveconf.core.loader import ConfigLoader, Disposer, describe_loader, is_watchable
from liveconf.telemetry import (
    CONFIG_RELOAD_FAILED,
    WATCHER_DISPOSE_FAILED,
    WATCHER_START_FAILED,
    WATCHER_STARTED,
    WATCHER_STOPPED,
    get_logger,
)

if TYPE_CHECKING:
    from liveconf.core.factory import ConfigurationFactory
    from liveconf.core.raw_registry import RawConfigRegistry
    from liveconf.runtime import RuntimeConfig

log = get_logger(__name__)


class WatchManager:
    """Owns the watchers of one runtime configuration.

    Usage:
        >>> manager = WatchManager(rc, raw_registry, factory)
        >>> await manager.on_init()
        >>> # ... sources change, live instances update in place ...
        >>> await manager.on_destroy()
    """

    def __init__(
        self,
        rc: "RuntimeConfig",
        raw_registry: "RawConfigRegistry",
        factory: "ConfigurationFactory",
    ):
        self._rc = rc
        self._raw_registry = raw_registry
        self._factory = factory
        # id(loader) -> (loader, disposer)
        self._watchers: dict[int, tuple[ConfigLoader, Disposer]] = {}
        self._reload_lock = asyncio.Lock()

    @property
    def watching(self) -> int:
        """Number of active watchers."""
        return len(self._watchers)

    async def on_init(self) -> None:
        """Lifecycle hook: start watching every watchable loader."""
        await self.start_watching()

    async def on_destroy(self) -> None:
        """Lifecycle hook: dispose every watcher."""
        await self.stop_watching()

    async def __aenter__(self) -> "WatchManager":
        await self.on_init()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.on_destroy()

    async def start_watching(self) -> None:
        """Start a watcher per watchable loader.

        A loader that fails to start is logged and skipped; the others are
        still watched.
        """
        for loader in self._rc.loaders:
            if id(loader) in self._watchers or not is_watchable(loader):
                continue
            try:
                disposer = loader.start_watch(  # type: ignore[attr-defined]
                    functools.partial(self.reload_configuration, loader)
                )
            except Exception as e:
                log.error(
                    WATCHER_START_FAILED,
                    loader=describe_loader(loader),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            self._watchers[id(loader)] = (loader, disposer)

        if self._watchers:
            log.info(WATCHER_STARTED, sources=len(self._watchers))

    async def reload_configuration(self, loader: ConfigLoader | None = None) -> bool:
        """Run one reload cycle, scoped to ``loader`` (or every loader).

        Never raises: loader and validation failures are logged and the
        previously valid instances keep serving.

        Returns:
            True if the live instances were updated.
        """
        async with self._reload_lock:
            try:
                await self._raw_registry.reload(loader)
                merged = self._raw_registry.read(self._rc)
                return await self._factory.reload(self._rc, merged)
            except Exception as e:
                log.error(
                    CONFIG_RELOAD_FAILED,
                    loader=describe_loader(loader) if loader is not None else None,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return False

    async def stop_watching(self) -> None:
        """Dispose every watcher; individual failures are logged, not raised."""
        if not self._watchers:
            return

        entries = list(self._watchers.values())
        await asyncio.gather(*(self._dispose(loader, disposer) for loader, disposer in entries))
        self._watchers.clear()
        log.info(WATCHER_STOPPED, sources=len(entries))

    async def _dispose(self, loader: ConfigLoader, disposer: Disposer) -> None:
        try:
            result = disposer()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log.error(
                WATCHER_DISPOSE_FAILED,
                loader=describe_loader(loader),
                error=str(e),
                error_type=type(e).__name__,
            )
