"""Loader capability contracts.

A loader produces raw key/value data asynchronously. Some loaders can also
watch their source and report changes; those expose ``start_watch``.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

RawData = dict[str, Any]
ReloadCallback = Callable[[], Awaitable[None]]
Disposer = Callable[[], Awaitable[None] | None]


@dataclass(frozen=True)
class LoadOptions:
    """Options passed to every ``load`` call.

    Attributes:
        debug: Emit extra diagnostics.
        suppress_warnings: Do not warn about missing sources.
    """

    debug: bool = False
    suppress_warnings: bool = False


@runtime_checkable
class ConfigLoader(Protocol):
    """Anything that can load raw configuration data."""

    async def load(self, options: LoadOptions) -> RawData:
        """Load the current raw data of the source."""
        ...


@runtime_checkable
class WatchableConfigLoader(ConfigLoader, Protocol):
    """A loader that can also notify about changes of its source."""

    def start_watch(self, on_reload: ReloadCallback) -> Disposer:
        """Start watching; ``on_reload`` is awaited after every change.

        Returns:
            A disposer that stops watching. It may return an awaitable.
        """
        ...


def is_watchable(loader: object) -> bool:
    """Return True if ``loader`` exposes an enabled watch capability.

    File loaders always define ``start_watch`` but report ``watchable`` as
    False while hot reload is disabled.
    """
    if not callable(getattr(loader, "start_watch", None)):
        return False
    return bool(getattr(loader, "watchable", True))


def describe_loader(loader: object) -> str:
    """Short human-readable name of a loader for log events."""
    path = getattr(loader, "path", None)
    name = type(loader).__name__
    return f"{name}({path})" if path is not None else name
