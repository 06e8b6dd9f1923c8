"""Composite loader: several sources presented as one fragment."""

import asyncio
import functools
import inspect
from collections.abc import Awaitable

from liveconf.core.errors import WatchError
from liveconf.core.loader import (
    ConfigLoader,
    Disposer,
    LoadOptions,
    RawData,
    ReloadCallback,
    is_watchable,
)
from liveconf.core.tree import deep_merge_all
from liveconf.loaders.function_loader import FunctionLoader, LoadFunction


class CompositeLoader:
    """Loads its children concurrently and deep-merges them in order.

    The composite is watchable when at least one child is; a change in any
    watchable child reloads the whole composite.
    """

    def __init__(self, loaders: list[ConfigLoader]):
        self.loaders = loaders

    @property
    def watchable(self) -> bool:
        return any(is_watchable(loader) for loader in self.loaders)

    async def load(self, options: LoadOptions = LoadOptions()) -> RawData:
        results = await asyncio.gather(*(loader.load(options) for loader in self.loaders))
        return deep_merge_all(result or {} for result in results)

    def start_watch(self, on_reload: ReloadCallback) -> Disposer:
        """Watch every watchable child; the disposer stops all of them.

        Raises:
            WatchError: If no child is watchable.
        """
        disposers = [
            loader.start_watch(on_reload)  # type: ignore[attr-defined]
            for loader in self.loaders
            if is_watchable(loader)
        ]
        if not disposers:
            raise WatchError("None of the composed loaders supports watching")
        return functools.partial(_dispose_all, disposers)

    def __repr__(self) -> str:
        return f"CompositeLoader({self.loaders!r})"


async def _dispose_all(disposers: list[Disposer]) -> None:
    pending: list[Awaitable[None]] = []
    for disposer in disposers:
        result = disposer()
        if inspect.isawaitable(result):
            pending.append(result)
    await asyncio.gather(*pending)


def compose_loader(*loaders: ConfigLoader | LoadFunction) -> CompositeLoader:
    """Combine loaders (or plain load functions) into one CompositeLoader.

    Example:
        >>> loader = compose_loader(YamlFileLoader("base.yaml"), YamlFileLoader("local.yaml"))
    """
    return CompositeLoader(
        [loader if hasattr(loader, "load") else FunctionLoader(loader) for loader in loaders]
    )
