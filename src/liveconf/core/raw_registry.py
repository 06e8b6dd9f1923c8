"""Raw configuration registry.

Holds one fragment per loader (the raw data as loaded plus its key-normalized
form) and produces deterministically merged snapshots on demand. Reading
never performs I/O; only ``load`` and ``reload`` call loaders.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from liveconf.core.errors import ConfigParseError
from liveconf.core.loader import ConfigLoader, LoadOptions, describe_loader
from liveconf.core.tree import MergedConfig, deep_merge_all, freeze, normalize_keys
from liveconf.telemetry import FRAGMENT_LOAD_FAILED, FRAGMENT_LOADED, get_logger

if TYPE_CHECKING:
    from liveconf.runtime import RuntimeConfig

log = get_logger(__name__)


@dataclass(frozen=True)
class ConfigFragment:
    """Data produced by one loader. Replaced wholesale, never patched."""

    loader: ConfigLoader
    raw_data: Mapping[str, Any]
    normalized_data: Mapping[str, Any]


@dataclass(frozen=True)
class LoadFailure:
    """A loader whose ``load`` raised during a registry load or reload."""

    loader: ConfigLoader
    error: Exception


def _unique(loaders: Iterable[ConfigLoader]) -> list[ConfigLoader]:
    seen: set[int] = set()
    unique = []
    for loader in loaders:
        if id(loader) not in seen:
            seen.add(id(loader))
            unique.append(loader)
    return unique


class RawConfigRegistry:
    """Per-loader fragment cache.

    Fragments are keyed by loader identity; the same loader instance always
    maps to the same fragment slot.
    """

    def __init__(self) -> None:
        # id(loader) -> fragment; the fragment keeps the loader alive so ids stay unique
        self._fragments: dict[int, ConfigFragment] = {}
        # declaration order, fixed when a loader is first seen
        self._order: list[ConfigLoader] = []
        self._load_options = LoadOptions()

    async def load(self, rc: "RuntimeConfig") -> list[LoadFailure]:
        """Ensure every loader of ``rc`` has a fragment.

        Loaders that already have a fragment are not reloaded.

        Args:
            rc: Runtime configuration whose loaders should be present.

        Returns:
            Loaders that failed, each with its exception. Other loaders are
            unaffected by a failure.
        """
        self._load_options = rc.load_options
        self._declare(rc.loaders)
        pending = [loader for loader in _unique(rc.loaders) if id(loader) not in self._fragments]
        return await self._load_all(pending)

    async def reload(self, loader: ConfigLoader | None = None) -> list[LoadFailure]:
        """Recompute the fragment of ``loader``, or of every known loader.

        A loader that fails keeps its previous fragment.

        Returns:
            Loaders that failed, each with its exception.
        """
        if loader is not None:
            self._declare([loader])
            targets = [loader]
        else:
            targets = self.loaders
        return await self._load_all(targets)

    def read(self, rc: "RuntimeConfig | None" = None) -> MergedConfig:
        """Merge the cached fragments into a fresh snapshot.

        Args:
            rc: Selects the loaders to merge, in its declaration order. When
                omitted, every known fragment is merged in the order its
                loader was first declared, regardless of which load finished first.

        Returns:
            New MergedConfig; later loaders win on conflicting leaves.
        """
        if rc is not None:
            targets = rc.loaders
        else:
            targets = self._order

        normalized = [
            self._fragments[id(loader)].normalized_data
            for loader in targets
            if id(loader) in self._fragments
        ]
        return MergedConfig(deep_merge_all(normalized))

    def fragment(self, loader: ConfigLoader) -> ConfigFragment | None:
        """Cached fragment of ``loader``, if any."""
        return self._fragments.get(id(loader))

    @property
    def loaders(self) -> list[ConfigLoader]:
        """Loaders with a fragment, in declaration order."""
        return [loader for loader in self._order if id(loader) in self._fragments]

    def reset(self) -> None:
        """Drop every fragment (test isolation)."""
        self._fragments.clear()
        self._order.clear()
        self._load_options = LoadOptions()

    def _declare(self, loaders: Iterable[ConfigLoader]) -> None:
        known = {id(loader) for loader in self._order}
        for loader in _unique(loaders):
            if id(loader) not in known:
                self._order.append(loader)

    async def _load_all(self, loaders: list[ConfigLoader]) -> list[LoadFailure]:
        results = await asyncio.gather(
            *(self._load_fragment(loader) for loader in loaders), return_exceptions=True
        )

        failures = []
        for loader, result in zip(loaders, results):
            if not isinstance(result, BaseException):
                continue
            if not isinstance(result, Exception):
                raise result
            log.error(
                FRAGMENT_LOAD_FAILED,
                loader=describe_loader(loader),
                error=str(result),
                error_type=type(result).__name__,
            )
            failures.append(LoadFailure(loader=loader, error=result))
        return failures

    async def _load_fragment(self, loader: ConfigLoader) -> None:
        raw = await loader.load(self._load_options)
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ConfigParseError(
                f"{describe_loader(loader)} returned {type(raw).__name__}, expected a mapping"
            )

        normalized = normalize_keys(raw)
        self._fragments[id(loader)] = ConfigFragment(
            loader=loader,
            raw_data=freeze(raw),
            normalized_data=freeze(normalized),
        )
        log.debug(FRAGMENT_LOADED, loader=describe_loader(loader), keys=len(normalized))
