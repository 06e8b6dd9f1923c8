"""Shared fixtures."""

import asyncio
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from liveconf import ConfigModule
from liveconf.config import reset_settings
from liveconf.core.loader import LoadOptions


class StaticLoader:
    """Loader returning whatever ``data`` currently holds."""

    def __init__(self, data: dict[str, Any] | None = None):
        self.data = data if data is not None else {}
        self.calls = 0

    async def load(self, options: LoadOptions) -> dict[str, Any]:
        self.calls += 1
        return self.data


class FailingLoader:
    """Loader whose load always raises ``error``."""

    def __init__(self, error: Exception):
        self.error = error

    async def load(self, options: LoadOptions) -> dict[str, Any]:
        raise self.error


class SlowLoader(StaticLoader):
    """StaticLoader that yields to the event loop for ``delay`` seconds first."""

    def __init__(self, data: dict[str, Any] | None = None, delay: float = 0.02):
        super().__init__(data)
        self.delay = delay

    async def load(self, options: LoadOptions) -> dict[str, Any]:
        await asyncio.sleep(self.delay)
        return await super().load(options)


class WatchableStaticLoader(StaticLoader):
    """StaticLoader that records the reload callback it is given."""

    def __init__(self, data: dict[str, Any] | None = None):
        super().__init__(data)
        self.on_reload: Any = None
        self.disposed = 0

    def start_watch(self, on_reload: Any) -> Any:
        self.on_reload = on_reload
        return self.dispose

    def dispose(self) -> None:
        self.disposed += 1


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Re-read LIVECONF_* settings for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def module() -> Iterator[ConfigModule]:
    """Isolated ConfigModule."""
    config_module = ConfigModule()
    yield config_module
    config_module.reset()


@pytest.fixture
def make_loader() -> Callable[..., StaticLoader]:
    """Factory for StaticLoader instances."""
    return StaticLoader


@pytest.fixture
def make_watchable_loader() -> Callable[..., WatchableStaticLoader]:
    """Factory for WatchableStaticLoader instances."""
    return WatchableStaticLoader


@pytest.fixture
def make_failing_loader() -> Callable[[Exception], FailingLoader]:
    """Factory for FailingLoader instances."""
    return FailingLoader


@pytest.fixture
def make_slow_loader() -> Callable[..., SlowLoader]:
    """Factory for SlowLoader instances."""
    return SlowLoader
