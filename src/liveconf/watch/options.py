"""Watch options for hot-reloading sources."""

from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from liveconf.config import get_settings


def _default_debounce_ms() -> int:
    return get_settings().debounce_ms


def _default_interval_ms() -> int:
    return get_settings().interval_ms


class WatchOptions(BaseModel):
    """How a file source is watched.

    Attributes:
        type: ``"watch"`` for filesystem events with debouncing, ``"interval"``
            for mtime polling.
        debounce_ms: Quiet period after the last event before reloading.
        interval_ms: Polling period in interval mode.
        on_change: Called with the freshly loaded raw data before the reload
            propagates. May be sync or async.
        on_error: Called with watch or reload failures. May be sync or async.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["watch", "interval"] = "watch"
    debounce_ms: int = Field(default_factory=_default_debounce_ms, ge=0)
    interval_ms: int = Field(default_factory=_default_interval_ms, gt=0)
    on_change: Callable[[dict[str, Any]], Any] | None = None
    on_error: Callable[[Exception], Any] | None = None


HotReloadConfig = bool | WatchOptions | Mapping[str, Any] | None


def normalize_hot_reload(config: HotReloadConfig) -> WatchOptions | None:
    """Turn a loader's ``hot_reload`` argument into WatchOptions.

    ``True`` enables event watching with defaults, ``False``/``None`` disables
    watching, a mapping is validated into WatchOptions.
    """
    if config is None or config is False:
        return None
    if config is True:
        return WatchOptions()
    if isinstance(config, WatchOptions):
        return config
    return WatchOptions.model_validate(dict(config))
