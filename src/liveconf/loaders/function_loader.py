"""Adapter turning a plain callable into a loader."""

import inspect
from collections.abc import Callable
from typing import Any

from liveconf.core.loader import LoadOptions, RawData

LoadFunction = Callable[[LoadOptions], Any]


class FunctionLoader:
    """Wraps ``fn(options) -> mapping`` (sync or async) as a loader."""

    def __init__(self, fn: LoadFunction):
        self.fn = fn

    async def load(self, options: LoadOptions = LoadOptions()) -> RawData:
        result = self.fn(options)
        if inspect.isawaitable(result):
            result = await result
        return result if result is not None else {}

    def __repr__(self) -> str:
        return f"FunctionLoader({getattr(self.fn, '__name__', self.fn)!s})"
