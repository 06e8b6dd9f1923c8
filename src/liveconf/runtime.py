"""Runtime configuration.

A RuntimeConfig is the normalized, immutable view of the options of one
configuration session: which loaders to read, which configuration types to
build, and the warning/debug flags. Per-call options are merged over the
process-wide defaults set with ``configure()``.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel

from liveconf.core.loader import ConfigLoader, LoadOptions
from liveconf.loaders import DotenvLoader, EnvLoader, FunctionLoader, LoadFunction

LoaderSpec = Union[str, Path, ConfigLoader, LoadFunction]


@dataclass(frozen=True)
class ConfigOptions:
    """Caller-supplied options; ``None`` means "not set, use the default".

    Attributes:
        loaders: Sources in precedence order (later wins). Strings and paths
            are dotenv files, callables are wrapped in FunctionLoader.
            Defaults to ``[EnvLoader(), ".env"]``.
        providers: Configuration types to build. Defaults to every
            registered type.
        suppress_warnings: Do not warn about missing sources.
        debug: Log every built configuration instance.
    """

    loaders: Sequence[LoaderSpec] | None = None
    providers: Sequence[type[BaseModel]] | None = None
    suppress_warnings: bool | None = None
    debug: bool | None = None


class LoaderResolver:
    """Turns loader specs into loader instances.

    The same path or callable always resolves to the same loader instance,
    so its fragment is shared instead of being loaded again.
    """

    def __init__(self) -> None:
        self._cache: dict[Any, ConfigLoader] = {}

    def resolve(self, spec: LoaderSpec) -> ConfigLoader:
        """Resolve one spec.

        Raises:
            TypeError: If ``spec`` is neither a path, a loader nor a callable.
        """
        if isinstance(spec, (str, Path)):
            key: Any = ("dotenv", str(spec))
            if key not in self._cache:
                self._cache[key] = DotenvLoader(spec)
            return self._cache[key]
        if callable(getattr(spec, "load", None)):
            return spec  # type: ignore[return-value]
        if callable(spec):
            key = ("function", id(spec))
            if key not in self._cache:
                self._cache[key] = FunctionLoader(spec)
            return self._cache[key]
        raise TypeError(f"Unsupported loader specification: {spec!r}")

    def resolve_all(self, specs: Sequence[LoaderSpec] | None) -> tuple[ConfigLoader, ...]:
        """Resolve ``specs``; ``None`` resolves to the default sources."""
        if specs is None:
            return (self._default_env_loader(), self.resolve(".env"))
        return tuple(self.resolve(spec) for spec in specs)

    def reset(self) -> None:
        self._cache.clear()

    def _default_env_loader(self) -> ConfigLoader:
        if "env" not in self._cache:
            self._cache["env"] = EnvLoader()
        return self._cache["env"]


@dataclass(frozen=True)
class RuntimeConfig:
    """Normalized options of one configuration session."""

    loaders: tuple[ConfigLoader, ...]
    providers: tuple[type[BaseModel], ...] | None = None
    suppress_warnings: bool = False
    debug: bool = False

    @classmethod
    def create(
        cls,
        options: ConfigOptions | None = None,
        defaults: ConfigOptions | None = None,
        resolver: LoaderResolver | None = None,
    ) -> "RuntimeConfig":
        """Merge ``options`` over ``defaults`` and normalize the result.

        Args:
            options: Per-call options.
            defaults: Process-wide defaults from ``configure()``.
            resolver: Resolves loader specs; a fresh one is used if omitted.

        Returns:
            Immutable RuntimeConfig.
        """
        options = options or ConfigOptions()
        defaults = defaults or ConfigOptions()
        resolver = resolver or LoaderResolver()

        loaders = options.loaders if options.loaders is not None else defaults.loaders
        providers = options.providers if options.providers is not None else defaults.providers

        return cls(
            loaders=resolver.resolve_all(loaders),
            providers=tuple(providers) if providers is not None else None,
            suppress_warnings=bool(_first_set(options.suppress_warnings, defaults.suppress_warnings)),
            debug=bool(_first_set(options.debug, defaults.debug)),
        )

    @property
    def load_options(self) -> LoadOptions:
        return LoadOptions(debug=self.debug, suppress_warnings=self.suppress_warnings)


def _first_set(*values: bool | None) -> bool | None:
    for value in values:
        if value is not None:
            return value
    return None
