"""Core of the configuration engine: trees, fragments, definitions and binding."""

from liveconf.core.definitions import (
    ConfigurationDefinition,
    ConfigurationProperty,
    DefinitionRegistry,
)
from liveconf.core.errors import (
    ConfigError,
    ConfigParseError,
    ConfigurationNotFoundError,
    ConfigValidationError,
    FieldViolation,
    SourceUnavailableError,
    WatchError,
)
from liveconf.core.factory import ConfigurationFactory
from liveconf.core.loader import (
    ConfigLoader,
    Disposer,
    LoadOptions,
    WatchableConfigLoader,
    is_watchable,
)
from liveconf.core.raw_registry import ConfigFragment, LoadFailure, RawConfigRegistry
from liveconf.core.tree import MergedConfig, deep_merge, deep_merge_all, to_snake_case

__all__ = [
    "ConfigurationDefinition",
    "ConfigurationProperty",
    "DefinitionRegistry",
    "ConfigError",
    "ConfigParseError",
    "ConfigurationNotFoundError",
    "ConfigValidationError",
    "FieldViolation",
    "SourceUnavailableError",
    "WatchError",
    "ConfigurationFactory",
    "ConfigLoader",
    "Disposer",
    "LoadOptions",
    "WatchableConfigLoader",
    "is_watchable",
    "ConfigFragment",
    "LoadFailure",
    "RawConfigRegistry",
    "MergedConfig",
    "deep_merge",
    "deep_merge_all",
    "to_snake_case",
]
