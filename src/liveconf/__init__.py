"""liveconf: live, multi-source configuration for asyncio applications.

Loads key/value data from the environment, dotenv, JSON, YAML and TOML
sources, merges it deterministically, binds scoped subtrees onto pydantic
models and keeps those models fresh in place while sources change.
"""

from liveconf.core import (
    ConfigError,
    ConfigFragment,
    ConfigLoader,
    ConfigParseError,
    ConfigurationDefinition,
    ConfigurationFactory,
    ConfigurationNotFoundError,
    ConfigurationProperty,
    ConfigValidationError,
    DefinitionRegistry,
    FieldViolation,
    LoadOptions,
    MergedConfig,
    RawConfigRegistry,
    SourceUnavailableError,
    WatchableConfigLoader,
    WatchError,
)
from liveconf.loaders import (
    CompositeLoader,
    DotenvLoader,
    EnvLoader,
    FunctionLoader,
    JsonFileLoader,
    TomlFileLoader,
    YamlFileLoader,
    compose_loader,
)
from liveconf.module import (
    ConfigModule,
    config_key,
    config_name,
    configure,
    create_watch_manager,
    default_module,
    get,
    get_or_fail,
    preload,
    register,
    register_property,
    reset,
)
from liveconf.runtime import ConfigOptions, LoaderResolver, RuntimeConfig
from liveconf.watch import FileWatcher, WatchManager, WatchOptions

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "ConfigModule",
    "default_module",
    "configure",
    "preload",
    "get",
    "get_or_fail",
    "register",
    "register_property",
    "config_key",
    "config_name",
    "create_watch_manager",
    "reset",
    # Runtime
    "ConfigOptions",
    "RuntimeConfig",
    "LoaderResolver",
    # Loaders
    "ConfigLoader",
    "WatchableConfigLoader",
    "LoadOptions",
    "EnvLoader",
    "DotenvLoader",
    "JsonFileLoader",
    "YamlFileLoader",
    "TomlFileLoader",
    "CompositeLoader",
    "FunctionLoader",
    "compose_loader",
    # Core
    "MergedConfig",
    "ConfigFragment",
    "RawConfigRegistry",
    "ConfigurationFactory",
    "ConfigurationDefinition",
    "ConfigurationProperty",
    "DefinitionRegistry",
    # Watching
    "FileWatcher",
    "WatchManager",
    "WatchOptions",
    # Errors
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "ConfigurationNotFoundError",
    "FieldViolation",
    "SourceUnavailableError",
    "WatchError",
]
