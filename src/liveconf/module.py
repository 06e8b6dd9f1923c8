"""Host entry points.

ConfigModule wires the registries together and exposes what an application
calls at startup and at runtime:

    >>> from pydantic import BaseModel
    >>> import liveconf
    >>> class ServerConfig(BaseModel):
    ...     host: str = "127.0.0.1"
    ...     port: int
    >>> liveconf.register(ServerConfig, scope="server")
    >>> liveconf.configure(loaders=[liveconf.EnvLoader(), "config/.env"])
    >>> rc = await liveconf.preload()
    >>> server = liveconf.get(ServerConfig)
    >>> async with liveconf.create_watch_manager(rc):
    ...     ...  # server is refreshed in place while sources change

The module-level functions delegate to a default ConfigModule instance;
tests and embedders can construct their own.
"""

import warnings
from typing import Any, TypeVar, cast

from pydantic import BaseModel

from liveconf.core.definitions import (
    ConfigurationDefinition,
    ConfigurationProperty,
    DefinitionRegistry,
)
from liveconf.core.errors import ConfigurationNotFoundError
from liveconf.core.factory import ConfigurationFactory
from liveconf.core.raw_registry import RawConfigRegistry
from liveconf.runtime import ConfigOptions, LoaderResolver, RuntimeConfig
from liveconf.telemetry import CONFIG_PRELOADED, get_logger
from liveconf.watch.manager import WatchManager

log = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class ConfigModule:
    """Owns the definition registry, fragment registry and instance cache."""

    def __init__(self) -> None:
        self.definitions = DefinitionRegistry()
        self.raw_registry = RawConfigRegistry()
        self.factory = ConfigurationFactory(self.definitions)
        self.resolver = LoaderResolver()
        self._defaults: ConfigOptions | None = None

    @property
    def defaults(self) -> ConfigOptions | None:
        """Options set by ``configure()``, if any."""
        return self._defaults

    def configure(self, options: ConfigOptions | None = None, **kwargs: Any) -> None:
        """Set the process-wide default options.

        Accepts a ConfigOptions or its fields as keyword arguments.
        """
        self._defaults = options if options is not None else ConfigOptions(**kwargs)

    def runtime_config(self, options: ConfigOptions | None = None, **kwargs: Any) -> RuntimeConfig:
        """Build a RuntimeConfig from ``options`` merged over the defaults."""
        if options is None and kwargs:
            options = ConfigOptions(**kwargs)
        return RuntimeConfig.create(options, defaults=self._defaults, resolver=self.resolver)

    def register(self, ctor: type[BaseModel], scope: str = "") -> ConfigurationDefinition:
        """Declare that ``ctor`` binds from ``scope`` (empty = root)."""
        return self.definitions.register(ctor, scope)

    def register_property(
        self,
        ctor: type[BaseModel],
        property_key: str,
        bind: str | None = None,
        exclude: bool = False,
    ) -> ConfigurationProperty:
        """Declare a binding rule for one field of ``ctor``."""
        return self.definitions.register_property(ctor, property_key, bind=bind, exclude=exclude)

    def config_key(self, ctor: type[BaseModel], property_key: str, bind: str) -> ConfigurationProperty:
        """Bind ``property_key`` of ``ctor`` from the absolute path ``bind``."""
        return self.register_property(ctor, property_key, bind=bind)

    def config_name(self, ctor: type[BaseModel], property_key: str, name: str) -> ConfigurationProperty:
        """Deprecated alias of config_key."""
        warnings.warn(
            "config_name() is deprecated, use config_key() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.config_key(ctor, property_key, name)

    async def preload(self, options: ConfigOptions | None = None, **kwargs: Any) -> RuntimeConfig:
        """Load every source and build every configuration instance.

        Raises:
            ConfigParseError: If a source is malformed (raised after all
                sources finished loading).
            ConfigValidationError: If a configuration fails validation.
            ConfigurationNotFoundError: If a listed provider was never registered.

        Returns:
            The RuntimeConfig used, for handing to create_watch_manager().
        """
        rc = self.runtime_config(options, **kwargs)

        failures = await self.raw_registry.load(rc)
        if failures:
            raise failures[0].error

        merged = self.raw_registry.read(rc)
        instances = await self.factory.compile(rc, merged)
        self.factory.seed(instances)

        log.info(
            CONFIG_PRELOADED,
            sources=len(rc.loaders),
            configurations=[ctor.__name__ for ctor in instances],
        )
        return rc

    def get(self, ctor: type[T]) -> T | None:
        """Live instance of ``ctor``, or None if it was never built."""
        return cast(T | None, self.factory.get(ctor))

    async def get_or_fail(self, ctor: type[T]) -> T:
        """Live instance of ``ctor``, preloading with the defaults if needed.

        Raises:
            ConfigurationNotFoundError: If no instance exists and none can be built.
        """
        instance = self.factory.get(ctor)
        if instance is None and self._defaults is not None:
            await self.preload()
            instance = self.factory.get(ctor)

        if instance is None:
            raise ConfigurationNotFoundError(
                f"No configuration instance for {ctor.__name__}: register it and "
                "call preload() or configure() first"
            )
        return cast(T, instance)

    def create_watch_manager(self, rc: RuntimeConfig | None = None) -> WatchManager:
        """Watch manager driving reloads into this module's instances."""
        return WatchManager(rc or self.runtime_config(), self.raw_registry, self.factory)

    def reset(self) -> None:
        """Forget definitions, fragments, instances and defaults (test isolation)."""
        self.definitions.reset()
        self.raw_registry.reset()
        self.factory.reset()
        self.resolver.reset()
        self._defaults = None


default_module = ConfigModule()

configure = default_module.configure
preload = default_module.preload
get = default_module.get
get_or_fail = default_module.get_or_fail
register = default_module.register
register_property = default_module.register_property
config_key = default_module.config_key
config_name = default_module.config_name
create_watch_manager = default_module.create_watch_manager
reset = default_module.reset
