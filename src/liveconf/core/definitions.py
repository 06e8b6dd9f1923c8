"""Configuration definitions and per-property binding rules.

A definition declares that a pydantic model binds from a named subtree of
the merged configuration. Binding rules refine how individual fields are
fed: from an absolute path elsewhere in the tree, or not at all.

Registration is an explicit call made next to the model definition:

    >>> registry = DefinitionRegistry()
    >>> class DatabaseConfig(BaseModel):
    ...     host: str = "localhost"
    ...     password: str
    >>> registry.register(DatabaseConfig, scope="database")
    >>> registry.register_property(DatabaseConfig, "password", bind="secrets.db_password")
"""

from dataclasses import dataclass

from pydantic import BaseModel

from liveconf.core.errors import ConfigError
from liveconf.core.tree import to_snake_case


def normalize_path(path: str) -> str:
    """Normalize every segment of a dotted path like a source key."""
    return ".".join(to_snake_case(segment) for segment in path.split(".") if segment)


@dataclass(frozen=True)
class ConfigurationDefinition:
    """Binds a configuration model to a scope of the merged tree.

    Attributes:
        ctor: The pydantic model class.
        scope: Normalized dotted path of the subtree; empty means the root.
    """

    ctor: type[BaseModel]
    scope: str = ""


@dataclass(frozen=True)
class ConfigurationProperty:
    """Binding rule for one field.

    Attributes:
        property_key: Field name on the model.
        bind: Absolute dotted path in the merged tree overriding the default
            scope-relative lookup.
        exclude: Never bind this field from configuration.
    """

    property_key: str
    bind: str | None = None
    exclude: bool = False


class DefinitionRegistry:
    """Ordered, append-only store of definitions and binding rules.

    One definition per model type; the first registration fixes its scope.
    """

    def __init__(self) -> None:
        self._definitions: dict[type[BaseModel], ConfigurationDefinition] = {}
        self._properties: dict[type[BaseModel], dict[str, ConfigurationProperty]] = {}

    def register(self, ctor: type[BaseModel], scope: str = "") -> ConfigurationDefinition:
        """Register ``ctor`` to bind from ``scope``.

        Registering the same type again with the same scope is a no-op.

        Raises:
            TypeError: If ``ctor`` is not a pydantic model class.
            ConfigError: If ``ctor`` is already registered with another scope.
        """
        if not (isinstance(ctor, type) and issubclass(ctor, BaseModel)):
            raise TypeError(f"Configuration types must be pydantic models, got {ctor!r}")

        definition = ConfigurationDefinition(ctor=ctor, scope=normalize_path(scope))
        existing = self._definitions.get(ctor)
        if existing is None:
            self._definitions[ctor] = definition
            return definition
        if existing.scope != definition.scope:
            raise ConfigError(
                f"{ctor.__name__} is already bound to scope {existing.scope!r}, "
                f"cannot rebind it to {definition.scope!r}"
            )
        return existing

    def register_property(
        self,
        ctor: type[BaseModel],
        property_key: str,
        bind: str | None = None,
        exclude: bool = False,
    ) -> ConfigurationProperty:
        """Record a binding rule; a later rule for the same field replaces the earlier one."""
        if not isinstance(property_key, str) or not property_key:
            raise TypeError(f"property_key must be a non-empty string, got {property_key!r}")

        rule = ConfigurationProperty(
            property_key=property_key,
            bind=normalize_path(bind) if bind else None,
            exclude=exclude,
        )
        self._properties.setdefault(ctor, {})[property_key] = rule
        return rule

    def get(self, ctor: type[BaseModel]) -> ConfigurationDefinition | None:
        return self._definitions.get(ctor)

    def get_all(self) -> list[ConfigurationDefinition]:
        """All definitions in registration order."""
        return list(self._definitions.values())

    def get_properties(self, ctor: type[BaseModel]) -> list[ConfigurationProperty]:
        """Binding rules for ``ctor``, including those declared on its base classes.

        Rules on a subclass override rules for the same field on a base.
        """
        merged: dict[str, ConfigurationProperty] = {}
        for klass in reversed(ctor.__mro__):
            merged.update(self._properties.get(klass, {}))
        return list(merged.values())

    def reset(self) -> None:
        """Forget every definition and rule (test isolation)."""
        self._definitions.clear()
        self._properties.clear()

    def __contains__(self, ctor: object) -> bool:
        return ctor in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
