"""Configuration factory.

Binds scoped subtrees of a MergedConfig onto registered pydantic models,
validates them, and keeps exactly one live instance per model type. On
reload the live instances are updated in place so every holder of a
reference sees the new values.
"""

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from liveconf.core.definitions import ConfigurationDefinition, DefinitionRegistry
from liveconf.core.errors import (
    ConfigurationNotFoundError,
    ConfigValidationError,
    FieldViolation,
)
from liveconf.core.tree import MISSING, MergedConfig, thaw
from liveconf.telemetry import (
    CONFIG_RELOAD_FAILED,
    CONFIG_RELOADED,
    CONFIGURATION_BUILT,
    CONFIGURATION_INVALID,
    get_logger,
)

if TYPE_CHECKING:
    from liveconf.runtime import RuntimeConfig

log = get_logger(__name__)


def _violations(error: ValidationError) -> list[FieldViolation]:
    violations = []
    for item in error.errors():
        missing = item["type"] == "missing"
        violations.append(
            FieldViolation(
                property=".".join(str(part) for part in item["loc"]),
                value=None if missing else item.get("input"),
                constraint=item["type"],
                requirement=item["msg"],
            )
        )
    return violations


def _update_in_place(target: BaseModel, source: BaseModel) -> None:
    """Make ``target`` carry the state of ``source`` without replacing it.

    Attributes absent from ``source`` are deleted, the rest overwritten or
    added. Writes go through ``__dict__`` so frozen models update too.
    """
    target_state = target.__dict__
    source_state = source.__dict__
    for key in list(target_state):
        if key not in source_state:
            del target_state[key]
    target_state.update(source_state)

    extra = source.__pydantic_extra__
    object.__setattr__(target, "__pydantic_extra__", dict(extra) if extra is not None else None)
    object.__setattr__(target, "__pydantic_fields_set__", set(source.model_fields_set))


class ConfigurationFactory:
    """Builds, caches and refreshes configuration instances."""

    def __init__(self, definitions: DefinitionRegistry):
        self._definitions = definitions
        self._instances: dict[type[BaseModel], BaseModel] = {}

    async def build(
        self,
        rc: "RuntimeConfig",
        merged: MergedConfig,
        definition: ConfigurationDefinition,
    ) -> BaseModel:
        """Construct a fresh, validated instance. Does not touch the cache.

        Args:
            rc: Runtime configuration (debug logging).
            merged: Merged configuration tree.
            definition: Model type and scope to bind.

        Returns:
            Validated model instance sharing no containers with ``merged``.

        Raises:
            ConfigValidationError: If the bound data violates the model's constraints.
        """
        ctor = definition.ctor
        scoped = merged.extract(definition.scope)
        rules = {rule.property_key: rule for rule in self._definitions.get_properties(ctor)}

        values: dict[str, Any] = {}
        for key in dict.fromkeys([*ctor.model_fields, *rules]):
            rule = rules.get(key)
            if rule is not None and rule.exclude:
                continue

            if rule is not None and rule.bind:
                value = merged.path(rule.bind, MISSING)
            else:
                value = scoped.path(key, MISSING)

            if value is not MISSING:
                values[self._input_key(ctor, key)] = thaw(value)

        try:
            instance = ctor.model_validate(values)
        except ValidationError as e:
            error = ConfigValidationError(ctor, _violations(e))
            log.error(
                CONFIGURATION_INVALID,
                configuration=ctor.__name__,
                scope=definition.scope,
                violations=[v.property for v in error.violations],
            )
            raise error from None

        if rc.debug:
            log.info(
                CONFIGURATION_BUILT,
                configuration=ctor.__name__,
                scope=definition.scope,
                values=instance.model_dump(),
            )
        return instance

    async def create(
        self,
        rc: "RuntimeConfig",
        merged: MergedConfig,
        definition: ConfigurationDefinition,
    ) -> BaseModel:
        """Return the cached instance of the type, building it on first use.

        An instance is only cached after it validated.
        """
        cached = self._instances.get(definition.ctor)
        if cached is not None:
            return cached

        instance = await self.build(rc, merged, definition)
        self._instances[definition.ctor] = instance
        return instance

    async def compile(
        self, rc: "RuntimeConfig", merged: MergedConfig
    ) -> dict[type[BaseModel], BaseModel]:
        """Build every registered definition into a fresh type → instance map.

        When ``rc.providers`` is set only those types are built, in that order.

        Raises:
            ConfigValidationError: On the first definition that fails validation.
            ConfigurationNotFoundError: If a listed provider was never registered.
        """
        store: dict[type[BaseModel], BaseModel] = {}
        for definition in self._selected_definitions(rc):
            store[definition.ctor] = await self.build(rc, merged, definition)
        return store

    async def reload(self, rc: "RuntimeConfig", merged: MergedConfig) -> bool:
        """Rebuild all definitions and update cached instances in place.

        A failure leaves every cached instance untouched; it is logged and
        not raised, so a bad edit never takes down a running process.

        Returns:
            True if the cached instances were updated.
        """
        try:
            candidates = await self.compile(rc, merged)
        except Exception as e:
            log.error(CONFIG_RELOAD_FAILED, error=str(e), error_type=type(e).__name__)
            return False

        updated = []
        for ctor, fresh in candidates.items():
            current = self._instances.get(ctor)
            if current is None:
                continue
            _update_in_place(current, fresh)
            updated.append(ctor.__name__)

        log.info(CONFIG_RELOADED, configurations=updated)
        return True

    def seed(self, instances: dict[type[BaseModel], BaseModel]) -> None:
        """Cache ``instances`` for types that have no live instance yet."""
        for ctor, instance in instances.items():
            self._instances.setdefault(ctor, instance)

    def get(self, ctor: type[BaseModel]) -> BaseModel | None:
        return self._instances.get(ctor)

    def reset(self) -> None:
        """Drop every cached instance (test isolation)."""
        self._instances.clear()

    def __contains__(self, ctor: object) -> bool:
        return ctor in self._instances

    def _selected_definitions(self, rc: "RuntimeConfig") -> list[ConfigurationDefinition]:
        if not rc.providers:
            return self._definitions.get_all()

        selected = []
        for ctor in rc.providers:
            definition = self._definitions.get(ctor)
            if definition is None:
                raise ConfigurationNotFoundError(
                    f"{getattr(ctor, '__name__', ctor)!s} is listed in providers "
                    "but was never registered as a configuration"
                )
            selected.append(definition)
        return selected

    @staticmethod
    def _input_key(ctor: type[BaseModel], key: str) -> str:
        field = ctor.model_fields.get(key)
        if field is not None and isinstance(field.alias, str):
            return field.alias
        return key
