"""Exception hierarchy of the configuration engine.

All errors raised by liveconf derive from ConfigError so callers can catch
the whole family at once.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import orjson


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class SourceUnavailableError(ConfigError):
    """Raised when a configuration source (usually a file) does not exist.

    Loaders turn this into an empty fragment and a warning; it only escapes
    from the low-level read helpers.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Configuration source not found: {self.path}")


class ConfigParseError(ConfigError):
    """Raised when a source was read but its content is malformed."""

    pass


class WatchError(ConfigError):
    """Raised (or handed to ``on_error``) when watching a source fails."""

    pass


class ConfigurationNotFoundError(ConfigError):
    """Raised when an instance is requested for a type that was never built."""

    pass


@dataclass(frozen=True)
class FieldViolation:
    """One violated constraint of one field.

    Attributes:
        property: Field name on the configuration model.
        value: Value observed after binding (``None`` when missing).
        constraint: Machine-readable constraint name (pydantic error type).
        requirement: Human-readable description of what was expected.
    """

    property: str
    value: Any
    constraint: str
    requirement: str


def _render_value(value: Any) -> str:
    try:
        return orjson.dumps(value, default=str).decode()
    except TypeError:
        return repr(value)


class ConfigValidationError(ConfigError):
    """Raised when bound data fails validation for a configuration type."""

    def __init__(self, ctor: type, violations: list[FieldViolation]):
        self.ctor = ctor
        self.violations = violations
        super().__init__(self._format())

    def _format(self) -> str:
        lines = [f"An instance of {self.ctor.__name__} has failed the validation:"]
        for violation in self.violations:
            lines.append(f"  - Property: `{violation.property}`")
            lines.append(f"    Value: {_render_value(violation.value)}")
            lines.append(f"    Constraint: {violation.constraint}")
            lines.append(f"    Expect: {violation.requirement}")
        return "\n".join(lines)
