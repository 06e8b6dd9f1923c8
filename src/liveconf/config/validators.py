"""Validators shared by EngineSettings and the bootstrap helpers."""

from collections.abc import Callable

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")


def _one_of(field: str, allowed: tuple[str, ...], fold: Callable[[str], str]) -> Callable[[str], str]:
    def validate(value: str) -> str:
        folded = fold(value.strip())
        if folded not in allowed:
            raise ValueError(f"{field} must be one of {', '.join(allowed)}; got {value!r}")
        return folded

    return validate


validate_log_level = _one_of("log_level", LOG_LEVELS, str.upper)
validate_log_level.__doc__ = "Return ``value`` as an upper-cased stdlib level name, or raise ValueError."

validate_log_format = _one_of("log_format", LOG_FORMATS, str.lower)
validate_log_format.__doc__ = "Return ``value`` as ``json`` or ``console``, or raise ValueError."


def validate_separator(value: str) -> str:
    """Validate the separator that splits variable names into nested paths.

    Args:
        value: Separator, e.g. ``"__"``.

    Returns:
        The separator unchanged.

    Raises:
        ValueError: If the separator is empty or contains whitespace.
    """
    if not value or any(ch.isspace() for ch in value):
        raise ValueError(f"env_separator must be non-empty and free of whitespace; got {value!r}")
    return value
