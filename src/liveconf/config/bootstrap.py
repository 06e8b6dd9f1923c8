"""Engine knobs needed before EngineSettings can be built.

Logging is configured while liveconf modules are still being imported, so
the log level and format are read straight from the environment here.
This module must not import telemetry.
"""

import os
from collections.abc import Callable

from liveconf.config.validators import validate_log_format, validate_log_level


def _from_env(name: str, default: str, validate: Callable[[str], str]) -> str:
    """Validated value of ``name``, falling back to ``default`` when unset or invalid."""
    try:
        return validate(os.getenv(name, default))
    except ValueError:
        return validate(default)


def get_bootstrap_log_level(default: str = "INFO") -> str:
    """``LIVECONF_LOG_LEVEL`` as an upper-cased level name."""
    return _from_env("LIVECONF_LOG_LEVEL", default, validate_log_level)


def get_bootstrap_log_format(default: str = "console") -> str:
    """``LIVECONF_LOG_FORMAT``: ``json`` or ``console``."""
    return _from_env("LIVECONF_LOG_FORMAT", default, validate_log_format)
