"""Settings of the configuration engine itself.

Application configuration is bound by ``liveconf.module``; this package only
holds the few knobs liveconf reads for its own behavior.
"""

from liveconf.config.bootstrap import get_bootstrap_log_format, get_bootstrap_log_level
from liveconf.config.settings import EngineSettings, get_settings, reset_settings

__all__ = [
    "EngineSettings",
    "get_settings",
    "reset_settings",
    "get_bootstrap_log_level",
    "get_bootstrap_log_format",
]
