"""structlog setup for liveconf.

liveconf is a library, so logging stays inside the ``liveconf`` logger
hierarchy: one stderr handler, rendered as JSON lines or as a console view
(``LIVECONF_LOG_FORMAT``), never touching the host's root logger. Records
from plain ``logging`` calls under ``liveconf.*`` go through the same
pre-processing as structlog events, so both render identically.
"""

import logging
import sys
from typing import Any

import structlog

from liveconf.config.bootstrap import get_bootstrap_log_format, get_bootstrap_log_level

PACKAGE_LOGGER = "liveconf"


def _add_component(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Tag the event with the liveconf subsystem that emitted it.

    ``liveconf.watch.driver`` becomes ``watch.driver``. An explicit
    ``component`` passed by the caller is kept.

    Args:
        logger: The wrapped logger (unused).
        method_name: The log method name (unused).
        event_dict: The event dictionary; ``logger`` must already be set.

    Returns:
        Event dictionary with ``component`` set.
    """
    if "component" in event_dict:
        return event_dict

    name = event_dict.get("logger") or ""
    if name.startswith(PACKAGE_LOGGER + "."):
        name = name[len(PACKAGE_LOGGER) + 1 :]
    event_dict["component"] = name or "unknown"
    return event_dict


# Run for structlog events and for foreign stdlib records alike.
_PRE_CHAIN: list[Any] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    _add_component,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _build_handler(log_format: str) -> logging.Handler:
    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_PRE_CHAIN,
        )
    )
    return handler


def configure_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """Install the liveconf handler and configure structlog.

    Safe to call again: the previous handler is replaced, not stacked.

    Args:
        log_level: Level override. Defaults to ``LIVECONF_LOG_LEVEL``.
        log_format: ``"json"`` or ``"console"``. Defaults to ``LIVECONF_LOG_FORMAT``.
    """
    level_name = log_level or get_bootstrap_log_level()
    format_name = log_format or get_bootstrap_log_format()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))
    package_logger.handlers.clear()
    package_logger.addHandler(_build_handler(format_name))
    package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger, configuring logging on first use.

    Args:
        name: Logger name, normally ``__name__`` of a liveconf module.

    Returns:
        structlog BoundLogger.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info(FRAGMENT_LOADED, loader="EnvLoader", keys=12)
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)
