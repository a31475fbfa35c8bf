"""
Logging Configuration for the Store Sales Dashboard

Routes structlog and stdlib records (uvicorn included) through one
handler. Application identity is bound into structlog contextvars, so
every event carries ``app``, ``environment`` and ``version``; request
scoped fields such as ``request_id`` are bound the same way by the API
middleware.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import ProcessorFormatter

from store_dashboard.config.settings import Settings, get_settings

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _pre_chain() -> List:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    settings: Optional[Settings] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the dashboard.

    Args:
        settings: Source of monitoring options and app identity (cached settings by default)
        log_level: Override of ``LOG_LEVEL``
        log_format: Override of ``LOG_FORMAT`` (json or console)
    """
    settings = settings or get_settings()
    level_name = (log_level or settings.monitoring.log_level).upper()
    fmt = log_format or settings.monitoring.log_format
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    pre_chain = _pre_chain()
    structlog.configure(
        processors=pre_chain + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[ProcessorFormatter.remove_processors_meta, _renderer(fmt)],
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # uvicorn installs its own handlers; hand its records to the root one
    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True
        uvicorn_logger.setLevel(level)

    structlog.contextvars.bind_contextvars(
        app=settings.app_name,
        environment=settings.app_env,
        version=settings.version,
    )

    structlog.get_logger(__name__).info("Logging configured", level=level_name, format=fmt)
