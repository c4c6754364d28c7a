"""
Configures structured logging for telegraphkit using structlog.

Library modules only ever call ``structlog.get_logger(__name__)``; nothing is
emitted in a particular format until an application calls
:func:`configure_logging`. The dispatcher binds ``request_id`` and
``api_method`` as contextvars, so every event logged while a request is in
flight carries them.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, List, Tuple

import structlog

if TYPE_CHECKING:
    from telegraphkit.config.config import MonitoringConfig

_SHARED_PROCESSORS: List[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _build_handler(config: MonitoringConfig) -> Tuple[logging.Handler, Any]:
    if config.log_file:
        # One JSON object per line
        return logging.FileHandler(config.log_file, encoding="utf-8"), structlog.processors.JSONRenderer()
    renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return logging.StreamHandler(sys.stdout), renderer


def configure_logging(config: MonitoringConfig) -> None:
    """
    Route structlog and stdlib logging through a single root handler.

    Replaces any handlers already on the root logger.
    """
    handler, renderer = _build_handler(config)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(config.log_level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info(
        "Logging configured", level=config.log_level, output=config.log_file or "console"
    )
