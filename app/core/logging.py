"""Structlog configuration for the inventory admin service.

Console output for development, JSON for production. Every event carries
the service name and version so bootstrap and admin audit events can be
told apart from other services sharing a log stream.
"""

import logging
import os
import sys

import structlog


def resolve_level(level: str) -> int:
    """Map a LOG_LEVEL string to a stdlib level number; unknown names mean INFO"""
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def service_info(service: str, version: str) -> structlog.types.Processor:
    """Processor stamping each event with the service identity"""

    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", service)
        event_dict.setdefault("version", version)
        return event_dict

    return processor


def configure_logging(
    level: str = "INFO",
    service: str = "inventory-admin",
    version: str = "0.0.0",
) -> None:
    """Configure structlog and align stdlib logging with it.

    Colors are used when FORCE_COLOR is set or stdout is a TTY. Events below
    ``level`` are dropped, and stdlib loggers (uvicorn, alembic) are held to
    the same threshold.
    """
    min_level = resolve_level(level)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    use_colors = force_color or sys.stdout.isatty()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        service_info(service, version),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if use_colors:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(colors=True)
        processors = [*shared_processors, renderer]
    else:
        processors = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=min_level)
    logging.getLogger().setLevel(min_level)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
