"""
structlog over the standard library.

Every event carries the service name and environment; the request
middleware and the auth dependencies add `request_id` and `caller` through
contextvars. Production renders one JSON object per line, development a
coloured console line.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, Processor

from ticketbari.core.config import get_settings

QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "stripe": logging.WARNING,
    "aiosqlite": logging.WARNING,
}


def _drop_color_message(_, __, event_dict: EventDict) -> EventDict:
    # uvicorn duplicates its message with ANSI codes under this key
    event_dict.pop("color_message", None)
    return event_dict


def _service_fields(app: str, environment: str) -> Processor:
    def add(_, __, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", app)
        event_dict.setdefault("env", environment)
        return event_dict

    return add


def setup_logging() -> None:
    settings = get_settings()
    production = settings.ENVIRONMENT == "production"

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ExtraAdder(),
        _drop_color_message,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if production:
        shared += [
            _service_fields(settings.APP_NAME, settings.ENVIRONMENT),
            structlog.processors.dict_tracebacks,
        ]
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
