import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, FilteringBoundLogger, Processor

from kosmos.config import Settings, settings as default_settings

def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    # PrintLogger has no name; get_logger carries it as an initial value
    event_dict.setdefault("logger", "kosmos")
    return event_dict

def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or default_settings
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development or settings.log_format == "console":
        renderer: Processor = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # third-party libraries log through stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

def get_logger(name: str | None = None) -> FilteringBoundLogger:
    return structlog.get_logger(logger=name or "kosmos")

def bind_request_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)

def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
