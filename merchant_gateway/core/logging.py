import logging
import sys
from typing import Any, Union

import structlog


def configure_logging(level: Union[int, str] = logging.INFO, json_logs: bool = True) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    # Only SDK errors reach application logs.
    logging.getLogger("braintree").setLevel(logging.ERROR)


def get_logger(*args: Any, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(*args, **kwargs)
