"""Structured logging for the search service.

Every line is rendered by ``structlog``: JSON for log aggregation, or a
colored console format for local runs. The service name is bound once at
startup; request-scoped values (such as the request ID) are bound per request
through contextvars, so any logger used while serving a request carries them.

Typical usage
- Call ``configure_logging(service_name, log_level, log_format)`` at startup
- Wrap request handling in ``request_context(request_id=...)``
- Acquire loggers via ``structlog.get_logger(name)``
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name

REQUEST_ID_HEADER = "X-Request-ID"


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json",
    **kwargs: Any
) -> None:
    """Configure structured logging for the process.

    Parameters
    - service_name: Bound to every log line as ``service``
    - log_level: ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR`` (case-insensitive)
    - log_format: ``json`` for deployed services; anything else renders for a console
    - kwargs: Extra process-wide context (e.g. ``env="prod"``)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_logger_name,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name, **kwargs)


@contextmanager
def request_context(request_id: Optional[str] = None, **kwargs: Any) -> Iterator[str]:
    """Bind a request ID (generated when absent) for the enclosed block.

    Yields the request ID so callers can echo it back to the client.
    """
    request_id = request_id or uuid.uuid4().hex
    with structlog.contextvars.bound_contextvars(request_id=request_id, **kwargs):
        yield request_id


def log_performance(operation: str, duration_ms: float, **kwargs: Any) -> None:
    """Log how long a unit of work took.

    Parameters
    - operation: Stable name of the measured work
    - duration_ms: Elapsed time in milliseconds
    - kwargs: Additional dimensions (e.g. result counts)
    """
    structlog.get_logger("performance").info(
        f"Operation {operation} completed",
        operation=operation,
        duration_ms=round(duration_ms, 2),
        **kwargs
    )
