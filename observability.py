"""Structured logging setup.

Configures structlog once per process. Development gets a readable console
renderer; every other environment gets one JSON object per line.

Usage:
    from observability import setup_logging, get_logger

    setup_logging(level="INFO", environment="production")
    logger = get_logger(__name__)
    logger.info("request", method="GET", path="/api/persons", status=200)
"""

import logging
import sys
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

_configured: bool = False


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add ISO8601 timestamp."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_service_context(service_name: str, environment: str):
    """Create a processor that adds service context to all log events.

    Args:
        service_name: Name of the service.
        environment: Deployment environment.
    """

    def processor(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict["service"] = service_name
        event_dict["environment"] = environment
        return event_dict

    return processor


def setup_logging(
    level: str = "INFO",
    environment: str = "development",
    service_name: str = "biblemap-api",
) -> None:
    """Configure structlog and the stdlib root logger.

    Calling it again after the first time is a no-op.

    Args:
        level: Minimum log level name.
        environment: "development" selects the console renderer.
        service_name: Value of the "service" key on every event.
    """
    global _configured

    if _configured:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_context(service_name, environment),
        add_timestamp,
        structlog.processors.StackInfoRenderer(),
    ]

    if environment == "development":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str):
    """Get a structlog logger bound to a module name.

    Args:
        name: Logger name, usually __name__.

    Returns:
        Bound structlog logger.
    """
    return structlog.get_logger(name)
