"""
Structured logging configuration for sesctl.

Every event carries the invocation's correlation id and operation, bound
through structlog contextvars. Log output goes to stderr; stdout is reserved
for operation results.
"""

import logging
import sys
import uuid

import structlog
from rich.console import Console
from rich.logging import RichHandler


def bind_invocation(operation: str) -> str:
    """Bind a fresh correlation id and the operation name to all later log events."""
    correlation_id = uuid.uuid4().hex[:8]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id, operation=operation)
    return correlation_id


def setup_logging(debug: bool = False, rich_output: bool = True) -> None:
    """
    Configure structured logging for the application.

    Args:
        debug: Enable debug level logging
        rich_output: Use rich formatting for console output, JSON otherwise
    """
    level = logging.DEBUG if debug else logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.dev.set_exc_info,
    ]

    if rich_output:
        console = Console(stderr=True)
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=console.is_terminal,
                exception_formatter=structlog.dev.rich_traceback,
            )
        )

        # botocore logs through the standard library
        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

        logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    # SDK internals are noisy below WARNING
    logging.getLogger("botocore").setLevel(logging.DEBUG if debug else logging.WARNING)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        # Reconfigured per invocation, so loggers must not pin the first stream
        cache_logger_on_first_use=False,
    )
