"""
Structured Logging
==================
structlog integration for machine-readable generation telemetry.

Usage:
    from americano.utils.structured_logging import get_structured_logger

    log = get_structured_logger("americano.solver.montecarlo")
    log.info("generation_complete", iterations=200, elapsed_ms=41)
"""
import logging
from typing import Any, Optional, TextIO

import structlog
import structlog.contextvars


def configure_structlog(
    json_output: bool = False,
    level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structlog for the application.

    Args:
        json_output: If True, output JSON logs (for production).
                    If False, use colored console output (for development).
        level: Minimum level of emitted events
        stream: Output stream (defaults to stdout)
    """
    if json_output:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=stream),
            cache_logger_on_first_use=False,
        )
    else:
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="%H:%M:%S"),
                structlog.dev.ConsoleRenderer(colors=True),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=stream),
            cache_logger_on_first_use=False,
        )


def get_structured_logger(name: str) -> Any:
    """
    Get a structured logger.

    Args:
        name: Logger name (e.g., "americano.solver.montecarlo")

    Returns:
        structlog bound logger
    """
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind context variables for all subsequent log calls.

    Args:
        **kwargs: Context values (e.g., run_id="abc123")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
