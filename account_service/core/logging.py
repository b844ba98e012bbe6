"""
Structured logging setup shared by the application factory and the CLI.
"""
import logging

import structlog


def configure_logging(debug: bool = False) -> None:
    """Configure structlog processors and the minimum log level."""
    level = logging.DEBUG if debug else logging.INFO
    
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )
