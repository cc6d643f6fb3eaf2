"""
lifetree/core/logging.py
Structured logging setup using structlog
"""

import logging
import sys
from typing import Optional
import structlog
from structlog.stdlib import BoundLogger
from .config import Settings, get_settings


def setup_logging(settings: Optional[Settings] = None) -> BoundLogger:
    """
    Configure structured logging for the application
    Returns configured logger instance
    """
    settings = settings or get_settings()

    # Configure stdlib logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL),
    )

    # Shared processors for all logs
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.uses_json_logs:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer()
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True)
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("lifetree")

    logger.info(
        "logging_configured",
        app_name=settings.APP_NAME,
        level=settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
        debug=settings.DEBUG
    )

    return logger


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """
    Get a logger instance

    Args:
        name: Logger name (e.g., "component", "binding")

    Returns:
        Configured structlog logger
    """
    if name:
        return structlog.get_logger(f"lifetree.{name}")
    return structlog.get_logger("lifetree")


# ============================================================================
# Export
# ============================================================================

__all__ = ["setup_logging", "get_logger"]
