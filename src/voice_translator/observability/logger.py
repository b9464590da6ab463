"""
Structured logging configuration for the Voice Translator service.

Uses structlog for JSON-formatted logs with consistent context binding for
job_id and the Socket.IO sid throughout one pipeline run.
"""

import logging
import sys

import structlog


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO
        json_logs: Render JSON lines when True, human readable console output otherwise
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured BoundLogger instance
    """
    return structlog.get_logger(name)


def bind_job_context(
    logger: structlog.BoundLogger,
    job_id: str,
    sid: str | None = None,
    source_language: str | None = None,
    target_language: str | None = None,
) -> structlog.BoundLogger:
    """
    Bind audio job context to logger.

    Args:
        logger: Base logger instance
        job_id: Unique job identifier
        sid: Socket.IO session identifier (optional)
        source_language: Requested source language (optional)
        target_language: Requested target language (optional)

    Returns:
        BoundLogger with context bound

    Example:
        >>> logger = bind_job_context(get_logger(__name__), job_id="job-123", sid="abc")
        >>> logger.info("stt_started")  # Includes job_id and sid
    """
    context = {"job_id": job_id}
    if sid:
        context["sid"] = sid
    if source_language:
        context["source_language"] = source_language
    if target_language:
        context["target_language"] = target_language

    return logger.bind(**context)
