"""Logging and metrics for the Voice Translator service."""

from .logger import bind_job_context, get_logger, setup_logging

__all__ = [
    "bind_job_context",
    "get_logger",
    "setup_logging",
]
