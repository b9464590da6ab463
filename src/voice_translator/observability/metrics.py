"""Prometheus metrics for the Voice Translator service.

Defines and exports metrics for monitoring:
- Job outcomes and end-to-end latency (counter, histogram)
- Stage timings (histogram labelled by stage)
- Provider attempts by capability, provider and outcome (counter)
- Degraded stages, i.e. mock/placeholder substitutions (counter)
- Active Socket.IO connections (gauge)
"""

import logging

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Job Metrics
# -----------------------------------------------------------------------------

translator_jobs_total = Counter(
    "translator_jobs_total",
    "Total audio jobs by outcome",
    labelnames=["outcome"],
)

translator_job_duration_seconds = Histogram(
    "translator_job_duration_seconds",
    "End-to-end audio job latency in seconds",
    labelnames=["outcome"],
    buckets=(0.5, 1.0, 2.0, 4.0, 8.0, 16.0, 32.0, 64.0, float("inf")),
)

# -----------------------------------------------------------------------------
# Stage Metrics
# -----------------------------------------------------------------------------

translator_stage_duration_seconds = Histogram(
    "translator_stage_duration_seconds",
    "Pipeline stage duration in seconds",
    labelnames=["stage"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0, 32.0, float("inf")),
)

translator_degraded_stages_total = Counter(
    "translator_degraded_stages_total",
    "Stages completed with a mock or placeholder substitute",
    labelnames=["stage"],
)

# -----------------------------------------------------------------------------
# Provider Metrics
# -----------------------------------------------------------------------------

translator_provider_attempts_total = Counter(
    "translator_provider_attempts_total",
    "Provider adapter calls by capability, provider and outcome",
    labelnames=["capability", "provider", "outcome"],
)

# -----------------------------------------------------------------------------
# Connection Metrics
# -----------------------------------------------------------------------------

translator_connections_active = Gauge(
    "translator_connections_active",
    "Current number of connected Socket.IO clients",
)

# -----------------------------------------------------------------------------
# Metric Recording Functions
# -----------------------------------------------------------------------------


def record_job(outcome: str, duration_ms: int) -> None:
    """Record a finished job.

    Args:
        outcome: completed, degraded, invalid, failed or cancelled
        duration_ms: Total processing time in milliseconds
    """
    try:
        translator_jobs_total.labels(outcome=outcome).inc()
        translator_job_duration_seconds.labels(outcome=outcome).observe(duration_ms / 1000.0)
    except Exception as e:
        logger.error(f"Failed to record job metrics: {e}")


def record_stage_timing(stage: str, duration_ms: int) -> None:
    """Record individual stage timing.

    Args:
        stage: Stage name (transcription, detection, translation, synthesis)
        duration_ms: Duration in milliseconds
    """
    try:
        translator_stage_duration_seconds.labels(stage=stage).observe(duration_ms / 1000.0)
    except Exception as e:
        logger.error(f"Failed to record stage timing: {e}")


def record_degraded_stage(stage: str) -> None:
    """Count a stage whose output was substituted."""
    try:
        translator_degraded_stages_total.labels(stage=stage).inc()
    except Exception as e:
        logger.error(f"Failed to record degraded stage: {e}")


def record_provider_attempt(capability: str, provider_id: str, success: bool) -> None:
    """Count one adapter call.

    Args:
        capability: Capability value (speech_to_text, translate, ...)
        provider_id: Adapter identifier
        success: Whether the call returned usable output
    """
    try:
        translator_provider_attempts_total.labels(
            capability=capability,
            provider=provider_id,
            outcome="success" if success else "failure",
        ).inc()
    except Exception as e:
        logger.error(f"Failed to record provider attempt: {e}")


def increment_active_connections() -> None:
    """Increment active connections count."""
    try:
        translator_connections_active.inc()
    except Exception as e:
        logger.error(f"Failed to increment active connections: {e}")


def decrement_active_connections() -> None:
    """Decrement active connections count."""
    try:
        translator_connections_active.dec()
    except Exception as e:
        logger.error(f"Failed to decrement active connections: {e}")
