"""Upstream reachability probe behind GET /api/health."""

import logging

import httpx

from voice_translator.config import ProviderConfig
from voice_translator.server.models import HealthResponse, ServiceStatus

logger = logging.getLogger(__name__)


async def check_services(
    config: ProviderConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Probe the Hugging Face model index with the configured token.

    Args:
        config: Provider configuration (token, probe URL, probe timeout).
        transport: Optional httpx transport (tests inject a MockTransport).

    Returns:
        True if the token is present and the probe answered 2xx in time.
    """
    if not config.has_hugging_face_token:
        logger.warning("Health probe skipped: HUGGING_FACE_TOKEN not configured")
        return False

    headers = {"Authorization": f"Bearer {config.hugging_face_token}"}
    try:
        async with httpx.AsyncClient(
            timeout=config.health_probe_timeout_s, transport=transport
        ) as client:
            response = await client.get(config.hugging_face_models_url, headers=headers)
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Health probe failed: {type(e).__name__}: {e}")
        return False

    return True


async def build_health_response(
    config: ProviderConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HealthResponse:
    accessible = await check_services(config, transport=transport)
    return HealthResponse(
        status="healthy" if accessible else "degraded",
        services=ServiceStatus(
            hugging_face=config.has_hugging_face_token,
            api_accessible=accessible,
        ),
    )
