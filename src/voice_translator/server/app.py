"""Socket.IO server setup for the Voice Translator service.

Creates a FastAPI app combined with a Socket.IO AsyncServer. One
`audio-stream` event drives one pipeline run; HTTP carries health, debug and
metrics endpoints.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

import socketio
from fastapi import Body, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from voice_translator.config import AppConfig, get_config
from voice_translator.pipeline.orchestrator import PipelineOrchestrator
from voice_translator.providers.factory import ProviderRegistry, create_provider_registry
from voice_translator.server.handlers import register_audio_handlers, register_lifecycle_handlers
from voice_translator.server.health import build_health_response
from voice_translator.server.models import DebugAudioRequest, DebugAudioResponse, HealthResponse
from voice_translator.server.session import SessionStore

logger = logging.getLogger(__name__)


def create_app(
    config: AppConfig | None = None,
    registry: ProviderRegistry | None = None,
    orchestrator: PipelineOrchestrator | None = None,
) -> socketio.ASGIApp:
    """Create FastAPI + Socket.IO ASGI application.

    Args:
        config: Application configuration (loaded from the environment if omitted)
        registry: Provider registry (built from config.providers if omitted)
        orchestrator: Pipeline orchestrator (built from the registry if omitted)

    Returns:
        Combined ASGI app with FastAPI and Socket.IO.
    """
    config = config or get_config()
    registry = registry or create_provider_registry(config.providers)
    orchestrator = orchestrator or PipelineOrchestrator(registry, config=config.pipeline)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Voice Translator ready: provider_mode={config.providers.mode}, "
            f"hugging_face_token={'set' if config.providers.has_hugging_face_token else 'missing'}, "
            f"google_cloud={'set' if config.providers.has_google_credentials else 'missing'}"
        )
        yield
        await registry.aclose()
        logger.info("Provider clients closed")

    # Create FastAPI app for HTTP endpoints
    fastapi_app = FastAPI(
        title="Voice Translator",
        description="Real-time speech translation: transcription, translation and speech synthesis",
        version="0.1.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @fastapi_app.get("/api/health", response_model=HealthResponse, response_model_by_alias=True)
    async def health_check() -> HealthResponse:
        """Report whether the Hugging Face Inference API is reachable."""
        return await build_health_response(config.providers)

    @fastapi_app.post(
        "/api/debug-audio", response_model=DebugAudioResponse, response_model_by_alias=True
    )
    async def debug_audio(request: DebugAudioRequest = Body(...)) -> DebugAudioResponse:
        """Echo the size of a client-side audio payload."""
        size = _payload_length(request.audio_data)
        logger.info(f"Debug endpoint called with data size: {size}")
        return DebugAudioResponse(received=True, size=size)

    # Prometheus metrics endpoint
    @fastapi_app.get("/metrics")
    async def metrics_endpoint():
        """
        Prometheus metrics endpoint.

        Returns metrics in Prometheus text format including:
        - Job counts and durations by outcome
        - Stage timing histograms (STT, detection, translation, synthesis)
        - Provider attempts by capability, provider and outcome
        - Degraded stage counters
        - Active connection gauge
        """
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=list(config.server.cors_origins),
        logger=False,  # Use our own logger
        engineio_logger=False,
        max_http_buffer_size=config.server.max_buffer_size,
        ping_interval=config.server.ping_interval,
        ping_timeout=config.server.ping_timeout,
    )

    session_store = SessionStore()

    register_lifecycle_handlers(sio, session_store)
    register_audio_handlers(sio, session_store, orchestrator)

    logger.info("Voice Translator handlers registered")

    fastapi_app.state.sio = sio
    fastapi_app.state.session_store = session_store
    fastapi_app.state.orchestrator = orchestrator

    # Combine FastAPI and Socket.IO into single ASGI app
    return socketio.ASGIApp(
        socketio_server=sio,
        other_asgi_app=fastapi_app,
    )


def _payload_length(value: Any) -> int | None:
    # Strings and byte arrays have a length; anything else reports none
    if isinstance(value, (str, list)):
        return len(value)
    return None
