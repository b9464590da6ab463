"""Audio job handlers for the Voice Translator gateway.

Handles the `audio-stream` event: one event starts one pipeline run, whose
progress and result are emitted back to the same connection as
`status-update`, `transcription-update`, `translated-audio` or `error`.
"""

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from voice_translator.errors import NO_AUDIO_MESSAGE, InvalidJobError, PipelineError
from voice_translator.pipeline.models import AudioJob, PipelineResult, PipelineState, ProgressEvent
from voice_translator.pipeline.orchestrator import PipelineOrchestrator
from voice_translator.server.models import (
    AudioStreamPayload,
    TranscriptionUpdatePayload,
    TranslatedAudioPayload,
)
from voice_translator.server.session import ConnectionSession, SessionStore

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "A translation is already in progress on this connection."

# Coarse phase strings shown by the client while a job runs
STATUS_MESSAGES: dict[PipelineState, str] = {
    PipelineState.VALIDATING: "Processing audio...",
    PipelineState.TRANSCRIBING: "Transcribing speech...",
    PipelineState.DETECTING_LANGUAGE: "Detecting language...",
    PipelineState.TRANSLATING: "Translating...",
    PipelineState.SYNTHESIZING: "Generating speech...",
}


async def handle_audio_stream(
    sio: Any,
    sid: str,
    data: Any,
    session_store: SessionStore,
    orchestrator: PipelineOrchestrator,
) -> None:
    """Handle audio-stream event.

    Validates the payload, then starts the pipeline as a task tracked on the
    connection session so a disconnect can cancel it.

    Args:
        sio: Socket.IO server instance.
        sid: Socket.IO session ID.
        data: The audio-stream payload.
        session_store: Session store instance.
        orchestrator: Pipeline orchestrator shared by all connections.
    """
    if not isinstance(data, dict):
        await sio.emit("error", NO_AUDIO_MESSAGE, to=sid)
        return

    try:
        payload = AudioStreamPayload.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid audio-stream payload: sid={sid}, error={e}")
        await sio.emit("error", f"Invalid audio-stream payload: {e.errors()[0]['msg']}", to=sid)
        return

    if payload.audio is None:
        await sio.emit("error", NO_AUDIO_MESSAGE, to=sid)
        return

    session = await session_store.get_by_sid(sid)
    if session is None:
        logger.warning(f"audio-stream from unknown session: sid={sid}")
        await sio.emit("error", "Session not found", to=sid)
        return

    if session.is_busy:
        logger.info(f"Rejected audio-stream while busy: sid={sid}, job_id={session.current_job_id}")
        await sio.emit("error", BUSY_MESSAGE, to=sid)
        return

    defaults = orchestrator.config
    job = AudioJob(
        audio=payload.audio,
        source_language=payload.source_lang or defaults.default_source_language,
        target_language=payload.target_lang or defaults.default_target_language,
    )

    logger.info(
        f"Received audio-stream: sid={sid}, job_id={job.job_id}, size={job.audio_size}, "
        f"from={job.source_language}, to={job.target_language}"
    )

    task = asyncio.create_task(_run_job(sio, sid, job, session, orchestrator))
    session.start_job(job.job_id, task)


async def _run_job(
    sio: Any,
    sid: str,
    job: AudioJob,
    session: ConnectionSession,
    orchestrator: PipelineOrchestrator,
) -> None:
    """Run one job and emit its outcome to the connection."""

    async def on_progress(event: ProgressEvent) -> None:
        update = TranscriptionUpdatePayload(original_text=event.original_text)
        await sio.emit("transcription-update", update.to_wire(), to=sid)

    async def on_state(state: PipelineState) -> None:
        message = STATUS_MESSAGES.get(state)
        if message is not None:
            await sio.emit("status-update", message, to=sid)

    success = False
    try:
        result = await orchestrator.run(job, on_progress=on_progress, on_state=on_state, sid=sid)
        await sio.emit("translated-audio", build_translated_audio(result).to_wire(), to=sid)
        success = True

    except asyncio.CancelledError:
        logger.info(f"Job cancelled: job_id={job.job_id}, sid={sid}")
        raise

    except InvalidJobError as e:
        logger.info(f"Rejected job: job_id={job.job_id}, sid={sid}, reason={e}")
        await sio.emit("error", str(e), to=sid)

    except PipelineError as e:
        logger.error(f"Pipeline failed: job_id={job.job_id}, sid={sid}, stage={e.stage}, error={e}")
        await sio.emit("error", f"Pipeline failed: {e}", to=sid)

    except Exception as e:
        logger.exception(f"Error emitting job result: job_id={job.job_id}, sid={sid}: {e}")

    finally:
        session.finish_job(success)


def build_translated_audio(result: PipelineResult) -> TranslatedAudioPayload:
    return TranslatedAudioPayload(
        audio=result.audio,
        text=result.translated_text,
        original_text=result.original_text,
        degraded=result.degraded,
        audio_playable=result.audio_playable,
        detected_language=result.detected_language,
    )


def register_audio_handlers(
    sio: Any,
    session_store: SessionStore,
    orchestrator: PipelineOrchestrator,
) -> None:
    """Register audio job event handlers.

    Args:
        sio: Socket.IO server instance.
        session_store: Session store instance.
        orchestrator: Pipeline orchestrator instance.
    """

    @sio.on("audio-stream")
    async def on_audio_stream(sid: str, data: Any = None) -> None:
        await handle_audio_stream(sio, sid, data, session_store, orchestrator)
