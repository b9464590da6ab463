"""Pipeline Orchestrator for the Voice Translator service.

Drives one AudioJob through an explicit state machine:

    VALIDATING -> TRANSCRIBING -> (DETECTING_LANGUAGE) -> (TRANSLATING)
               -> SYNTHESIZING -> COMPLETED

FAILED is reachable only from structural input invalidity, failed
auto-detection (under the "fail" policy) or an unexpected exception. Every
other stage degrades to a deterministic substitute instead of failing, so a
valid job always completes.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from voice_translator.config import PipelineConfig
from voice_translator.errors import (
    NO_AUDIO_MESSAGE,
    InvalidJobError,
    LanguageDetectionError,
    PipelineError,
)
from voice_translator.fallback import FallbackStrategy
from voice_translator.languages import is_auto, normalize_language_code
from voice_translator.observability.logger import bind_job_context, get_logger
from voice_translator.observability.metrics import (
    record_degraded_stage,
    record_job,
    record_stage_timing,
)
from voice_translator.providers.errors import AllProvidersFailedError
from voice_translator.providers.models import Capability, SynthesisRequest
from voice_translator.synthesis.chain import build_synthesis_chain
from voice_translator.translation.errors import TranslationExhaustedError
from voice_translator.translation.router import TranslationRouter

from .models import (
    TRANSITIONS,
    AudioJob,
    PipelineResult,
    PipelineStage,
    PipelineState,
    ProgressEvent,
    StageOutcome,
)
from .substitutes import mock_transcript, mock_translation, placeholder_audio

if TYPE_CHECKING:
    from voice_translator.providers.factory import ProviderRegistry

ProgressCallback = Callable[[ProgressEvent], Awaitable[None]]
StateListener = Callable[[PipelineState], Awaitable[None]]


@dataclass
class _RunContext:
    """Mutable state of one run. Never shared between jobs."""

    job: AudioJob
    logger: structlog.BoundLogger
    source_language: str
    target_language: str
    on_progress: ProgressCallback | None = None
    on_state: StateListener | None = None
    original_text: str = ""
    translated_text: str = ""
    audio: bytes = b""
    audio_playable: bool = True
    detected_language: str | None = None
    provenance: dict[PipelineStage, StageOutcome] = field(default_factory=dict)


class PipelineOrchestrator:
    """Sequences STT -> detection -> translation -> synthesis for one job.

    Features:
    - Explicit state machine with validated transitions
    - Per-stage fallback chains with mock/placeholder substitutes
    - Transcript progress notification before translation starts
    - Per-stage provenance (provider, attempts, degraded flag)
    - Cancellation: asyncio.CancelledError propagates into in-flight calls
    """

    def __init__(
        self,
        registry: "ProviderRegistry",
        router: TranslationRouter | None = None,
        config: PipelineConfig | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Provider registry supplying adapters
            router: Translation router (built from the registry if omitted)
            config: Pipeline policy (minimum audio size, detection policy)
        """
        self._registry = registry
        self._router = router or TranslationRouter(registry)
        self._config = config or PipelineConfig()
        self._stt = FallbackStrategy(Capability.SPEECH_TO_TEXT)
        self._tts = FallbackStrategy(Capability.SYNTHESIZE)
        self.logger = get_logger(__name__)

        self._handlers: dict[PipelineState, Callable[[_RunContext], Awaitable[PipelineState]]] = {
            PipelineState.VALIDATING: self._validate,
            PipelineState.TRANSCRIBING: self._transcribe,
            PipelineState.DETECTING_LANGUAGE: self._detect_language,
            PipelineState.TRANSLATING: self._translate,
            PipelineState.SYNTHESIZING: self._synthesize,
        }

    @property
    def config(self) -> PipelineConfig:
        return self._config

    async def run(
        self,
        job: AudioJob,
        on_progress: ProgressCallback | None = None,
        on_state: StateListener | None = None,
        sid: str | None = None,
    ) -> PipelineResult:
        """Run one job to completion.

        Args:
            job: The audio job
            on_progress: Awaited with the transcript before translation starts
            on_state: Awaited on every state transition
            sid: Socket.IO session id, for log context only

        Returns:
            PipelineResult, possibly containing substitutes (see provenance)

        Raises:
            InvalidJobError: Audio absent or below the minimum size
            LanguageDetectionError: Auto-detection failed under the "fail" policy
            PipelineError: Any unexpected failure during orchestration
        """
        start_time = time.perf_counter()
        logger = bind_job_context(
            self.logger,
            job_id=job.job_id,
            sid=sid,
            source_language=job.source_language,
            target_language=job.target_language,
        )
        ctx = _RunContext(
            job=job,
            logger=logger,
            source_language=normalize_language_code(job.source_language),
            target_language=normalize_language_code(job.target_language),
            on_progress=on_progress,
            on_state=on_state,
        )

        logger.info("job_started", audio_bytes=job.audio_size)
        state = PipelineState.VALIDATING

        try:
            await self._notify_state(ctx, state)
            while not state.is_terminal:
                next_state = await self._handlers[state](ctx)
                self._check_transition(state, next_state)
                state = next_state
                await self._notify_state(ctx, state)

        except asyncio.CancelledError:
            logger.info("job_cancelled", state=state.value)
            record_job("cancelled", _elapsed_ms(start_time))
            raise

        except InvalidJobError as e:
            await self._fail(ctx, state, e)
            record_job("invalid", _elapsed_ms(start_time))
            raise

        except PipelineError as e:
            await self._fail(ctx, state, e)
            record_job("failed", _elapsed_ms(start_time))
            raise

        except Exception as e:
            await self._fail(ctx, state, e)
            record_job("failed", _elapsed_ms(start_time))
            raise PipelineError(str(e) or type(e).__name__, stage=state.value) from e

        result = PipelineResult(
            job_id=job.job_id,
            original_text=ctx.original_text,
            translated_text=ctx.translated_text,
            audio=ctx.audio,
            source_language=ctx.source_language,
            target_language=ctx.target_language,
            detected_language=ctx.detected_language,
            audio_playable=ctx.audio_playable,
            provenance=ctx.provenance,
            processing_time_ms=_elapsed_ms(start_time),
        )

        record_job("degraded" if result.degraded else "completed", result.processing_time_ms)
        logger.info(
            "job_completed",
            degraded=result.degraded,
            degraded_stages=[stage.value for stage in result.degraded_stages],
            total_time_ms=result.processing_time_ms,
            audio_bytes=len(result.audio),
        )
        return result

    # -------------------------------------------------------------------------
    # State handlers
    # -------------------------------------------------------------------------

    async def _validate(self, ctx: _RunContext) -> PipelineState:
        size = ctx.job.audio_size
        if size == 0:
            raise InvalidJobError(NO_AUDIO_MESSAGE)
        if size < self._config.min_audio_bytes:
            raise InvalidJobError(
                f"Audio buffer too small ({size} bytes, minimum "
                f"{self._config.min_audio_bytes}) - may be empty"
            )
        return PipelineState.TRANSCRIBING

    async def _transcribe(self, ctx: _RunContext) -> PipelineState:
        stage_start = time.perf_counter()
        ctx.logger.info("stt_started")

        try:
            result = await self._stt.attempt(self._registry.speech_to_text, ctx.job.audio)
        except AllProvidersFailedError as e:
            ctx.original_text = mock_transcript()
            outcome = StageOutcome(
                stage=PipelineStage.TRANSCRIPTION, degraded=True, attempts=e.attempts
            )
            ctx.logger.warning("stt_degraded", attempts=len(e.attempts))
        else:
            ctx.original_text = result.output
            outcome = StageOutcome(
                stage=PipelineStage.TRANSCRIPTION,
                provider_id=result.provider_id,
                attempts=result.attempts,
            )

        self._record_outcome(ctx, outcome, stage_start)
        ctx.logger.info("stt_completed", provider=outcome.provider_id, text=ctx.original_text)

        # Lets the caller render the transcript before translation finishes
        if ctx.on_progress is not None:
            await ctx.on_progress(
                ProgressEvent(job_id=ctx.job.job_id, original_text=ctx.original_text)
            )

        if is_auto(ctx.source_language):
            if not ctx.original_text.strip():
                # Silence has no language; translation is skipped as well
                ctx.provenance[PipelineStage.DETECTION] = StageOutcome(
                    stage=PipelineStage.DETECTION, skipped=True
                )
                ctx.logger.info("detection_skipped", reason="blank_transcript")
                return self._after_language_known(ctx)
            return PipelineState.DETECTING_LANGUAGE
        return self._after_language_known(ctx)

    async def _detect_language(self, ctx: _RunContext) -> PipelineState:
        stage_start = time.perf_counter()
        ctx.logger.info("detection_started")

        try:
            detected = await self._router.detect(ctx.original_text)
        except AllProvidersFailedError as e:
            if self._config.detection_failure_policy != "assume":
                self._record_outcome(
                    ctx,
                    StageOutcome(stage=PipelineStage.DETECTION, degraded=True, attempts=e.attempts),
                    stage_start,
                )
                ctx.logger.error(
                    "detection_failed",
                    providers=[a.provider_id for a in e.attempts],
                    errors=[a.error for a in e.attempts],
                )
                raise LanguageDetectionError("Language detection failed") from e

            # An assumed language is not reported as detected
            ctx.source_language = self._config.detection_fallback_language
            outcome = StageOutcome(stage=PipelineStage.DETECTION, degraded=True, attempts=e.attempts)
            ctx.logger.warning("detection_degraded", assumed_language=ctx.source_language)
        else:
            ctx.source_language = detected.language
            ctx.detected_language = detected.language
            outcome = StageOutcome(
                stage=PipelineStage.DETECTION,
                provider_id=detected.provider_id,
                attempts=detected.attempts,
            )

        self._record_outcome(ctx, outcome, stage_start)
        ctx.logger.info("detection_completed", detected_language=ctx.source_language)
        return self._after_language_known(ctx)

    async def _translate(self, ctx: _RunContext) -> PipelineState:
        stage_start = time.perf_counter()
        ctx.logger.info("translation_started", source=ctx.source_language, target=ctx.target_language)

        try:
            routed = await self._router.translate(
                ctx.original_text, ctx.source_language, ctx.target_language
            )
        except TranslationExhaustedError as e:
            ctx.translated_text = mock_translation(ctx.original_text, ctx.target_language)
            outcome = StageOutcome(stage=PipelineStage.TRANSLATION, degraded=True, attempts=e.attempts)
            ctx.logger.warning("translation_degraded", attempts=len(e.attempts))
        else:
            ctx.translated_text = routed.text
            outcome = StageOutcome(
                stage=PipelineStage.TRANSLATION,
                provider_id=routed.provider_id,
                attempts=routed.attempts,
            )
            ctx.logger.info("translation_completed", route=routed.route, provider=routed.provider_id)

        self._record_outcome(ctx, outcome, stage_start)
        return PipelineState.SYNTHESIZING

    async def _synthesize(self, ctx: _RunContext) -> PipelineState:
        stage_start = time.perf_counter()
        ctx.logger.info("tts_started")

        chain = build_synthesis_chain(self._registry, ctx.target_language)
        request = SynthesisRequest(text=ctx.translated_text, language=ctx.target_language)

        try:
            result = await self._tts.attempt(chain, request)
        except AllProvidersFailedError as e:
            ctx.audio = placeholder_audio()
            ctx.audio_playable = False
            outcome = StageOutcome(stage=PipelineStage.SYNTHESIS, degraded=True, attempts=e.attempts)
            ctx.logger.warning("tts_degraded", attempts=len(e.attempts))
        else:
            ctx.audio = result.output
            outcome = StageOutcome(
                stage=PipelineStage.SYNTHESIS,
                provider_id=result.provider_id,
                attempts=result.attempts,
            )

        self._record_outcome(ctx, outcome, stage_start)
        ctx.logger.info("tts_completed", provider=outcome.provider_id, audio_bytes=len(ctx.audio))
        return PipelineState.COMPLETED

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _after_language_known(self, ctx: _RunContext) -> PipelineState:
        """Skip translation when there is nothing to translate."""
        if ctx.source_language == ctx.target_language or not ctx.original_text.strip():
            ctx.translated_text = ctx.original_text
            ctx.provenance[PipelineStage.TRANSLATION] = StageOutcome(
                stage=PipelineStage.TRANSLATION, skipped=True
            )
            ctx.logger.info("translation_skipped", source=ctx.source_language, target=ctx.target_language)
            return PipelineState.SYNTHESIZING
        return PipelineState.TRANSLATING

    def _check_transition(self, current: PipelineState, next_state: PipelineState) -> None:
        if next_state not in TRANSITIONS[current]:
            raise PipelineError(
                f"Illegal pipeline transition {current.value} -> {next_state.value}",
                stage=current.value,
            )

    def _record_outcome(self, ctx: _RunContext, outcome: StageOutcome, stage_start: float) -> None:
        outcome.duration_ms = _elapsed_ms(stage_start)
        ctx.provenance[outcome.stage] = outcome
        record_stage_timing(outcome.stage.value, outcome.duration_ms)
        if outcome.degraded:
            record_degraded_stage(outcome.stage.value)

    async def _notify_state(self, ctx: _RunContext, state: PipelineState) -> None:
        ctx.logger.debug("state_entered", state=state.value)
        if ctx.on_state is not None:
            await ctx.on_state(state)

    async def _fail(self, ctx: _RunContext, state: PipelineState, error: BaseException) -> None:
        ctx.logger.error(
            "job_failed",
            state=state.value,
            error=str(error),
            error_type=type(error).__name__,
        )
        try:
            await self._notify_state(ctx, PipelineState.FAILED)
        except Exception:
            # The original error is what the caller needs to see
            ctx.logger.exception("state_listener_failed", state=PipelineState.FAILED.value)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
