"""
Pydantic data models for the pipeline orchestrator.

AudioJob is the input of one run, PipelineResult its output. Both live only
for the duration of one request.
"""

import uuid
from enum import Enum

from pydantic import BaseModel, Field

from voice_translator.providers.models import ProviderAttempt

# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class PipelineState(str, Enum):
    """States of one pipeline run."""

    VALIDATING = "validating"
    TRANSCRIBING = "transcribing"
    DETECTING_LANGUAGE = "detecting_language"
    TRANSLATING = "translating"
    SYNTHESIZING = "synthesizing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.COMPLETED, PipelineState.FAILED)


class PipelineStage(str, Enum):
    """Stages that produce output and carry provenance."""

    TRANSCRIPTION = "transcription"
    DETECTION = "detection"
    TRANSLATION = "translation"
    SYNTHESIS = "synthesis"


# Legal transitions of the state machine
TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.VALIDATING: frozenset({PipelineState.TRANSCRIBING, PipelineState.FAILED}),
    PipelineState.TRANSCRIBING: frozenset(
        {
            PipelineState.DETECTING_LANGUAGE,
            PipelineState.TRANSLATING,
            PipelineState.SYNTHESIZING,
            PipelineState.FAILED,
        }
    ),
    PipelineState.DETECTING_LANGUAGE: frozenset(
        {PipelineState.TRANSLATING, PipelineState.SYNTHESIZING, PipelineState.FAILED}
    ),
    PipelineState.TRANSLATING: frozenset({PipelineState.SYNTHESIZING, PipelineState.FAILED}),
    PipelineState.SYNTHESIZING: frozenset({PipelineState.COMPLETED, PipelineState.FAILED}),
    PipelineState.COMPLETED: frozenset(),
    PipelineState.FAILED: frozenset(),
}


# -----------------------------------------------------------------------------
# Input
# -----------------------------------------------------------------------------


class AudioJob(BaseModel):
    """One translation request."""

    job_id: str = Field(default_factory=lambda: f"job-{uuid.uuid4().hex[:12]}")
    audio: bytes | None = Field(default=None, description="Encoded speech (webm/opus from the browser)")
    source_language: str = Field(default="en", description="Language code or 'auto'")
    target_language: str = Field(default="es", description="Language code")

    @property
    def audio_size(self) -> int:
        return len(self.audio) if self.audio else 0


# -----------------------------------------------------------------------------
# Output
# -----------------------------------------------------------------------------


class StageOutcome(BaseModel):
    """Provenance of one stage's output."""

    stage: PipelineStage
    provider_id: str | None = Field(
        default=None, description="Adapter that produced the output; None when skipped or mocked"
    )
    degraded: bool = Field(default=False, description="Output is a mock/placeholder substitute")
    skipped: bool = Field(default=False, description="Stage did not need to run")
    attempts: list[ProviderAttempt] = Field(default_factory=list)
    duration_ms: int = Field(default=0, ge=0)


class ProgressEvent(BaseModel):
    """Transcript-ready notification emitted before translation completes."""

    job_id: str
    original_text: str


class PipelineResult(BaseModel):
    """Output of one AudioJob."""

    job_id: str
    original_text: str
    translated_text: str
    audio: bytes
    source_language: str = Field(..., description="Declared or detected source language")
    target_language: str
    detected_language: str | None = Field(default=None, description="Set when the source was 'auto'")
    audio_playable: bool = Field(
        default=True,
        description="False when the placeholder audio was substituted; "
        "callers fall back to local text-to-speech",
    )
    provenance: dict[PipelineStage, StageOutcome] = Field(default_factory=dict)
    processing_time_ms: int = Field(default=0, ge=0)

    @property
    def degraded(self) -> bool:
        """Whether any stage output is a mock/placeholder substitute."""
        return any(outcome.degraded for outcome in self.provenance.values())

    @property
    def degraded_stages(self) -> list[PipelineStage]:
        return [stage for stage, outcome in self.provenance.items() if outcome.degraded]
