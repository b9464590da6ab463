"""Audio translation pipeline: AudioJob in, PipelineResult out.

Provides the PipelineOrchestrator state machine and its data models.
"""

from .models import (
    AudioJob,
    PipelineResult,
    PipelineStage,
    PipelineState,
    ProgressEvent,
    StageOutcome,
)
from .orchestrator import PipelineOrchestrator, ProgressCallback, StateListener

__all__ = [
    "PipelineOrchestrator",
    "ProgressCallback",
    "StateListener",
    "AudioJob",
    "PipelineResult",
    "PipelineStage",
    "PipelineState",
    "ProgressEvent",
    "StageOutcome",
]
