"""Job-level errors surfaced to the caller as Socket.IO `error` events.

Provider and fallback errors live in voice_translator.providers.errors and
never reach the caller directly.
"""

NO_AUDIO_MESSAGE = "No audio data received."


class InvalidJobError(Exception):
    """The audio job is structurally unusable (absent or near-empty audio).

    The only hard failure of the pipeline; raised before any provider call.
    """


class PipelineError(Exception):
    """An unrecoverable condition during orchestration."""

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.stage = stage


class LanguageDetectionError(PipelineError):
    """Auto-detection failed and the detection policy does not allow a guess."""

    def __init__(self, message: str):
        super().__init__(message, stage="detection")
