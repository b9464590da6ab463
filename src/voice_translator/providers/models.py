"""
Pydantic data models for provider adapters.

Defines the capability enum, the typed inputs passed to adapters and the
ProviderAttempt record produced for every adapter call.
"""

from enum import Enum

from pydantic import BaseModel, Field

# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------


class Capability(str, Enum):
    """Capabilities delegated to external providers."""

    SPEECH_TO_TEXT = "speech_to_text"
    DETECT_LANGUAGE = "detect_language"
    TRANSLATE = "translate"
    SYNTHESIZE = "synthesize"


class ProviderErrorType(str, Enum):
    """Classification of adapter failures for fallback policies."""

    TIMEOUT = "timeout"  # Call exceeded the adapter's budget
    HTTP_STATUS = "http_status"  # Non-2xx response
    TRANSPORT = "transport"  # Connection refused, DNS, TLS...
    MALFORMED_RESPONSE = "malformed_response"  # Body missing the expected shape
    NOT_CONFIGURED = "not_configured"  # Credential absent, call skipped
    UNKNOWN = "unknown"  # Unclassified failure


# -----------------------------------------------------------------------------
# Adapter Inputs
# -----------------------------------------------------------------------------


class TranslationRequest(BaseModel):
    """Input for translation adapters."""

    text: str = Field(..., description="Text to translate")
    source_language: str = Field(..., description="Source language code (e.g., 'fr')")
    target_language: str = Field(..., description="Target language code (e.g., 'ko')")


class SynthesisRequest(BaseModel):
    """Input for speech synthesis adapters."""

    text: str = Field(..., description="Text to speak")
    language: str = Field(..., description="Language of the text (e.g., 'es')")


# -----------------------------------------------------------------------------
# Attempt Record
# -----------------------------------------------------------------------------


class ProviderAttempt(BaseModel):
    """One adapter call, successful or not.

    Not persisted; used for logging, metrics, stage provenance and
    fallthrough decisions.
    """

    provider_id: str = Field(..., description="Adapter identifier (e.g., 'hf:openai/whisper-large-v3')")
    capability: Capability = Field(..., description="Capability exercised by the call")
    success: bool = Field(..., description="Whether the call produced usable output")
    latency_ms: int = Field(..., ge=0, description="Wall clock time of the call")
    error: str | None = Field(default=None, description="Failure detail (safe for logs)")
    error_type: ProviderErrorType | None = Field(default=None, description="Failure class")
    retryable: bool | None = Field(
        default=None, description="Whether the failure is transient (timeouts, 5xx, network)"
    )
