"""Wire payloads for the Socket.IO gateway and the HTTP endpoints.

Field names are snake_case in Python and camelCase on the wire, matching the
browser client (`sourceLang`, `originalText`, `socketId`).
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def coerce_audio(value: Any) -> bytes | None:
    """Normalize the audio forms a Socket.IO client may send into bytes.

    Accepts binary attachments (bytes, bytearray, memoryview), plain lists of
    byte values, and the `{"type": "Buffer", "data": [...]}` shape produced by
    JSON-serialized Node buffers. Empty values become None.
    """
    if value is None:
        return None
    if isinstance(value, dict) and value.get("type") == "Buffer":
        value = value.get("data") or []
    if not isinstance(value, (bytes, bytearray, memoryview, list)):
        raise ValueError(f"Unsupported audio payload type: {type(value).__name__}")
    try:
        data = bytes(value)
    except TypeError as e:
        raise ValueError(f"Audio list must contain byte values: {e}") from e
    return data or None


# -----------------------------------------------------------------------------
# Socket.IO payloads
# -----------------------------------------------------------------------------


class AudioStreamPayload(WireModel):
    """Inbound `audio-stream` event.

    Missing languages stay None and are resolved against the configured
    defaults ("en" -> "es") by the handler.
    """

    audio: bytes | None = None
    source_lang: str | None = None
    target_lang: str | None = None

    @field_validator("audio", mode="before")
    @classmethod
    def _coerce_audio(cls, value: Any) -> bytes | None:
        return coerce_audio(value)

    @field_validator("source_lang", "target_lang", mode="before")
    @classmethod
    def _blank_language(cls, value: Any) -> Any:
        # Clients send "" when no selection was made
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ConnectedPayload(WireModel):
    """Outbound `connected` acknowledgement."""

    message: str = "Connected to translation server"
    socket_id: str


class TranscriptionUpdatePayload(WireModel):
    """Outbound `transcription-update` event, sent before translation finishes."""

    original_text: str


class TranslatedAudioPayload(WireModel):
    """Outbound `translated-audio` event."""

    audio: bytes
    text: str
    original_text: str
    degraded: bool = False
    audio_playable: bool = True
    detected_language: str | None = None


# -----------------------------------------------------------------------------
# HTTP payloads
# -----------------------------------------------------------------------------


class ServiceStatus(WireModel):
    hugging_face: bool
    api_accessible: bool


class HealthResponse(WireModel):
    """Response of GET /api/health."""

    status: Literal["healthy", "degraded"]
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )
    services: ServiceStatus


class DebugAudioRequest(WireModel):
    audio_data: Any = None


class DebugAudioResponse(WireModel):
    received: bool = True
    size: int | None = None
