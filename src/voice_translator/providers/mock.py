"""
Mock provider adapters for testing and offline development.

Provides deterministic behavior without external services. Used by the test
suite and by PROVIDER_MODE=mock.
"""

import asyncio
import io
import wave
from dataclasses import dataclass
from typing import Any

from .errors import ProviderError
from .interface import BaseProviderAdapter
from .models import Capability, ProviderErrorType, SynthesisRequest, TranslationRequest


@dataclass
class MockAdapterConfig:
    """Configuration for mock adapter behavior."""

    simulate_latency_ms: int = 0
    timeout_s: float = 5.0


class _RecordingMockAdapter(BaseProviderAdapter):
    """Records every payload it receives in `calls`."""

    def __init__(
        self,
        capability: Capability,
        provider_id: str,
        config: MockAdapterConfig | None = None,
    ):
        self._config = config or MockAdapterConfig()
        super().__init__(timeout_s=self._config.timeout_s)
        self.capability = capability
        self._provider_id = provider_id
        self.calls: list[Any] = []

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def _invoke(self, payload: Any) -> Any:
        self.calls.append(payload)
        if self._config.simulate_latency_ms > 0:
            await asyncio.sleep(self._config.simulate_latency_ms / 1000.0)
        return await self._respond(payload)

    async def _respond(self, payload: Any) -> Any:
        raise NotImplementedError


class StaticMockAdapter(_RecordingMockAdapter):
    """Always returns the same output."""

    def __init__(
        self,
        capability: Capability,
        provider_id: str,
        output: Any,
        config: MockAdapterConfig | None = None,
    ):
        super().__init__(capability, provider_id, config)
        self._output = output

    async def _respond(self, payload: Any) -> Any:
        return self._output


class FailingMockAdapter(_RecordingMockAdapter):
    """Always fails with the configured error type."""

    def __init__(
        self,
        capability: Capability,
        provider_id: str,
        error_type: ProviderErrorType = ProviderErrorType.HTTP_STATUS,
        message: str = "simulated provider failure",
        config: MockAdapterConfig | None = None,
    ):
        super().__init__(capability, provider_id, config)
        self._error_type = error_type
        self._message = message

    async def _respond(self, payload: Any) -> Any:
        raise ProviderError(
            capability=self.capability,
            provider_id=self.provider_id,
            message=self._message,
            error_type=self._error_type,
        )


class MockIdentityTranslator(_RecordingMockAdapter):
    """Returns source text unchanged (identity translation)."""

    def __init__(self, provider_id: str = "mock-identity-v1", config: MockAdapterConfig | None = None):
        super().__init__(Capability.TRANSLATE, provider_id, config)

    async def _respond(self, payload: TranslationRequest) -> str:
        return payload.text


class MockToneSynthesizer(_RecordingMockAdapter):
    """Returns a short silent WAV clip whose length follows the text length."""

    def __init__(self, provider_id: str = "mock-tone-v1", config: MockAdapterConfig | None = None):
        super().__init__(Capability.SYNTHESIZE, provider_id, config)

    async def _respond(self, payload: SynthesisRequest) -> bytes:
        duration_ms = min(5000, 200 + 60 * len(payload.text))
        return generate_silent_wav(duration_ms)


def generate_silent_wav(duration_ms: int, sample_rate_hz: int = 16000) -> bytes:
    """Generate a mono 16-bit PCM WAV file of silence."""
    num_samples = int(sample_rate_hz * duration_ms / 1000)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate_hz)
        wav.writeframes(b"\x00\x00" * num_samples)
    return buffer.getvalue()
