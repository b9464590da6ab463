"""Shared test fixtures for Voice Translator tests.

Provides sample audio payloads, a provider registry builder wired with mock
adapters, and pipeline configuration with fixed values.
"""

import httpx
import pytest

from voice_translator.config import PipelineConfig, ProviderConfig
from voice_translator.providers.factory import ProviderRegistry
from voice_translator.providers.interface import ProviderAdapter
from voice_translator.providers.mock import FailingMockAdapter, StaticMockAdapter
from voice_translator.providers.models import Capability

# =============================================================================
# Audio Fixtures
# =============================================================================

# EBML magic of a webm container, followed by silence
WEBM_HEADER = b"\x1a\x45\xdf\xa3"


def make_audio(size: int) -> bytes:
    """Build a fake recorded utterance of exactly `size` bytes."""
    if size <= len(WEBM_HEADER):
        return WEBM_HEADER[:size]
    return WEBM_HEADER + b"\x00" * (size - len(WEBM_HEADER))


@pytest.fixture
def sample_audio() -> bytes:
    """A 4 KB utterance, comfortably above the minimum job size."""
    return make_audio(4096)


@pytest.fixture
def synthesized_audio() -> bytes:
    """Audio bytes returned by successful synthesizer mocks."""
    return b"ID3" + b"\x00" * 2048


# =============================================================================
# Registry Fixtures
# =============================================================================


class RegistryBuilder:
    """Builds a ProviderRegistry from mock adapters.

    Model-keyed translators and synthesizers default to failing adapters, so a
    test only declares the models that should succeed. Every adapter handed
    out is kept in `translators` / `synthesizers` for assertions.
    """

    def __init__(self, synthesized_audio: bytes):
        self.speech_to_text: list[ProviderAdapter] = [
            StaticMockAdapter(Capability.SPEECH_TO_TEXT, "stt-primary", "Hello world"),
        ]
        self.language_detectors: list[ProviderAdapter] = [
            StaticMockAdapter(Capability.DETECT_LANGUAGE, "detect-primary", "fr"),
        ]
        self.dedicated_translators: dict[str, ProviderAdapter] = {}
        self.free_synthesizers: list[ProviderAdapter] = [
            StaticMockAdapter(Capability.SYNTHESIZE, "gtts", synthesized_audio),
        ]
        self.translators: dict[str, ProviderAdapter] = {}
        self.synthesizers: dict[str, ProviderAdapter] = {}
        self.synthesizer_flags: dict[str, bool] = {}

    def translate_with(self, model: str, output: str) -> StaticMockAdapter:
        adapter = StaticMockAdapter(Capability.TRANSLATE, f"hf:{model}", output)
        self.translators[model] = adapter
        return adapter

    def translator_for_model(self, model: str) -> ProviderAdapter:
        if model not in self.translators:
            self.translators[model] = FailingMockAdapter(Capability.TRANSLATE, f"hf:{model}")
        return self.translators[model]

    def synthesizer_for_model(self, model: str, language_specific: bool) -> ProviderAdapter:
        self.synthesizer_flags[model] = language_specific
        if model not in self.synthesizers:
            self.synthesizers[model] = FailingMockAdapter(Capability.SYNTHESIZE, f"hf:{model}")
        return self.synthesizers[model]

    def fail_everything(self) -> None:
        """Make every stage's providers fail."""
        self.speech_to_text = [
            FailingMockAdapter(Capability.SPEECH_TO_TEXT, "stt-primary"),
            FailingMockAdapter(Capability.SPEECH_TO_TEXT, "stt-secondary"),
        ]
        self.language_detectors = [FailingMockAdapter(Capability.DETECT_LANGUAGE, "detect-primary")]
        self.free_synthesizers = [FailingMockAdapter(Capability.SYNTHESIZE, "gtts")]

    def build(self) -> ProviderRegistry:
        return ProviderRegistry(
            speech_to_text=self.speech_to_text,
            language_detectors=self.language_detectors,
            dedicated_translators=self.dedicated_translators,
            free_synthesizers=self.free_synthesizers,
            translator_for_model=self.translator_for_model,
            synthesizer_for_model=self.synthesizer_for_model,
        )


@pytest.fixture
def registry_builder(synthesized_audio: bytes) -> RegistryBuilder:
    return RegistryBuilder(synthesized_audio)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Pipeline policy with fixed values, independent of the environment."""
    return PipelineConfig(
        min_audio_bytes=1000,
        detection_failure_policy="fail",
        detection_fallback_language="en",
        default_source_language="en",
        default_target_language="es",
    )


@pytest.fixture
def provider_config() -> ProviderConfig:
    """Live provider configuration with a dummy token and no Google credentials."""
    return ProviderConfig(
        mode="live",
        hugging_face_token="hf_test_token",
        hugging_face_api_url="https://hf.test/models",
        hugging_face_models_url="https://hf.test/api/models",
        google_credentials_path=None,
    )


def unreachable_transport() -> httpx.MockTransport:
    """Transport that fails the test if any request is made."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"Unexpected HTTP request: {request.method} {request.url}")

    return httpx.MockTransport(handler)


@pytest.fixture
def no_network() -> httpx.MockTransport:
    return unreachable_transport()
