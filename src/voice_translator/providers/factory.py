"""
Provider registry factory.

Builds every adapter the pipeline can use from the immutable
ProviderConfig. The registry is the only place that knows about
credentials; the orchestrator and router receive adapters, never
environment variables.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import httpx

from voice_translator.config import ProviderConfig

from .google import (
    GOOGLE_CLOUD_TRANSLATE,
    GoogleCloudLanguageDetector,
    GoogleCloudTranslationClient,
    GoogleCloudTranslator,
    GTTSSynthesizer,
)
from .huggingface import (
    HuggingFaceClient,
    HuggingFaceLanguageDetector,
    HuggingFaceSpeechToText,
    HuggingFaceSynthesizer,
    HuggingFaceTranslator,
)
from .interface import ProviderAdapter
from .mock import MockIdentityTranslator, MockToneSynthesizer, StaticMockAdapter
from .models import Capability

logger = logging.getLogger(__name__)

# Fast model first, high-accuracy model second
STT_MODELS: tuple[str, ...] = (
    "openai/whisper-large-v3-turbo",
    "openai/whisper-large-v3",
)

MOCK_TRANSCRIPT = "Hello from the mock transcriber"

# Model-based detector, tried after the cloud detector when that is configured
LANGUAGE_DETECTION_MODEL = "papluca/xlm-roberta-base-language-detection"


@dataclass
class ProviderRegistry:
    """Adapters per capability.

    Model-keyed translators and synthesizers are built on demand through the
    two factory callables because the model depends on the language pair.
    """

    speech_to_text: list[ProviderAdapter]
    language_detectors: list[ProviderAdapter]
    dedicated_translators: dict[str, ProviderAdapter]
    free_synthesizers: list[ProviderAdapter]
    translator_for_model: Callable[[str], ProviderAdapter]
    synthesizer_for_model: Callable[[str, bool], ProviderAdapter]
    closers: list[Callable[[], Awaitable[None]]] = field(default_factory=list)

    async def aclose(self) -> None:
        for close in self.closers:
            await close()


def create_provider_registry(
    config: ProviderConfig,
    http_client: httpx.AsyncClient | None = None,
) -> ProviderRegistry:
    """Create the provider registry for the configured mode.

    Args:
        config: Provider configuration
        http_client: Optional shared httpx client (injected in tests)

    Returns:
        ProviderRegistry with live adapters, or mock adapters when
        config.mode == "mock"
    """
    if config.mode == "mock":
        logger.info("Provider mode is 'mock', no external provider will be called")
        return create_mock_registry()

    if not config.has_hugging_face_token:
        logger.warning(
            "HUGGING_FACE_TOKEN not set. Hugging Face adapters will fail fast "
            "and every stage will rely on its fallbacks."
        )

    hf_client = HuggingFaceClient(
        token=config.hugging_face_token,
        base_url=config.hugging_face_api_url,
        http_client=http_client,
    )
    google_client = GoogleCloudTranslationClient(config.google_credentials_path)

    cloud_detector = GoogleCloudLanguageDetector(
        google_client, timeout_s=config.detection_timeout_s
    )
    model_detector = HuggingFaceLanguageDetector(
        hf_client, LANGUAGE_DETECTION_MODEL, timeout_s=config.detection_timeout_s
    )
    # Cloud detector preferred if configured, else the model-based detector
    detectors: list[ProviderAdapter] = (
        [cloud_detector, model_detector] if google_client.is_configured else [model_detector]
    )

    translators: dict[str, ProviderAdapter] = {}
    synthesizers: dict[str, ProviderAdapter] = {}

    def translator_for_model(model: str) -> ProviderAdapter:
        if model not in translators:
            translators[model] = HuggingFaceTranslator(
                hf_client, model, timeout_s=config.translation_timeout_s
            )
        return translators[model]

    def synthesizer_for_model(model: str, language_specific: bool) -> ProviderAdapter:
        if model not in synthesizers:
            timeout_s = (
                config.synthesis_timeout_s
                if language_specific
                else config.fallback_synthesis_timeout_s
            )
            synthesizers[model] = HuggingFaceSynthesizer(
                hf_client,
                model,
                timeout_s=timeout_s,
                min_audio_bytes=config.min_audio_response_bytes,
            )
        return synthesizers[model]

    return ProviderRegistry(
        speech_to_text=[
            HuggingFaceSpeechToText(hf_client, model, timeout_s=config.stt_timeout_s)
            for model in STT_MODELS
        ],
        language_detectors=detectors,
        dedicated_translators={
            GOOGLE_CLOUD_TRANSLATE: GoogleCloudTranslator(
                google_client, timeout_s=config.cloud_translation_timeout_s
            ),
        },
        free_synthesizers=[
            GTTSSynthesizer(
                timeout_s=config.gtts_timeout_s,
                min_audio_bytes=config.min_audio_response_bytes,
            ),
        ],
        translator_for_model=translator_for_model,
        synthesizer_for_model=synthesizer_for_model,
        closers=[hf_client.aclose],
    )


def create_mock_registry() -> ProviderRegistry:
    """Create a registry of deterministic mock adapters (offline development)."""
    translators: dict[str, ProviderAdapter] = {}
    synthesizers: dict[str, ProviderAdapter] = {}

    def translator_for_model(model: str) -> ProviderAdapter:
        return translators.setdefault(model, MockIdentityTranslator(provider_id=f"mock:{model}"))

    def synthesizer_for_model(model: str, language_specific: bool) -> ProviderAdapter:
        return synthesizers.setdefault(model, MockToneSynthesizer(provider_id=f"mock:{model}"))

    return ProviderRegistry(
        speech_to_text=[
            StaticMockAdapter(Capability.SPEECH_TO_TEXT, "mock-stt-v1", MOCK_TRANSCRIPT),
        ],
        language_detectors=[
            StaticMockAdapter(Capability.DETECT_LANGUAGE, "mock-detect-v1", "en"),
        ],
        dedicated_translators={},
        free_synthesizers=[MockToneSynthesizer()],
        translator_for_model=translator_for_model,
        synthesizer_for_model=synthesizer_for_model,
    )
