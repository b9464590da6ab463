"""Unit tests for the provider registry factory."""

import httpx
import pytest

from voice_translator.config import ProviderConfig
from voice_translator.providers.factory import (
    STT_MODELS,
    create_mock_registry,
    create_provider_registry,
)
from voice_translator.providers.google import (
    GOOGLE_CLOUD_TRANSLATE,
    GoogleCloudLanguageDetector,
    GoogleCloudTranslator,
    GTTSSynthesizer,
)
from voice_translator.providers.huggingface import (
    HuggingFaceLanguageDetector,
    HuggingFaceSpeechToText,
    HuggingFaceSynthesizer,
)
from voice_translator.providers.interface import ProviderAdapter
from voice_translator.providers.mock import StaticMockAdapter
from voice_translator.providers.models import SynthesisRequest, TranslationRequest


@pytest.fixture
def http_client(no_network):
    return httpx.AsyncClient(transport=no_network)


class TestCreateProviderRegistry:
    def test_speech_to_text_chain_order(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        assert [a.provider_id for a in registry.speech_to_text] == [f"hf:{m}" for m in STT_MODELS]
        assert all(isinstance(a, HuggingFaceSpeechToText) for a in registry.speech_to_text)
        assert all(a.timeout_s == provider_config.stt_timeout_s for a in registry.speech_to_text)

    def test_model_detector_only_without_google(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        assert len(registry.language_detectors) == 1
        assert isinstance(registry.language_detectors[0], HuggingFaceLanguageDetector)

    def test_cloud_detector_first_with_google(self, http_client):
        config = ProviderConfig(
            mode="live", hugging_face_token="hf_x", google_credentials_path="/secrets/sa.json"
        )

        registry = create_provider_registry(config, http_client=http_client)

        assert isinstance(registry.language_detectors[0], GoogleCloudLanguageDetector)
        assert isinstance(registry.language_detectors[1], HuggingFaceLanguageDetector)
        assert registry.dedicated_translators[GOOGLE_CLOUD_TRANSLATE].is_ready is True

    def test_dedicated_translator_registered_but_not_ready(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        translator = registry.dedicated_translators[GOOGLE_CLOUD_TRANSLATE]
        assert isinstance(translator, GoogleCloudTranslator)
        assert translator.is_ready is False

    def test_gtts_is_the_free_synthesizer(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        assert len(registry.free_synthesizers) == 1
        assert isinstance(registry.free_synthesizers[0], GTTSSynthesizer)

    def test_translators_are_cached_per_model(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        first = registry.translator_for_model("Helsinki-NLP/opus-mt-fr-en")
        second = registry.translator_for_model("Helsinki-NLP/opus-mt-fr-en")

        assert first is second
        assert first.provider_id == "hf:Helsinki-NLP/opus-mt-fr-en"
        assert first.timeout_s == provider_config.translation_timeout_s

    def test_synthesizer_timeout_depends_on_voice_kind(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        specific = registry.synthesizer_for_model("facebook/mms-tts-spa", True)
        fallback = registry.synthesizer_for_model("suno/bark", False)

        assert isinstance(specific, HuggingFaceSynthesizer)
        assert specific.timeout_s == provider_config.synthesis_timeout_s
        assert fallback.timeout_s == provider_config.fallback_synthesis_timeout_s

    def test_adapters_satisfy_protocol(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        for adapter in (*registry.speech_to_text, *registry.language_detectors, *registry.free_synthesizers):
            assert isinstance(adapter, ProviderAdapter)

    @pytest.mark.asyncio
    async def test_aclose_keeps_injected_client_open(self, provider_config, http_client):
        registry = create_provider_registry(provider_config, http_client=http_client)

        await registry.aclose()

        assert http_client.is_closed is False
        await http_client.aclose()

    def test_mock_mode_returns_mock_registry(self):
        registry = create_provider_registry(ProviderConfig(mode="mock"))

        assert all(isinstance(a, StaticMockAdapter) for a in registry.speech_to_text)


class TestCreateMockRegistry:
    @pytest.mark.asyncio
    async def test_mock_adapters_produce_output(self):
        registry = create_mock_registry()

        transcript = await registry.speech_to_text[0].call(b"audio")
        translated = await registry.translator_for_model("any/model").call(
            TranslationRequest(text=transcript, source_language="en", target_language="es")
        )
        audio = await registry.free_synthesizers[0].call(SynthesisRequest(text=translated, language="es"))

        assert transcript
        assert translated == transcript
        assert audio.startswith(b"RIFF")
