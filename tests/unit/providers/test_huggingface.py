"""Unit tests for the Hugging Face Inference API adapters.

HTTP is served by httpx.MockTransport; no request leaves the process.
"""

import asyncio
import json

import httpx
import pytest

from voice_translator.providers.errors import ProviderError
from voice_translator.providers.huggingface import (
    HuggingFaceClient,
    HuggingFaceLanguageDetector,
    HuggingFaceSpeechToText,
    HuggingFaceSynthesizer,
    HuggingFaceTranslator,
)
from voice_translator.providers.models import ProviderErrorType, SynthesisRequest, TranslationRequest

BASE_URL = "https://hf.test/models"


class RecordingHandler:
    """MockTransport handler returning a canned response and recording requests."""

    def __init__(self, response: httpx.Response | Exception | None = None, delay_s: float = 0.0):
        self.response = response or httpx.Response(200, json={})
        self.delay_s = delay_s
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def make_client(handler: RecordingHandler, token: str | None = "hf_test_token") -> HuggingFaceClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HuggingFaceClient(token=token, base_url=BASE_URL, http_client=http_client)


class TestHuggingFaceSpeechToText:
    @pytest.mark.asyncio
    async def test_posts_raw_audio_and_returns_text(self):
        handler = RecordingHandler(httpx.Response(200, json={"text": "  Hello world  "}))
        adapter = HuggingFaceSpeechToText(make_client(handler), "openai/whisper-large-v3-turbo", timeout_s=30)

        text = await adapter.call(b"\x1a\x45\xdf\xa3audio")

        assert text == "Hello world"
        request = handler.requests[0]
        assert str(request.url) == f"{BASE_URL}/openai/whisper-large-v3-turbo"
        assert request.headers["Authorization"] == "Bearer hf_test_token"
        assert request.headers["Content-Type"] == "audio/webm;codecs=opus"
        assert request.content == b"\x1a\x45\xdf\xa3audio"

    @pytest.mark.asyncio
    async def test_empty_text_is_valid(self):
        handler = RecordingHandler(httpx.Response(200, json={"text": ""}))
        adapter = HuggingFaceSpeechToText(make_client(handler), "openai/whisper-large-v3", timeout_s=30)

        assert await adapter.call(b"audio") == ""

    @pytest.mark.asyncio
    async def test_missing_text_is_malformed(self):
        handler = RecordingHandler(httpx.Response(200, json={"error": "Model is loading"}))
        adapter = HuggingFaceSpeechToText(make_client(handler), "openai/whisper-large-v3", timeout_s=30)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(b"audio")

        assert exc_info.value.error_type == ProviderErrorType.MALFORMED_RESPONSE
        assert exc_info.value.provider_id == "hf:openai/whisper-large-v3"

    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self):
        handler = RecordingHandler(httpx.Response(200, content=b"<html>busy</html>"))
        adapter = HuggingFaceSpeechToText(make_client(handler), "openai/whisper-large-v3", timeout_s=30)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(b"audio")

        assert exc_info.value.error_type == ProviderErrorType.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_non_2xx_status(self):
        handler = RecordingHandler(httpx.Response(503, json={"error": "loading"}))
        adapter = HuggingFaceSpeechToText(make_client(handler), "openai/whisper-large-v3", timeout_s=30)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(b"audio")

        assert exc_info.value.error_type == ProviderErrorType.HTTP_STATUS
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        request = httpx.Request("POST", BASE_URL)
        handler = RecordingHandler(httpx.ConnectError("connection refused", request=request))
        adapter = HuggingFaceSpeechToText(make_client(handler), "openai/whisper-large-v3", timeout_s=30)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(b"audio")

        assert exc_info.value.error_type == ProviderErrorType.TRANSPORT

    @pytest.mark.asyncio
    async def test_timeout_budget(self):
        handler = RecordingHandler(httpx.Response(200, json={"text": "late"}), delay_s=1.0)
        adapter = HuggingFaceSpeechToText(make_client(handler), "openai/whisper-large-v3", timeout_s=0.01)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(b"audio")

        assert exc_info.value.error_type == ProviderErrorType.TIMEOUT

    @pytest.mark.asyncio
    async def test_missing_token_fails_fast_without_request(self):
        handler = RecordingHandler(httpx.Response(200, json={"text": "unused"}))
        adapter = HuggingFaceSpeechToText(
            make_client(handler, token=None), "openai/whisper-large-v3", timeout_s=30
        )

        assert adapter.is_ready is False
        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(b"audio")

        assert exc_info.value.error_type == ProviderErrorType.NOT_CONFIGURED
        assert handler.requests == []


class TestHuggingFaceTranslator:
    @pytest.mark.asyncio
    async def test_returns_translation_text(self):
        handler = RecordingHandler(httpx.Response(200, json=[{"translation_text": "Hola mundo"}]))
        adapter = HuggingFaceTranslator(make_client(handler), "Helsinki-NLP/opus-mt-en-es", timeout_s=30)

        text = await adapter.call(
            TranslationRequest(text="Hello world", source_language="en", target_language="es")
        )

        assert text == "Hola mundo"
        body = json.loads(handler.requests[0].content)
        assert body == {"inputs": "Hello world", "options": {"wait_for_model": True}}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [[], [{"generated_text": "x"}], [{"translation_text": ""}], {"error": "not found"}],
    )
    async def test_missing_translation_text_is_malformed(self, payload):
        handler = RecordingHandler(httpx.Response(200, json=payload))
        adapter = HuggingFaceTranslator(make_client(handler), "Helsinki-NLP/opus-mt-en-es", timeout_s=30)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(TranslationRequest(text="Hi", source_language="en", target_language="es"))

        assert exc_info.value.error_type == ProviderErrorType.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_model_not_found(self):
        handler = RecordingHandler(httpx.Response(404, json={"error": "Model not found"}))
        adapter = HuggingFaceTranslator(make_client(handler), "Helsinki-NLP/opus-mt-fr-ko", timeout_s=30)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(TranslationRequest(text="Salut", source_language="fr", target_language="ko"))

        assert exc_info.value.status_code == 404


class TestHuggingFaceLanguageDetector:
    @pytest.mark.asyncio
    async def test_nested_labels_highest_score_wins(self):
        handler = RecordingHandler(
            httpx.Response(200, json=[[{"label": "fr", "score": 0.2}, {"label": "es", "score": 0.7}]])
        )
        adapter = HuggingFaceLanguageDetector(make_client(handler), "papluca/xlm-roberta-base-language-detection", timeout_s=10)

        assert await adapter.call("Hola a todos") == "es"

    @pytest.mark.asyncio
    async def test_flat_labels_are_normalized(self):
        handler = RecordingHandler(
            httpx.Response(200, json=[{"label": "en-US", "score": 0.9}, {"label": "de", "score": 0.1}])
        )
        adapter = HuggingFaceLanguageDetector(make_client(handler), "papluca/xlm-roberta-base-language-detection", timeout_s=10)

        assert await adapter.call("Hello") == "en"

    @pytest.mark.asyncio
    async def test_no_label_is_malformed(self):
        handler = RecordingHandler(httpx.Response(200, json=[[]]))
        adapter = HuggingFaceLanguageDetector(make_client(handler), "papluca/xlm-roberta-base-language-detection", timeout_s=10)

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call("Hello")

        assert exc_info.value.error_type == ProviderErrorType.MALFORMED_RESPONSE


class TestHuggingFaceSynthesizer:
    @pytest.mark.asyncio
    async def test_returns_audio_bytes(self):
        audio = b"RIFF" + b"\x00" * 1024
        handler = RecordingHandler(httpx.Response(200, content=audio))
        adapter = HuggingFaceSynthesizer(make_client(handler), "facebook/mms-tts-spa", timeout_s=45)

        result = await adapter.call(SynthesisRequest(text="Hola", language="es"))

        assert result == audio
        request = handler.requests[0]
        assert request.headers["Accept"] == "audio/wav"
        assert json.loads(request.content) == {"inputs": "Hola"}

    @pytest.mark.asyncio
    async def test_short_body_is_malformed(self):
        handler = RecordingHandler(httpx.Response(200, content=b'{"error":"loading"}'))
        adapter = HuggingFaceSynthesizer(
            make_client(handler), "suno/bark", timeout_s=30, min_audio_bytes=100
        )

        with pytest.raises(ProviderError) as exc_info:
            await adapter.call(SynthesisRequest(text="Hola", language="es"))

        assert exc_info.value.error_type == ProviderErrorType.MALFORMED_RESPONSE


class TestHuggingFaceClient:
    @pytest.mark.asyncio
    async def test_does_not_close_injected_client(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(RecordingHandler()))
        client = HuggingFaceClient(token="t", base_url=BASE_URL + "/", http_client=http_client)

        await client.aclose()

        assert http_client.is_closed is False
        assert client.model_url("a/b") == f"{BASE_URL}/a/b"
        await http_client.aclose()
