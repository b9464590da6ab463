"""
Hugging Face Inference API adapters.

One adapter class per capability, each bound to a single hosted model:
- HuggingFaceSpeechToText: Whisper-family models, raw audio in, {"text"} out
- HuggingFaceTranslator: Marian/opus-mt style models, [{"translation_text"}] out
- HuggingFaceLanguageDetector: text classification models, [[{label, score}]] out
- HuggingFaceSynthesizer: MMS/Bark/VITS style models, audio bytes out

All adapters share one HuggingFaceClient (one httpx.AsyncClient) built at
startup from the immutable provider configuration.
"""

import logging
from typing import Any

import httpx

from voice_translator.languages import normalize_language_code

from .interface import BaseProviderAdapter
from .models import Capability, SynthesisRequest, TranslationRequest

logger = logging.getLogger(__name__)

# The browser records webm/opus
DEFAULT_AUDIO_CONTENT_TYPE = "audio/webm;codecs=opus"


class HuggingFaceClient:
    """Thin authenticated wrapper around httpx for the Inference API."""

    def __init__(
        self,
        token: str | None,
        base_url: str = "https://api-inference.huggingface.co/models",
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            token: Bearer token (HUGGING_FACE_TOKEN); None disables all calls
            base_url: Inference API base URL, model name is appended
            http_client: Optional shared httpx client (injected in tests)
        """
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient()
        self._owns_http = http_client is None

    @property
    def is_configured(self) -> bool:
        return bool(self._token)

    def model_url(self, model: str) -> str:
        return f"{self._base_url}/{model}"

    async def post(
        self,
        model: str,
        *,
        timeout_s: float,
        json: Any | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST to a model endpoint and raise on non-2xx status.

        Raises:
            httpx.HTTPStatusError: On non-success status
            httpx.TransportError: On network failure or timeout
        """
        request_headers = {"Authorization": f"Bearer {self._token}"}
        if headers:
            request_headers.update(headers)

        response = await self._http.post(
            self.model_url(model),
            json=json,
            content=content,
            headers=request_headers,
            timeout=timeout_s,
        )
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()


class _HuggingFaceAdapter(BaseProviderAdapter):
    """Shared plumbing for adapters bound to one hosted model."""

    def __init__(self, client: HuggingFaceClient, model: str, timeout_s: float):
        super().__init__(timeout_s=timeout_s)
        self._client = client
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider_id(self) -> str:
        return f"hf:{self._model}"

    @property
    def is_ready(self) -> bool:
        return self._client.is_configured

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            raise self._malformed("response body is not JSON") from None


class HuggingFaceSpeechToText(_HuggingFaceAdapter):
    """Speech-to-text through a hosted Whisper model."""

    capability = Capability.SPEECH_TO_TEXT

    def __init__(
        self,
        client: HuggingFaceClient,
        model: str,
        timeout_s: float,
        content_type: str = DEFAULT_AUDIO_CONTENT_TYPE,
    ):
        super().__init__(client, model, timeout_s)
        self._content_type = content_type

    async def _invoke(self, payload: bytes) -> str:
        response = await self._client.post(
            self._model,
            timeout_s=self._timeout_s,
            content=payload,
            headers={
                "Content-Type": self._content_type,
                "Accept": "application/json",
            },
        )
        data = self._json(response)

        # Whisper returns {"text": ""} for silence, which is a valid transcript
        if isinstance(data, dict) and isinstance(data.get("text"), str):
            return data["text"].strip()
        raise self._malformed("STT response missing 'text' field")


class HuggingFaceTranslator(_HuggingFaceAdapter):
    """Translation through a hosted sequence-to-sequence model."""

    capability = Capability.TRANSLATE

    async def _invoke(self, payload: TranslationRequest) -> str:
        response = await self._client.post(
            self._model,
            timeout_s=self._timeout_s,
            json={"inputs": payload.text, "options": {"wait_for_model": True}},
        )
        data = self._json(response)

        if isinstance(data, list) and data and isinstance(data[0], dict):
            translated = data[0].get("translation_text")
            if isinstance(translated, str) and translated.strip():
                return translated.strip()
        raise self._malformed("translation response missing 'translation_text' field")


class HuggingFaceLanguageDetector(_HuggingFaceAdapter):
    """Language identification through a hosted text classification model."""

    capability = Capability.DETECT_LANGUAGE

    async def _invoke(self, payload: str) -> str:
        response = await self._client.post(
            self._model,
            timeout_s=self._timeout_s,
            json={"inputs": payload, "options": {"wait_for_model": True}},
        )
        data = self._json(response)

        # Accept both [[{label, score}, ...]] and [{label, score}, ...]
        if isinstance(data, list) and data and isinstance(data[0], list):
            data = data[0]
        if not isinstance(data, list):
            raise self._malformed("detection response is not a list of labels")

        candidates = [
            item
            for item in data
            if isinstance(item, dict) and isinstance(item.get("label"), str) and item["label"]
        ]
        if not candidates:
            raise self._malformed("detection response has no labels")

        best = max(candidates, key=lambda item: float(item.get("score", 0.0)))
        return normalize_language_code(best["label"])


class HuggingFaceSynthesizer(_HuggingFaceAdapter):
    """Speech synthesis through a hosted TTS model."""

    capability = Capability.SYNTHESIZE

    def __init__(
        self,
        client: HuggingFaceClient,
        model: str,
        timeout_s: float,
        min_audio_bytes: int = 100,
    ):
        super().__init__(client, model, timeout_s)
        self._min_audio_bytes = min_audio_bytes

    async def _invoke(self, payload: SynthesisRequest) -> bytes:
        logger.debug(f"Synthesizing with {self._model}: {payload.text[:50]!r}")
        response = await self._client.post(
            self._model,
            timeout_s=self._timeout_s,
            json={"inputs": payload.text},
            headers={"Accept": "audio/wav"},
        )
        audio = response.content

        # Short bodies are error messages served with a 200 status
        if len(audio) < self._min_audio_bytes:
            raise self._malformed(
                f"audio response too short ({len(audio)} bytes) - likely an error"
            )
        return audio
