"""
Google provider adapters.

- GoogleCloudTranslator / GoogleCloudLanguageDetector: Google Cloud
  Translation (v2 API) through the official client, authenticated with a
  service-account JSON file. Optional: without credentials both adapters
  report not ready and fail fast.
- GTTSSynthesizer: unauthenticated Google Translate text-to-speech via gTTS.

Both client libraries are blocking, so calls run in a worker thread.
"""

import asyncio
import logging
import tempfile
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from google.cloud import translate_v2 as translate
from gtts import gTTS

from voice_translator.languages import normalize_language_code

from .interface import BaseProviderAdapter
from .models import Capability, SynthesisRequest, TranslationRequest

logger = logging.getLogger(__name__)

# Provider key used by the translation override table
GOOGLE_CLOUD_TRANSLATE = "google-cloud-translate"

# gTTS uses regional codes for a few languages
GTTS_LANGUAGE_ALIASES: dict[str, str] = {
    "zh": "zh-CN",
    "he": "iw",
}


class GoogleCloudTranslationClient:
    """Lazily constructed, shared Cloud Translation client.

    The underlying client is created on first use so that startup does not
    touch the credential file, and is shared by the translator and detector.
    """

    def __init__(
        self,
        credentials_path: str | None,
        client_factory: Callable[[str], Any] | None = None,
    ):
        self._credentials_path = credentials_path
        self._client_factory = client_factory or translate.Client.from_service_account_json
        self._client: Any = None
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(self._credentials_path)

    def get(self) -> Any:
        with self._lock:
            if self._client is None:
                self._client = self._client_factory(self._credentials_path)
            return self._client


class GoogleCloudTranslator(BaseProviderAdapter):
    """Translation through Google Cloud Translation."""

    capability = Capability.TRANSLATE

    def __init__(self, client: GoogleCloudTranslationClient, timeout_s: float):
        super().__init__(timeout_s=timeout_s)
        self._client = client

    @property
    def provider_id(self) -> str:
        return GOOGLE_CLOUD_TRANSLATE

    @property
    def is_ready(self) -> bool:
        return self._client.is_configured

    async def _invoke(self, payload: TranslationRequest) -> str:
        result = await asyncio.to_thread(self._translate_sync, payload)
        translated = result.get("translatedText") if isinstance(result, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            raise self._malformed("cloud translation response missing 'translatedText'")
        return translated.strip()

    def _translate_sync(self, payload: TranslationRequest) -> Any:
        return self._client.get().translate(
            payload.text,
            source_language=payload.source_language,
            target_language=payload.target_language,
            format_="text",
        )


class GoogleCloudLanguageDetector(BaseProviderAdapter):
    """Language identification through Google Cloud Translation."""

    capability = Capability.DETECT_LANGUAGE

    def __init__(self, client: GoogleCloudTranslationClient, timeout_s: float):
        super().__init__(timeout_s=timeout_s)
        self._client = client

    @property
    def provider_id(self) -> str:
        return "google-cloud-detect"

    @property
    def is_ready(self) -> bool:
        return self._client.is_configured

    async def _invoke(self, payload: str) -> str:
        result = await asyncio.to_thread(lambda: self._client.get().detect_language(payload))
        language = result.get("language") if isinstance(result, dict) else None
        # "und" means the service could not tell
        if not isinstance(language, str) or not language or language == "und":
            raise self._malformed("cloud detection response has no language")
        return normalize_language_code(language)


@contextmanager
def scoped_temp_file(suffix: str = ".mp3") -> Iterator[Path]:
    """Yield a temporary file path that is removed on exit, success or not."""
    with tempfile.NamedTemporaryFile(prefix="tts-", suffix=suffix, delete=False) as handle:
        path = Path(handle.name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


class GTTSSynthesizer(BaseProviderAdapter):
    """Free, unauthenticated synthesis through gTTS."""

    capability = Capability.SYNTHESIZE

    def __init__(
        self,
        timeout_s: float,
        min_audio_bytes: int = 100,
        tts_factory: Callable[..., Any] = gTTS,
    ):
        super().__init__(timeout_s=timeout_s)
        self._min_audio_bytes = min_audio_bytes
        self._tts_factory = tts_factory

    @property
    def provider_id(self) -> str:
        return "gtts"

    async def _invoke(self, payload: SynthesisRequest) -> bytes:
        language = GTTS_LANGUAGE_ALIASES.get(payload.language, payload.language)
        audio = await asyncio.to_thread(self._synthesize_sync, payload.text, language)
        if len(audio) < self._min_audio_bytes:
            raise self._malformed(f"gTTS produced {len(audio)} bytes")
        return audio

    def _synthesize_sync(self, text: str, language: str) -> bytes:
        speech = self._tts_factory(text=text, lang=language)
        with scoped_temp_file(suffix=".mp3") as path:
            speech.save(str(path))
            return path.read_bytes()
