"""
Voice model tables for the speech synthesis fallback chain.

Order of the Hugging Face part of the chain:
1. The language-specific MMS voice, when the language has one
2. Multilingual fallbacks
3. English-only fallbacks (last resort, they mispronounce other languages)
"""

from dataclasses import dataclass

# Target language -> language-specific voice model
VOICE_MODELS: dict[str, str] = {
    "en": "facebook/mms-tts-eng",
    "es": "facebook/mms-tts-spa",
    "fr": "facebook/mms-tts-fra",
    "de": "facebook/mms-tts-deu",
    "ja": "facebook/mms-tts-jpn",
    "hi": "facebook/mms-tts-hin",
    "it": "facebook/mms-tts-ita",
    "ru": "facebook/mms-tts-rus",
    "zh": "facebook/mms-tts-cmn",  # Mandarin
    "ur": "facebook/mms-tts-urd",
    "ko": "facebook/mms-tts-kor",
    "pt": "facebook/mms-tts-por",
}

MULTILINGUAL_VOICE_MODELS: tuple[str, ...] = ("suno/bark",)

ENGLISH_VOICE_MODELS: tuple[str, ...] = (
    "espnet/kan-bayashi_ljspeech_vits",
    "microsoft/speecht5_tts",
)


@dataclass(frozen=True)
class VoiceModel:
    """One hosted synthesis model in the chain."""

    model: str
    language_specific: bool


def voice_models_for(language: str) -> list[VoiceModel]:
    """Return the ordered hosted voice models for a target language."""
    chain: list[VoiceModel] = []
    if language in VOICE_MODELS:
        chain.append(VoiceModel(VOICE_MODELS[language], language_specific=True))
    for model in (*MULTILINGUAL_VOICE_MODELS, *ENGLISH_VOICE_MODELS):
        chain.append(VoiceModel(model, language_specific=False))
    return chain
