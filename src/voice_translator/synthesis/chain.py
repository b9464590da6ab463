"""Speech synthesis fallback chain construction."""

from typing import TYPE_CHECKING

from voice_translator.providers.interface import ProviderAdapter

from .voices import voice_models_for

if TYPE_CHECKING:
    from voice_translator.providers.factory import ProviderRegistry


def build_synthesis_chain(registry: "ProviderRegistry", language: str) -> list[ProviderAdapter]:
    """Return the ordered synthesizers for a target language.

    Free, unauthenticated providers come first (no quota pressure), then the
    quota-limited hosted models from the voice tables.
    """
    chain: list[ProviderAdapter] = list(registry.free_synthesizers)
    for voice in voice_models_for(language):
        chain.append(registry.synthesizer_for_model(voice.model, voice.language_specific))
    return chain
