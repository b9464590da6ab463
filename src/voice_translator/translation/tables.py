"""
Declarative routing tables for the Translation Router.

Adding a language or a provider is a change to these tables, not to the
router's control flow.
"""

from voice_translator.languages import ENGLISH
from voice_translator.providers.google import GOOGLE_CLOUD_TRANSLATE

# Any pair whose source or target is listed here tries these providers first
LANGUAGE_PAIR_OVERRIDES: dict[str, tuple[str, ...]] = {
    "ur": (GOOGLE_CLOUD_TRANSLATE,),
}

# Extra models tried after the literal opus-mt pair model
DIRECT_PAIR_MODELS: dict[tuple[str, str], tuple[str, ...]] = {
    ("ja", "en"): ("staka/fugumt-ja-en",),
    ("en", "ja"): ("staka/fugumt-en-ja",),
}

# Pivot legs for pairs where the generic opus-mt models are weak, keyed by
# (from, to) so a leg only applies to the pivot language it was trained for
PIVOT_LEG_MODELS: dict[tuple[str, str], str] = {
    ("ja", ENGLISH): "staka/fugumt-ja-en",
    (ENGLISH, "ja"): "staka/fugumt-en-ja",
}

PIVOT_LANGUAGE = ENGLISH


def opus_mt_model(source: str, target: str) -> str:
    """Return the Helsinki-NLP model name for a language pair."""
    return f"Helsinki-NLP/opus-mt-{source}-{target}"


def direct_pair_models(source: str, target: str) -> list[str]:
    """Return the ordered model list for a direct (source, target) translation."""
    models = [opus_mt_model(source, target)]
    for model in DIRECT_PAIR_MODELS.get((source, target), ()):
        if model not in models:
            models.append(model)
    return models


def pivot_leg_models(source: str, target: str, pivot: str = PIVOT_LANGUAGE) -> tuple[str, str]:
    """Return the (source -> pivot, pivot -> target) models for a pivot translation."""
    first_leg = PIVOT_LEG_MODELS.get((source, pivot), opus_mt_model(source, pivot))
    second_leg = PIVOT_LEG_MODELS.get((pivot, target), opus_mt_model(pivot, target))
    return first_leg, second_leg


def override_providers(
    source: str,
    target: str,
    overrides: dict[str, tuple[str, ...]] | None = None,
) -> list[str]:
    """Return the dedicated provider keys for a pair, source language first."""
    table = LANGUAGE_PAIR_OVERRIDES if overrides is None else overrides
    keys: list[str] = []
    for language in (source, target):
        for key in table.get(language, ()):
            if key not in keys:
                keys.append(key)
    return keys
