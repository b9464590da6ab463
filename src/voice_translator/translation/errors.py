"""
Errors raised by the Translation Router.
"""

from voice_translator.providers.models import ProviderAttempt


class TranslationExhaustedError(Exception):
    """Override, direct and pivot routes all failed for a language pair."""

    def __init__(self, source_language: str, target_language: str, attempts: list[ProviderAttempt]):
        self.source_language = source_language
        self.target_language = target_language
        self.attempts = attempts
        super().__init__(
            f"All translation strategies failed for {source_language}->{target_language} "
            f"({len(attempts)} attempts)"
        )
