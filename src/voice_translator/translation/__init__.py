"""
Translation routing for the Voice Translator service.

Exports:
    - TranslationRouter: Override / direct / pivot routing and language detection
    - RoutedTranslation: Successful translation with its route
    - DetectedLanguage: Successful detection
    - TranslationExhaustedError: Every route failed
"""

from .errors import TranslationExhaustedError
from .router import DetectedLanguage, RoutedTranslation, TranslationRouter

__all__ = [
    "TranslationRouter",
    "RoutedTranslation",
    "DetectedLanguage",
    "TranslationExhaustedError",
]
