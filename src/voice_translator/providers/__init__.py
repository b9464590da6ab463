"""
Provider adapters for the Voice Translator service.

Each adapter wraps one external capability (speech-to-text, language
detection, translation, speech synthesis) behind a uniform contract.

Exports:
    - create_provider_registry: Factory for the configured adapters
    - ProviderRegistry: Adapters per capability
    - ProviderAdapter: Protocol interface
    - BaseProviderAdapter: Abstract base class
    - ProviderError / AllProvidersFailedError: Failure types
    - Capability, ProviderErrorType, ProviderAttempt: Models
"""

from .errors import AllProvidersFailedError, ProviderError
from .factory import ProviderRegistry, create_mock_registry, create_provider_registry
from .interface import BaseProviderAdapter, ProviderAdapter
from .models import (
    Capability,
    ProviderAttempt,
    ProviderErrorType,
    SynthesisRequest,
    TranslationRequest,
)

__all__ = [
    # Factory
    "create_provider_registry",
    "create_mock_registry",
    "ProviderRegistry",
    # Interface
    "ProviderAdapter",
    "BaseProviderAdapter",
    # Errors
    "ProviderError",
    "AllProvidersFailedError",
    # Models
    "Capability",
    "ProviderAttempt",
    "ProviderErrorType",
    "SynthesisRequest",
    "TranslationRequest",
]
