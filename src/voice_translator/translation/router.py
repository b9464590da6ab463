"""
Translation Router.

Layers a language-aware routing policy over the fallback strategy:

1. Language-pair override: pairs touching a listed language try a dedicated
   provider first (unconfigured or failing providers fall through)
2. Direct pair model: opus-mt-{source}-{target} plus any table extras
3. Pivot through English: source -> en, then en -> target; both legs must
   succeed
4. Otherwise TranslationExhaustedError; the orchestrator substitutes a
   deterministic mock translation

The router also owns the language detector chain used for `auto` sources.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from voice_translator.fallback import FallbackStrategy
from voice_translator.observability.logger import get_logger
from voice_translator.providers.errors import AllProvidersFailedError
from voice_translator.providers.interface import ProviderAdapter
from voice_translator.providers.models import Capability, ProviderAttempt, TranslationRequest

from .errors import TranslationExhaustedError
from .tables import (
    LANGUAGE_PAIR_OVERRIDES,
    PIVOT_LANGUAGE,
    direct_pair_models,
    override_providers,
    pivot_leg_models,
)

if TYPE_CHECKING:
    from voice_translator.providers.factory import ProviderRegistry


@dataclass
class RoutedTranslation:
    """Successful translation and how it was obtained."""

    text: str
    provider_id: str
    route: str  # "override", "direct" or "pivot"
    attempts: list[ProviderAttempt] = field(default_factory=list)


@dataclass
class DetectedLanguage:
    """Successful language detection."""

    language: str
    provider_id: str
    attempts: list[ProviderAttempt] = field(default_factory=list)


class TranslationRouter:
    """Chooses between override, direct and pivot translation routes."""

    def __init__(
        self,
        registry: "ProviderRegistry",
        language_overrides: dict[str, tuple[str, ...]] | None = None,
        pivot_language: str = PIVOT_LANGUAGE,
    ):
        """Initialize the router.

        Args:
            registry: Provider registry supplying adapters
            language_overrides: Language -> dedicated provider keys table
                (defaults to LANGUAGE_PAIR_OVERRIDES)
            pivot_language: Intermediate language for two-hop translation
        """
        self._registry = registry
        self._overrides = LANGUAGE_PAIR_OVERRIDES if language_overrides is None else language_overrides
        self._pivot = pivot_language
        self._translate = FallbackStrategy(Capability.TRANSLATE)
        self._detect = FallbackStrategy(Capability.DETECT_LANGUAGE)
        self.logger = get_logger(__name__)

    async def detect(self, text: str) -> DetectedLanguage:
        """Detect the language of a transcript.

        Raises:
            AllProvidersFailedError: If every configured detector failed
        """
        result = await self._detect.attempt(self._registry.language_detectors, text)
        return DetectedLanguage(
            language=result.output,
            provider_id=result.provider_id,
            attempts=result.attempts,
        )

    async def translate(self, text: str, source_language: str, target_language: str) -> RoutedTranslation:
        """Translate text, trying override, direct and pivot routes in order.

        Args:
            text: Text to translate
            source_language: Concrete source language code (never 'auto')
            target_language: Target language code

        Returns:
            RoutedTranslation with the translated text

        Raises:
            TranslationExhaustedError: If every route failed
        """
        attempts: list[ProviderAttempt] = []
        request = TranslationRequest(
            text=text,
            source_language=source_language,
            target_language=target_language,
        )

        # 1. Language-pair override
        dedicated = self._override_candidates(source_language, target_language)
        if dedicated:
            routed = await self._try_route("override", dedicated, request, attempts)
            if routed is not None:
                return routed

        # 2. Direct pair model
        direct = [
            self._registry.translator_for_model(model)
            for model in direct_pair_models(source_language, target_language)
        ]
        routed = await self._try_route("direct", direct, request, attempts)
        if routed is not None:
            return routed

        # 3. Pivot through the intermediate language
        if source_language != self._pivot and target_language != self._pivot:
            routed = await self._pivot_translate(request, attempts)
            if routed is not None:
                return routed

        self.logger.warning(
            "translation_exhausted",
            source_language=source_language,
            target_language=target_language,
            attempts=len(attempts),
        )
        raise TranslationExhaustedError(source_language, target_language, attempts)

    def _override_candidates(self, source: str, target: str) -> list[ProviderAdapter]:
        candidates = []
        for key in override_providers(source, target, self._overrides):
            adapter = self._registry.dedicated_translators.get(key)
            if adapter is None:
                self.logger.debug("override_provider_missing", provider=key)
                continue
            candidates.append(adapter)
        return candidates

    async def _try_route(
        self,
        route: str,
        candidates: list[ProviderAdapter],
        request: TranslationRequest,
        attempts: list[ProviderAttempt],
    ) -> RoutedTranslation | None:
        try:
            result = await self._translate.attempt(candidates, request)
        except AllProvidersFailedError as e:
            attempts.extend(e.attempts)
            self.logger.info(
                "translation_route_failed",
                route=route,
                source_language=request.source_language,
                target_language=request.target_language,
            )
            return None

        attempts.extend(result.attempts)
        return RoutedTranslation(
            text=result.output,
            provider_id=result.provider_id,
            route=route,
            attempts=attempts,
        )

    async def _pivot_translate(
        self,
        request: TranslationRequest,
        attempts: list[ProviderAttempt],
    ) -> RoutedTranslation | None:
        first_model, second_model = pivot_leg_models(
            request.source_language, request.target_language, self._pivot
        )
        self.logger.info(
            "translation_pivot_started",
            pivot_language=self._pivot,
            first_leg=first_model,
            second_leg=second_model,
        )

        first_leg = await self._try_route(
            "pivot",
            [self._registry.translator_for_model(first_model)],
            TranslationRequest(
                text=request.text,
                source_language=request.source_language,
                target_language=self._pivot,
            ),
            attempts,
        )
        if first_leg is None:
            return None

        second_leg = await self._try_route(
            "pivot",
            [self._registry.translator_for_model(second_model)],
            TranslationRequest(
                text=first_leg.text,
                source_language=self._pivot,
                target_language=request.target_language,
            ),
            attempts,
        )
        if second_leg is None:
            return None

        return RoutedTranslation(
            text=second_leg.text,
            provider_id=f"{first_leg.provider_id}+{second_leg.provider_id}",
            route="pivot",
            attempts=attempts,
        )
