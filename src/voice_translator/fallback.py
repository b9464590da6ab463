"""Fallback strategy over an ordered list of provider adapters.

Providers are free-tier, rate-limited services with unpredictable
availability. The candidate order encodes preference (fastest or highest
quality first); the first success wins, there is no quality comparison
across providers.
"""

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from voice_translator.observability.logger import get_logger
from voice_translator.observability.metrics import record_provider_attempt
from voice_translator.providers.errors import AllProvidersFailedError, ProviderError
from voice_translator.providers.interface import ProviderAdapter
from voice_translator.providers.models import Capability, ProviderAttempt

T = TypeVar("T")


@dataclass
class FallbackResult(Generic[T]):
    """Output of the first successful candidate plus every attempt made."""

    output: T
    provider_id: str
    attempts: list[ProviderAttempt] = field(default_factory=list)


class FallbackStrategy:
    """Try candidates in order until one succeeds.

    Only ProviderError falls through to the next candidate. Anything else,
    including asyncio.CancelledError, propagates unchanged.
    """

    def __init__(self, capability: Capability):
        self._capability = capability
        self.logger = get_logger(__name__)

    @property
    def capability(self) -> Capability:
        return self._capability

    async def attempt(
        self,
        candidates: Sequence[ProviderAdapter],
        payload: Any,
    ) -> FallbackResult[Any]:
        """Invoke candidates in order and return the first success.

        Args:
            candidates: Ordered adapters to try
            payload: Capability-specific input passed to every candidate

        Returns:
            FallbackResult with the winning output and all attempts

        Raises:
            AllProvidersFailedError: If every candidate failed (or there were none)
        """
        attempts: list[ProviderAttempt] = []

        for adapter in candidates:
            start = time.perf_counter()
            try:
                output = await adapter.call(payload)
            except ProviderError as e:
                attempt = ProviderAttempt(
                    provider_id=adapter.provider_id,
                    capability=self._capability,
                    success=False,
                    latency_ms=_elapsed_ms(start),
                    error=e.message,
                    error_type=e.error_type,
                    retryable=e.retryable,
                )
                attempts.append(attempt)
                record_provider_attempt(self._capability.value, adapter.provider_id, False)
                self.logger.warning(
                    "provider_attempt_failed",
                    capability=self._capability.value,
                    provider=adapter.provider_id,
                    error_type=e.error_type.value,
                    retryable=e.retryable,
                    error=e.message,
                    latency_ms=attempt.latency_ms,
                )
                continue

            attempts.append(
                ProviderAttempt(
                    provider_id=adapter.provider_id,
                    capability=self._capability,
                    success=True,
                    latency_ms=_elapsed_ms(start),
                )
            )
            record_provider_attempt(self._capability.value, adapter.provider_id, True)
            self.logger.info(
                "provider_attempt_succeeded",
                capability=self._capability.value,
                provider=adapter.provider_id,
                latency_ms=attempts[-1].latency_ms,
                fallbacks_used=len(attempts) - 1,
            )
            return FallbackResult(output=output, provider_id=adapter.provider_id, attempts=attempts)

        raise AllProvidersFailedError(self._capability, attempts)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
