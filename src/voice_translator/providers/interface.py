"""
Provider Adapter Interface Contract.

This module defines the contract every provider adapter follows: one
external capability behind `call(payload) -> normalized output`, failing
only with ProviderError. Both real adapters (Hugging Face, Google) and mock
adapters conform to it.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from .errors import ProviderError, create_provider_error
from .models import Capability, ProviderErrorType

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


@runtime_checkable
class ProviderAdapter(Protocol):
    """Protocol defining the provider adapter contract."""

    @property
    def capability(self) -> Capability:
        """Return the capability this adapter provides."""
        ...

    @property
    def provider_id(self) -> str:
        """Return the provider identifier (e.g., 'hf:openai/whisper-large-v3')."""
        ...

    @property
    def is_ready(self) -> bool:
        """Check if the adapter has what it needs to make a call (credentials)."""
        ...

    async def call(self, payload: Any) -> Any:
        """Invoke the provider.

        The adapter MUST:
        - Return normalized output on success
        - Raise ProviderError on non-2xx status, timeout, transport failure
          or a response body missing the expected shape
        - Raise ProviderError(NOT_CONFIGURED) without any network call when
          its credential is absent
        - Let asyncio.CancelledError propagate
        """
        ...


class BaseProviderAdapter(ABC, Generic[InputT, OutputT]):
    """Abstract base class for provider adapters.

    Enforces the uniform failure contract: readiness check, per-adapter
    timeout and conversion of any exception into ProviderError.
    """

    capability: Capability

    def __init__(self, timeout_s: float):
        self._timeout_s = timeout_s

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Subclasses must provide their identifier."""
        pass

    @property
    def is_ready(self) -> bool:
        return True

    @property
    def timeout_s(self) -> float:
        return self._timeout_s

    async def call(self, payload: InputT) -> OutputT:
        """Invoke the provider under the adapter's timeout budget.

        Args:
            payload: Capability-specific input

        Returns:
            Normalized output

        Raises:
            ProviderError: On any provider failure
        """
        if not self.is_ready:
            raise ProviderError(
                capability=self.capability,
                provider_id=self.provider_id,
                message="provider credential not configured",
                error_type=ProviderErrorType.NOT_CONFIGURED,
            )

        try:
            return await asyncio.wait_for(self._invoke(payload), timeout=self._timeout_s)
        except ProviderError:
            raise
        except asyncio.TimeoutError:
            raise ProviderError(
                capability=self.capability,
                provider_id=self.provider_id,
                message=f"timed out after {self._timeout_s:g}s",
                error_type=ProviderErrorType.TIMEOUT,
            ) from None
        except Exception as e:
            raise create_provider_error(e, self.capability, self.provider_id) from e

    @abstractmethod
    async def _invoke(self, payload: InputT) -> OutputT:
        """Subclasses implement the provider call and response normalization."""
        pass

    def _malformed(self, message: str) -> ProviderError:
        return ProviderError(
            capability=self.capability,
            provider_id=self.provider_id,
            message=message,
            error_type=ProviderErrorType.MALFORMED_RESPONSE,
        )

    async def aclose(self) -> None:
        """Default implementation does nothing. Override if cleanup needed."""
        return  # noqa: B027 - intentionally empty default implementation

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.provider_id}>"
