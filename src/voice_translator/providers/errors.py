"""
Error classification and handling for provider adapters.

Maps Python and httpx exceptions to ProviderErrorType with retryable
classification, and defines the exceptions raised by adapters and by the
fallback strategy.
"""

import httpx

from .models import Capability, ProviderAttempt, ProviderErrorType

# Re-export ProviderErrorType for convenience
__all__ = [
    "AllProvidersFailedError",
    "ProviderError",
    "ProviderErrorType",
    "classify_error",
    "create_provider_error",
    "is_retryable",
]

# Set of retryable error types
_RETRYABLE_ERRORS = {
    ProviderErrorType.TIMEOUT,
    ProviderErrorType.HTTP_STATUS,
    ProviderErrorType.TRANSPORT,
}


class ProviderError(Exception):
    """A single adapter call failed.

    Recovered locally by the fallback strategy; never surfaced to the caller.
    """

    def __init__(
        self,
        capability: Capability,
        provider_id: str,
        message: str,
        error_type: ProviderErrorType = ProviderErrorType.UNKNOWN,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.capability = capability
        self.provider_id = provider_id
        self.message = message
        self.error_type = error_type
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return is_retryable(self.error_type)

    def __str__(self) -> str:
        return f"{self.provider_id} ({self.capability.value}): {self.message}"


class AllProvidersFailedError(Exception):
    """Every candidate for a capability failed."""

    def __init__(self, capability: Capability, attempts: list[ProviderAttempt]):
        self.capability = capability
        self.attempts = attempts
        tried = ", ".join(a.provider_id for a in attempts) or "no candidates"
        super().__init__(f"All {capability.value} providers failed ({tried})")


def classify_error(exception: Exception) -> ProviderErrorType:
    """Classify a Python exception to a ProviderErrorType.

    Args:
        exception: The exception to classify

    Returns:
        The corresponding ProviderErrorType
    """
    # httpx.TimeoutException is a TransportError, check it first
    if isinstance(exception, (httpx.TimeoutException, TimeoutError)):
        return ProviderErrorType.TIMEOUT
    elif isinstance(exception, httpx.HTTPStatusError):
        return ProviderErrorType.HTTP_STATUS
    elif isinstance(exception, (httpx.TransportError, ConnectionError)):
        return ProviderErrorType.TRANSPORT
    elif isinstance(exception, (ValueError, KeyError, IndexError, TypeError)):
        return ProviderErrorType.MALFORMED_RESPONSE
    else:
        return ProviderErrorType.UNKNOWN


def is_retryable(error_type: ProviderErrorType) -> bool:
    """Determine if an error type is transient.

    Retryable errors may succeed on a later request:
    - TIMEOUT: Model may be warming up
    - HTTP_STATUS: Rate limits and 503 "model loading" responses
    - TRANSPORT: Network blips

    Non-retryable errors are permanent for this request:
    - MALFORMED_RESPONSE, NOT_CONFIGURED, UNKNOWN

    Args:
        error_type: The error type to check

    Returns:
        True if the error is retryable
    """
    return error_type in _RETRYABLE_ERRORS


def create_provider_error(
    exception: Exception,
    capability: Capability,
    provider_id: str,
) -> ProviderError:
    """Create a ProviderError from a Python exception.

    Args:
        exception: The exception to convert
        capability: Capability of the failing adapter
        provider_id: Identifier of the failing adapter

    Returns:
        ProviderError with the classified type and HTTP status if any
    """
    error_type = classify_error(exception)
    message = str(exception) if str(exception) else f"{type(exception).__name__}"

    status_code = None
    if isinstance(exception, httpx.HTTPStatusError):
        status_code = exception.response.status_code
        message = f"HTTP {status_code} from {exception.request.url}"

    return ProviderError(
        capability=capability,
        provider_id=provider_id,
        message=message,
        error_type=error_type,
        status_code=status_code,
    )
