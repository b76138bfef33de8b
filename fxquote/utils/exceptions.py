"""
Custom exception classes for the FX quote normalizer.

Provides a small hierarchy of exceptions with structured context for
the few failures the normalizer and ranker can surface.
"""

from typing import Any, Optional


class FXQuoteError(Exception):
    """Base exception for all FX quote errors.

    All custom exceptions inherit from this class, allowing
    catch-all error handling when needed.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class QuoteNormalizationError(FXQuoteError):
    """Raised when a raw quote field cannot be normalized.

    Only reachable for an unparsable ``expires_at`` when the normalizer
    runs with the strict expiry policy; every other field falls back to
    a default.

    Attributes:
        field: Raw payload key that caused the error
        value: Value that failed normalization
        provider_id: Provider whose payload was being normalized
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        provider_id: Optional[int] = None,
        **kwargs
    ):
        details = {
            "field": field,
            "provider_id": provider_id,
            **kwargs
        }
        if value is not None:
            # Truncate value for readability
            value_str = str(value)
            details["value"] = value_str[:100] + "..." if len(value_str) > 100 else value_str

        details = {k: v for k, v in details.items() if v is not None}
        super().__init__(message, details)
        self.field = field
        self.value = value
        self.provider_id = provider_id


class QuoteComparisonError(FXQuoteError):
    """Raised when the ranker is handed something that is not a canonical quote.

    Attributes:
        operation: Ranker operation that rejected the input
        received_type: Type name of the offending object
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        received_type: Optional[str] = None,
        **kwargs
    ):
        details = {
            "operation": operation,
            "received_type": received_type,
            **kwargs
        }
        details = {k: v for k, v in details.items() if v is not None}
        super().__init__(message, details)
        self.operation = operation
        self.received_type = received_type


class ConfigurationError(FXQuoteError):
    """Raised when a configuration value is not one the application accepts.

    Attributes:
        setting: Environment variable holding the bad value
        value: The rejected value
        allowed: Accepted values
    """

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        value: Optional[Any] = None,
        allowed: Optional[list[str]] = None,
        **kwargs
    ):
        details = {
            "setting": setting,
            "value": value,
            "allowed": ", ".join(allowed) if allowed else None,
            **kwargs
        }
        details = {k: v for k, v in details.items() if v is not None}
        super().__init__(message, details)
        self.setting = setting
        self.value = value
        self.allowed = allowed
