"""
Data schemas for normalized FX quotes.

Pydantic models providing type safety and serialization for quotes
collected from heterogeneous provider payloads.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def ensure_utc(value: datetime) -> datetime:
    """Read a naive datetime as UTC and convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class RateKind(str, Enum):
    """Side of the book a rate is resolved for."""

    MID = "mid"
    BID = "bid"
    ASK = "ask"


class ExpiryPolicy(str, Enum):
    """
    Handling of an explicit expires_at value that cannot be parsed.

    Absolute timestamps and the relative forms accepted by
    ``QuoteNormalizer.parse_timestamp`` ("tomorrow", "+5 minutes", ...) are
    parsed. Free-form phrases such as "next monday" are not, and fall under
    this policy.
    """

    FALLBACK = "fallback"
    STRICT = "strict"


class CanonicalQuote(BaseModel):
    """
    Normalized FX quote.

    Fixed-schema representation of a provider quote after resolving
    provider-specific field names. Instances are immutable; ownership
    passes to the caller, which decides whether to persist them.
    """

    provider_id: int = Field(..., description="Caller-supplied provider identifier")
    base_currency: str = Field(..., description="Base currency code (e.g., USD)")
    quote_currency: str = Field(..., description="Quote currency code (e.g., EUR)")
    rate: float = Field(..., description="Mid/reference exchange rate")
    bid_rate: Optional[float] = Field(None, description="Bid (buy) rate")
    ask_rate: Optional[float] = Field(None, description="Ask (sell) rate")
    spread_percentage: float = Field(..., description="Spread as percent of mid rate")
    expires_at: datetime = Field(..., description="Absolute expiry time (UTC)")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "provider_id": 7,
                "base_currency": "USD",
                "quote_currency": "EUR",
                "rate": 0.91,
                "bid_rate": 0.90,
                "ask_rate": 0.92,
                "spread_percentage": 2.1978,
                "expires_at": "2026-10-19T12:05:00Z",
            }
        },
    }

    @field_validator("expires_at")
    @classmethod
    def validate_expires_at(cls, v: datetime) -> datetime:
        """Ensure expiry is timezone-aware UTC."""
        return ensure_utc(v)

    @property
    def pair(self) -> str:
        """Currency pair label, e.g. ``USD/EUR``."""
        return f"{self.base_currency}/{self.quote_currency}"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """
        Check whether the quote is stale.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            bool: True once ``now`` has reached ``expires_at``
        """
        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        return self.expires_at <= now

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """A quote is valid for execution until it expires."""
        return not self.is_expired(now)

    def seconds_until_expiry(self, now: Optional[datetime] = None) -> int:
        """Whole seconds left before expiry, never negative."""
        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        remaining = int((self.expires_at - now).total_seconds())
        return max(remaining, 0)

    def to_record(self) -> dict[str, Any]:
        """
        Convert to a flat record for the persistence layer.

        Returns:
            dict: Column-keyed values with the expiry as ISO-8601
        """
        return {
            "fx_provider_id": self.provider_id,
            "base_currency": self.base_currency,
            "quote_currency": self.quote_currency,
            "rate": self.rate,
            "bid_rate": self.bid_rate,
            "ask_rate": self.ask_rate,
            "spread_percentage": self.spread_percentage,
            "expires_at": self.expires_at.isoformat(),
        }

    def to_json(self, **kwargs) -> str:
        """Serialize to JSON string."""
        return self.model_dump_json(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(mode="python")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CanonicalQuote":
        """Create instance from dictionary."""
        return cls(**data)

    def __str__(self) -> str:
        """String representation."""
        return (
            f"{self.pair} @ {self.rate} "
            f"(spread {self.spread_percentage}%, "
            f"expires {self.expires_at.strftime('%Y-%m-%d %H:%M:%S')})"
        )
