"""
Pytest configuration and shared fixtures for FX quote normalizer tests.

Provides:
    - A fixed reference clock
    - Normalizer instances for each expiry policy
    - Raw provider payloads in several key-naming styles
    - A factory for canonical quotes
"""

from datetime import datetime, timedelta, timezone
from typing import Dict

import pytest

from fxquote.normalizer.quote_normalizer import QuoteNormalizer
from fxquote.normalizer.schemas import CanonicalQuote, ExpiryPolicy


# ========== Clock Fixtures ==========


@pytest.fixture
def fixed_now() -> datetime:
    """
    Fixed reference time for expiry calculations.

    Returns:
        Timezone-aware UTC datetime
    """
    return datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# ========== Normalizer Fixtures ==========


@pytest.fixture
def normalizer() -> QuoteNormalizer:
    """Normalizer that falls back to the default TTL on bad expiry values."""
    return QuoteNormalizer(expiry_policy=ExpiryPolicy.FALLBACK)


@pytest.fixture
def strict_normalizer() -> QuoteNormalizer:
    """Normalizer that rejects unparsable expiry values."""
    return QuoteNormalizer(expiry_policy=ExpiryPolicy.STRICT)


# ========== Raw Payload Fixtures ==========


@pytest.fixture
def short_key_payload() -> Dict:
    """Provider payload using short key names."""
    return {
        "base": "usd",
        "quote": "eur",
        "rate": 0.91,
        "bid": 0.90,
        "ask": 0.92,
        "ttl_seconds": 60,
    }


@pytest.fixture
def long_key_payload() -> Dict:
    """Provider payload using long key names and string values."""
    return {
        "base_currency": "GBP",
        "quote_currency": "ZAR",
        "exchange_rate": "23.7500",
        "buy_rate": "23.70",
        "sell_rate": "23.80",
        "expires_at": "2026-10-19T12:10:00Z",
    }


@pytest.fixture
def bid_ask_only_payload() -> Dict:
    """Payload with bid/ask but no mid rate."""
    return {
        "base": "usd",
        "quote": "eur",
        "bid": 0.90,
        "ask": 0.92,
        "ttl_seconds": 60,
    }


# ========== Canonical Quote Fixtures ==========


@pytest.fixture
def make_quote(fixed_now):
    """
    Factory for canonical quotes with sensible defaults.

    Returns:
        Callable accepting CanonicalQuote field overrides
    """

    def _make(**overrides) -> CanonicalQuote:
        fields = {
            "provider_id": 1,
            "base_currency": "USD",
            "quote_currency": "EUR",
            "rate": 1.10,
            "bid_rate": 1.08,
            "ask_rate": 1.12,
            "spread_percentage": 3.6364,
            "expires_at": fixed_now + timedelta(minutes=5),
        }
        fields.update(overrides)
        return CanonicalQuote(**fields)

    return _make
