"""
Normalizer Module

FX quote normalization and ranking.

Components:
    - CanonicalQuote: Normalized quote schema
    - QuoteNormalizer: Raw provider payload transformation
    - QuoteRanker: Quote comparison, selection and conversion
    - RateKind: Mid/bid/ask selector enum
    - ExpiryPolicy: Unparsable-expiry handling enum
"""

from .quote_normalizer import QuoteNormalizer, round_half_up
from .ranker import QuoteRanker
from .schemas import CanonicalQuote, ExpiryPolicy, RateKind, ensure_utc

__all__ = [
    "CanonicalQuote",
    "QuoteNormalizer",
    "QuoteRanker",
    "RateKind",
    "ExpiryPolicy",
    "round_half_up",
    "ensure_utc",
]
