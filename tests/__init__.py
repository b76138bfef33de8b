"""
Tests Package

Unit tests for the FX quote normalizer.

Structure:
    - test_quote_normalizer: Raw payload normalization
    - test_quote_ranker: Comparison, ranking and conversion
    - test_normalizer_schemas: CanonicalQuote model
    - test_logger / test_config_and_exceptions: Ambient utilities
"""

__all__ = []
