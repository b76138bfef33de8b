"""
Utils Module

Shared utilities and helpers.

Components:
    - logger: Logging with daily-prefixed rotating files and colorized output
    - exceptions: Custom exception classes
"""

from fxquote.utils.exceptions import (
    ConfigurationError,
    FXQuoteError,
    QuoteComparisonError,
    QuoteNormalizationError,
)
from fxquote.utils.logger import (
    LoggerConfig,
    get_logger,
    get_normalizer_logger,
    get_ranker_logger,
    setup_logger,
)

__all__ = [
    # Logger utilities
    "LoggerConfig",
    "setup_logger",
    "get_logger",
    "get_normalizer_logger",
    "get_ranker_logger",
    # Exceptions
    "ConfigurationError",
    "FXQuoteError",
    "QuoteNormalizationError",
    "QuoteComparisonError",
]
