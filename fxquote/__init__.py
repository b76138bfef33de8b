"""
FX Quote Normalizer - Main Package

Normalization and ranking of foreign-exchange quotes collected from
providers with inconsistent payload formats.

Modules:
    normalizer: Canonical quote schema, normalizer and ranker
    utils: Logging and exceptions
    config: Environment-backed configuration
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
