"""
Configuration management for the FX quote normalizer.

Environment-based configuration using python-dotenv. The quote defaults are
fixed constants; only ambient concerns (logging, expiry policy) read the
environment.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class LoggingConfig:
    """Logging configuration."""

    # Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Log directory
    LOG_DIR: Path = Path(os.getenv("LOG_DIR", "logs"))

    # Log format
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Date format
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    # Maximum log file size in bytes (10MB default)
    MAX_LOG_SIZE: int = int(os.getenv("MAX_LOG_SIZE", str(10 * 1024 * 1024)))

    # Number of backup log files to keep
    BACKUP_COUNT: int = int(os.getenv("BACKUP_COUNT", "5"))

    @classmethod
    def ensure_log_directory(cls) -> None:
        """Create log directory if it doesn't exist."""
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)


class QuoteConfig:
    """Quote normalization defaults."""

    # Currency used when a payload names neither side of the pair
    DEFAULT_CURRENCY: str = "USD"

    # Rate used when no rate key is present at all
    DEFAULT_RATE: float = 1.0

    # Reported when the spread cannot be derived ("unknown", not "zero")
    DEFAULT_SPREAD_PERCENTAGE: float = 0.5

    # Quote lifetime when the payload carries no expiry information
    DEFAULT_TTL_SECONDS: int = 300

    SPREAD_PRECISION: int = 4
    AMOUNT_PRECISION: int = 2

    # What to do with an unparsable expires_at: "fallback" or "strict"
    EXPIRY_POLICY: str = os.getenv("FXQUOTE_EXPIRY_POLICY", "fallback").lower()


class AppConfig:
    """Main application configuration aggregating all config classes."""

    logging = LoggingConfig
    quote = QuoteConfig

    # Application metadata
    APP_NAME: str = "FX Quote Normalizer"
    VERSION: str = "0.1.0"

    @classmethod
    def initialize(cls) -> None:
        """Create directories needed at runtime."""
        LoggingConfig.ensure_log_directory()

    @classmethod
    def validate(cls) -> tuple[bool, list[str]]:
        """
        Validate configuration settings.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if QuoteConfig.EXPIRY_POLICY not in ("fallback", "strict"):
            errors.append(
                f"FXQUOTE_EXPIRY_POLICY must be 'fallback' or 'strict', "
                f"got {QuoteConfig.EXPIRY_POLICY!r}"
            )

        if QuoteConfig.DEFAULT_TTL_SECONDS <= 0:
            errors.append("DEFAULT_TTL_SECONDS must be greater than 0")

        if LoggingConfig.BACKUP_COUNT < 0:
            errors.append("BACKUP_COUNT cannot be negative")

        return (len(errors) == 0, errors)


# Initialize configuration on module import
AppConfig.initialize()
