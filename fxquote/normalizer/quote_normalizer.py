"""
Quote normalization for heterogeneous FX provider payloads.

Transforms raw provider quotes, whose key names vary from one provider
to the next, into standardized CanonicalQuote objects. Normalization is
deliberately tolerant: missing or malformed fields resolve to defaults
instead of raising.
"""

import math
import numbers
import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

import pandas as pd

from ..config import AppConfig, QuoteConfig
from ..utils.exceptions import ConfigurationError, QuoteNormalizationError
from ..utils.logger import get_normalizer_logger
from .schemas import CanonicalQuote, ExpiryPolicy, RateKind, ensure_utc

logger = get_normalizer_logger()

# Leading numeric prefix, matched the way a permissive numeric cast reads it
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Relative expressions such as "+5 minutes", "90 seconds" or "2 hours ago"
_RELATIVE_OFFSET = re.compile(
    r"^([+-]?\d+)\s*(sec|second|min|minute|hour|day|week)s?(\s+ago)?$", re.IGNORECASE
)

_OFFSET_UNITS = {
    "sec": "seconds",
    "second": "seconds",
    "min": "minutes",
    "minute": "minutes",
    "hour": "hours",
    "day": "days",
    "week": "weeks",
}

# Keywords resolved against the reference time, in days from today at midnight
_DAY_KEYWORDS = {"today": 0, "tomorrow": 1, "yesterday": -1}


def round_half_up(value: float, places: int) -> float:
    """
    Round to a fixed number of decimal places, halves away from zero.

    Args:
        value: Number to round
        places: Decimal places to keep

    Returns:
        float: Rounded value (non-finite values are returned unchanged)
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class QuoteNormalizer:
    """
    Normalize raw FX quotes from any provider into CanonicalQuote objects.

    Each logical value is resolved by probing an ordered list of candidate
    keys. The fallback chains are kept exactly as listed because the spread
    default depends on which path produced the bid, ask and mid rates.
    """

    BASE_CURRENCY_FIELDS = ["base", "base_currency"]
    QUOTE_CURRENCY_FIELDS = ["quote", "quote_currency"]

    RATE_FIELD_MAP = {
        RateKind.MID: ["rate", "mid", "mid_rate", "exchange_rate"],
        RateKind.BID: ["bid", "bid_rate", "buy_rate"],
        RateKind.ASK: ["ask", "ask_rate", "sell_rate"],
    }

    # Every kind falls back to this key alone, never to the full mid chain
    RATE_FALLBACK_FIELD = "rate"

    SPREAD_FIELD = "spread"
    EXPIRES_AT_FIELD = "expires_at"
    TTL_FIELD = "ttl_seconds"

    TIMESTAMP_FORMATS = [
        "%Y-%m-%dT%H:%M:%S.%fZ",
        "%Y-%m-%dT%H:%M:%SZ",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d",
    ]

    def __init__(self, expiry_policy: Union[ExpiryPolicy, str, None] = None):
        """
        Args:
            expiry_policy: Handling of an unparsable ``expires_at``
                (defaults to ``QuoteConfig.EXPIRY_POLICY``)

        Raises:
            ConfigurationError: If the policy is not a known ExpiryPolicy, or
                the environment configuration fails validation
        """
        policy = expiry_policy or QuoteConfig.EXPIRY_POLICY
        try:
            self.expiry_policy = ExpiryPolicy(policy)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown expiry policy: {policy!r}",
                setting="FXQUOTE_EXPIRY_POLICY" if expiry_policy is None else None,
                value=policy,
                allowed=[p.value for p in ExpiryPolicy],
            ) from e

        if expiry_policy is None:
            is_valid, errors = AppConfig.validate()
            if not is_valid:
                raise ConfigurationError("Invalid configuration", errors="; ".join(errors))

    def normalize(
        self,
        raw_quote: Mapping[str, Any],
        provider_id: int,
        now: Optional[datetime] = None,
    ) -> CanonicalQuote:
        """
        Transform a raw provider quote into a CanonicalQuote.

        Args:
            raw_quote: Provider payload with no guaranteed keys
            provider_id: Caller-supplied provider identifier, passed through
            now: Reference time for derived expiry (read once if omitted)

        Returns:
            CanonicalQuote: Normalized quote

        Raises:
            QuoteNormalizationError: Only for an unparsable ``expires_at``
                under ``ExpiryPolicy.STRICT``
        """
        now = ensure_utc(now) if now else datetime.now(timezone.utc)

        quote = CanonicalQuote(
            provider_id=provider_id,
            base_currency=self.normalize_currency(
                self._extract_field(raw_quote, self.BASE_CURRENCY_FIELDS)
            ),
            quote_currency=self.normalize_currency(
                self._extract_field(raw_quote, self.QUOTE_CURRENCY_FIELDS)
            ),
            rate=self.normalize_rate(raw_quote, RateKind.MID),
            bid_rate=self.normalize_rate(raw_quote, RateKind.BID),
            ask_rate=self.normalize_rate(raw_quote, RateKind.ASK),
            spread_percentage=self.calculate_spread(raw_quote),
            expires_at=self.normalize_expiry(raw_quote, now, provider_id=provider_id),
        )

        logger.debug(
            f"Normalized quote from provider {provider_id}: {quote.pair} "
            f"rate={quote.rate} bid={quote.bid_rate} ask={quote.ask_rate} "
            f"spread={quote.spread_percentage}"
        )
        return quote

    def normalize_many(
        self,
        raw_quotes: Iterable[Mapping[str, Any]],
        provider_id: int,
        now: Optional[datetime] = None,
    ) -> list[CanonicalQuote]:
        """
        Normalize several payloads from one provider against a single clock reading.

        Args:
            raw_quotes: Provider payloads
            provider_id: Provider identifier applied to every quote
            now: Shared reference time (read once if omitted)

        Returns:
            list[CanonicalQuote]: Quotes in input order
        """
        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        return [self.normalize(raw, provider_id, now=now) for raw in raw_quotes]

    @staticmethod
    def normalize_currency(value: Any) -> str:
        """
        Normalize a currency code.

        Truncates to 3 characters, then trims and upper-cases. Shorter
        values are passed through without padding.

        Args:
            value: Raw currency value (None selects the default currency)

        Returns:
            str: Normalized currency code
        """
        if value is None:
            value = QuoteConfig.DEFAULT_CURRENCY
        return str(value)[:3].strip().upper()

    @staticmethod
    def normalize_rate(
        raw_quote: Mapping[str, Any], kind: Union[RateKind, str] = RateKind.MID
    ) -> float:
        """
        Resolve a mid, bid or ask rate.

        Args:
            raw_quote: Provider payload
            kind: Which rate to resolve

        Returns:
            float: First present candidate, else the ``rate`` key, else 1.0
        """
        fields = QuoteNormalizer.RATE_FIELD_MAP[RateKind(kind)]
        value = QuoteNormalizer._extract_field(raw_quote, fields)
        if value is not None:
            return QuoteNormalizer.coerce_float(value)

        fallback = QuoteNormalizer._extract_field(
            raw_quote, [QuoteNormalizer.RATE_FALLBACK_FIELD]
        )
        if fallback is not None:
            return QuoteNormalizer.coerce_float(fallback)
        return QuoteConfig.DEFAULT_RATE

    @staticmethod
    def calculate_spread(raw_quote: Mapping[str, Any]) -> float:
        """
        Resolve the spread percentage.

        An explicit ``spread`` wins. Otherwise the spread is derived as
        ``(ask - bid) / mid * 100`` when all three rates are positive, and
        reported as the "unknown" default of 0.5 when they are not.

        Args:
            raw_quote: Provider payload

        Returns:
            float: Spread percentage, 4 decimal places when derived
        """
        explicit = QuoteNormalizer._extract_field(raw_quote, [QuoteNormalizer.SPREAD_FIELD])
        if explicit is not None:
            return QuoteNormalizer.coerce_float(explicit)

        bid = QuoteNormalizer.normalize_rate(raw_quote, RateKind.BID)
        ask = QuoteNormalizer.normalize_rate(raw_quote, RateKind.ASK)
        mid = QuoteNormalizer.normalize_rate(raw_quote, RateKind.MID)

        if mid > 0 and bid > 0 and ask > 0:
            return round_half_up(((ask - bid) / mid) * 100, QuoteConfig.SPREAD_PRECISION)

        return QuoteConfig.DEFAULT_SPREAD_PERCENTAGE

    def normalize_expiry(
        self,
        raw_quote: Mapping[str, Any],
        now: datetime,
        provider_id: Optional[int] = None,
    ) -> datetime:
        """
        Resolve the absolute expiry time.

        Args:
            raw_quote: Provider payload
            now: Reference time for TTL-based and default expiry
            provider_id: Provider identifier, for error context only

        Returns:
            datetime: ``expires_at`` if given, else ``now + ttl_seconds``,
            else ``now`` plus the default TTL

        Raises:
            QuoteNormalizationError: If ``expires_at`` is unparsable and the
                policy is strict
        """
        now = ensure_utc(now)
        default_expiry = now + timedelta(seconds=QuoteConfig.DEFAULT_TTL_SECONDS)

        expires_at = self._extract_field(raw_quote, [self.EXPIRES_AT_FIELD])
        if expires_at is not None:
            try:
                return self.parse_timestamp(expires_at, now=now)
            except QuoteNormalizationError as e:
                if self.expiry_policy is ExpiryPolicy.STRICT:
                    raise QuoteNormalizationError(
                        "Unparsable expiry timestamp",
                        field=self.EXPIRES_AT_FIELD,
                        value=expires_at,
                        provider_id=provider_id,
                    ) from e
                logger.warning(
                    f"Provider {provider_id} sent unparsable expires_at "
                    f"{expires_at!r}, using default TTL"
                )
                return default_expiry

        ttl = self._extract_field(raw_quote, [self.TTL_FIELD])
        if ttl is not None:
            seconds = self.coerce_float(ttl)
            if not math.isfinite(seconds):
                seconds = 0
            try:
                return now + timedelta(seconds=int(seconds))
            except OverflowError:
                logger.warning(
                    f"Provider {provider_id} sent out-of-range ttl_seconds "
                    f"{ttl!r}, using default TTL"
                )
                return default_expiry

        return default_expiry

    @staticmethod
    def parse_timestamp(ts: Any, now: Optional[datetime] = None) -> datetime:
        """
        Parse various timestamp formats to a UTC datetime.

        Besides absolute values, strings may hold the common relative forms
        ``now``, ``today``, ``tomorrow``, ``yesterday``, ``+5 minutes`` and
        ``2 hours ago``, resolved against ``now``. ``today``, ``tomorrow``
        and ``yesterday`` mean midnight UTC of that day.

        Args:
            ts: datetime, Unix timestamp (seconds or milliseconds) or string
            now: Reference time for relative strings (defaults to current UTC time)

        Returns:
            datetime: Timezone-aware UTC datetime

        Raises:
            QuoteNormalizationError: If the timestamp cannot be parsed
        """
        if isinstance(ts, datetime):
            return ensure_utc(ts)

        # bool is an int subclass but never a timestamp
        if isinstance(ts, numbers.Real) and not isinstance(ts, bool):
            try:
                seconds = float(ts)
                # Handle both seconds and milliseconds
                if seconds > 1e10:
                    seconds = seconds / 1000
                return datetime.fromtimestamp(seconds, tz=timezone.utc)
            except (ValueError, OSError, OverflowError) as e:
                raise QuoteNormalizationError(
                    "Invalid Unix timestamp", field="expires_at", value=ts
                ) from e

        if isinstance(ts, str):
            text = ts.strip()
            relative = QuoteNormalizer._parse_relative(text, now)
            if relative is not None:
                return relative

            for fmt in QuoteNormalizer.TIMESTAMP_FORMATS:
                try:
                    return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
                except ValueError:
                    continue

            try:
                return QuoteNormalizer.parse_timestamp(datetime.fromisoformat(text))
            except ValueError:
                pass

            # pandas/dateutil as the most lenient parser
            try:
                parsed = pd.to_datetime(text, utc=True)
            except (ValueError, TypeError, OverflowError) as e:
                raise QuoteNormalizationError(
                    "Unable to parse timestamp", field="expires_at", value=ts
                ) from e
            if pd.isna(parsed):
                raise QuoteNormalizationError(
                    "Unable to parse timestamp", field="expires_at", value=ts
                )
            return parsed.to_pydatetime()

        raise QuoteNormalizationError(
            f"Unsupported timestamp type: {type(ts).__name__}",
            field="expires_at",
            value=ts,
        )

    @staticmethod
    def _parse_relative(text: str, now: Optional[datetime]) -> Optional[datetime]:
        """
        Resolve a relative time expression against a reference time.

        Args:
            text: Stripped timestamp string
            now: Reference time (defaults to current UTC time)

        Returns:
            Optional[datetime]: Resolved time, or None if ``text`` is not relative
        """
        keyword = text.lower()
        if keyword != "now" and keyword not in _DAY_KEYWORDS and not _RELATIVE_OFFSET.match(text):
            return None

        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        if keyword == "now":
            return now

        if keyword in _DAY_KEYWORDS:
            midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
            return midnight + timedelta(days=_DAY_KEYWORDS[keyword])

        match = _RELATIVE_OFFSET.match(text)
        amount = int(match.group(1))
        if match.group(3):
            amount = -amount
        unit = _OFFSET_UNITS[match.group(2).lower()]
        try:
            return now + timedelta(**{unit: amount})
        except OverflowError as e:
            raise QuoteNormalizationError(
                "Relative timestamp out of range", field="expires_at", value=text
            ) from e

    @staticmethod
    def coerce_float(value: Any) -> float:
        """
        Parse-or-zero numeric coercion.

        Numbers convert directly, booleans become 1.0/0.0, strings contribute
        their leading numeric prefix (``"1.25abc"`` -> 1.25) and anything
        else becomes 0.0. Never raises.

        Args:
            value: Raw payload value

        Returns:
            float: Coerced value
        """
        if isinstance(value, bool):
            return 1.0 if value else 0.0

        # numbers.Real also covers numpy scalars from pandas-built payloads
        if isinstance(value, (numbers.Real, Decimal)):
            try:
                return float(value)
            except (OverflowError, ValueError):
                return 0.0

        if isinstance(value, str):
            match = _NUMERIC_PREFIX.match(value)
            if not match:
                return 0.0
            try:
                return float(match.group(0))
            except (OverflowError, ValueError):
                return 0.0

        return 0.0

    @staticmethod
    def _extract_field(data: Mapping[str, Any], field_names: list[str]) -> Optional[Any]:
        """
        Extract a field trying multiple key names in priority order.

        A key holding None counts as absent.

        Args:
            data: Source payload
            field_names: Candidate keys

        Returns:
            Optional[Any]: First non-None value, or None if not found
        """
        for field_name in field_names:
            if field_name in data and data[field_name] is not None:
                return data[field_name]
        return None
