"""
Comparison and ranking of canonical FX quotes.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Optional

from ..config import QuoteConfig
from ..utils.exceptions import QuoteComparisonError
from ..utils.logger import get_ranker_logger
from .quote_normalizer import round_half_up
from .schemas import CanonicalQuote, ensure_utc

logger = get_ranker_logger()


class QuoteRanker:
    """
    Select the better of competing quotes and derive execution amounts.

    Quotes are ordered by mid rate descending. Exactly equal rates fall
    back to spread ascending; rate equality is exact, with no tolerance.
    """

    @staticmethod
    def compare(a: CanonicalQuote, b: CanonicalQuote) -> int:
        """
        Three-way comparison of two quotes.

        Args:
            a: First quote
            b: Second quote

        Returns:
            int: -1 if ``a`` ranks ahead of ``b``, 1 if behind, 0 if tied
        """
        QuoteRanker._require_quote(a, "compare")
        QuoteRanker._require_quote(b, "compare")

        if a.rate == b.rate:
            return (a.spread_percentage > b.spread_percentage) - (
                a.spread_percentage < b.spread_percentage
            )

        return (b.rate > a.rate) - (b.rate < a.rate)

    @staticmethod
    def effective_rate(quote: CanonicalQuote) -> float:
        """Rate paid when executing against the ask side: ask, else mid."""
        QuoteRanker._require_quote(quote, "effective_rate")
        if quote.ask_rate is not None:
            return quote.ask_rate
        return quote.rate

    @staticmethod
    def converted_amount(quote: CanonicalQuote, amount: float) -> float:
        """
        Convert an amount at the quote's effective rate.

        Args:
            quote: Quote to execute against
            amount: Amount in the base currency

        Returns:
            float: Converted amount rounded to currency minor units (2 places)
        """
        rate = QuoteRanker.effective_rate(quote)
        return round_half_up(amount * rate, QuoteConfig.AMOUNT_PRECISION)

    @staticmethod
    def rank(
        quotes: Iterable[CanonicalQuote],
        now: Optional[datetime] = None,
        valid_only: bool = False,
    ) -> list[CanonicalQuote]:
        """
        Order quotes best-first.

        Args:
            quotes: Candidate quotes
            now: Reference time for expiry checks
            valid_only: Drop quotes that have expired by ``now``

        Returns:
            list[CanonicalQuote]: Stable best-first ordering
        """
        candidates = list(quotes)
        for quote in candidates:
            QuoteRanker._require_quote(quote, "rank")

        if valid_only:
            now = ensure_utc(now) if now else datetime.now(timezone.utc)
            fresh = [q for q in candidates if q.is_valid(now)]
            dropped = len(candidates) - len(fresh)
            if dropped:
                logger.debug(f"Dropped {dropped} expired quote(s) before ranking")
            candidates = fresh

        return sorted(candidates, key=cmp_to_key(QuoteRanker.compare))

    @staticmethod
    def best(
        quotes: Iterable[CanonicalQuote],
        now: Optional[datetime] = None,
        valid_only: bool = True,
    ) -> Optional[CanonicalQuote]:
        """
        Pick the best quote.

        Args:
            quotes: Candidate quotes
            now: Reference time for expiry checks
            valid_only: Ignore expired quotes (default)

        Returns:
            Optional[CanonicalQuote]: Best quote, or None if nothing qualifies
        """
        ranked = QuoteRanker.rank(quotes, now=now, valid_only=valid_only)
        if not ranked:
            logger.info("No quote available to select")
            return None
        return ranked[0]

    @staticmethod
    def _require_quote(obj: object, operation: str) -> None:
        if not isinstance(obj, CanonicalQuote):
            raise QuoteComparisonError(
                "Expected a CanonicalQuote",
                operation=operation,
                received_type=type(obj).__name__,
            )
