"""
Example usage of the normalizer module.

Demonstrates normalizing quotes from providers with different payload
formats and selecting the best one.
"""

from fxquote.normalizer import QuoteNormalizer, QuoteRanker


def example_normalization(normalizer: QuoteNormalizer):
    """Example: Normalize payloads with different key names."""
    print("=== Quote Normalization ===\n")

    payloads = {
        1: {"base": "usd", "quote": "eur", "rate": 0.9185, "bid": 0.9171, "ask": 0.9199},
        2: {
            "base_currency": "USD",
            "quote_currency": "EUR",
            "mid_rate": "0.9190",
            "buy_rate": "0.9180",
            "sell_rate": "0.9200",
            "ttl_seconds": 120,
        },
        3: {"base": "usd", "quote": "eur", "exchange_rate": 0.9190, "spread": 0.15},
    }

    quotes = []
    for provider_id, raw in payloads.items():
        quote = normalizer.normalize(raw, provider_id)
        quotes.append(quote)
        print(f"Provider {provider_id}: {quote}")
        print(f"  bid={quote.bid_rate} ask={quote.ask_rate}")
        print(f"  expires in {quote.seconds_until_expiry()}s\n")

    return quotes


def example_ranking(quotes):
    """Example: Rank quotes and convert an amount."""
    print("=== Quote Ranking ===\n")

    for position, quote in enumerate(QuoteRanker.rank(quotes), start=1):
        print(f"{position}. provider {quote.provider_id}: {quote.rate} ({quote.spread_percentage}%)")

    best = QuoteRanker.best(quotes)
    amount = 1000.00
    print(f"\nBest: provider {best.provider_id}")
    print(f"Effective rate: {QuoteRanker.effective_rate(best)}")
    print(f"{amount:.2f} {best.base_currency} -> "
          f"{QuoteRanker.converted_amount(best, amount):.2f} {best.quote_currency}\n")


def example_record(quote):
    """Example: Flatten a quote for persistence."""
    print("=== Persistence Record ===\n")
    for key, value in quote.to_record().items():
        print(f"{key:20} {value}")


if __name__ == "__main__":
    normalizer = QuoteNormalizer()
    quotes = example_normalization(normalizer)
    example_ranking(quotes)
    example_record(quotes[0])
