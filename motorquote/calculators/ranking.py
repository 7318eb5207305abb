"""Quote ranking — order sibling insurer quotes and flag the cheapest.

Ranking is by final premium, ascending, with a stable sort so quotes with
equal premiums keep their creation order. Rank 1 is the only quote flagged
as recommended. Running it twice gives the same result.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol, TypeVar


class Rankable(Protocol):
    final_premium: Decimal | None
    ranking: int | None
    is_recommended: bool


R = TypeVar("R", bound=Rankable)


def _premium(quote: Rankable) -> Decimal:
    if quote.final_premium is None:
        return Decimal("0")
    return Decimal(str(quote.final_premium))


def rank_quotes(quotes: Sequence[R]) -> list[R]:
    """Assign `ranking` and `is_recommended` in place.

    Args:
        quotes: Sibling quotes in creation order.

    Returns:
        The same objects, cheapest first.
    """
    ordered = sorted(quotes, key=_premium)
    for position, quote in enumerate(ordered, start=1):
        quote.ranking = position
        quote.is_recommended = position == 1
    return ordered


def best_savings(quotes: Sequence[Rankable]) -> Decimal:
    """Spread between the most and least expensive quote (0 for fewer than two)."""
    if len(quotes) < 2:
        return Decimal("0")
    premiums = [_premium(q) for q in quotes]
    return max(premiums) - min(premiums)
