"""Tests for quote ranking and savings."""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

from motorquote.calculators.ranking import best_savings, rank_quotes


def _quote(final_premium: str, name: str = "", is_recommended: bool = False, ranking: int | None = None):
    return SimpleNamespace(
        name=name,
        final_premium=Decimal(final_premium),
        ranking=ranking,
        is_recommended=is_recommended,
    )


class TestRankQuotes:
    """Test ranking by final premium."""

    def test_cheapest_is_recommended(self) -> None:
        """Premiums [12000, 9500, 11000] → 9500 ranked 1 and recommended."""
        a, b, c = _quote("12000", "a"), _quote("9500", "b"), _quote("11000", "c")
        ordered = rank_quotes([a, b, c])

        assert [q.name for q in ordered] == ["b", "c", "a"]
        assert (b.ranking, b.is_recommended) == (1, True)
        assert (c.ranking, c.is_recommended) == (2, False)
        assert (a.ranking, a.is_recommended) == (3, False)

    def test_ties_keep_creation_order(self) -> None:
        first, second, third = _quote("9000", "first"), _quote("9000", "second"), _quote("8000", "third")
        ordered = rank_quotes([first, second, third])

        assert [q.name for q in ordered] == ["third", "first", "second"]
        assert first.ranking == 2
        assert second.ranking == 3

    def test_caller_flags_overridden(self) -> None:
        pricey = _quote("15000", is_recommended=True, ranking=1)
        cheap = _quote("10000", is_recommended=False, ranking=7)
        rank_quotes([pricey, cheap])

        assert pricey.is_recommended is False
        assert pricey.ranking == 2
        assert cheap.is_recommended is True
        assert cheap.ranking == 1

    def test_exactly_one_recommended(self) -> None:
        quotes = [_quote(p) for p in ("500", "400", "400", "900")]
        rank_quotes(quotes)
        assert sum(q.is_recommended for q in quotes) == 1
        assert sorted(q.ranking for q in quotes) == [1, 2, 3, 4]

    def test_idempotent(self) -> None:
        quotes = [_quote("3"), _quote("1"), _quote("2")]
        rank_quotes(quotes)
        first_pass = [(q.ranking, q.is_recommended) for q in quotes]
        rank_quotes(quotes)
        assert [(q.ranking, q.is_recommended) for q in quotes] == first_pass

    def test_empty(self) -> None:
        assert rank_quotes([]) == []


class TestSavings:
    """Test savings between sibling quotes."""

    def test_best_savings(self) -> None:
        quotes = [_quote("12000"), _quote("9500"), _quote("11000")]
        assert best_savings(quotes) == Decimal("2500")

    def test_single_quote_has_no_savings(self) -> None:
        assert best_savings([_quote("12000")]) == Decimal("0")
        assert best_savings([]) == Decimal("0")
