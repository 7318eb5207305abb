"""Tests for quote number generation."""

from __future__ import annotations

import re
from datetime import date

from motorquote.quotation.numbering import QuoteNumberGenerator

QUOTE_NUMBER = re.compile(r"^QT/\d{2}/\d{4}\d{2}\d{8}$")


def _fixed_clock(ns: int = 1_700_000_000_123_456_000):
    return lambda: ns


class TestQuoteNumberGenerator:
    """Test format and uniqueness."""

    def test_format(self) -> None:
        numbers = QuoteNumberGenerator(clock_ns=_fixed_clock())
        assert numbers.generate(12, 3, today=date(2026, 5, 1)) == "QT/26/00120300123456"

    def test_matches_pattern(self) -> None:
        numbers = QuoteNumberGenerator()
        assert QUOTE_NUMBER.match(numbers.generate(1, 1))

    def test_frozen_clock_never_repeats(self) -> None:
        """Calls within the same microsecond still get distinct suffixes."""
        numbers = QuoteNumberGenerator(clock_ns=_fixed_clock())
        generated = [numbers.generate(7, 2, today=date(2026, 1, 1)) for _ in range(1000)]
        assert len(set(generated)) == 1000

    def test_suffix_strictly_increasing(self) -> None:
        numbers = QuoteNumberGenerator(clock_ns=_fixed_clock())
        first = numbers.next_suffix()
        second = numbers.next_suffix()
        assert first == 123456
        assert second == 123457

    def test_clock_going_backwards(self) -> None:
        ticks = iter([5_000_000, 1_000_000])
        numbers = QuoteNumberGenerator(clock_ns=lambda: next(ticks))
        assert numbers.next_suffix() == 5000
        assert numbers.next_suffix() == 5001

    def test_default_generator_unique(self) -> None:
        numbers = QuoteNumberGenerator()
        generated = {numbers.generate(1, 1) for _ in range(500)}
        assert len(generated) == 500
