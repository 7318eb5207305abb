"""Tests for the rating table built from settings."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from motorquote.calculators.rating import ADDON_RULES, AddonRuleKind, RatingTable, default_rating_table
from motorquote.config import RatingSettings


class TestRatingTable:
    """Construction and lookups."""

    def test_default_table_built_from_settings(self) -> None:
        table = RatingTable.from_settings()
        assert table.company_factor("HDFC ERGO") == Decimal("0.95")
        assert table.roadside_assistance == Decimal("136.88")
        assert table.addon_rule("Key Replacement").kind is AddonRuleKind.FLAT
        assert default_rating_table.company_factor("ICICI Lombard") == Decimal("1.05")

    def test_explicit_settings(self) -> None:
        rating = RatingSettings(
            company_factors={"Acme General": Decimal("1.2")},
            addon_rates={"consumables": Decimal("0.1")},
        )
        table = RatingTable.from_settings(rating)
        assert table.company_factor("Acme General") == Decimal("1.2")
        assert table.company_factor("TATA AIG") == Decimal("1.0")
        assert table.addon_percent(table.addon_rule("Consumables")) == Decimal("0.1")

    def test_minimal_table_uses_default_rules(self) -> None:
        table = RatingTable(company_factors={})
        assert set(table.addon_rules) == set(ADDON_RULES)
        assert table.addon_rule("Windscreen Cover") is None

    def test_tables_are_independent(self) -> None:
        first = RatingTable(company_factors={"A": Decimal("1.1")})
        second = RatingTable(company_factors={"B": Decimal("0.9")})
        assert first.company_factor("B") == Decimal("1.0")
        assert second.company_factor("A") == Decimal("1.0")

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            default_rating_table.cng_lpg_rate = Decimal("7")  # type: ignore[misc]

    def test_rules_read_only(self) -> None:
        with pytest.raises(TypeError):
            ADDON_RULES["Windscreen Cover"] = ADDON_RULES["Key Replacement"]  # type: ignore[index]
