"""Rating table — insurer factors, OD rate bands, and add-on pricing rules.

An immutable value handed to the premium calculator. The default table is
built from `settings.rating`; tests and callers may build their own.

OD rate bands (percent of total IDV, by vehicle age in years):
  age ≤ 1 → 1.2
  age ≤ 3 → 1.8
  age ≤ 5 → 2.4
  older   → 3.0

Add-on rules are a closed table keyed by add-on name. Each rule is either a
percent of IDV (optionally overridable per insurer through `addon_rates`)
or a flat amount. Every rule is scaled by the insurer's rating factor.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from motorquote.config import RatingSettings, settings
from motorquote.models.enums import AddonCover


class AddonRuleKind(str, Enum):
    """How an add-on premium is derived."""

    IDV_PERCENT = "idv_percent"
    FLAT = "flat"


class AddonRule(BaseModel):
    """Pricing rule for one add-on cover."""

    model_config = ConfigDict(frozen=True)

    kind: AddonRuleKind
    amount: Decimal  # percent of IDV, or flat rupees
    override_key: str | None = None  # key into RatingTable.addon_rates


ADDON_RULES: Mapping[str, AddonRule] = MappingProxyType({
    AddonCover.ZERO_DEPRECIATION.value: AddonRule(
        kind=AddonRuleKind.IDV_PERCENT, amount=Decimal("0.4"), override_key="depreciation"
    ),
    AddonCover.ENGINE_PROTECTION.value: AddonRule(
        kind=AddonRuleKind.IDV_PERCENT, amount=Decimal("0.1"), override_key="engine_secure"
    ),
    AddonCover.ROAD_SIDE_ASSISTANCE.value: AddonRule(kind=AddonRuleKind.FLAT, amount=Decimal("180")),
    AddonCover.NCB_PROTECTION.value: AddonRule(kind=AddonRuleKind.IDV_PERCENT, amount=Decimal("0.05")),
    AddonCover.INVOICE_PROTECTION.value: AddonRule(
        kind=AddonRuleKind.IDV_PERCENT, amount=Decimal("0.23"), override_key="return_to_invoice"
    ),
    AddonCover.KEY_REPLACEMENT.value: AddonRule(kind=AddonRuleKind.FLAT, amount=Decimal("425")),
    AddonCover.PERSONAL_ACCIDENT.value: AddonRule(kind=AddonRuleKind.FLAT, amount=Decimal("450")),
    AddonCover.TYRE_PROTECTION.value: AddonRule(
        kind=AddonRuleKind.IDV_PERCENT, amount=Decimal("0.18"), override_key="tyre_secure"
    ),
    AddonCover.CONSUMABLES.value: AddonRule(
        kind=AddonRuleKind.IDV_PERCENT, amount=Decimal("0.06"), override_key="consumables"
    ),
})

# (max vehicle age inclusive, OD rate percent); ages beyond the last band use OLDEST_VEHICLE_RATE
OD_RATE_BANDS: tuple[tuple[int, Decimal], ...] = (
    (1, Decimal("1.2")),
    (3, Decimal("1.8")),
    (5, Decimal("2.4")),
)
OLDEST_VEHICLE_RATE = Decimal("3.0")


class RatingTable(BaseModel):
    """Immutable rating configuration for the premium calculator."""

    model_config = ConfigDict(frozen=True)

    company_factors: Mapping[str, Decimal]
    default_company_factor: Decimal = Decimal("1.0")
    addon_rates: Mapping[str, Decimal] = Field(default_factory=dict)
    addon_rules: Mapping[str, AddonRule] = Field(default_factory=lambda: ADDON_RULES)
    od_rate_bands: tuple[tuple[int, Decimal], ...] = OD_RATE_BANDS
    oldest_vehicle_rate: Decimal = OLDEST_VEHICLE_RATE
    cng_lpg_rate: Decimal = Decimal("5")
    sgst_rate: Decimal = Decimal("9")
    cgst_rate: Decimal = Decimal("9")
    roadside_assistance: Decimal = Decimal("136.88")

    @classmethod
    def from_settings(cls, rating: RatingSettings | None = None) -> RatingTable:
        """Build the table from (by default) the process-wide rating settings."""
        rating = rating or settings.rating
        return cls(
            company_factors=MappingProxyType(dict(rating.company_factors)),
            default_company_factor=rating.default_company_factor,
            addon_rates=MappingProxyType(dict(rating.addon_rates)),
            cng_lpg_rate=rating.cng_lpg_rate,
            sgst_rate=rating.sgst_rate,
            cgst_rate=rating.cgst_rate,
            roadside_assistance=rating.roadside_assistance,
        )

    def company_factor(self, company_name: str | None) -> Decimal:
        """Rating factor for an insurer; exact, case-sensitive name match."""
        if company_name is None:
            return self.default_company_factor
        return self.company_factors.get(company_name, self.default_company_factor)

    def od_rate(self, vehicle_age: int) -> Decimal:
        """OD rate percent for a vehicle of the given age in years."""
        for max_age, rate in self.od_rate_bands:
            if vehicle_age <= max_age:
                return rate
        return self.oldest_vehicle_rate

    def addon_rule(self, addon: str) -> AddonRule | None:
        return self.addon_rules.get(addon)

    def addon_percent(self, rule: AddonRule) -> Decimal:
        """Percent of IDV for a rule, honouring a configured override."""
        if rule.override_key is None:
            return rule.amount
        return self.addon_rates.get(rule.override_key, rule.amount)


default_rating_table = RatingTable.from_settings()
