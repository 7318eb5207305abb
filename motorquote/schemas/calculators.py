"""Pydantic schemas for calculator results.

Pure data classes — no business logic. Used as return types by the
premium and commission calculators.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BasePremium(BaseModel):
    """Own-damage premium for one (quotation, insurer) pair."""

    basic_od_premium: Decimal
    cng_lpg_premium: Decimal
    total_od_premium: Decimal


class AddonPremiums(BaseModel):
    """Per add-on premiums. Only strictly positive amounts appear in `breakdown`."""

    breakdown: dict[str, Decimal] = Field(default_factory=dict)
    total_addon_premium: Decimal = Decimal("0")


class PremiumBreakdown(BaseModel):
    """Full premium build-up for one insurer quote."""

    model_config = ConfigDict(frozen=True)

    company_factor: Decimal
    base_rate: Decimal
    basic_od_premium: Decimal
    cng_lpg_premium: Decimal
    total_od_premium: Decimal
    addon_covers_breakdown: dict[str, Decimal]
    total_addon_premium: Decimal
    net_premium: Decimal
    sgst_amount: Decimal
    cgst_amount: Decimal
    total_premium: Decimal
    roadside_assistance: Decimal
    final_premium: Decimal


class CommissionBreakdown(BaseModel):
    """Commission split on a policy or quote. Not persisted on its own.

    `actual_earnings` may be negative when pass-through commissions exceed
    our own share.
    """

    commission_on: str
    base_premium: Decimal
    my_commission: Decimal
    transfer_commission: Decimal
    reference_commission: Decimal
    actual_earnings: Decimal
