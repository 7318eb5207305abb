"""Motor premium calculator — one insurer quote for one quotation.

Pure Python, Decimal arithmetic. Implements:
- Basic OD premium: total IDV × age-banded OD rate × insurer factor
- CNG/LPG kit premium: kit IDV × 5% × insurer factor (CNG / Hybrid only)
- Add-on premiums from the closed add-on rule table
- SGST + CGST at 9% each on the net premium
- Flat roadside-assistance surcharge (same for every insurer)

Rounding: every component is rounded to 2 decimal places (ROUND_HALF_UP).
Unknown insurers price at factor 1.0 and unknown add-ons at zero — never an error.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol

from motorquote.calculators.rating import AddonRuleKind, RatingTable, default_rating_table
from motorquote.models.enums import FuelType
from motorquote.schemas.calculators import AddonPremiums, BasePremium, PremiumBreakdown

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Fuel types that carry a CNG/LPG kit premium
KIT_FUEL_TYPES = frozenset({FuelType.CNG.value, FuelType.HYBRID.value})


class RateableVehicle(Protocol):
    """What the calculator needs from a quotation."""

    total_idv: Decimal
    idv_cng_lpg_kit: Decimal
    fuel_type: str
    manufacturing_year: int
    addon_covers: list[str]


def to_rupees(value: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _dec(value: object) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def vehicle_age(manufacturing_year: int, today: date | None = None) -> int:
    """Age in whole calendar years."""
    today = today or date.today()
    return today.year - manufacturing_year


def calculate_base_premium(
    vehicle: RateableVehicle,
    company_name: str | None,
    table: RatingTable = default_rating_table,
    today: date | None = None,
) -> BasePremium:
    """Basic OD, CNG/LPG kit, and total OD premium for one insurer."""
    idv = _dec(vehicle.total_idv)
    factor = table.company_factor(company_name)
    rate = table.od_rate(vehicle_age(vehicle.manufacturing_year, today))

    basic_od = idv * rate / HUNDRED * factor

    cng_lpg = ZERO
    kit_idv = _dec(vehicle.idv_cng_lpg_kit)
    if _fuel_value(vehicle.fuel_type) in KIT_FUEL_TYPES and kit_idv > 0:
        cng_lpg = kit_idv * table.cng_lpg_rate / HUNDRED * factor

    return BasePremium(
        basic_od_premium=to_rupees(basic_od),
        cng_lpg_premium=to_rupees(cng_lpg),
        total_od_premium=to_rupees(basic_od + cng_lpg),
    )


def calculate_addon_premium(
    addon: str,
    total_idv: Decimal,
    company_factor: Decimal,
    table: RatingTable = default_rating_table,
) -> Decimal:
    """Premium for a single add-on; zero for names outside the rule table."""
    rule = table.addon_rule(addon)
    if rule is None:
        return ZERO
    if rule.kind is AddonRuleKind.FLAT:
        return to_rupees(rule.amount * company_factor)
    return to_rupees(_dec(total_idv) * table.addon_percent(rule) / HUNDRED * company_factor)


def calculate_addon_premiums(
    addons: Iterable[str] | None,
    total_idv: Decimal,
    company_factor: Decimal,
    table: RatingTable = default_rating_table,
) -> AddonPremiums:
    """Breakdown of positive add-on premiums, in selection order, and their total."""
    breakdown: dict[str, Decimal] = {}
    for addon in addons or ():
        premium = calculate_addon_premium(addon, total_idv, company_factor, table)
        if premium > 0:
            breakdown[addon] = premium

    return AddonPremiums(
        breakdown=breakdown,
        total_addon_premium=to_rupees(sum(breakdown.values(), ZERO)),
    )


def calculate_company_premium(
    vehicle: RateableVehicle,
    company_name: str | None,
    table: RatingTable = default_rating_table,
    today: date | None = None,
) -> PremiumBreakdown:
    """Full premium build-up for one (quotation, insurer) pair.

    Args:
        vehicle: Quotation (or any object with the rated attributes).
        company_name: Insurer name, used as the rating-factor key.
        table: Rating table; defaults to the one built from settings.
        today: Reference date for vehicle age (defaults to today).

    Returns:
        PremiumBreakdown with every intermediate figure.
    """
    factor = table.company_factor(company_name)
    base = calculate_base_premium(vehicle, company_name, table, today)
    addons = calculate_addon_premiums(vehicle.addon_covers, _dec(vehicle.total_idv), factor, table)

    net_premium = base.total_od_premium + addons.total_addon_premium
    sgst = to_rupees(net_premium * table.sgst_rate / HUNDRED)
    cgst = to_rupees(net_premium * table.cgst_rate / HUNDRED)
    total_premium = net_premium + sgst + cgst
    roadside = to_rupees(table.roadside_assistance)

    return PremiumBreakdown(
        company_factor=factor,
        base_rate=table.od_rate(vehicle_age(vehicle.manufacturing_year, today)),
        basic_od_premium=base.basic_od_premium,
        cng_lpg_premium=base.cng_lpg_premium,
        total_od_premium=base.total_od_premium,
        addon_covers_breakdown=addons.breakdown,
        total_addon_premium=addons.total_addon_premium,
        net_premium=net_premium,
        sgst_amount=sgst,
        cgst_amount=cgst,
        total_premium=total_premium,
        roadside_assistance=roadside,
        final_premium=total_premium + roadside,
    )


def _fuel_value(fuel_type: object) -> str:
    return fuel_type.value if isinstance(fuel_type, FuelType) else str(fuel_type)
