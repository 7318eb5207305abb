"""Quick policy premium estimate — used when issuing a policy without a quotation.

A coarser rule set than the per-insurer quote calculator:
  base rate by vehicle age: ≤1 → 2.5%, ≤3 → 3.0%, ≤5 → 3.5%, older → 4.0%
  add-ons: Zero Depreciation 0.4%, Engine Protection 0.1%, NCB Protection 0.05%
           of sum assured; Road Side Assistance 180, Personal Accident 450 flat
  GST 18% on the net; result rounded to 2 dp.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from motorquote.calculators.premium import to_rupees, vehicle_age
from motorquote.models.enums import AddonCover

GST_RATE = Decimal("0.18")

_AGE_RATES: tuple[tuple[int, Decimal], ...] = (
    (1, Decimal("0.025")),
    (3, Decimal("0.030")),
    (5, Decimal("0.035")),
)
_OLDEST_RATE = Decimal("0.040")

_ADDON_RATES: dict[str, Decimal] = {
    AddonCover.ZERO_DEPRECIATION.value: Decimal("0.004"),
    AddonCover.ENGINE_PROTECTION.value: Decimal("0.001"),
    AddonCover.NCB_PROTECTION.value: Decimal("0.0005"),
}
_ADDON_FLAT: dict[str, Decimal] = {
    AddonCover.ROAD_SIDE_ASSISTANCE.value: Decimal("180"),
    AddonCover.PERSONAL_ACCIDENT.value: Decimal("450"),
}


def _base_rate(age: int) -> Decimal:
    for max_age, rate in _AGE_RATES:
        if age <= max_age:
            return rate
    return _OLDEST_RATE


def estimate_policy_premium(
    sum_assured: Decimal | int | float | None,
    manufacturing_year: int | None = None,
    addon_covers: Iterable[str] | None = None,
    today: date | None = None,
) -> Decimal:
    """Gross policy premium including 18% GST.

    Args:
        sum_assured: Insured value (None → 0).
        manufacturing_year: Year of manufacture; None means a new vehicle.
        addon_covers: Selected add-on names; unknown names add nothing.
        today: Reference date for vehicle age.

    Returns:
        Premium rounded to 2 decimal places.
    """
    today = today or date.today()
    idv = Decimal(str(sum_assured or 0))
    age = vehicle_age(manufacturing_year or today.year, today)

    base_premium = idv * _base_rate(age)

    addon_premium = Decimal("0")
    for addon in addon_covers or ():
        if addon in _ADDON_RATES:
            addon_premium += idv * _ADDON_RATES[addon]
        else:
            addon_premium += _ADDON_FLAT.get(addon, Decimal("0"))

    net_premium = base_premium + addon_premium
    return to_rupees(net_premium + net_premium * GST_RATE)
