"""Commission calculator — own / transfer / reference split on a premium.

Pure Python, Decimal arithmetic. No rounding beyond Decimal precision:
10000 × 10% is exactly 1000.

  base      = net, OD, or TP premium, picked by `commission_on`
              (unset or unrecognised → net premium)
  amount_i  = base × pct_i / 100   (missing percentages count as 0)
  earnings  = own − transfer − reference   (may be negative)
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from motorquote.models.enums import CommissionBase
from motorquote.schemas.calculators import CommissionBreakdown

ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_POLICY_COMMISSION_RATE = Decimal("10")


def _dec(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_commission_breakdown(
    commission_on: str | CommissionBase | None,
    net_premium: Any = None,
    od_premium: Any = None,
    tp_premium: Any = None,
    my_commission_percentage: Any = None,
    transfer_commission_percentage: Any = None,
    reference_commission_percentage: Any = None,
) -> CommissionBreakdown:
    """Split commission on the selected premium base.

    Args:
        commission_on: "net_premium", "od_premium" or "tp_premium"; anything else means net.
        net_premium: Net premium (None → 0).
        od_premium: Own-damage premium (None → 0).
        tp_premium: Third-party premium (None → 0).
        my_commission_percentage: Our commission percent (None → 0).
        transfer_commission_percentage: Percent passed on to a transfer partner (None → 0).
        reference_commission_percentage: Percent paid to the referrer (None → 0).

    Returns:
        CommissionBreakdown with the base premium, three amounts, and actual earnings.
    """
    base_kind = CommissionBase.resolve(commission_on)
    premiums = {
        CommissionBase.NET_PREMIUM: net_premium,
        CommissionBase.OD_PREMIUM: od_premium,
        CommissionBase.TP_PREMIUM: tp_premium,
    }
    base = _dec(premiums[base_kind])

    my_commission = base * _dec(my_commission_percentage) / HUNDRED
    transfer_commission = base * _dec(transfer_commission_percentage) / HUNDRED
    reference_commission = base * _dec(reference_commission_percentage) / HUNDRED

    return CommissionBreakdown(
        commission_on=base_kind.value,
        base_premium=base,
        my_commission=my_commission,
        transfer_commission=transfer_commission,
        reference_commission=reference_commission,
        actual_earnings=my_commission - transfer_commission - reference_commission,
    )


def commission_breakdown_for(record: Any) -> CommissionBreakdown:
    """Commission breakdown for a policy, quote, or plain mapping.

    Reads `commission_on`, the three premiums, and the three percentages as
    attributes (or keys); anything missing counts as unset.
    """
    if isinstance(record, Mapping):
        get = record.get
    else:
        def get(name: str) -> Any:
            return getattr(record, name, None)

    return calculate_commission_breakdown(
        commission_on=get("commission_on"),
        net_premium=get("net_premium"),
        od_premium=get("od_premium"),
        tp_premium=get("tp_premium"),
        my_commission_percentage=get("my_commission_percentage"),
        transfer_commission_percentage=get("transfer_commission_percentage"),
        reference_commission_percentage=get("reference_commission_percentage"),
    )


def calculate_policy_commission(premium: Any, commission_percentage: Any = None) -> Decimal:
    """Flat commission on a policy premium, 10% unless a rate is given; 2 dp."""
    rate = DEFAULT_POLICY_COMMISSION_RATE if commission_percentage is None else _dec(commission_percentage)
    return (_dec(premium) * rate / HUNDRED).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
