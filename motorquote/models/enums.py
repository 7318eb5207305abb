"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization; stored as plain strings.
"""

from __future__ import annotations

from enum import Enum


class QuotationStatus(str, Enum):
    """Quotation lifecycle states."""

    DRAFT = "Draft"
    PENDING = "Pending"
    SENT = "Sent"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    CONVERTED = "Converted"


class FuelType(str, Enum):
    """Vehicle fuel types accepted on a quotation."""

    PETROL = "Petrol"
    DIESEL = "Diesel"
    CNG = "CNG"
    ELECTRIC = "Electric"
    HYBRID = "Hybrid"


class PolicyType(str, Enum):
    """Motor policy cover type offered by an insurer quote."""

    COMPREHENSIVE = "Comprehensive"
    OWN_DAMAGE = "Own Damage"
    THIRD_PARTY = "Third Party"


class AddonCover(str, Enum):
    """Add-on covers with a pricing rule in the rating table.

    Names outside this set are accepted on a quotation but price at zero.
    """

    ZERO_DEPRECIATION = "Zero Depreciation"
    ENGINE_PROTECTION = "Engine Protection"
    ROAD_SIDE_ASSISTANCE = "Road Side Assistance"
    NCB_PROTECTION = "NCB Protection"
    INVOICE_PROTECTION = "Invoice Protection"
    KEY_REPLACEMENT = "Key Replacement"
    PERSONAL_ACCIDENT = "Personal Accident"
    TYRE_PROTECTION = "Tyre Protection"
    CONSUMABLES = "Consumables"


class CommissionBase(str, Enum):
    """Which premium figure a commission percentage applies to.

    Anything unset or unrecognised resolves to NET_PREMIUM via `resolve`.
    """

    NET_PREMIUM = "net_premium"
    OD_PREMIUM = "od_premium"
    TP_PREMIUM = "tp_premium"

    @classmethod
    def resolve(cls, value: str | CommissionBase | None) -> CommissionBase:
        """Map a raw `commission_on` value to a member, defaulting to NET_PREMIUM."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NET_PREMIUM
