"""Pydantic schemas for quotation input.

Validation happens here, before the service touches the database. A
pydantic ValidationError is the structured error callers receive.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from motorquote.models.enums import FuelType, PolicyType

IDV_FIELDS: tuple[str, ...] = (
    "idv_vehicle",
    "idv_trailer",
    "idv_cng_lpg_kit",
    "idv_electrical_accessories",
    "idv_non_electrical_accessories",
)

# Premium figures compared when detecting repeated company payloads
PREMIUM_FIELDS: tuple[str, ...] = (
    "basic_od_premium",
    "tp_premium",
    "cng_lpg_premium",
    "total_od_premium",
    "total_addon_premium",
    "net_premium",
    "sgst_amount",
    "cgst_amount",
    "total_premium",
    "roadside_assistance",
    "final_premium",
)

ZERO = Decimal("0")


def _max_manufacturing_year() -> int:
    return date.today().year + 1


def sum_idv(values: Any) -> Decimal:
    """Sum the five IDV components of a mapping or object; missing parts count as 0."""
    total = ZERO
    for name in IDV_FIELDS:
        raw = values.get(name) if isinstance(values, dict) else getattr(values, name, None)
        if raw is not None:
            total += Decimal(str(raw))
    return total


class AddonLine(BaseModel):
    """One manually entered add-on price with an optional note."""

    price: Decimal = ZERO
    note: str = ""


class CompanyQuoteInput(BaseModel):
    """A manually supplied insurer quote. Figures are trusted as given."""

    model_config = ConfigDict(extra="ignore")

    insurance_company_id: int = Field(gt=0)
    quote_number: str | None = Field(default=None, max_length=255)

    # Coverage
    policy_type: PolicyType = PolicyType.COMPREHENSIVE
    policy_tenure_years: int = 1
    plan_name: str | None = Field(default=None, max_length=255)
    idv_vehicle: Decimal = Field(default=ZERO, ge=0)
    idv_trailer: Decimal = Field(default=ZERO, ge=0)
    idv_cng_lpg_kit: Decimal = Field(default=ZERO, ge=0)
    idv_electrical_accessories: Decimal = Field(default=ZERO, ge=0)
    idv_non_electrical_accessories: Decimal = Field(default=ZERO, ge=0)
    total_idv: Decimal = Field(default=ZERO, ge=0)

    # Premiums
    basic_od_premium: Decimal = Field(ge=0)
    tp_premium: Decimal = Field(default=ZERO, ge=0)
    cng_lpg_premium: Decimal = Field(default=ZERO, ge=0)
    total_od_premium: Decimal | None = Field(default=None, ge=0)
    addon_covers_breakdown: dict[str, AddonLine] = Field(default_factory=dict)
    total_addon_premium: Decimal = Field(default=ZERO, ge=0)
    net_premium: Decimal = Field(default=ZERO, ge=0)
    sgst_amount: Decimal = Field(default=ZERO, ge=0)
    cgst_amount: Decimal = Field(default=ZERO, ge=0)
    total_premium: Decimal = Field(default=ZERO, ge=0)
    roadside_assistance: Decimal = Field(default=ZERO, ge=0)
    final_premium: Decimal = Field(default=ZERO, ge=0)

    # Comparison
    is_recommended: bool = False
    recommendation_note: str | None = Field(default=None, max_length=500)
    ranking: int | None = None
    benefits: str | None = None
    exclusions: str | None = None

    @field_validator("policy_tenure_years")
    @classmethod
    def validate_tenure(cls, v: int) -> int:
        if v not in (1, 2, 3):
            msg = "Policy tenure must be 1, 2, or 3 years"
            raise ValueError(msg)
        return v

    @field_validator("addon_covers_breakdown", mode="before")
    @classmethod
    def normalize_addon_lines(cls, v: Any) -> Any:
        """Accept bare numbers as well as {price, note} objects."""
        if not isinstance(v, dict):
            return v
        return {name: line if isinstance(line, dict) else {"price": line} for name, line in v.items()}

    @model_validator(mode="after")
    def fill_derived_totals(self) -> CompanyQuoteInput:
        # An explicit breakdown always wins over a stale total
        if self.addon_covers_breakdown:
            self.total_addon_premium = sum((line.price for line in self.addon_covers_breakdown.values()), ZERO)
        if self.total_od_premium is None:
            self.total_od_premium = self.basic_od_premium
        return self

    def dedup_key(self) -> tuple[Any, ...]:
        """Identity of a payload for dropping exact repeats within one request."""
        return (
            self.insurance_company_id,
            self.quote_number,
            *(getattr(self, name) for name in PREMIUM_FIELDS),
        )


class QuotationCreate(BaseModel):
    """Fields accepted when creating or fully replacing a quotation."""

    model_config = ConfigDict(extra="ignore")

    customer_id: int = Field(gt=0)
    policy_type: PolicyType | None = None
    policy_tenure_years: int | None = None

    # Vehicle
    vehicle_number: str | None = Field(default=None, max_length=20)
    make_model_variant: str = Field(min_length=1, max_length=255)
    rto_location: str = Field(min_length=1, max_length=255)
    manufacturing_year: int = Field(ge=1980)
    date_of_registration: date | None = None
    cubic_capacity_kw: int = Field(ge=1)
    seating_capacity: int = Field(ge=1, le=50)
    fuel_type: FuelType

    # IDV
    idv_vehicle: Decimal | None = Field(default=None, ge=10_000, le=10_000_000)
    idv_trailer: Decimal = Field(default=ZERO, ge=0)
    idv_cng_lpg_kit: Decimal = Field(default=ZERO, ge=0)
    idv_electrical_accessories: Decimal = Field(default=ZERO, ge=0)
    idv_non_electrical_accessories: Decimal = Field(default=ZERO, ge=0)

    addon_covers: list[str] = Field(default_factory=list)
    ncb_percentage: Decimal | None = Field(default=None, ge=0, le=50)
    previous_ncb_percentage: Decimal | None = Field(default=None, ge=0, le=50)
    od_discount: Decimal | None = Field(default=None, ge=0, le=100)

    whatsapp_number: str | None = Field(default=None, pattern=r"^[6-9]\d{9}$")
    notes: str | None = Field(default=None, max_length=1000)

    companies: list[CompanyQuoteInput] = Field(default_factory=list)

    @field_validator("manufacturing_year")
    @classmethod
    def validate_manufacturing_year(cls, v: int) -> int:
        if v > _max_manufacturing_year():
            msg = "Manufacturing year cannot be in the future"
            raise ValueError(msg)
        return v

    @field_validator("policy_tenure_years")
    @classmethod
    def validate_tenure(cls, v: int | None) -> int | None:
        if v is not None and v not in (1, 2, 3):
            msg = "Policy tenure must be 1, 2, or 3 years"
            raise ValueError(msg)
        return v

    @property
    def total_idv(self) -> Decimal:
        return sum_idv(self.model_dump(include=set(IDV_FIELDS)))

    def quotation_fields(self) -> dict[str, Any]:
        """Column values for the Quotation row (companies excluded, enums flattened)."""
        data = self.model_dump(exclude={"companies"}, mode="python")
        for key in ("policy_type", "fuel_type"):
            if data.get(key) is not None:
                data[key] = data[key].value
        data["idv_vehicle"] = data["idv_vehicle"] or ZERO
        data["total_idv"] = self.total_idv
        return data


class QuotationUpdate(QuotationCreate):
    """Full replacement of a quotation's fields and company quotes."""
