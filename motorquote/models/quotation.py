"""Quotation aggregate — a vehicle quotation and its per-insurer quotes.

All financial amounts use Numeric(12,2) / Decimal — never float.
Add-on breakdowns are stored as JSON maps of name -> amount string so the
exact Decimal survives the round trip.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motorquote.models.base import Base, JSONType, TimestampMixin
from motorquote.models.company import InsuranceCompany
from motorquote.models.enums import QuotationStatus

ZERO = Decimal("0")


class Quotation(TimestampMixin, Base):
    """Aggregate root: vehicle details, IDV components, and the insurer quotes."""

    __tablename__ = "quotations"

    # External references (customers live outside this service)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    policy_type: Mapped[str | None] = mapped_column(String(30))
    policy_tenure_years: Mapped[int | None] = mapped_column(Integer)

    # Vehicle
    vehicle_number: Mapped[str | None] = mapped_column(String(20))
    make_model_variant: Mapped[str] = mapped_column(String(255), nullable=False)
    rto_location: Mapped[str] = mapped_column(String(255), nullable=False)
    manufacturing_year: Mapped[int] = mapped_column(Integer, nullable=False)
    date_of_registration: Mapped[date | None] = mapped_column(Date)
    cubic_capacity_kw: Mapped[int] = mapped_column(Integer, nullable=False)
    seating_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    fuel_type: Mapped[str] = mapped_column(String(20), nullable=False)

    # IDV components; total_idv is always their sum
    idv_vehicle: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_trailer: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_cng_lpg_kit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_electrical_accessories: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_non_electrical_accessories: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=ZERO
    )
    total_idv: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)

    # Cover selection and discounts
    addon_covers: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    ncb_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    previous_ncb_percentage: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))
    od_discount: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))

    # Contact and free text
    whatsapp_number: Mapped[str | None] = mapped_column(String(15))
    notes: Mapped[str | None] = mapped_column(Text)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=QuotationStatus.PENDING.value)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Audit
    created_by: Mapped[str | None] = mapped_column(String(100))
    updated_by: Mapped[str | None] = mapped_column(String(100))

    # Relationships
    company_quotes: Mapped[list[QuotationCompany]] = relationship(
        "QuotationCompany",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationCompany.id",
        lazy="selectin",
    )

    @property
    def recommended_quote(self) -> QuotationCompany | None:
        """The single quote flagged as recommended, if any."""
        return next((q for q in self.company_quotes if q.is_recommended), None)

    def __repr__(self) -> str:
        return f"<Quotation id={self.id} customer={self.customer_id} total_idv={self.total_idv}>"


class QuotationCompany(TimestampMixin, Base):
    """One insurer's quote for a quotation, with the full premium breakdown."""

    __tablename__ = "quotation_companies"

    # Foreign keys
    quotation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    insurance_company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("insurance_companies.id"), nullable=False, index=True
    )

    quote_number: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Coverage
    policy_type: Mapped[str | None] = mapped_column(String(30))
    policy_tenure_years: Mapped[int | None] = mapped_column(Integer)
    plan_name: Mapped[str | None] = mapped_column(String(255))
    idv_vehicle: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_trailer: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_cng_lpg_kit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_electrical_accessories: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    idv_non_electrical_accessories: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=ZERO
    )
    total_idv: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)

    # Own damage
    basic_od_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tp_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    cng_lpg_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    total_od_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)

    # Add-ons
    addon_covers_breakdown: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    addon_notes: Mapped[dict[str, Any] | None] = mapped_column(JSONType)
    total_addon_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)

    # Totals and tax
    net_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    sgst_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    cgst_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    total_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    roadside_assistance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    final_premium: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO, index=True)

    # Comparison
    is_recommended: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recommendation_note: Mapped[str | None] = mapped_column(String(500))
    ranking: Mapped[int | None] = mapped_column(Integer)
    benefits: Mapped[str | None] = mapped_column(Text)
    exclusions: Mapped[str | None] = mapped_column(Text)

    # Relationships
    quotation: Mapped[Quotation] = relationship("Quotation", back_populates="company_quotes")
    insurance_company: Mapped[InsuranceCompany] = relationship("InsuranceCompany", lazy="selectin")

    @property
    def addon_breakdown(self) -> dict[str, Decimal]:
        """Add-on premiums as Decimals, in stored order."""
        return {name: Decimal(str(amount)) for name, amount in (self.addon_covers_breakdown or {}).items()}

    def calculate_savings(self, other: QuotationCompany | None = None) -> Decimal:
        """How much cheaper this quote is than `other` (0 when there is nothing to compare)."""
        if other is None:
            return ZERO
        return Decimal(other.final_premium) - Decimal(self.final_premium)

    def __repr__(self) -> str:
        return (
            f"<QuotationCompany quote_number={self.quote_number} "
            f"final_premium={self.final_premium} ranking={self.ranking}>"
        )
