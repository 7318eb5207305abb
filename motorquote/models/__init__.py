"""SQLAlchemy ORM models for the quotation engine.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from motorquote.models.audit import AuditLog
from motorquote.models.base import Base
from motorquote.models.company import InsuranceCompany
from motorquote.models.enums import (
    AddonCover,
    CommissionBase,
    FuelType,
    PolicyType,
    QuotationStatus,
)
from motorquote.models.quotation import Quotation, QuotationCompany

__all__ = [
    # Base
    "Base",
    # Models
    "InsuranceCompany",
    "Quotation",
    "QuotationCompany",
    "AuditLog",
    # Enums
    "AddonCover",
    "CommissionBase",
    "FuelType",
    "PolicyType",
    "QuotationStatus",
]
