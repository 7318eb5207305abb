"""Persistence gateway for quotations and the insurer directory.

Thin async query helpers over an AsyncSession. They flush but never commit:
transaction boundaries belong to QuotationService.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from motorquote.models.company import InsuranceCompany
from motorquote.models.quotation import Quotation


class QuotationRepository:
    """Quotation aggregate CRUD; company quotes travel with their parent."""

    async def get(self, db: AsyncSession, quotation_id: int) -> Quotation | None:
        result = await db.execute(
            select(Quotation)
            .where(Quotation.id == quotation_id)
            .options(selectinload(Quotation.company_quotes))
        )
        return result.scalar_one_or_none()

    async def add(self, db: AsyncSession, quotation: Quotation) -> Quotation:
        db.add(quotation)
        await db.flush()
        return quotation

    async def delete(self, db: AsyncSession, quotation: Quotation) -> None:
        await db.delete(quotation)
        await db.flush()

    async def list_for_customer(self, db: AsyncSession, customer_id: int) -> Sequence[Quotation]:
        result = await db.execute(
            select(Quotation)
            .where(Quotation.customer_id == customer_id)
            .order_by(Quotation.created_at.desc(), Quotation.id.desc())
        )
        return result.scalars().all()


class CompanyDirectory:
    """Lookup of active insurers."""

    async def active_companies(self, db: AsyncSession, limit: int | None = None) -> Sequence[InsuranceCompany]:
        stmt = (
            select(InsuranceCompany)
            .where(InsuranceCompany.status.is_(True))
            .order_by(InsuranceCompany.id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return result.scalars().all()

    async def active_companies_by_ids(
        self, db: AsyncSession, company_ids: Sequence[int]
    ) -> Sequence[InsuranceCompany]:
        if not company_ids:
            return []
        result = await db.execute(
            select(InsuranceCompany)
            .where(InsuranceCompany.id.in_(company_ids), InsuranceCompany.status.is_(True))
            .order_by(InsuranceCompany.id)
        )
        return result.scalars().all()
