"""Quotation service — create, regenerate, update, and delete quotations.

Owns the transaction boundary for the quotation aggregate: the quotation row
and every insurer quote are written in one unit. Any failure rolls the whole
unit back and re-raises the original exception. Events are emitted only
after a successful commit.

Two ways to fill a quotation with insurer quotes:
- manual: the caller supplies per-insurer figures, stored as given
- generated: the premium calculator prices the quotation for up to
  `max_auto_companies` active insurers

Either way the quotes are ranked by final premium and the cheapest is the
single recommended one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from motorquote.calculators.commission import commission_breakdown_for
from motorquote.calculators.premium import calculate_company_premium
from motorquote.calculators.ranking import best_savings, rank_quotes
from motorquote.calculators.rating import RatingTable, default_rating_table
from motorquote.config import settings
from motorquote.events.bus import emit
from motorquote.models.company import InsuranceCompany
from motorquote.models.enums import QuotationStatus
from motorquote.models.quotation import Quotation, QuotationCompany
from motorquote.quotation.numbering import QuoteNumberGenerator, quote_numbers
from motorquote.quotation.repository import CompanyDirectory, QuotationRepository
from motorquote.schemas.calculators import CommissionBreakdown
from motorquote.schemas.events import EventType, SystemEvent
from motorquote.schemas.quotation import IDV_FIELDS, CompanyQuoteInput, QuotationCreate, QuotationUpdate

logger = logging.getLogger(__name__)


class QuotationNotFoundError(LookupError):
    """Raised when an operation targets a quotation id that does not exist."""

    def __init__(self, quotation_id: int) -> None:
        super().__init__(f"Quotation {quotation_id} not found")
        self.quotation_id = quotation_id


class QuotationService:
    """Orchestrates the quotation aggregate and its insurer quotes."""

    def __init__(
        self,
        rating_table: RatingTable = default_rating_table,
        repository: QuotationRepository | None = None,
        directory: CompanyDirectory | None = None,
        numbers: QuoteNumberGenerator = quote_numbers,
        max_auto_companies: int | None = None,
    ) -> None:
        self.rating_table = rating_table
        self.repository = repository or QuotationRepository()
        self.directory = directory or CompanyDirectory()
        self.numbers = numbers
        if max_auto_companies is None:
            max_auto_companies = settings.rating.max_auto_companies
        self.max_auto_companies = max_auto_companies

    # ── Create / update / delete ─────────────────────────────────────

    async def create_quotation(
        self,
        db: AsyncSession,
        data: QuotationCreate | Mapping[str, Any],
        actor_id: str | None = None,
    ) -> Quotation:
        """Create a quotation and, when supplied, its manual insurer quotes.

        Args:
            db: Database session.
            data: Quotation fields; an optional `companies` list holds manual quotes.
            actor_id: Staff user recorded as creator.

        Returns:
            The committed Quotation with its ranked quotes.

        Raises:
            pydantic.ValidationError: Invalid input; nothing is written.
        """
        payload = data if isinstance(data, QuotationCreate) else QuotationCreate.model_validate(data)

        try:
            quotation = Quotation(
                **payload.quotation_fields(),
                status=QuotationStatus.PENDING.value,
                created_by=actor_id,
                updated_by=actor_id,
                company_quotes=[],
            )
            await self.repository.add(db, quotation)

            if payload.companies:
                await self._add_manual_quotes(db, quotation, payload.companies)

            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Quotation create failed: customer=%s", payload.customer_id)
            raise

        logger.info(
            "Quotation created: id=%s customer=%s total_idv=%s quotes=%d",
            quotation.id,
            quotation.customer_id,
            quotation.total_idv,
            len(quotation.company_quotes),
        )
        await self._emit(EventType.QUOTATION_GENERATED, quotation, actor_id, source="manual")
        return quotation

    async def update_quotation(
        self,
        db: AsyncSession,
        quotation_id: int,
        data: QuotationUpdate | Mapping[str, Any],
        actor_id: str | None = None,
    ) -> bool:
        """Replace a quotation's fields and all of its insurer quotes.

        Existing quotes are deleted and recreated from `data["companies"]`;
        there is no merging with the previous set.

        Raises:
            pydantic.ValidationError: Invalid input; nothing is written.
            QuotationNotFoundError: No quotation with this id.
        """
        payload = data if isinstance(data, QuotationUpdate) else QuotationUpdate.model_validate(data)

        quotation = await self._get_or_raise(db, quotation_id)

        try:
            for field, value in payload.quotation_fields().items():
                setattr(quotation, field, value)
            quotation.updated_by = actor_id

            quotation.company_quotes.clear()
            await db.flush()

            if payload.companies:
                await self._add_manual_quotes(db, quotation, payload.companies)

            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Quotation update failed: id=%s", quotation_id)
            raise

        logger.info(
            "Quotation updated: id=%s total_idv=%s quotes=%d",
            quotation.id,
            quotation.total_idv,
            len(quotation.company_quotes),
        )
        await self._emit(EventType.QUOTATION_UPDATED, quotation, actor_id)
        return True

    async def delete_quotation(self, db: AsyncSession, quotation_id: int, actor_id: str | None = None) -> bool:
        """Delete a quotation; its insurer quotes go with it."""
        quotation = await self._get_or_raise(db, quotation_id)

        try:
            await self.repository.delete(db, quotation)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Quotation delete failed: id=%s", quotation_id)
            raise

        logger.info("Quotation deleted: id=%s", quotation_id)
        await emit(SystemEvent(
            event_type=EventType.QUOTATION_DELETED,
            quotation_id=quotation_id,
            actor_id=actor_id,
            source_module="quotation.service",
        ))
        return True

    # ── Generated quotes ─────────────────────────────────────────────

    async def generate_company_quotes(
        self,
        db: AsyncSession,
        quotation: Quotation | int,
        actor_id: str | None = None,
        today: date | None = None,
    ) -> list[QuotationCompany]:
        """Price the quotation for up to `max_auto_companies` active insurers.

        Any existing quotes are replaced. Returns the new quotes, cheapest first.
        """
        quotation = await self._resolve(db, quotation)
        companies = await self.directory.active_companies(db, limit=self.max_auto_companies)
        return await self._generate(db, quotation, companies, actor_id, today)

    async def generate_quotes_for_selected_companies(
        self,
        db: AsyncSession,
        quotation: Quotation | int,
        company_ids: Sequence[int],
        actor_id: str | None = None,
        today: date | None = None,
    ) -> list[QuotationCompany]:
        """Like `generate_company_quotes`, restricted to the given active insurers."""
        quotation = await self._resolve(db, quotation)
        companies = await self.directory.active_companies_by_ids(db, company_ids)
        return await self._generate(db, quotation, companies, actor_id, today)

    async def _generate(
        self,
        db: AsyncSession,
        quotation: Quotation,
        companies: Sequence[InsuranceCompany],
        actor_id: str | None,
        today: date | None,
    ) -> list[QuotationCompany]:
        quotation_id = quotation.id

        try:
            quotation.company_quotes.clear()
            await db.flush()

            for company in companies:
                quotation.company_quotes.append(self._priced_quote(quotation, company, today))
                await db.flush()

            ranked = rank_quotes(quotation.company_quotes)
            await db.flush()
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Quote generation failed: quotation=%s", quotation_id)
            raise

        logger.info(
            "Generated %d quotes for quotation %s (recommended=%s)",
            len(ranked),
            quotation_id,
            ranked[0].quote_number if ranked else None,
        )
        await self._emit(EventType.QUOTATION_GENERATED, quotation, actor_id, source="auto")
        return ranked

    def _priced_quote(
        self,
        quotation: Quotation,
        company: InsuranceCompany,
        today: date | None,
    ) -> QuotationCompany:
        premium = calculate_company_premium(quotation, company.name, self.rating_table, today)
        return QuotationCompany(
            insurance_company_id=company.id,
            quote_number=self.numbers.generate(quotation.id, company.id, today),
            policy_type=quotation.policy_type,
            policy_tenure_years=quotation.policy_tenure_years,
            **{name: getattr(quotation, name) for name in IDV_FIELDS},
            total_idv=quotation.total_idv,
            basic_od_premium=premium.basic_od_premium,
            cng_lpg_premium=premium.cng_lpg_premium,
            total_od_premium=premium.total_od_premium,
            addon_covers_breakdown={name: str(amount) for name, amount in premium.addon_covers_breakdown.items()},
            total_addon_premium=premium.total_addon_premium,
            net_premium=premium.net_premium,
            sgst_amount=premium.sgst_amount,
            cgst_amount=premium.cgst_amount,
            total_premium=premium.total_premium,
            roadside_assistance=premium.roadside_assistance,
            final_premium=premium.final_premium,
            is_recommended=False,
            benefits=settings.rating.quote_benefits,
            exclusions=settings.rating.quote_exclusions,
        )

    # ── Manual quotes ────────────────────────────────────────────────

    async def _add_manual_quotes(
        self,
        db: AsyncSession,
        quotation: Quotation,
        companies: Sequence[CompanyQuoteInput],
    ) -> None:
        """Store caller-supplied quotes, dropping exact repeats, then rank."""
        seen: set[tuple[Any, ...]] = set()
        for payload in companies:
            key = payload.dedup_key()
            if key in seen:
                logger.info(
                    "Skipping repeated quote: quotation=%s company=%s",
                    quotation.id,
                    payload.insurance_company_id,
                )
                continue
            seen.add(key)

            quotation.company_quotes.append(self._manual_quote(quotation, payload))
            await db.flush()

        rank_quotes(quotation.company_quotes)
        await db.flush()

    def _manual_quote(self, quotation: Quotation, payload: CompanyQuoteInput) -> QuotationCompany:
        notes = {name: line.note for name, line in payload.addon_covers_breakdown.items() if line.note}
        return QuotationCompany(
            insurance_company_id=payload.insurance_company_id,
            quote_number=payload.quote_number or self.numbers.generate(quotation.id, payload.insurance_company_id),
            policy_type=payload.policy_type.value,
            policy_tenure_years=payload.policy_tenure_years,
            plan_name=payload.plan_name,
            **{name: getattr(payload, name) for name in IDV_FIELDS},
            total_idv=payload.total_idv,
            basic_od_premium=payload.basic_od_premium,
            tp_premium=payload.tp_premium,
            cng_lpg_premium=payload.cng_lpg_premium,
            total_od_premium=payload.total_od_premium,
            addon_covers_breakdown={
                name: str(line.price) for name, line in payload.addon_covers_breakdown.items()
            },
            addon_notes=notes or None,
            total_addon_premium=payload.total_addon_premium,
            net_premium=payload.net_premium,
            sgst_amount=payload.sgst_amount,
            cgst_amount=payload.cgst_amount,
            total_premium=payload.total_premium,
            roadside_assistance=payload.roadside_assistance,
            final_premium=payload.final_premium,
            is_recommended=payload.is_recommended,
            recommendation_note=payload.recommendation_note,
            ranking=payload.ranking,
            benefits=payload.benefits,
            exclusions=payload.exclusions,
        )

    # ── Read-side helpers ────────────────────────────────────────────

    async def get_quotation(self, db: AsyncSession, quotation_id: int) -> Quotation:
        return await self._get_or_raise(db, quotation_id)

    def best_savings(self, quotation: Quotation) -> Decimal:
        """Difference between the dearest and cheapest quote on a quotation."""
        return best_savings(quotation.company_quotes)

    def calculate_commission_breakdown(self, record: Any) -> CommissionBreakdown:
        """Commission split for a policy or quote (see calculators.commission)."""
        return commission_breakdown_for(record)

    # ── Internals ────────────────────────────────────────────────────

    async def _get_or_raise(self, db: AsyncSession, quotation_id: int) -> Quotation:
        quotation = await self.repository.get(db, quotation_id)
        if quotation is None:
            raise QuotationNotFoundError(quotation_id)
        return quotation

    async def _resolve(self, db: AsyncSession, quotation: Quotation | int) -> Quotation:
        if isinstance(quotation, Quotation):
            return quotation
        return await self._get_or_raise(db, quotation)

    async def _emit(
        self,
        event_type: EventType,
        quotation: Quotation,
        actor_id: str | None,
        **extra: Any,
    ) -> None:
        await emit(SystemEvent.for_quotation(event_type, quotation, actor_id, **extra))


# Module-level singleton
quotation_service = QuotationService()
