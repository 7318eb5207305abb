"""Quotation orchestration — persistence, quote numbering, and the service."""

from motorquote.quotation.numbering import QuoteNumberGenerator, quote_numbers
from motorquote.quotation.repository import CompanyDirectory, QuotationRepository
from motorquote.quotation.service import QuotationNotFoundError, QuotationService, quotation_service

__all__ = [
    "QuotationService",
    "QuotationNotFoundError",
    "quotation_service",
    "QuotationRepository",
    "CompanyDirectory",
    "QuoteNumberGenerator",
    "quote_numbers",
]
