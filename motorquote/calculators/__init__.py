"""Calculators — motor premium, quote ranking, commission split, policy estimate."""

from motorquote.calculators.commission import (
    calculate_commission_breakdown,
    calculate_policy_commission,
    commission_breakdown_for,
)
from motorquote.calculators.policy import estimate_policy_premium
from motorquote.calculators.premium import (
    calculate_addon_premiums,
    calculate_base_premium,
    calculate_company_premium,
)
from motorquote.calculators.ranking import best_savings, rank_quotes
from motorquote.calculators.rating import RatingTable, default_rating_table

__all__ = [
    "RatingTable",
    "default_rating_table",
    "calculate_base_premium",
    "calculate_addon_premiums",
    "calculate_company_premium",
    "rank_quotes",
    "best_savings",
    "calculate_commission_breakdown",
    "commission_breakdown_for",
    "calculate_policy_commission",
    "estimate_policy_premium",
]
