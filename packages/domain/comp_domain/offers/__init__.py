"""Offer evaluation: score a received offer against the market."""

from .flags import generate_missing_data_warnings, generate_offer_flags
from .scorer import (
    calculate_overall_score,
    categorize,
    offer_weights,
    score_cash,
    score_equity,
    score_offer,
    score_terms,
)

__all__ = [
    "score_offer",
    "score_cash",
    "score_equity",
    "score_terms",
    "calculate_overall_score",
    "categorize",
    "offer_weights",
    "generate_offer_flags",
    "generate_missing_data_warnings",
]
