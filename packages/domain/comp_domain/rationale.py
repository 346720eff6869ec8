"""Recommendation rationale as a rule table.

Each rule is a (condition, sentence) pair. The rationale is the sentences
of every matching rule, in table order, joined into one paragraph. No free
text is generated.
"""

from typing import Callable, List, Tuple

from .schemas import (
    CandidateContext,
    CompetingOffersLevel,
    CompPackage,
    PackageShape,
    Preferences,
    PriorityLevel,
)

RationaleRule = Tuple[Callable[[CompPackage, CandidateContext, Preferences], bool], str]


def _shape_is(shape: PackageShape):
    return lambda pkg, candidate, prefs: pkg.shape == shape


RATIONALE_RULES: List[RationaleRule] = [
    (
        _shape_is(PackageShape.BALANCED),
        "Offers a balanced mix of competitive cash compensation and meaningful equity upside",
    ),
    (
        _shape_is(PackageShape.CASH_HEAVY),
        "Prioritizes immediate cash compensation for candidates who value stability",
    ),
    (
        _shape_is(PackageShape.EQUITY_HEAVY),
        "Maximizes equity participation for candidates who believe in the company's growth potential",
    ),
    (
        _shape_is(PackageShape.CANDIDATE_CLOSING),
        "Designed to be competitive against external offers while maintaining internal equity",
    ),
    (
        _shape_is(PackageShape.TOKEN_OVERLAY),
        "Includes token compensation to align with the company's token-based structure",
    ),
    (
        lambda pkg, candidate, prefs: candidate.competing_offers_level == CompetingOffersLevel.HIGH,
        "Structured to compete effectively against other offers",
    ),
    (
        lambda pkg, candidate, prefs: prefs.retention_priority == PriorityLevel.HIGH,
        "Vesting structure designed for long-term retention",
    ),
    (
        lambda pkg, candidate, prefs: prefs.cash_preservation_priority == PriorityLevel.HIGH,
        "Keeps cash burn in check by shifting value toward equity",
    ),
    (
        lambda pkg, candidate, prefs: pkg.scores.market_competitiveness >= 70,
        "Above-market positioning to attract top talent",
    ),
]


def build_rationale(
    package: CompPackage,
    candidate: CandidateContext,
    preferences: Preferences,
) -> str:
    sentences = [sentence for condition, sentence in RATIONALE_RULES if condition(package, candidate, preferences)]
    return ". ".join(sentences) + "."
