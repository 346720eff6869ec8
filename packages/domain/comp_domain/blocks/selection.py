"""Best-fit package selection."""

from typing import Callable, List, Optional

from .base import Block, BlockContext
from ..rationale import build_rationale
from ..schemas import (
    CompetingOffersLevel,
    CompPackage,
    PackageGenerationInput,
    PackageShape,
    PriorityLevel,
    RiskTolerance,
)

OverrideRule = Callable[[CompPackage, List[CompPackage], PackageGenerationInput], Optional[CompPackage]]


def _find(packages: List[CompPackage], shape: PackageShape) -> Optional[CompPackage]:
    return next((pkg for pkg in packages if pkg.shape == shape), None)


def prefer_closing_for_competition(current, packages, scenario):
    if scenario.candidate_context.competing_offers_level == CompetingOffersLevel.HIGH:
        return _find(packages, PackageShape.CANDIDATE_CLOSING)
    return None


def prefer_equity_for_cash_preservation(current, packages, scenario):
    if scenario.preferences.cash_preservation_priority != PriorityLevel.HIGH:
        return None
    equity_heavy = _find(packages, PackageShape.EQUITY_HEAVY)
    if equity_heavy is not None and equity_heavy.scores.cash_feasibility > current.scores.cash_feasibility:
        return equity_heavy
    return None


def prefer_cash_for_low_risk_tolerance(current, packages, scenario):
    if scenario.candidate_context.risk_tolerance == RiskTolerance.LOW:
        return _find(packages, PackageShape.CASH_HEAVY)
    return None


# Evaluated in order; a later match overwrites an earlier one
OVERRIDE_RULES: List[OverrideRule] = [
    prefer_closing_for_competition,
    prefer_equity_for_cash_preservation,
    prefer_cash_for_low_risk_tolerance,
]


def select_best_fit(packages: List[CompPackage], scenario: PackageGenerationInput) -> CompPackage:
    """Highest overall score, then each override rule in turn."""
    best = packages[0]
    for rule in OVERRIDE_RULES:
        override = rule(best, packages, scenario)
        if override is not None:
            best = override
    return best


class BestFitBlock(Block):
    """Picks the recommended package and writes its rationale.

    Inputs (from context):
        - scenario: PackageGenerationInput
        - scored_packages: List[CompPackage], best first

    Outputs (to context):
        - best_fit_package: Copy of the pick with ``is_recommended`` set and a
          rationale
        - packages: scored_packages with the pick replaced by that copy
    """

    def inputs(self) -> List[str]:
        return ["scenario", "scored_packages"]

    def outputs(self) -> List[str]:
        return ["best_fit_package", "packages"]

    def execute(self, context: BlockContext) -> None:
        scenario: PackageGenerationInput = context.get("scenario")
        packages: List[CompPackage] = context.get("scored_packages")

        pick = select_best_fit(packages, scenario)
        recommended = pick.model_copy(update={
            "is_recommended": True,
            "recommendation_rationale": build_rationale(
                pick, scenario.candidate_context, scenario.preferences
            ),
        })

        context.set("best_fit_package", recommended)
        context.set("packages", [recommended if pkg is pick else pkg for pkg in packages])
