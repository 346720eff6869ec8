"""Package shapes and their target percentiles.

Each shape is a (salary percentile, equity percentile, bonus multiplier)
triple. Cash-Heavy, Balanced and Equity-Heavy are always generated;
Candidate-Closing only when the candidate has competing offers; Token
Overlay only when a token program is enabled with a known supply.

Caller priorities nudge every shape's percentiles in a fixed order, with a
clamp to [20, 85] after each nudge.
"""

from dataclasses import dataclass, replace
from typing import List, Optional

from .schemas import (
    CandidateContext,
    CompanyStage,
    CompetingOffersLevel,
    EquityType,
    JobLevel,
    PackageShape,
    Preferences,
    PriorityLevel,
    TokenProgram,
)

PERCENTILE_FLOOR = 20
PERCENTILE_CEILING = 85


@dataclass(frozen=True)
class ShapeConfig:
    shape: PackageShape
    salary_percentile: float
    equity_percentile: float
    bonus_multiplier: float
    token_overlay: bool = False

    @property
    def name(self) -> str:
        return self.shape.display_name


CASH_HEAVY = ShapeConfig(PackageShape.CASH_HEAVY, 70, 30, 1.15)
BALANCED = ShapeConfig(PackageShape.BALANCED, 50, 50, 1.0)
EQUITY_HEAVY = ShapeConfig(PackageShape.EQUITY_HEAVY, 35, 75, 0.9)
CANDIDATE_CLOSING = ShapeConfig(PackageShape.CANDIDATE_CLOSING, 65, 70, 1.2)
TOKEN_OVERLAY = ShapeConfig(PackageShape.TOKEN_OVERLAY, 45, 40, 0.95, token_overlay=True)


def build_shape_configs(
    candidate: CandidateContext,
    preferences: Preferences,
    token_program: Optional[TokenProgram] = None,
) -> List[ShapeConfig]:
    """Shapes applicable to a scenario, nudged by the caller's priorities."""
    configs = [CASH_HEAVY, BALANCED, EQUITY_HEAVY]

    if candidate.competing_offers_level != CompetingOffersLevel.NONE:
        configs.append(CANDIDATE_CLOSING)

    if token_program is not None and token_program.can_overlay:
        configs.append(TOKEN_OVERLAY)

    return [apply_priority_nudges(config, preferences) for config in configs]


def apply_priority_nudges(config: ShapeConfig, preferences: Preferences) -> ShapeConfig:
    """Shift a shape's percentiles by priority, re-clamping after each shift.

    Order: cash preservation (salary -15, equity +10), dilution control
    (equity -15, salary +10), retention (both +10).
    """
    salary = config.salary_percentile
    equity = config.equity_percentile

    if preferences.cash_preservation_priority == PriorityLevel.HIGH:
        salary, equity = _clamp(salary - 15), _clamp(equity + 10)

    if preferences.dilution_control_priority == PriorityLevel.HIGH:
        salary, equity = _clamp(salary + 10), _clamp(equity - 15)

    if preferences.retention_priority == PriorityLevel.HIGH:
        salary, equity = _clamp(salary + 10), _clamp(equity + 10)

    return replace(config, salary_percentile=salary, equity_percentile=equity)


def _clamp(percentile: float) -> float:
    return max(PERCENTILE_FLOOR, min(PERCENTILE_CEILING, percentile))


def determine_equity_type(stage: CompanyStage, level: JobLevel) -> EquityType:
    """Grant instrument by stage.

    Pre-seed and seed grant ISOs (restricted stock for C-level hires), Series
    C+ grants RSUs, Series A and B grant ISOs.
    """
    if stage.is_early:
        return EquityType.RESTRICTED_STOCK if level == JobLevel.C_LEVEL else EquityType.ISO
    if stage == CompanyStage.SERIES_C_PLUS:
        return EquityType.RSU
    return EquityType.ISO
