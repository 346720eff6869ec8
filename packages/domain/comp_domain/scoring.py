"""Package scoring.

Four axes, each on a 0-100 scale, plus a weighted overall score:

- market_competitiveness: ((salary / p50) + (bps / p50_bps)) / 2 * 50 + 25
- cash_feasibility: 100 within the cash budget; beyond it, 100 minus the
  overage ratio in points, floored at 0
- dilution_score: 100 - 2 * pool impact percent
- retention_score: 50, +20 for >= 48 month vesting, +15 for a >= 12 month
  cliff, +15 when market competitiveness is at least 60

Every score is clamped to [0, 100] and rounded to one decimal.
"""

from dataclasses import dataclass
from typing import Optional

from .schemas import BenchmarkRow, CompPackage, PackageScores, Preferences, PriorityLevel

BASE_WEIGHTS = {
    "market": 0.30,
    "cash": 0.20,
    "dilution": 0.15,
    "retention": 0.20,
}
HIGH_PRIORITY_WEIGHT = 0.35


@dataclass(frozen=True)
class ScoreWeights:
    market: float
    cash: float
    dilution: float
    retention: float

    @classmethod
    def from_preferences(cls, preferences: Preferences) -> "ScoreWeights":
        """Base weights, raised for high priorities, normalized to sum to 1."""
        raw = dict(BASE_WEIGHTS)
        if preferences.cash_preservation_priority == PriorityLevel.HIGH:
            raw["cash"] = HIGH_PRIORITY_WEIGHT
        if preferences.dilution_control_priority == PriorityLevel.HIGH:
            raw["dilution"] = HIGH_PRIORITY_WEIGHT
        if preferences.retention_priority == PriorityLevel.HIGH:
            raw["retention"] = HIGH_PRIORITY_WEIGHT
        total = sum(raw.values())
        return cls(**{key: value / total for key, value in raw.items()})


def clamp_score(value: float) -> float:
    return round(max(0.0, min(100.0, value)), 1)


def market_competitiveness(base_salary: float, equity_bps: float, benchmark: BenchmarkRow) -> float:
    salary_ratio = _ratio(base_salary, benchmark.salary.p50)
    equity_ratio = _ratio(equity_bps, benchmark.equity_bps.p50)
    return clamp_score((salary_ratio + equity_ratio) / 2 * 50 + 25)


def cash_feasibility(employer_cost_annual: float, budget_ceiling: Optional[float]) -> float:
    """Scenario: ceiling 200,000 and cost 250,000 gives 75."""
    if budget_ceiling is None:
        return 100.0
    if budget_ceiling <= 0:
        return 0.0 if employer_cost_annual > 0 else 100.0
    ratio = employer_cost_annual / budget_ceiling
    if ratio <= 1:
        return 100.0
    return clamp_score(100 - (ratio - 1) * 100)


def dilution_score(pool_impact_percent: float) -> float:
    return clamp_score(100 - 2 * pool_impact_percent)


def retention_score(package: CompPackage, market_score: float) -> float:
    score = 50
    if package.vesting_schedule.total_months >= 48:
        score += 20
    if package.vesting_schedule.cliff_months >= 12:
        score += 15
    if market_score >= 60:
        score += 15
    return clamp_score(score)


def score_package(
    package: CompPackage,
    benchmark: BenchmarkRow,
    preferences: Preferences,
    budget_ceiling: Optional[float],
) -> PackageScores:
    """Score a built package on all axes."""
    market = market_competitiveness(package.base_salary, package.equity_bps, benchmark)
    cash = cash_feasibility(package.employer_cost_annual, budget_ceiling)
    dilution = dilution_score(package.pool_impact_percent)
    retention = retention_score(package, market)

    weights = ScoreWeights.from_preferences(preferences)
    overall = (
        market * weights.market
        + cash * weights.cash
        + dilution * weights.dilution
        + retention * weights.retention
    )

    return PackageScores(
        market_competitiveness=market,
        cash_feasibility=cash,
        dilution_score=dilution,
        retention_score=retention,
        overall_score=clamp_score(overall),
    )


def _ratio(value: float, median: float) -> float:
    # A zero median carries no signal; treat the value as at-market
    return value / median if median > 0 else 1.0
