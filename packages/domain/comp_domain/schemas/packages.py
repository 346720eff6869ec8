"""Compensation package models - the output side of the package optimizer."""

from typing import List, Optional
import pandas as pd
from pydantic import Field

from .base import (
    DomainModel,
    BasisPoints,
    MoneyAmount,
    PercentFD,
    Score,
    ShareCount,
)
from .benchmarks import EquityPercentiles, SalaryPercentiles
from .cap_table import VestingSchedule
from .enums import EquityType, PackageShape, RiskFlagSeverity, RiskFlagType
from .returns import ExpectedValueBand


# =============================================================================
# Scores
# =============================================================================

class PackageScores(DomainModel):
    """Four-axis package score plus the weighted overall score, all in [0, 100]."""

    market_competitiveness: Score = 0.0
    cash_feasibility: Score = 0.0
    dilution_score: Score = 0.0
    retention_score: Score = 0.0
    overall_score: Score = 0.0


# =============================================================================
# Package
# =============================================================================

class CompPackage(DomainModel):
    """One candidate compensation package.

    Built unscored by the build block, then replaced by a scored copy. The
    recommended package is a further copy with ``is_recommended`` set.
    """

    name: str = Field(description="Display name, e.g. 'Cash-Heavy'")
    shape: PackageShape

    # Cash
    base_salary: MoneyAmount
    bonus_target: MoneyAmount = Field(
        default=0,
        description="Target annual bonus in dollars"
    )

    # Equity
    equity_type: EquityType
    equity_bps: BasisPoints
    equity_percent_fd: PercentFD
    equity_option_count: ShareCount
    vesting_schedule: VestingSchedule
    strike_price: Optional[MoneyAmount] = None

    # Tokens
    token_amount: Optional[int] = Field(default=None, ge=0)
    token_percent_supply: Optional[PercentFD] = None
    token_vesting_schedule: Optional[VestingSchedule] = None

    # Computed metrics
    employer_cost_annual: MoneyAmount = Field(
        description="Salary plus bonus, loaded with employer taxes and benefits"
    )
    burn_delta_monthly: MoneyAmount
    pool_impact_percent: float = Field(
        ge=0,
        description="Share of the remaining option pool this grant consumes"
    )
    pool_remaining_after: ShareCount

    current_equity_value: Optional[MoneyAmount] = None
    expected_value_band: Optional[ExpectedValueBand] = None

    scores: PackageScores = Field(default_factory=PackageScores)

    is_recommended: bool = False
    recommendation_rationale: Optional[str] = None

    @property
    def total_cash(self) -> float:
        return self.base_salary + self.bonus_target


# =============================================================================
# Risk Flags
# =============================================================================

class RiskFlag(DomainModel):
    """Legal, tax or financial caveat attached to the recommended package."""

    type: RiskFlagType
    severity: RiskFlagSeverity
    title: str
    description: str
    action_required: Optional[str] = None


# =============================================================================
# Result
# =============================================================================

class MarketBenchmarks(DomainModel):
    """Market context reported alongside the packages.

    Equity percentiles are expressed in percent of FD (bps / 100).
    """

    salary_percentiles: SalaryPercentiles
    equity_percentiles: EquityPercentiles
    source: str
    provenance_note: str


class PackageGenerationResult(DomainModel):
    """Output of ``generate_packages``.

    ``comparison`` is a presentation table (one row per package, rounded
    dollar figures) and is excluded from serialization.
    """

    packages: List[CompPackage] = Field(
        description="Scored packages sorted by overall score, highest first"
    )
    best_fit_package: CompPackage
    market_benchmarks: MarketBenchmarks

    confidence_score: Score
    confidence_notes: List[str] = Field(default_factory=list)

    risk_flags: List[RiskFlag] = Field(default_factory=list)

    comparison: Optional[pd.DataFrame] = Field(default=None, exclude=True)

    def package(self, shape: PackageShape) -> Optional[CompPackage]:
        """Package for a shape, or None if that shape was not generated."""
        for pkg in self.packages:
            if pkg.shape == shape:
                return pkg
        return None
