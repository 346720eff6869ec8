"""Exit scenario and expected value models.

Exit scenarios describe how a grant might pay out: the company exits at a
multiple of its last valuation, the grant is diluted by future rounds, and
the payout arrives some years from now. Each stage carries a low/base/high
set, plus the four-outcome templates used by the offer evaluator.
"""

from typing import Optional
from pydantic import Field, field_validator

from .base import DomainModel, MoneyAmount


# =============================================================================
# Scenario Assumptions
# =============================================================================

class ExitScenarioAssumptions(DomainModel):
    """One exit scenario used for expected value modeling.

    Example:
        Base case at Series A:
            exit_multiple: 3.0 (exit at 3x last round valuation)
            dilution_factor: 0.65 (grant keeps 65% of its ownership)
            years_to_liquidity: 5
            probability_weight: 0.4
    """

    exit_multiple: float = Field(
        ge=0,
        description="Exit valuation as a multiple of last round valuation"
    )

    dilution_factor: float = Field(
        ge=0,
        le=1,
        description="Share of ownership retained after future rounds (1 = no dilution)"
    )

    years_to_liquidity: float = Field(
        ge=0,
        description="Years until a liquidity event"
    )

    probability_weight: float = Field(
        gt=0,
        description="Relative probability of this scenario (positive, need not sum to 1)"
    )


class ExitScenarioSet(DomainModel):
    """Low/base/high scenario triple for a company stage."""

    low: ExitScenarioAssumptions
    base: ExitScenarioAssumptions
    high: ExitScenarioAssumptions

    def items(self):
        """Scenarios in (label, assumptions) pairs, low to high."""
        return [("low", self.low), ("base", self.base), ("high", self.high)]

    @property
    def total_weight(self) -> float:
        return self.low.probability_weight + self.base.probability_weight + self.high.probability_weight


class ExpectedValueBand(DomainModel):
    """Discounted equity value under each exit scenario.

    ``low``/``base``/``high`` are the discounted per-scenario values (not
    further probability-weighted). ``expected_value`` is the single
    probability-weighted point estimate used for ranking.
    """

    low: float = Field(ge=0)
    base: float = Field(ge=0)
    high: float = Field(ge=0)
    expected_value: float = Field(ge=0)
    assumptions: ExitScenarioSet


# =============================================================================
# Offer Outcome Templates
# =============================================================================

class OfferOutcomeTemplate(DomainModel):
    """Template for one outcome in the offer evaluator's exit table."""

    name: str
    description: str

    exit_multiple: float = Field(ge=0)

    dilution_percent: float = Field(
        ge=0,
        le=100,
        description="Ownership lost to future rounds, in percent"
    )

    years_to_exit: float = Field(ge=0)

    probability: float = Field(ge=0, le=1)


class ExitOutcome(DomainModel):
    """Projected payout of an offered grant under one outcome template."""

    name: str
    description: str
    exit_multiple: float
    dilution_percent: float
    years_to_exit: float
    probability: float
    gross_equity_value: MoneyAmount
    exercise_cost: MoneyAmount
    net_equity_value: MoneyAmount
    annualized_return: Optional[float] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Outcome name cannot be blank")
        return v
