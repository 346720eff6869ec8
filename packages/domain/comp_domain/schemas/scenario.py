"""Hiring scenario models - the input side of the package optimizer.

A scenario is assembled from the company's context, the role being hired,
what is known about the candidate, an optional token program, hard
constraints and soft preferences. Everything except the role key is
optional or defaulted; missing data is estimated downstream and reported in
the result's confidence notes.
"""

from typing import Optional
from pydantic import Field, model_validator

from .base import DomainModel, MoneyAmount, PercentFD
from .cap_table import CapTableSnapshot, VestingSchedule
from .enums import (
    CompanyStage,
    CompetingOffersLevel,
    GeoMarket,
    HeadcountRange,
    JobFamily,
    JobLevel,
    LocationType,
    PriorityLevel,
    RiskTolerance,
    StartUrgency,
)


# =============================================================================
# Company and Role
# =============================================================================

class CompanyContext(DomainModel):
    """The hiring company."""

    stage: CompanyStage

    geo_market: GeoMarket = Field(
        default=GeoMarket.SV,
        description="Company's primary market; drives employer load rate"
    )

    headcount_range: HeadcountRange = HeadcountRange.TINY

    runway_months: Optional[float] = Field(
        default=None,
        gt=0,
        description="Current runway in months"
    )

    cash_budget_ceiling: Optional[MoneyAmount] = Field(
        default=None,
        description="Maximum annual employer cost for this role"
    )

    cap_table: Optional[CapTableSnapshot] = Field(
        default=None,
        description="Current cap table; estimated from stage defaults when omitted"
    )


class RoleProfile(DomainModel):
    """The role being hired. (job_family, job_level) is the benchmark key."""

    job_family: JobFamily
    job_level: JobLevel
    title: str = ""
    department: Optional[str] = None
    location_type: LocationType = LocationType.ONSITE
    geo: Optional[GeoMarket] = Field(
        default=None,
        description="Where the hire is based; drives the salary multiplier (resolver default if None)"
    )


class CandidateContext(DomainModel):
    competing_offers_level: CompetingOffersLevel = CompetingOffersLevel.NONE
    risk_tolerance: RiskTolerance = RiskTolerance.MEDIUM
    start_urgency: StartUrgency = StartUrgency.STANDARD


# =============================================================================
# Token Program
# =============================================================================

class TokenProgram(DomainModel):
    """Optional token incentive program.

    The Token Overlay package is only generated when the program is enabled
    and has a total supply. Token amounts are only sized when the remaining
    pool is also known.
    """

    enabled: bool = False
    total_supply: Optional[float] = Field(default=None, gt=0)
    incentive_pool_size: Optional[float] = Field(default=None, gt=0)
    remaining_pool: Optional[float] = Field(default=None, ge=0)
    token_vesting_default: Optional[VestingSchedule] = None
    lockup_months: Optional[int] = Field(default=None, ge=0)
    current_token_price: Optional[MoneyAmount] = None

    @property
    def can_overlay(self) -> bool:
        return self.enabled and bool(self.total_supply)


# =============================================================================
# Constraints and Preferences
# =============================================================================

class Constraints(DomainModel):
    """Hard limits on the offer."""

    cash_budget_ceiling: Optional[MoneyAmount] = Field(
        default=None,
        description="Maximum annual employer cost; overrides the company-level ceiling"
    )
    equity_pool_available: Optional[int] = Field(default=None, ge=0)
    max_equity_percent: Optional[PercentFD] = None
    token_pool_available: Optional[float] = Field(default=None, ge=0)


class Preferences(DomainModel):
    retention_priority: PriorityLevel = PriorityLevel.NORMAL
    cash_preservation_priority: PriorityLevel = PriorityLevel.NORMAL
    dilution_control_priority: PriorityLevel = PriorityLevel.NORMAL


# =============================================================================
# Optimizer Input
# =============================================================================

class PackageGenerationInput(DomainModel):
    """Complete hiring scenario passed to ``generate_packages``.

    Example:
        PackageGenerationInput(
            company_context=CompanyContext(stage=CompanyStage.SERIES_A),
            role_profile=RoleProfile(
                job_family=JobFamily.ENGINEERING,
                job_level=JobLevel.SENIOR,
            ),
        )
    """

    company_context: CompanyContext
    role_profile: RoleProfile
    candidate_context: CandidateContext = Field(default_factory=CandidateContext)
    token_program: Optional[TokenProgram] = None
    constraints: Constraints = Field(default_factory=Constraints)
    preferences: Preferences = Field(default_factory=Preferences)

    @model_validator(mode="after")
    def validate_token_program(self):
        tp = self.token_program
        if tp is not None and tp.remaining_pool is not None and tp.incentive_pool_size is not None:
            if tp.remaining_pool > tp.incentive_pool_size:
                raise ValueError(
                    f"token remaining_pool ({tp.remaining_pool}) exceeds "
                    f"incentive_pool_size ({tp.incentive_pool_size})"
                )
        return self

    @property
    def cash_budget_ceiling(self) -> Optional[float]:
        """Effective cash ceiling: explicit constraint first, then company context."""
        if self.constraints.cash_budget_ceiling is not None:
            return self.constraints.cash_budget_ceiling
        return self.company_context.cash_budget_ceiling
