"""Offer evaluation models.

The offer scorer runs in the opposite direction to the optimizer: the offer
is fixed and the question is where it falls against the market. Inputs
carry per-field confidence so the scorer can tell "equity worth nothing"
apart from "equity value unknowable".
"""

from typing import List, Optional
from pydantic import Field

from .base import (
    DomainModel,
    MoneyAmount,
    Percentile,
    PercentFD,
    Score,
)
from .benchmarks import EquityPercentiles, SalaryPercentiles
from .enums import (
    AccelerationProvision,
    CompanyStage,
    ConfidenceLevel,
    EmployeeRiskTolerance,
    EmploymentStatus,
    EquityType,
    ExercisePeriod,
    FinancialSituation,
    FlagCategory,
    FlagSeverity,
    GeoMarket,
    HeadcountRange,
    JobFamily,
    JobLevel,
    OfferScoreCategory,
    VestingFrequency,
    WarningImportance,
    YesNoUnknown,
)
from .returns import ExitOutcome, ExpectedValueBand


# =============================================================================
# Offer Input
# =============================================================================

class EmployeeBackground(DomainModel):
    job_family: JobFamily
    job_level: JobLevel
    years_experience: Optional[float] = Field(default=None, ge=0)
    employment_status: EmploymentStatus = EmploymentStatus.EMPLOYED
    location: Optional[GeoMarket] = None  # resolver default if None
    risk_tolerance: EmployeeRiskTolerance = EmployeeRiskTolerance.MODERATE
    financial_situation: FinancialSituation = FinancialSituation.BALANCED
    current_base_salary: Optional[MoneyAmount] = Field(default=None, gt=0)
    current_total_comp: Optional[MoneyAmount] = Field(default=None, gt=0)


class CompanyDetails(DomainModel):
    company_name: Optional[str] = None
    stage: CompanyStage
    location: GeoMarket = GeoMarket.SV
    headcount: HeadcountRange = HeadcountRange.SMALL
    months_since_last_round: Optional[float] = Field(default=None, ge=0)
    is_public: bool = False


class CashOffer(DomainModel):
    base_salary: MoneyAmount = Field(gt=0)
    bonus_target_amount: Optional[MoneyAmount] = None
    bonus_target_percent: Optional[float] = Field(
        default=None,
        ge=0,
        description="Bonus as percent of base (10 = 10%)"
    )
    signing_bonus: Optional[MoneyAmount] = None
    relocation_bonus: Optional[MoneyAmount] = None

    @property
    def bonus_target(self) -> float:
        """Bonus in dollars: explicit amount first, then percent of base."""
        if self.bonus_target_amount:
            return self.bonus_target_amount
        return self.base_salary * (self.bonus_target_percent or 0) / 100


class EquityOffer(DomainModel):
    """Equity portion of an offer.

    Ownership comes from ``percent_of_company`` or from
    ``share_count / total_shares_outstanding``. If neither is available the
    equity percentile is unknown.
    """

    equity_type: EquityType = EquityType.ISO

    share_count: Optional[int] = Field(default=None, gt=0)
    percent_of_company: Optional[PercentFD] = None

    strike_price: Optional[MoneyAmount] = Field(default=None, gt=0)
    strike_price_confidence: ConfidenceLevel = ConfidenceLevel.UNKNOWN

    total_shares_outstanding: Optional[int] = Field(default=None, gt=0)
    total_shares_confidence: ConfidenceLevel = ConfidenceLevel.UNKNOWN

    latest_valuation: Optional[MoneyAmount] = Field(default=None, gt=0)
    latest_valuation_confidence: ConfidenceLevel = ConfidenceLevel.UNKNOWN

    latest_round_price_per_share: Optional[MoneyAmount] = Field(default=None, gt=0)
    latest_round_price_confidence: ConfidenceLevel = ConfidenceLevel.UNKNOWN

    option_pool_percent: Optional[PercentFD] = None

    vesting_total_months: int = Field(default=48, gt=0)
    vesting_cliff_months: int = Field(default=12, ge=0)
    vesting_frequency: VestingFrequency = VestingFrequency.MONTHLY

    exercise_period: ExercisePeriod = ExercisePeriod.UNKNOWN
    acceleration_provision: AccelerationProvision = AccelerationProvision.UNKNOWN
    early_exercise_allowed: YesNoUnknown = YesNoUnknown.UNKNOWN

    repurchase_right: YesNoUnknown = YesNoUnknown.UNKNOWN
    right_of_first_refusal: YesNoUnknown = YesNoUnknown.UNKNOWN

    @property
    def ownership_percent(self) -> Optional[float]:
        """Percent of the company granted, or None when it cannot be derived."""
        if self.percent_of_company:
            return self.percent_of_company
        if self.share_count and self.total_shares_outstanding:
            return self.share_count / self.total_shares_outstanding * 100
        return None

    @property
    def company_valuation(self) -> Optional[float]:
        """Latest valuation, or round price times shares outstanding."""
        if self.latest_valuation:
            return self.latest_valuation
        if self.latest_round_price_per_share and self.total_shares_outstanding:
            return self.latest_round_price_per_share * self.total_shares_outstanding
        return None

    @property
    def exercise_cost(self) -> float:
        if self.strike_price and self.share_count:
            return self.strike_price * self.share_count
        return 0.0


class OfferInput(DomainModel):
    background: EmployeeBackground
    company: CompanyDetails
    cash: CashOffer
    equity: EquityOffer = Field(default_factory=EquityOffer)


# =============================================================================
# Component Scores
# =============================================================================

class CashScore(DomainModel):
    score: Score
    percentile: Percentile
    verdict: str
    base_salary_vs_median: Optional[float] = Field(
        default=None,
        description="Percent above (+) or below (-) the p50 salary; None without a market median"
    )
    total_cash_vs_median: Optional[float] = Field(
        default=None,
        description="Percent vs p50 salary plus a 10% market bonus; None without a market median"
    )
    compared_to_current_salary: Optional[float] = None


class EquityScore(DomainModel):
    """Equity sub-score.

    ``score`` and ``percentile`` are None when ownership is unknown; the
    overall score then re-distributes the equity weight.
    """

    score: Optional[Score] = None
    percentile: Optional[Percentile] = None
    verdict: str
    percent_of_company: Optional[float] = None
    current_paper_value: Optional[MoneyAmount] = None
    value_confidence: ConfidenceLevel
    equity_vs_median: Optional[float] = None

    @property
    def is_unknown(self) -> bool:
        return self.score is None


class TermDetail(DomainModel):
    term: str
    value: str
    assessment: str
    impact: float


class TermsScore(DomainModel):
    score: Score
    verdict: str
    vesting_score: Score
    exercise_score: Score
    acceleration_score: Score
    detail_breakdown: List[TermDetail] = Field(default_factory=list)


class OverallScore(DomainModel):
    score: Score
    category: OfferScoreCategory
    headline: str
    paragraph: str


# =============================================================================
# Flags, Warnings and Timeline
# =============================================================================

class OfferFlag(DomainModel):
    id: str
    category: FlagCategory
    severity: FlagSeverity
    title: str
    description: str
    recommendation: Optional[str] = None
    educational_content: Optional[str] = None


class MissingDataWarning(DomainModel):
    field_name: str
    display_name: str
    impact: str
    how_to_get: str
    question_to_ask: str
    importance: WarningImportance


class VestingTimelinePoint(DomainModel):
    month: int
    vested_shares: int
    vested_percent: float
    cumulative_value: Optional[float] = None


class OfferBenchmarks(DomainModel):
    """Market context reported with an offer score."""

    salary: SalaryPercentiles
    equity_bps: EquityPercentiles
    equity_percent: EquityPercentiles
    source: str
    provenance_note: str
    confidence_note: Optional[str] = None


# =============================================================================
# Result
# =============================================================================

class OfferScoreResult(DomainModel):
    cash_score: CashScore
    equity_score: EquityScore
    terms_score: TermsScore
    overall_score: OverallScore

    benchmarks: OfferBenchmarks

    expected_value_band: Optional[ExpectedValueBand] = None
    exit_outcomes: List[ExitOutcome] = Field(default_factory=list)
    probability_weighted_value: Optional[float] = None

    vesting_timeline: List[VestingTimelinePoint] = Field(default_factory=list)

    flags: List[OfferFlag] = Field(default_factory=list)
    missing_data_warnings: List[MissingDataWarning] = Field(default_factory=list)

    confidence_notes: List[str] = Field(default_factory=list)
    analysis_confidence: Score

    def flags_by_severity(self, severity: FlagSeverity) -> List[OfferFlag]:
        return [f for f in self.flags if f.severity == severity]
