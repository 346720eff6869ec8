"""Closed enumerations for compensation domain categories.

Every category that drives a decision (job family, level, stage, equity
type, priorities, offer terms) is a ``str`` enum so that JSON input and the
benchmark dataset parse straight into members, and decision points can map
over the full member set.
"""

from enum import Enum
from typing import List


# =============================================================================
# Market Keys
# =============================================================================

class JobFamily(str, Enum):
    ENGINEERING = "engineering"
    PRODUCT = "product"
    DESIGN = "design"
    DATA_SCIENCE = "data-science"
    MARKETING = "marketing"
    SALES = "sales"
    OPERATIONS = "operations"
    FINANCE = "finance"
    LEGAL = "legal"
    HR_PEOPLE = "hr-people"
    CUSTOMER_SUCCESS = "customer-success"
    EXECUTIVE = "executive"


class JobLevel(str, Enum):
    """Seniority levels, declared in ladder order (most junior first)."""

    INTERN = "intern"
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    STAFF = "staff"
    PRINCIPAL = "principal"
    DIRECTOR = "director"
    VP = "vp"
    C_LEVEL = "c-level"

    @classmethod
    def ladder(cls) -> List["JobLevel"]:
        return list(cls)

    @property
    def rank(self) -> int:
        return JobLevel.ladder().index(self)

    @property
    def is_executive(self) -> bool:
        return self in (JobLevel.VP, JobLevel.C_LEVEL)


class CompanyStage(str, Enum):
    PRE_SEED = "pre-seed"
    SEED = "seed"
    SERIES_A = "series-a"
    SERIES_B = "series-b"
    SERIES_C_PLUS = "series-c+"

    @property
    def is_early(self) -> bool:
        return self in (CompanyStage.PRE_SEED, CompanyStage.SEED)


class GeoMarket(str, Enum):
    SV = "sv"
    NYC = "nyc"
    LA = "la"
    SEATTLE = "seattle"
    AUSTIN = "austin"
    BOSTON = "boston"
    DENVER = "denver"
    CHICAGO = "chicago"
    REMOTE_US = "remote-us"
    INTERNATIONAL = "international"


class HeadcountRange(str, Enum):
    TINY = "1-10"
    SMALL = "11-25"
    MEDIUM = "26-50"
    LARGE = "51-100"
    XLARGE = "101-250"
    ENTERPRISE = "250+"


class LocationType(str, Enum):
    ONSITE = "onsite"
    REMOTE = "remote"
    HYBRID = "hybrid"


# =============================================================================
# Package Terms
# =============================================================================

class EquityType(str, Enum):
    ISO = "iso"
    NSO = "nso"
    RSU = "rsu"
    RESTRICTED_STOCK = "restricted-stock"


class VestingFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    @property
    def period_months(self) -> int:
        return {
            VestingFrequency.MONTHLY: 1,
            VestingFrequency.QUARTERLY: 3,
            VestingFrequency.ANNUALLY: 12,
        }[self]


class VestingTemplate(str, Enum):
    STANDARD = "standard"
    EXECUTIVE = "executive"
    ADVISOR = "advisor"


class PackageShape(str, Enum):
    """Named package shapes produced by the optimizer."""

    CASH_HEAVY = "cash-heavy"
    BALANCED = "balanced"
    EQUITY_HEAVY = "equity-heavy"
    CANDIDATE_CLOSING = "candidate-closing"
    TOKEN_OVERLAY = "token-overlay"

    @property
    def display_name(self) -> str:
        return {
            PackageShape.CASH_HEAVY: "Cash-Heavy",
            PackageShape.BALANCED: "Balanced",
            PackageShape.EQUITY_HEAVY: "Equity-Heavy",
            PackageShape.CANDIDATE_CLOSING: "Candidate-Closing",
            PackageShape.TOKEN_OVERLAY: "Token Overlay",
        }[self]


# =============================================================================
# Hiring Context
# =============================================================================

class CompetingOffersLevel(str, Enum):
    NONE = "none"
    SOME = "some"
    HIGH = "high"


class RiskTolerance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StartUrgency(str, Enum):
    IMMEDIATE = "immediate"
    STANDARD = "standard"
    FLEXIBLE = "flexible"


class PriorityLevel(str, Enum):
    HIGH = "high"
    NORMAL = "normal"


class RiskFlagSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class RiskFlagType(str, Enum):
    VALUATION_409A = "409a-dependency"
    ISO_LIMIT = "iso-limit"
    ISO_NSO_SELECTION = "iso-nso-selection"
    ELECTION_83B = "83b-election"
    TOKEN_TAX_WITHHOLDING = "token-tax-withholding"
    TOKEN_TRANSFER_RESTRICTION = "token-transfer-restriction"
    POOL_EXHAUSTION = "pool-exhaustion"
    RUNWAY_IMPACT = "runway-impact"
    NON_US_JURISDICTION = "non-us-jurisdiction"
    BOARD_APPROVAL = "board-approval-required"


# =============================================================================
# Offer Evaluation
# =============================================================================

class EmploymentStatus(str, Enum):
    EMPLOYED = "employed"
    UNEMPLOYED = "unemployed"
    STUDENT = "student"
    CONTRACTOR = "contractor"


class FinancialSituation(str, Enum):
    NEED_STABILITY = "need-stability"
    BALANCED = "balanced"
    CAN_TAKE_RISK = "can-take-risk"


class EmployeeRiskTolerance(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class ExercisePeriod(str, Enum):
    DAYS_30 = "30-days"
    DAYS_60 = "60-days"
    DAYS_90 = "90-days"
    DAYS_180 = "180-days"
    YEAR_1 = "1-year"
    YEARS_5 = "5-years"
    YEARS_10 = "10-years"
    UNKNOWN = "unknown"


class AccelerationProvision(str, Enum):
    NONE = "none"
    SINGLE_TRIGGER = "single-trigger"
    DOUBLE_TRIGGER = "double-trigger"
    PARTIAL_DOUBLE_TRIGGER = "partial-double-trigger"
    UNKNOWN = "unknown"


class ConfidenceLevel(str, Enum):
    KNOWN = "known"
    ESTIMATED = "estimated"
    UNKNOWN = "unknown"


class YesNoUnknown(str, Enum):
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"


class OfferScoreCategory(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    BELOW_MARKET = "below-market"
    CONCERNING = "concerning"


class FlagSeverity(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    WARNING = "warning"
    CRITICAL = "critical"


class FlagCategory(str, Enum):
    CASH = "cash"
    EQUITY_VALUE = "equity-value"
    EQUITY_TERMS = "equity-terms"
    EXERCISE = "exercise"
    ACCELERATION = "acceleration"
    VESTING = "vesting"
    TAX = "tax"
    RISK = "risk"
    OPPORTUNITY = "opportunity"


class WarningImportance(str, Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    HELPFUL = "helpful"
