"""Compensation domain schemas.

This package contains all Pydantic models for the compensation domain layer:
- Base types and conventions
- Closed enumerations (job family, level, stage, terms)
- Benchmark dataset and resolved benchmark rows
- Cap table snapshot and vesting schedule
- Exit scenarios and expected value bands
- Hiring scenario input and package output
- Offer evaluation input and result
- Workbook configuration

Usage:
    from comp_domain.schemas import (
        PackageGenerationInput, CompanyContext, RoleProfile,
        CompPackage, PackageGenerationResult, OfferInput
    )
"""

# Base types
from .base import (
    DomainModel,
    MoneyAmount,
    ShareCount,
    BasisPoints,
    PercentFD,
    Percentile,
    Score,
    Confidence,
    Rate,
    Months,
)

# Enumerations
from .enums import (
    JobFamily,
    JobLevel,
    CompanyStage,
    GeoMarket,
    HeadcountRange,
    LocationType,
    EquityType,
    VestingFrequency,
    VestingTemplate,
    PackageShape,
    CompetingOffersLevel,
    RiskTolerance,
    StartUrgency,
    PriorityLevel,
    RiskFlagSeverity,
    RiskFlagType,
    EmploymentStatus,
    FinancialSituation,
    EmployeeRiskTolerance,
    ExercisePeriod,
    AccelerationProvision,
    ConfidenceLevel,
    YesNoUnknown,
    OfferScoreCategory,
    FlagSeverity,
    FlagCategory,
    WarningImportance,
)

# Cap table and vesting
from .cap_table import CapTableSnapshot, VestingSchedule

# Exit scenarios
from .returns import (
    ExitScenarioAssumptions,
    ExitScenarioSet,
    ExpectedValueBand,
    OfferOutcomeTemplate,
    ExitOutcome,
)

# Benchmarks
from .benchmarks import (
    PercentileBands,
    SalaryPercentiles,
    EquityPercentiles,
    BenchmarkEntry,
    BenchmarkRow,
    FDRange,
    BenchmarkDataset,
)

# Hiring scenario
from .scenario import (
    CompanyContext,
    RoleProfile,
    CandidateContext,
    TokenProgram,
    Constraints,
    Preferences,
    PackageGenerationInput,
)

# Packages
from .packages import (
    PackageScores,
    CompPackage,
    RiskFlag,
    MarketBenchmarks,
    PackageGenerationResult,
)

# Offers
from .offers import (
    EmployeeBackground,
    CompanyDetails,
    CashOffer,
    EquityOffer,
    OfferInput,
    CashScore,
    EquityScore,
    TermDetail,
    TermsScore,
    OverallScore,
    OfferFlag,
    MissingDataWarning,
    VestingTimelinePoint,
    OfferBenchmarks,
    OfferScoreResult,
)

# Workbook
from .workbook import WorkbookCFG

__all__ = [
    # Base
    "DomainModel",
    "MoneyAmount",
    "ShareCount",
    "BasisPoints",
    "PercentFD",
    "Percentile",
    "Score",
    "Confidence",
    "Rate",
    "Months",
    # Enums
    "JobFamily",
    "JobLevel",
    "CompanyStage",
    "GeoMarket",
    "HeadcountRange",
    "LocationType",
    "EquityType",
    "VestingFrequency",
    "VestingTemplate",
    "PackageShape",
    "CompetingOffersLevel",
    "RiskTolerance",
    "StartUrgency",
    "PriorityLevel",
    "RiskFlagSeverity",
    "RiskFlagType",
    "EmploymentStatus",
    "FinancialSituation",
    "EmployeeRiskTolerance",
    "ExercisePeriod",
    "AccelerationProvision",
    "ConfidenceLevel",
    "YesNoUnknown",
    "OfferScoreCategory",
    "FlagSeverity",
    "FlagCategory",
    "WarningImportance",
    # Cap table
    "CapTableSnapshot",
    "VestingSchedule",
    # Exit scenarios
    "ExitScenarioAssumptions",
    "ExitScenarioSet",
    "ExpectedValueBand",
    "OfferOutcomeTemplate",
    "ExitOutcome",
    # Benchmarks
    "PercentileBands",
    "SalaryPercentiles",
    "EquityPercentiles",
    "BenchmarkEntry",
    "BenchmarkRow",
    "FDRange",
    "BenchmarkDataset",
    # Scenario
    "CompanyContext",
    "RoleProfile",
    "CandidateContext",
    "TokenProgram",
    "Constraints",
    "Preferences",
    "PackageGenerationInput",
    # Packages
    "PackageScores",
    "CompPackage",
    "RiskFlag",
    "MarketBenchmarks",
    "PackageGenerationResult",
    # Offers
    "EmployeeBackground",
    "CompanyDetails",
    "CashOffer",
    "EquityOffer",
    "OfferInput",
    "CashScore",
    "EquityScore",
    "TermDetail",
    "TermsScore",
    "OverallScore",
    "OfferFlag",
    "MissingDataWarning",
    "VestingTimelinePoint",
    "OfferBenchmarks",
    "OfferScoreResult",
    # Workbook
    "WorkbookCFG",
]
