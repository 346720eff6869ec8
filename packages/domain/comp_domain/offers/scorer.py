"""Offer scorer.

Scores a fixed offer against the market: where its cash and equity fall
within the resolved benchmark's p25/p50/p75, how employee-friendly its
equity terms are, and a weighted overall verdict.

Unknown equity stays unknown. When ownership cannot be derived the equity
score is None, the overall score re-distributes the equity weight over
cash and terms, and the result carries a flag, missing data warnings and a
confidence note instead of a zero.
"""

from typing import Dict, List, Optional, Tuple

from ..benchmarks import BenchmarkResolver, estimate_percentile
from ..calc import (
    expected_value_band,
    project_exit_outcomes,
    vesting_timeline,
    weighted_outcome_value,
)
from ..config import EngineSettings, get_settings
from ..logging import get_logger
from ..schemas import (
    AccelerationProvision,
    BenchmarkRow,
    CashOffer,
    CashScore,
    ConfidenceLevel,
    EmployeeBackground,
    EmployeeRiskTolerance,
    EquityOffer,
    EquityScore,
    ExercisePeriod,
    FinancialSituation,
    OfferBenchmarks,
    OfferInput,
    OfferScoreCategory,
    OfferScoreResult,
    OverallScore,
    TermDetail,
    TermsScore,
    VestingSchedule,
    VestingTimelinePoint,
    WarningImportance,
    YesNoUnknown,
)
from .flags import generate_missing_data_warnings, generate_offer_flags

logger = get_logger(__name__)

# Market bonus assumed when comparing total cash to the median
MARKET_BONUS_RATE = 0.10
# Excess over p75 (as a share of p75) that adds 25 percentile points to cash
CASH_TAIL_SPAN = 0.3
LIMITED_DATA_CONFIDENCE = 0.7


# =============================================================================
# Cash
# =============================================================================

def score_cash(cash: CashOffer, background: EmployeeBackground, benchmark: BenchmarkRow) -> CashScore:
    """Percentile of the base salary, with comparisons to median and current pay.

    Example:
        p25/p50/p75 = 120k/150k/180k, base 150k -> score 50,
        base_salary_vs_median 0.0, total_cash_vs_median -9.1 with no bonus
    """
    salary = benchmark.salary
    base = cash.base_salary
    total_cash = base + cash.bonus_target

    percentile = estimate_percentile(base, salary, tail_span=salary.p75 * CASH_TAIL_SPAN)
    score = round(percentile)

    if score >= 75:
        verdict = "Excellent cash compensation - above 75th percentile"
    elif score >= 50:
        verdict = "Good cash compensation - at or above market median"
    elif score >= 25:
        verdict = "Below median cash - consider negotiating"
    else:
        verdict = "Significantly below market - strong case for negotiation"

    compared_to_current = None
    if background.current_base_salary:
        current = background.current_base_salary
        compared_to_current = round((base - current) / current * 100, 1)

    return CashScore(
        score=score,
        percentile=score,
        verdict=verdict,
        base_salary_vs_median=_vs_median(base, salary.p50),
        total_cash_vs_median=_vs_median(total_cash, salary.p50 * (1 + MARKET_BONUS_RATE)),
        compared_to_current_salary=compared_to_current,
    )


# =============================================================================
# Equity
# =============================================================================

def score_equity(equity: EquityOffer, benchmark: BenchmarkRow) -> EquityScore:
    """Percentile of the grant's ownership in basis points.

    Without ownership but with a paper value the score is an estimated 50;
    with neither, score and percentile are None and confidence is unknown.
    """
    ownership = equity.ownership_percent
    paper_value = _paper_value(equity, ownership)

    if ownership:
        bps = ownership * 100
        percentile = round(estimate_percentile(bps, benchmark.equity_bps))
        score: Optional[float] = percentile
        confidence = (
            ConfidenceLevel.KNOWN
            if equity.total_shares_confidence == ConfidenceLevel.KNOWN
            else ConfidenceLevel.ESTIMATED
        )
        vs_median = _vs_median(bps, benchmark.equity_bps.p50)
    elif paper_value:
        percentile, score, vs_median = None, 50, None
        confidence = ConfidenceLevel.ESTIMATED
    else:
        percentile, score, vs_median = None, None, None
        confidence = ConfidenceLevel.UNKNOWN

    if score is None:
        verdict = "Cannot fully evaluate equity without ownership percentage. Ask for shares outstanding."
    elif score >= 75:
        verdict = "Excellent equity grant - above 75th percentile for your role/stage"
    elif score >= 50:
        verdict = "Good equity grant - at or above market median"
    elif score >= 25:
        verdict = "Below median equity - consider negotiating for more"
    else:
        verdict = "Significantly below market equity - strong case for negotiation"

    return EquityScore(
        score=score,
        percentile=percentile,
        verdict=verdict,
        percent_of_company=ownership,
        current_paper_value=paper_value,
        value_confidence=confidence,
        equity_vs_median=vs_median,
    )


def _paper_value(equity: EquityOffer, ownership: Optional[float]) -> Optional[float]:
    if ownership and equity.latest_valuation:
        return ownership / 100 * equity.latest_valuation
    if equity.share_count and equity.latest_round_price_per_share:
        return equity.share_count * equity.latest_round_price_per_share
    return None


# =============================================================================
# Terms
# =============================================================================

EXERCISE_PERIOD_SCORES: Dict[ExercisePeriod, Tuple[float, str]] = {
    ExercisePeriod.DAYS_30: (10, "Very short - high risk of losing options"),
    ExercisePeriod.DAYS_60: (20, "Short - risky if you need to leave"),
    ExercisePeriod.DAYS_90: (30, "Standard but employee-unfriendly"),
    ExercisePeriod.DAYS_180: (50, "Better than standard"),
    ExercisePeriod.YEAR_1: (60, "Good - gives you time to plan"),
    ExercisePeriod.YEARS_5: (80, "Excellent - very employee-friendly"),
    ExercisePeriod.YEARS_10: (95, "Best possible - maximum flexibility"),
    ExercisePeriod.UNKNOWN: (35, "Unknown - ask your employer"),
}

ACCELERATION_SCORES: Dict[AccelerationProvision, Tuple[float, str]] = {
    AccelerationProvision.NONE: (20, "No protection if acquired and terminated"),
    AccelerationProvision.SINGLE_TRIGGER: (80, "Excellent - full acceleration on acquisition"),
    AccelerationProvision.DOUBLE_TRIGGER: (70, "Good - protects you if acquired and let go"),
    AccelerationProvision.PARTIAL_DOUBLE_TRIGGER: (55, "Partial protection on acquisition"),
    AccelerationProvision.UNKNOWN: (35, "Unknown - ask your employer"),
}

TERMS_WEIGHTS = {"vesting": 0.25, "exercise": 0.45, "acceleration": 0.30}


def score_terms(equity: EquityOffer) -> TermsScore:
    """Score vesting, exercise window and acceleration; exercise weighs most."""
    details: List[TermDetail] = []
    total, cliff = equity.vesting_total_months, equity.vesting_cliff_months
    schedule_text = f"{total} months with {cliff}-month cliff"

    vesting_score = 50.0
    if total < 48:
        vesting_score = 70.0
        details.append(TermDetail(
            term="Vesting Schedule", value=schedule_text,
            assessment="Better than standard - faster vesting", impact=20,
        ))
    elif total > 48:
        vesting_score = 30.0
        details.append(TermDetail(
            term="Vesting Schedule", value=schedule_text,
            assessment="Longer than standard - consider negotiating", impact=-20,
        ))
    elif cliff == 12:
        details.append(TermDetail(
            term="Vesting Schedule", value=schedule_text,
            assessment="Standard (4 years, 1-year cliff)", impact=0,
        ))

    if cliff > 12:
        vesting_score -= 15
        details.append(TermDetail(
            term="Cliff Period", value=f"{cliff} months",
            assessment="Longer than standard 1-year cliff", impact=-15,
        ))

    exercise_score, exercise_assessment = EXERCISE_PERIOD_SCORES[equity.exercise_period]
    details.append(TermDetail(
        term="Post-Termination Exercise Period",
        value=_label(equity.exercise_period),
        assessment=exercise_assessment,
        impact=exercise_score - 50,
    ))

    acceleration_score, acceleration_assessment = ACCELERATION_SCORES[equity.acceleration_provision]
    details.append(TermDetail(
        term="Acceleration Provision",
        value=_label(equity.acceleration_provision).title(),
        assessment=acceleration_assessment,
        impact=acceleration_score - 50,
    ))

    if equity.early_exercise_allowed == YesNoUnknown.YES:
        details.append(TermDetail(
            term="Early Exercise", value="Available",
            assessment="Positive - enables 83(b) election for tax benefits", impact=10,
        ))

    score = round(
        vesting_score * TERMS_WEIGHTS["vesting"]
        + exercise_score * TERMS_WEIGHTS["exercise"]
        + acceleration_score * TERMS_WEIGHTS["acceleration"]
    )

    if score >= 70:
        verdict = "Strong terms - employee-friendly provisions"
    elif score >= 50:
        verdict = "Standard terms - room for improvement on key provisions"
    elif score >= 30:
        verdict = "Below average terms - consider negotiating exercise period and acceleration"
    else:
        verdict = "Poor terms - strongly recommend negotiating improvements"

    return TermsScore(
        score=score,
        verdict=verdict,
        vesting_score=vesting_score,
        exercise_score=exercise_score,
        acceleration_score=acceleration_score,
        detail_breakdown=details,
    )


def _label(member) -> str:
    if member.value == "unknown":
        return "Unknown"
    return member.value.replace("-", " ")


# =============================================================================
# Overall
# =============================================================================

RISK_TOLERANCE_WEIGHTS: Dict[EmployeeRiskTolerance, Tuple[float, float, float]] = {
    EmployeeRiskTolerance.CONSERVATIVE: (0.50, 0.25, 0.25),
    EmployeeRiskTolerance.MODERATE: (0.35, 0.35, 0.30),
    EmployeeRiskTolerance.AGGRESSIVE: (0.25, 0.45, 0.30),
}

FINANCIAL_SITUATION_SHIFT: Dict[FinancialSituation, float] = {
    FinancialSituation.NEED_STABILITY: 0.10,
    FinancialSituation.BALANCED: 0.0,
    FinancialSituation.CAN_TAKE_RISK: -0.10,
}

CATEGORY_SUMMARIES: Dict[OfferScoreCategory, Tuple[str, str]] = {
    OfferScoreCategory.EXCELLENT: (
        "This is a strong offer above market rates",
        "Your offer is competitive across cash, equity, and terms. While there may still be "
        "room to negotiate specific items, the overall package is solid.",
    ),
    OfferScoreCategory.GOOD: (
        "This is a good offer at or near market rates",
        "Your offer is reasonable compared to market benchmarks. There are some areas where you "
        "could negotiate improvements, particularly in the terms.",
    ),
    OfferScoreCategory.FAIR: (
        "This offer has room for improvement",
        "Some components of your offer are below market rates. We recommend negotiating on the "
        "highlighted items before accepting.",
    ),
    OfferScoreCategory.BELOW_MARKET: (
        "This offer is below market on multiple dimensions",
        "Your offer is significantly below market in several areas. We strongly recommend "
        "negotiating improvements before accepting, or gathering competing offers.",
    ),
    OfferScoreCategory.CONCERNING: (
        "This offer needs significant improvement",
        "Multiple components of this offer are well below market rates. Consider whether this "
        "opportunity is worth pursuing without substantial improvements to the package.",
    ),
}


def offer_weights(background: EmployeeBackground, equity_known: bool = True) -> Tuple[float, float, float]:
    """(cash, equity, terms) weights for an employee.

    Risk tolerance sets the base weights; financial situation moves 0.10
    between cash and equity. An unknown equity score hands its weight to
    cash and terms in proportion to theirs.
    """
    cash, equity, terms = RISK_TOLERANCE_WEIGHTS[background.risk_tolerance]
    shift = FINANCIAL_SITUATION_SHIFT[background.financial_situation]
    cash, equity = cash + shift, equity - shift

    if not equity_known:
        cash, terms = cash / (cash + terms), terms / (cash + terms)
        equity = 0.0
    return cash, equity, terms


def categorize(score: float) -> OfferScoreCategory:
    if score >= 75:
        return OfferScoreCategory.EXCELLENT
    if score >= 60:
        return OfferScoreCategory.GOOD
    if score >= 45:
        return OfferScoreCategory.FAIR
    if score >= 30:
        return OfferScoreCategory.BELOW_MARKET
    return OfferScoreCategory.CONCERNING


def calculate_overall_score(
    cash_score: CashScore,
    equity_score: EquityScore,
    terms_score: TermsScore,
    background: EmployeeBackground,
) -> OverallScore:
    cash_w, equity_w, terms_w = offer_weights(background, equity_known=not equity_score.is_unknown)
    score = round(
        cash_score.score * cash_w
        + (equity_score.score or 0) * equity_w
        + terms_score.score * terms_w
    )
    category = categorize(score)
    headline, paragraph = CATEGORY_SUMMARIES[category]
    return OverallScore(score=score, category=category, headline=headline, paragraph=paragraph)


# =============================================================================
# Entry Point
# =============================================================================

def score_offer(
    offer: OfferInput,
    resolver: BenchmarkResolver,
    settings: Optional[EngineSettings] = None,
) -> OfferScoreResult:
    """Score an offer against the market.

    Args:
        offer: Offer details and employee background
        resolver: Resolver over the benchmark dataset
        settings: Engine settings (cached environment settings if None)

    Raises:
        NoMarketDataError: If the role has no benchmark data at any level
    """
    settings = settings or get_settings()
    background, company, equity = offer.background, offer.company, offer.equity

    benchmark = resolver.resolve_or_raise(
        background.job_family, background.job_level, company.stage, background.location
    )

    cash_score = score_cash(offer.cash, background, benchmark)
    equity_score = score_equity(equity, benchmark)
    terms_score = score_terms(equity)
    overall = calculate_overall_score(cash_score, equity_score, terms_score, background)

    notes: List[str] = []
    if benchmark.is_approximated:
        notes.append(f"Benchmark data: {benchmark.provenance_note}")
    if equity_score.is_unknown:
        notes.append("Equity score unavailable: ownership percentage could not be determined.")

    ownership = equity.ownership_percent
    valuation = equity.company_valuation
    band = None
    outcomes = []
    weighted_value = None
    if ownership and valuation:
        band = expected_value_band(
            ownership, valuation, resolver.exit_scenarios(company.stage), settings.discount_rate
        )
        outcomes = project_exit_outcomes(
            ownership, valuation, equity.exercise_cost, resolver.offer_outcome_templates(company.stage)
        )
        weighted_value = weighted_outcome_value(outcomes)
    else:
        notes.append("Expected value range unavailable: ownership percentage or company valuation is unknown.")

    warnings = generate_missing_data_warnings(equity)

    result = OfferScoreResult(
        cash_score=cash_score,
        equity_score=equity_score,
        terms_score=terms_score,
        overall_score=overall,
        benchmarks=OfferBenchmarks(
            salary=benchmark.salary,
            equity_bps=benchmark.equity_bps,
            equity_percent=benchmark.equity_bps.as_percent_fd(),
            source=benchmark.source,
            provenance_note=benchmark.provenance_note,
            confidence_note=(
                "Limited data for this specific combination"
                if benchmark.confidence < LIMITED_DATA_CONFIDENCE else None
            ),
        ),
        expected_value_band=band,
        exit_outcomes=outcomes,
        probability_weighted_value=weighted_value,
        vesting_timeline=_vesting_timeline(equity, valuation),
        flags=generate_offer_flags(offer, cash_score, equity_score),
        missing_data_warnings=warnings,
        confidence_notes=notes,
        analysis_confidence=analysis_confidence(benchmark, warnings),
    )

    logger.info(
        "offer_scored",
        job_family=background.job_family.value,
        job_level=background.job_level.value,
        stage=company.stage.value,
        overall_score=overall.score,
        category=overall.category.value,
        equity_known=not equity_score.is_unknown,
    )
    return result


def analysis_confidence(benchmark: BenchmarkRow, warnings) -> float:
    """Benchmark confidence in points, less 10 per critical and 5 per important gap."""
    penalty = sum(
        10 if w.importance == WarningImportance.CRITICAL
        else 5 if w.importance == WarningImportance.IMPORTANT
        else 0
        for w in warnings
    )
    return max(0, min(100, round(benchmark.confidence * 100 - penalty)))


def _vesting_timeline(equity: EquityOffer, valuation: Optional[float]) -> List[VestingTimelinePoint]:
    if not equity.share_count or equity.vesting_cliff_months > equity.vesting_total_months:
        return []

    price = equity.latest_round_price_per_share
    if not price and valuation and equity.total_shares_outstanding:
        price = valuation / equity.total_shares_outstanding

    schedule = VestingSchedule(
        total_months=equity.vesting_total_months,
        cliff_months=equity.vesting_cliff_months,
        frequency=equity.vesting_frequency,
    )
    return vesting_timeline(equity.share_count, schedule, value_per_unit=price)


def _vs_median(value: float, median: float) -> Optional[float]:
    """Percent above (+) or below (-) a median, one decimal; None without a median."""
    if median <= 0:
        return None
    return round((value / median - 1) * 100, 1)
