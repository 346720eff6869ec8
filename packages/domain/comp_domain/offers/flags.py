"""Offer flags and missing data warnings.

Flags call out notable parts of a scored offer, good and bad. Missing data
warnings list the inputs the employee should ask for, with the question to
ask.
"""

from typing import List

from ..schemas import (
    AccelerationProvision,
    CashScore,
    CompanyStage,
    EquityOffer,
    EquityScore,
    EquityType,
    ExercisePeriod,
    FinancialSituation,
    FlagCategory,
    FlagSeverity,
    ConfidenceLevel,
    MissingDataWarning,
    OfferFlag,
    OfferInput,
    WarningImportance,
    YesNoUnknown,
)

AMT_SPREAD_THRESHOLD = 100_000
MEANINGFUL_EARLY_OWNERSHIP = 0.25


def generate_offer_flags(offer: OfferInput, cash_score: CashScore, equity_score: EquityScore) -> List[OfferFlag]:
    flags: List[OfferFlag] = []
    flags.extend(_cash_flags(cash_score))
    flags.extend(_equity_value_flags(equity_score))
    flags.extend(_exercise_flags(offer.equity))
    flags.extend(_acceleration_flags(offer.equity))
    flags.extend(_early_exercise_flags(offer))
    flags.extend(_vesting_flags(offer.equity))
    flags.extend(_tax_flags(offer.equity))
    flags.extend(_stage_flags(offer, equity_score))
    return flags


# =============================================================================
# Cash
# =============================================================================

def _cash_flags(cash_score: CashScore) -> List[OfferFlag]:
    flags = []
    vs_median = cash_score.base_salary_vs_median

    if vs_median is not None and vs_median < -15:
        flags.append(OfferFlag(
            id="cash-below-market",
            category=FlagCategory.CASH,
            severity=FlagSeverity.CRITICAL if vs_median < -25 else FlagSeverity.WARNING,
            title="Base salary below market",
            description=(
                f"Your base salary is {abs(round(vs_median))}% below the market median "
                "for your role and level."
            ),
            recommendation=(
                "Negotiate for a higher base salary, citing market data. If cash is limited, "
                "consider a signing bonus to bridge the gap."
            ),
        ))
    elif vs_median is not None and vs_median > 15:
        flags.append(OfferFlag(
            id="cash-above-market",
            category=FlagCategory.CASH,
            severity=FlagSeverity.POSITIVE,
            title="Strong base salary",
            description=f"Your base salary is {round(vs_median)}% above the market median.",
        ))

    vs_current = cash_score.compared_to_current_salary
    if vs_current is not None and vs_current < 0:
        flags.append(OfferFlag(
            id="salary-decrease",
            category=FlagCategory.CASH,
            severity=FlagSeverity.WARNING,
            title="Salary decrease from current",
            description=f"This offer is {abs(round(vs_current))}% lower than your current base salary.",
            recommendation=(
                "Consider whether the equity upside and opportunity justify the salary cut. "
                "If not, negotiate for matching your current salary."
            ),
        ))
    elif vs_current is not None and vs_current > 20:
        flags.append(OfferFlag(
            id="salary-increase",
            category=FlagCategory.CASH,
            severity=FlagSeverity.POSITIVE,
            title="Significant salary increase",
            description=f"This offer is {round(vs_current)}% higher than your current base salary.",
        ))

    return flags


# =============================================================================
# Equity
# =============================================================================

def _equity_value_flags(equity_score: EquityScore) -> List[OfferFlag]:
    if equity_score.value_confidence == ConfidenceLevel.UNKNOWN:
        return [OfferFlag(
            id="equity-unknown",
            category=FlagCategory.EQUITY_VALUE,
            severity=FlagSeverity.WARNING,
            title="Cannot calculate equity value",
            description=(
                "Without the total shares outstanding or ownership percentage, we cannot "
                "determine what portion of the company you'll own."
            ),
            recommendation=(
                "Ask your employer for the fully diluted share count so you can understand "
                "your ownership stake."
            ),
        )]

    vs_median = equity_score.equity_vs_median
    if vs_median is None:
        return []

    if vs_median < -25:
        return [OfferFlag(
            id="equity-below-market",
            category=FlagCategory.EQUITY_VALUE,
            severity=FlagSeverity.CRITICAL if vs_median < -40 else FlagSeverity.WARNING,
            title="Equity grant below market",
            description=(
                f"Your equity grant is {abs(round(vs_median))}% below the market median "
                "for your role and stage."
            ),
            recommendation=(
                "Negotiate for additional equity. If the company cites budget constraints, "
                "ask for a signing bonus or accelerated vesting review."
            ),
        )]
    if vs_median > 25:
        return [OfferFlag(
            id="equity-above-market",
            category=FlagCategory.EQUITY_VALUE,
            severity=FlagSeverity.POSITIVE,
            title="Strong equity grant",
            description=f"Your equity grant is {round(vs_median)}% above the market median.",
        )]
    return []


def _exercise_flags(equity: EquityOffer) -> List[OfferFlag]:
    period = equity.exercise_period

    if period == ExercisePeriod.DAYS_30:
        return [OfferFlag(
            id="exercise-30-days",
            category=FlagCategory.EXERCISE,
            severity=FlagSeverity.CRITICAL,
            title="30-day exercise window",
            description=(
                "You have only 30 days to exercise vested options after leaving. "
                "This is extremely employee-unfriendly."
            ),
            recommendation=(
                "Strongly negotiate for an extended exercise window (5-10 years). "
                "This costs the company nothing but is hugely valuable to you."
            ),
            educational_content=(
                "With a 30-day window, if you leave you must either pay the full exercise cost "
                "within a month or lose your vested options entirely."
            ),
        )]
    if period == ExercisePeriod.DAYS_90:
        return [OfferFlag(
            id="exercise-90-days",
            category=FlagCategory.EXERCISE,
            severity=FlagSeverity.WARNING,
            title="90-day exercise window (standard but unfriendly)",
            description=(
                "90 days is the industry standard but is still quite short. "
                "Many modern companies offer 5-10 year windows."
            ),
            recommendation="Try to negotiate for an extended exercise window.",
        )]
    if period in (ExercisePeriod.YEARS_5, ExercisePeriod.YEARS_10):
        return [OfferFlag(
            id="exercise-extended",
            category=FlagCategory.EXERCISE,
            severity=FlagSeverity.POSITIVE,
            title="Extended exercise window",
            description=(
                f"A {period.value.replace('-', ' ')} exercise window gives you flexibility "
                "if you leave before a liquidity event."
            ),
        )]
    return []


def _acceleration_flags(equity: EquityOffer) -> List[OfferFlag]:
    provision = equity.acceleration_provision

    if provision == AccelerationProvision.NONE:
        return [OfferFlag(
            id="no-acceleration",
            category=FlagCategory.ACCELERATION,
            severity=FlagSeverity.WARNING,
            title="No acceleration on change of control",
            description="If the company is acquired and you're terminated, you could lose all unvested equity.",
            recommendation=(
                "Negotiate for double-trigger acceleration (acceleration if acquired AND "
                "terminated within 12-24 months)."
            ),
        )]
    if provision == AccelerationProvision.DOUBLE_TRIGGER:
        return [OfferFlag(
            id="double-trigger",
            category=FlagCategory.ACCELERATION,
            severity=FlagSeverity.POSITIVE,
            title="Double-trigger acceleration",
            description=(
                "Your equity accelerates if the company is acquired and you're terminated. "
                "This is good protection."
            ),
        )]
    if provision == AccelerationProvision.SINGLE_TRIGGER:
        return [OfferFlag(
            id="single-trigger",
            category=FlagCategory.ACCELERATION,
            severity=FlagSeverity.POSITIVE,
            title="Single-trigger acceleration",
            description="Your equity accelerates immediately on acquisition. This is excellent and rare.",
        )]
    return []


def _early_exercise_flags(offer: OfferInput) -> List[OfferFlag]:
    allowed = offer.equity.early_exercise_allowed

    if allowed == YesNoUnknown.YES:
        return [OfferFlag(
            id="early-exercise",
            category=FlagCategory.EQUITY_TERMS,
            severity=FlagSeverity.POSITIVE,
            title="Early exercise available",
            description=(
                "You can exercise options before they vest, enabling 83(b) election "
                "for potential tax benefits."
            ),
            educational_content=(
                "Early exercise + 83(b) election lets you start your capital gains clock immediately, "
                "potentially converting ordinary income to long-term capital gains."
            ),
        )]
    if allowed == YesNoUnknown.NO and offer.company.stage == CompanyStage.PRE_SEED:
        return [OfferFlag(
            id="no-early-exercise",
            category=FlagCategory.EQUITY_TERMS,
            severity=FlagSeverity.NEUTRAL,
            title="Early exercise not available",
            description=(
                "You cannot exercise before vesting. At early stages with low strike prices, "
                "this is worth asking about."
            ),
            recommendation=(
                "Consider asking if early exercise can be enabled. It's a simple administrative "
                "change that benefits you."
            ),
        )]
    return []


def _vesting_flags(equity: EquityOffer) -> List[OfferFlag]:
    flags = []
    if equity.vesting_total_months > 48:
        flags.append(OfferFlag(
            id="long-vesting",
            category=FlagCategory.VESTING,
            severity=FlagSeverity.WARNING,
            title="Extended vesting period",
            description=f"{equity.vesting_total_months} months is longer than the standard 48 months.",
            recommendation=(
                "Negotiate for standard 4-year vesting, or ask for more equity to compensate "
                "for the longer timeline."
            ),
        ))
    if equity.vesting_cliff_months > 12:
        flags.append(OfferFlag(
            id="long-cliff",
            category=FlagCategory.VESTING,
            severity=FlagSeverity.WARNING,
            title="Extended cliff period",
            description=f"A {equity.vesting_cliff_months}-month cliff is longer than the standard 12 months.",
            recommendation="Try to negotiate this down to 12 months or less.",
        ))
    return flags


# =============================================================================
# Tax, Risk and Opportunity
# =============================================================================

def _tax_flags(equity: EquityOffer) -> List[OfferFlag]:
    if equity.equity_type != EquityType.ISO:
        return []
    if not (equity.latest_round_price_per_share and equity.strike_price):
        return []

    spread = (equity.latest_round_price_per_share - equity.strike_price) * (equity.share_count or 0)
    if spread <= AMT_SPREAD_THRESHOLD:
        return []

    return [OfferFlag(
        id="amt-risk",
        category=FlagCategory.TAX,
        severity=FlagSeverity.WARNING,
        title="Potential AMT exposure",
        description=(
            f"If you exercise all ISOs at once, the ~${round(spread / 1000)}k spread "
            "could trigger Alternative Minimum Tax."
        ),
        recommendation=(
            "Consider exercising in tranches over multiple years, or consult a tax advisor "
            "about AMT planning."
        ),
        educational_content=(
            'AMT can create tax bills on "paper gains" - income you haven\'t realized. '
            "Plan exercises carefully."
        ),
    )]


def _stage_flags(offer: OfferInput, equity_score: EquityScore) -> List[OfferFlag]:
    flags = []
    stage = offer.company.stage

    if stage == CompanyStage.PRE_SEED and offer.background.financial_situation == FinancialSituation.NEED_STABILITY:
        flags.append(OfferFlag(
            id="stage-risk",
            category=FlagCategory.RISK,
            severity=FlagSeverity.WARNING,
            title="High-risk stage with stability needs",
            description=(
                "Pre-seed companies have high failure rates. Consider whether this aligns "
                "with your need for financial stability."
            ),
            recommendation=(
                "Ensure the cash compensation meets your needs, as equity may take years "
                "to become valuable (if ever)."
            ),
        ))

    ownership = equity_score.percent_of_company
    if stage.is_early and ownership and ownership > MEANINGFUL_EARLY_OWNERSHIP:
        flags.append(OfferFlag(
            id="meaningful-ownership",
            category=FlagCategory.OPPORTUNITY,
            severity=FlagSeverity.POSITIVE,
            title="Meaningful early-stage ownership",
            description=(
                f"{ownership:.2f}% ownership at {stage.value} stage could be significant "
                "if the company succeeds."
            ),
        ))

    return flags


# =============================================================================
# Missing Data
# =============================================================================

def generate_missing_data_warnings(equity: EquityOffer) -> List[MissingDataWarning]:
    """Inputs that would sharpen the evaluation, most important first within each check."""
    warnings: List[MissingDataWarning] = []

    if not equity.strike_price:
        warnings.append(MissingDataWarning(
            field_name="strike_price",
            display_name="409A Valuation / Strike Price",
            impact="Cannot calculate exercise cost or compare to market valuation",
            how_to_get="Ask your employer directly before signing",
            question_to_ask="What is the current 409A fair market value per share?",
            importance=WarningImportance.CRITICAL,
        ))

    if not equity.total_shares_outstanding and not equity.percent_of_company:
        warnings.append(MissingDataWarning(
            field_name="total_shares_outstanding",
            display_name="Total Shares Outstanding",
            impact="Cannot calculate your ownership percentage of the company",
            how_to_get="Ask your employer or request from the stock plan administrator",
            question_to_ask="How many fully diluted shares are currently outstanding?",
            importance=WarningImportance.CRITICAL,
        ))

    if not equity.latest_valuation and not equity.latest_round_price_per_share:
        warnings.append(MissingDataWarning(
            field_name="latest_valuation",
            display_name="Company Valuation",
            impact="Cannot estimate the current value of your equity",
            how_to_get="Ask about the last funding round or preferred share price",
            question_to_ask="What was the company valuation in the most recent funding round?",
            importance=WarningImportance.IMPORTANT,
        ))

    if equity.exercise_period == ExercisePeriod.UNKNOWN:
        warnings.append(MissingDataWarning(
            field_name="exercise_period",
            display_name="Post-Termination Exercise Period",
            impact=(
                "This is one of the most important terms - it determines how long you have "
                "to exercise after leaving"
            ),
            how_to_get="Ask directly or review the stock option agreement",
            question_to_ask="What is the post-termination exercise period for options?",
            importance=WarningImportance.CRITICAL,
        ))

    if equity.acceleration_provision == AccelerationProvision.UNKNOWN:
        warnings.append(MissingDataWarning(
            field_name="acceleration_provision",
            display_name="Acceleration on Change of Control",
            impact="Determines whether you keep unvested equity if acquired and terminated",
            how_to_get="Ask about the change of control provisions in the stock plan",
            question_to_ask="Is there acceleration of vesting on change of control? Single or double-trigger?",
            importance=WarningImportance.IMPORTANT,
        ))

    if equity.early_exercise_allowed == YesNoUnknown.UNKNOWN:
        warnings.append(MissingDataWarning(
            field_name="early_exercise_allowed",
            display_name="Early Exercise",
            impact="Early exercise enables 83(b) elections for tax benefits",
            how_to_get="Ask your employer or review the stock option agreement",
            question_to_ask="Is early exercise available for unvested options?",
            importance=WarningImportance.HELPFUL,
        ))

    return warnings
