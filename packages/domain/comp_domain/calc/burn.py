"""Cash burn and runway impact of a hire."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BurnImpact:
    annual_cash_cost: float
    monthly_cash_cost: float
    employer_load_rate: float
    total_with_load: float
    monthly_burn_delta: float


@dataclass(frozen=True)
class RunwayImpact:
    new_runway_months: float
    runway_reduction: float
    runway_reduction_percent: float


def calculate_burn_impact(
    base_salary: float,
    bonus_target: float,
    employer_load_rate: float,
) -> BurnImpact:
    """Annual and monthly cost of a hire including employer load.

    Args:
        base_salary: Annual base salary
        bonus_target: Annual target bonus
        employer_load_rate: Payroll taxes and benefits as a fraction of cash (0.22 = 22%)

    Returns:
        BurnImpact with unrounded figures
    """
    annual_cash = base_salary + bonus_target
    total_with_load = annual_cash * (1 + employer_load_rate)
    return BurnImpact(
        annual_cash_cost=annual_cash,
        monthly_cash_cost=annual_cash / 12,
        employer_load_rate=employer_load_rate,
        total_with_load=total_with_load,
        monthly_burn_delta=total_with_load / 12,
    )


def calculate_runway_impact(
    current_runway_months: float,
    current_monthly_burn: float,
    additional_monthly_burn: float,
) -> RunwayImpact:
    """Runway after adding burn, assuming cash on hand is unchanged.

    Month figures are rounded to one decimal.
    """
    cash_on_hand = current_runway_months * current_monthly_burn
    new_burn = current_monthly_burn + additional_monthly_burn
    new_runway = cash_on_hand / new_burn if new_burn > 0 else current_runway_months
    reduction = current_runway_months - new_runway
    return RunwayImpact(
        new_runway_months=round(new_runway, 1),
        runway_reduction=round(reduction, 1),
        runway_reduction_percent=reduction / current_runway_months * 100 if current_runway_months else 0.0,
    )
