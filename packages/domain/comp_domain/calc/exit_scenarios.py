"""Exit scenario engine.

Values an equity grant under stage-specific exit scenarios. For each
scenario:

    exit_valuation   = last_round_valuation * exit_multiple
    diluted_percent  = percent_fd * dilution_factor
    raw_value        = diluted_percent / 100 * exit_valuation
    discounted_value = raw_value / (1 + discount_rate) ** years_to_liquidity

The band's low/base/high endpoints are the discounted scenario values
(each scenario's contribution ``discounted * weight`` divided back by its
own weight). The single expected value reduces the band with the
probability weights: sum(endpoint * weight) / sum(weight).

All functions are deterministic: no randomness and no clock.
"""

from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from ..schemas import (
    CapTableSnapshot,
    ExitOutcome,
    ExitScenarioAssumptions,
    ExitScenarioSet,
    ExpectedValueBand,
    OfferOutcomeTemplate,
)

DEFAULT_DISCOUNT_RATE = 0.10


# =============================================================================
# Low / Base / High Band
# =============================================================================

def discounted_scenario_value(
    percent_fd: float,
    last_round_valuation: float,
    scenario: ExitScenarioAssumptions,
    discount_rate: float = DEFAULT_DISCOUNT_RATE,
) -> float:
    """Present value of a grant under one exit scenario.

    Example:
        1.0% FD, $10M valuation, 5x exit, 0.8 dilution factor, 4 years:
        raw = 0.8% of $50M = $400,000; discounted = 400,000 / 1.1**4 = ~$273,205
    """
    exit_valuation = last_round_valuation * scenario.exit_multiple
    diluted_percent = percent_fd * scenario.dilution_factor
    raw_value = diluted_percent / 100 * exit_valuation
    return raw_value / (1 + discount_rate) ** scenario.years_to_liquidity


def expected_value_band(
    percent_fd: float,
    last_round_valuation: float,
    scenarios: ExitScenarioSet,
    discount_rate: float = DEFAULT_DISCOUNT_RATE,
) -> ExpectedValueBand:
    """Discounted low/base/high values plus the probability-weighted point estimate."""
    endpoints = {}
    for label, scenario in scenarios.items():
        discounted = discounted_scenario_value(percent_fd, last_round_valuation, scenario, discount_rate)
        contribution = discounted * scenario.probability_weight
        endpoints[label] = contribution / scenario.probability_weight

    expected = _weighted_mean(endpoints, scenarios)
    return ExpectedValueBand(
        low=endpoints["low"],
        base=endpoints["base"],
        high=endpoints["high"],
        expected_value=expected,
        assumptions=scenarios,
    )


def probability_weighted_value(
    band: ExpectedValueBand,
    scenarios: Optional[ExitScenarioSet] = None,
) -> float:
    """Reduce a band to one number: sum(endpoint * weight) / sum(weight).

    Uses the band's own assumptions unless another scenario set is given.
    """
    scenarios = scenarios or band.assumptions
    endpoints = {"low": band.low, "base": band.base, "high": band.high}
    return _weighted_mean(endpoints, scenarios)


def _weighted_mean(endpoints, scenarios: ExitScenarioSet) -> float:
    weighted = sum(endpoints[label] * s.probability_weight for label, s in scenarios.items())
    return weighted / scenarios.total_weight


# =============================================================================
# Grant Value
# =============================================================================

@dataclass(frozen=True)
class EquityValue:
    current_value: float
    expected_value_band: ExpectedValueBand


def calculate_equity_value(
    percent_fd: float,
    grant_shares: int,
    cap_table: CapTableSnapshot,
    scenarios: ExitScenarioSet,
    valuation: float,
    discount_rate: float = DEFAULT_DISCOUNT_RATE,
) -> EquityValue:
    """Current paper value and expected value band of a grant.

    Args:
        percent_fd: Grant as percent of FD
        grant_shares: Shares in the grant
        cap_table: Capitalization (price per share used when present)
        scenarios: Stage exit scenarios
        valuation: Last round valuation (supplied or estimated by the caller)
        discount_rate: Annual discount rate
    """
    price_per_share = cap_table.current_price_per_share or valuation / cap_table.fully_diluted_shares
    return EquityValue(
        current_value=grant_shares * price_per_share,
        expected_value_band=expected_value_band(percent_fd, valuation, scenarios, discount_rate),
    )


# =============================================================================
# Offer Outcome Table
# =============================================================================

def project_exit_outcomes(
    percent_fd: Optional[float],
    valuation: Optional[float],
    exercise_cost: float,
    templates: List[OfferOutcomeTemplate],
) -> List[ExitOutcome]:
    """Payout of an offered grant under each outcome template.

    Unknown ownership or valuation yields zero gross value rather than an
    error. Dollar figures are rounded to whole dollars. Annualized return
    is only reported when there is an exercise cost to earn it on.
    """
    outcomes = []
    for template in templates:
        exit_valuation = valuation * template.exit_multiple if valuation else 0.0
        diluted_percent = percent_fd * (1 - template.dilution_percent / 100) if percent_fd else 0.0
        gross = exit_valuation * diluted_percent / 100
        net = max(0.0, gross - exercise_cost)

        annualized_return = None
        if exercise_cost > 0 and net > 0 and template.years_to_exit > 0:
            annualized_return = (net / exercise_cost) ** (1 / template.years_to_exit) - 1

        outcomes.append(ExitOutcome(
            name=template.name,
            description=template.description,
            exit_multiple=template.exit_multiple,
            dilution_percent=template.dilution_percent,
            years_to_exit=template.years_to_exit,
            probability=template.probability,
            gross_equity_value=round(gross),
            exercise_cost=round(exercise_cost),
            net_equity_value=round(net),
            annualized_return=annualized_return,
        ))
    return outcomes


def weighted_outcome_value(outcomes: List[ExitOutcome]) -> float:
    """Probability-weighted net value across outcomes, rounded to whole dollars."""
    return round(sum(o.net_equity_value * o.probability for o in outcomes))


def exit_outcome_table(outcomes: List[ExitOutcome]) -> pd.DataFrame:
    columns = [
        "name",
        "exit_multiple",
        "dilution_percent",
        "years_to_exit",
        "probability",
        "gross_equity_value",
        "exercise_cost",
        "net_equity_value",
        "annualized_return",
    ]
    if not outcomes:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([o.model_dump(include=set(columns)) for o in outcomes])[columns]
