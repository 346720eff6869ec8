"""Pure compensation math.

Stateless functions over domain models: dilution, burn, vesting, token
sizing, stage estimates and the exit scenario engine. Nothing here reads
the dataset directly; stage tables arrive through an injected resolver or
explicit arguments.
"""

from .dilution import (
    DilutionResult,
    calculate_dilution,
    percent_to_shares,
    shares_to_percent,
    bps_to_options,
    options_to_bps,
)
from .burn import BurnImpact, RunwayImpact, calculate_burn_impact, calculate_runway_impact
from .vesting import VestingBreakdown, calculate_vesting_schedule, vesting_table, vesting_timeline
from .tokens import TokenGrant, size_token_grant, calculate_token_grant
from .cap_table import estimate_cap_table, estimate_valuation
from .exit_scenarios import (
    EquityValue,
    discounted_scenario_value,
    expected_value_band,
    probability_weighted_value,
    calculate_equity_value,
    project_exit_outcomes,
    weighted_outcome_value,
    exit_outcome_table,
)

__all__ = [
    "DilutionResult",
    "calculate_dilution",
    "percent_to_shares",
    "shares_to_percent",
    "bps_to_options",
    "options_to_bps",
    "BurnImpact",
    "RunwayImpact",
    "calculate_burn_impact",
    "calculate_runway_impact",
    "VestingBreakdown",
    "calculate_vesting_schedule",
    "vesting_table",
    "vesting_timeline",
    "TokenGrant",
    "size_token_grant",
    "calculate_token_grant",
    "estimate_cap_table",
    "estimate_valuation",
    "EquityValue",
    "discounted_scenario_value",
    "expected_value_band",
    "probability_weighted_value",
    "calculate_equity_value",
    "project_exit_outcomes",
    "weighted_outcome_value",
    "exit_outcome_table",
]
