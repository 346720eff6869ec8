"""Vesting schedule amortization.

A grant vests in a cliff tranche at ``cliff_months`` and then in equal
installments every frequency period until ``total_months``. Cumulative
vesting is computed from elapsed periods rather than accumulated, so it is
non-decreasing, never exceeds the grant, and equals the grant exactly at
the final month.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from ..schemas import VestingSchedule, VestingTimelinePoint


@dataclass(frozen=True)
class VestingBreakdown:
    """Amortization of a grant.

    Attributes:
        cliff_vest: Units vesting at the cliff
        per_period_vest: Units vesting each period after the cliff (unrounded)
        vested_by_month: Cumulative vested units for months 1..total_months
    """

    total_grant: int
    cliff_vest: int
    per_period_vest: float
    vested_by_month: List[int]

    def vested_at(self, month: int) -> int:
        """Cumulative vested units at a month (0 before month 1)."""
        if month <= 0:
            return 0
        if month > len(self.vested_by_month):
            return self.total_grant
        return self.vested_by_month[month - 1]


def calculate_vesting_schedule(total_grant: int, schedule: VestingSchedule) -> VestingBreakdown:
    """Amortize a grant over a vesting schedule.

    Args:
        total_grant: Units granted (shares, options or tokens)
        schedule: Vesting terms

    Returns:
        VestingBreakdown

    Example:
        48 months, 12-month cliff, monthly, 4,800 options:
        cliff_vest = 1,200 at month 12, then 100 per month, 4,800 at month 48
    """
    total_months = schedule.total_months
    cliff_months = schedule.cliff_months
    period = schedule.frequency.period_months

    cliff_vest = round(total_grant * cliff_months / total_months)
    after_cliff = total_grant - cliff_vest
    periods_total = math.ceil((total_months - cliff_months) / period)
    per_period_vest = after_cliff / periods_total if periods_total else 0.0

    vested_by_month: List[int] = []
    for month in range(1, total_months + 1):
        if month == total_months:
            vested = total_grant
        elif month < cliff_months:
            vested = 0
        else:
            periods_elapsed = (month - cliff_months) // period
            vested = round(cliff_vest + per_period_vest * periods_elapsed)
        vested_by_month.append(min(vested, total_grant))

    return VestingBreakdown(
        total_grant=total_grant,
        cliff_vest=cliff_vest,
        per_period_vest=per_period_vest,
        vested_by_month=vested_by_month,
    )


def vesting_table(
    total_grant: int,
    schedule: VestingSchedule,
    value_per_unit: Optional[float] = None,
) -> pd.DataFrame:
    """Month-by-month vesting as a DataFrame.

    Columns: month, vested, unvested, vested_percent, and vested_value when
    ``value_per_unit`` is given.
    """
    breakdown = calculate_vesting_schedule(total_grant, schedule)
    rows = []
    for month, vested in enumerate(breakdown.vested_by_month, start=1):
        row = {
            "month": month,
            "vested": vested,
            "unvested": total_grant - vested,
            "vested_percent": vested / total_grant * 100 if total_grant else 0.0,
        }
        if value_per_unit is not None:
            row["vested_value"] = round(vested * value_per_unit)
        rows.append(row)
    return pd.DataFrame(rows)


def vesting_timeline(
    total_grant: int,
    schedule: VestingSchedule,
    value_per_unit: Optional[float] = None,
    step_months: int = 6,
) -> List[VestingTimelinePoint]:
    """Cumulative vesting sampled every ``step_months`` from month 0 to the end."""
    breakdown = calculate_vesting_schedule(total_grant, schedule)
    points = []
    for month in range(0, schedule.total_months + 1, step_months):
        vested = breakdown.vested_at(month)
        points.append(VestingTimelinePoint(
            month=month,
            vested_shares=vested,
            vested_percent=round(vested / total_grant * 100, 1) if total_grant else 0.0,
            cumulative_value=round(vested * value_per_unit) if value_per_unit else None,
        ))
    return points
