"""Cap table snapshot and vesting schedule models.

The engine only needs a compact view of the company's capitalization: the
fully diluted share count, the option pool, and (optionally) pricing data
used to value a grant. When the caller cannot supply one, the snapshot is
estimated from stage-typical ranges and flagged with ``is_estimated``.
"""

from datetime import date
from typing import Optional
from pydantic import Field, model_validator

from .base import DomainModel, MoneyAmount, Months
from .enums import VestingFrequency


# =============================================================================
# Cap Table Snapshot
# =============================================================================

class CapTableSnapshot(DomainModel):
    """Point-in-time capitalization used to size and value a grant.

    Invariant:
        option_pool_remaining <= option_pool_total <= fully_diluted_shares

    Example:
        CapTableSnapshot(
            fully_diluted_shares=10_000_000,
            option_pool_total=1_000_000,
            option_pool_remaining=500_000,
            last_round_valuation=10_000_000,
        )
    """

    fully_diluted_shares: int = Field(
        gt=0,
        description="Fully diluted shares outstanding"
    )

    option_pool_total: int = Field(
        ge=0,
        description="Total shares reserved for the employee option pool"
    )

    option_pool_remaining: int = Field(
        ge=0,
        description="Pool shares not yet granted"
    )

    current_price_per_share: Optional[MoneyAmount] = Field(
        default=None,
        description="Current price per share (409A FMV or last round)"
    )

    last_round_valuation: Optional[MoneyAmount] = Field(
        default=None,
        description="Post-money valuation of the last priced round"
    )

    last_409a_date: Optional[date] = Field(
        default=None,
        description="Date of the most recent 409A valuation"
    )

    is_estimated: bool = Field(
        default=False,
        description="True when derived from stage defaults rather than supplied"
    )

    @model_validator(mode="after")
    def validate_pool_ordering(self):
        """Pool remaining cannot exceed pool total, which cannot exceed FD shares."""
        if self.option_pool_remaining > self.option_pool_total:
            raise ValueError(
                f"option_pool_remaining ({self.option_pool_remaining}) exceeds "
                f"option_pool_total ({self.option_pool_total})"
            )
        if self.option_pool_total > self.fully_diluted_shares:
            raise ValueError(
                f"option_pool_total ({self.option_pool_total}) exceeds "
                f"fully_diluted_shares ({self.fully_diluted_shares})"
            )
        return self

    @property
    def option_pool_used(self) -> int:
        return self.option_pool_total - self.option_pool_remaining

    @property
    def pool_utilization_percent(self) -> float:
        """Share of the pool already granted, as a percent (0 for an empty pool)."""
        if self.option_pool_total == 0:
            return 0.0
        return self.option_pool_used / self.option_pool_total * 100


# =============================================================================
# Vesting Schedule
# =============================================================================

class VestingSchedule(DomainModel):
    """Vesting terms for an equity or token grant.

    Invariant: 0 <= cliff_months <= total_months.

    Common schedules:
        - Standard: 48 months, 12-month cliff, monthly thereafter
        - Advisor: 24 months, no cliff, monthly
    """

    total_months: Months = Field(
        default=48,
        gt=0,
        description="Total vesting period in months"
    )

    cliff_months: Months = Field(
        default=12,
        description="Months before the first tranche vests"
    )

    frequency: VestingFrequency = Field(
        default=VestingFrequency.MONTHLY,
        description="How often shares vest after the cliff"
    )

    @model_validator(mode="after")
    def validate_cliff(self):
        if self.cliff_months > self.total_months:
            raise ValueError(
                f"cliff_months ({self.cliff_months}) exceeds total_months ({self.total_months})"
            )
        return self
