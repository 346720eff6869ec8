"""Grant sizing and option pool dilution.

Conversions between percent of fully diluted shares, basis points and
share counts, and the effect of a grant on the remaining option pool.
"""

from dataclasses import dataclass

from ..schemas import CapTableSnapshot


@dataclass(frozen=True)
class DilutionResult:
    """Effect of one grant on the option pool.

    Attributes:
        grant_shares: Shares granted (rounded to whole shares)
        percent_fd: Grant as percent of FD (as requested)
        pool_impact_percent: Share of the remaining pool consumed (100 when the pool is empty)
        pool_remaining_after: Pool shares left after the grant (never negative)
        pool_remaining_percent_fd: Pool left after the grant, as percent of FD
    """

    grant_shares: int
    percent_fd: float
    pool_impact_percent: float
    pool_remaining_after: int
    pool_remaining_percent_fd: float


def calculate_dilution(target_percent_fd: float, cap_table: CapTableSnapshot) -> DilutionResult:
    """Size a grant and measure its option pool impact.

    Args:
        target_percent_fd: Grant size as percent of FD (0.5 = 0.5%)
        cap_table: Current capitalization

    Returns:
        DilutionResult

    Example:
        FD 10,000,000, pool remaining 500,000, target 0.5%:
        grant_shares = 50,000, pool_impact_percent = 10.0,
        pool_remaining_after = 450,000
    """
    grant_shares = percent_to_shares(target_percent_fd, cap_table.fully_diluted_shares)
    remaining = cap_table.option_pool_remaining

    # An empty pool is fully exhausted by any grant
    pool_impact_percent = grant_shares / remaining * 100 if remaining > 0 else 100.0
    pool_remaining_after = max(0, remaining - grant_shares)

    return DilutionResult(
        grant_shares=grant_shares,
        percent_fd=target_percent_fd,
        pool_impact_percent=pool_impact_percent,
        pool_remaining_after=pool_remaining_after,
        pool_remaining_percent_fd=shares_to_percent(pool_remaining_after, cap_table.fully_diluted_shares),
    )


def percent_to_shares(percent_fd: float, fd_shares: int) -> int:
    return round(percent_fd / 100 * fd_shares)


def shares_to_percent(shares: float, fd_shares: int) -> float:
    return shares / fd_shares * 100


def bps_to_options(bps: float, fd_shares: int) -> int:
    """Option count for a grant in basis points of FD (100 bps = 1%)."""
    return round(bps / 10_000 * fd_shares)


def options_to_bps(options: float, fd_shares: int) -> int:
    return round(options / fd_shares * 10_000)
