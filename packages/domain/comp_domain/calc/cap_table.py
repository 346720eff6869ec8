"""Stage-based estimates for missing cap table data."""

from ..schemas import CapTableSnapshot, CompanyStage

# Share of the estimated pool assumed still ungranted
ESTIMATED_POOL_REMAINING = 0.7


def estimate_cap_table(stage: CompanyStage, resolver) -> CapTableSnapshot:
    """Estimate a cap table from stage-typical ranges.

    FD shares are the stage's typical count; the pool is the typical pool
    size; 30% of the pool is assumed granted. The snapshot is flagged
    ``is_estimated`` and carries no pricing data.

    Args:
        stage: Company stage
        resolver: BenchmarkResolver supplying the stage tables
    """
    fd_shares = resolver.typical_fd_shares(stage)
    pool_total = round(fd_shares * resolver.typical_pool_size(stage))
    return CapTableSnapshot(
        fully_diluted_shares=fd_shares,
        option_pool_total=pool_total,
        option_pool_remaining=round(pool_total * ESTIMATED_POOL_REMAINING),
        is_estimated=True,
    )


def estimate_valuation(stage: CompanyStage, resolver) -> float:
    """Stage-typical post-money valuation."""
    return resolver.typical_valuation(stage)
