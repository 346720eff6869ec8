"""Computation blocks for the package optimizer.

Architecture:
    Scenario (schemas) -> Blocks (computation) -> Result (schemas + DataFrame)

Each block declares the context keys it reads and writes; the executor
sorts them into dependency order and validates the keys as it runs.

Available blocks:
- BenchmarkBlock: Resolves the role's market benchmark
- CapTableBlock: Supplied or estimated cap table and valuation
- PackageConfigBlock: Package shapes with priority nudges
- PackageBuildBlock: One computed package per shape
- PackageScoringBlock: Scores, ranking and the comparison DataFrame
- BestFitBlock: Recommended package and rationale
- RiskFlagBlock: Risk flags for the recommended package

Usage:
    from comp_domain.blocks import BlockContext, BlockExecutor, default_blocks

    context = BlockContext()
    context.set("scenario", inputs)
    context.set("resolver", resolver)
    context.set("engine_settings", settings)
    BlockExecutor(default_blocks()).execute(context)

    comparison_df = context.get("package_comparison")
"""

from typing import List

from .base import Block, BlockContext, BlockExecutor, CircularDependencyError, topological_sort
from .market import BenchmarkBlock, CapTableBlock
from .packages import PackageBuildBlock, PackageConfigBlock, PackageScoringBlock, comparison_table
from .risk import RiskFlagBlock
from .selection import BestFitBlock, select_best_fit


def default_blocks() -> List[Block]:
    """The optimizer's full block set."""
    return [
        BenchmarkBlock(),
        CapTableBlock(),
        PackageConfigBlock(),
        PackageBuildBlock(),
        PackageScoringBlock(),
        BestFitBlock(),
        RiskFlagBlock(),
    ]


__all__ = [
    "Block",
    "BlockContext",
    "BlockExecutor",
    "CircularDependencyError",
    "topological_sort",
    "BenchmarkBlock",
    "CapTableBlock",
    "PackageConfigBlock",
    "PackageBuildBlock",
    "PackageScoringBlock",
    "BestFitBlock",
    "RiskFlagBlock",
    "select_best_fit",
    "comparison_table",
    "default_blocks",
]
