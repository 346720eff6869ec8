"""Market inputs for the package optimizer.

BenchmarkBlock resolves the role's market benchmark; CapTableBlock settles
the capitalization and valuation every package is sized against, estimating
from stage defaults when the caller supplied none.
"""

from typing import List, Optional, Tuple

from .base import Block, BlockContext
from ..benchmarks import BenchmarkResolver
from ..calc import estimate_cap_table, estimate_valuation
from ..schemas import CapTableSnapshot, PackageGenerationInput


class BenchmarkBlock(Block):
    """Resolves the benchmark row for the scenario's role.

    Inputs (from context):
        - scenario: PackageGenerationInput
        - resolver: BenchmarkResolver

    Outputs (to context):
        - benchmark: BenchmarkRow adjusted to the role's geography

    Raises:
        NoMarketDataError: If no level on the ladder has data for the role
    """

    def inputs(self) -> List[str]:
        return ["scenario", "resolver"]

    def outputs(self) -> List[str]:
        return ["benchmark"]

    def execute(self, context: BlockContext) -> None:
        scenario: PackageGenerationInput = context.get("scenario")
        resolver: BenchmarkResolver = context.get("resolver")
        role = scenario.role_profile

        benchmark = resolver.resolve_or_raise(
            role.job_family,
            role.job_level,
            scenario.company_context.stage,
            role.geo,
        )
        context.set("benchmark", benchmark)


class CapTableBlock(Block):
    """Settles the cap table and last round valuation.

    Inputs (from context):
        - scenario: PackageGenerationInput
        - resolver: BenchmarkResolver

    Outputs (to context):
        - cap_table: Supplied CapTableSnapshot, or a stage estimate flagged
          ``is_estimated``
        - valuation: Last round valuation in dollars
        - valuation_estimated: True when valuation came from stage defaults

    Valuation precedence: the cap table's last round valuation, then its
    price per share times FD shares, then the stage-typical valuation.
    """

    def inputs(self) -> List[str]:
        return ["scenario", "resolver"]

    def outputs(self) -> List[str]:
        return ["cap_table", "valuation", "valuation_estimated"]

    def execute(self, context: BlockContext) -> None:
        scenario: PackageGenerationInput = context.get("scenario")
        resolver: BenchmarkResolver = context.get("resolver")
        stage = scenario.company_context.stage

        cap_table = scenario.company_context.cap_table or estimate_cap_table(stage, resolver)
        valuation, estimated = self._resolve_valuation(cap_table)
        if valuation is None:
            valuation, estimated = estimate_valuation(stage, resolver), True

        context.set("cap_table", cap_table)
        context.set("valuation", valuation)
        context.set("valuation_estimated", estimated)

    @staticmethod
    def _resolve_valuation(cap_table: CapTableSnapshot) -> Tuple[Optional[float], bool]:
        if cap_table.last_round_valuation:
            return cap_table.last_round_valuation, False
        if cap_table.current_price_per_share:
            return cap_table.current_price_per_share * cap_table.fully_diluted_shares, False
        return None, True
