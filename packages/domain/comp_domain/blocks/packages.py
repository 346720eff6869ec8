"""Package generation blocks.

PackageConfigBlock picks the shapes to build, PackageBuildBlock turns each
shape into a fully computed CompPackage, and PackageScoringBlock scores and
ranks them.
"""

from typing import List, Optional

import pandas as pd

from .base import Block, BlockContext
from ..benchmarks import BenchmarkResolver, interpolate_percentile
from ..calc import (
    calculate_burn_impact,
    calculate_dilution,
    calculate_equity_value,
    calculate_token_grant,
    size_token_grant,
)
from ..config import EngineSettings
from ..schemas import (
    BenchmarkRow,
    CapTableSnapshot,
    CompPackage,
    EquityType,
    PackageGenerationInput,
)
from ..scoring import score_package
from ..shapes import ShapeConfig, build_shape_configs, determine_equity_type

# Target bonus before the shape's multiplier
BASE_BONUS_RATE = 0.10


# =============================================================================
# Shape Selection
# =============================================================================

class PackageConfigBlock(Block):
    """Selects package shapes and applies priority nudges.

    Inputs (from context):
        - scenario: PackageGenerationInput

    Outputs (to context):
        - package_configs: List[ShapeConfig] in generation order
    """

    def inputs(self) -> List[str]:
        return ["scenario"]

    def outputs(self) -> List[str]:
        return ["package_configs"]

    def execute(self, context: BlockContext) -> None:
        scenario: PackageGenerationInput = context.get("scenario")
        configs = build_shape_configs(
            scenario.candidate_context,
            scenario.preferences,
            scenario.token_program,
        )
        context.set("package_configs", configs)


# =============================================================================
# Package Construction
# =============================================================================

class PackageBuildBlock(Block):
    """Builds one unscored CompPackage per shape config.

    Inputs (from context):
        - scenario: PackageGenerationInput
        - resolver: BenchmarkResolver (vesting defaults, employer load, exit scenarios)
        - benchmark: BenchmarkRow
        - cap_table: CapTableSnapshot
        - valuation: Last round valuation
        - package_configs: List[ShapeConfig]
        - engine_settings: EngineSettings (discount rate)

    Outputs (to context):
        - packages_unscored: List[CompPackage] with zeroed scores

    Per package:
        base_salary  = salary interpolated at the shape's salary percentile
        equity_bps   = bps interpolated at the shape's equity percentile,
                       capped by constraints.max_equity_percent
        bonus_target = 10% of base * shape bonus multiplier
    """

    def inputs(self) -> List[str]:
        return [
            "scenario",
            "resolver",
            "benchmark",
            "cap_table",
            "valuation",
            "package_configs",
            "engine_settings",
        ]

    def outputs(self) -> List[str]:
        return ["packages_unscored"]

    def execute(self, context: BlockContext) -> None:
        configs: List[ShapeConfig] = context.get("package_configs")
        packages = [self._build_package(config, context) for config in configs]
        context.set("packages_unscored", packages)

    def _build_package(self, config: ShapeConfig, context: BlockContext) -> CompPackage:
        scenario: PackageGenerationInput = context.get("scenario")
        resolver: BenchmarkResolver = context.get("resolver")
        benchmark: BenchmarkRow = context.get("benchmark")
        cap_table: CapTableSnapshot = context.get("cap_table")
        valuation: float = context.get("valuation")
        settings: EngineSettings = context.get("engine_settings")

        company = scenario.company_context
        role = scenario.role_profile

        # Cash
        base_salary = round(interpolate_percentile(config.salary_percentile, benchmark.salary))
        bonus_target = round(base_salary * BASE_BONUS_RATE * config.bonus_multiplier)
        burn = calculate_burn_impact(base_salary, bonus_target, resolver.employer_load(company.geo_market))

        # Equity
        percent_fd = interpolate_percentile(config.equity_percentile, benchmark.equity_bps) / 100
        max_percent = scenario.constraints.max_equity_percent
        if max_percent is not None:
            percent_fd = min(percent_fd, max_percent)

        equity_type = determine_equity_type(company.stage, role.job_level)
        vesting = resolver.vesting_defaults_for_level(role.job_level)
        dilution = calculate_dilution(percent_fd, cap_table)
        equity_value = calculate_equity_value(
            percent_fd,
            dilution.grant_shares,
            cap_table,
            resolver.exit_scenarios(company.stage),
            valuation,
            settings.discount_rate,
        )

        strike_price = None
        if equity_type in (EquityType.ISO, EquityType.NSO):
            strike_price = cap_table.current_price_per_share

        package = CompPackage(
            name=config.name,
            shape=config.shape,
            base_salary=base_salary,
            bonus_target=bonus_target,
            equity_type=equity_type,
            equity_bps=percent_fd * 100,
            equity_percent_fd=percent_fd,
            equity_option_count=dilution.grant_shares,
            vesting_schedule=vesting,
            strike_price=strike_price,
            employer_cost_annual=burn.total_with_load,
            burn_delta_monthly=burn.monthly_burn_delta,
            pool_impact_percent=dilution.pool_impact_percent,
            pool_remaining_after=dilution.pool_remaining_after,
            current_equity_value=equity_value.current_value,
            expected_value_band=equity_value.expected_value_band,
        )

        if config.token_overlay:
            package = self._add_tokens(package, scenario)
        return package

    @staticmethod
    def _add_tokens(package: CompPackage, scenario: PackageGenerationInput) -> CompPackage:
        """Size the token grant when supply and remaining pool are both known."""
        program = scenario.token_program
        if program is None or not program.total_supply or not program.remaining_pool:
            return package

        amount = size_token_grant(package.equity_bps, program.total_supply)
        grant = calculate_token_grant(amount, program.total_supply, program.remaining_pool)
        return package.model_copy(update={
            "token_amount": grant.token_amount,
            "token_percent_supply": grant.percent_supply,
            "token_vesting_schedule": program.token_vesting_default or package.vesting_schedule,
        })


# =============================================================================
# Scoring
# =============================================================================

class PackageScoringBlock(Block):
    """Scores packages and sorts them best first.

    Inputs (from context):
        - scenario: PackageGenerationInput (preferences, cash budget ceiling)
        - benchmark: BenchmarkRow
        - packages_unscored: List[CompPackage]

    Outputs (to context):
        - scored_packages: List[CompPackage] sorted by overall score, highest
          first (ties keep generation order)
        - package_comparison: DataFrame, one row per package with columns:
            * name, shape, equity_type
            * base_salary, bonus_target, total_cash: Whole dollars
            * equity_percent_fd, equity_option_count
            * employer_cost_annual, burn_delta_monthly: Whole dollars
            * pool_impact_percent
            * current_equity_value, expected_value: Whole dollars
            * market_competitiveness, cash_feasibility, dilution_score,
              retention_score, overall_score
    """

    def inputs(self) -> List[str]:
        return ["scenario", "benchmark", "packages_unscored"]

    def outputs(self) -> List[str]:
        return ["scored_packages", "package_comparison"]

    def execute(self, context: BlockContext) -> None:
        scenario: PackageGenerationInput = context.get("scenario")
        benchmark: BenchmarkRow = context.get("benchmark")
        packages: List[CompPackage] = context.get("packages_unscored")

        ceiling = scenario.cash_budget_ceiling
        scored = [
            pkg.model_copy(update={"scores": score_package(pkg, benchmark, scenario.preferences, ceiling)})
            for pkg in packages
        ]
        scored.sort(key=lambda pkg: pkg.scores.overall_score, reverse=True)

        context.set("scored_packages", scored)
        context.set("package_comparison", comparison_table(scored))


def comparison_table(packages: List[CompPackage]) -> pd.DataFrame:
    """One presentation row per package, dollar figures rounded to whole dollars."""
    rows = []
    for pkg in packages:
        band = pkg.expected_value_band
        rows.append({
            "name": pkg.name,
            "shape": pkg.shape.value,
            "equity_type": pkg.equity_type.value,
            "base_salary": round(pkg.base_salary),
            "bonus_target": round(pkg.bonus_target),
            "total_cash": round(pkg.total_cash),
            "equity_percent_fd": round(pkg.equity_percent_fd, 4),
            "equity_option_count": pkg.equity_option_count,
            "employer_cost_annual": round(pkg.employer_cost_annual),
            "burn_delta_monthly": round(pkg.burn_delta_monthly),
            "pool_impact_percent": round(pkg.pool_impact_percent, 2),
            "current_equity_value": _rounded(pkg.current_equity_value),
            "expected_value": _rounded(band.expected_value if band else None),
            "market_competitiveness": pkg.scores.market_competitiveness,
            "cash_feasibility": pkg.scores.cash_feasibility,
            "dilution_score": pkg.scores.dilution_score,
            "retention_score": pkg.scores.retention_score,
            "overall_score": pkg.scores.overall_score,
        })
    return pd.DataFrame(rows)


def _rounded(value: Optional[float]) -> Optional[int]:
    return round(value) if value is not None else None
