"""Package optimizer entry point.

``generate_packages`` runs the optimizer blocks for one hiring scenario and
assembles a ``PackageGenerationResult``. Missing inputs never fail the run:
estimates are noted in ``confidence_notes`` and lower ``confidence_score``.
The only fatal condition is a role with no market data at any level.
"""

from datetime import date
from typing import List, Optional

from .benchmarks import BenchmarkResolver
from .blocks import BlockContext, BlockExecutor, default_blocks
from .config import EngineSettings, get_settings
from .logging import get_logger
from .schemas import (
    BenchmarkRow,
    CapTableSnapshot,
    MarketBenchmarks,
    PackageGenerationInput,
    PackageGenerationResult,
    PackageShape,
)

logger = get_logger(__name__)

LOW_BENCHMARK_CONFIDENCE = 0.8


def generate_packages(
    inputs: PackageGenerationInput,
    resolver: BenchmarkResolver,
    settings: Optional[EngineSettings] = None,
    as_of: Optional[date] = None,
) -> PackageGenerationResult:
    """Generate, score and rank compensation packages for a hire.

    Args:
        inputs: Hiring scenario
        resolver: Resolver over the benchmark dataset
        settings: Engine settings (cached environment settings if None)
        as_of: Date for time-dependent risk checks (today if None)

    Returns:
        PackageGenerationResult with packages sorted best first

    Raises:
        NoMarketDataError: If the role has no benchmark data at any level

    Example:
        resolver = BenchmarkResolver(load_dataset())
        result = generate_packages(
            PackageGenerationInput(
                company_context=CompanyContext(stage=CompanyStage.SERIES_A),
                role_profile=RoleProfile(job_family=JobFamily.ENGINEERING, job_level=JobLevel.SENIOR),
            ),
            resolver,
        )
        result.best_fit_package.name
    """
    settings = settings or get_settings()

    context = BlockContext()
    context.set("scenario", inputs)
    context.set("resolver", resolver)
    context.set("engine_settings", settings)
    if as_of is not None:
        context.set("as_of", as_of)

    BlockExecutor(default_blocks()).execute(context)

    benchmark: BenchmarkRow = context.get("benchmark")
    cap_table: CapTableSnapshot = context.get("cap_table")
    valuation_estimated: bool = context.get("valuation_estimated")

    confidence_score = benchmark.confidence * 100
    if cap_table.is_estimated:
        confidence_score *= settings.estimate_penalty
    if valuation_estimated:
        confidence_score *= settings.estimate_penalty

    packages = context.get("packages")
    best_fit = context.get("best_fit_package")

    result = PackageGenerationResult(
        packages=packages,
        best_fit_package=best_fit,
        market_benchmarks=MarketBenchmarks(
            salary_percentiles=benchmark.salary,
            equity_percentiles=benchmark.equity_bps.as_percent_fd(),
            source=benchmark.source,
            provenance_note=benchmark.provenance_note,
        ),
        confidence_score=round(confidence_score),
        confidence_notes=_confidence_notes(inputs, benchmark, cap_table, valuation_estimated),
        risk_flags=context.get("risk_flags"),
        comparison=context.get("package_comparison"),
    )

    logger.info(
        "packages_generated",
        job_family=inputs.role_profile.job_family.value,
        job_level=inputs.role_profile.job_level.value,
        stage=inputs.company_context.stage.value,
        package_count=len(packages),
        best_fit=best_fit.name,
        confidence_score=result.confidence_score,
    )
    return result


def _confidence_notes(
    inputs: PackageGenerationInput,
    benchmark: BenchmarkRow,
    cap_table: CapTableSnapshot,
    valuation_estimated: bool,
) -> List[str]:
    stage = inputs.company_context.stage.value
    notes: List[str] = []

    if cap_table.is_estimated:
        notes.append(
            f"Cap table estimated from typical {stage} company data. "
            "Provide actual cap table for more accurate calculations."
        )
    if valuation_estimated:
        notes.append(f"Company valuation estimated from typical {stage} valuations.")
    if benchmark.is_approximated:
        notes.append(f"Benchmark data: {benchmark.provenance_note}")
    if benchmark.confidence < LOW_BENCHMARK_CONFIDENCE:
        notes.append(f"Benchmark data confidence: {round(benchmark.confidence * 100)}%")

    program = inputs.token_program
    if program is not None and program.can_overlay and not program.remaining_pool:
        reason = (
            "token pool remaining was not provided."
            if program.remaining_pool is None
            else "the token incentive pool is exhausted."
        )
        notes.append(f"{PackageShape.TOKEN_OVERLAY.display_name} package has no token amount: {reason}")

    return notes
