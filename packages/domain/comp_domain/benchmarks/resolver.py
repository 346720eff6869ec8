"""Benchmark resolution and percentile math.

The resolver turns a scenario key (job family, job level, company stage,
geography) into a geography-adjusted ``BenchmarkRow``. It also exposes the
dataset's stage and geography lookup tables so downstream computations
never touch the raw dataset.

Fallback:
    When the exact (family, level, stage) has no data, the resolver walks
    the seniority ladder outward from the requested level, alternating
    below then above (level-1, level+1, level-2, ...), and uses the first
    level with data for the requested stage. The result's confidence is
    multiplied by the approximation penalty and its provenance note names
    the level actually used.
"""

from typing import List, Optional

from ..config import EngineSettings, get_settings
from ..errors import NoMarketDataError
from ..logging import get_logger
from ..schemas import (
    BenchmarkDataset,
    BenchmarkRow,
    CompanyStage,
    ExitScenarioSet,
    FDRange,
    GeoMarket,
    JobFamily,
    JobLevel,
    OfferOutcomeTemplate,
    PercentileBands,
    VestingSchedule,
    VestingTemplate,
)
from .dataset import load_dataset

logger = get_logger(__name__)

DEFAULT_EMPLOYER_LOAD = 0.25


# =============================================================================
# Percentile Math
# =============================================================================

def interpolate_percentile(percentile: float, bands: PercentileBands) -> float:
    """Value at a target percentile, by piecewise-linear interpolation.

    Clamps to p25 at or below the 25th percentile and to p75 at or above the
    75th. Between, blends p25->p50 or p50->p75 linearly. The result is not
    rounded.

    Example:
        bands = PercentileBands(p25=120_000, p50=150_000, p75=180_000)
        interpolate_percentile(50, bands)  # 150000.0
        interpolate_percentile(90, bands)  # 180000.0
    """
    if percentile <= 25:
        return float(bands.p25)
    if percentile >= 75:
        return float(bands.p75)
    if percentile <= 50:
        ratio = (percentile - 25) / 25
        return bands.p25 + ratio * (bands.p50 - bands.p25)
    ratio = (percentile - 50) / 25
    return bands.p50 + ratio * (bands.p75 - bands.p50)


def estimate_percentile(
    value: float,
    bands: PercentileBands,
    tail_span: Optional[float] = None,
) -> float:
    """Market percentile of a value; the inverse of ``interpolate_percentile``.

    Below p25 the percentile scales linearly from 0. Above p75 it grows by
    25 points per ``tail_span`` of excess (default: p75 itself). The result
    is clamped to [0, 99].

    Args:
        value: Offered amount (dollars or bps, same unit as bands)
        bands: Market percentiles
        tail_span: Excess over p75 that adds 25 percentile points
    """
    if value <= bands.p25:
        percentile = 25 * value / bands.p25 if bands.p25 > 0 else 0.0
    elif value <= bands.p50:
        percentile = 25 + 25 * (value - bands.p25) / (bands.p50 - bands.p25)
    elif value <= bands.p75:
        percentile = 50 + 25 * (value - bands.p50) / (bands.p75 - bands.p50)
    else:
        span = bands.p75 if tail_span is None else tail_span
        percentile = 75 + 25 * (value - bands.p75) / span if span > 0 else 99.0
    return max(0.0, min(99.0, percentile))


# =============================================================================
# Resolver
# =============================================================================

class BenchmarkResolver:
    """Read-only view over an injected benchmark dataset.

    Example:
        resolver = BenchmarkResolver(load_dataset())
        row = resolver.resolve(JobFamily.ENGINEERING, JobLevel.SENIOR, CompanyStage.SERIES_A)
        row.salary.p50
    """

    def __init__(
        self,
        dataset: BenchmarkDataset,
        approximation_penalty: float = 0.8,
        default_geo: Optional[GeoMarket] = None,
    ):
        """Initialize resolver.

        Args:
            dataset: Validated benchmark dataset
            approximation_penalty: Confidence multiplier for adjacent-level matches
            default_geo: Geography used when a lookup omits one (dataset baseline if None)
        """
        self.dataset = dataset
        self.approximation_penalty = approximation_penalty
        self.default_geo = default_geo or dataset.baseline_geo

    @classmethod
    def from_settings(cls, settings: Optional[EngineSettings] = None) -> "BenchmarkResolver":
        """Build a resolver over the dataset named by settings."""
        settings = settings or get_settings()
        return cls(
            load_dataset(settings.dataset_path),
            approximation_penalty=settings.approximation_penalty,
            default_geo=settings.default_geo,
        )

    # ------------------------------------------------------------------ #
    # Benchmark rows
    # ------------------------------------------------------------------ #

    def resolve(
        self,
        job_family: JobFamily,
        job_level: JobLevel,
        stage: CompanyStage,
        geo: Optional[GeoMarket] = None,
    ) -> Optional[BenchmarkRow]:
        """Resolve a benchmark row, falling back to adjacent levels.

        Returns:
            Geography-adjusted BenchmarkRow, or None when no level on the
            ladder has data for this family and stage
        """
        geo = geo or self.default_geo

        if self.dataset.entry(job_family, job_level, stage) is not None:
            return self._build_row(job_family, job_level, stage, geo, source_level=job_level)

        for candidate in self._fallback_levels(job_level):
            if self.dataset.entry(job_family, candidate, stage) is not None:
                logger.info(
                    "benchmark_approximated",
                    job_family=job_family.value,
                    job_level=job_level.value,
                    stage=stage.value,
                    approximated_from=candidate.value,
                )
                return self._build_row(job_family, job_level, stage, geo, source_level=candidate)

        logger.warning(
            "benchmark_not_found",
            job_family=job_family.value,
            job_level=job_level.value,
            stage=stage.value,
        )
        return None

    def resolve_or_raise(
        self,
        job_family: JobFamily,
        job_level: JobLevel,
        stage: CompanyStage,
        geo: Optional[GeoMarket] = None,
    ) -> BenchmarkRow:
        """Like ``resolve`` but raises NoMarketDataError instead of returning None."""
        row = self.resolve(job_family, job_level, stage, geo)
        if row is None:
            raise NoMarketDataError(job_family, job_level, stage)
        return row

    @staticmethod
    def _fallback_levels(job_level: JobLevel) -> List[JobLevel]:
        """Ladder levels in search order: -1, +1, -2, +2, ..."""
        ladder = JobLevel.ladder()
        index = ladder.index(job_level)
        order: List[JobLevel] = []
        for offset in range(1, len(ladder)):
            for direction in (-1, 1):
                candidate = index + offset * direction
                if 0 <= candidate < len(ladder):
                    order.append(ladder[candidate])
        return order

    def _build_row(
        self,
        job_family: JobFamily,
        job_level: JobLevel,
        stage: CompanyStage,
        geo: GeoMarket,
        source_level: JobLevel,
    ) -> BenchmarkRow:
        entry = self.dataset.entry(job_family, source_level, stage)
        factor = self.geo_adjustment(geo)
        approximated = source_level != job_level

        confidence = self.dataset.confidence
        provenance = self.dataset.source
        if approximated:
            confidence *= self.approximation_penalty
            provenance = f"{self.dataset.source} (approximated from {source_level.value})"

        return BenchmarkRow(
            job_family=job_family,
            job_level=job_level,
            stage=stage,
            geo=geo,
            salary=entry.salary.scaled(factor),
            equity_bps=entry.equity_bps,
            ote=entry.ote.scaled(factor) if entry.ote else None,
            confidence=confidence,
            source=self.dataset.source,
            as_of=self.dataset.as_of,
            approximated_from=source_level if approximated else None,
            provenance_note=provenance,
        )

    # ------------------------------------------------------------------ #
    # Geography
    # ------------------------------------------------------------------ #

    def geo_adjustment(self, geo: GeoMarket) -> float:
        return self.dataset.geo_adjustments.get(geo, 1.0)

    def employer_load(self, geo: GeoMarket) -> float:
        return self.dataset.employer_load_defaults.get(geo, DEFAULT_EMPLOYER_LOAD)

    # ------------------------------------------------------------------ #
    # Stage tables
    # ------------------------------------------------------------------ #

    def vesting_defaults(self, template: VestingTemplate = VestingTemplate.STANDARD) -> VestingSchedule:
        schedules = self.dataset.vesting_defaults
        return schedules.get(template, schedules[VestingTemplate.STANDARD])

    def vesting_defaults_for_level(self, job_level: JobLevel) -> VestingSchedule:
        """Executive template for VP and C-level, standard otherwise."""
        template = VestingTemplate.EXECUTIVE if job_level.is_executive else VestingTemplate.STANDARD
        return self.vesting_defaults(template)

    def typical_fd_range(self, stage: CompanyStage) -> FDRange:
        return self.dataset.stage_typical_fd_ranges[stage]

    def typical_fd_shares(self, stage: CompanyStage) -> int:
        return self.typical_fd_range(stage).typical

    def typical_pool_size(self, stage: CompanyStage) -> float:
        return self.dataset.stage_typical_pool_size[stage]

    def typical_valuation(self, stage: CompanyStage) -> float:
        return self.dataset.stage_typical_valuations[stage]

    def exit_scenarios(self, stage: CompanyStage) -> ExitScenarioSet:
        return self.dataset.exit_scenarios[stage]

    def offer_outcome_templates(self, stage: CompanyStage) -> List[OfferOutcomeTemplate]:
        """Four-outcome exit templates for a stage (seed templates if the stage has none)."""
        templates = self.dataset.offer_outcome_templates
        return templates.get(stage) or templates.get(CompanyStage.SEED, [])
