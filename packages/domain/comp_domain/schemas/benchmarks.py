"""Benchmark dataset and resolved benchmark row models.

The benchmark dataset is versioned static reference data. It is loaded once,
validated against ``BenchmarkDataset``, and injected into a
``BenchmarkResolver``. Swapping the dataset file is the only supported way to
update market data, so the field names here are the compatibility contract
across dataset versions.

Structure of the ``benchmarks`` table:

    family -> level -> stage -> BenchmarkEntry

A family or level may be absent; the resolver falls back along the
seniority ladder when a (family, level, stage) triple has no entry.
"""

from typing import Dict, List, Optional
from pydantic import Field, model_validator

from .base import DomainModel, Confidence, Rate
from .cap_table import VestingSchedule
from .enums import (
    CompanyStage,
    GeoMarket,
    JobFamily,
    JobLevel,
    VestingTemplate,
)
from .returns import ExitScenarioSet, OfferOutcomeTemplate


# =============================================================================
# Percentile Bands
# =============================================================================

class PercentileBands(DomainModel):
    """p25/p50/p75 percentile values of a market distribution.

    Invariant: p25 <= p50 <= p75
    """

    p25: float = Field(ge=0)
    p50: float = Field(ge=0)
    p75: float = Field(ge=0)

    @model_validator(mode="after")
    def validate_ordering(self):
        if not (self.p25 <= self.p50 <= self.p75):
            raise ValueError(
                f"Percentiles must be non-decreasing: p25={self.p25}, p50={self.p50}, p75={self.p75}"
            )
        return self

    def scaled(self, factor: float) -> "PercentileBands":
        """Return bands multiplied by factor and rounded to whole units."""
        return type(self)(
            p25=round(self.p25 * factor),
            p50=round(self.p50 * factor),
            p75=round(self.p75 * factor),
        )


class SalaryPercentiles(PercentileBands):
    """Annual base salary percentiles in dollars."""
    pass


class EquityPercentiles(PercentileBands):
    """Equity grant percentiles in basis points of fully diluted shares."""

    def as_percent_fd(self) -> "EquityPercentiles":
        """Same bands expressed as percent of FD (100 bps = 1%)."""
        return EquityPercentiles(p25=self.p25 / 100, p50=self.p50 / 100, p75=self.p75 / 100)


# =============================================================================
# Dataset Entries
# =============================================================================

class BenchmarkEntry(DomainModel):
    """Raw dataset entry for one (family, level, stage) triple, baseline geography."""

    salary: SalaryPercentiles
    equity_bps: EquityPercentiles
    ote: Optional[SalaryPercentiles] = Field(
        default=None,
        description="On-target earnings percentiles (sales roles)"
    )


class BenchmarkRow(DomainModel):
    """Resolved benchmark for a scenario key, geography-adjusted.

    Salary and OTE figures are adjusted by the geography multiplier and
    rounded to whole dollars. Equity percentiles are never adjusted.

    ``approximated_from`` is the level whose data was actually used when the
    exact level had no data (None for an exact match).
    """

    job_family: JobFamily
    job_level: JobLevel
    stage: CompanyStage
    geo: GeoMarket

    salary: SalaryPercentiles
    equity_bps: EquityPercentiles
    ote: Optional[SalaryPercentiles] = None

    confidence: Confidence
    source: str
    as_of: Optional[str] = None

    approximated_from: Optional[JobLevel] = None
    provenance_note: str = Field(
        description="Human-readable origin of the figures"
    )

    @property
    def is_approximated(self) -> bool:
        return self.approximated_from is not None


class FDRange(DomainModel):
    """Stage-typical fully diluted share count range."""

    min: int = Field(gt=0)
    typical: int = Field(gt=0)
    max: int = Field(gt=0)

    @model_validator(mode="after")
    def validate_range(self):
        if not (self.min <= self.typical <= self.max):
            raise ValueError(f"FD range must satisfy min <= typical <= max, got {self}")
        return self


# =============================================================================
# Dataset
# =============================================================================

class BenchmarkDataset(DomainModel):
    """Versioned benchmark reference dataset.

    Example (abridged JSON):
        {
          "version": "v1",
          "source": "Blended startup compensation survey",
          "confidence": 0.85,
          "geo_adjustments": {"sv": 1.0, "nyc": 0.98, ...},
          "benchmarks": {
            "engineering": {
              "senior": {
                "series-a": {
                  "salary": {"p25": 170000, "p50": 190000, "p75": 215000},
                  "equity_bps": {"p25": 25, "p50": 40, "p75": 60}
                }
              }
            }
          },
          ...
        }
    """

    version: str
    source: str
    as_of: Optional[str] = None
    confidence: Confidence
    baseline_geo: GeoMarket = GeoMarket.SV

    geo_adjustments: Dict[GeoMarket, float] = Field(
        description="Salary multiplier per geography, relative to the baseline market"
    )
    employer_load_defaults: Dict[GeoMarket, Rate] = Field(
        description="Employer payroll load rate per geography (taxes and benefits)"
    )
    vesting_defaults: Dict[VestingTemplate, VestingSchedule]

    stage_typical_fd_ranges: Dict[CompanyStage, FDRange]
    stage_typical_pool_size: Dict[CompanyStage, Rate]
    stage_typical_valuations: Dict[CompanyStage, float]

    exit_scenarios: Dict[CompanyStage, ExitScenarioSet]
    offer_outcome_templates: Dict[CompanyStage, List[OfferOutcomeTemplate]] = Field(
        default_factory=dict
    )

    benchmarks: Dict[JobFamily, Dict[JobLevel, Dict[CompanyStage, BenchmarkEntry]]]

    @model_validator(mode="after")
    def validate_stage_tables(self):
        """Every stage-keyed table must cover every stage."""
        stages = set(CompanyStage)
        for name in (
            "stage_typical_fd_ranges",
            "stage_typical_pool_size",
            "stage_typical_valuations",
            "exit_scenarios",
        ):
            missing = stages - set(getattr(self, name))
            if missing:
                raise ValueError(
                    f"{name} is missing stages: {sorted(s.value for s in missing)}"
                )
        if VestingTemplate.STANDARD not in self.vesting_defaults:
            raise ValueError("vesting_defaults must include the 'standard' template")
        return self

    def entry(
        self,
        job_family: JobFamily,
        job_level: JobLevel,
        stage: CompanyStage,
    ) -> Optional[BenchmarkEntry]:
        """Raw entry for an exact triple, or None."""
        return self.benchmarks.get(job_family, {}).get(job_level, {}).get(stage)
