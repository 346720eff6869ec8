"""Shared fixtures: a small in-memory benchmark dataset and resolver.

The dataset covers:
- engineering/senior at series-a: salary 120k/150k/180k, equity 20/40/60 bps
- engineering/staff and engineering/director at pre-seed (no principal row)
- engineering/mid at seed
Every stage table covers every stage so the dataset validates.
"""

import pytest

from comp_domain.benchmarks import BenchmarkResolver
from comp_domain.config import EngineSettings
from comp_domain.schemas import (
    BenchmarkDataset,
    CompanyStage,
    CompPackage,
    EquityType,
    PackageScores,
    PackageShape,
    VestingSchedule,
)

STAGES = [stage.value for stage in CompanyStage]

EXIT_SCENARIOS = {
    "low": {"exit_multiple": 0.5, "dilution_factor": 0.6, "years_to_liquidity": 5, "probability_weight": 0.5},
    "base": {"exit_multiple": 3.0, "dilution_factor": 0.65, "years_to_liquidity": 5, "probability_weight": 0.35},
    "high": {"exit_multiple": 10.0, "dilution_factor": 0.7, "years_to_liquidity": 6, "probability_weight": 0.15},
}

OUTCOME_TEMPLATES = [
    {"name": "Failure", "description": "Company fails", "exit_multiple": 0,
     "dilution_percent": 0, "years_to_exit": 3, "probability": 0.5},
    {"name": "Small Exit", "description": "Modest acquisition", "exit_multiple": 2,
     "dilution_percent": 50, "years_to_exit": 4, "probability": 0.3},
    {"name": "Moderate Exit", "description": "Successful exit", "exit_multiple": 5,
     "dilution_percent": 60, "years_to_exit": 6, "probability": 0.15},
    {"name": "Big Exit", "description": "Strong outcome", "exit_multiple": 15,
     "dilution_percent": 70, "years_to_exit": 7, "probability": 0.05},
]


def _entry(salary, equity_bps):
    return {
        "salary": dict(zip(("p25", "p50", "p75"), salary)),
        "equity_bps": dict(zip(("p25", "p50", "p75"), equity_bps)),
    }


DATASET = {
    "version": "test",
    "source": "Test survey",
    "as_of": "2024-Q4",
    "confidence": 0.9,
    "baseline_geo": "sv",
    "geo_adjustments": {"sv": 1.0, "nyc": 0.9},
    "employer_load_defaults": {"sv": 0.2, "nyc": 0.25},
    "vesting_defaults": {
        "standard": {"total_months": 48, "cliff_months": 12, "frequency": "monthly"},
        "executive": {"total_months": 48, "cliff_months": 6, "frequency": "monthly"},
    },
    "stage_typical_fd_ranges": {
        stage: {"min": 8_000_000, "typical": 10_000_000, "max": 12_000_000} for stage in STAGES
    },
    "stage_typical_pool_size": {stage: 0.15 for stage in STAGES},
    "stage_typical_valuations": {
        "pre-seed": 5_000_000,
        "seed": 15_000_000,
        "series-a": 50_000_000,
        "series-b": 150_000_000,
        "series-c+": 500_000_000,
    },
    "exit_scenarios": {stage: EXIT_SCENARIOS for stage in STAGES},
    "offer_outcome_templates": {"seed": OUTCOME_TEMPLATES},
    "benchmarks": {
        "engineering": {
            "mid": {"seed": _entry((110_000, 130_000, 150_000), (30, 50, 80))},
            "senior": {"series-a": _entry((120_000, 150_000, 180_000), (20, 40, 60))},
            "staff": {"pre-seed": _entry((160_000, 180_000, 200_000), (100, 150, 200))},
            "director": {"pre-seed": _entry((190_000, 220_000, 250_000), (150, 250, 350))},
        },
    },
}


@pytest.fixture
def dataset() -> BenchmarkDataset:
    return BenchmarkDataset.model_validate(DATASET)


@pytest.fixture
def resolver(dataset) -> BenchmarkResolver:
    return BenchmarkResolver(dataset)


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(discount_rate=0.10, approximation_penalty=0.8, estimate_penalty=0.9)


def make_package(**overrides) -> CompPackage:
    """A Balanced ISO package at 0.4% FD; override any field."""
    fields = dict(
        name="Balanced",
        shape=PackageShape.BALANCED,
        base_salary=150_000,
        bonus_target=15_000,
        equity_type=EquityType.ISO,
        equity_bps=40,
        equity_percent_fd=0.4,
        equity_option_count=40_000,
        vesting_schedule=VestingSchedule(),
        strike_price=0.5,
        employer_cost_annual=198_000,
        burn_delta_monthly=16_500,
        pool_impact_percent=4.0,
        pool_remaining_after=960_000,
        scores=PackageScores(),
    )
    fields.update(overrides)
    if "shape" in overrides and "name" not in overrides:
        fields["name"] = fields["shape"].display_name
    return CompPackage(**fields)


@pytest.fixture
def package_factory():
    return make_package
