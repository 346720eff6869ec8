"""Tests for benchmark resolution, percentile math and dataset loading."""

import json

import pytest

from comp_domain.benchmarks import (
    BenchmarkResolver,
    estimate_percentile,
    interpolate_percentile,
    load_dataset,
)
from comp_domain.errors import BenchmarkDatasetError, NoMarketDataError
from comp_domain.schemas import (
    BenchmarkDataset,
    CompanyStage,
    GeoMarket,
    JobFamily,
    JobLevel,
    PercentileBands,
)

BANDS = PercentileBands(p25=120_000, p50=150_000, p75=180_000)


# =============================================================================
# Percentile Math
# =============================================================================

class TestInterpolatePercentile:

    def test_median(self):
        assert interpolate_percentile(50, BANDS) == 150_000

    def test_clamped_above_p75(self):
        assert interpolate_percentile(90, BANDS) == 180_000

    def test_clamped_below_p25(self):
        assert interpolate_percentile(10, BANDS) == 120_000

    def test_band_edges(self):
        assert interpolate_percentile(25, BANDS) == BANDS.p25
        assert interpolate_percentile(75, BANDS) == BANDS.p75

    def test_linear_within_band(self):
        assert interpolate_percentile(40, BANDS) == pytest.approx(138_000)
        assert interpolate_percentile(60, BANDS) == pytest.approx(162_000)

    def test_monotonic(self):
        values = [interpolate_percentile(p, BANDS) for p in range(0, 101)]
        assert values == sorted(values)


class TestEstimatePercentile:

    def test_median(self):
        assert estimate_percentile(150_000, BANDS) == 50

    def test_inverse_of_interpolation(self):
        for percentile in (30, 45, 55, 70):
            value = interpolate_percentile(percentile, BANDS)
            assert estimate_percentile(value, BANDS) == pytest.approx(percentile)

    def test_below_p25_scales_from_zero(self):
        assert estimate_percentile(60_000, BANDS) == pytest.approx(12.5)

    def test_tail_span(self):
        # 27k above p75 with a 54k span adds half of 25 points
        assert estimate_percentile(207_000, BANDS, tail_span=54_000) == pytest.approx(87.5)

    def test_clamped(self):
        assert estimate_percentile(10_000_000, BANDS) == 99
        assert estimate_percentile(0, BANDS) == 0


def test_percentile_bands_must_be_ordered():
    with pytest.raises(ValueError, match="non-decreasing"):
        PercentileBands(p25=200, p50=100, p75=300)


# =============================================================================
# Resolver
# =============================================================================

class TestResolver:

    def test_exact_match(self, resolver):
        row = resolver.resolve(JobFamily.ENGINEERING, JobLevel.SENIOR, CompanyStage.SERIES_A)

        assert row.salary.p25 == 120_000
        assert row.salary.p50 == 150_000
        assert row.salary.p75 == 180_000
        assert row.confidence == pytest.approx(0.9)
        assert not row.is_approximated
        assert row.provenance_note == "Test survey"

    def test_adjacent_level_fallback(self, resolver):
        """Principal has no pre-seed row; staff (one below) is used."""
        row = resolver.resolve(JobFamily.ENGINEERING, JobLevel.PRINCIPAL, CompanyStage.PRE_SEED)

        assert row.job_level == JobLevel.PRINCIPAL
        assert row.approximated_from == JobLevel.STAFF
        assert row.salary.p50 == 180_000
        assert row.equity_bps.p50 == 150
        assert row.confidence == pytest.approx(0.9 * 0.8)
        assert "staff" in row.provenance_note

    def test_fallback_prefers_lower_level_on_tie(self, resolver):
        """Staff and director are both one step from principal; staff wins."""
        row = resolver.resolve(JobFamily.ENGINEERING, JobLevel.PRINCIPAL, CompanyStage.PRE_SEED)
        assert row.approximated_from == JobLevel.STAFF

    def test_fallback_walks_further_out(self, resolver):
        # Only mid has seed data, two levels below staff
        row = resolver.resolve(JobFamily.ENGINEERING, JobLevel.STAFF, CompanyStage.SEED)

        assert row.approximated_from == JobLevel.MID
        assert row.confidence < 0.9

    def test_fallback_confidence_below_exact(self, resolver):
        exact = resolver.resolve(JobFamily.ENGINEERING, JobLevel.SENIOR, CompanyStage.SERIES_A)
        approx = resolver.resolve(JobFamily.ENGINEERING, JobLevel.PRINCIPAL, CompanyStage.PRE_SEED)

        assert approx.confidence < exact.confidence
        assert approx.provenance_note

    def test_fallback_order(self):
        order = BenchmarkResolver._fallback_levels(JobLevel.SENIOR)
        assert order[:4] == [JobLevel.MID, JobLevel.STAFF, JobLevel.JUNIOR, JobLevel.PRINCIPAL]
        assert JobLevel.SENIOR not in order
        assert len(order) == len(JobLevel) - 1

    def test_custom_approximation_penalty(self, dataset):
        resolver = BenchmarkResolver(dataset, approximation_penalty=0.5)
        row = resolver.resolve(JobFamily.ENGINEERING, JobLevel.PRINCIPAL, CompanyStage.PRE_SEED)
        assert row.confidence == pytest.approx(0.45)

    def test_geo_adjusts_salary_only(self, resolver):
        row = resolver.resolve(
            JobFamily.ENGINEERING, JobLevel.SENIOR, CompanyStage.SERIES_A, GeoMarket.NYC
        )

        assert row.geo == GeoMarket.NYC
        assert row.salary.p50 == 135_000
        assert row.equity_bps.p50 == 40

    def test_unknown_geo_uses_baseline(self, resolver):
        row = resolver.resolve(
            JobFamily.ENGINEERING, JobLevel.SENIOR, CompanyStage.SERIES_A, GeoMarket.AUSTIN
        )
        assert row.salary.p50 == 150_000

    def test_no_data_returns_none(self, resolver):
        assert resolver.resolve(JobFamily.LEGAL, JobLevel.SENIOR, CompanyStage.SERIES_A) is None

    def test_no_data_raises(self, resolver):
        with pytest.raises(NoMarketDataError, match="legal / senior at series-a"):
            resolver.resolve_or_raise(JobFamily.LEGAL, JobLevel.SENIOR, CompanyStage.SERIES_A)

    def test_stage_tables(self, resolver):
        assert resolver.typical_fd_shares(CompanyStage.SEED) == 10_000_000
        assert resolver.typical_pool_size(CompanyStage.SEED) == pytest.approx(0.15)
        assert resolver.typical_valuation(CompanyStage.SERIES_B) == 150_000_000
        assert resolver.employer_load(GeoMarket.NYC) == pytest.approx(0.25)
        assert resolver.employer_load(GeoMarket.DENVER) == pytest.approx(0.25)

    def test_vesting_defaults_for_level(self, resolver):
        assert resolver.vesting_defaults_for_level(JobLevel.SENIOR).cliff_months == 12
        assert resolver.vesting_defaults_for_level(JobLevel.VP).cliff_months == 6

    def test_offer_templates_fall_back_to_seed(self, resolver):
        templates = resolver.offer_outcome_templates(CompanyStage.SERIES_B)
        assert [t.name for t in templates] == ["Failure", "Small Exit", "Moderate Exit", "Big Exit"]


# =============================================================================
# Dataset
# =============================================================================

class TestDataset:

    def test_bundled_dataset_loads(self):
        dataset = load_dataset()

        assert dataset.version == "v1"
        assert JobFamily.ENGINEERING in dataset.benchmarks
        assert set(dataset.exit_scenarios) == set(CompanyStage)

    def test_bundled_principal_falls_back_to_staff(self):
        resolver = BenchmarkResolver(load_dataset())
        row = resolver.resolve(JobFamily.ENGINEERING, JobLevel.PRINCIPAL, CompanyStage.PRE_SEED)

        assert row.approximated_from == JobLevel.STAFF
        assert row.confidence == pytest.approx(load_dataset().confidence * 0.8)

    def test_missing_file(self, tmp_path):
        with pytest.raises(BenchmarkDatasetError, match="Cannot read"):
            load_dataset(str(tmp_path / "missing.json"))

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"version": "broken"}))

        with pytest.raises(BenchmarkDatasetError, match="Invalid benchmark dataset"):
            load_dataset(str(path))

    def test_alternate_dataset_file(self, tmp_path, dataset):
        path = tmp_path / "alt.json"
        path.write_text(dataset.model_dump_json())

        loaded = load_dataset(str(path))
        assert loaded.version == "test"
        assert BenchmarkResolver(loaded).resolve(
            JobFamily.ENGINEERING, JobLevel.SENIOR, CompanyStage.SERIES_A
        ).salary.p50 == 150_000

    def test_stage_tables_must_cover_every_stage(self, dataset):
        raw = dataset.model_dump(mode="json")
        del raw["stage_typical_valuations"]["seed"]

        with pytest.raises(ValueError, match="stage_typical_valuations is missing stages"):
            BenchmarkDataset.model_validate(raw)
