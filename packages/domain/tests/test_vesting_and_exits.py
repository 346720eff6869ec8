"""Tests for vesting amortization and the exit scenario engine."""

import pytest

from comp_domain.calc import (
    calculate_equity_value,
    calculate_vesting_schedule,
    discounted_scenario_value,
    exit_outcome_table,
    expected_value_band,
    probability_weighted_value,
    project_exit_outcomes,
    vesting_table,
    vesting_timeline,
    weighted_outcome_value,
)
from comp_domain.schemas import (
    CapTableSnapshot,
    ExitScenarioAssumptions,
    ExitScenarioSet,
    OfferOutcomeTemplate,
    VestingFrequency,
    VestingSchedule,
)


def scenario(multiple, dilution, years, weight) -> ExitScenarioAssumptions:
    return ExitScenarioAssumptions(
        exit_multiple=multiple,
        dilution_factor=dilution,
        years_to_liquidity=years,
        probability_weight=weight,
    )


SCENARIOS = ExitScenarioSet(
    low=scenario(0.5, 0.6, 5, 0.5),
    base=scenario(3.0, 0.65, 5, 0.35),
    high=scenario(10.0, 0.7, 6, 0.15),
)


# =============================================================================
# Vesting
# =============================================================================

class TestVestingSchedule:

    def test_standard_schedule(self):
        breakdown = calculate_vesting_schedule(4_800, VestingSchedule())

        assert breakdown.cliff_vest == 1_200
        assert breakdown.per_period_vest == pytest.approx(100)
        assert breakdown.vested_at(11) == 0
        assert breakdown.vested_at(12) == 1_200
        assert breakdown.vested_at(13) == 1_300
        assert breakdown.vested_at(48) == 4_800

    def test_vested_at_bounds(self):
        breakdown = calculate_vesting_schedule(4_800, VestingSchedule())
        assert breakdown.vested_at(0) == 0
        assert breakdown.vested_at(60) == 4_800

    @pytest.mark.parametrize(
        "grant,schedule",
        [
            (4_800, VestingSchedule()),
            (1_001, VestingSchedule(total_months=36, cliff_months=7, frequency=VestingFrequency.QUARTERLY)),
            (999, VestingSchedule(total_months=24, cliff_months=0)),
            (12_345, VestingSchedule(total_months=60, cliff_months=12, frequency=VestingFrequency.ANNUALLY)),
            (7, VestingSchedule(total_months=48, cliff_months=48)),
        ],
    )
    def test_cumulative_invariants(self, grant, schedule):
        vested = calculate_vesting_schedule(grant, schedule).vested_by_month

        assert len(vested) == schedule.total_months
        assert all(a <= b for a, b in zip(vested, vested[1:]))
        assert max(vested) <= grant
        assert vested[-1] == grant

    def test_quarterly_steps(self):
        schedule = VestingSchedule(total_months=48, cliff_months=12, frequency=VestingFrequency.QUARTERLY)
        breakdown = calculate_vesting_schedule(4_800, schedule)

        assert breakdown.vested_at(12) == 1_200
        assert breakdown.vested_at(14) == 1_200
        assert breakdown.vested_at(15) == 1_500

    def test_cliff_cannot_exceed_total(self):
        with pytest.raises(ValueError, match="cliff_months"):
            VestingSchedule(total_months=12, cliff_months=24)

    def test_vesting_table(self):
        table = vesting_table(4_800, VestingSchedule(), value_per_unit=2.0)

        assert list(table.columns) == ["month", "vested", "unvested", "vested_percent", "vested_value"]
        assert len(table) == 48
        last = table.iloc[-1]
        assert last["vested"] == 4_800
        assert last["unvested"] == 0
        assert last["vested_value"] == 9_600

    def test_vesting_timeline(self):
        points = vesting_timeline(4_800, VestingSchedule(), value_per_unit=1.5)

        assert [p.month for p in points] == [0, 6, 12, 18, 24, 30, 36, 42, 48]
        assert points[0].vested_shares == 0
        assert points[2].vested_shares == 1_200
        assert points[-1].vested_percent == 100.0
        assert points[-1].cumulative_value == 7_200

    def test_vesting_timeline_without_price(self):
        points = vesting_timeline(4_800, VestingSchedule())
        assert all(p.cumulative_value is None for p in points)


# =============================================================================
# Exit Scenarios
# =============================================================================

class TestExitScenarios:

    def test_discounted_scenario_value(self):
        """1% FD, $10M, 5x exit, 0.8 retained, 4 years at 10%."""
        value = discounted_scenario_value(1.0, 10_000_000, scenario(5, 0.8, 4, 0.5), 0.10)
        assert value == pytest.approx(273_205, abs=1)

    def test_no_discount(self):
        value = discounted_scenario_value(1.0, 10_000_000, scenario(5, 0.8, 4, 0.5), 0.0)
        assert value == pytest.approx(400_000)

    def test_band_endpoints_are_per_scenario_values(self):
        band = expected_value_band(0.5, 20_000_000, SCENARIOS, 0.10)

        for label, assumptions in SCENARIOS.items():
            expected = discounted_scenario_value(0.5, 20_000_000, assumptions, 0.10)
            assert getattr(band, label) == pytest.approx(expected)
        assert band.low < band.base < band.high

    def test_expected_value_is_weighted_mean(self):
        band = expected_value_band(0.5, 20_000_000, SCENARIOS, 0.10)

        weighted = band.low * 0.5 + band.base * 0.35 + band.high * 0.15
        assert band.expected_value == pytest.approx(weighted / 1.0)
        assert probability_weighted_value(band) == pytest.approx(band.expected_value)

    def test_weights_need_not_sum_to_one(self):
        doubled = ExitScenarioSet(
            low=scenario(0.5, 0.6, 5, 1.0),
            base=scenario(3.0, 0.65, 5, 0.7),
            high=scenario(10.0, 0.7, 6, 0.3),
        )
        band = expected_value_band(0.5, 20_000_000, SCENARIOS)
        doubled_band = expected_value_band(0.5, 20_000_000, doubled)

        assert doubled_band.expected_value == pytest.approx(band.expected_value)

    def test_deterministic(self):
        first = expected_value_band(0.4, 50_000_000, SCENARIOS)
        second = expected_value_band(0.4, 50_000_000, SCENARIOS)
        assert first == second

    def test_calculate_equity_value_uses_price_per_share(self):
        cap_table = CapTableSnapshot(
            fully_diluted_shares=10_000_000,
            option_pool_total=1_000_000,
            option_pool_remaining=500_000,
            current_price_per_share=0.75,
        )
        value = calculate_equity_value(0.5, 50_000, cap_table, SCENARIOS, 20_000_000)

        assert value.current_value == pytest.approx(37_500)
        assert value.expected_value_band.expected_value > 0

    def test_calculate_equity_value_derives_price_from_valuation(self):
        cap_table = CapTableSnapshot(
            fully_diluted_shares=10_000_000,
            option_pool_total=1_000_000,
            option_pool_remaining=500_000,
        )
        value = calculate_equity_value(0.5, 50_000, cap_table, SCENARIOS, 20_000_000)
        assert value.current_value == pytest.approx(100_000)


# =============================================================================
# Offer Outcome Table
# =============================================================================

TEMPLATES = [
    OfferOutcomeTemplate(name="Failure", description="Company fails", exit_multiple=0,
                         dilution_percent=0, years_to_exit=3, probability=0.5),
    OfferOutcomeTemplate(name="Moderate Exit", description="Successful exit", exit_multiple=5,
                         dilution_percent=50, years_to_exit=5, probability=0.5),
]


class TestExitOutcomes:

    def test_project_outcomes(self):
        outcomes = project_exit_outcomes(1.0, 10_000_000, 10_000, TEMPLATES)

        failure, moderate = outcomes
        assert failure.gross_equity_value == 0
        assert failure.net_equity_value == 0
        assert failure.annualized_return is None

        # 1% diluted by half of a $50M exit
        assert moderate.gross_equity_value == 250_000
        assert moderate.net_equity_value == 240_000
        assert moderate.annualized_return == pytest.approx(24 ** (1 / 5) - 1)

    def test_unknown_inputs_yield_zero(self):
        outcomes = project_exit_outcomes(None, None, 0, TEMPLATES)
        assert all(o.gross_equity_value == 0 for o in outcomes)

    def test_weighted_outcome_value(self):
        outcomes = project_exit_outcomes(1.0, 10_000_000, 10_000, TEMPLATES)
        assert weighted_outcome_value(outcomes) == 120_000

    def test_outcome_table(self):
        outcomes = project_exit_outcomes(1.0, 10_000_000, 10_000, TEMPLATES)
        table = exit_outcome_table(outcomes)

        assert list(table["name"]) == ["Failure", "Moderate Exit"]
        assert table["net_equity_value"].tolist() == [0, 240_000]

    def test_empty_outcome_table(self):
        table = exit_outcome_table([])
        assert table.empty
        assert "net_equity_value" in table.columns
