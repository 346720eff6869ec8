"""Tests for the package optimizer.

Tests cover:
- Shape selection and priority nudges
- Best-fit override rules
- Rationale rule table
- generate_packages end to end against the fixture dataset
"""

from datetime import date

import pytest

from comp_domain.blocks import select_best_fit
from comp_domain.errors import NoMarketDataError
from comp_domain.optimizer import generate_packages
from comp_domain.rationale import build_rationale
from comp_domain.schemas import (
    CandidateContext,
    CapTableSnapshot,
    CompanyContext,
    CompanyStage,
    CompetingOffersLevel,
    Constraints,
    EquityType,
    JobFamily,
    JobLevel,
    PackageGenerationInput,
    PackageScores,
    PackageShape,
    Preferences,
    PriorityLevel,
    RiskFlagType,
    RiskTolerance,
    RoleProfile,
    TokenProgram,
)
from comp_domain.shapes import build_shape_configs, determine_equity_type

AS_OF = date(2024, 6, 1)


def scenario(
    stage=CompanyStage.SERIES_A,
    level=JobLevel.SENIOR,
    family=JobFamily.ENGINEERING,
    company=None,
    **fields,
) -> PackageGenerationInput:
    return PackageGenerationInput(
        company_context=CompanyContext(stage=stage, **(company or {})),
        role_profile=RoleProfile(job_family=family, job_level=level),
        **fields,
    )


def supplied_cap_table(**fields) -> CapTableSnapshot:
    defaults = dict(
        fully_diluted_shares=10_000_000,
        option_pool_total=1_500_000,
        option_pool_remaining=1_000_000,
        current_price_per_share=1.0,
        last_round_valuation=40_000_000,
    )
    defaults.update(fields)
    return CapTableSnapshot(**defaults)


# =============================================================================
# Shapes
# =============================================================================

class TestShapes:

    def test_default_shapes(self):
        configs = build_shape_configs(CandidateContext(), Preferences())
        assert [c.shape for c in configs] == [
            PackageShape.CASH_HEAVY,
            PackageShape.BALANCED,
            PackageShape.EQUITY_HEAVY,
        ]

    def test_competing_offers_add_closing_shape(self):
        configs = build_shape_configs(
            CandidateContext(competing_offers_level=CompetingOffersLevel.SOME), Preferences()
        )
        assert configs[-1].shape == PackageShape.CANDIDATE_CLOSING

    def test_token_overlay_requires_enabled_program_with_supply(self):
        enabled = TokenProgram(enabled=True, total_supply=1_000_000_000)
        disabled = TokenProgram(enabled=False, total_supply=1_000_000_000)
        no_supply = TokenProgram(enabled=True)

        def shapes(program):
            return [c.shape for c in build_shape_configs(CandidateContext(), Preferences(), program)]

        assert PackageShape.TOKEN_OVERLAY in shapes(enabled)
        assert PackageShape.TOKEN_OVERLAY not in shapes(disabled)
        assert PackageShape.TOKEN_OVERLAY not in shapes(no_supply)

    def test_cash_preservation_nudge(self):
        configs = build_shape_configs(
            CandidateContext(), Preferences(cash_preservation_priority=PriorityLevel.HIGH)
        )
        cash_heavy = configs[0]
        assert cash_heavy.salary_percentile == 55
        assert cash_heavy.equity_percentile == 40

    def test_nudges_are_clamped(self):
        configs = build_shape_configs(
            CandidateContext(),
            Preferences(
                cash_preservation_priority=PriorityLevel.HIGH,
                retention_priority=PriorityLevel.HIGH,
            ),
        )
        equity_heavy = configs[2]
        # 75 + 10 -> 85, then + 10 clamps at 85; salary 35 - 15 -> 20, + 10 -> 30
        assert equity_heavy.equity_percentile == 85
        assert equity_heavy.salary_percentile == 30

    @pytest.mark.parametrize(
        "stage,level,expected",
        [
            (CompanyStage.PRE_SEED, JobLevel.SENIOR, EquityType.ISO),
            (CompanyStage.SEED, JobLevel.C_LEVEL, EquityType.RESTRICTED_STOCK),
            (CompanyStage.SERIES_A, JobLevel.C_LEVEL, EquityType.ISO),
            (CompanyStage.SERIES_B, JobLevel.MID, EquityType.ISO),
            (CompanyStage.SERIES_C_PLUS, JobLevel.SENIOR, EquityType.RSU),
        ],
    )
    def test_equity_type(self, stage, level, expected):
        assert determine_equity_type(stage, level) == expected


# =============================================================================
# Best-Fit Selection
# =============================================================================

class TestSelectBestFit:

    @pytest.fixture
    def packages(self, package_factory):
        """Balanced ranks first; Equity-Heavy is easiest on cash."""
        return [
            package_factory(shape=PackageShape.BALANCED,
                            scores=PackageScores(overall_score=80, cash_feasibility=70)),
            package_factory(shape=PackageShape.CANDIDATE_CLOSING,
                            scores=PackageScores(overall_score=75, cash_feasibility=60)),
            package_factory(shape=PackageShape.CASH_HEAVY,
                            scores=PackageScores(overall_score=70, cash_feasibility=50)),
            package_factory(shape=PackageShape.EQUITY_HEAVY,
                            scores=PackageScores(overall_score=65, cash_feasibility=90)),
        ]

    def test_highest_score_by_default(self, packages):
        assert select_best_fit(packages, scenario()).shape == PackageShape.BALANCED

    def test_high_competition_prefers_closing(self, packages):
        inputs = scenario(candidate_context=CandidateContext(competing_offers_level=CompetingOffersLevel.HIGH))
        assert select_best_fit(packages, inputs).shape == PackageShape.CANDIDATE_CLOSING

    def test_cash_preservation_prefers_equity_heavy_when_cheaper(self, packages):
        inputs = scenario(preferences=Preferences(cash_preservation_priority=PriorityLevel.HIGH))
        assert select_best_fit(packages, inputs).shape == PackageShape.EQUITY_HEAVY

    def test_cash_preservation_keeps_pick_when_not_cheaper(self, packages, package_factory):
        packages[-1] = package_factory(
            shape=PackageShape.EQUITY_HEAVY,
            scores=PackageScores(overall_score=65, cash_feasibility=70),
        )
        inputs = scenario(preferences=Preferences(cash_preservation_priority=PriorityLevel.HIGH))
        assert select_best_fit(packages, inputs).shape == PackageShape.BALANCED

    def test_low_risk_tolerance_prefers_cash_heavy(self, packages):
        inputs = scenario(candidate_context=CandidateContext(risk_tolerance=RiskTolerance.LOW))
        assert select_best_fit(packages, inputs).shape == PackageShape.CASH_HEAVY

    def test_later_rule_overwrites_earlier(self, packages):
        inputs = scenario(candidate_context=CandidateContext(
            competing_offers_level=CompetingOffersLevel.HIGH,
            risk_tolerance=RiskTolerance.LOW,
        ))
        assert select_best_fit(packages, inputs).shape == PackageShape.CASH_HEAVY

    def test_missing_shape_keeps_current_pick(self, packages):
        without_closing = [p for p in packages if p.shape != PackageShape.CANDIDATE_CLOSING]
        inputs = scenario(candidate_context=CandidateContext(competing_offers_level=CompetingOffersLevel.HIGH))
        assert select_best_fit(without_closing, inputs).shape == PackageShape.BALANCED


# =============================================================================
# Rationale
# =============================================================================

def test_rationale_is_built_from_matching_rules(package_factory):
    package = package_factory(scores=PackageScores(market_competitiveness=80))
    rationale = build_rationale(
        package,
        CandidateContext(competing_offers_level=CompetingOffersLevel.HIGH),
        Preferences(retention_priority=PriorityLevel.HIGH),
    )

    assert rationale == (
        "Offers a balanced mix of competitive cash compensation and meaningful equity upside. "
        "Structured to compete effectively against other offers. "
        "Vesting structure designed for long-term retention. "
        "Above-market positioning to attract top talent."
    )


# =============================================================================
# generate_packages
# =============================================================================

class TestGeneratePackages:

    def test_default_scenario(self, resolver, settings):
        result = generate_packages(scenario(), resolver, settings, as_of=AS_OF)

        assert len(result.packages) == 3
        overall = [p.scores.overall_score for p in result.packages]
        assert overall == sorted(overall, reverse=True)

        recommended = [p for p in result.packages if p.is_recommended]
        assert recommended == [result.best_fit_package]
        assert result.best_fit_package.recommendation_rationale.endswith(".")

    def test_estimates_are_noted(self, resolver, settings):
        result = generate_packages(scenario(), resolver, settings, as_of=AS_OF)

        assert result.confidence_notes == [
            "Cap table estimated from typical series-a company data. "
            "Provide actual cap table for more accurate calculations.",
            "Company valuation estimated from typical series-a valuations.",
        ]
        # 0.9 benchmark confidence, two estimated inputs at 0.9 each
        assert result.confidence_score == 73

    def test_supplied_cap_table(self, resolver, settings):
        inputs = scenario(company={"cap_table": supplied_cap_table()})
        result = generate_packages(inputs, resolver, settings, as_of=AS_OF)

        assert result.confidence_notes == []
        assert result.confidence_score == 90
        balanced = result.package(PackageShape.BALANCED)
        assert balanced.strike_price == 1.0
        assert balanced.current_equity_value == pytest.approx(40_000)

    def test_approximated_benchmark_is_noted(self, resolver, settings):
        inputs = scenario(
            stage=CompanyStage.PRE_SEED,
            level=JobLevel.PRINCIPAL,
            company={"cap_table": supplied_cap_table()},
        )
        result = generate_packages(inputs, resolver, settings, as_of=AS_OF)

        assert result.confidence_notes == [
            "Benchmark data: Test survey (approximated from staff)",
            "Benchmark data confidence: 72%",
        ]
        assert result.confidence_score == 72
        assert result.market_benchmarks.salary_percentiles.p50 == 180_000
        assert result.market_benchmarks.equity_percentiles.p50 == pytest.approx(1.5)

    def test_no_market_data(self, resolver, settings):
        with pytest.raises(NoMarketDataError):
            generate_packages(scenario(family=JobFamily.LEGAL), resolver, settings)

    def test_max_equity_percent_caps_grants(self, resolver, settings):
        inputs = scenario(constraints=Constraints(max_equity_percent=0.25))
        result = generate_packages(inputs, resolver, settings, as_of=AS_OF)

        assert all(p.equity_percent_fd <= 0.25 for p in result.packages)
        assert result.package(PackageShape.EQUITY_HEAVY).equity_percent_fd == pytest.approx(0.25)

    def test_budget_ceiling_lowers_cash_feasibility(self, resolver, settings):
        inputs = scenario(constraints=Constraints(cash_budget_ceiling=150_000))
        result = generate_packages(inputs, resolver, settings, as_of=AS_OF)

        assert all(p.scores.cash_feasibility < 100 for p in result.packages)

    def test_high_competition_recommends_closing(self, resolver, settings):
        inputs = scenario(candidate_context=CandidateContext(competing_offers_level=CompetingOffersLevel.HIGH))
        result = generate_packages(inputs, resolver, settings, as_of=AS_OF)

        assert len(result.packages) == 4
        assert result.best_fit_package.shape == PackageShape.CANDIDATE_CLOSING
        assert "compete effectively" in result.best_fit_package.recommendation_rationale

    def test_token_overlay_sized_with_remaining_pool(self, resolver, settings):
        program = TokenProgram(
            enabled=True,
            total_supply=1_000_000_000,
            incentive_pool_size=200_000_000,
            remaining_pool=100_000_000,
        )
        result = generate_packages(scenario(token_program=program), resolver, settings, as_of=AS_OF)

        token = result.package(PackageShape.TOKEN_OVERLAY)
        assert token is not None
        assert token.token_amount > 0
        assert token.token_vesting_schedule == token.vesting_schedule

    def test_token_overlay_without_remaining_pool(self, resolver, settings):
        program = TokenProgram(enabled=True, total_supply=1_000_000_000)
        result = generate_packages(scenario(token_program=program), resolver, settings, as_of=AS_OF)

        assert result.package(PackageShape.TOKEN_OVERLAY).token_amount is None
        assert result.confidence_notes[-1] == (
            "Token Overlay package has no token amount: token pool remaining was not provided."
        )

    def test_token_overlay_with_exhausted_pool(self, resolver, settings):
        program = TokenProgram(enabled=True, total_supply=1_000_000_000, remaining_pool=0)
        result = generate_packages(scenario(token_program=program), resolver, settings, as_of=AS_OF)

        assert result.package(PackageShape.TOKEN_OVERLAY).token_amount is None
        assert result.confidence_notes[-1] == (
            "Token Overlay package has no token amount: the token incentive pool is exhausted."
        )
        assert not any("not provided" in note for note in result.confidence_notes)

    def test_comparison_table(self, resolver, settings):
        result = generate_packages(scenario(), resolver, settings, as_of=AS_OF)

        table = result.comparison
        assert list(table["name"]) == [p.name for p in result.packages]
        assert table.loc[table["name"] == "Balanced", "base_salary"].item() == 150_000
        assert "comparison" not in result.model_dump()

    def test_risk_flags_for_recommended_package(self, resolver, settings):
        inputs = scenario(company={"cap_table": supplied_cap_table(last_409a_date=date(2022, 1, 1))})
        result = generate_packages(inputs, resolver, settings, as_of=AS_OF)

        assert result.risk_flags[0].type == RiskFlagType.VALUATION_409A
        assert result.risk_flags[0].action_required is not None

    def test_deterministic(self, resolver, settings):
        first = generate_packages(scenario(), resolver, settings, as_of=AS_OF)
        second = generate_packages(scenario(), resolver, settings, as_of=AS_OF)

        assert first.model_dump() == second.model_dump()
