"""Tests for PackageSheetRenderer.

Builds real optimizer and offer-scorer results over the bundled benchmark
dataset, renders them, and reads the workbook back with openpyxl.
"""

from datetime import date

import pytest
from openpyxl import load_workbook

from comp_domain import (
    BenchmarkResolver,
    EngineSettings,
    generate_packages,
    load_dataset,
    score_offer,
)
from comp_domain.schemas import (
    AccelerationProvision,
    CashOffer,
    CompanyContext,
    CompanyDetails,
    CompanyStage,
    ConfidenceLevel,
    EmployeeBackground,
    EquityOffer,
    ExercisePeriod,
    JobFamily,
    JobLevel,
    OfferInput,
    PackageGenerationInput,
    RoleProfile,
    WorkbookCFG,
)
from comp_excel import PackageSheetRenderer


SETTINGS = EngineSettings(discount_rate=0.10, approximation_penalty=0.8, estimate_penalty=0.9)


# =============================================================================
# Test Data Builders
# =============================================================================

@pytest.fixture(scope="module")
def resolver() -> BenchmarkResolver:
    return BenchmarkResolver(load_dataset())


@pytest.fixture(scope="module")
def package_result(resolver):
    inputs = PackageGenerationInput(
        company_context=CompanyContext(stage=CompanyStage.SERIES_A),
        role_profile=RoleProfile(job_family=JobFamily.ENGINEERING, job_level=JobLevel.SENIOR),
    )
    return generate_packages(inputs, resolver, SETTINGS, as_of=date(2024, 6, 1))


def build_offer(equity: EquityOffer) -> OfferInput:
    return OfferInput(
        background=EmployeeBackground(job_family=JobFamily.ENGINEERING, job_level=JobLevel.SENIOR),
        company=CompanyDetails(stage=CompanyStage.SERIES_A),
        cash=CashOffer(base_salary=175_000),
        equity=equity,
    )


@pytest.fixture(scope="module")
def known_offer_result(resolver):
    equity = EquityOffer(
        share_count=30_000,
        total_shares_outstanding=15_000_000,
        total_shares_confidence=ConfidenceLevel.KNOWN,
        strike_price=1.0,
        latest_valuation=50_000_000,
        exercise_period=ExercisePeriod.YEARS_10,
        acceleration_provision=AccelerationProvision.DOUBLE_TRIGGER,
    )
    return score_offer(build_offer(equity), resolver, SETTINGS)


@pytest.fixture(scope="module")
def unknown_offer_result(resolver):
    return score_offer(build_offer(EquityOffer()), resolver, SETTINGS)


def render(tmp_path, **config):
    path = tmp_path / "comp.xlsx"
    PackageSheetRenderer(WorkbookCFG(label="Senior Engineer - Series A", **config)).render(str(path))
    return load_workbook(path)


def column_a(sheet):
    return [sheet.cell(row=row, column=1).value for row in range(1, sheet.max_row + 1)]


# =============================================================================
# Workbook Structure
# =============================================================================

class TestWorkbookStructure:

    def test_all_sheets(self, tmp_path, package_result, known_offer_result):
        wb = render(tmp_path, packages=package_result, offer=known_offer_result)
        assert wb.sheetnames == ["Packages", "Benchmarks", "Vesting", "Risk Flags", "Offer"]

    def test_optional_sheets_skipped(self, tmp_path, package_result):
        wb = render(
            tmp_path,
            packages=package_result,
            include_benchmarks_sheet=False,
            include_vesting_sheet=False,
            include_risk_flags_sheet=False,
        )
        assert wb.sheetnames == ["Packages"]

    def test_offer_only(self, tmp_path, known_offer_result):
        wb = render(tmp_path, offer=known_offer_result)
        assert wb.sheetnames == ["Offer"]

    def test_config_requires_content(self):
        with pytest.raises(ValueError, match="needs a package result"):
            WorkbookCFG()

    def test_render_returns_path(self, tmp_path, package_result):
        path = str(tmp_path / "out.xlsx")
        renderer = PackageSheetRenderer(WorkbookCFG(packages=package_result))
        assert renderer.render(path) == path


# =============================================================================
# Packages Sheet
# =============================================================================

class TestPackagesSheet:

    def test_title_and_header(self, tmp_path, package_result):
        sheet = render(tmp_path, packages=package_result)["Packages"]

        assert sheet["A1"].value == "Package Comparison - Senior Engineer - Series A"
        assert sheet["A3"].value == "Metric"
        assert sheet.freeze_panes == "B4"

        headers = [sheet.cell(row=3, column=col).value for col in range(2, len(package_result.packages) + 2)]
        recommended = f"{package_result.best_fit_package.name} (Recommended)"
        assert recommended in headers
        assert sum(1 for h in headers if h.endswith("(Recommended)")) == 1

    def test_columns_follow_package_order(self, tmp_path, package_result):
        sheet = render(tmp_path, packages=package_result)["Packages"]

        for idx, package in enumerate(package_result.packages):
            header = sheet.cell(row=3, column=idx + 2).value
            assert header.startswith(package.name)

    def test_values_match_packages(self, tmp_path, package_result):
        sheet = render(tmp_path, packages=package_result)["Packages"]
        labels = column_a(sheet)

        salary_row = labels.index("Base Salary") + 1
        equity_row = labels.index("Equity (% FD)") + 1
        overall_row = labels.index("Overall") + 1
        for idx, package in enumerate(package_result.packages):
            col = idx + 2
            assert sheet.cell(row=salary_row, column=col).value == pytest.approx(package.base_salary, abs=1)
            # Percents are stored as fractions for Excel formatting
            assert sheet.cell(row=equity_row, column=col).value == pytest.approx(package.equity_percent_fd / 100, abs=1e-6)
            assert sheet.cell(row=overall_row, column=col).value == pytest.approx(package.scores.overall_score)

    def test_rationale_written(self, tmp_path, package_result):
        sheet = render(tmp_path, packages=package_result)["Packages"]
        labels = column_a(sheet)

        row = labels.index("Recommendation") + 1
        assert sheet.cell(row=row + 1, column=1).value == package_result.best_fit_package.recommendation_rationale


# =============================================================================
# Supporting Sheets
# =============================================================================

class TestSupportingSheets:

    def test_benchmarks_sheet(self, tmp_path, package_result):
        sheet = render(tmp_path, packages=package_result)["Benchmarks"]
        market = package_result.market_benchmarks

        assert sheet["A1"].value == "Market Benchmarks - Senior Engineer - Series A"
        assert [sheet.cell(row=r, column=1).value for r in (4, 5, 6)] == ["P25", "P50", "P75"]
        assert sheet["B5"].value == pytest.approx(market.salary_percentiles.p50)
        assert sheet["C5"].value == pytest.approx(market.equity_percentiles.p50 / 100)
        assert sheet["B9"].value == pytest.approx(package_result.confidence_score)

        # Default run estimates the cap table, so notes are present
        labels = column_a(sheet)
        for note in package_result.confidence_notes:
            assert note in labels

    def test_vesting_sheet(self, tmp_path, package_result):
        sheet = render(tmp_path, packages=package_result)["Vesting"]
        best = package_result.best_fit_package
        months = best.vesting_schedule.total_months

        assert sheet["A1"].value == f"Vesting - {best.name} Package"
        assert sheet.freeze_panes == "A4"
        assert sheet.cell(row=4, column=1).value == 1
        last = 3 + months
        assert sheet.cell(row=last, column=1).value == months
        assert sheet.cell(row=last, column=2).value == best.equity_option_count
        assert sheet.cell(row=last, column=3).value == 0

    def test_risk_flags_sheet(self, tmp_path, package_result):
        sheet = render(tmp_path, packages=package_result)["Risk Flags"]
        best = package_result.best_fit_package

        assert sheet["A1"].value == f"Risk Flags - {best.name} Package"
        assert sheet["A3"].value == "Severity"
        titles = [sheet.cell(row=row, column=2).value for row in range(4, sheet.max_row + 1)]
        for flag in package_result.risk_flags:
            assert flag.title in titles


# =============================================================================
# Offer Sheet
# =============================================================================

class TestOfferSheet:

    def test_known_equity(self, tmp_path, known_offer_result):
        sheet = render(tmp_path, offer=known_offer_result)["Offer"]
        labels = column_a(sheet)

        assert sheet["A1"].value == "Offer Evaluation - Senior Engineer - Series A"
        assert sheet["A3"].value == known_offer_result.overall_score.headline

        equity_row = labels.index("Equity") + 1
        assert sheet.cell(row=equity_row, column=2).value == pytest.approx(known_offer_result.equity_score.score)

        assert "Exit Outcomes" in labels
        for outcome in known_offer_result.exit_outcomes:
            assert outcome.name in labels

        weighted_row = labels.index("Probability-Weighted Value") + 1
        assert sheet.cell(row=weighted_row, column=6).value == pytest.approx(
            known_offer_result.probability_weighted_value
        )

    def test_unknown_equity_score(self, tmp_path, unknown_offer_result):
        sheet = render(tmp_path, offer=unknown_offer_result)["Offer"]
        labels = column_a(sheet)

        equity_row = labels.index("Equity") + 1
        assert sheet.cell(row=equity_row, column=2).value == "Unknown"
        assert "Exit Outcomes" not in labels
        assert "Missing Data" in labels

    def test_analysis_confidence(self, tmp_path, unknown_offer_result):
        sheet = render(tmp_path, offer=unknown_offer_result)["Offer"]
        labels = column_a(sheet)

        row = labels.index("Analysis Confidence") + 1
        assert sheet.cell(row=row, column=2).value == pytest.approx(unknown_offer_result.analysis_confidence)
