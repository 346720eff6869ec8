"""Package comparison renderer: one sheet per view, values only (no formulas)."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from comp_domain.blocks import comparison_table
from comp_domain.calc import exit_outcome_table, vesting_table
from comp_domain.schemas import (
    CompPackage,
    OfferScoreResult,
    PackageGenerationResult,
    WorkbookCFG,
)

# (row label, comparison column, number format)
PACKAGE_ROWS: List[Tuple[str, str, str]] = [
    ("Base Salary", "base_salary", "$#,##0"),
    ("Bonus Target", "bonus_target", "$#,##0"),
    ("Total Cash", "total_cash", "$#,##0"),
    ("Equity Type", "equity_type", "@"),
    ("Equity (% FD)", "equity_percent_fd", "0.000%"),
    ("Options / Shares", "equity_option_count", "#,##0"),
    ("Employer Cost (Annual)", "employer_cost_annual", "$#,##0"),
    ("Burn Delta (Monthly)", "burn_delta_monthly", "$#,##0"),
    ("Pool Impact", "pool_impact_percent", "0.0%"),
    ("Current Equity Value", "current_equity_value", "$#,##0"),
    ("Expected Equity Value", "expected_value", "$#,##0"),
]

SCORE_ROWS: List[Tuple[str, str]] = [
    ("Market Competitiveness", "market_competitiveness"),
    ("Cash Feasibility", "cash_feasibility"),
    ("Dilution", "dilution_score"),
    ("Retention", "retention_score"),
    ("Overall", "overall_score"),
]

# Comparison columns holding percents (0.5 = 0.5%) that Excel expects as fractions
PERCENT_COLUMNS = {"equity_percent_fd", "pool_impact_percent"}

SEVERITY_COLORS = {
    "critical": "C00000",
    "warning": "C65911",
    "info": "1F4E78",
    "neutral": "595959",
    "positive": "006400",
}


class PackageSheetRenderer:
    """Render package results and offer scores into a comparison workbook."""

    def __init__(self, config: WorkbookCFG):
        self.config = config

        self.bold_font = Font(bold=True)
        self.title_font = Font(size=14, bold=True)
        self.note_font = Font(italic=True, color="595959")

        # Header styling
        self.header_font = Font(bold=True, color="FFFFFF")  # White text on dark blue
        self.header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")

        # Section header styling
        self.section_header_font = Font(italic=True, bold=True)
        self.section_header_fill = PatternFill(start_color="E7E6E6", end_color="E7E6E6", fill_type="solid")

        # Recommended package column
        self.recommended_fill = PatternFill(start_color="E2EFDA", end_color="E2EFDA", fill_type="solid")

        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        self.center_align = Alignment(horizontal='center', vertical='center')
        self.wrap_align = Alignment(wrap_text=True, vertical='top')

    def render(self, output_path: str) -> str:
        wb = self.build_workbook()
        wb.save(output_path)
        return output_path

    def build_workbook(self) -> Workbook:
        wb = Workbook()
        wb.remove(wb.active)

        result = self.config.packages
        if result is not None:
            self._render_packages_sheet(wb, result)
            if self.config.include_benchmarks_sheet:
                self._render_benchmarks_sheet(wb, result)
            if self.config.include_vesting_sheet:
                self._render_vesting_sheet(wb, result.best_fit_package)
            if self.config.include_risk_flags_sheet:
                self._render_risk_flags_sheet(wb, result)

        if self.config.offer is not None:
            self._render_offer_sheet(wb, self.config.offer)

        return wb

    # ------------------------------------------------------------------ #
    # Packages
    # ------------------------------------------------------------------ #

    def _render_packages_sheet(self, wb: Workbook, result: PackageGenerationResult) -> None:
        sheet = self._new_sheet(wb, "Packages", f"Package Comparison - {self.config.label}")

        table = result.comparison if result.comparison is not None else comparison_table(result.packages)
        recommended_name = result.best_fit_package.name

        row = 3
        self._write_header(sheet, row, ["Metric"] + list(table["name"]))
        recommended = {idx for idx, name in enumerate(table["name"]) if name == recommended_name}
        for idx in recommended:
            sheet.cell(row=row, column=idx + 2).value = f"{recommended_name} (Recommended)"
        row += 1

        row = self._write_section(sheet, row, "Compensation", len(table) + 1)
        for label, column, number_format in PACKAGE_ROWS:
            sheet.cell(row=row, column=1, value=label)
            for idx, value in enumerate(table[column]):
                if pd.isna(value):
                    value = None
                elif column in PERCENT_COLUMNS:
                    value = value / 100
                cell = sheet.cell(row=row, column=idx + 2, value=value)
                cell.number_format = number_format
                cell.border = self.thin_border
                if idx in recommended:
                    cell.fill = self.recommended_fill
            row += 1

        row += 1
        row = self._write_section(sheet, row, "Scores (0-100)", len(table) + 1)
        for label, column in SCORE_ROWS:
            label_cell = sheet.cell(row=row, column=1, value=label)
            if column == "overall_score":
                label_cell.font = self.bold_font
            for idx, value in enumerate(table[column]):
                cell = sheet.cell(row=row, column=idx + 2, value=float(value))
                cell.number_format = "0.0"
                cell.border = self.thin_border
                if idx in recommended:
                    cell.fill = self.recommended_fill
            row += 1

        row += 1
        sheet.cell(row=row, column=1, value="Recommendation").font = self.bold_font
        rationale = sheet.cell(row=row + 1, column=1, value=result.best_fit_package.recommendation_rationale)
        rationale.alignment = self.wrap_align

        sheet.freeze_panes = "B4"
        sheet.column_dimensions["A"].width = 26
        for idx in range(len(table)):
            sheet.column_dimensions[self._col_letter(idx + 2)].width = 22

    # ------------------------------------------------------------------ #
    # Benchmarks
    # ------------------------------------------------------------------ #

    def _render_benchmarks_sheet(self, wb: Workbook, result: PackageGenerationResult) -> None:
        sheet = self._new_sheet(wb, "Benchmarks", f"Market Benchmarks - {self.config.label}")
        market = result.market_benchmarks

        self._write_header(sheet, 3, ["Percentile", "Base Salary", "Equity (% FD)"])
        for offset, label in enumerate(["p25", "p50", "p75"]):
            row = 4 + offset
            sheet.cell(row=row, column=1, value=label.upper())
            salary_cell = sheet.cell(row=row, column=2, value=getattr(market.salary_percentiles, label))
            salary_cell.number_format = "$#,##0"
            equity_cell = sheet.cell(row=row, column=3, value=getattr(market.equity_percentiles, label) / 100)
            equity_cell.number_format = "0.000%"

        row = 8
        sheet.cell(row=row, column=1, value="Source").font = self.bold_font
        sheet.cell(row=row, column=2, value=market.provenance_note)
        sheet.cell(row=row + 1, column=1, value="Confidence Score").font = self.bold_font
        sheet.cell(row=row + 1, column=2, value=result.confidence_score).number_format = "0"

        row += 3
        row = self._write_section(sheet, row, "Confidence Notes", 3)
        if not result.confidence_notes:
            sheet.cell(row=row, column=1, value="None").font = self.note_font
        for note in result.confidence_notes:
            cell = sheet.cell(row=row, column=1, value=note)
            cell.font = self.note_font
            row += 1

        sheet.column_dimensions["A"].width = 20
        sheet.column_dimensions["B"].width = 18
        sheet.column_dimensions["C"].width = 16

    # ------------------------------------------------------------------ #
    # Vesting
    # ------------------------------------------------------------------ #

    def _render_vesting_sheet(self, wb: Workbook, package: CompPackage) -> None:
        sheet = self._new_sheet(wb, "Vesting", f"Vesting - {package.name} Package")

        price = None
        if package.current_equity_value is not None and package.equity_option_count:
            price = package.current_equity_value / package.equity_option_count

        table = vesting_table(package.equity_option_count, package.vesting_schedule, value_per_unit=price)
        headers = ["Month", "Vested", "Unvested", "Vested %"]
        formats = ["0", "#,##0", "#,##0", "0.0%"]
        if "vested_value" in table.columns:
            headers.append("Vested Value")
            formats.append("$#,##0")

        self._write_header(sheet, 3, headers)
        for offset, record in enumerate(table.itertuples(index=False)):
            row = 4 + offset
            values = [record.month, record.vested, record.unvested, record.vested_percent / 100]
            if "vested_value" in table.columns:
                values.append(record.vested_value)
            for col, (value, number_format) in enumerate(zip(values, formats), start=1):
                cell = sheet.cell(row=row, column=col, value=value)
                cell.number_format = number_format

        sheet.freeze_panes = "A4"
        for col in range(1, len(headers) + 1):
            sheet.column_dimensions[self._col_letter(col)].width = 14

    # ------------------------------------------------------------------ #
    # Risk Flags
    # ------------------------------------------------------------------ #

    def _render_risk_flags_sheet(self, wb: Workbook, result: PackageGenerationResult) -> None:
        sheet = self._new_sheet(wb, "Risk Flags", f"Risk Flags - {result.best_fit_package.name} Package")
        rows = [
            (flag.severity, [flag.severity.value.title(), flag.title, flag.description, flag.action_required])
            for flag in result.risk_flags
        ]
        self._write_flag_rows(sheet, 3, ["Severity", "Flag", "Description", "Action Required"], rows)
        self._set_widths(sheet, [12, 32, 70, 50])

    # ------------------------------------------------------------------ #
    # Offer
    # ------------------------------------------------------------------ #

    def _render_offer_sheet(self, wb: Workbook, offer: OfferScoreResult) -> None:
        sheet = self._new_sheet(wb, "Offer", f"Offer Evaluation - {self.config.label}")
        overall = offer.overall_score

        sheet.cell(row=3, column=1, value=overall.headline).font = self.bold_font
        paragraph = sheet.cell(row=4, column=1, value=overall.paragraph)
        paragraph.alignment = self.wrap_align

        row = 6
        self._write_header(sheet, row, ["Component", "Score", "Verdict"])
        components = [
            ("Cash", offer.cash_score.score, offer.cash_score.verdict),
            ("Equity", offer.equity_score.score, offer.equity_score.verdict),
            ("Terms", offer.terms_score.score, offer.terms_score.verdict),
            (f"Overall ({overall.category.value})", overall.score, overall.headline),
        ]
        for label, score, verdict in components:
            row += 1
            sheet.cell(row=row, column=1, value=label)
            # Unknown scores stay blank rather than showing zero
            score_cell = sheet.cell(row=row, column=2, value=score if score is not None else "Unknown")
            score_cell.number_format = "0"
            sheet.cell(row=row, column=3, value=verdict)

        row += 2
        row = self._write_section(sheet, row, "Term Details", 4)
        self._write_header(sheet, row, ["Term", "Value", "Assessment", "Impact"])
        for detail in offer.terms_score.detail_breakdown:
            row += 1
            for col, value in enumerate([detail.term, detail.value, detail.assessment, detail.impact], start=1):
                sheet.cell(row=row, column=col, value=value)

        row += 2
        row = self._write_section(sheet, row, "Flags", 4)
        flag_rows = [
            (flag.severity, [flag.severity.value.title(), flag.title, flag.description, flag.recommendation])
            for flag in offer.flags
        ]
        row = self._write_flag_rows(sheet, row, ["Severity", "Flag", "Description", "Recommendation"], flag_rows)

        if offer.missing_data_warnings:
            row += 1
            row = self._write_section(sheet, row, "Missing Data", 4)
            self._write_header(sheet, row, ["Importance", "Item", "Impact", "Question to Ask"])
            for warning in offer.missing_data_warnings:
                row += 1
                values = [warning.importance.value.title(), warning.display_name, warning.impact, warning.question_to_ask]
                for col, value in enumerate(values, start=1):
                    sheet.cell(row=row, column=col, value=value).alignment = self.wrap_align
            row += 1

        if offer.exit_outcomes:
            row += 1
            row = self._write_section(sheet, row, "Exit Outcomes", 6)
            table = exit_outcome_table(offer.exit_outcomes)
            self._write_header(sheet, row, ["Outcome", "Exit Multiple", "Probability", "Gross Value", "Exercise Cost", "Net Value"])
            for record in table.itertuples(index=False):
                row += 1
                values = [
                    (record.name, "@"),
                    (record.exit_multiple, "0.0\"x\""),
                    (record.probability, "0%"),
                    (record.gross_equity_value, "$#,##0"),
                    (record.exercise_cost, "$#,##0"),
                    (record.net_equity_value, "$#,##0"),
                ]
                for col, (value, number_format) in enumerate(values, start=1):
                    sheet.cell(row=row, column=col, value=value).number_format = number_format
            row += 1
            sheet.cell(row=row, column=1, value="Probability-Weighted Value").font = self.bold_font
            weighted = sheet.cell(row=row, column=6, value=offer.probability_weighted_value)
            weighted.number_format = "$#,##0"
            weighted.font = self.bold_font
            row += 1

        row += 1
        sheet.cell(row=row, column=1, value="Analysis Confidence").font = self.bold_font
        sheet.cell(row=row, column=2, value=offer.analysis_confidence).number_format = "0"
        for note in offer.confidence_notes:
            row += 1
            sheet.cell(row=row, column=1, value=note).font = self.note_font

        self._set_widths(sheet, [30, 28, 60, 45, 14, 14])

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _new_sheet(self, wb: Workbook, name: str, title: str) -> Worksheet:
        sheet = wb.create_sheet(title=name[:31])
        sheet.sheet_properties.pageSetUpPr.fitToPage = True
        sheet.sheet_view.showGridLines = False

        title_cell = sheet["A1"]
        title_cell.value = title
        title_cell.font = self.title_font
        return sheet

    def _write_header(self, sheet: Worksheet, row: int, labels: Sequence[str]) -> None:
        for col, label in enumerate(labels, start=1):
            cell = sheet.cell(row=row, column=col, value=label)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.center_align
            cell.border = self.thin_border

    def _write_section(self, sheet: Worksheet, row: int, label: str, width: int) -> int:
        """Shaded section label spanning ``width`` columns; returns the next row."""
        for col in range(1, width + 1):
            cell = sheet.cell(row=row, column=col)
            cell.fill = self.section_header_fill
        sheet.cell(row=row, column=1, value=label).font = self.section_header_font
        return row + 1

    def _write_flag_rows(
        self,
        sheet: Worksheet,
        row: int,
        headers: List[str],
        rows: List[Tuple[object, List[Optional[str]]]],
    ) -> int:
        """Header plus one row per flag, severity colored; returns the next row."""
        self._write_header(sheet, row, headers)
        if not rows:
            row += 1
            sheet.cell(row=row, column=1, value="No flags").font = self.note_font
        for severity, values in rows:
            row += 1
            for col, value in enumerate(values, start=1):
                cell = sheet.cell(row=row, column=col, value=value)
                cell.alignment = self.wrap_align
                cell.border = self.thin_border
            sheet.cell(row=row, column=1).font = Font(bold=True, color=SEVERITY_COLORS[severity.value])
        return row + 1

    def _set_widths(self, sheet: Worksheet, widths: Sequence[int]) -> None:
        for col, width in enumerate(widths, start=1):
            sheet.column_dimensions[self._col_letter(col)].width = width

    @staticmethod
    def _col_letter(idx: int) -> str:
        """Convert 1-based column index to Excel column letter."""
        letter = ""
        while idx > 0:
            idx, rem = divmod(idx - 1, 26)
            letter = chr(65 + rem) + letter
        return letter


__all__ = ["PackageSheetRenderer"]
