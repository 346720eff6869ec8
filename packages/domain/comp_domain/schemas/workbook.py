"""Workbook configuration - entry point for Excel export.

The WorkbookCFG ties engine results to the sheets the Excel renderer
should produce. It is what gets passed to ``PackageSheetRenderer``.
"""

from typing import Optional
from pydantic import Field, model_validator

from .base import DomainModel
from .offers import OfferScoreResult
from .packages import PackageGenerationResult


class WorkbookCFG(DomainModel):
    """Top-level configuration for workbook generation.

    Generated sheets (depending on config):
        1. Packages - side-by-side package comparison and scores
        2. Benchmarks - market percentiles and confidence notes
        3. Vesting - cumulative vesting of the recommended grant
        4. Risk Flags - caveats on the recommended package
        5. Offer - offer score breakdown, flags and exit outcomes

    Example:
        config = WorkbookCFG(
            packages=generate_packages(scenario, resolver),
            label="Senior Engineer - Series A",
        )
        PackageSheetRenderer(config).render("packages.xlsx")
    """

    packages: Optional[PackageGenerationResult] = Field(
        default=None,
        description="Optimizer output to render"
    )

    offer: Optional[OfferScoreResult] = Field(
        default=None,
        description="Offer score to render"
    )

    label: str = Field(
        default="Compensation Analysis",
        description="Title shown at the top of each sheet"
    )

    include_benchmarks_sheet: bool = True
    include_vesting_sheet: bool = True
    include_risk_flags_sheet: bool = True

    @model_validator(mode="after")
    def validate_has_content(self):
        if self.packages is None and self.offer is None:
            raise ValueError("WorkbookCFG needs a package result, an offer result, or both")
        return self
