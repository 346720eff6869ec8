"""Excel export for compensation engine results."""

from .package_sheet_renderer import PackageSheetRenderer

__all__ = ["PackageSheetRenderer"]
