"""Benchmark dataset loading and resolution."""

from .dataset import load_dataset, bundled_dataset_path
from .resolver import BenchmarkResolver, interpolate_percentile, estimate_percentile

__all__ = [
    "load_dataset",
    "bundled_dataset_path",
    "BenchmarkResolver",
    "interpolate_percentile",
    "estimate_percentile",
]
