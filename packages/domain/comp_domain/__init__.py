"""Compensation Engine - benchmarking, package optimization and offer scoring.

This package provides the domain layer for startup compensation:
- Versioned benchmark dataset with adjacent-level fallback
- Package optimizer that builds, scores and recommends offer shapes
- Offer scorer that places a received offer against the market
- Exit scenario engine for expected equity value

The domain layer is designed to be:
- Framework-agnostic (no web dependencies)
- Deterministic (pure functions over an injected, read-only dataset)
- Honest about gaps (estimates are reported in confidence notes)
"""

from .schemas import *  # noqa: F403, F401
from .benchmarks import BenchmarkResolver, load_dataset  # noqa: F401
from .config import EngineSettings, get_settings  # noqa: F401
from .errors import BenchmarkDatasetError, CompEngineError, NoMarketDataError  # noqa: F401
from .logging import get_logger, setup_logging  # noqa: F401
from .offers import score_offer  # noqa: F401
from .optimizer import generate_packages  # noqa: F401

__version__ = "0.1.0"
