"""Engine exceptions.

Only two conditions are fatal: a role with no market data at any level,
and a benchmark dataset that cannot be loaded. Every other missing input is
estimated and reported through confidence notes.
"""


class CompEngineError(Exception):
    """Base class for engine errors."""
    pass


class NoMarketDataError(CompEngineError):
    """Raised when no level on the seniority ladder has data for a role."""

    def __init__(self, job_family, job_level, stage):
        self.job_family = job_family
        self.job_level = job_level
        self.stage = stage
        super().__init__(
            f"No benchmark data found for {_label(job_family)} / {_label(job_level)} "
            f"at {_label(stage)}"
        )


class BenchmarkDatasetError(CompEngineError):
    """Raised when a benchmark dataset file cannot be read or validated."""
    pass


def _label(value) -> str:
    return getattr(value, "value", str(value))
