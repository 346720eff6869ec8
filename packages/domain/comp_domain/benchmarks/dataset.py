"""Benchmark dataset loading.

The bundled dataset ships as package data under
``comp_domain/data/benchmarks/<version>/``. Loading is cached per path so
the dataset is parsed and validated once per process; the returned model
is frozen and safe to share.
"""

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import BenchmarkDatasetError
from ..logging import get_logger
from ..schemas import BenchmarkDataset

logger = get_logger(__name__)

DEFAULT_DATASET_VERSION = "v1"
DEFAULT_DATASET_FILE = "sv_default.json"


def bundled_dataset_path(version: str = DEFAULT_DATASET_VERSION) -> Path:
    """Path of the dataset bundled with the package."""
    root = resources.files("comp_domain") / "data" / "benchmarks" / version / DEFAULT_DATASET_FILE
    return Path(str(root))


@lru_cache(maxsize=8)
def load_dataset(path: Optional[str] = None) -> BenchmarkDataset:
    """Load and validate a benchmark dataset.

    Args:
        path: JSON file to load. None loads the bundled default dataset.

    Returns:
        Validated, immutable BenchmarkDataset

    Raises:
        BenchmarkDatasetError: If the file cannot be read or fails validation
    """
    dataset_path = Path(path) if path else bundled_dataset_path()

    try:
        raw = dataset_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BenchmarkDatasetError(f"Cannot read benchmark dataset {dataset_path}: {exc}") from exc

    try:
        dataset = BenchmarkDataset.model_validate_json(raw)
    except ValidationError as exc:
        raise BenchmarkDatasetError(f"Invalid benchmark dataset {dataset_path}: {exc}") from exc

    logger.debug(
        "benchmark_dataset_loaded",
        path=str(dataset_path),
        version=dataset.version,
        families=len(dataset.benchmarks),
    )
    return dataset
