"""Engine configuration loaded from the environment."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas.enums import GeoMarket


class EngineSettings(BaseSettings):
    """Engine settings.

    Every field can be overridden with a ``COMP_ENGINE_`` environment
    variable (e.g. ``COMP_ENGINE_DATASET_PATH``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMP_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reference data
    dataset_path: Optional[str] = Field(
        default=None,
        description="Benchmark dataset JSON; None uses the bundled v1 dataset"
    )
    default_geo: GeoMarket = GeoMarket.SV

    # Modeling
    discount_rate: float = Field(default=0.10, ge=0)
    approximation_penalty: float = Field(
        default=0.8,
        gt=0,
        le=1,
        description="Confidence multiplier for a benchmark taken from an adjacent level"
    )
    estimate_penalty: float = Field(
        default=0.9,
        gt=0,
        le=1,
        description="Confidence multiplier for each estimated input (cap table, valuation)"
    )

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()
