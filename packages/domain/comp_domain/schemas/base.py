"""Base classes and type system for compensation domain models.

This module provides the foundational types, validators, and base classes
used throughout the compensation schema system.
"""

from typing import Annotated
from pydantic import BaseModel, Field, ConfigDict

# =============================================================================
# Base Model
# =============================================================================

class DomainModel(BaseModel):
    """Base class for all domain models.

    Provides common configuration for all Pydantic models in the domain layer:
    - Frozen instances (value objects are built once per computation)
    - Enum members kept as members so decision points can match on them
    - Unknown fields rejected to catch misspelled scenario keys early
    """

    model_config = ConfigDict(
        frozen=True,  # Value objects; derive new ones with model_copy(update=...)
        use_enum_values=False,  # Keep enum members for exhaustive matching
        extra="forbid",
        arbitrary_types_allowed=True,  # Allow DataFrames on result objects
    )


# =============================================================================
# Type Aliases - Numeric
# =============================================================================

MoneyAmount = Annotated[
    float,
    Field(ge=0, description="Currency amount in dollars (non-negative)")
]

ShareCount = Annotated[
    int,
    Field(ge=0, description="Number of shares or options (non-negative)")
]

BasisPoints = Annotated[
    float,
    Field(ge=0, description="Equity in basis points of fully diluted shares (100 bps = 1%)")
]

PercentFD = Annotated[
    float,
    Field(ge=0, le=100, description="Percent of fully diluted capitalization (0.5 = 0.5%)")
]

Percentile = Annotated[
    float,
    Field(ge=0, le=100, description="Market percentile (0 to 100)")
]

Score = Annotated[
    float,
    Field(ge=0, le=100, description="Score on a 0-100 scale")
]

Confidence = Annotated[
    float,
    Field(ge=0, le=1, description="Confidence as decimal (0.0 to 1.0)")
]

Rate = Annotated[
    float,
    Field(ge=0, le=1, description="Rate as decimal (0.22 = 22%)")
]

Months = Annotated[
    int,
    Field(ge=0, description="Duration in whole months")
]
