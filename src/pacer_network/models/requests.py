"""
Request models for service layer operations.

These Pydantic models provide type-safe, validated settings for batch
retrieval and network discovery.
"""

from pathlib import Path
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pacer_network.validators import (
    validate_checkpoint_interval,
    validate_max_iterations,
    validate_rate_limit,
)


class RetrievalSettings(BaseModel):
    """
    Settings for one batch retrieval run.

    Attributes:
        output_dir: Directory receiving XML dockets and logs
        rate_limit: Fixed delay in seconds, or an inclusive (min, max) integer range
        checkpoint_interval: Write a progress log every N cases (None disables)
        resume_if_exists: Skip cases whose XML artifact already exists
        verbose: Report per-case progress at INFO level

    Example:
        >>> settings = RetrievalSettings(output_dir="out", rate_limit=[8, 12])
        >>> settings.rate_limit
        (8, 12)

    Raises:
        ValidationError: If any field fails validation
    """

    output_dir: Path = Field(
        default=Path("pacer_xml_output"),
        description="Directory for XML dockets, checkpoints and the final log"
    )

    rate_limit: Union[int, float, Tuple[int, int]] = Field(
        default=(5, 10),
        description="Seconds to wait between cases: fixed value or (min, max)",
        examples=[(5, 10), 3]
    )

    checkpoint_interval: Optional[int] = Field(
        default=50,
        description="Save progress every N cases; None disables checkpoints"
    )

    resume_if_exists: bool = Field(
        default=True,
        description="Skip cases whose XML already exists in output_dir"
    )

    verbose: bool = Field(
        default=True,
        description="Report per-case progress at INFO level"
    )

    @field_validator('rate_limit', mode='before')
    @classmethod
    def _validate_rate_limit(cls, v):
        return validate_rate_limit(v)

    _validate_checkpoint_interval = field_validator('checkpoint_interval')(
        validate_checkpoint_interval
    )

    model_config = ConfigDict(frozen=True)


class DiscoverySettings(BaseModel):
    """
    Settings for network discovery on top of RetrievalSettings.

    Attributes:
        recursive: Follow discovered cases into further iterations
        max_iterations: Hard ceiling on iterations; validated and used only
            in recursive mode (non-recursive discovery runs one iteration)
        include_skipped: Also parse XML of cases skipped because their
            artifact already existed
    """

    recursive: bool = Field(default=False)
    max_iterations: int = Field(default=2)
    include_skipped: bool = Field(default=False)

    @model_validator(mode='after')
    def _validate_max_iterations(self) -> 'DiscoverySettings':
        if self.recursive:
            validate_max_iterations(self.max_iterations)
        return self

    model_config = ConfigDict(frozen=True)
