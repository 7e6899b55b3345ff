"""
Configuration models for the packer and the benchmark runner.

Classes:
    PackerConfig   : bin dimensions, rotation flag and default heuristic
    BenchmarkConfig: everything a benchmark run needs, loadable from YAML
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from atlas_packer.core.errors import InvalidArgumentError
from atlas_packer.core.models import Heuristic


class PackerConfig(BaseModel):
    """Construction parameters for a single bin."""

    max_width: int = Field(gt=0, strict=True, description="Bin width (must be positive)")
    max_height: int = Field(gt=0, strict=True, description="Bin height (must be positive)")
    allow_rotations: bool = True
    heuristic: Heuristic = Heuristic.BEST_SHORT_SIDE_FIT

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "max_width": 1024,
                "max_height": 1024,
                "allow_rotations": True,
                "heuristic": "best_short_side_fit",
            }
        }
    )


class BenchmarkConfig(BaseModel):
    """Parameters of a heuristic comparison run."""

    bin: PackerConfig
    heuristics: List[Heuristic] = Field(default_factory=lambda: list(Heuristic))
    num_datasets: int = Field(default=5, ge=1)
    requests_per_dataset: int = Field(default=100, ge=1)
    min_side: int = Field(default=4, ge=1)
    max_side: int = Field(default=128, ge=1)
    seed: Optional[int] = 0
    orderings: List[str] = Field(default_factory=lambda: ["as_given", "area_desc"])
    results_dir: str = "results"
    send_notifications: bool = False

    @model_validator(mode="after")
    def _check_side_range(self) -> "BenchmarkConfig":
        if self.min_side > self.max_side:
            raise ValueError(
                f"min_side ({self.min_side}) must not exceed max_side ({self.max_side})"
            )
        return self


def load_benchmark_config(path: Path | str) -> BenchmarkConfig:
    """
    Load and validate a benchmark configuration from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Validated BenchmarkConfig.

    Raises:
        InvalidArgumentError: If the document is not a mapping or fails validation.
    """
    path = Path(path)
    with path.open("r") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidArgumentError(
            f"Benchmark config {path} must be a mapping, got {type(data).__name__}"
        )

    try:
        return BenchmarkConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid benchmark config {path}: {exc}") from exc
