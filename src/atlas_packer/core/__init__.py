"""Core types shared by the packer, validator and benchmark runner."""

from .config import BenchmarkConfig, PackerConfig, load_benchmark_config
from .errors import (
    CoverageError,
    InvalidArgumentError,
    LayoutError,
    OutOfBoundsError,
    OverlapError,
    PackerError,
)
from .models import NO_PLACEMENT, Heuristic, PlacementResult, Rect

__all__ = [
    "Rect",
    "Heuristic",
    "PlacementResult",
    "NO_PLACEMENT",
    "PackerConfig",
    "BenchmarkConfig",
    "load_benchmark_config",
    "PackerError",
    "InvalidArgumentError",
    "LayoutError",
    "OutOfBoundsError",
    "OverlapError",
    "CoverageError",
]
