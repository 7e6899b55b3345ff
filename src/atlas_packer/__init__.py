"""MaxRects rectangle bin packing for runtime texture atlases.

Typical use::

    from atlas_packer import Heuristic, MaxRectsPacker

    packer = MaxRectsPacker(1024, 1024, allow_rotations=True)
    rect = packer.insert(64, 128, Heuristic.BEST_SHORT_SIDE_FIT)
"""

from .algorithms import FreeSpaceTracker, MaxRectsPacker, validate_packer
from .core import (
    BenchmarkConfig,
    CoverageError,
    Heuristic,
    InvalidArgumentError,
    LayoutError,
    OutOfBoundsError,
    OverlapError,
    PackerConfig,
    PackerError,
    PlacementResult,
    Rect,
    load_benchmark_config,
)

__version__ = "0.1.0"

__all__ = [
    "MaxRectsPacker",
    "FreeSpaceTracker",
    "validate_packer",
    "Rect",
    "Heuristic",
    "PlacementResult",
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
