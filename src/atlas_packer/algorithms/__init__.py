"""Rectangle packing algorithms."""

from .free_space import FreeSpaceTracker, split_free_rect
from .maxrects import MaxRectsPacker, common_interval_length
from .validator import (
    check_bounds,
    check_coverage,
    check_no_overlap,
    free_area_union,
    rasterize,
    validate_packer,
)

__all__ = [
    "FreeSpaceTracker",
    "split_free_rect",
    "MaxRectsPacker",
    "common_interval_length",
    "validate_packer",
    "check_bounds",
    "check_no_overlap",
    "check_coverage",
    "free_area_union",
    "rasterize",
]
