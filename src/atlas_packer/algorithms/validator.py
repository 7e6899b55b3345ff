"""
Layout validator: stateless checks of a packer's free/used bookkeeping.

All checks take rectangles and bin dimensions and either return True or
raise a LayoutError subclass.  They are never called by the packer itself;
tests and the benchmark runner use them to confirm the layout invariants.

Checks:
  1. Bounds   : every used and free rectangle lies inside the bin
  2. Overlap  : no two used rectangles share interior area
  3. Coverage : every bin cell is either used or inside some free rect,
                and no free rect covers a used cell
"""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, Sequence

import numpy as np

from atlas_packer.core.errors import CoverageError, OutOfBoundsError, OverlapError
from atlas_packer.core.models import Rect


def rasterize(rects: Iterable[Rect], width: int, height: int) -> np.ndarray:
    """Boolean ``(height, width)`` mask of the cells covered by *rects*."""
    mask = np.zeros((height, width), dtype=bool)
    for r in rects:
        mask[r.y:r.bottom, r.x:r.right] = True
    return mask


def free_area_union(free_rects: Iterable[Rect], width: int, height: int) -> int:
    """Number of bin cells covered by at least one free rectangle."""
    return int(rasterize(free_rects, width, height).sum())


def check_bounds(rects: Iterable[Rect], width: int, height: int) -> bool:
    for r in rects:
        if r.x < 0 or r.y < 0 or r.right > width or r.bottom > height:
            raise OutOfBoundsError(f"{r!r} extends outside the {width}x{height} bin")
        if r.width < 0 or r.height < 0:
            raise OutOfBoundsError(f"{r!r} has a negative extent")
    return True


def check_no_overlap(used_rects: Sequence[Rect]) -> bool:
    for a, b in combinations(used_rects, 2):
        if a.intersects(b):
            raise OverlapError(f"Placements {a!r} and {b!r} overlap")
    return True


def check_coverage(
    free_rects: Sequence[Rect],
    used_rects: Sequence[Rect],
    width: int,
    height: int,
) -> bool:
    """Free and used rectangles must partition the bin exactly."""
    used = rasterize(used_rects, width, height)
    free = rasterize(free_rects, width, height)

    clash = int((used & free).sum())
    if clash:
        raise CoverageError(f"{clash} cells are both free and used")

    holes = int((~(used | free)).sum())
    if holes:
        raise CoverageError(f"{holes} cells are neither free nor used")
    return True


def validate_packer(packer) -> bool:
    """
    Run every check against a ``MaxRectsPacker`` (or anything exposing
    ``free_rects``, ``used_rects``, ``max_width`` and ``max_height``).

    Raises:
        OutOfBoundsError, OverlapError, CoverageError
    """
    width, height = packer.max_width, packer.max_height
    free, used = packer.free_rects, packer.used_rects

    check_bounds(used, width, height)
    check_bounds(free, width, height)
    check_no_overlap(used)
    check_coverage(free, used, width, height)
    return True
