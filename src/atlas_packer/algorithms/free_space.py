"""
Free-space bookkeeping for the MaxRects packer.

The tracker owns two collections:

    free rects : maximal unoccupied regions of the bin.  They may overlap
                 each other, but after pruning none is contained in another.
    used rects : committed placements, append-only, never overlapping.

Committing a placement splits every free rectangle the placement intersects
into up to four fragments (the parts above, below, left and right of it),
then prunes free rectangles that became redundant.  The union of the free
rectangles stays equal to the bin area minus the union of the used ones.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Tuple

import numpy as np

from atlas_packer.core.errors import InvalidArgumentError
from atlas_packer.core.models import Rect

logger = logging.getLogger(__name__)


# Free-set size above which containment pruning switches to numpy.
# Both paths keep exactly the same rectangles.
PRUNE_VECTORIZE_THRESHOLD: int = 32


def split_free_rect(free: Rect, used: Rect) -> List[Rect]:
    """
    Return the parts of *free* that remain unoccupied after placing *used*.

    A fragment is only produced for a side where the matching edge of
    *used* lies strictly inside *free* on that axis, so every fragment has
    positive width and height.  A free rectangle that does not intersect
    *used* is returned unchanged.

    Args:
        free: Free rectangle to split.
        used: Newly placed rectangle.

    Returns:
        Up to four fragments covering ``free`` minus ``used``.
    """
    if not free.intersects(used):
        return [free]

    fragments: List[Rect] = []

    if used.x < free.right and used.right > free.x:
        # Above
        if free.y < used.y < free.bottom:
            fragments.append(Rect(free.x, free.y, free.width, used.y - free.y))
        # Below
        if used.bottom < free.bottom:
            fragments.append(
                Rect(free.x, used.bottom, free.width, free.bottom - used.bottom)
            )

    if used.y < free.bottom and used.bottom > free.y:
        # Left
        if free.x < used.x < free.right:
            fragments.append(Rect(free.x, free.y, used.x - free.x, free.height))
        # Right
        if used.right < free.right:
            fragments.append(
                Rect(used.right, free.y, free.right - used.right, free.height)
            )

    return [r for r in fragments if r.width > 0 and r.height > 0]


class FreeSpaceTracker:
    """
    Maintains the free-rectangle set and used list of a single bin.

    Attributes:
        bin_width:  Current bin width, used by occupancy().
        bin_height: Current bin height, used by occupancy().
    """

    def __init__(self, bin_width: int, bin_height: int) -> None:
        self.bin_width = bin_width
        self.bin_height = bin_height
        self._free: List[Rect] = []
        self._used: List[Rect] = []
        self.initialize(bin_width, bin_height)

    def initialize(self, bin_width: int, bin_height: int) -> None:
        """
        Reset to an empty bin: one free rectangle covering it, no placements.

        Raises:
            InvalidArgumentError: If either dimension is not positive.
        """
        if bin_width <= 0 or bin_height <= 0:
            raise InvalidArgumentError(
                f"Bin dimensions must be positive, got {bin_width}x{bin_height}"
            )
        self.bin_width = bin_width
        self.bin_height = bin_height
        self._free = [Rect(0, 0, bin_width, bin_height)]
        self._used = []

    @property
    def free_rects(self) -> Tuple[Rect, ...]:
        """Snapshot of the current free rectangles."""
        return tuple(self._free)

    @property
    def used_rects(self) -> Tuple[Rect, ...]:
        """Snapshot of committed placements in insertion order."""
        return tuple(self._used)

    def iter_free(self) -> Iterator[Rect]:
        """Iterate the live free list without copying.  Do not commit while iterating."""
        return iter(self._free)

    def iter_used(self) -> Iterator[Rect]:
        """Iterate the live used list without copying."""
        return iter(self._used)

    def commit_placement(self, used: Rect) -> None:
        """
        Split every intersecting free rectangle around *used*, prune, and
        record *used* as a placement.
        """
        next_free: List[Rect] = []
        split_count = 0

        for free in self._free:
            if free.intersects(used):
                next_free.extend(split_free_rect(free, used))
                split_count += 1
            else:
                next_free.append(free)

        self._free = next_free
        self.prune_redundant()
        self._used.append(used)

        logger.debug(
            "Committed %r: split %d free rects, %d remain after pruning",
            used, split_count, len(self._free),
        )

    def prune_redundant(self) -> None:
        """Remove every free rectangle contained in another one.

        Of several identical rectangles only the last one is kept.  A single
        pass reaches the fixed point, so calling this twice is a no-op.
        """
        if len(self._free) <= 1:
            return
        if len(self._free) > PRUNE_VECTORIZE_THRESHOLD:
            self._free = _prune_vectorized(self._free)
        else:
            self._free = _prune_pairwise(self._free)

    def used_area(self) -> int:
        return sum(r.area for r in self._used)

    def occupancy(self) -> float:
        """Fraction of the bin area covered by placements."""
        return self.used_area() / (self.bin_width * self.bin_height)


def _prune_pairwise(rects: List[Rect]) -> List[Rect]:
    n = len(rects)
    removed = [False] * n

    for i in range(n):
        if removed[i]:
            continue
        for j in range(i + 1, n):
            if removed[j]:
                continue
            if rects[j].contains(rects[i]):
                removed[i] = True
                break
            if rects[i].contains(rects[j]):
                removed[j] = True

    return [r for r, gone in zip(rects, removed) if not gone]


def _prune_vectorized(rects: List[Rect]) -> List[Rect]:
    bounds = np.array(
        [(r.x, r.y, r.right, r.bottom) for r in rects],
        dtype=np.int64,
    )
    keep = np.ones(len(rects), dtype=bool)

    for i in range(len(rects)):
        containers = (
            keep
            & (bounds[:, 0] <= bounds[i, 0])
            & (bounds[:, 1] <= bounds[i, 1])
            & (bounds[:, 2] >= bounds[i, 2])
            & (bounds[:, 3] >= bounds[i, 3])
        )
        containers[i] = False
        if containers.any():
            keep[i] = False

    return [r for r, k in zip(rects, keep) if k]
