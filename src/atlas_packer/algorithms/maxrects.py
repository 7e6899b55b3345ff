"""
MaxRects placement for a single fixed-size bin.

Algorithm overview:
    Every candidate position is the top-left corner of a free rectangle.
    For a W x H request each free rectangle is tried upright and, when
    rotations are enabled, rotated to H x W.  Each fitting candidate gets a
    (score1, score2) pair from the selected heuristic; lower wins and a
    candidate only replaces the current best on strict improvement, so the
    earliest of several equal candidates is kept.

Heuristics:
    BEST_SHORT_SIDE_FIT  (min leftover side, max leftover side)
    BEST_LONG_SIDE_FIT   (max leftover side, min leftover side)
    BEST_AREA_FIT        (free area - request area, min leftover side)
    BOTTOM_LEFT          (resulting bottom edge y + h, x)
    CONTACT_POINT        (-contact length, 0)

Batch insertion is globally greedy: every round scores all unplaced
requests against the current free space and commits only the single best
one, then rescans, at O(n^2 * m) cost.

References:
    Jylänki, J. (2010). "A Thousand Ways to Pack the Bin - A Practical
    Approach to Two-Dimensional Rectangle Bin Packing."
"""

from __future__ import annotations

import logging
from numbers import Integral
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from atlas_packer.algorithms.free_space import FreeSpaceTracker
from atlas_packer.core.config import PackerConfig
from atlas_packer.core.errors import InvalidArgumentError
from atlas_packer.core.models import NO_PLACEMENT, Heuristic, PlacementResult, Rect

logger = logging.getLogger(__name__)

Request = Tuple[int, int]
HeuristicLike = Heuristic | str


def common_interval_length(a0: int, a1: int, b0: int, b1: int) -> int:
    """Length of the overlap of [a0, a1) and [b0, b1), or 0 if disjoint."""
    if a1 < b0 or b1 < a0:
        return 0
    return max(0, min(a1, b1) - max(a0, b0))


class MaxRectsPacker:
    """
    Packs rectangles into one ``max_width x max_height`` bin.

    Usage::

        packer = MaxRectsPacker(512, 512, allow_rotations=True)
        rect = packer.insert(64, 32, Heuristic.BEST_SHORT_SIDE_FIT)
        if rect is None:
            ...  # bin is full for this request

    A request that does not fit yields ``None`` and leaves the packer
    untouched.  Not thread-safe: callers serialise access.
    """

    def __init__(
        self,
        max_width: int,
        max_height: int,
        allow_rotations: bool = True,
    ) -> None:
        try:
            config = PackerConfig(
                max_width=max_width,
                max_height=max_height,
                allow_rotations=allow_rotations,
            )
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid bin configuration: {exc}") from exc

        self._allow_rotations = config.allow_rotations
        self.default_heuristic: Heuristic = config.heuristic
        self._tracker = FreeSpaceTracker(config.max_width, config.max_height)
        self._scorers: Dict[Heuristic, Callable[[Rect, int, int], PlacementResult]] = {
            Heuristic.BEST_SHORT_SIDE_FIT: self._score_best_short_side_fit,
            Heuristic.BEST_LONG_SIDE_FIT: self._score_best_long_side_fit,
            Heuristic.BEST_AREA_FIT: self._score_best_area_fit,
            Heuristic.BOTTOM_LEFT: self._score_bottom_left,
            Heuristic.CONTACT_POINT: self._score_contact_point,
        }

    @classmethod
    def from_config(cls, config: PackerConfig) -> "MaxRectsPacker":
        """Build a packer whose default heuristic is ``config.heuristic``."""
        packer = cls(config.max_width, config.max_height, config.allow_rotations)
        packer.default_heuristic = config.heuristic
        return packer

    # ── Properties ───────────────────────────────────────────────────────────

    @property
    def max_width(self) -> int:
        return self._tracker.bin_width

    @max_width.setter
    def max_width(self, value: int) -> None:
        # Does not re-derive the free set; only later scoring and occupancy see it.
        self._tracker.bin_width = _positive_dimension("max_width", value)

    @property
    def max_height(self) -> int:
        return self._tracker.bin_height

    @max_height.setter
    def max_height(self, value: int) -> None:
        self._tracker.bin_height = _positive_dimension("max_height", value)

    @property
    def allow_rotations(self) -> bool:
        return self._allow_rotations

    @allow_rotations.setter
    def allow_rotations(self, value: bool) -> None:
        self._allow_rotations = bool(value)

    @property
    def free_rects(self) -> Tuple[Rect, ...]:
        return self._tracker.free_rects

    @property
    def used_rects(self) -> Tuple[Rect, ...]:
        return self._tracker.used_rects

    @property
    def tracker(self) -> FreeSpaceTracker:
        return self._tracker

    # ── Public API ───────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Empty the bin, keeping its current dimensions."""
        self._tracker.initialize(self.max_width, self.max_height)

    def occupancy(self) -> float:
        """Fraction of the bin area covered by placed rectangles, in [0, 1]."""
        return self._tracker.occupancy()

    def insert(
        self,
        width: int,
        height: int,
        method: Optional[HeuristicLike] = None,
    ) -> Optional[Rect]:
        """
        Place one ``width x height`` rectangle.

        Args:
            width:  Requested width (>= 0).
            height: Requested height (>= 0).
            method: Heuristic, its name or short code.  Defaults to
                    ``default_heuristic``.

        Returns:
            The placed rectangle (width and height swapped if it was rotated),
            or ``None`` if it does not fit anywhere.  Zero-sized requests
            always return ``None``.

        Raises:
            InvalidArgumentError: Unknown heuristic or negative size.  Raised
                before any state changes.
        """
        heuristic = self._resolve_heuristic(method)
        _check_request_size(width, height)

        if width == 0 or height == 0:
            return None

        best = self._find_position(width, height, heuristic)
        if not best.found:
            logger.debug(
                "No room for %dx%d (%s, %d free rects)",
                width, height, heuristic.value, len(self._tracker.free_rects),
            )
            return None

        self._tracker.commit_placement(best.rect)
        return best.rect

    def insert_batch(
        self,
        requests: Sequence[Request],
        method: Optional[HeuristicLike] = None,
    ) -> List[Optional[Rect]]:
        """
        Place a batch of rectangles, best-scoring request first.

        Each round every unplaced request is scored against the current free
        space and only the globally best one is committed.  Stops when no
        remaining request fits.

        Args:
            requests: ``(width, height)`` pairs.
            method:   Heuristic used for every request.

        Returns:
            List parallel to ``requests``: the placed rectangle for each
            request, or ``None`` where it was not placed.

        Raises:
            InvalidArgumentError: Unknown heuristic or malformed/negative
                request.  All requests are checked before anything is placed.
        """
        heuristic = self._resolve_heuristic(method)
        sizes = [_coerce_request(req) for req in requests]

        placements: List[Optional[Rect]] = [None] * len(sizes)
        remaining = [i for i, (w, h) in enumerate(sizes) if w > 0 and h > 0]
        rounds = 0

        while remaining:
            best = NO_PLACEMENT
            best_pos = -1

            for pos, idx in enumerate(remaining):
                w, h = sizes[idx]
                candidate = self._find_position(w, h, heuristic)
                if candidate.beats(best):
                    best = candidate
                    best_pos = pos

            if best_pos < 0:
                break

            idx = remaining.pop(best_pos)
            self._tracker.commit_placement(best.rect)
            placements[idx] = best.rect
            rounds += 1

        logger.debug(
            "Batch of %d (%s): placed %d, rejected %d",
            len(sizes), heuristic.value, rounds, len(sizes) - rounds,
        )
        return placements

    def score_rect(
        self,
        width: int,
        height: int,
        method: Optional[HeuristicLike] = None,
    ) -> PlacementResult:
        """
        Evaluate where a request would go without placing it.

        Returns:
            The best candidate, or ``NO_PLACEMENT`` (height 0, infinite
            scores) if it does not fit.
        """
        heuristic = self._resolve_heuristic(method)
        _check_request_size(width, height)
        if width == 0 or height == 0:
            return NO_PLACEMENT
        return self._find_position(width, height, heuristic)

    def contact_point_score(self, x: int, y: int, width: int, height: int) -> int:
        """
        Total edge length a candidate would share with the bin border and
        with already placed rectangles.
        """
        score = 0

        if x == 0 or x + width == self.max_width:
            score += height
        if y == 0 or y + height == self.max_height:
            score += width

        for used in self._tracker.iter_used():
            if used.x == x + width or used.right == x:
                score += common_interval_length(used.y, used.bottom, y, y + height)
            if used.y == y + height or used.bottom == y:
                score += common_interval_length(used.x, used.right, x, x + width)

        return score

    # ── Candidate search ─────────────────────────────────────────────────────

    def _find_position(
        self,
        width: int,
        height: int,
        heuristic: Heuristic,
    ) -> PlacementResult:
        score = self._scorers[heuristic]
        best = NO_PLACEMENT

        for free in self._tracker.iter_free():
            if free.width >= width and free.height >= height:
                candidate = score(free, width, height)
                if candidate.beats(best):
                    best = candidate

            if self._allow_rotations and free.width >= height and free.height >= width:
                candidate = score(free, height, width)
                if candidate.beats(best):
                    best = candidate

        return best

    def _score_best_short_side_fit(self, free: Rect, w: int, h: int) -> PlacementResult:
        leftover_w = abs(free.width - w)
        leftover_h = abs(free.height - h)
        return PlacementResult(
            Rect(free.x, free.y, w, h),
            min(leftover_w, leftover_h),
            max(leftover_w, leftover_h),
        )

    def _score_best_long_side_fit(self, free: Rect, w: int, h: int) -> PlacementResult:
        leftover_w = abs(free.width - w)
        leftover_h = abs(free.height - h)
        return PlacementResult(
            Rect(free.x, free.y, w, h),
            max(leftover_w, leftover_h),
            min(leftover_w, leftover_h),
        )

    def _score_best_area_fit(self, free: Rect, w: int, h: int) -> PlacementResult:
        leftover_w = abs(free.width - w)
        leftover_h = abs(free.height - h)
        return PlacementResult(
            Rect(free.x, free.y, w, h),
            free.area - w * h,
            min(leftover_w, leftover_h),
        )

    def _score_bottom_left(self, free: Rect, w: int, h: int) -> PlacementResult:
        return PlacementResult(Rect(free.x, free.y, w, h), free.y + h, free.x)

    def _score_contact_point(self, free: Rect, w: int, h: int) -> PlacementResult:
        # Negated: more contact is better, scores are minimised.
        contact = self.contact_point_score(free.x, free.y, w, h)
        return PlacementResult(Rect(free.x, free.y, w, h), -contact, 0)

    def _resolve_heuristic(self, method: Optional[HeuristicLike]) -> Heuristic:
        if method is None:
            return self.default_heuristic
        return Heuristic.coerce(method)

    def __repr__(self) -> str:
        return (
            f"MaxRectsPacker({self.max_width}x{self.max_height}, "
            f"rotations={self._allow_rotations}, "
            f"used={len(self._tracker.used_rects)}, "
            f"free={len(self._tracker.free_rects)}, "
            f"occupancy={self.occupancy():.3f})"
        )


# ─────────────────────────────────────────────────────────────────────────────
# Argument checks
# ─────────────────────────────────────────────────────────────────────────────

def _is_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def _positive_dimension(name: str, value: int) -> int:
    if not _is_int(value) or value <= 0:
        raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def _check_request_size(width: int, height: int) -> None:
    if not _is_int(width) or not _is_int(height):
        raise InvalidArgumentError(
            f"Request size must be integers, got {width!r}x{height!r}"
        )
    if width < 0 or height < 0:
        raise InvalidArgumentError(f"Request size must be non-negative, got {width}x{height}")


def _coerce_request(request) -> Request:
    try:
        width, height = request
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(
            f"Batch request must be a (width, height) pair, got {request!r}"
        ) from exc
    _check_request_size(width, height)
    return int(width), int(height)
