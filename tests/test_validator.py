"""
Tests for the layout validator.

Tests cover:
- Bounds, overlap and coverage checks raise the right LayoutError subclass
- A packer's layout passes all checks after every insertion on a small bin
- Coverage via rasterised area (free union + used = bin)
"""

import pytest

from atlas_packer import (
    CoverageError,
    Heuristic,
    LayoutError,
    MaxRectsPacker,
    OutOfBoundsError,
    OverlapError,
    Rect,
)
from atlas_packer.algorithms.validator import (
    check_bounds,
    check_coverage,
    check_no_overlap,
    free_area_union,
    rasterize,
    validate_packer,
)


class TestChecks:
    def test_bounds_ok(self):
        assert check_bounds([Rect(0, 0, 10, 10), Rect(5, 5, 5, 5)], 10, 10)

    @pytest.mark.parametrize("rect", [Rect(-1, 0, 5, 5), Rect(0, 0, 11, 5), Rect(8, 8, 3, 3)])
    def test_bounds_violation(self, rect):
        with pytest.raises(OutOfBoundsError):
            check_bounds([rect], 10, 10)

    def test_overlap_detected(self):
        with pytest.raises(OverlapError):
            check_no_overlap([Rect(0, 0, 10, 10), Rect(20, 20, 5, 5), Rect(5, 5, 10, 10)])

    def test_touching_is_not_overlap(self):
        assert check_no_overlap([Rect(0, 0, 10, 10), Rect(10, 0, 10, 10), Rect(0, 10, 20, 5)])

    def test_coverage_hole(self):
        with pytest.raises(CoverageError, match="neither free nor used"):
            check_coverage([Rect(0, 5, 10, 5)], [Rect(0, 0, 5, 5)], 10, 10)

    def test_coverage_clash(self):
        with pytest.raises(CoverageError, match="both free and used"):
            check_coverage([Rect(0, 0, 10, 10)], [Rect(0, 0, 5, 5)], 10, 10)

    def test_coverage_with_overlapping_free_rects(self):
        # Free rects may overlap each other
        free = [Rect(0, 5, 10, 5), Rect(5, 0, 5, 10)]
        assert check_coverage(free, [Rect(0, 0, 5, 5)], 10, 10)

    def test_layout_errors_share_a_base(self):
        for err in (OutOfBoundsError, OverlapError, CoverageError):
            assert issubclass(err, LayoutError)


class TestRaster:
    def test_rasterize_shape_and_cells(self):
        mask = rasterize([Rect(1, 2, 3, 1)], 5, 4)
        assert mask.shape == (4, 5)
        assert mask.sum() == 3
        assert mask[2, 1:4].all()

    def test_free_area_union_counts_overlap_once(self):
        assert free_area_union([Rect(0, 0, 10, 10), Rect(5, 5, 10, 10)], 20, 20) == 175


class TestPackerLayouts:
    def test_fresh_packer_is_valid(self, packer):
        assert validate_packer(packer)

    @pytest.mark.parametrize("heuristic", list(Heuristic))
    def test_every_step_is_valid(self, heuristic):
        packer = MaxRectsPacker(24, 16)
        sizes = [(5, 3), (7, 7), (3, 9), (10, 2), (4, 4), (6, 5), (2, 2), (8, 3), (3, 3), (1, 6)]
        for w, h in sizes:
            packer.insert(w, h, heuristic)
            assert validate_packer(packer)
            used = sum(r.area for r in packer.used_rects)
            free = free_area_union(packer.free_rects, 24, 16)
            assert used + free == 24 * 16
