"""
Unit tests for free-space bookkeeping.

Tests cover:
- Splitting a free rectangle around a placement (corner, centre, edge, disjoint)
- Pruning: containment, duplicates, idempotence, vectorised == pairwise
- Tracker lifecycle: initialize, commit, occupancy, snapshots
"""

import random

import pytest

from atlas_packer.algorithms import free_space
from atlas_packer.algorithms.free_space import (
    FreeSpaceTracker,
    _prune_pairwise,
    _prune_vectorized,
    split_free_rect,
)
from atlas_packer.algorithms.validator import check_coverage
from atlas_packer.core.errors import InvalidArgumentError
from atlas_packer.core.models import Rect


# ---------------------------------------------------------------------------
# 1. split_free_rect
# ---------------------------------------------------------------------------

class TestSplit:
    def test_corner_placement_leaves_two_fragments(self):
        fragments = split_free_rect(Rect(0, 0, 100, 100), Rect(0, 0, 50, 50))
        assert fragments == [Rect(0, 50, 100, 50), Rect(50, 0, 50, 100)]

    def test_centre_placement_leaves_four_fragments(self):
        fragments = split_free_rect(Rect(0, 0, 100, 100), Rect(25, 25, 50, 50))
        assert set(fragments) == {
            Rect(0, 0, 100, 25),   # above
            Rect(0, 75, 100, 25),  # below
            Rect(0, 0, 25, 100),   # left
            Rect(75, 0, 25, 100),  # right
        }

    def test_full_cover_leaves_nothing(self):
        assert split_free_rect(Rect(10, 10, 20, 20), Rect(0, 0, 50, 50)) == []

    def test_partial_overlap_only_keeps_outside_parts(self):
        # Placement hangs over the free rect's top-left corner
        fragments = split_free_rect(Rect(10, 10, 40, 40), Rect(0, 0, 20, 20))
        assert set(fragments) == {Rect(10, 20, 40, 30), Rect(20, 10, 30, 40)}

    def test_touching_rect_is_returned_unchanged(self):
        free = Rect(0, 0, 50, 50)
        assert split_free_rect(free, Rect(50, 0, 10, 10)) == [free]

    def test_fragments_never_degenerate(self):
        rng = random.Random(3)
        for _ in range(200):
            free = Rect(rng.randint(0, 20), rng.randint(0, 20), rng.randint(1, 30), rng.randint(1, 30))
            used = Rect(rng.randint(0, 40), rng.randint(0, 40), rng.randint(1, 30), rng.randint(1, 30))
            for frag in split_free_rect(free, used):
                assert frag.width > 0 and frag.height > 0
                assert free.contains(frag)
                assert not frag.intersects(used)


# ---------------------------------------------------------------------------
# 2. Pruning
# ---------------------------------------------------------------------------

def _random_rects(seed: int, n: int) -> list:
    rng = random.Random(seed)
    rects = []
    for _ in range(n):
        x, y = rng.randint(0, 10), rng.randint(0, 10)
        rects.append(Rect(x, y, rng.randint(1, 10), rng.randint(1, 10)))
    return rects


class TestPrune:
    def test_contained_rect_removed(self):
        rects = [Rect(2, 2, 3, 3), Rect(0, 0, 10, 10), Rect(5, 5, 10, 10)]
        assert _prune_pairwise(rects) == [Rect(0, 0, 10, 10), Rect(5, 5, 10, 10)]

    def test_duplicates_keep_one_copy(self):
        rects = [Rect(0, 0, 5, 5), Rect(0, 0, 5, 5), Rect(0, 0, 5, 5)]
        assert _prune_pairwise(rects) == [Rect(0, 0, 5, 5)]
        assert _prune_vectorized(rects) == [Rect(0, 0, 5, 5)]

    @pytest.mark.parametrize("seed", range(8))
    def test_vectorized_matches_pairwise(self, seed):
        rects = _random_rects(seed, 60)
        assert _prune_vectorized(rects) == _prune_pairwise(rects)

    @pytest.mark.parametrize("seed", range(4))
    def test_no_survivor_contains_another(self, seed):
        survivors = _prune_pairwise(_random_rects(seed, 40))
        for i, a in enumerate(survivors):
            for j, b in enumerate(survivors):
                if i != j:
                    assert not a.contains(b)

    def test_prune_is_idempotent(self):
        tracker = FreeSpaceTracker(50, 50)
        tracker._free = _random_rects(11, 50)
        tracker.prune_redundant()
        once = tracker.free_rects
        tracker.prune_redundant()
        assert tracker.free_rects == once

    def test_threshold_selects_vectorized_path(self, monkeypatch):
        calls = []
        monkeypatch.setattr(free_space, "PRUNE_VECTORIZE_THRESHOLD", 2)
        monkeypatch.setattr(
            free_space, "_prune_vectorized",
            lambda rects: calls.append(len(rects)) or _prune_pairwise(rects),
        )
        tracker = FreeSpaceTracker(50, 50)
        tracker._free = _random_rects(1, 5)
        tracker.prune_redundant()
        assert calls == [5]


# ---------------------------------------------------------------------------
# 3. Tracker lifecycle
# ---------------------------------------------------------------------------

class TestTracker:
    def test_starts_with_one_free_rect(self):
        tracker = FreeSpaceTracker(64, 32)
        assert tracker.free_rects == (Rect(0, 0, 64, 32),)
        assert tracker.used_rects == ()
        assert tracker.occupancy() == 0.0

    @pytest.mark.parametrize("w, h", [(0, 10), (10, 0), (-1, 5)])
    def test_non_positive_dimensions_rejected(self, w, h):
        with pytest.raises(InvalidArgumentError):
            FreeSpaceTracker(w, h)

    def test_commit_splits_and_records(self):
        tracker = FreeSpaceTracker(100, 100)
        tracker.commit_placement(Rect(0, 0, 50, 50))
        assert tracker.used_rects == (Rect(0, 0, 50, 50),)
        assert set(tracker.free_rects) == {Rect(0, 50, 100, 50), Rect(50, 0, 50, 100)}
        assert tracker.occupancy() == pytest.approx(0.25)

    def test_commit_prunes_contained_fragment(self):
        tracker = FreeSpaceTracker(100, 100)
        tracker.commit_placement(Rect(0, 0, 50, 50))
        tracker.commit_placement(Rect(50, 0, 50, 50))
        # (50, 50, 50, 50) falls inside (0, 50, 100, 50) and is pruned
        assert tracker.free_rects == (Rect(0, 50, 100, 50),)
        check_coverage(tracker.free_rects, tracker.used_rects, 100, 100)

    def test_initialize_resets_state(self):
        tracker = FreeSpaceTracker(100, 100)
        tracker.commit_placement(Rect(0, 0, 10, 10))
        tracker.initialize(40, 30)
        assert tracker.free_rects == (Rect(0, 0, 40, 30),)
        assert tracker.used_rects == ()
        assert (tracker.bin_width, tracker.bin_height) == (40, 30)

    def test_snapshots_are_detached(self):
        tracker = FreeSpaceTracker(100, 100)
        before = tracker.free_rects
        tracker.commit_placement(Rect(0, 0, 10, 10))
        assert before == (Rect(0, 0, 100, 100),)

    def test_full_bin_has_no_free_space(self):
        tracker = FreeSpaceTracker(20, 20)
        tracker.commit_placement(Rect(0, 0, 20, 20))
        assert tracker.free_rects == ()
        assert tracker.occupancy() == 1.0

    def test_iterators_follow_live_state(self):
        tracker = FreeSpaceTracker(100, 100)
        tracker.commit_placement(Rect(0, 0, 50, 50))
        assert tuple(tracker.iter_free()) == tracker.free_rects
        assert tuple(tracker.iter_used()) == (Rect(0, 0, 50, 50),)
