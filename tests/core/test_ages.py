"""Tests for the AgeTracker class."""

import numpy as np
import pytest

from bitlife.core.ages import AgeTracker
from bitlife.core.bitgrid import BitGrid


def make_grid(width, height, cells):
    live = set(cells)
    return BitGrid(width, height, lambda x, y: (x, y) in live)


class TestAgeTracker:
    """Test cases for age bookkeeping."""

    def test_initialization(self):
        """Test an empty tracker."""
        tracker = AgeTracker(4, 3)
        assert len(tracker) == 0
        assert tracker.age_of(0, 0) is None
        assert tracker.max_age == 0
        assert tracker.mean_age == 0.0

    def test_invalid_dimensions(self):
        """Test that non-positive dimensions are rejected."""
        with pytest.raises(ValueError):
            AgeTracker(0, 3)

    def test_from_grid(self):
        """Test that initially living cells start at age 1."""
        grid = make_grid(5, 5, [(1, 1), (3, 2)])
        tracker = AgeTracker.from_grid(grid)
        assert tracker.age_of(1, 1) == 1
        assert tracker.age_of(3, 2) == 1
        assert tracker.age_of(0, 0) is None
        assert tracker.alive_coordinates() == {(1, 1), (3, 2)}

    def test_seed_shape_mismatch(self):
        """Test seeding with a wrongly shaped mask."""
        tracker = AgeTracker(4, 3)
        with pytest.raises(ValueError):
            tracker.seed(np.zeros((4, 3), dtype=bool))

    def test_age_of_out_of_bounds(self):
        """Test that out-of-range lookups raise IndexError."""
        tracker = AgeTracker(4, 3)
        with pytest.raises(IndexError):
            tracker.age_of(4, 0)
        with pytest.raises(IndexError):
            tracker.age_of(0, -1)

    def test_update_transitions(self):
        """Test birth, survival and death, visible only after commit."""
        tracker = AgeTracker(3, 1)
        tracker.seed(np.array([[True, True, False]]))

        tracker.update(0, 0, was_alive=True, is_alive=True)
        tracker.update(1, 0, was_alive=True, is_alive=False)
        tracker.update(2, 0, was_alive=False, is_alive=True)

        # Nothing changes until the generation is committed
        assert tracker.age_of(0, 0) == 1
        assert tracker.age_of(1, 0) == 1
        assert tracker.age_of(2, 0) is None

        tracker.commit()
        assert tracker.age_of(0, 0) == 2
        assert tracker.age_of(1, 0) is None
        assert tracker.age_of(2, 0) == 1
        assert (1, 0) not in tracker
        assert (2, 0) in tracker

    def test_update_all_matches_update(self):
        """Test that the bulk update agrees with per-cell updates."""
        rng = np.random.default_rng(4)
        was = rng.random((5, 6)) < 0.5
        now = rng.random((5, 6)) < 0.5

        single = AgeTracker(6, 5)
        bulk = AgeTracker(6, 5)
        single.seed(was)
        bulk.seed(was)

        for y in range(5):
            for x in range(6):
                single.update(x, y, bool(was[y, x]), bool(now[y, x]))
        bulk.update_all(was, now)
        single.commit()
        bulk.commit()

        assert np.array_equal(single.to_array(), bulk.to_array())

    def test_items(self):
        """Test iteration over tracked cells."""
        tracker = AgeTracker.from_grid(make_grid(3, 3, [(2, 0), (0, 1)]))
        assert list(tracker.items()) == [((2, 0), 1), ((0, 1), 1)]

    def test_contains_rejects_bad_keys(self):
        """Test membership with malformed or out-of-range keys."""
        tracker = AgeTracker.from_grid(make_grid(3, 3, [(1, 1)]))
        assert (1, 1) in tracker
        assert (5, 5) not in tracker
        assert "1,1" not in tracker


class TestAgeTrackingWithGrid:
    """Ages kept in lockstep with grid steps."""

    @pytest.mark.parametrize("fast", [False, True])
    def test_tracked_cells_equal_living_cells(self, fast):
        """Test that ages exist for exactly the living cells after every step."""
        grid = BitGrid.random(12, 9, 0.4, rng=21)
        tracker = AgeTracker.from_grid(grid)

        for _ in range(15):
            if fast:
                grid.step_fast(tracker)
            else:
                grid.step(tracker)
            assert tracker.alive_coordinates() == set(grid.alive_cells())
            assert len(tracker) == grid.population

    def test_block_ages_increase(self):
        """Test that still-life cells age by one per generation."""
        grid = make_grid(6, 6, [(2, 2), (3, 2), (2, 3), (3, 3)])
        tracker = AgeTracker.from_grid(grid)

        for _ in range(5):
            grid.step(tracker)

        assert tracker.age_of(2, 2) == 6
        assert tracker.max_age == 6
        assert tracker.mean_age == pytest.approx(6.0)

    def test_rebirth_resets_age(self):
        """Test that a cell dying and being reborn starts again at 1."""
        grid = make_grid(5, 5, [(1, 2), (2, 2), (3, 2)])
        tracker = AgeTracker.from_grid(grid)

        grid.step(tracker)
        assert tracker.age_of(1, 2) is None
        assert tracker.age_of(2, 1) == 1
        assert tracker.age_of(2, 2) == 2

        grid.step(tracker)
        assert tracker.age_of(1, 2) == 1
        assert tracker.age_of(2, 1) is None
        assert tracker.age_of(2, 2) == 3
