"""Tests for the GameOfLife class."""

import pytest

from bitlife.core.bitgrid import BitGrid
from bitlife.core.colors import ACTIVE_COLOR, cell_color
from bitlife.core.game import GameOfLife

BLOCK = [(4, 4), (4, 5), (5, 4), (5, 5)]
BLINKER = [(5, 4), (5, 5), (5, 6)]


def make_grid(width, height, cells):
    live = set(cells)
    return BitGrid(width, height, lambda x, y: (x, y) in live)


class TestGameOfLife:
    """Test cases for the GameOfLife class."""

    def test_initialization(self):
        """Test game initialization."""
        grid = BitGrid(10, 10)
        game = GameOfLife(grid)

        assert game.grid is grid
        assert game.generation == 0
        assert game.population == 0
        assert game.track_ages
        assert len(game.population_history) == 1
        assert not game.cycle_detected
        assert game.cycle_length == 0
        assert game.cycle_start_generation == 0

    @pytest.mark.parametrize("vectorized", [True, False])
    def test_still_life_block(self, vectorized):
        """Test that a block pattern is stable (still life)."""
        game = GameOfLife(make_grid(10, 10, BLOCK), vectorized=vectorized)

        for _ in range(5):
            game.step()

        assert game.population == 4
        for x, y in BLOCK:
            assert game.grid.get(x, y)
        assert game.generation == 5

    @pytest.mark.parametrize("vectorized", [True, False])
    def test_oscillator_blinker(self, vectorized):
        """Test blinker oscillator (period 2)."""
        game = GameOfLife(make_grid(10, 10, BLINKER), vectorized=vectorized)

        game.step()
        assert game.population == 3
        assert game.grid.get(4, 5)
        assert game.grid.get(6, 5)
        assert not game.grid.get(5, 4)

        game.step()
        assert game.grid == make_grid(10, 10, BLINKER)

    def test_extinction(self):
        """Test that isolated cells die out."""
        game = GameOfLife(make_grid(10, 10, [(2, 2), (7, 7)]))
        game.step()
        assert game.population == 0
        assert game.population_history == [2, 0]

    def test_cycle_detection(self):
        """Test cycle detection with blinker."""
        game = GameOfLife(make_grid(10, 10, BLINKER))

        for _ in range(10):
            if game.cycle_detected:
                break
            game.step()

        assert game.cycle_detected
        assert game.cycle_length == 2
        assert game.cycle_start_generation == 0

    def test_run_until_stable_extinction(self):
        """Test run_until_stable with extinction."""
        game = GameOfLife(make_grid(10, 10, [(5, 5)]))

        final_gen, reason = game.run_until_stable(max_generations=100)

        assert reason == "extinction"
        assert final_gen == 1
        assert game.population == 0

    def test_run_until_stable_cycle(self):
        """Test run_until_stable with cycle detection."""
        game = GameOfLife(make_grid(10, 10, BLINKER))

        final_gen, reason = game.run_until_stable(max_generations=100)

        assert reason == "cycle"
        assert game.cycle_length == 2
        assert final_gen == 3

    def test_run_until_stable_still_life(self):
        """Test that a still life is reported as a cycle of length 1."""
        game = GameOfLife(make_grid(10, 10, BLOCK))
        _, reason = game.run_until_stable(max_generations=100)
        assert reason == "cycle"
        assert game.cycle_length == 1

    def test_run_until_stable_max_generations(self):
        """Test run_until_stable hitting max generations."""
        # R-pentomino (long-lived pattern)
        game = GameOfLife(make_grid(40, 40, [(20, 19), (21, 19), (19, 20), (20, 20), (20, 21)]))

        final_gen, reason = game.run_until_stable(max_generations=10)

        assert reason == "max_generations"
        assert final_gen == 10

    def test_reset_keeps_grid(self):
        """Test resetting counters on the same grid."""
        game = GameOfLife(make_grid(10, 10, BLOCK))
        game.step()
        game.step()

        game.reset()
        assert game.generation == 0
        assert len(game.population_history) == 1
        assert not game.cycle_detected
        assert game.age_of(4, 4) == 1

    def test_reset_with_new_grid(self):
        """Test resetting onto a replacement grid."""
        game = GameOfLife(make_grid(10, 10, BLOCK))
        game.step()

        new_grid = make_grid(6, 4, [(0, 0)])
        game.reset(new_grid)
        assert game.grid is new_grid
        assert game.population == 1
        assert game.ages.width == 6
        assert game.ages.height == 4
        assert game.age_of(0, 0) == 1

    def test_age_tracking(self):
        """Test ages through the game driver."""
        game = GameOfLife(make_grid(10, 10, BLOCK))
        for _ in range(3):
            game.step()

        assert game.age_of(4, 4) == 4
        assert game.age_of(0, 0) is None

    def test_age_tracking_disabled(self):
        """Test that ages are unavailable when tracking is off."""
        game = GameOfLife(make_grid(10, 10, BLOCK), track_ages=False)
        assert game.ages is None
        assert not game.track_ages
        game.step()

        with pytest.raises(RuntimeError):
            game.age_of(4, 4)

        assert "max_age" not in game.get_statistics()

    def test_cell_color(self):
        """Test colors of living and dead cells."""
        game = GameOfLife(make_grid(10, 10, BLOCK))

        # Each block cell has three neighbors
        assert game.cell_color(4, 4) == cell_color(1, 3)
        assert game.cell_color(0, 0) is None

        lone = GameOfLife(make_grid(5, 5, [(2, 2)]))
        assert lone.cell_color(2, 2) == ACTIVE_COLOR

    def test_vectorized_matches_scalar(self):
        """Test that both step paths give identical histories and ages."""
        fast = GameOfLife(BitGrid.random(15, 11, 0.4, rng=8), vectorized=True)
        slow = GameOfLife(BitGrid.from_array(fast.grid.to_array()), vectorized=False)

        for _ in range(10):
            fast.step()
            slow.step()

        assert fast.grid == slow.grid
        assert (fast.ages.to_array() == slow.ages.to_array()).all()
        assert fast.population_history == slow.population_history

    def test_population_change_rate(self):
        """Test population change rate calculation."""
        game = GameOfLife(make_grid(10, 10, BLOCK))
        for _ in range(5):
            game.step()

        assert game.get_population_change_rate(window_size=5) == 0.0

        dying = GameOfLife(make_grid(10, 10, [(1, 1), (6, 6)]))
        dying.step()
        assert dying.get_population_change_rate() == -2.0

    def test_population_change_rate_short_history(self):
        """Test that a single sample gives no rate."""
        game = GameOfLife(BitGrid(5, 5))
        assert game.get_population_change_rate() == 0.0

    def test_get_statistics(self):
        """Test statistics gathering."""
        game = GameOfLife(make_grid(10, 10, BLOCK))
        game.step()

        stats = game.get_statistics()
        assert stats["generation"] == 1
        assert stats["population"] == 4
        assert stats["grid_size"] == (10, 10)
        assert stats["population_density"] == pytest.approx(0.04)
        assert stats["max_age"] == 2
        assert stats["mean_age"] == pytest.approx(2.0)
        assert stats["cycle_detected"] is False
