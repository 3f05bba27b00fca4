"""Conway's Game of Life driver over a packed bit grid."""

from typing import Deque, Dict, Optional, Tuple
from collections import deque
import logging

import numpy as np

from .ages import AgeTracker
from .bitgrid import BitGrid
from .colors import Color, cell_color

logger = logging.getLogger(__name__)


class GameOfLife:
    """Conway's Game of Life simulation engine.

    Implements the classic B3/S23 rules on a toroidal grid:
    - Live cell with 2-3 neighbors survives
    - Dead cell with exactly 3 neighbors becomes alive
    - All other cells die or stay dead
    """

    def __init__(self, grid: BitGrid, track_ages: bool = True, vectorized: bool = True) -> None:
        """Initialize the game with a grid.

        Args:
            grid: The cellular grid to simulate
            track_ages: Whether to keep per-cell ages for coloring
            vectorized: Use the bulk convolution step instead of the per-cell pass
        """
        self.grid = grid
        self.vectorized = vectorized
        self.ages: Optional[AgeTracker] = AgeTracker.from_grid(grid) if track_ages else None
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[bytes] = deque(maxlen=1000)
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def track_ages(self) -> bool:
        return self.ages is not None

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        """Whether a cycle has been detected."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    def step(self) -> None:
        """Advance the simulation by one generation."""
        self._check_for_cycles()

        if self.vectorized:
            self.grid.step_fast(self.ages)
        else:
            self.grid.step(self.ages)

        self._generation += 1
        self._update_population_history()

    def age_of(self, x: int, y: int) -> Optional[int]:
        """Get the age of a cell, or None if it is dead.

        Raises:
            RuntimeError: If age tracking is disabled
        """
        if self.ages is None:
            raise RuntimeError("Age tracking is disabled for this game")
        return self.ages.age_of(x, y)

    def cell_color(self, x: int, y: int) -> Optional[Color]:
        """Display color of a cell, or None if it is dead."""
        age = self.age_of(x, y)
        if age is None:
            return None
        return cell_color(age, self.grid.count_alive_neighbors(x, y))

    def _update_population_history(self) -> None:
        self._population_history.append(self.population)

    def _check_for_cycles(self) -> None:
        """Check if the current state has been seen before (cycle detection)."""
        if self._cycle_detected:
            return

        current_state = self.grid.state_bytes()

        if current_state in self._seen_states:
            first_occurrence = self._seen_states[current_state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            logger.debug(
                "Cycle of length %d detected at generation %d", self._cycle_length, self._generation
            )
            return

        self._seen_states[current_state] = self._generation
        self._state_history.append(current_state)

        # Forget the oldest state once the window is nearly full
        if len(self._state_history) > 900:
            old_state = self._state_history[0]
            if self._seen_states.get(old_state) == self._generation - len(self._state_history) + 1:
                del self._seen_states[old_state]

    def reset(self, grid: Optional[BitGrid] = None) -> None:
        """Reset the simulation.

        Args:
            grid: Optional replacement grid; the current grid is kept otherwise
        """
        if grid is not None:
            self.grid = grid

        if self.ages is not None:
            self.ages = AgeTracker.from_grid(self.grid)

        self._generation = 0
        self._population_history.clear()
        self._state_history.clear()
        self._seen_states.clear()
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._update_population_history()
        logger.debug("Game reset on %dx%d grid", self.grid.width, self.grid.height)

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Run simulation until it becomes stable or cycles.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self._cycle_detected:
                return self._generation, "cycle"

            if self.population == 0:
                return self._generation, "extinction"

        return self._generation, "max_generations"

    def get_population_change_rate(self, window_size: int = 10) -> float:
        """Calculate recent population change rate.

        Args:
            window_size: Number of recent generations to consider

        Returns:
            Average population change per generation
        """
        recent_history = list(self._population_history)[-window_size:]
        if len(recent_history) < 2:
            return 0.0

        return float(np.mean(np.diff(recent_history)))

    def get_statistics(self) -> Dict:
        """Get simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        population = self.population
        stats = {
            "generation": self._generation,
            "population": population,
            "population_change_rate": self.get_population_change_rate(),
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": self.grid.shape,
            "population_density": population / (self.grid.width * self.grid.height),
        }

        if self.ages is not None:
            stats["max_age"] = self.ages.max_age
            stats["mean_age"] = self.ages.mean_age

        return stats
