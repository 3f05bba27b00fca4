"""Per-cell age tracking for living cells."""

from typing import Iterator, Optional, Tuple
import logging

import numpy as np

logger = logging.getLogger(__name__)


class AgeTracker:
    """Tracks how many consecutive generations each living cell has been alive.

    Ages are stored densely as a (height, width) array where 0 means the cell
    is dead. Updates for a generation are written to a second array and only
    become visible on commit(), which the grid calls as it swaps its own
    buffers.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize an empty tracker.

        Args:
            width: Number of columns
            height: Number of rows

        Raises:
            ValueError: If either dimension is not positive
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self._ages = np.zeros((height, width), dtype=np.uint32)
        self._next_ages = np.zeros((height, width), dtype=np.uint32)

    @classmethod
    def from_grid(cls, grid) -> "AgeTracker":
        """Create a tracker whose living cells match the grid's current generation."""
        tracker = cls(grid.width, grid.height)
        tracker.seed(grid.to_array())
        return tracker

    def seed(self, alive: np.ndarray) -> None:
        """Reset all ages: every living cell gets age 1, every dead cell none.

        Args:
            alive: Boolean array of shape (height, width)

        Raises:
            ValueError: If the array shape doesn't match the tracker
        """
        alive = np.asarray(alive, dtype=bool)
        if alive.shape != self._ages.shape:
            raise ValueError(f"Alive mask shape {alive.shape} doesn't match tracker {self._ages.shape}")

        self._ages[:] = alive
        self._next_ages.fill(0)
        logger.debug("Seeded ages for %d living cells", int(alive.sum()))

    def update(self, x: int, y: int, was_alive: bool, is_alive: bool) -> None:
        """Record one cell's transition for the generation being computed.

        Args:
            x: Column coordinate
            y: Row coordinate
            was_alive: State in the current generation
            is_alive: State in the next generation
        """
        if not is_alive:
            self._next_ages[y, x] = 0
        elif was_alive:
            self._next_ages[y, x] = self._ages[y, x] + 1
        else:
            self._next_ages[y, x] = 1

    def update_all(self, was_alive: np.ndarray, is_alive: np.ndarray) -> None:
        """Record the transition of every cell at once.

        Args:
            was_alive: Boolean array of the current generation
            is_alive: Boolean array of the next generation
        """
        self._next_ages[:] = np.where(is_alive, np.where(was_alive, self._ages + 1, 1), 0)

    def commit(self) -> None:
        """Make the ages recorded since the last commit current.

        Every cell must have been updated since the previous commit.
        """
        self._ages, self._next_ages = self._next_ages, self._ages

    def age_of(self, x: int, y: int) -> Optional[int]:
        """Get the age of a cell.

        Returns:
            Number of consecutive generations alive, or None if the cell is dead

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds")

        age = int(self._ages[y, x])
        return age if age > 0 else None

    def items(self) -> Iterator[Tuple[Tuple[int, int], int]]:
        """Yield ((x, y), age) for every living cell in row-major order."""
        ys, xs = np.nonzero(self._ages)
        for x, y in zip(xs, ys):
            yield (int(x), int(y)), int(self._ages[y, x])

    def alive_coordinates(self) -> set:
        """Set of (x, y) coordinates that currently have an age."""
        return {coords for coords, _ in self.items()}

    def to_array(self) -> np.ndarray:
        """Copy of the current ages as an array of shape (height, width)."""
        return self._ages.copy()

    @property
    def max_age(self) -> int:
        """Age of the oldest living cell (0 if none)."""
        return int(self._ages.max())

    @property
    def mean_age(self) -> float:
        """Average age of living cells (0.0 if none)."""
        living = self._ages[self._ages > 0]
        return float(living.mean()) if living.size else 0.0

    def __len__(self) -> int:
        return int(np.count_nonzero(self._ages))

    def __contains__(self, coords: object) -> bool:
        if not isinstance(coords, tuple) or len(coords) != 2:
            return False
        x, y = coords
        return 0 <= x < self.width and 0 <= y < self.height and bool(self._ages[y, x])
