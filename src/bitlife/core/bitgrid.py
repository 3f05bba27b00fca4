"""Packed, double-buffered bit grid for cellular automata."""

from typing import Callable, Iterator, Optional, Tuple, Union
import logging

import numpy as np
import torch
import torch.nn.functional as F

logger = logging.getLogger(__name__)

WORD_BITS = 64

# Single-bit masks for every position in a word, kept as uint64 so that
# bitwise operations never promote to a signed or float type.
_BIT_MASKS = np.left_shift(np.uint64(1), np.arange(WORD_BITS, dtype=np.uint64))

NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)

SeedFunction = Callable[[int, int], bool]
RandomSource = Union[None, int, np.random.Generator]


def next_state(alive: bool, neighbors: int) -> bool:
    """Apply the B3/S23 rule to a single cell.

    Args:
        alive: Whether the cell is currently alive
        neighbors: Number of living neighbors (0-8)

    Returns:
        Whether the cell is alive in the next generation
    """
    return (alive and (neighbors == 2 or neighbors == 3)) or (not alive and neighbors == 3)


def random_seed(probability: float = 0.5, rng: RandomSource = None) -> SeedFunction:
    """Build a seed function flipping an independent coin for every cell.

    Args:
        probability: Chance each cell starts alive (0.0 to 1.0)
        rng: numpy Generator, integer seed, or None for fresh entropy

    Returns:
        Callable taking (x, y) and returning the initial state
    """
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"Probability must be between 0.0 and 1.0, got {probability}")

    generator = np.random.default_rng(rng)

    def seed(x: int, y: int) -> bool:
        return bool(generator.random() < probability)

    return seed


def _words_for(width: int, height: int) -> int:
    """Number of words needed to hold width*height bits."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

    total_bits = width * height
    num_words = -(-total_bits // WORD_BITS)
    if num_words * np.dtype(np.uint64).itemsize > np.iinfo(np.intp).max:
        raise OverflowError(f"Grid of {width}x{height} cells is too large to allocate")
    return num_words


def _pack(cells: np.ndarray, num_words: int) -> np.ndarray:
    """Pack a flat boolean array into little-endian 64-bit words."""
    packed = np.zeros(num_words * 8, dtype=np.uint8)
    bits = np.packbits(cells.astype(np.uint8), bitorder="little")
    packed[: bits.size] = bits
    return packed.view("<u8").astype(np.uint64)


def _unpack(words: np.ndarray, total_bits: int) -> np.ndarray:
    """Unpack 64-bit words into a flat boolean array of total_bits cells."""
    raw = words.astype("<u8").view(np.uint8)
    return np.unpackbits(raw, bitorder="little")[:total_bits].astype(bool)


class BitGrid:
    """Toroidal 2D grid of cells packed one bit per cell.

    Two word buffers are kept: ``current`` holds the readable generation and
    ``next`` is scratch space written during a step. After a full pass the
    buffers swap roles, so a generation is never computed from a partially
    updated state and no memory is reallocated between steps.
    """

    def __init__(self, width: int, height: int, seed_fn: Optional[SeedFunction] = None) -> None:
        """Initialize a new grid.

        Args:
            width: Number of columns
            height: Number of rows
            seed_fn: Optional callable (x, y) -> bool deciding initial liveness

        Raises:
            ValueError: If either dimension is not positive
            OverflowError: If the word buffers cannot be addressed
        """
        self._num_words = _words_for(width, height)
        self._width = width
        self._height = height
        self._current = np.zeros(self._num_words, dtype=np.uint64)
        self._next = np.zeros(self._num_words, dtype=np.uint64)

        # Neighbor counting kernel for the bulk step (center excluded)
        self._kernel = (
            torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
        )

        if seed_fn is not None:
            for y in range(height):
                for x in range(width):
                    if seed_fn(x, y):
                        word, bit = divmod(y * width + x, WORD_BITS)
                        self._current[word] |= _BIT_MASKS[bit]

        logger.debug("Created %dx%d bit grid (%d words)", width, height, self._num_words)

    @classmethod
    def random(
        cls, width: int, height: int, probability: float = 0.5, rng: RandomSource = None
    ) -> "BitGrid":
        """Create a grid with every cell alive independently with the given probability."""
        return cls(width, height, random_seed(probability, rng))

    @classmethod
    def random_bits(cls, width: int, height: int, rng: RandomSource = None) -> "BitGrid":
        """Create a grid by flipping a fair coin for every bit of every word.

        Bits past the last cell are cleared so they never count as population.
        """
        grid = cls(width, height)
        generator = np.random.default_rng(rng)
        words = generator.integers(0, np.iinfo(np.uint64).max, size=grid._num_words, dtype=np.uint64, endpoint=True)
        tail = (width * height) % WORD_BITS
        if tail:
            words[-1] &= np.uint64((1 << tail) - 1)
        grid._current[:] = words
        return grid

    @classmethod
    def from_array(cls, cells: np.ndarray) -> "BitGrid":
        """Create a grid from a 2D array of shape (height, width)."""
        cells = np.asarray(cells, dtype=bool)
        if cells.ndim != 2:
            raise ValueError(f"Expected a 2D array, got shape {cells.shape}")

        height, width = cells.shape
        grid = cls(width, height)
        grid._current[:] = _pack(cells.ravel(), grid._num_words)
        return grid

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (width, height)."""
        return (self._width, self._height)

    @property
    def num_words(self) -> int:
        """Number of 64-bit words in each buffer."""
        return self._num_words

    @property
    def current_words(self) -> np.ndarray:
        """Read-only view of the current generation's words."""
        view = self._current.view()
        view.flags.writeable = False
        return view

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(self.to_array().sum())

    def _index(self, x: int, y: int) -> Tuple[int, int]:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self._width}x{self._height} grid")
        return divmod(y * self._width + x, WORD_BITS)

    def get(self, x: int, y: int) -> bool:
        """Get the state of a cell in the current generation.

        Args:
            x: Column coordinate
            y: Row coordinate

        Returns:
            True if cell is alive, False if dead

        Raises:
            IndexError: If coordinates are out of bounds
        """
        word, bit = self._index(x, y)
        return bool(self._current[word] & _BIT_MASKS[bit])

    def set_next(self, x: int, y: int, state: bool) -> None:
        """Set the state of a cell in the next generation.

        The current generation is never touched.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        word, bit = self._index(x, y)
        if state:
            self._next[word] |= _BIT_MASKS[bit]
        else:
            self._next[word] &= ~_BIT_MASKS[bit]

    def count_alive_neighbors(self, x: int, y: int) -> int:
        """Count living neighbors of a cell, wrapping around the edges.

        Args:
            x: Column coordinate
            y: Row coordinate

        Returns:
            Number of living neighbors (0-8)
        """
        count = 0
        for dx, dy in NEIGHBOR_OFFSETS:
            nx = (x + dx + self._width) % self._width
            ny = (y + dy + self._height) % self._height
            if self.get(nx, ny):
                count += 1
        return count

    def step(self, ages=None) -> None:
        """Advance one generation cell by cell.

        Args:
            ages: Optional AgeTracker updated in the same pass
        """
        for y in range(self._height):
            for x in range(self._width):
                alive = self.get(x, y)
                neighbors = self.count_alive_neighbors(x, y)
                alive_next = next_state(alive, neighbors)
                self.set_next(x, y, alive_next)
                if ages is not None:
                    ages.update(x, y, alive, alive_next)

        self._swap(ages)

    def step_fast(self, ages=None) -> None:
        """Advance one generation using a bulk convolution over the whole grid.

        Produces exactly the same generation as step().

        Args:
            ages: Optional AgeTracker updated before the swap
        """
        cells = self.to_array()
        neighbors = self.count_all_neighbors()

        # Survival with 2 or 3 neighbors, birth with exactly 3
        alive_next = (cells & ((neighbors == 2) | (neighbors == 3))) | (~cells & (neighbors == 3))
        self._next[:] = _pack(alive_next.ravel(), self._num_words)

        if ages is not None:
            ages.update_all(cells, alive_next)

        self._swap(ages)

    def _swap(self, ages) -> None:
        self._current, self._next = self._next, self._current
        if ages is not None:
            ages.commit()

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors for all cells using a circular-padded convolution.

        Returns:
            Integer array of shape (height, width) with neighbor counts
        """
        cells = torch.from_numpy(self.to_array().astype(np.float32)).unsqueeze(0).unsqueeze(0)
        padded = F.pad(cells, (1, 1, 1, 1), mode="circular")
        neighbors = F.conv2d(padded, self._kernel)
        return neighbors[0, 0].round().to(torch.int64).numpy().astype(np.int8)

    def to_array(self) -> np.ndarray:
        """Copy of the current generation as a boolean array of shape (height, width)."""
        return _unpack(self._current, self._width * self._height).reshape(self._height, self._width)

    def alive_cells(self) -> Iterator[Tuple[int, int]]:
        """Yield (x, y) coordinates of living cells in row-major order."""
        ys, xs = np.nonzero(self.to_array())
        for x, y in zip(xs, ys):
            yield (int(x), int(y))

    def state_bytes(self) -> bytes:
        """Byte snapshot of the current generation, suitable for hashing."""
        return self._current.tobytes()

    def __eq__(self, other: object) -> bool:
        """Check if two grids hold the same generation."""
        if not isinstance(other, BitGrid):
            return False
        return self.shape == other.shape and np.array_equal(self._current, other._current)

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        return "\n".join("".join("*" if alive else "." for alive in row) for row in self.to_array())
