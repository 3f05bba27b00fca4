"""Common Conway's Game of Life patterns and pattern management."""

from typing import Dict, List, Tuple, Optional, Any

from .bitgrid import BitGrid, SeedFunction


class Pattern:
    """Represents a Game of Life pattern."""

    def __init__(
        self,
        name: str,
        cells: List[Tuple[int, int]],
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: List of (x, y) coordinates for living cells
            description: Optional description
            metadata: Optional metadata dictionary
        """
        self.name = name
        self.cells = cells
        self.description = description
        self.metadata = metadata or {}

    def as_seed(self, width: int, height: int, offset_x: int = 0, offset_y: int = 0) -> SeedFunction:
        """Build a seed function placing this pattern on a grid.

        Cells shifted past an edge wrap around to the opposite side.

        Args:
            width: Width of the target grid
            height: Height of the target grid
            offset_x: Horizontal offset
            offset_y: Vertical offset

        Returns:
            Callable taking (x, y) and returning whether the cell starts alive
        """
        live = {((x + offset_x) % width, (y + offset_y) % height) for x, y in self.cells}

        def seed(x: int, y: int) -> bool:
            return (x, y) in live

        return seed

    def to_grid(self, width: int, height: int, offset_x: int = 0, offset_y: int = 0) -> BitGrid:
        """Create a grid of the given size holding this pattern."""
        return BitGrid(width, height, self.as_seed(width, height, offset_x, offset_y))

    def centered_offset(self, width: int, height: int) -> Tuple[int, int]:
        """Offset that centers this pattern on a grid of the given size."""
        pattern_width, pattern_height = self.get_size()
        min_x, min_y, _, _ = self.get_bounding_box()
        return (
            max(0, (width - pattern_width) // 2) - min_x,
            max(0, (height - pattern_height) // 2) - min_y,
        )

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the pattern.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if not self.cells:
            return (0, 0, 0, 0)

        xs, ys = zip(*self.cells)
        return (min(xs), min(ys), max(xs), max(ys))

    def get_size(self) -> Tuple[int, int]:
        """Get pattern size.

        Returns:
            Tuple of (width, height)
        """
        min_x, min_y, max_x, max_y = self.get_bounding_box()
        return (max_x - min_x + 1, max_y - min_y + 1)

    def normalize(self) -> "Pattern":
        """Return a new pattern with coordinates normalized to start at (0, 0)."""
        if not self.cells:
            return Pattern(self.name, [], self.description, self.metadata.copy())

        min_x, min_y, _, _ = self.get_bounding_box()
        normalized_cells = [(x - min_x, y - min_y) for x, y in self.cells]

        return Pattern(self.name, normalized_cells, self.description, self.metadata.copy())

    @classmethod
    def from_grid(cls, grid: BitGrid, name: str, description: str = "") -> "Pattern":
        """Create pattern from the grid's current generation."""
        cells = list(grid.alive_cells())
        metadata = {"source_grid_size": grid.shape, "population": len(cells)}
        return cls(name, cells, description, metadata)


class PatternLibrary:
    """In-memory collection of patterns."""

    CATEGORIES: Dict[str, List[str]] = {
        "Still Life": ["Block", "Beehive", "Loaf"],
        "Oscillators": ["Blinker", "Toad", "Beacon", "Pulsar"],
        "Spaceships": ["Glider", "Lightweight Spaceship"],
        "Methuselahs": ["R-pentomino", "Diehard", "Acorn"],
    }

    def __init__(self) -> None:
        self._patterns: Dict[str, Pattern] = {}
        self._load_builtin_patterns()

    def _load_builtin_patterns(self) -> None:
        """Load built-in common patterns."""
        # Still lifes
        self.add_pattern(Pattern("Block", [(0, 0), (0, 1), (1, 0), (1, 1)], "2x2 still life block"))
        self.add_pattern(
            Pattern("Beehive", [(1, 0), (2, 0), (0, 1), (3, 1), (1, 2), (2, 2)], "Beehive still life")
        )
        self.add_pattern(
            Pattern("Loaf", [(1, 0), (2, 0), (0, 1), (3, 1), (1, 2), (3, 2), (2, 3)], "Loaf still life")
        )

        # Oscillators
        self.add_pattern(Pattern("Blinker", [(0, 1), (1, 1), (2, 1)], "Period-2 oscillator"))
        self.add_pattern(
            Pattern("Toad", [(1, 0), (2, 0), (3, 0), (0, 1), (1, 1), (2, 1)], "Period-2 oscillator")
        )
        self.add_pattern(
            Pattern("Beacon", [(0, 0), (1, 0), (0, 1), (3, 2), (2, 3), (3, 3)], "Period-2 oscillator")
        )

        # Pulsar: one quadrant mirrored across both axes
        quadrant = [
            (2, 0), (3, 0), (4, 0),
            (0, 2), (5, 2), (0, 3), (5, 3), (0, 4), (5, 4),
            (2, 5), (3, 5), (4, 5),
        ]
        pulsar = sorted({(px, py) for x, y in quadrant for px in (x, 12 - x) for py in (y, 12 - y)})
        self.add_pattern(Pattern("Pulsar", pulsar, "Period-3 oscillator"))

        # Spaceships
        self.add_pattern(
            Pattern("Glider", [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)], "Smallest spaceship, period-4")
        )
        self.add_pattern(
            Pattern(
                "Lightweight Spaceship",
                [(0, 0), (3, 0), (4, 1), (0, 2), (4, 2), (1, 3), (2, 3), (3, 3), (4, 3)],
                "LWSS - Period-4 spaceship",
            )
        )

        # Methuselahs
        self.add_pattern(
            Pattern(
                "R-pentomino",
                [(1, 0), (2, 0), (0, 1), (1, 1), (1, 2)],
                "Famous methuselah that stabilizes after 1103 generations",
            )
        )
        self.add_pattern(
            Pattern(
                "Diehard",
                [(6, 0), (0, 1), (1, 1), (1, 2), (5, 2), (6, 2), (7, 2)],
                "Dies after exactly 130 generations",
            )
        )
        self.add_pattern(
            Pattern(
                "Acorn",
                [(1, 0), (3, 1), (0, 2), (1, 2), (4, 2), (5, 2), (6, 2)],
                "Takes 5206 generations to stabilize",
            )
        )

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a pattern to the library, replacing any with the same name."""
        self._patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        """Get a pattern by name.

        Args:
            name: Pattern name

        Returns:
            Pattern instance or None if not found
        """
        return self._patterns.get(name)

    def list_patterns(self) -> List[str]:
        """Get list of all pattern names."""
        return list(self._patterns.keys())

    def get_patterns_by_category(self) -> Dict[str, List[str]]:
        """Get patterns organized by category.

        Returns:
            Dictionary mapping categories to pattern name lists
        """
        categories = {name: list(members) for name, members in self.CATEGORIES.items()}
        builtin = {name for members in self.CATEGORIES.values() for name in members}
        categories["Custom"] = [name for name in self._patterns if name not in builtin]

        # Remove empty categories
        return {cat: patterns for cat, patterns in categories.items() if patterns}
