"""Startup configuration shared by the frontends."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DisplayConfig:
    """Window and grid sizing, fixed for the lifetime of a run.

    The cell size is derived from the window width and the requested number
    of cells per row; the grid then fills the window in both directions.
    """

    window_width: float = 1000.0
    window_height: float = 1000.0
    cell_count: int = 100
    tick_ms: int = 150
    probability: float = 0.5
    track_ages: bool = True

    def __post_init__(self) -> None:
        errors = []

        if self.window_width <= 0 or self.window_height <= 0:
            errors.append("Window dimensions must be positive")

        if self.cell_count <= 0:
            errors.append("Cell count must be positive")
        elif self.window_width > 0 and self.cell_count > self.window_width:
            errors.append("Cell count cannot exceed the window width in pixels")

        if self.tick_ms < 0:
            errors.append("Tick delay must be non-negative")

        if not 0.0 <= self.probability <= 1.0:
            errors.append("Probability must be between 0.0 and 1.0")

        if errors:
            raise ValueError("Invalid display configuration: " + "; ".join(errors))

    @property
    def cell_size(self) -> float:
        """Edge length of one cell in pixels."""
        return self.window_width / self.cell_count

    @property
    def grid_width(self) -> int:
        return int(self.window_width / self.cell_size)

    @property
    def grid_height(self) -> int:
        return int(self.window_height / self.cell_size)
