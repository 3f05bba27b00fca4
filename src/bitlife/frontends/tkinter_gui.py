"""Tkinter viewer for the packed-bit Game of Life."""

import argparse
import logging
import tkinter as tk
from typing import Dict, Optional, Tuple

import numpy as np

from ..config import DisplayConfig
from ..core.bitgrid import BitGrid
from ..core.colors import ACTIVE_COLOR, cell_color, to_hex
from ..core.game import GameOfLife

logger = logging.getLogger(__name__)


class TkinterGameOfLifeGUI:
    """Tkinter window that steps the game once per tick and draws it.

    The viewer only reads the grid between steps; it never edits cells.
    """

    def __init__(self, master: tk.Tk, config: Optional[DisplayConfig] = None, seed: Optional[int] = None) -> None:
        """Initialize the GUI.

        Args:
            master: Root Tkinter window
            config: Window and grid sizing (defaults to DisplayConfig())
            seed: Optional random seed for the initial population
        """
        self.master = master
        self.config = config or DisplayConfig()
        self.master.title("Conway's Game of Life")
        self.master.configure(bg="#333333")

        self.cell_size = self.config.cell_size
        self.canvas_width = int(self.config.window_width)
        self.canvas_height = int(self.config.window_height)
        self.cols = self.config.grid_width
        self.rows = self.config.grid_height

        self._rng = np.random.default_rng(seed)
        self.game = GameOfLife(self._new_grid(), track_ages=self.config.track_ages)

        self.running = False

        # Canvas rectangles for living cells, keyed by (x, y)
        self.cell_objects: Dict[Tuple[int, int], int] = {}

        self.setup_ui()
        self.redraw_all_cells()
        self.update_statistics()
        self._after_id = self.master.after(self.config.tick_ms, self.update_loop)

    @property
    def grid(self) -> BitGrid:
        return self.game.grid

    def _new_grid(self) -> BitGrid:
        return BitGrid.random(self.cols, self.rows, self.config.probability, rng=self._rng)

    def setup_ui(self) -> None:
        """Set up the user interface."""
        control_frame = tk.Frame(self.master, bg="#333333")
        control_frame.pack(pady=5)

        self.toggle_btn = tk.Button(
            control_frame,
            text="Toggle Run",
            command=self.toggle_running,
            bg="#555555",
            fg="white",
            font=("Arial", 9),
        )
        self.toggle_btn.pack(side=tk.LEFT, padx=3)

        self.step_btn = tk.Button(
            control_frame,
            text="Step",
            command=self.step_once,
            bg="#555555",
            fg="white",
            font=("Arial", 9),
        )
        self.step_btn.pack(side=tk.LEFT, padx=3)

        self.reset_btn = tk.Button(
            control_frame,
            text="Reset",
            command=self.reset_grid,
            bg="#555555",
            fg="white",
            font=("Arial", 9),
        )
        self.reset_btn.pack(side=tk.LEFT, padx=3)

        main_frame = tk.Frame(self.master, bg="#333333")
        main_frame.pack(fill=tk.BOTH, expand=True)

        self.canvas = tk.Canvas(
            main_frame,
            width=self.canvas_width,
            height=self.canvas_height,
            bg="black",
            highlightthickness=0,
        )
        self.canvas.pack(side=tk.LEFT, padx=5)

        stats_frame = tk.Frame(main_frame, bg="#333333")
        stats_frame.pack(side=tk.RIGHT, fill=tk.Y, padx=10, pady=5)

        self.stats_labels: Dict[str, tk.Label] = {}
        for stat in ("Running", "Generation", "Population", "Oldest Cell", "Cycle Status"):
            label = tk.Label(stats_frame, text=f"{stat}: -", bg="#333333", fg="white", font=("Arial", 9), anchor="w")
            label.pack(fill=tk.X)
            self.stats_labels[stat] = label

    def toggle_running(self) -> None:
        """Start or pause the simulation."""
        self.running = not self.running
        self.update_statistics()

    def step_once(self) -> None:
        """Advance a single generation and redraw."""
        self.game.step()
        self.redraw_all_cells()
        self.update_statistics()

    def reset_grid(self) -> None:
        """Replace the grid with a fresh random population."""
        self.game.reset(self._new_grid())
        logger.debug("Viewer reset at population %d", self.game.population)
        self.redraw_all_cells()
        self.update_statistics()

    def cell_fill(self, x: int, y: int, neighbors: int) -> str:
        """Fill color for a living cell."""
        if not self.game.track_ages:
            return to_hex(ACTIVE_COLOR)
        return to_hex(cell_color(self.game.age_of(x, y), neighbors))

    def redraw_all_cells(self) -> None:
        """Bring the canvas in line with the current generation."""
        alive = self.grid.to_array()
        neighbors = self.grid.count_all_neighbors()

        # Remove cells that died
        for cell_key in [key for key in self.cell_objects if not alive[key[1], key[0]]]:
            self.canvas.delete(self.cell_objects.pop(cell_key))

        ys, xs = np.nonzero(alive)
        for x, y in zip(xs.tolist(), ys.tolist()):
            color = self.cell_fill(x, y, int(neighbors[y, x]))
            cell_key = (x, y)
            if cell_key in self.cell_objects:
                self.canvas.itemconfig(self.cell_objects[cell_key], fill=color)
            else:
                x1 = x * self.cell_size
                y1 = y * self.cell_size
                self.cell_objects[cell_key] = self.canvas.create_rectangle(
                    x1, y1, x1 + self.cell_size, y1 + self.cell_size, fill=color, outline=""
                )

    def update_statistics(self) -> None:
        """Update the statistics display."""
        stats = self.game.get_statistics()

        cycle_status = "None"
        if stats["cycle_detected"]:
            cycle_status = f"Cycle {stats['cycle_length']} (gen {stats['cycle_start_generation']})"

        display_stats = {
            "Running": "Yes" if self.running else "No",
            "Generation": str(stats["generation"]),
            "Population": f"{stats['population']} ({stats['population_density'] * 100:.1f}%)",
            "Oldest Cell": str(stats["max_age"]) if "max_age" in stats else "n/a",
            "Cycle Status": cycle_status,
        }

        for stat, value in display_stats.items():
            self.stats_labels[stat].config(text=f"{stat}: {value}")

    def update_loop(self) -> None:
        """Step once per tick while running, then schedule the next tick."""
        if self.running:
            self.step_once()
        self._after_id = self.master.after(self.config.tick_ms, self.update_loop)

    def stop(self) -> None:
        """Cancel the pending tick."""
        if self._after_id is not None:
            self.master.after_cancel(self._after_id)
            self._after_id = None


def create_parser() -> argparse.ArgumentParser:
    """Create the viewer's argument parser."""
    parser = argparse.ArgumentParser(description="Watch Conway's Game of Life in a Tkinter window")
    parser.add_argument("--window-width", type=float, default=1000.0, help="Window width in pixels (default: 1000)")
    parser.add_argument("--window-height", type=float, default=1000.0, help="Window height in pixels (default: 1000)")
    parser.add_argument("--cells", type=int, default=100, help="Cells per row (default: 100)")
    parser.add_argument("--tick-ms", type=int, default=150, help="Delay between generations (default: 150)")
    parser.add_argument("-p", "--probability", type=float, default=0.5, help="Initial live probability (default: 0.5)")
    parser.add_argument("--seed", type=int, help="Random seed for the initial population")
    parser.add_argument("--no-ages", action="store_true", help="Draw every cell in one color")
    parser.add_argument("--test", action="store_true", help="Run for three seconds and exit")
    return parser


def main(argv=None) -> None:
    """Main entry point for the Tkinter GUI."""
    args = create_parser().parse_args(argv)
    config = DisplayConfig(
        window_width=args.window_width,
        window_height=args.window_height,
        cell_count=args.cells,
        tick_ms=args.tick_ms,
        probability=args.probability,
        track_ages=not args.no_ages,
    )

    root = tk.Tk()
    root.resizable(False, False)

    app = TkinterGameOfLifeGUI(root, config, seed=args.seed)
    app.running = True

    if args.test:
        print("Running in test mode...")

        def auto_exit() -> None:
            print(f"Test completed. Ran {app.game.generation} generations.")
            app.stop()
            root.quit()
            root.destroy()

        root.after(3000, auto_exit)

    root.mainloop()


if __name__ == "__main__":
    main()
