"""Command-line interface for the packed-bit Game of Life."""

import argparse
import logging
import sys
import time
from typing import Optional, Tuple

from ..core.bitgrid import BitGrid
from ..core.game import GameOfLife
from ..core.patterns import PatternLibrary

logger = logging.getLogger(__name__)


class CLIGameOfLife:
    """Command-line interface for running Game of Life simulations."""

    def __init__(self):
        """Initialize CLI interface."""
        self.pattern_library = PatternLibrary()

    def build_grid(
        self,
        width: int,
        height: int,
        probability: float,
        seeding: str = "cell",
        seed: Optional[int] = None,
        pattern: Optional[str] = None,
        pattern_x: Optional[int] = None,
        pattern_y: Optional[int] = None,
        verbose: bool = False,
    ) -> BitGrid:
        """Create the initial grid from a pattern or random seeding.

        Args:
            width: Grid width
            height: Grid height
            probability: Chance each cell starts alive for per-cell seeding
            seeding: 'cell' for per-cell coin flips, 'bit' for per-bit word fill
            seed: Optional random seed for reproducible runs
            pattern: Optional pattern name to load
            pattern_x: X offset for pattern placement (centered if omitted)
            pattern_y: Y offset for pattern placement (centered if omitted)
            verbose: Print progress updates

        Returns:
            Initialized grid
        """
        if pattern:
            loaded_pattern = self.pattern_library.get_pattern(pattern)
            if loaded_pattern:
                center_x, center_y = loaded_pattern.centered_offset(width, height)
                offset_x = center_x if pattern_x is None else pattern_x
                offset_y = center_y if pattern_y is None else pattern_y
                if verbose:
                    print(f"Loading pattern '{pattern}' at ({offset_x}, {offset_y})")
                return loaded_pattern.to_grid(width, height, offset_x, offset_y)

            print(f"Warning: Pattern '{pattern}' not found, using random population")

        if seeding == "bit":
            if verbose:
                print("Generating random population (one coin flip per bit)")
            return BitGrid.random_bits(width, height, rng=seed)

        if verbose:
            print(f"Generating random population (rate: {probability:.2%})")
        return BitGrid.random(width, height, probability, rng=seed)

    def run_simulation(
        self,
        width: int,
        height: int,
        probability: float,
        max_generations: int,
        seeding: str = "cell",
        seed: Optional[int] = None,
        pattern: Optional[str] = None,
        pattern_x: Optional[int] = None,
        pattern_y: Optional[int] = None,
        track_ages: bool = True,
        vectorized: bool = True,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Tuple[int, str, dict]:
        """Run a Game of Life simulation until it stabilizes.

        Returns:
            Tuple of (final_generation, finish_reason, statistics)
        """
        if verbose:
            print(f"Initializing {width}x{height} toroidal grid")

        grid = self.build_grid(width, height, probability, seeding, seed, pattern, pattern_x, pattern_y, verbose)
        game = GameOfLife(grid, track_ages=track_ages, vectorized=vectorized)
        initial_population = game.population

        if verbose:
            print(f"Initial population: {initial_population} cells")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(grid))

        start_time = time.time()

        if verbose:
            print(f"\nRunning simulation (max {max_generations} generations)...")

        final_generation, reason = game.run_until_stable(max_generations)
        duration = time.time() - start_time
        logger.info("Finished after %d generations (%s) in %.3fs", final_generation, reason, duration)

        stats = game.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population

        if show_grid and reason != "extinction":
            print(f"\nFinal grid (generation {final_generation}):")
            print(self._format_grid(game.grid))

        return final_generation, reason, stats

    def animate(self, game: GameOfLife, generations: int, tick_ms: int = 150, max_size: int = 50) -> None:
        """Print the grid once per tick, stepping one generation each time.

        Args:
            game: Game to drive
            generations: Number of generations to show
            tick_ms: Delay between ticks in milliseconds
            max_size: Maximum dimension to display
        """
        for _ in range(generations):
            print(f"\nGeneration {game.generation} (population {game.population}):")
            print(self._format_grid(game.grid, max_size))
            game.step()
            if tick_ms:
                time.sleep(tick_ms / 1000)

    def _format_grid(self, grid: BitGrid, max_size: int = 50) -> str:
        """Format grid for display, truncating if too large.

        Args:
            grid: Grid to format
            max_size: Maximum dimension to display

        Returns:
            Formatted grid string
        """
        if grid.width > max_size or grid.height > max_size:
            return f"Grid too large to display ({grid.width}x{grid.height})"

        return str(grid)

    def list_patterns(self) -> None:
        """List available patterns by category."""
        categories = self.pattern_library.get_patterns_by_category()

        print("Available patterns:")
        for category, patterns in categories.items():
            print(f"\n{category}:")
            for pattern_name in patterns:
                pattern = self.pattern_library.get_pattern(pattern_name)
                if pattern:
                    size = pattern.get_size()
                    print(f"  {pattern_name}: {size[0]}x{size[1]}, {len(pattern.cells)} cells")
                    if pattern.description:
                        print(f"    {pattern.description}")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run Conway's Game of Life on a packed toroidal grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run random 100x100 simulation with half the cells alive
  bitlife-cli

  # Reproducible run filling whole words with random bits
  bitlife-cli --seeding bit --seed 42

  # Glider on a 20x20 grid, shown before and after
  bitlife-cli -W 20 -H 20 --pattern Glider --show-grid

  # Watch a blinker for 10 generations
  bitlife-cli -W 8 -H 8 --pattern Blinker --animate 10

  # List available patterns
  bitlife-cli --list-patterns
        """,
    )

    # Grid configuration
    parser.add_argument("-W", "--width", type=int, default=100, help="Grid width (default: 100)")

    parser.add_argument("-H", "--height", type=int, default=100, help="Grid height (default: 100)")

    parser.add_argument(
        "-p",
        "--probability",
        type=float,
        default=0.5,
        help="Chance each cell starts alive, 0.0-1.0 (default: 0.5)",
    )

    parser.add_argument(
        "--seeding",
        choices=["cell", "bit"],
        default="cell",
        help="Random seeding policy: per-cell coin flip or per-bit word fill (default: cell)",
    )

    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")

    # Pattern configuration
    parser.add_argument(
        "--pattern",
        type=str,
        help="Load a specific pattern instead of random population",
    )

    parser.add_argument("--pattern-x", type=int, help="X offset for pattern placement (default: centered)")

    parser.add_argument("--pattern-y", type=int, help="Y offset for pattern placement (default: centered)")

    # Simulation configuration
    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        default=1000,
        help="Maximum generations to simulate (default: 1000)",
    )

    parser.add_argument("--no-ages", action="store_true", help="Disable per-cell age tracking")

    parser.add_argument(
        "--scalar",
        action="store_true",
        help="Use the per-cell reference step instead of the bulk convolution",
    )

    parser.add_argument(
        "--animate",
        type=int,
        metavar="N",
        help="Print the grid for N generations, one per tick, instead of running until stable",
    )

    parser.add_argument(
        "--tick-ms",
        type=int,
        default=150,
        help="Delay between animated generations in milliseconds (default: 150)",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final grid states (small grids only)",
    )

    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="List all available patterns and exit",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level for diagnostic messages (default: WARNING)",
    )

    return parser


def format_finish_reason(reason: str, stats: dict) -> str:
    """Format the simulation finish reason for display.

    Args:
        reason: Finish reason from GameOfLife.run_until_stable
        stats: Statistics dictionary

    Returns:
        Formatted reason string
    """
    if reason == "extinction":
        return "Extinction - all cells died"
    elif reason == "cycle":
        cycle_len = stats.get("cycle_length", 0)
        cycle_start = stats.get("cycle_start_generation", 0)
        return f"Cycle detected - length {cycle_len}, started at generation {cycle_start}"
    elif reason == "max_generations":
        return f"Maximum generations reached ({stats.get('generation', 0)})"
    else:
        return f"Unknown reason: {reason}"


def print_results(final_generation: int, reason: str, stats: dict, verbose: bool) -> None:
    """Print simulation results.

    Args:
        final_generation: Final generation number
        reason: Finish reason
        stats: Statistics dictionary
        verbose: Whether to show detailed statistics
    """
    print(f"\nSimulation completed after {final_generation} generations")
    print(f"Finish reason: {format_finish_reason(reason, stats)}")

    if verbose:
        print("\nDetailed Statistics:")
        print(f"  Grid size: {stats['grid_size'][0]}x{stats['grid_size'][1]}")
        print(f"  Initial population: {stats['initial_population']}")
        print(f"  Final population: {stats['population']}")
        print(f"  Population density: {stats['population_density']:.2%}")
        print(f"  Population change rate: {stats['population_change_rate']:.2f}")
        if "max_age" in stats:
            print(f"  Oldest cell: {stats['max_age']} generations (mean {stats['mean_age']:.1f})")
        if "duration_seconds" in stats:
            print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
            print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")
    else:
        print(
            "Population: {} -> {}, "
            "Duration: {:.3f}s, "
            "Speed: {:.0f} gen/s".format(
                stats["initial_population"],
                stats["population"],
                stats.get("duration_seconds", 0),
                stats.get("generations_per_second", 0),
            )
        )


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.width <= 0:
        errors.append("Width must be positive")

    if args.height <= 0:
        errors.append("Height must be positive")

    if not 0.0 <= args.probability <= 1.0:
        errors.append("Probability must be between 0.0 and 1.0")

    if args.max_generations <= 0:
        errors.append("Max generations must be positive")

    if args.animate is not None and args.animate <= 0:
        errors.append("Animated generations must be positive")

    if args.tick_ms < 0:
        errors.append("Tick delay must be non-negative")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def main(argv=None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    cli = CLIGameOfLife()

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if not validate_args(args):
        return 1

    if args.pattern and cli.pattern_library.get_pattern(args.pattern) is None:
        available = cli.pattern_library.list_patterns()
        print(f"Error: Pattern '{args.pattern}' not found")
        print(f"Available patterns: {', '.join(available)}")
        print("Use --list-patterns to see detailed information")
        return 1

    try:
        if args.animate:
            grid = cli.build_grid(
                args.width,
                args.height,
                args.probability,
                args.seeding,
                args.seed,
                args.pattern,
                args.pattern_x,
                args.pattern_y,
                args.verbose,
            )
            game = GameOfLife(grid, track_ages=not args.no_ages, vectorized=not args.scalar)
            cli.animate(game, args.animate, args.tick_ms)
            return 0

        final_generation, reason, stats = cli.run_simulation(
            width=args.width,
            height=args.height,
            probability=args.probability,
            max_generations=args.max_generations,
            seeding=args.seeding,
            seed=args.seed,
            pattern=args.pattern,
            pattern_x=args.pattern_x,
            pattern_y=args.pattern_y,
            track_ages=not args.no_ages,
            vectorized=not args.scalar,
            verbose=args.verbose,
            show_grid=args.show_grid,
        )

        print_results(final_generation, reason, stats, args.verbose)

        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
