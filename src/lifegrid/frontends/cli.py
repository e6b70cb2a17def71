"""Command-line interface for Conway's Game of Life on a toroidal grid."""

import argparse
import re
import sys
import time
from typing import List, Optional, Tuple

from ..core.cell import Cell
from ..core.grid import Grid, Position
from ..core.game import GameOfLife
from ..core.patterns import PatternLibrary


def format_grid(grid: Grid, max_size: int = 50) -> str:
    """Format grid as a table with row and column numbers.

    Args:
        grid: Grid to format
        max_size: Maximum dimension to display

    Returns:
        Formatted grid string
    """
    if grid.width > max_size or grid.height > max_size:
        return f"Grid too large to display ({grid.width}x{grid.height})"

    label_width = len(str(grid.height - 1))
    column_width = len(str(grid.width - 1))
    cells = grid.cells

    lines = [" " * label_width + " " + " ".join(str(column).rjust(column_width) for column in range(grid.width))]
    for row in range(grid.height):
        glyphs = (
            Cell.from_int(cells[grid.index(row, column)]).glyph.rjust(column_width) for column in range(grid.width)
        )
        lines.append(str(row).rjust(label_width) + " " + " ".join(glyphs))

    return "\n".join(lines)


def parse_cells(text: str) -> List[Position]:
    """Parse a list of cells such as ``"1,2 2,2 3,2"`` or ``"1,2;2,2"``.

    Raises:
        ValueError: If a token is not a 'row,column' pair of integers
    """
    cells = []
    for token in re.split(r"[\s;]+", text.strip()):
        if not token:
            continue
        parts = token.split(",")
        if len(parts) != 2:
            raise ValueError(f"Invalid cell '{token}', expected 'row,column'")
        try:
            cells.append((int(parts[0]), int(parts[1])))
        except ValueError:
            raise ValueError(f"Invalid cell '{token}', expected 'row,column'")
    return cells


class CLIGameOfLife:
    """Command-line interface for running Game of Life simulations."""

    def __init__(self) -> None:
        self.pattern_library = PatternLibrary()

    def build_grid(
        self,
        width: int,
        height: int,
        cells: Optional[List[Position]] = None,
        pattern: Optional[str] = None,
        pattern_row: int = 0,
        pattern_col: int = 0,
        verbose: bool = False,
    ) -> Grid:
        """Create a grid and seed it from explicit cells and/or a named pattern.

        Raises:
            ValueError: If the pattern is unknown or the dimensions are invalid
            IndexError: If an explicit cell falls outside the grid
        """
        grid = Grid(width, height)

        if verbose:
            print(f"Initializing {width}x{height} toroidal grid")

        if pattern:
            loaded_pattern = self.pattern_library.get_pattern(pattern)
            if loaded_pattern is None:
                raise ValueError(f"Pattern '{pattern}' not found")
            if verbose:
                print(f"Loading pattern '{pattern}' at row {pattern_row}, column {pattern_col}")
            loaded_pattern.apply_to_grid(grid, pattern_row, pattern_col)

        if cells:
            if verbose:
                print(f"Seeding {len(cells)} cells")
            grid.set_live_cells(cells)

        return grid

    def run_simulation(
        self,
        width: int,
        height: int,
        max_generations: int,
        cells: Optional[List[Position]] = None,
        pattern: Optional[str] = None,
        pattern_row: int = 0,
        pattern_col: int = 0,
        verbose: bool = False,
        show_grid: bool = False,
        animate: bool = False,
        delay: float = 0.0,
    ) -> Tuple[int, str, dict]:
        """Run a Game of Life simulation.

        Args:
            width: Grid width
            height: Grid height
            max_generations: Maximum generations to run
            cells: Optional (row, column) cells to seed
            pattern: Optional pattern name to seed
            pattern_row: Row offset for pattern placement
            pattern_col: Column offset for pattern placement
            verbose: Print progress updates
            show_grid: Show initial and final grid states
            animate: Print the grid after every generation
            delay: Seconds to pause between animated generations

        Returns:
            Tuple of (final_generation, finish_reason, statistics)
        """
        grid = self.build_grid(width, height, cells, pattern, pattern_row, pattern_col, verbose)
        game = GameOfLife(grid)
        initial_population = game.population

        if verbose:
            print(f"Initial population: {initial_population} cells")

        if show_grid or animate:
            print("\nInitial grid:")
            print(format_grid(grid))

        start_time = time.time()

        if verbose:
            print(f"\nRunning simulation (max {max_generations} generations)...")

        if animate:
            final_generation, reason = self._animate(game, max_generations, delay)
        else:
            final_generation, reason = game.run_until_stable(max_generations)

        duration = time.time() - start_time

        stats = game.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population

        if show_grid and not animate and reason != "extinction":
            print(f"\nFinal grid (generation {final_generation}):")
            print(format_grid(grid))

        return final_generation, reason, stats

    def _animate(self, game: GameOfLife, max_generations: int, delay: float) -> Tuple[int, str]:
        """Step one generation at a time, printing the grid after each."""
        for _ in range(max_generations):
            if delay > 0:
                time.sleep(delay)
            game.step()
            print(f"\nGeneration {game.generation} (population {game.population}):")
            print(format_grid(game.grid))

            if game.population == 0:
                return game.generation, "extinction"
            if game.cycle_detected:
                return game.generation, "cycle"

        return game.generation, "max_generations"

    def list_patterns(self) -> None:
        """Print available patterns."""
        print("Available patterns:")
        for name in self.pattern_library.list_patterns():
            pattern = self.pattern_library.get_pattern(name)
            height, width = pattern.get_size()
            print(f"  {name:<24} {height}x{width}  {pattern.description}")


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
        if "duration_seconds" in stats:
            print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
            print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")
        if stats["live_cells"]:
            print(f"  Live cells: {' '.join(f'{row},{column}' for row, column in stats['live_cells'])}")
    else:
        print(f"Population: {stats.get('initial_population', 0)} -> {stats['population']}")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run Conway's Game of Life on a toroidal grid from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Blinker on a 5x5 grid, printing every generation
  lifegrid-cli -W 5 -H 5 --cells "1,2 2,2 3,2" --animate -m 4

  # Glider wrapping around a 10x10 grid
  lifegrid-cli -W 10 -H 10 --pattern Glider --animate --delay 0.2 -m 40

  # R-pentomino with verbose output
  lifegrid-cli --pattern R-pentomino --verbose --show-grid

  # List available patterns
  lifegrid-cli --list-patterns
        """,
    )

    # Grid configuration
    parser.add_argument("-W", "--width", type=int, default=20, help="Grid width (default: 20)")

    parser.add_argument("-H", "--height", type=int, default=20, help="Grid height (default: 20)")

    # Seeding
    parser.add_argument(
        "-c",
        "--cells",
        type=str,
        help="Live cells to seed as 'row,column' pairs separated by spaces or semicolons",
    )

    parser.add_argument("--pattern", type=str, help="Seed a named pattern")

    parser.add_argument(
        "--pattern-row",
        type=int,
        help="Row offset for pattern placement, wrapping around the grid (default: centered)",
    )

    parser.add_argument(
        "--pattern-col",
        type=int,
        help="Column offset for pattern placement, wrapping around the grid (default: centered)",
    )

    # Simulation configuration
    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        default=100,
        help="Maximum generations to simulate (default: 100)",
    )

    # Output configuration
    parser.add_argument(
        "-a",
        "--animate",
        action="store_true",
        help="Print the grid after every generation",
    )

    parser.add_argument(
        "--delay",
        type=float,
        default=0.1,
        help="Seconds between animated generations (default: 0.1)",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final grid states",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument("--list-patterns", action="store_true", help="List available patterns and exit")

    return parser


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

    if args.max_generations <= 0:
        errors.append("Max generations must be positive")

    if args.delay < 0:
        errors.append("Delay must be non-negative")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    cli = CLIGameOfLife()

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if not validate_args(args):
        return 1

    cells = None
    if args.cells:
        try:
            cells = parse_cells(args.cells)
        except ValueError as e:
            print(f"Error: {e}")
            return 1

    pattern_row = args.pattern_row or 0
    pattern_col = args.pattern_col or 0
    if args.pattern:
        pattern = cli.pattern_library.get_pattern(args.pattern)
        if pattern is None:
            available = cli.pattern_library.list_patterns()
            print(f"Error: Pattern '{args.pattern}' not found")
            print(f"Available patterns: {', '.join(available)}")
            return 1

        # Center the pattern unless an offset was given
        pattern_height, pattern_width = pattern.get_size()
        if args.pattern_row is None:
            pattern_row = max(0, (args.height - pattern_height) // 2)
        if args.pattern_col is None:
            pattern_col = max(0, (args.width - pattern_width) // 2)
        if args.verbose:
            print(f"Centering pattern at row {pattern_row}, column {pattern_col}")

    try:
        final_generation, reason, stats = cli.run_simulation(
            width=args.width,
            height=args.height,
            max_generations=args.max_generations,
            cells=cells,
            pattern=args.pattern,
            pattern_row=pattern_row,
            pattern_col=pattern_col,
            verbose=args.verbose,
            show_grid=args.show_grid,
            animate=args.animate,
            delay=args.delay,
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
