#!/usr/bin/env python3
"""
Example usage of the lifegrid package.
"""

from lifegrid import Grid, GameOfLife, PatternLibrary


def main():
    """Demonstrate programmatic usage of the lifegrid package."""
    # Create a small torus and a driver for it
    grid = Grid(12, 12)
    game = GameOfLife(grid)

    # Seed a glider near the bottom-right corner so it wraps around
    library = PatternLibrary()
    glider = library.get_pattern("Glider")
    glider.apply_to_grid(grid, row_offset=8, column_offset=8)

    print("Initial state:")
    print(grid)
    print(f"Live cells: {grid.get_live_cells()}")
    print()

    for _ in range(8):
        game.step()
        print(f"Generation {game.generation}:")
        print(grid)
        print(f"Population: {game.population}")
        print()

    stats = game.get_statistics()
    print("Final statistics:")
    for key, value in stats.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
