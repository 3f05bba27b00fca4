#!/usr/bin/env python3
"""
Example usage of the bitlife package.
"""

from bitlife import BitGrid, GameOfLife, PatternLibrary


def main():
    """Demonstrate programmatic usage of the bitlife package."""
    library = PatternLibrary()
    glider = library.get_pattern("Glider")

    # Place a glider near the center of a 20x20 torus
    grid = glider.to_grid(20, 20, offset_x=8, offset_y=8)
    game = GameOfLife(grid)

    print("Initial state:")
    print(game.grid)
    print(f"Population: {game.population}")
    print()

    for _ in range(10):
        game.step()
        print(f"Generation {game.generation}:")
        print(game.grid)
        oldest = max(age for _, age in game.ages.items())
        print(f"Population: {game.population}, oldest cell: {oldest}")
        print()

    # A random soup with every bit of every word flipped independently
    soup = GameOfLife(BitGrid.random_bits(32, 32, rng=0))
    final_generation, reason = soup.run_until_stable(max_generations=2000)
    print(f"Random soup finished after {final_generation} generations ({reason})")

    print("Final statistics:")
    for key, value in soup.get_statistics().items():
        if key != "population_history":
            print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
