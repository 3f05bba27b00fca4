"""Basic tests for the bitlife package."""

from bitlife import BitGrid, GameOfLife, PatternLibrary


def test_grid_creation():
    """Test basic grid creation and cell reads."""
    grid = BitGrid(10, 10, lambda x, y: (x, y) == (5, 5))
    assert grid.width == 10
    assert grid.height == 10
    assert grid.get(0, 0) is False
    assert grid.get(5, 5) is True


def test_game_creation():
    """Test basic game creation."""
    game = GameOfLife(BitGrid(5, 5))
    assert game.population == 0
    assert game.generation == 0


def test_pattern_library():
    """Test pattern library has some patterns."""
    patterns = PatternLibrary().list_patterns()
    assert len(patterns) > 0
    assert "Glider" in patterns


def test_blinker_pattern():
    """Test the blinker pattern oscillates correctly."""
    grid = BitGrid(5, 5, lambda x, y: x == 2 and 1 <= y <= 3)
    game = GameOfLife(grid)
    assert game.population == 3

    # Step once - should become horizontal
    game.step()
    assert game.population == 3
    assert grid.get(1, 2) is True
    assert grid.get(2, 2) is True
    assert grid.get(3, 2) is True

    # Step again - should return to vertical
    game.step()
    assert game.population == 3
    assert grid.get(2, 1) is True
    assert grid.get(2, 2) is True
    assert grid.get(2, 3) is True
