"""Core cellular automata logic."""

from .bitgrid import BitGrid, next_state, random_seed
from .ages import AgeTracker
from .colors import Color, cell_color, to_hex
from .game import GameOfLife
from .patterns import Pattern, PatternLibrary

__all__ = [
    "BitGrid",
    "next_state",
    "random_seed",
    "AgeTracker",
    "Color",
    "cell_color",
    "to_hex",
    "GameOfLife",
    "Pattern",
    "PatternLibrary",
]
