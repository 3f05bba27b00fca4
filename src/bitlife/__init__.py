"""Packed-bit Conway's Game of Life on a toroidal grid."""

__version__ = "0.1.0"

from .core.bitgrid import BitGrid
from .core.ages import AgeTracker
from .core.game import GameOfLife
from .core.patterns import Pattern, PatternLibrary
from .config import DisplayConfig

__all__ = ["BitGrid", "AgeTracker", "GameOfLife", "Pattern", "PatternLibrary", "DisplayConfig"]
