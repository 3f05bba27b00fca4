"""Frontend interfaces for the automaton."""

from .cli import CLIGameOfLife

__all__ = ["CLIGameOfLife"]
