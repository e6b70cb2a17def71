"""Core cellular automata logic."""

from .cell import Cell
from .grid import Grid
from .game import GameOfLife
from .patterns import Pattern, PatternLibrary

__all__ = ["Cell", "Grid", "GameOfLife", "Pattern", "PatternLibrary"]
