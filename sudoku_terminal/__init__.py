"""Single-player Sudoku: game engine, constraint checker, history and a pygame front end."""

from .engine import CellCheck, GameEngine, PuzzleCheck
from .generator import PuzzleGenerationError, PuzzleGenerator
from .grid import Cell, Grid, PinnedNotes
from .history import HistoryManager
from .storage import GameStorage

__version__ = '0.3.0'

__all__ = [
    'Cell',
    'CellCheck',
    'GameEngine',
    'GameStorage',
    'Grid',
    'HistoryManager',
    'PinnedNotes',
    'PuzzleCheck',
    'PuzzleGenerationError',
    'PuzzleGenerator',
]
