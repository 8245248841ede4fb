import random

import pytest

from sudoku_terminal.constants import DIFFICULTY_CONFIG
from sudoku_terminal.constraints import candidates_of
from sudoku_terminal.engine import GameEngine
from sudoku_terminal.stats import SettingsState

SOLUTION_TEXT = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"
SOLUTION = [[int(ch) for ch in SOLUTION_TEXT[i:i + 9]] for i in range(0, 81, 9)]


def make_puzzle(difficulty, seed=0):
    """The fixed solution with cells cleared down to the difficulty's clue count."""
    cells = [(i, j) for i in range(9) for j in range(9)]
    random.Random(seed).shuffle(cells)
    puzzle = [row[:] for row in SOLUTION]
    for row, col in cells[:81 - DIFFICULTY_CONFIG[difficulty]['clues']]:
        puzzle[row][col] = 0
    return puzzle


class FixedProvider:
    """Always hands out the same solution; records how often it was asked."""

    def __init__(self):
        self.calls = 0

    def generate(self, difficulty):
        self.calls += 1
        return make_puzzle(difficulty), [row[:] for row in SOLUTION]


@pytest.fixture
def provider():
    return FixedProvider()


@pytest.fixture
def engine(provider):
    game = GameEngine(provider=provider)
    game.start_new_game('medium')
    return game


@pytest.fixture
def auto_engine(provider):
    game = GameEngine(provider=provider, settings=SettingsState(gameplay={'autoNotes': True}))
    game.start_new_game('medium')
    return game


def empty_cells(game):
    return [(r, c) for r, c, cell in game.grid.positions() if cell.value == 0]


def given_cells(game):
    return [(r, c) for r, c, cell in game.grid.positions() if cell.is_given]


def conflicting_move(game):
    """An empty cell and a digit already present among its peers."""
    for row, col in empty_cells(game):
        blocked = set(range(1, 10)) - candidates_of(game.grid, row, col)
        if blocked:
            return row, col, min(blocked)
    raise AssertionError("no conflicting move available")


def wrong_safe_move(game):
    """An empty cell and a digit that is a legal candidate but not the solution."""
    for row, col in empty_cells(game):
        for num in sorted(candidates_of(game.grid, row, col)):
            if num != game.solution[row][col]:
                return row, col, num
    raise AssertionError("no wrong-but-legal move available")
