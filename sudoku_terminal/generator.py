"""
Puzzle provider.

Generates a full valid board, then removes numbers to create a puzzle with
exactly the clue count configured for the difficulty.
"""

import random

from .constants import DIFFICULTY_CONFIG, DIGITS, GRID_SIZE
from .constraints import is_valid_placement


class PuzzleGenerationError(RuntimeError):
    """Raised when no playable puzzle could be produced."""


class PuzzleGenerator:
    def __init__(self, rng=None):
        # Accept a seeded random.Random for reproducible puzzles
        self.rng = rng or random.Random()

    def generate_complete_board(self):
        """Generates a completely filled, valid Sudoku grid."""
        board = [[0] * GRID_SIZE for _ in range(GRID_SIZE)]
        if not self.fill_board(board):
            raise PuzzleGenerationError("Could not fill an empty board")
        return board

    def fill_board(self, board):
        """Recursively fills the board with random numbers."""
        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                if board[i][j] == 0:
                    numbers = list(DIGITS)
                    self.rng.shuffle(numbers)

                    for num in numbers:
                        if is_valid_placement(board, i, j, num):
                            board[i][j] = num
                            if self.fill_board(board):
                                return True
                            board[i][j] = 0

                    return False
        return True

    def create_puzzle(self, solution, difficulty):
        """Clears randomly chosen cells until only the configured clues remain."""
        puzzle = [row[:] for row in solution]
        cells_to_remove = GRID_SIZE * GRID_SIZE - DIFFICULTY_CONFIG[difficulty]['clues']

        # Create a list of all coordinates and shuffle them
        cells = [(i, j) for i in range(GRID_SIZE) for j in range(GRID_SIZE)]
        self.rng.shuffle(cells)

        for row, col in cells[:cells_to_remove]:
            puzzle[row][col] = 0
        return puzzle

    def generate(self, difficulty):
        """Main entry point: returns (puzzle, solution) for the difficulty."""
        if difficulty not in DIFFICULTY_CONFIG:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        solution = self.generate_complete_board()
        puzzle = self.create_puzzle(solution, difficulty)
        return puzzle, solution
