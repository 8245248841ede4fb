import random

import pytest

from sudoku_terminal.constants import DIFFICULTIES, DIFFICULTY_CONFIG
from sudoku_terminal.constraints import is_valid_solution
from sudoku_terminal.generator import PuzzleGenerator


@pytest.mark.parametrize('difficulty', DIFFICULTIES)
def test_generate_yields_valid_solution_and_exact_clues(difficulty):
    puzzle, solution = PuzzleGenerator(random.Random(7)).generate(difficulty)

    assert is_valid_solution(solution)
    clues = [(i, j) for i in range(9) for j in range(9) if puzzle[i][j]]
    assert len(clues) == DIFFICULTY_CONFIG[difficulty]['clues']
    for i, j in clues:
        assert puzzle[i][j] == solution[i][j]


def test_seeded_generators_agree():
    first = PuzzleGenerator(random.Random(3)).generate('easy')
    second = PuzzleGenerator(random.Random(3)).generate('easy')
    assert first == second


def test_unknown_difficulty_is_rejected():
    with pytest.raises(ValueError):
        PuzzleGenerator().generate('expert')
