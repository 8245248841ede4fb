"""
Game engine: owns one game session and mediates every change to it.

Mutating operations return True when they changed state and False when a
guard turned them into a no-op (no selection, given cell, paused, complete,
no hints left). Each successful grid change records exactly one history
snapshot; listeners registered with `subscribe` are told about every change.
"""

import logging
from collections import namedtuple

from .constants import (DEFAULT_DIFFICULTY, DIFFICULTY_CONFIG, DIGITS, GRID_SIZE,
                        MAX_GENERATION_ATTEMPTS, STORAGE_VERSION)
from .constraints import (candidates_of, find_all_conflicts, has_conflict, is_puzzle_complete,
                          is_valid_solution, prune_candidate_from_peers, recompute_all_candidates,
                          reconcile_all_candidates, restore_candidate_to_peers)
from .generator import PuzzleGenerationError, PuzzleGenerator
from .grid import Grid, empty_matrix
from .history import HistoryManager
from .stats import SettingsState, Statistics

logger = logging.getLogger(__name__)

CellCheck = namedtuple('CellCheck', ['checked', 'correct'])
PuzzleCheck = namedtuple('PuzzleCheck', ['filled', 'correct', 'incorrect'])


class GameEngine:
    def __init__(self, provider=None, settings=None, stats=None):
        self.provider = provider or PuzzleGenerator()
        self.settings = settings or SettingsState()
        self.stats = stats or Statistics()
        self.listeners = []

        # Session state (no game until start_new_game or a restore)
        self.puzzle = empty_matrix()
        self.solution = empty_matrix()
        self.grid = Grid()
        self.selected = None
        self.difficulty = DEFAULT_DIFFICULTY
        self.timer = 0
        self.is_paused = False
        self.is_complete = False
        self.mistakes = 0
        self.hints_remaining = DIFFICULTY_CONFIG[DEFAULT_DIFFICULTY]['hints_allowed']
        self.history = HistoryManager()

    # ---------------------------------------------------------------------
    # Observers
    # ---------------------------------------------------------------------
    def subscribe(self, listener):
        """Registers `listener(engine, action)`; returns a callable that removes it."""
        self.listeners.append(listener)

        def unsubscribe():
            if listener in self.listeners:
                self.listeners.remove(listener)
        return unsubscribe

    def _notify(self, action):
        for listener in list(self.listeners):
            listener(self, action)

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------
    @property
    def has_game(self):
        return any(num for row in self.solution for num in row)

    @property
    def auto_notes(self):
        return self.settings.get('autoNotes')

    @property
    def hints_allowed(self):
        return DIFFICULTY_CONFIG[self.difficulty]['hints_allowed']

    def can_undo(self):
        return self.history.can_undo()

    def can_redo(self):
        return self.history.can_redo()

    def selected_value(self):
        if self.selected is None:
            return 0
        row, col = self.selected
        return self.grid[row][col].value

    def is_incorrect(self, row, col):
        value = self.grid[row][col].value
        return value != 0 and value != self.solution[row][col]

    def conflicting_cells(self):
        return find_all_conflicts(self.grid)

    # ---------------------------------------------------------------------
    # Session lifecycle
    # ---------------------------------------------------------------------
    def start_new_game(self, difficulty):
        """Requests a puzzle from the provider and replaces the whole session."""
        if difficulty not in DIFFICULTY_CONFIG:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")

        puzzle, solution = self._generate(difficulty)

        self.puzzle = puzzle
        self.solution = solution
        self.difficulty = difficulty
        self.hints_remaining = DIFFICULTY_CONFIG[difficulty]['hints_allowed']
        self._begin_session()
        logger.info("Started %s game with %d clues", difficulty,
                    sum(1 for row in puzzle for num in row if num))
        self._notify('new_game')

    def _generate(self, difficulty):
        """Calls the provider until it yields a valid pair, up to the retry cap."""
        for attempt in range(1, MAX_GENERATION_ATTEMPTS + 1):
            try:
                puzzle, solution = self.provider.generate(difficulty)
                self._validate_generated(puzzle, solution, difficulty)
                return [list(row) for row in puzzle], [list(row) for row in solution]
            except (PuzzleGenerationError, ValueError) as exc:
                logger.warning("Puzzle generation attempt %d/%d failed: %s",
                               attempt, MAX_GENERATION_ATTEMPTS, exc)

        logger.error("Giving up on %s puzzle after %d attempts", difficulty, MAX_GENERATION_ATTEMPTS)
        raise PuzzleGenerationError(
            f"Could not generate a {difficulty} puzzle after {MAX_GENERATION_ATTEMPTS} attempts")

    @staticmethod
    def _validate_generated(puzzle, solution, difficulty):
        if not is_valid_solution(solution):
            raise ValueError("provider returned an invalid solution")
        if len(puzzle) != GRID_SIZE or any(len(row) != GRID_SIZE for row in puzzle):
            raise ValueError("provider returned a puzzle that is not 9x9")

        clues = 0
        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                if puzzle[i][j] != 0:
                    if puzzle[i][j] != solution[i][j]:
                        raise ValueError("puzzle clue disagrees with the solution")
                    clues += 1

        expected = DIFFICULTY_CONFIG[difficulty]['clues']
        if clues != expected:
            raise ValueError(f"puzzle has {clues} clues, expected {expected}")

    def _begin_session(self):
        """Rebuilds the grid from the stored puzzle and clears per-session counters."""
        self.grid = Grid.from_puzzle(self.puzzle)
        if self.auto_notes:
            recompute_all_candidates(self.grid)
        self.selected = None
        self.timer = 0
        self.mistakes = 0
        self.is_paused = False
        self.is_complete = False
        self.history.reset(self.grid)

    def reset_puzzle(self):
        """Restarts the current puzzle; the hint allotment is not refilled."""
        if not self.has_game:
            return False
        self._begin_session()
        self._notify('reset')
        return True

    # ---------------------------------------------------------------------
    # Selection and timer
    # ---------------------------------------------------------------------
    def select_cell(self, row, col):
        """Moves the selection. Not gated by pause or completion."""
        if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
            return False
        self.selected = (row, col)
        self._notify('select')
        return True

    def move_selection(self, d_row, d_col):
        """Keyboard navigation: steps the selection, clamped to the grid."""
        if self.selected is None:
            return self.select_cell(0, 0)
        row, col = self.selected
        row = min(GRID_SIZE - 1, max(0, row + d_row))
        col = min(GRID_SIZE - 1, max(0, col + d_col))
        return self.select_cell(row, col)

    def pause_game(self):
        if self.is_paused:
            return False
        self.is_paused = True
        self._notify('pause')
        return True

    def resume_game(self):
        if not self.is_paused:
            return False
        self.is_paused = False
        self._notify('resume')
        return True

    def increment_timer(self):
        if self.is_paused or self.is_complete or not self.has_game:
            return False
        self.timer += 1
        self._notify('tick')
        return True

    # ---------------------------------------------------------------------
    # Grid mutations
    # ---------------------------------------------------------------------
    def _can_mutate(self):
        return self.has_game and not self.is_paused and not self.is_complete

    def _target(self):
        """The selected cell when value mutations are allowed, else None."""
        if self.selected is None or not self._can_mutate():
            return None
        row, col = self.selected
        return row, col, self.grid[row][col]

    def _place(self, row, col, num):
        """Writes a value, drops the cell's automatic notes and prunes peers."""
        cell = self.grid[row][col]
        previous = cell.value
        cell.value = num
        cell.is_given = False
        cell.clear_auto_state()
        if self.auto_notes:
            prune_candidate_from_peers(self.grid, row, col, num)
            # An overwritten digit may be a candidate again for empty peers
            if previous and previous != num:
                restore_candidate_to_peers(self.grid, row, col, previous)

    def _check_completion(self):
        if is_puzzle_complete(self.grid.values(), self.solution):
            self.is_complete = True
            self.stats.record_completion(self.difficulty, self.timer)
            logger.info("Completed %s puzzle in %ds with %d mistakes",
                        self.difficulty, self.timer, self.mistakes)

    def _commit(self, action):
        self.history.record(self.grid)
        self._notify(action)
        return True

    def set_number(self, num):
        target = self._target()
        if target is None or num not in DIGITS:
            return False
        row, col, cell = target
        if cell.is_given:
            return False

        self._place(row, col, num)

        # Mistakes are duplicates in row/column/box, not mismatches against the solution
        if self.settings.get('autoCheckMistakes') and has_conflict(self.grid, row, col, num):
            self.mistakes += 1

        self._check_completion()
        return self._commit('set_number')

    def clear_cell(self):
        target = self._target()
        if target is None:
            return False
        row, col, cell = target
        if cell.is_given or cell.value == 0:
            return False

        freed = cell.value
        cell.value = 0
        if self.auto_notes:
            cell.auto_notes = cell.pinned.reconcile(candidates_of(self.grid, row, col), cell.auto_notes)
            restore_candidate_to_peers(self.grid, row, col, freed)
        return self._commit('clear_cell')

    def toggle_note(self, num):
        target = self._target()
        if target is None or num not in DIGITS:
            return False
        row, col, cell = target
        if cell.is_given or cell.value != 0:
            return False

        if self.auto_notes:
            cell.auto_notes ^= {num}
            cell.pinned.pin(num)
        else:
            cell.manual_notes ^= {num}
        return self._commit('toggle_note')

    def use_hint(self):
        """Fills one cell with its solution value, preferring the selected cell."""
        if not self._can_mutate() or self.hints_remaining <= 0 or self.hints_allowed == 0:
            return False

        target = None
        if self.selected is not None:
            row, col = self.selected
            if self.grid[row][col].value != self.solution[row][col]:
                target = (row, col)
        if target is None:
            for r, c, cell in self.grid.positions():
                if cell.value != self.solution[r][c]:
                    target = (r, c)
                    break
        if target is None:
            return False

        row, col = target
        self._place(row, col, self.solution[row][col])
        self.hints_remaining -= 1
        self.selected = target
        self._check_completion()
        return self._commit('hint')

    def reveal_cell(self):
        """Like a hint for the selected cell, without spending one."""
        target = self._target()
        if target is None:
            return False
        row, col, cell = target
        if cell.is_given or cell.value == self.solution[row][col]:
            return False

        self._place(row, col, self.solution[row][col])
        self._check_completion()
        return self._commit('reveal_cell')

    def reveal_puzzle(self):
        """
        Concede: fills every cell from the solution and ends the game.

        Not recorded in history and not counted as a completion in the
        statistics. Completion blocks undo, so the reveal is final.
        """
        if not self._can_mutate():
            return False
        for r, c, cell in self.grid.positions():
            if not cell.is_given:
                cell.value = self.solution[r][c]
            cell.clear_notes()
        self.is_complete = True
        self._notify('reveal_puzzle')
        return True

    # ---------------------------------------------------------------------
    # Read-only checks
    # ---------------------------------------------------------------------
    def check_cell(self):
        if self.selected is None:
            return CellCheck(False, False)
        row, col = self.selected
        value = self.grid[row][col].value
        if value == 0:
            return CellCheck(False, False)
        return CellCheck(True, value == self.solution[row][col])

    def check_puzzle(self):
        """Classifies every player-entered value against the solution."""
        filled = correct = 0
        for r, c, cell in self.grid.positions():
            if cell.is_given or cell.value == 0:
                continue
            filled += 1
            if cell.value == self.solution[r][c]:
                correct += 1
        return PuzzleCheck(filled, correct, filled - correct)

    # ---------------------------------------------------------------------
    # History
    # ---------------------------------------------------------------------
    def undo(self):
        if not self._can_mutate():
            return False
        grid = self.history.undo()
        if grid is None:
            return False
        self.grid = grid
        self._notify('undo')
        return True

    def redo(self):
        if not self._can_mutate():
            return False
        grid = self.history.redo()
        if grid is None:
            return False
        self.grid = grid
        self._notify('redo')
        return True

    # ---------------------------------------------------------------------
    # Settings
    # ---------------------------------------------------------------------
    def set_gameplay_setting(self, key, value):
        was_on = self.auto_notes
        self.settings.set(key, value)

        # Switching auto-notes on reseeds candidates but keeps the player's pins.
        # Switching it off leaves both note layers untouched.
        if key == 'autoNotes' and value and not was_on and self.has_game:
            before = self.grid.copy()
            reconcile_all_candidates(self.grid)
            if self.grid != before:
                self.history.record(self.grid)
        self._notify('settings')

    def set_theme(self, theme):
        self.settings.set_theme(theme)
        self._notify('settings')

    # ---------------------------------------------------------------------
    # Persistence document
    # ---------------------------------------------------------------------
    def to_document(self):
        return {
            'version': STORAGE_VERSION,
            'game': {
                'puzzle': [row[:] for row in self.puzzle],
                'solution': [row[:] for row in self.solution],
                'userGrid': self.grid.to_list(),
                'selectedCell': list(self.selected) if self.selected else None,
                'difficulty': self.difficulty,
                'timer': self.timer,
                'isPaused': self.is_paused,
                'isComplete': self.is_complete,
                'mistakes': self.mistakes,
                'hintsRemaining': self.hints_remaining,
            },
            'settings': self.settings.to_dict(),
            'stats': self.stats.to_dict(),
            'history': self.history.to_list(),
            'historyIndex': self.history.index,
        }

    @classmethod
    def from_document(cls, document, provider=None):
        """Rebuilds an engine; raises KeyError/TypeError/ValueError on a malformed document."""
        if not isinstance(document, dict) or not isinstance(document['game'], dict):
            raise ValueError("Stored document and game must be objects")
        game = document['game']
        engine = cls(provider=provider,
                     settings=SettingsState.from_dict(document['settings']),
                     stats=Statistics.from_dict(document['stats']))

        difficulty = game['difficulty']
        if difficulty not in DIFFICULTY_CONFIG:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")

        puzzle = [[int(num) for num in row] for row in game['puzzle']]
        solution = [[int(num) for num in row] for row in game['solution']]
        for matrix in (puzzle, solution):
            if len(matrix) != GRID_SIZE or any(len(row) != GRID_SIZE for row in matrix):
                raise ValueError("Stored puzzle must be 9x9")

        engine.puzzle = puzzle
        engine.solution = solution
        engine.grid = Grid.from_list(game['userGrid'])
        engine.selected = _stored_selection(game.get('selectedCell'))
        engine.difficulty = difficulty
        engine.timer = int(game['timer'])
        engine.is_paused = bool(game['isPaused'])
        engine.is_complete = bool(game['isComplete'])
        engine.mistakes = int(game['mistakes'])
        engine.hints_remaining = int(game['hintsRemaining'])

        snapshots = [Grid.from_list(grid) for grid in document.get('history', [])]
        engine.history = HistoryManager(snapshots, int(document.get('historyIndex', -1)))
        if not snapshots and engine.has_game:
            engine.history.reset(engine.grid)
        return engine


def _stored_selection(selected):
    if selected is None:
        return None
    if not isinstance(selected, (list, tuple)) or len(selected) != 2 \
            or not all(isinstance(i, int) and 0 <= i < GRID_SIZE for i in selected):
        raise ValueError(f"Invalid selected cell: {selected!r}")
    return tuple(selected)
