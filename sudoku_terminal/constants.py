"""Game-wide constants: grid geometry, difficulty table and default settings."""

GRID_SIZE = 9
BOX_SIZE = 3
DIGITS = tuple(range(1, 10))

# -------------------------------------------------------------------------
# DIFFICULTY CONFIGURATION
# clues: number of pre-filled cells in the generated puzzle
# hints_allowed: hint allotment at the start of a game (0 disables hints)
# highlight_mistakes: whether the view may paint incorrect entries
# -------------------------------------------------------------------------
DIFFICULTY_CONFIG = {
    'easy': {
        'clues': 45,
        'hints_allowed': 999,
        'highlight_mistakes': True,
        'label': 'Easy',
    },
    'medium': {
        'clues': 35,
        'hints_allowed': 3,
        'highlight_mistakes': True,
        'label': 'Medium',
    },
    'hard': {
        'clues': 28,
        'hints_allowed': 0,
        'highlight_mistakes': False,
        'label': 'Hard',
    },
}

DIFFICULTIES = tuple(DIFFICULTY_CONFIG)
DEFAULT_DIFFICULTY = 'medium'

# Increment when the persisted document changes shape. Older documents are
# discarded wholesale on load.
STORAGE_VERSION = 3
DEFAULT_STORAGE_FILE = 'sudoku_storage.json'

# Number of provider calls before a new game gives up
MAX_GENERATION_ATTEMPTS = 5

DEFAULT_GAMEPLAY_SETTINGS = {
    'autoCheckMistakes': True,
    'highlightConflicts': True,
    'highlightRowColumn': True,
    'highlightBox': True,
    'highlightIdentical': True,
    'showTimer': True,
    'showMistakes': True,
    'autoNotes': False,
}

THEMES = ('light', 'dark', 'green', 'amber', 'paper', 'monochrome', 'ocean', 'clean')
FONTS = ('jetbrains', 'fira', 'ibm', 'courier')
DEFAULT_THEME = 'clean'
DEFAULT_FONT = 'jetbrains'
