"""
Grid model: cells with a value, a given flag and two independent note layers.

A cell keeps its manual pencil marks and its automatic candidates side by
side so the player can switch auto-notes on and off without losing either
layer. Candidates the player toggled by hand while auto-notes was active are
recorded as "pinned" and survive automatic recalculation.
"""

from .constants import GRID_SIZE


# =========================================================================
# PINNED NOTES
# Digits whose presence/absence in the automatic layer was set by the player.
# =========================================================================
class PinnedNotes(set):
    """A set of digits protected from automatic candidate updates."""

    def pin(self, digit):
        self.add(digit)

    def protects(self, digit):
        return digit in self

    def reconcile(self, calculated, current):
        """
        Merges freshly calculated candidates with the player's overrides.

        Unpinned digits follow `calculated`; pinned digits keep whatever
        state they have in `current` (present or absent).
        """
        return (set(calculated) - self) | (set(current) & self)

    def copy(self):
        return PinnedNotes(self)


# =========================================================================
# CELL
# =========================================================================
class Cell:
    __slots__ = ('value', 'is_given', 'manual_notes', 'auto_notes', 'pinned')

    def __init__(self, value=0, is_given=False, manual_notes=None, auto_notes=None, pinned=None):
        self.value = value
        self.is_given = is_given
        self.manual_notes = set(manual_notes or ())
        self.auto_notes = set(auto_notes or ())
        self.pinned = PinnedNotes(pinned or ())

    @property
    def is_empty(self):
        return self.value == 0

    def clear_auto_state(self):
        """Drops the automatic layer and its overrides (manual notes persist)."""
        self.auto_notes = set()
        self.pinned = PinnedNotes()

    def clear_notes(self):
        self.manual_notes = set()
        self.clear_auto_state()

    def copy(self):
        return Cell(self.value, self.is_given, self.manual_notes, self.auto_notes, self.pinned)

    def to_dict(self):
        return {
            'value': self.value,
            'isGiven': self.is_given,
            'manualNotes': sorted(self.manual_notes),
            'autoNotes': sorted(self.auto_notes),
            'userEditedInAuto': sorted(self.pinned),
        }

    @classmethod
    def from_dict(cls, data):
        value = int(data['value'])
        if not 0 <= value <= 9:
            raise ValueError(f"Cell value out of range: {value}")
        return cls(
            value=value,
            is_given=bool(data['isGiven']),
            manual_notes=data.get('manualNotes', ()),
            auto_notes=data.get('autoNotes', ()),
            pinned=data.get('userEditedInAuto', ()),
        )

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return (self.value == other.value and self.is_given == other.is_given
                and self.manual_notes == other.manual_notes
                and self.auto_notes == other.auto_notes
                and set(self.pinned) == set(other.pinned))

    def __repr__(self):
        flag = 'G' if self.is_given else ''
        return f"Cell({self.value}{flag}, manual={sorted(self.manual_notes)}, auto={sorted(self.auto_notes)})"


# =========================================================================
# GRID
# 9x9 matrix of cells; indexed as grid[row][col].
# =========================================================================
class Grid:
    def __init__(self, cells=None):
        if cells is None:
            cells = [[Cell() for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]
        self.cells = cells

    @classmethod
    def from_puzzle(cls, puzzle):
        """Builds a fresh grid marking every non-zero puzzle cell as given."""
        cells = []
        for row in puzzle:
            cells.append([Cell(value, is_given=value != 0) for value in row])
        return cls(cells)

    def __getitem__(self, row):
        return self.cells[row]

    def __iter__(self):
        return iter(self.cells)

    def positions(self):
        """Row-major iteration over (row, col, cell)."""
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                yield r, c, cell

    def values(self):
        return [[cell.value for cell in row] for row in self.cells]

    def copy(self):
        return Grid([[cell.copy() for cell in row] for row in self.cells])

    def to_list(self):
        return [[cell.to_dict() for cell in row] for row in self.cells]

    @classmethod
    def from_list(cls, data):
        if len(data) != GRID_SIZE or any(len(row) != GRID_SIZE for row in data):
            raise ValueError("Grid must be 9x9")
        return cls([[Cell.from_dict(cell) for cell in row] for row in data])

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cells == other.cells


def empty_matrix():
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]
