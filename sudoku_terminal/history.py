"""Undo/redo history: a linear log of grid snapshots with a cursor."""


class HistoryManager:
    """
    Stores deep copies of the grid. Recording after an undo discards every
    snapshot past the cursor, so redo branches are never revisited.
    """

    def __init__(self, snapshots=None, index=-1):
        self.snapshots = [grid.copy() for grid in (snapshots or [])]
        if self.snapshots and not 0 <= index < len(self.snapshots):
            raise ValueError(f"History index {index} outside 0..{len(self.snapshots) - 1}")
        self.index = index if self.snapshots else -1

    def reset(self, grid):
        """Replaces the log with a single snapshot of `grid`."""
        self.snapshots = [grid.copy()]
        self.index = 0

    def record(self, grid):
        del self.snapshots[self.index + 1:]
        self.snapshots.append(grid.copy())
        self.index = len(self.snapshots) - 1

    def can_undo(self):
        return self.index > 0

    def can_redo(self):
        return self.index < len(self.snapshots) - 1

    def undo(self):
        """Moves the cursor back and returns a copy of that snapshot, or None."""
        if not self.can_undo():
            return None
        self.index -= 1
        return self.snapshots[self.index].copy()

    def redo(self):
        if not self.can_redo():
            return None
        self.index += 1
        return self.snapshots[self.index].copy()

    def __len__(self):
        return len(self.snapshots)

    def to_list(self):
        return [grid.to_list() for grid in self.snapshots]
