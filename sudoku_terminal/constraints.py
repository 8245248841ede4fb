"""
Constraint checker: conflicts and candidates over a Grid.

All functions are pure with respect to their inputs except the candidate
maintenance helpers, which update notes on the grid they are given and
return it.
"""

from .constants import BOX_SIZE, DIGITS, GRID_SIZE


def box_origin(row, col):
    return BOX_SIZE * (row // BOX_SIZE), BOX_SIZE * (col // BOX_SIZE)


def peers_of(row, col):
    """Returns every position sharing a row, column or box with (row, col), excluding itself."""
    peers = []
    seen = {(row, col)}

    # Row and column
    for i in range(GRID_SIZE):
        for pos in ((row, i), (i, col)):
            if pos not in seen:
                seen.add(pos)
                peers.append(pos)

    # 3x3 box
    box_row, box_col = box_origin(row, col)
    for i in range(box_row, box_row + BOX_SIZE):
        for j in range(box_col, box_col + BOX_SIZE):
            if (i, j) not in seen:
                seen.add((i, j))
                peers.append((i, j))
    return peers


# Peer lists never change, so compute them once.
_PEERS = {(r, c): tuple(peers_of(r, c)) for r in range(GRID_SIZE) for c in range(GRID_SIZE)}


def conflicts_of(grid, row, col):
    """Identifies the cells whose value duplicates the value at (row, col)."""
    num = grid[row][col].value
    if num == 0:
        return []
    return [(r, c) for r, c in _PEERS[(row, col)] if grid[r][c].value == num]


def has_conflict(grid, row, col, num):
    """True if placing `num` at (row, col) duplicates a value in its row, column or box."""
    for r, c in _PEERS[(row, col)]:
        if grid[r][c].value == num:
            return True
    return False


def find_all_conflicts(grid):
    """Collects every cell that takes part in at least one conflict."""
    conflicts = set()
    for r, c, cell in grid.positions():
        if cell.value != 0:
            peers = conflicts_of(grid, r, c)
            if peers:
                conflicts.add((r, c))
                conflicts.update(peers)
    return conflicts


def candidates_of(grid, row, col):
    """Digits still possible in an empty cell; filled cells have no candidates."""
    if grid[row][col].value != 0:
        return set()
    used = {grid[r][c].value for r, c in _PEERS[(row, col)]}
    return {num for num in DIGITS if num not in used}


def recompute_all_candidates(grid):
    """Replaces the automatic notes of every empty cell with its candidates."""
    for r, c, cell in grid.positions():
        if cell.value == 0:
            cell.auto_notes = candidates_of(grid, r, c)
    return grid


def reconcile_all_candidates(grid):
    """
    Recomputes automatic notes for every empty cell while keeping the
    player's pinned overrides in whatever state they were left.
    """
    for r, c, cell in grid.positions():
        if cell.value == 0:
            cell.auto_notes = cell.pinned.reconcile(candidates_of(grid, r, c), cell.auto_notes)
    return grid


def prune_candidate_from_peers(grid, row, col, num):
    """Removes `num` from the automatic notes of every peer, unless the peer pinned it."""
    for r, c in _PEERS[(row, col)]:
        peer = grid[r][c]
        if not peer.pinned.protects(num):
            peer.auto_notes.discard(num)
    return grid


def restore_candidate_to_peers(grid, row, col, num):
    """Adds a freed `num` back to empty peers it is legal for, unless the peer pinned it."""
    for r, c in _PEERS[(row, col)]:
        peer = grid[r][c]
        if peer.value == 0 and not peer.pinned.protects(num) and num in candidates_of(grid, r, c):
            peer.auto_notes.add(num)
    return grid


# -------------------------------------------------------------------------
# Whole-grid checks on plain integer matrices
# -------------------------------------------------------------------------
def is_valid_placement(board, row, col, num):
    """Checks an integer board for `num` in the row, column or box of (row, col), skipping the cell."""
    for i in range(GRID_SIZE):
        if i != col and board[row][i] == num:
            return False
        if i != row and board[i][col] == num:
            return False

    box_row, box_col = box_origin(row, col)
    for i in range(box_row, box_row + BOX_SIZE):
        for j in range(box_col, box_col + BOX_SIZE):
            if (i != row or j != col) and board[i][j] == num:
                return False
    return True


def is_valid_solution(board):
    """A solution is 81 digits 1-9 with no row, column or box duplicates."""
    if len(board) != GRID_SIZE or any(len(row) != GRID_SIZE for row in board):
        return False
    for i in range(GRID_SIZE):
        for j in range(GRID_SIZE):
            num = board[i][j]
            if num not in DIGITS or not is_valid_placement(board, i, j, num):
                return False
    return True


def is_puzzle_complete(values, solution):
    """
    Checks every cell value against the solution. A solution containing
    zeros (no game loaded) never counts as complete.
    """
    for i in range(GRID_SIZE):
        for j in range(GRID_SIZE):
            if solution[i][j] == 0 or values[i][j] != solution[i][j]:
                return False
    return True
