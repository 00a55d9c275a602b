"""Pure legality predicates shared by every solving strategy."""

from __future__ import annotations

from typing import List

from ..core.constants import KING_STEPS, ORTHOGONAL_STEPS, CellState
from ..core.models import Coord
from .board import Board


def is_legal_spot(board: Board, row: int, col: int) -> bool:
    """True iff a tent could go on (row, col) right now.

    The cell must be unknown, touch no tent (diagonals included), sit in a
    row and column below target and have a tree orthogonally next to it.
    """

    if not board.in_bounds(row, col) or board.cell(row, col) != CellState.UNKNOWN:
        return False
    for nr, nc in board.neighbors(row, col, KING_STEPS):
        if board.cell(nr, nc) == CellState.TENT:
            return False
    if board.row_used(row) >= board.row_target(row):
        return False
    if board.col_used(col) >= board.col_target(col):
        return False
    return any(
        board.cell(nr, nc) == CellState.TREE
        for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
    )


def is_tree_satisfied(board: Board, tree: Coord) -> bool:
    # Presence only: a tent shared by two trees satisfies both.
    row, col = tree
    return any(
        board.cell(nr, nc) == CellState.TENT
        for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
    )


def is_globally_consistent(board: Board) -> bool:
    """Scan every line for over-target usage and every tent for contact."""

    for i in range(board.size):
        if board.row_used(i) > board.row_target(i) or board.col_used(i) > board.col_target(i):
            return False
    for row, col in board.tents():
        for nr, nc in board.neighbors(row, col, KING_STEPS):
            if board.cell(nr, nc) == CellState.TENT:
                return False
    return True


def legal_spots(board: Board, tree: Coord) -> List[Coord]:
    """Legal tent cells next to ``tree`` in down, up, right, left order."""

    row, col = tree
    return [
        (nr, nc)
        for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
        if is_legal_spot(board, nr, nc)
    ]


def legal_spots_in_row(board: Board, row: int) -> List[Coord]:
    return [(row, col) for col in range(board.size) if is_legal_spot(board, row, col)]


def legal_spots_in_col(board: Board, col: int) -> List[Coord]:
    return [(row, col) for row in range(board.size) if is_legal_spot(board, row, col)]


def unsatisfied_trees(board: Board) -> List[Coord]:
    return [tree for tree in board.trees if not is_tree_satisfied(board, tree)]


def stray_tents(board: Board) -> List[Coord]:
    """Tents with no tree orthogonally beside them."""

    return [
        (row, col)
        for row, col in board.tents()
        if not any(
            board.cell(nr, nc) == CellState.TREE
            for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
        )
    ]


def cells_touch(first: Coord, second: Coord) -> bool:
    """True when two cells are equal or 8-adjacent."""

    return abs(first[0] - second[0]) <= 1 and abs(first[1] - second[1]) <= 1
