"""Forced-move propagation to a fixpoint.

Only logically forced tents are placed here:

1. Line saturation: a row (then column) whose remaining tent count equals
   the number of its legal spots gets a tent on every one of them.
2. Singleton tree: an unsatisfied tree with exactly one legal spot gets
   its tent there.

Rule 2 runs only in a pass where rule 1 placed nothing. Speculative choices
belong to the backtracking search.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..core.constants import MoveReason
from ..core.models import Coord
from ..utils.logger import get_logger
from .board import Board
from .rules import (
    is_globally_consistent,
    is_legal_spot,
    is_tree_satisfied,
    legal_spots,
    legal_spots_in_col,
    legal_spots_in_row,
    stray_tents,
    unsatisfied_trees,
)


LOGGER = get_logger(__name__)


class PropagationStatus(str, Enum):
    PROGRESS = "PROGRESS"
    NO_PROGRESS = "NO_PROGRESS"
    CONTRADICTION = "CONTRADICTION"


@dataclass
class PropagationResult:
    status: PropagationStatus
    placements: int = 0
    passes: int = 0
    reason: Optional[str] = None

    @property
    def contradiction(self) -> bool:
        return self.status == PropagationStatus.CONTRADICTION


def find_contradiction(board: Board) -> Optional[str]:
    """Describe why the board can no longer be completed, or return None."""

    if not is_globally_consistent(board):
        return "a line is over its target or two tents touch"
    stray = stray_tents(board)
    if stray:
        return f"tent {stray[0]} has no tree beside it"
    for tree in unsatisfied_trees(board):
        if not legal_spots(board, tree):
            return f"tree {tree} has no legal spot"
    for index in range(board.size):
        remaining = board.row_target(index) - board.row_used(index)
        if remaining > 0 and len(legal_spots_in_row(board, index)) < remaining:
            return f"row {index} needs {remaining} more tents than it can hold"
        remaining = board.col_target(index) - board.col_used(index)
        if remaining > 0 and len(legal_spots_in_col(board, index)) < remaining:
            return f"column {index} needs {remaining} more tents than it can hold"
    return None


def propagate_once(board: Board) -> PropagationResult:
    """Run a single deduction pass over the whole board."""

    reason = find_contradiction(board)
    if reason:
        return PropagationResult(PropagationStatus.CONTRADICTION, passes=1, reason=reason)

    placed = 0
    for row in range(board.size):
        remaining = board.row_target(row) - board.row_used(row)
        if remaining <= 0:
            continue
        spots = legal_spots_in_row(board, row)
        if len(spots) == remaining:
            outcome = _fill_line(board, spots, MoveReason.ROW_SATURATION)
            if outcome is None:
                return PropagationResult(
                    PropagationStatus.CONTRADICTION,
                    placements=placed,
                    passes=1,
                    reason=f"forced spots in row {row} touch each other",
                )
            placed += outcome

    for col in range(board.size):
        remaining = board.col_target(col) - board.col_used(col)
        if remaining <= 0:
            continue
        spots = legal_spots_in_col(board, col)
        if len(spots) == remaining:
            outcome = _fill_line(board, spots, MoveReason.COLUMN_SATURATION)
            if outcome is None:
                return PropagationResult(
                    PropagationStatus.CONTRADICTION,
                    placements=placed,
                    passes=1,
                    reason=f"forced spots in column {col} touch each other",
                )
            placed += outcome

    if placed:
        return PropagationResult(PropagationStatus.PROGRESS, placements=placed, passes=1)

    for tree in board.trees:
        if is_tree_satisfied(board, tree):
            continue
        spots = legal_spots(board, tree)
        if not spots:
            return PropagationResult(
                PropagationStatus.CONTRADICTION,
                placements=placed,
                passes=1,
                reason=f"tree {tree} has no legal spot",
            )
        if len(spots) == 1:
            board.place_tent(*spots[0], reason=MoveReason.SINGLE_OPTION)
            placed += 1

    status = PropagationStatus.PROGRESS if placed else PropagationStatus.NO_PROGRESS
    return PropagationResult(status, placements=placed, passes=1)


def propagate(board: Board) -> PropagationResult:
    """Repeat :func:`propagate_once` until a fixpoint or a contradiction."""

    total = PropagationResult(PropagationStatus.NO_PROGRESS)
    while True:
        step = propagate_once(board)
        total.placements += step.placements
        total.passes += 1
        if step.status == PropagationStatus.CONTRADICTION:
            total.status = step.status
            total.reason = step.reason
            LOGGER.debug("Propagation contradiction after %d passes: %s", total.passes, step.reason)
            return total
        if step.status == PropagationStatus.NO_PROGRESS:
            return total


def _fill_line(board: Board, spots: List[Coord], reason: MoveReason) -> Optional[int]:
    placed = 0
    for row, col in spots:
        # An earlier spot of the same line may have knocked this one out.
        if not is_legal_spot(board, row, col):
            return None
        board.place_tent(row, col, reason=reason)
        placed += 1
    return placed
