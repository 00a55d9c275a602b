"""Pluggable spot-ordering heuristics for the backtracking search.

A scorer rates a candidate tent cell; higher is tried first. Scorers only
reorder the spots of the tree the search already picked by minimum
remaining values, and equal scores keep the down, up, right, left order,
so the branching contract stays the same whichever scorer is active.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from ..core.constants import ORTHOGONAL_STEPS, CellState
from ..core.models import Coord
from .board import Board
from .rules import is_tree_satisfied, legal_spots, unsatisfied_trees

Scorer = Callable[[Board, int, int], float]


def row_column_pressure(board: Board, row: int, col: int) -> float:
    """Prefer lines that are closer to their target."""

    score = 0.0
    if board.row_target(row) > 0:
        score += board.row_used(row) / board.row_target(row)
    if board.col_target(col) > 0:
        score += board.col_used(col) / board.col_target(col)
    return score


def tree_clustering(board: Board, row: int, col: int) -> float:
    """Count the unsatisfied trees this cell would serve."""

    return float(
        sum(
            1
            for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
            if board.cell(nr, nc) == CellState.TREE and not is_tree_satisfied(board, (nr, nc))
        )
    )


def flexibility(board: Board, row: int, col: int) -> float:
    last = board.size - 1
    return 0.0 if row in (0, last) or col in (0, last) else 1.0


def chain_reaction(board: Board, row: int, col: int) -> float:
    """Count the trees left with a single option after a tent goes here."""

    trial = board.clone()
    trial.place_tent(row, col)
    return float(sum(1 for tree in unsatisfied_trees(trial) if len(legal_spots(trial, tree)) == 1))


def combined(board: Board, row: int, col: int) -> float:
    return (
        10 * row_column_pressure(board, row, col)
        + 5 * tree_clustering(board, row, col)
        + 2 * flexibility(board, row, col)
        + 8 * chain_reaction(board, row, col)
    )


SCORERS: Dict[str, Scorer] = {
    "pressure": row_column_pressure,
    "clustering": tree_clustering,
    "flexibility": flexibility,
    "chain": chain_reaction,
    "combined": combined,
}


def get_scorer(name: Optional[str]) -> Optional[Scorer]:
    if not name or name == "none":
        return None
    try:
        return SCORERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scoring heuristic {name!r}; known: {', '.join(sorted(SCORERS))}"
        ) from None


def order_spots(board: Board, spots: Sequence[Coord], scorer: Optional[Scorer]) -> List[Coord]:
    if scorer is None or len(spots) < 2:
        return list(spots)
    # sorted() is stable, so ties keep enumeration order.
    return sorted(spots, key=lambda spot: -scorer(board, spot[0], spot[1]))
