"""Depth-first MRV search over cloned boards."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Union

from ..core.constants import MoveReason
from ..core.models import Coord, Region
from ..utils.logger import get_logger
from .board import Board
from .propagator import propagate
from .rules import is_tree_satisfied, legal_spots, legal_spots_in_col, legal_spots_in_row
from .scoring import Scorer, order_spots


LOGGER = get_logger(__name__)


class SearchOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"
    BUDGET_EXHAUSTED = "BUDGET_EXHAUSTED"


@dataclass
class SearchBudget:
    """Node and wall-clock allowance shared by every search of one solve."""

    node_limit: Optional[int] = None
    time_limit: Optional[float] = None
    nodes: int = 0
    started_at: Optional[float] = field(default=None, repr=False)

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = time.monotonic()

    def charge(self) -> None:
        self.nodes += 1

    @property
    def exhausted(self) -> bool:
        if self.node_limit is not None and self.nodes >= self.node_limit:
            return True
        if self.time_limit is not None and self.started_at is not None:
            return time.monotonic() - self.started_at >= self.time_limit
        return False


@dataclass
class _Frame:
    board: Board
    spots: Iterator[Coord]


_GOAL = "goal"


class BacktrackingSolver:
    """Full search fallback with minimum-remaining-values branching.

    Every node works on its own clone: propagate to a fixpoint, stop on a
    contradiction, stop with success when the goal holds, otherwise branch
    on the unsatisfied tree with the fewest legal spots (earliest tree wins
    ties) and try each spot on a fresh clone. The first successful clone is
    copied into the caller's board; on failure the caller's board is left
    exactly as it was.

    The stack of frames is explicit so deep boards never hit the interpreter
    recursion limit, and the shared :class:`SearchBudget` can stop the
    search between nodes.
    """

    def __init__(self, scorer: Optional[Scorer] = None, budget: Optional[SearchBudget] = None) -> None:
        self.scorer = scorer
        self.budget = budget or SearchBudget()
        self.nodes_expanded = 0
        self.max_depth = 0
        self.backtracks = 0

    def search(self, board: Board, scope: Optional[Region] = None) -> SearchOutcome:
        """Complete ``board`` (or just ``scope``'s trees) by search."""

        scope_trees = scope.trees if scope is not None else None
        self.budget.start()
        frames: List[_Frame] = []
        current: Optional[Board] = board.clone()

        while True:
            if current is not None:
                if self.budget.exhausted:
                    LOGGER.warning(
                        "Search budget exhausted after %d nodes (depth %d)",
                        self.budget.nodes,
                        len(frames),
                    )
                    return SearchOutcome.BUDGET_EXHAUSTED
                self.budget.charge()
                self.nodes_expanded += 1
                expansion = self._expand(current, scope_trees)
                if expansion == _GOAL:
                    board.copy_from(current)
                    LOGGER.debug(
                        "Search succeeded after %d nodes, max depth %d",
                        self.nodes_expanded,
                        self.max_depth,
                    )
                    return SearchOutcome.SUCCESS
                if expansion:
                    frames.append(_Frame(current, iter(expansion)))
                    self.max_depth = max(self.max_depth, len(frames))
                else:
                    self.backtracks += 1
                current = None

            while frames:
                spot = next(frames[-1].spots, None)
                if spot is None:
                    frames.pop()
                    continue
                current = frames[-1].board.clone()
                current.place_tent(*spot, reason=MoveReason.BRANCH)
                break

            if current is None:
                return SearchOutcome.FAIL

    # ------------------------------------------------------------------
    # Node expansion
    # ------------------------------------------------------------------
    def _expand(self, board: Board, scope_trees: Optional[Sequence[Coord]]) -> Union[str, List[Coord]]:
        if propagate(board).contradiction:
            return []
        if self._is_goal(board, scope_trees):
            return _GOAL
        return self._branch_spots(board, scope_trees)

    @staticmethod
    def _is_goal(board: Board, scope_trees: Optional[Sequence[Coord]]) -> bool:
        if scope_trees is None:
            return board.is_complete()
        return all(is_tree_satisfied(board, tree) for tree in scope_trees)

    def _branch_spots(self, board: Board, scope_trees: Optional[Sequence[Coord]]) -> List[Coord]:
        best_tree: Optional[Coord] = None
        best_spots: List[Coord] = []
        for tree in scope_trees if scope_trees is not None else board.trees:
            if is_tree_satisfied(board, tree):
                continue
            spots = legal_spots(board, tree)
            if not spots:
                return []
            if best_tree is None or len(spots) < len(best_spots):
                best_tree, best_spots = tree, spots

        if best_tree is None:
            return self._deficit_spots(board)
        LOGGER.debug("Branching on tree %s over %d spots", best_tree, len(best_spots))
        return order_spots(board, best_spots, self.scorer)

    def _deficit_spots(self, board: Board) -> List[Coord]:
        # Every tree has a tent but some line is still short: a satisfied tree
        # needs a second tent, so branch on the first short line.
        for row in range(board.size):
            if board.row_used(row) < board.row_target(row):
                return order_spots(board, legal_spots_in_row(board, row), self.scorer)
        for col in range(board.size):
            if board.col_used(col) < board.col_target(col):
                return order_spots(board, legal_spots_in_col(board, col), self.scorer)
        return []
