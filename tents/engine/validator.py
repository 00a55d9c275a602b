"""Deterministic rule validation for puzzles and solved boards."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.constants import KING_STEPS, ORTHOGONAL_STEPS, CellState
from ..core.exceptions import ValidationError
from ..core.models import Coord
from ..utils.logger import get_logger
from .board import Board
from .rules import is_tree_satisfied


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class BoardValidator:
    """Runs deterministic validation over a puzzle or its solution."""

    def check_definition(self, board: Board) -> ValidationResult:
        """Reject puzzles whose totals cannot add up before solving starts."""

        try:
            self._check_targets_fit(board)
            self._check_totals(board)
        except ValidationError as exc:
            LOGGER.error("Puzzle definition rejected: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def validate(self, board: Board, strict: bool = False) -> ValidationResult:
        """Check that ``board`` is a finished, rule-abiding solution.

        With ``strict`` the trees and tents must also pair up one to one.
        """

        try:
            self._check_line_counts(board)
            self._check_tents_apart(board)
            self._check_tents_near_trees(board)
            self._check_trees_satisfied(board)
            if strict:
                self._check_one_to_one(board)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])
        return ValidationResult(ok=True, messages=[])

    def _check_targets_fit(self, board: Board) -> None:
        for index in range(board.size):
            if board.row_target(index) > (board.size + 1) // 2:
                raise ValidationError(
                    f"Row {index} target {board.row_target(index)} cannot fit in {board.size} cells"
                )
            if board.col_target(index) > (board.size + 1) // 2:
                raise ValidationError(
                    f"Column {index} target {board.col_target(index)} cannot fit in {board.size} cells"
                )

    def _check_totals(self, board: Board) -> None:
        row_total = sum(board.row_targets)
        col_total = sum(board.col_targets)
        if row_total != col_total:
            raise ValidationError(
                f"Row targets sum to {row_total} but column targets sum to {col_total}"
            )
        if row_total != len(board.trees):
            raise ValidationError(
                f"Targets ask for {row_total} tents but the board has {len(board.trees)} trees"
            )

    def _check_line_counts(self, board: Board) -> None:
        for index in range(board.size):
            if board.row_used(index) != board.row_target(index):
                raise ValidationError(
                    f"Row {index} has {board.row_used(index)} tents, expected {board.row_target(index)}"
                )
            if board.col_used(index) != board.col_target(index):
                raise ValidationError(
                    f"Column {index} has {board.col_used(index)} tents, expected {board.col_target(index)}"
                )

    def _check_tents_apart(self, board: Board) -> None:
        for row, col in board.tents():
            for nr, nc in board.neighbors(row, col, KING_STEPS):
                if board.cell(nr, nc) == CellState.TENT:
                    raise ValidationError(f"Tents at {(row, col)} and {(nr, nc)} touch")

    def _check_tents_near_trees(self, board: Board) -> None:
        for row, col in board.tents():
            if not any(
                board.cell(nr, nc) == CellState.TREE
                for nr, nc in board.neighbors(row, col, ORTHOGONAL_STEPS)
            ):
                raise ValidationError(f"Tent at {(row, col)} has no tree beside it")

    def _check_trees_satisfied(self, board: Board) -> None:
        for tree in board.trees:
            if not is_tree_satisfied(board, tree):
                raise ValidationError(f"Tree at {tree} has no tent beside it")

    def _check_one_to_one(self, board: Board) -> None:
        matching = tree_tent_matching(board)
        if len(matching) != len(board.trees) or len(matching) != len(board.tents()):
            raise ValidationError(
                f"Only {len(matching)} of {len(board.trees)} trees pair with a distinct tent"
            )


def tree_tent_matching(board: Board) -> Dict[Coord, Coord]:
    """Maximum tree to tent matching over orthogonal adjacency.

    Plain augmenting paths; boards are small enough that nothing smarter
    is needed.
    """

    owner: Dict[Coord, Coord] = {}

    def options(tree: Coord) -> List[Coord]:
        return [
            (nr, nc)
            for nr, nc in board.neighbors(tree[0], tree[1], ORTHOGONAL_STEPS)
            if board.cell(nr, nc) == CellState.TENT
        ]

    def augment(tree: Coord, seen: set) -> bool:
        for tent in options(tree):
            if tent in seen:
                continue
            seen.add(tent)
            holder: Optional[Coord] = owner.get(tent)
            if holder is None or augment(holder, seen):
                owner[tent] = tree
                return True
        return False

    for tree in board.trees:
        augment(tree, set())
    return {tree: tent for tent, tree in owner.items()}
