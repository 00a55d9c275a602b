"""Deterministic most-constrained-first solving of one region."""

from __future__ import annotations

from enum import Enum

from ..core.constants import MoveReason
from ..core.models import Region
from ..utils.logger import get_logger
from .board import Board
from .rules import is_tree_satisfied, legal_spots


LOGGER = get_logger(__name__)


class RegionStatus(str, Enum):
    SOLVED = "SOLVED"
    INVALID = "INVALID"
    # Every remaining tree has two or more options; not a puzzle failure.
    STUCK = "STUCK"


def solve_region(board: Board, region: Region) -> RegionStatus:
    """Place tents for ``region`` while exactly one option is left.

    The board is mutated in place and never cloned: every placement made
    here is forced. Ties on the option count go to the tree listed first
    in the region.
    """

    remaining = list(region.trees)
    while True:
        remaining = [tree for tree in remaining if not is_tree_satisfied(board, tree)]
        if not remaining:
            return RegionStatus.SOLVED

        best_tree = remaining[0]
        best_spots = legal_spots(board, best_tree)
        for tree in remaining[1:]:
            if not best_spots:
                break
            spots = legal_spots(board, tree)
            if len(spots) < len(best_spots):
                best_tree, best_spots = tree, spots

        if not best_spots:
            LOGGER.debug("Region tree %s has no legal spot", best_tree)
            return RegionStatus.INVALID
        if len(best_spots) > 1:
            LOGGER.debug(
                "Region of %d trees stuck with %d unresolved", len(region), len(remaining)
            )
            return RegionStatus.STUCK
        board.place_tent(*best_spots[0], reason=MoveReason.REGION_FORCED)
