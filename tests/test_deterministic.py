import unittest

from tents.core.constants import MoveReason
from tents.engine.board import Board
from tents.engine.deterministic import RegionStatus, solve_region
from tents.engine.regions import partition_regions


class SolveRegionTests(unittest.TestCase):
    def test_forced_chain_solves_the_region(self) -> None:
        # (0,0) can only use (0,1); that knocks out (0,2) for the tree at (1,2).
        board = Board.from_strings(["T...", "..T.", "....", "...."], [1, 0, 1, 0], [0, 1, 1, 0])
        regions = partition_regions(board)
        self.assertEqual(len(regions), 1)

        status = solve_region(board, regions[0])
        self.assertEqual(status, RegionStatus.SOLVED)
        self.assertEqual([move.coord for move in board.history], [(0, 1), (2, 2)])
        self.assertEqual({move.reason for move in board.history}, {MoveReason.REGION_FORCED})
        self.assertTrue(board.is_complete())

    def test_tree_without_options_makes_region_invalid(self) -> None:
        board = Board.from_strings(["T...", "....", "....", "...."], [1, 0, 0, 0], [1, 0, 0, 0])
        (region,) = partition_regions(board)
        self.assertEqual(solve_region(board, region), RegionStatus.INVALID)

    def test_ambiguous_region_is_stuck_and_untouched(self) -> None:
        board = Board.from_strings(["...", "T.T", "..."], [1, 0, 1], [1, 0, 1])
        before = board.state_key()
        for region in partition_regions(board):
            self.assertEqual(solve_region(board, region), RegionStatus.STUCK)
        self.assertEqual(board.state_key(), before)
        self.assertEqual(board.history, [])

    def test_already_satisfied_region_is_solved(self) -> None:
        board = Board.from_strings(["T...", "....", "....", "...."], [1, 0, 0, 0], [0, 1, 0, 0])
        (region,) = partition_regions(board)
        board.place_tent(0, 1)
        self.assertEqual(solve_region(board, region), RegionStatus.SOLVED)
        self.assertEqual(len(board.history), 1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
