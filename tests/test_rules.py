import unittest

from tents.engine.board import Board
from tents.engine.rules import (
    cells_touch,
    is_globally_consistent,
    is_legal_spot,
    is_tree_satisfied,
    legal_spots,
    legal_spots_in_col,
    legal_spots_in_row,
    unsatisfied_trees,
)


def two_tree_board() -> Board:
    return Board.from_strings(["...", "T.T", "..."], [1, 0, 1], [1, 0, 1])


class LegalSpotTests(unittest.TestCase):
    def test_spots_follow_down_up_right_left_order(self) -> None:
        board = Board.from_strings([".....", ".....", "..T..", ".....", "....."], [1] * 5, [1] * 5)
        self.assertEqual(legal_spots(board, (2, 2)), [(3, 2), (1, 2), (2, 3), (2, 1)])

    def test_zero_target_lines_block_spots(self) -> None:
        board = two_tree_board()
        self.assertFalse(is_legal_spot(board, 1, 1))
        self.assertEqual(legal_spots(board, (1, 0)), [(2, 0), (0, 0)])

    def test_cell_without_tree_neighbour_is_not_a_spot(self) -> None:
        board = Board.from_strings(["T...", "....", "....", "...."], [1, 1, 1, 1], [1, 1, 1, 1])
        self.assertFalse(is_legal_spot(board, 2, 2))
        self.assertFalse(is_legal_spot(board, 1, 1))

    def test_tents_block_their_neighbourhood(self) -> None:
        board = two_tree_board()
        board.place_tent(2, 0)
        self.assertFalse(is_legal_spot(board, 2, 0))
        self.assertFalse(is_legal_spot(board, 2, 2))
        self.assertTrue(is_legal_spot(board, 0, 2))

    def test_out_of_bounds_is_never_legal(self) -> None:
        self.assertFalse(is_legal_spot(two_tree_board(), -1, 0))

    def test_line_queries(self) -> None:
        board = two_tree_board()
        self.assertEqual(legal_spots_in_row(board, 0), [(0, 0), (0, 2)])
        self.assertEqual(legal_spots_in_col(board, 2), [(0, 2), (2, 2)])
        self.assertEqual(legal_spots_in_row(board, 1), [])


class SatisfactionTests(unittest.TestCase):
    def test_shared_tent_satisfies_both_trees(self) -> None:
        board = Board.from_strings(["T.T", "...", "..."], [1, 0, 0], [0, 1, 0])
        board.place_tent(0, 1)
        self.assertTrue(is_tree_satisfied(board, (0, 0)))
        self.assertTrue(is_tree_satisfied(board, (0, 2)))
        self.assertEqual(unsatisfied_trees(board), [])

    def test_consistency_flags_touching_tents(self) -> None:
        board = Board.from_strings(["T..", ".T.", "..."], [1, 1, 0], [1, 1, 0])
        self.assertTrue(is_globally_consistent(board))
        board.place_tent(1, 0)
        board.place_tent(0, 1)
        self.assertFalse(is_globally_consistent(board))

    def test_consistency_flags_overfull_line(self) -> None:
        board = Board.from_strings(["T.T", "...", "..."], [1, 0, 0], [0, 1, 0])
        board.place_tent(1, 0)
        board.place_tent(1, 2)
        self.assertFalse(is_globally_consistent(board))

    def test_cells_touch(self) -> None:
        self.assertTrue(cells_touch((1, 1), (2, 2)))
        self.assertTrue(cells_touch((1, 1), (1, 1)))
        self.assertFalse(cells_touch((0, 0), (0, 2)))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
