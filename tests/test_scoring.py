import unittest

from tents.engine.board import Board
from tents.engine.scoring import (
    SCORERS,
    chain_reaction,
    combined,
    flexibility,
    get_scorer,
    order_spots,
    row_column_pressure,
    tree_clustering,
)


def shared_board() -> Board:
    return Board.from_strings([".....", ".T.T.", ".....", ".....", "....."], [1, 1, 1, 0, 0], [1, 1, 1, 0, 0])


class ScorerTests(unittest.TestCase):
    def test_clustering_counts_unsatisfied_neighbour_trees(self) -> None:
        board = shared_board()
        self.assertEqual(tree_clustering(board, 1, 2), 2.0)
        self.assertEqual(tree_clustering(board, 0, 1), 1.0)
        board.place_tent(0, 1)
        self.assertEqual(tree_clustering(board, 1, 2), 1.0)

    def test_flexibility_prefers_interior_cells(self) -> None:
        board = shared_board()
        self.assertEqual(flexibility(board, 0, 1), 0.0)
        self.assertEqual(flexibility(board, 2, 2), 1.0)

    def test_pressure_grows_with_line_usage(self) -> None:
        board = Board.from_strings(["T.T.", "....", "....", "...."], [2, 0, 0, 0], [1, 1, 0, 1])
        self.assertEqual(row_column_pressure(board, 0, 3), 0.0)
        board.place_tent(0, 1)
        self.assertEqual(row_column_pressure(board, 0, 3), 0.5)

    def test_chain_reaction_does_not_touch_the_board(self) -> None:
        board = shared_board()
        before = board.state_key()
        chain_reaction(board, 1, 2)
        combined(board, 1, 2)
        self.assertEqual(board.state_key(), before)
        self.assertEqual(board.history, [])


class RegistryTests(unittest.TestCase):
    def test_lookup(self) -> None:
        self.assertIsNone(get_scorer(None))
        self.assertIsNone(get_scorer("none"))
        self.assertIs(get_scorer("chain"), chain_reaction)
        self.assertEqual(set(SCORERS), {"pressure", "clustering", "flexibility", "chain", "combined"})
        with self.assertRaises(ValueError):
            get_scorer("random")

    def test_order_spots_is_stable_on_ties(self) -> None:
        board = shared_board()
        spots = [(2, 1), (0, 1), (1, 2), (1, 0)]
        self.assertEqual(order_spots(board, spots, None), spots)
        self.assertEqual(order_spots(board, spots, lambda b, r, c: 0.0), spots)
        self.assertEqual(order_spots(board, spots, tree_clustering), [(1, 2), (2, 1), (0, 1), (1, 0)])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
