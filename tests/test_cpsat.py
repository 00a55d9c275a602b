import unittest

from tents.engine.backtracking import BacktrackingSolver
from tents.engine.board import Board
from tents.engine.cpsat import solve_with_cpsat
from tents.engine.solver import TentsSolver
from tents.engine.validator import BoardValidator

SIX_BY_SIX = (
    ["....T.", "T.....", "..T...", ".....T", "....T.", "T...T."],
    [2, 0, 2, 0, 2, 1],
    [2, 1, 0, 2, 0, 2],
)


def shared_tent_board() -> Board:
    return Board.from_strings(
        ["gTg..", ".....", "...T.", "..T..", "....."],
        [0, 1, 0, 1, 0],
        [0, 1, 0, 1, 0],
    )


class CpSatTests(unittest.TestCase):
    def test_solution_passes_validation(self) -> None:
        board = Board.from_strings(*SIX_BY_SIX)
        tents = solve_with_cpsat(board)
        self.assertIsNotNone(tents)
        for row, col in tents:
            board.place_tent(row, col)
        self.assertTrue(BoardValidator().validate(board).ok)

    def test_unsatisfiable_board_returns_none(self) -> None:
        board = Board.from_strings(["T...", "....", "....", "...."], [1, 0, 0, 0], [1, 0, 0, 0])
        self.assertIsNone(solve_with_cpsat(board))

    def test_existing_tents_stay_fixed(self) -> None:
        board = Board.from_strings(["...", "T.T", "t.."], [1, 0, 1], [1, 0, 1])
        self.assertEqual(solve_with_cpsat(board), [(0, 2), (2, 0)])

    def test_fixed_tent_without_tree_returns_none(self) -> None:
        board = Board.from_strings(["....", "T.T.", "....", "...t"], [0, 1, 0, 1], [0, 1, 0, 1])
        self.assertIsNone(solve_with_cpsat(board))
        self.assertIsNone(solve_with_cpsat(board, strict_matching=True))

    def test_presence_allows_shared_tent_but_strict_does_not(self) -> None:
        board = shared_tent_board()
        self.assertEqual(solve_with_cpsat(board), [(1, 1), (3, 3)])
        self.assertIsNone(solve_with_cpsat(board, strict_matching=True))

    def test_agrees_with_search_on_unique_puzzle(self) -> None:
        board = shared_tent_board()
        expected = solve_with_cpsat(board)
        # Three trees share two tents, so go through the search directly.
        BacktrackingSolver().search(board)
        self.assertEqual(board.tents(), expected)

    def test_search_solution_is_feasible_for_cpsat(self) -> None:
        board = Board.from_strings(*SIX_BY_SIX)
        self.assertTrue(TentsSolver().solve(board).solved)
        self.assertEqual(solve_with_cpsat(board), board.tents())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
