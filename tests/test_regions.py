import unittest

from tents.core.models import Region
from tents.engine.board import Board
from tents.engine.regions import check_partition, partition_regions, trees_depend


class PartitionTests(unittest.TestCase):
    def test_distant_trees_form_separate_regions(self) -> None:
        board = Board.from_strings(["...", "T.T", "..."], [1, 0, 1], [1, 0, 1])
        regions = partition_regions(board)
        self.assertEqual([region.trees for region in regions], [((1, 0),), ((1, 2),)])
        self.assertEqual(regions[0].spots, frozenset({(0, 0), (2, 0)}))
        self.assertEqual(check_partition(board, regions), [])

    def test_shared_spot_joins_trees(self) -> None:
        board = Board.from_strings(["...", "T.T", "..."], [0, 2, 0], [1, 1, 0])
        regions = partition_regions(board)
        self.assertEqual(len(regions), 1)
        self.assertEqual(regions[0].trees, ((1, 0), (1, 2)))
        self.assertEqual(regions[0].spots, frozenset({(1, 1)}))

    def test_diagonally_touching_spots_join_trees(self) -> None:
        board = Board.from_strings(["T...", "....", "..T.", "...."], [1, 1, 1, 1], [1, 1, 1, 1])
        regions = partition_regions(board)
        self.assertEqual(len(regions), 1)
        self.assertEqual(len(regions[0]), 2)

    def test_satisfied_trees_are_left_out(self) -> None:
        board = Board.from_strings(["...", "T.T", "..."], [1, 0, 1], [1, 0, 1])
        board.place_tent(2, 0)
        regions = partition_regions(board)
        self.assertEqual([region.trees for region in regions], [((1, 2),)])

    def test_every_unsatisfied_tree_lands_in_exactly_one_region(self) -> None:
        board = Board.from_strings(
            ["....T.", "T.....", "..T...", ".....T", "....T.", "T...T."],
            [2, 0, 2, 0, 2, 1],
            [2, 1, 0, 2, 0, 2],
        )
        regions = partition_regions(board)
        trees = [tree for region in regions for tree in region.trees]
        self.assertEqual(sorted(trees), list(board.trees))
        self.assertEqual(check_partition(board, regions), [])


class CheckPartitionTests(unittest.TestCase):
    def test_split_dependent_trees_are_reported(self) -> None:
        board = Board.from_strings(["T...", "....", "..T.", "...."], [1, 1, 1, 1], [1, 1, 1, 1])
        bad = [
            Region(trees=((0, 0),), spots=frozenset({(1, 0), (0, 1)})),
            Region(trees=((2, 2),), spots=frozenset({(3, 2), (1, 2), (2, 3), (2, 1)})),
        ]
        problems = check_partition(board, bad)
        self.assertEqual(len(problems), 1)
        self.assertIn("touching", problems[0])

    def test_missing_and_duplicate_trees_are_reported(self) -> None:
        board = Board.from_strings(["...", "T.T", "..."], [1, 0, 1], [1, 0, 1])
        region = Region(trees=((1, 0),), spots=frozenset({(0, 0), (2, 0)}))
        problems = check_partition(board, [region, region])
        self.assertTrue(any("regions 0 and 1" in problem for problem in problems))
        self.assertTrue(any("missing" in problem for problem in problems))

    def test_trees_depend(self) -> None:
        self.assertTrue(trees_depend([(0, 0)], [(1, 1)]))
        self.assertFalse(trees_depend([(0, 0)], [(0, 2), (2, 0)]))
        self.assertFalse(trees_depend([], [(0, 0)]))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
