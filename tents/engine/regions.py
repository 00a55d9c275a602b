"""Split unsatisfied trees into independent dependency regions."""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Sequence

from ..core.models import Coord, Region
from ..utils.logger import get_logger
from .board import Board
from .rules import cells_touch, legal_spots, unsatisfied_trees


LOGGER = get_logger(__name__)


def trees_depend(first: Sequence[Coord], second: Sequence[Coord]) -> bool:
    """Two spot lists interact when they share a cell or have touching cells."""

    return any(cells_touch(a, b) for a in first for b in second)


def partition_regions(board: Board) -> List[Region]:
    """Group the unsatisfied trees into connected dependency components.

    Components are discovered breadth-first, starting from each unvisited
    tree in board order, and each region lists its trees in board order.
    """

    trees = unsatisfied_trees(board)
    spots: Dict[Coord, List[Coord]] = {tree: legal_spots(board, tree) for tree in trees}
    adjacency: Dict[Coord, List[Coord]] = {tree: [] for tree in trees}
    for i, first in enumerate(trees):
        for second in trees[i + 1:]:
            if trees_depend(spots[first], spots[second]):
                adjacency[first].append(second)
                adjacency[second].append(first)

    order = {tree: index for index, tree in enumerate(board.trees)}
    visited = set()
    regions: List[Region] = []
    for start in trees:
        if start in visited:
            continue
        visited.add(start)
        queue = deque([start])
        members: List[Coord] = []
        while queue:
            current = queue.popleft()
            members.append(current)
            for neighbor in adjacency[current]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)
        members.sort(key=order.__getitem__)
        region_spots = frozenset(spot for tree in members for spot in spots[tree])
        regions.append(Region(trees=tuple(members), spots=region_spots))

    LOGGER.debug("Partitioned %d unsatisfied trees into %d regions", len(trees), len(regions))
    return regions


def check_partition(board: Board, regions: Sequence[Region]) -> List[str]:
    """Return every way ``regions`` fails to be a sound partition."""

    problems: List[str] = []
    expected = set(unsatisfied_trees(board))
    covered: Dict[Coord, int] = {}
    for index, region in enumerate(regions):
        for tree in region.trees:
            if tree in covered:
                problems.append(f"tree {tree} is in regions {covered[tree]} and {index}")
            covered[tree] = index
    missing = expected - set(covered)
    extra = set(covered) - expected
    if missing:
        problems.append(f"unsatisfied trees missing from regions: {sorted(missing)}")
    if extra:
        problems.append(f"regions hold trees that need no tent: {sorted(extra)}")

    current_spots = [
        {spot for tree in region.trees for spot in legal_spots(board, tree)}
        for region in regions
    ]
    for i in range(len(regions)):
        for j in range(i + 1, len(regions)):
            if trees_depend(sorted(current_spots[i]), sorted(current_spots[j])):
                problems.append(f"regions {i} and {j} have touching legal spots")
    return problems
