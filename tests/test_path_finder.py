import random
import unittest

from circuit_challenge.core.puzzle import Coordinate, DiagonalDirection
from circuit_challenge.core.results import PathGenerationExhausted
from circuit_challenge.generators.path_finder import PathFinder, PathResult


def coords(*pairs):
    return [Coordinate(r, c) for r, c in pairs]


class PathFinderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.finder = PathFinder(random.Random(1234))

    def assert_valid_path(self, result, rows, cols, min_length, max_length) -> None:
        self.assertIsInstance(result, PathResult)
        path = result.path
        self.assertEqual(path[0], Coordinate(0, 0))
        self.assertEqual(path[-1], Coordinate(rows - 1, cols - 1))
        self.assertGreaterEqual(len(path), min_length)
        self.assertLessEqual(len(path), max_length)
        self.assertEqual(len(set(path)), len(path))
        for a, b in zip(path, path[1:]):
            self.assertTrue(a.is_adjacent_to(b))
            self.assertTrue(0 <= b.row < rows and 0 <= b.col < cols)
        self.assertTrue(PathFinder.is_interesting_path(path))

    def test_small_grid_path(self) -> None:
        for _ in range(20):
            result = self.finder.generate_path(3, 4, 6, 10, max_attempts=1000)
            self.assert_valid_path(result, 3, 4, 6, 10)

    def test_large_grid_path(self) -> None:
        for _ in range(5):
            result = self.finder.generate_path(6, 8, 21, 40, max_attempts=1000)
            self.assert_valid_path(result, 6, 8, 21, 40)

    def test_commitments_match_diagonal_steps(self) -> None:
        for _ in range(20):
            result = self.finder.generate_path(5, 6, 15, 25, max_attempts=1000)
            self.assert_valid_path(result, 5, 6, 15, 25)
            for a, b in zip(result.path, result.path[1:]):
                if PathFinder.is_diagonal_move(a, b):
                    key = PathFinder.diagonal_key(a, b)
                    self.assertEqual(result.commitments[key], PathFinder.diagonal_direction(a, b))
            diagonal_steps = {PathFinder.diagonal_key(a, b)
                              for a, b in zip(result.path, result.path[1:])
                              if PathFinder.is_diagonal_move(a, b)}
            self.assertEqual(set(result.commitments), diagonal_steps)

    def test_same_seed_same_path(self) -> None:
        first = PathFinder(random.Random(99)).generate_path(4, 5, 11, 17, max_attempts=1000)
        second = PathFinder(random.Random(99)).generate_path(4, 5, 11, 17, max_attempts=1000)
        self.assertEqual(first.path, second.path)
        self.assertEqual(first.commitments, second.commitments)

    def test_impossible_bounds_exhaust(self) -> None:
        result = self.finder.generate_path(3, 4, 13, 13, max_attempts=3)
        self.assertEqual(result, PathGenerationExhausted(3))
        self.assertIn("3 attempts", result.message)


class PathHelperTests(unittest.TestCase):
    def test_adjacent_cells_respect_bounds(self) -> None:
        self.assertEqual(len(PathFinder.get_adjacent(Coordinate(0, 0), 3, 4)), 3)
        self.assertEqual(len(PathFinder.get_adjacent(Coordinate(0, 1), 3, 4)), 5)
        self.assertEqual(len(PathFinder.get_adjacent(Coordinate(1, 1), 3, 4)), 8)

    def test_diagonal_direction(self) -> None:
        self.assertEqual(PathFinder.diagonal_direction(Coordinate(0, 0), Coordinate(1, 1)),
                         DiagonalDirection.DOWN_RIGHT)
        self.assertEqual(PathFinder.diagonal_direction(Coordinate(1, 1), Coordinate(0, 0)),
                         DiagonalDirection.DOWN_RIGHT)
        self.assertEqual(PathFinder.diagonal_direction(Coordinate(0, 1), Coordinate(1, 0)),
                         DiagonalDirection.DOWN_LEFT)
        self.assertEqual(PathFinder.diagonal_direction(Coordinate(1, 0), Coordinate(0, 1)),
                         DiagonalDirection.DOWN_LEFT)

    def test_diagonal_key_is_block_corner(self) -> None:
        self.assertEqual(PathFinder.diagonal_key(Coordinate(2, 3), Coordinate(1, 2)), (1, 2))
        self.assertEqual(PathFinder.diagonal_key(Coordinate(1, 3), Coordinate(2, 2)), (1, 2))

    def test_committed_block_rejects_crossing_diagonal(self) -> None:
        commitments = {(0, 0): DiagonalDirection.DOWN_RIGHT}
        self.assertTrue(PathFinder.is_diagonal_move_valid(Coordinate(1, 1), Coordinate(0, 0), commitments))
        self.assertFalse(PathFinder.is_diagonal_move_valid(Coordinate(0, 1), Coordinate(1, 0), commitments))
        self.assertTrue(PathFinder.is_diagonal_move_valid(Coordinate(0, 1), Coordinate(1, 1), commitments))
        self.assertTrue(PathFinder.is_diagonal_move_valid(Coordinate(1, 1), Coordinate(2, 0), commitments))

    def test_direction_changes(self) -> None:
        self.assertEqual(PathFinder.count_direction_changes(coords((0, 0), (0, 1), (0, 2), (0, 3))), 0)
        self.assertEqual(PathFinder.count_direction_changes(coords((0, 0), (0, 1), (1, 1), (2, 1))), 1)
        self.assertEqual(PathFinder.count_direction_changes(coords((0, 0), (1, 1), (1, 2), (2, 3))), 2)

    def test_interesting_threshold_scales_with_length(self) -> None:
        short = coords((0, 0), (0, 1), (1, 1), (2, 1), (2, 2))
        self.assertTrue(PathFinder.is_interesting_path(short))
        straight = coords((0, 0), (0, 1), (0, 2), (0, 3), (0, 4))
        self.assertFalse(PathFinder.is_interesting_path(straight))
        # 8 cells with only two turns
        long_path = coords((0, 0), (0, 1), (0, 2), (1, 2), (2, 2), (2, 3), (2, 4), (2, 5))
        self.assertEqual(PathFinder.count_direction_changes(long_path), 2)
        self.assertFalse(PathFinder.is_interesting_path(long_path))


if __name__ == "__main__":
    unittest.main()
