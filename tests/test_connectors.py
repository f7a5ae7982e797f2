import random
import unittest
from collections import Counter

from circuit_challenge.core.puzzle import Coordinate, ConnectorKind, DiagonalDirection
from circuit_challenge.core.results import ValueAssignmentExhausted
from circuit_challenge.generators.path_finder import PathFinder
from circuit_challenge.generators.connectors import (
    DiagonalGridResolver, ConnectorGraphBuilder, ConnectorValueAssigner, ValueAssignment
)

DR = DiagonalDirection.DOWN_RIGHT
DL = DiagonalDirection.DOWN_LEFT


class DiagonalGridResolverTests(unittest.TestCase):
    def test_commitments_are_kept(self) -> None:
        commitments = {(0, 0): DL, (1, 2): DR}
        for seed in range(10):
            grid = DiagonalGridResolver(random.Random(seed)).resolve(3, 4, commitments)
            self.assertEqual(len(grid), 2)
            self.assertTrue(all(len(row) == 3 for row in grid))
            self.assertEqual(grid[0][0], DL)
            self.assertEqual(grid[1][2], DR)

    def test_free_blocks_use_both_directions(self) -> None:
        grid = DiagonalGridResolver(random.Random(5)).resolve(8, 9, {})
        seen = Counter(direction for row in grid for direction in row)
        self.assertGreater(seen[DR], 0)
        self.assertGreater(seen[DL], 0)

    def test_deterministic_for_seed(self) -> None:
        first = DiagonalGridResolver(random.Random(3)).resolve(5, 6, {(2, 2): DR})
        second = DiagonalGridResolver(random.Random(3)).resolve(5, 6, {(2, 2): DR})
        self.assertEqual(first, second)

    def test_max_degree_bounds_connectors_per_cell(self) -> None:
        for seed in range(200):
            grid = DiagonalGridResolver(random.Random(seed)).resolve(3, 4, {}, max_degree=6)
            degree = Counter()
            for connector in ConnectorGraphBuilder.build(3, 4, grid):
                degree.update(connector.endpoints)
            self.assertLessEqual(max(degree.values()), 6, f"seed {seed}: {grid}")

    def test_max_degree_keeps_commitments(self) -> None:
        commitments = {(0, 0): DR, (1, 0): DL, (0, 2): DL}
        for seed in range(20):
            grid = DiagonalGridResolver(random.Random(seed)).resolve(3, 4, commitments, max_degree=6)
            for (row, col), direction in commitments.items():
                self.assertEqual(grid[row][col], direction)

    def test_diagonal_endpoints(self) -> None:
        self.assertEqual(DiagonalGridResolver.diagonal_endpoints(1, 2, DR),
                         (Coordinate(1, 2), Coordinate(2, 3)))
        self.assertEqual(DiagonalGridResolver.diagonal_endpoints(1, 2, DL),
                         (Coordinate(1, 3), Coordinate(2, 2)))
        self.assertEqual(DiagonalGridResolver.orthogonal_degree(0, 0, 3, 4), 2)
        self.assertEqual(DiagonalGridResolver.orthogonal_degree(1, 2, 3, 4), 4)


class ConnectorGraphBuilderTests(unittest.TestCase):
    def test_edge_counts(self) -> None:
        grid = [[DR, DL, DR], [DL, DR, DL]]
        connectors = ConnectorGraphBuilder.build(3, 4, grid)
        kinds = Counter(c.kind for c in connectors)
        self.assertEqual(len(connectors), 23)
        self.assertEqual(len(connectors), ConnectorGraphBuilder.expected_count(3, 4))
        self.assertEqual(kinds[ConnectorKind.HORIZONTAL], 9)
        self.assertEqual(kinds[ConnectorKind.VERTICAL], 8)
        self.assertEqual(kinds[ConnectorKind.DIAGONAL], 6)
        self.assertTrue(all(c.value is None for c in connectors))

    def test_diagonals_follow_grid(self) -> None:
        grid = [[DR, DL]]
        diagonals = [c for c in ConnectorGraphBuilder.build(2, 3, grid) if c.kind == ConnectorKind.DIAGONAL]
        self.assertEqual(len(diagonals), 2)
        self.assertTrue(diagonals[0].connects(Coordinate(0, 0), Coordinate(1, 1)))
        self.assertEqual(diagonals[0].direction, DR)
        self.assertTrue(diagonals[1].connects(Coordinate(0, 2), Coordinate(1, 1)))
        self.assertEqual(diagonals[1].direction, DL)

    def test_horizontal_then_vertical_then_diagonal(self) -> None:
        connectors = ConnectorGraphBuilder.build(3, 3, [[DR, DR], [DR, DR]])
        order = [c.kind for c in connectors]
        self.assertEqual(order, [ConnectorKind.HORIZONTAL] * 6 + [ConnectorKind.VERTICAL] * 6
                         + [ConnectorKind.DIAGONAL] * 4)


class ConnectorValueAssignerTests(unittest.TestCase):
    def setUp(self) -> None:
        rng = random.Random(2024)
        self.path_result = PathFinder(rng).generate_path(4, 5, 11, 17, max_attempts=1000)
        grid = DiagonalGridResolver(rng).resolve(4, 5, self.path_result.commitments)
        self.edges = ConnectorGraphBuilder.build(4, 5, grid)

    def assert_unique_per_cell(self, connectors) -> None:
        by_cell = {}
        for connector in connectors:
            for cell in connector.endpoints:
                by_cell.setdefault(cell, []).append(connector.value)
        for cell, values in by_cell.items():
            self.assertEqual(len(values), len(set(values)), f"duplicate value at {cell}")

    def test_values_unique_and_in_range(self) -> None:
        assigner = ConnectorValueAssigner(random.Random(1))
        result = assigner.assign(self.edges, 1, 40, False, self.path_result.path, 0)
        self.assertIsInstance(result, ValueAssignment)
        self.assertEqual(len(result.connectors), len(self.edges))
        self.assertEqual(result.division_indices, set())
        self.assertTrue(all(1 <= c.value <= 40 for c in result.connectors))
        self.assert_unique_per_cell(result.connectors)

    def test_geometry_is_preserved(self) -> None:
        result = ConnectorValueAssigner(random.Random(1)).assign(
            self.edges, 1, 40, False, self.path_result.path, 0)
        for before, after in zip(self.edges, result.connectors):
            self.assertEqual((before.kind, before.cell_a, before.cell_b, before.direction),
                             (after.kind, after.cell_a, after.cell_b, after.direction))

    def test_division_reservation(self) -> None:
        path = self.path_result.path
        result = ConnectorValueAssigner(random.Random(8)).assign(self.edges, 5, 60, True, path, 10)
        self.assertIsInstance(result, ValueAssignment)

        path_indices = ConnectorValueAssigner.solution_connector_indices(self.edges, path)
        expected = max(1, int((len(path) - 1) * 0.25))
        self.assertEqual(len(path_indices), len(path) - 1)
        self.assertEqual(len(result.division_indices), expected)
        self.assertTrue(result.division_indices <= set(path_indices))
        for index in result.division_indices:
            self.assertLessEqual(result.connectors[index].value, 10)
        self.assert_unique_per_cell(result.connectors)

    def test_too_few_values_exhausts(self) -> None:
        result = ConnectorValueAssigner(random.Random(1)).assign(
            self.edges, 1, 2, False, self.path_result.path, 0)
        self.assertIsInstance(result, ValueAssignmentExhausted)
        self.assertFalse(result.division_reserved)
        self.assertIn("No available values", result.message)

    def test_six_values_on_smallest_grid(self) -> None:
        # 5 to 10 leaves exactly one value per connector on a full interior cell
        successes = 0
        for seed in range(100):
            rng = random.Random(seed)
            path_result = PathFinder(rng).generate_path(3, 4, 6, 10, max_attempts=1000)
            grid = DiagonalGridResolver(rng).resolve(3, 4, path_result.commitments, max_degree=6)
            edges = ConnectorGraphBuilder.build(3, 4, grid)
            result = ConnectorValueAssigner(rng).assign(edges, 5, 10, False, path_result.path, 0)
            if isinstance(result, ValueAssignment):
                successes += 1
                self.assertTrue(all(5 <= c.value <= 10 for c in result.connectors))
                self.assert_unique_per_cell(result.connectors)
        self.assertGreaterEqual(successes, 50)

    def test_deterministic_for_seed(self) -> None:
        path = self.path_result.path
        first = ConnectorValueAssigner(random.Random(4)).assign(self.edges, 5, 30, True, path, 6)
        second = ConnectorValueAssigner(random.Random(4)).assign(self.edges, 5, 30, True, path, 6)
        self.assertEqual([c.value for c in first.connectors], [c.value for c in second.connectors])
        self.assertEqual(first.division_indices, second.division_indices)


if __name__ == "__main__":
    unittest.main()
