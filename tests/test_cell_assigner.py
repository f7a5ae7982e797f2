import random
import unittest

from circuit_challenge.core.puzzle import Coordinate
from circuit_challenge.generators.path_finder import PathFinder
from circuit_challenge.generators.connectors import (
    DiagonalGridResolver, ConnectorGraphBuilder, ConnectorValueAssigner
)
from circuit_challenge.generators.cell_assigner import CellAnswerAssigner, CellGrid


class CellAnswerAssignerTests(unittest.TestCase):
    def setUp(self) -> None:
        rng = random.Random(77)
        self.rows, self.cols = 4, 5
        self.path = PathFinder(rng).generate_path(4, 5, 11, 17, max_attempts=1000).path
        commitments = {}
        for a, b in zip(self.path, self.path[1:]):
            if PathFinder.is_diagonal_move(a, b):
                commitments[PathFinder.diagonal_key(a, b)] = PathFinder.diagonal_direction(a, b)
        grid = DiagonalGridResolver(rng).resolve(4, 5, commitments)
        edges = ConnectorGraphBuilder.build(4, 5, grid)
        assignment = ConnectorValueAssigner(rng).assign(edges, 5, 50, True, self.path, 10)
        self.connectors = assignment.connectors
        self.division_indices = assignment.division_indices
        self.grid = CellAnswerAssigner(random.Random(3)).assign(
            4, 5, self.path, self.connectors, self.division_indices)

    def touching(self, coord):
        return [c for c in self.connectors if c.touches(coord)]

    def test_start_and_finish_flags(self) -> None:
        self.assertTrue(self.grid[Coordinate(0, 0)].is_start)
        self.assertTrue(self.grid[Coordinate(3, 4)].is_finish)
        self.assertIsNone(self.grid[Coordinate(3, 4)].answer)
        self.assertEqual(sum(1 for cell in self.grid if cell.is_start), 1)
        self.assertEqual(sum(1 for cell in self.grid if cell.is_finish), 1)

    def test_path_answers_point_to_next_cell(self) -> None:
        for current, nxt in zip(self.path, self.path[1:]):
            connector = next(c for c in self.connectors if c.connects(current, nxt))
            self.assertEqual(self.grid[current].answer, connector.value)

    def test_every_answer_matches_exactly_one_connector(self) -> None:
        for cell in self.grid:
            if cell.is_finish:
                continue
            matches = [c for c in self.touching(cell.coordinate) if c.value == cell.answer]
            self.assertEqual(len(matches), 1, f"cell {cell.coordinate}")

    def test_division_cells_are_reserved_sources(self) -> None:
        expected = set()
        for index in self.division_indices:
            connector = self.connectors[index]
            for current, nxt in zip(self.path, self.path[1:]):
                if connector.connects(current, nxt):
                    expected.add(current)
        self.assertEqual(self.grid.division_cells, expected)
        self.assertTrue(self.grid.division_cells)

    def test_to_puzzle(self) -> None:
        puzzle = self.grid.to_puzzle(self.connectors, self.path, difficulty=3)
        self.assertEqual((puzzle.rows, puzzle.cols), (4, 5))
        self.assertEqual(puzzle.solution.path, self.path)
        self.assertEqual(puzzle.difficulty, 3)


class CellGridTests(unittest.TestCase):
    def test_new_grid(self) -> None:
        grid = CellGrid(3, 4)
        cells = list(grid)
        self.assertEqual(len(cells), 12)
        self.assertTrue(all(cell.answer is None and cell.expression == "" for cell in cells))
        self.assertEqual(grid.division_cells, set())


if __name__ == "__main__":
    unittest.main()
